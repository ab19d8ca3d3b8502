"""
Project estimation engine — the one entry point.

    distance -> materials / labor / equipment / fuel -> weight -> pricing

Input: ProjectDetails (or the equivalent mapping, validated on entry)
Output: EstimationResult dict

Stateless apart from the rate snapshot and the resolver it was built with.
Build one per request; nothing needs a singleton.
"""

import logging
from datetime import date
from typing import Callable, Optional, Union

from pydantic import ValidationError

from .calculators import (
    EquipmentCalculator,
    FuelCalculator,
    LaborCalculator,
    MaterialCalculator,
    WeightAnalyzer,
)
from .distance import DistanceResolver
from .pricing_engine import PricingAssembler
from .rates import RateTables
from .schemas import ProjectDetails

logger = logging.getLogger(__name__)


class InvalidProjectError(ValueError):
    """The project description breaks the input contract."""


class EstimateGenerationError(RuntimeError):
    """Unexpected fault while computing an estimate."""


class EstimationEngine:

    def __init__(self, rates: RateTables, distance_resolver: DistanceResolver,
                 today: Optional[Callable[[], date]] = None):
        self.rates = rates
        self.distance_resolver = distance_resolver
        self.today = today or date.today

        self.materials = MaterialCalculator(rates)
        self.labor = LaborCalculator(rates)
        self.equipment = EquipmentCalculator(rates)
        self.fuel = FuelCalculator(rates)
        self.weight = WeightAnalyzer(rates)
        self.pricing = PricingAssembler(rates)

    def validate(self, project: Union[ProjectDetails, dict]) -> ProjectDetails:
        """Fail fast with InvalidProjectError rather than price nonsense."""
        if isinstance(project, ProjectDetails):
            # Re-run field and service checks on models built without validation
            data = project.model_dump()
            try:
                ProjectDetails.model_validate(data)
            except ValidationError as e:
                raise InvalidProjectError("Invalid project: %s" % _first_error(e)) from e
            return project
        try:
            return ProjectDetails.model_validate(project)
        except ValidationError as e:
            raise InvalidProjectError("Invalid project: %s" % _first_error(e)) from e

    def generate_estimate(self, project: Union[ProjectDetails, dict]) -> dict:
        """
        Full estimate for one project.

        Raises InvalidProjectError for contract violations and
        EstimateGenerationError for anything unexpected. A failed distance
        lookup is not an error; the default distance is used.
        """
        project = self.validate(project)
        logger.info("Generating estimate for %s project", project.project_type.value)

        try:
            self.distance_resolver.resolve_for(project)

            materials = self.materials.calculate(project)
            labor = self.labor.calculate(project)
            equipment = self.equipment.calculate(project)
            fuel = self.fuel.calculate(project)

            weight_analysis = None
            if project.sealcoating:
                weight_analysis = self.weight.analyze(materials)

            result = self.pricing.build_estimate(
                project, materials, labor, equipment, fuel, weight_analysis,
                today=self.today(),
            )
        except Exception as e:
            logger.exception("Error generating estimate")
            raise EstimateGenerationError("Failed to generate estimate") from e

        logger.info(
            "Estimate generated: %s project, total $%.2f",
            project.project_type.value, result["breakdown"]["total"],
        )
        return result


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return "%s: %s" % (location, message) if location else message
