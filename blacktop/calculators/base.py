"""
Abstract base class for the estimate calculators.

Input: ProjectDetails (validated) + one RateTables snapshot
Output: breakdown dict (JSON-shaped, snake_case keys)
"""

import logging
import math
from abc import ABC, abstractmethod

from ..rates import RateTables
from ..schemas import ProjectDetails

logger = logging.getLogger(__name__)


def round_up(value: float) -> int:
    """
    Ceiling of the exact value. Always round UP to the next whole unit.

    Float noise is stripped first: 66 / 1.2 is 55.00000000000001 in binary
    floating point, and 55 gallons must stay 55.
    """
    return math.ceil(round(value, 6))


def money(value: float) -> float:
    return round(value, 2)


def estimate_project_hours(project: ProjectDetails, rates: RateTables) -> int:
    """
    Total on-site hours shared by the equipment and fuel calculators.

    Per-service productivity: 1000 sq ft/hr sealcoating (incl. prep),
    100 ft/hr crack filling, 10 stalls/hr striping (incl. prep),
    100 sq ft/hr patching. Minimum 2 hours.
    """
    hours = 0.0
    if project.sealcoating:
        hours += project.sealcoating.square_footage / 1000
    if project.crack_filling:
        hours += project.crack_filling.linear_footage / 100
    if project.line_striping:
        stalls = project.line_striping.standard_stalls + project.line_striping.double_stalls
        hours += stalls / 10
    if project.patching:
        hours += project.patching.square_footage / 100
    return int(max(rates.equipment_rates.minimum_project_hours, round_up(hours)))


class BaseCalculator(ABC):
    """All estimate calculators inherit from this."""

    def __init__(self, rates: RateTables):
        self.rates = rates

    @abstractmethod
    def calculate(self, project: ProjectDetails) -> dict:
        """Returns the breakdown dict for this cost category."""
        pass

    # --- Helper methods for all calculators ---

    def round_up(self, value: float) -> int:
        """You can't buy half a bucket."""
        return round_up(value)

    def project_hours(self, project: ProjectDetails) -> int:
        return estimate_project_hours(project, self.rates)

    def make_line_item(self, quantity: float, unit_cost: float) -> dict:
        """Build a {quantity, unit_cost, total_cost} line item."""
        return {
            "quantity": quantity,
            "unit_cost": unit_cost,
            "total_cost": money(quantity * unit_cost),
        }

    def make_hours_item(self, hours: float, rate: float) -> dict:
        """Build an {hours, rate, cost} time-based line item."""
        return {
            "hours": hours,
            "rate": rate,
            "cost": money(hours * rate),
        }

    def sum_costs(self, items: list, key: str = "total_cost") -> float:
        return money(sum(item[key] for item in items))
