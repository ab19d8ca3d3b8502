"""
Pricing assembler.

Combines the four cost breakdowns into the final estimate.
Pure math — subtotal + 15% overhead + 20% profit, plus two alternative views:

    with_markup_25: subtotal x 1.25
    rounded_up:     subtotal rounded up to the next $10, then x 1.25.
                    Its markup_percentage is the rounding delta AND the 25%
                    together, measured against the unrounded subtotal.
"""

import math
from datetime import date, timedelta
from typing import Optional

from .rates import RateTables
from .schemas import CrackSeverity, ProjectDetails, SurfaceCondition

DISCLAIMERS = [
    "Estimate valid for 30 days from date of issue",
    "Final pricing subject to site inspection and conditions",
    "Weather delays may affect timeline and costs",
    "Material costs subject to supplier pricing changes",
    "Additional charges may apply for unforeseen site conditions",
    "Load calculations based on equipment specifications - verify with DOT if required",
]

OPTIMAL_CONDITIONS = (
    "Optimal conditions: Temperature 50°F+, low humidity, "
    "no precipitation forecast for 24 hours"
)


class PricingAssembler:
    """
    Last stage of the estimate pipeline.
    Assembles the EstimationResult dict from all upstream outputs.
    """

    def __init__(self, rates: RateTables):
        self.rates = rates

    def build_estimate(self, project: ProjectDetails, materials: dict, labor: dict,
                       equipment: dict, fuel: dict, weight_analysis: Optional[dict],
                       today: date) -> dict:
        policy = self.rates.pricing

        mobilization = self.calculate_mobilization(project.location.distance_from_base)
        subtotal = round(
            materials["grand_total"] + labor["total"] + equipment["total"]
            + fuel["total"] + mobilization,
            2,
        )
        overhead = subtotal * policy.overhead_rate
        profit = subtotal * policy.profit_rate
        total = subtotal + overhead + profit

        return {
            "project_summary": {
                "description": self.describe_project(project),
                "total_cost": total,
                "timeline": "%d day(s)" % project.timeline.estimated_days,
                "valid_until": (today + timedelta(days=policy.validity_days)).isoformat(),
            },
            "breakdown": {
                "materials": materials,
                "labor": labor,
                "equipment": equipment,
                "fuel": fuel,
                "mobilization": mobilization,
                "subtotal": subtotal,
                "overhead": overhead,
                "profit": profit,
                "total": total,
            },
            "weight_analysis": weight_analysis,
            "alternatives": self.build_alternatives(subtotal),
            "recommendations": self.build_recommendations(project, weight_analysis),
            "disclaimers": list(DISCLAIMERS),
        }

    def calculate_mobilization(self, distance_miles: Optional[float]) -> float:
        """Base fee, plus $5/mile for every mile beyond 30."""
        policy = self.rates.pricing
        distance = policy.default_distance_miles if distance_miles is None else distance_miles
        mobilization = self.rates.material_costs.line_striping.mobilization
        if distance > policy.free_mobilization_miles:
            mobilization += (distance - policy.free_mobilization_miles) * policy.mobilization_per_mile
        return round(mobilization, 2)

    def build_alternatives(self, subtotal: float) -> dict:
        rate = self.rates.pricing.alternative_markup_rate
        increment = self.rates.pricing.rounding_increment

        markup = subtotal * rate
        with_markup = {
            "subtotal": subtotal,
            "markup": markup,
            "markup_percentage": rate * 100,
            "total": subtotal + markup,
        }

        rounded_subtotal = math.ceil(round(subtotal / increment, 6)) * increment
        rounded_total = rounded_subtotal * (1 + rate)
        rounding_pct = (rounded_subtotal - subtotal) / subtotal * 100 if subtotal else 0.0
        rounded_up = {
            "subtotal": rounded_subtotal,
            "markup": rounded_total - rounded_subtotal,
            "markup_percentage": rounding_pct + rate * 100,
            "total": rounded_total,
        }

        return {"with_markup_25": with_markup, "rounded_up": rounded_up}

    def describe_project(self, project: ProjectDetails) -> str:
        services = []
        if project.sealcoating:
            services.append("Sealcoating %s sq ft" % _fmt_number(project.sealcoating.square_footage))
        if project.crack_filling:
            services.append("Crack filling %s linear ft" % _fmt_number(project.crack_filling.linear_footage))
        if project.patching:
            services.append("Asphalt patching %s sq ft" % _fmt_number(project.patching.square_footage))
        if project.line_striping:
            stalls = project.line_striping.standard_stalls + project.line_striping.double_stalls
            services.append("Line striping %d parking stalls" % stalls)
        return "%s at %s" % (", ".join(services), project.location.address)

    def build_recommendations(self, project: ProjectDetails,
                              weight_analysis: Optional[dict] = None) -> list:
        recommendations = []

        if project.sealcoating and project.sealcoating.condition == SurfaceCondition.HEAVILY_OXIDIZED:
            recommendations.append(
                "Consider applying prep seal to heavily oxidized areas for better adhesion")

        if project.crack_filling and project.crack_filling.crack_severity == CrackSeverity.SEVERE:
            recommendations.append(
                "Deep cracks may require sand filling before crack filler application")

        if project.timeline.estimated_days > 1:
            recommendations.append("Multi-day project - weather monitoring recommended")

        distance = project.location.distance_from_base or 0
        if distance > self.rates.pricing.long_distance_miles:
            recommendations.append(
                "Consider overnight accommodation for distant projects to reduce travel costs")

        if weight_analysis:
            for warning in weight_analysis["warnings"]:
                recommendations.append("Load check: %s" % warning)

        recommendations.append(OPTIMAL_CONDITIONS)
        return recommendations


def _fmt_number(value: float) -> str:
    """5000.0 -> '5,000', 1234.5 -> '1,234.5'."""
    if float(value).is_integer():
        return "{:,}".format(int(value))
    return "{:,}".format(value)
