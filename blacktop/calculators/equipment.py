"""
Equipment and fuel calculators.

Both run off the shared project-hours estimate (base.estimate_project_hours),
so machine time and fuel burn always agree.
"""

from .base import BaseCalculator, money
from ..schemas import ProjectDetails


class EquipmentCalculator(BaseCalculator):
    """Machine time per active service plus a flat misc-equipment fee."""

    def calculate(self, project: ProjectDetails) -> dict:
        rates = self.rates.equipment_rates
        hours = self.project_hours(project)
        breakdown = {}

        if project.sealcoating:
            breakdown["sealcoating_machine"] = self.make_hours_item(hours, rates.sealcoating_machine)
        if project.crack_filling:
            breakdown["crack_filling_machine"] = self.make_hours_item(hours, rates.crack_filling_machine)
        if project.line_striping:
            breakdown["line_striping_equipment"] = self.make_hours_item(hours, rates.line_striping_equipment)

        machines = self.sum_costs(list(breakdown.values()), key="cost")
        breakdown["misc_equipment"] = {"cost": rates.misc_equipment}
        breakdown["total"] = money(machines + rates.misc_equipment)
        return breakdown


class FuelCalculator(BaseCalculator):
    """Diesel for the round trip plus on-site equipment burn."""

    def round_trip_miles(self, project: ProjectDetails) -> float:
        distance = project.location.distance_from_base
        if distance is None:
            distance = self.rates.pricing.default_distance_miles
        return distance * 2

    def transportation(self, round_trip_miles: float) -> dict:
        truck = self.rates.business.equipment.haul_truck
        gallons = round_trip_miles / truck.mpg
        return {
            "miles": round_trip_miles,
            "gallons": round(gallons, 2),
            "cost": money(gallons * self.rates.material_costs.fuel.diesel),
        }

    def calculate(self, project: ProjectDetails) -> dict:
        diesel = self.rates.material_costs.fuel.diesel
        hours = self.project_hours(project)
        burn = hours * self.rates.equipment_rates.fuel_burn_gallons_per_hour

        transportation = self.transportation(self.round_trip_miles(project))
        equipment_operation = {
            "hours": hours,
            "gallons": burn,
            "cost": money(burn * diesel),
        }
        return {
            "transportation": transportation,
            "equipment_operation": equipment_operation,
            "total": money(transportation["cost"] + equipment_operation["cost"]),
        }
