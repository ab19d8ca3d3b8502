"""
Weight & safety analyzer — loaded haul truck vs. its GVWR.

Sealcoating jobs only: the truck carries the sealer tank, mixed sealer and
sand bags plus the crew.

    equipment = tank empty weight + (concentrate + water gallons) x 10 lb
    material  = sand bags x 50 lb
    crew      = 3 x 200 lb
    margin %  = (gvwr - total) / gvwr x 100

Warnings are independent: over-GVWR fires when total > gvwr, low-margin
fires when margin < 10%. Both fire on an overloaded truck.
"""

from typing import Optional

from ..rates import RateTables


class WeightAnalyzer:

    def __init__(self, rates: RateTables):
        self.rates = rates

    def load_components(self, sealer_gallons: float, sand_bags: float) -> dict:
        """Weights in lbs for a given sealer volume and sand count."""
        load = self.rates.load
        equipment = self.rates.business.equipment
        return {
            "vehicle_weight": equipment.haul_truck.curb_weight,
            "tank_empty_weight": equipment.sealer_tank.empty_weight,
            "sealer_weight": sealer_gallons * load.sealer_lbs_per_gallon,
            "sand_weight": sand_bags * load.sand_bag_lbs,
            "crew_weight": load.crew_count * load.crew_member_lbs,
        }

    def safety_margin(self, total_weight: float) -> float:
        gvwr = self.rates.business.equipment.haul_truck.gvwr
        return (gvwr - total_weight) / gvwr * 100

    def analyze(self, materials: dict) -> Optional[dict]:
        """
        WeightAnalysis for a MaterialBreakdown, or None when nothing is
        being sealed.
        """
        sealcoat = materials.get("sealcoating")
        if not sealcoat:
            return None

        sealer_gallons = sealcoat["pmm_concentrate"]["quantity"] + sealcoat["water"]["quantity"]
        parts = self.load_components(sealer_gallons, sealcoat["sand"]["quantity"])

        equipment_weight = parts["tank_empty_weight"] + parts["sealer_weight"]
        total_weight = (
            parts["vehicle_weight"] + equipment_weight
            + parts["sand_weight"] + parts["crew_weight"]
        )
        gvwr = self.rates.business.equipment.haul_truck.gvwr
        within_limits = total_weight <= gvwr
        margin = self.safety_margin(total_weight)

        warnings = []
        if not within_limits:
            warnings.append(
                "Total weight (%.0f lbs) exceeds GVWR (%.0f lbs)" % (total_weight, gvwr))
        if margin < self.rates.load.low_margin_percent:
            warnings.append(
                "Low safety margin (%.1f%%). Consider multiple trips." % margin)

        return {
            "vehicle_weight": parts["vehicle_weight"],
            "equipment_weight": equipment_weight,
            "material_weight": parts["sand_weight"],
            "crew_weight": parts["crew_weight"],
            "total_weight": total_weight,
            "gvwr": gvwr,
            "within_limits": within_limits,
            "safety_margin": margin,
            "warnings": warnings,
        }
