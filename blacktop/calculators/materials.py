"""
Material calculator — quantities and costs per service.

Every purchasable unit (gallons, bags, boxes, tanks, buckets) is rounded up.
An absent service contributes nothing; grand_total is the sum of the
per-service totals that are present.
"""

from .base import BaseCalculator, money
from ..schemas import (
    CrackFillingDetails,
    LineStripingDetails,
    PatchType,
    PatchingDetails,
    ProjectDetails,
    SealcoatingDetails,
)

BUCKET_GALLONS = 5
FAST_DRY_BATCH_GALLONS = 125  # fast dry ratio is per 125 gal concentrate


class MaterialCalculator(BaseCalculator):

    def calculate(self, project: ProjectDetails) -> dict:
        breakdown = {"grand_total": 0.0}

        if project.sealcoating:
            breakdown["sealcoating"] = self.sealcoating(project.sealcoating)
        if project.crack_filling:
            breakdown["crack_filling"] = self.crack_filling(project.crack_filling)
        if project.line_striping:
            breakdown["line_striping"] = self.line_striping(project.line_striping)
        if project.patching:
            breakdown["patching"] = self.patching(project.patching)

        breakdown["grand_total"] = money(sum(
            section["total"] for key, section in breakdown.items() if key != "grand_total"
        ))
        return breakdown

    # --- Sealcoating ---

    def sealcoat_quantities(self, square_footage: float) -> dict:
        """
        Purchasable quantities for sealing square_footage.

        Mixed sealer is concentrate + water (20% by default), so the
        concentrate order is the mixed gallons divided by the dilution.
        """
        app = self.rates.application_rates.sealcoating
        water_fraction = app.water_ratio / 100.0

        gallons_needed = self.round_up(square_footage / app.coverage_per_gallon)
        concentrate = self.round_up(gallons_needed / (1 + water_fraction))
        sand_lbs = self.round_up(concentrate / 100.0 * app.sand_ratio)
        sand_bags = self.round_up(sand_lbs / self.rates.load.sand_bag_lbs)
        water = self.round_up(concentrate * water_fraction)
        fast_dry_gallons = self.round_up(concentrate / FAST_DRY_BATCH_GALLONS * app.fast_dry_ratio)
        fast_dry_buckets = self.round_up(fast_dry_gallons / BUCKET_GALLONS)

        return {
            "gallons_needed": gallons_needed,
            "concentrate_gallons": concentrate,
            "sand_bags": sand_bags,
            "water_gallons": water,
            "fast_dry_buckets": fast_dry_buckets,
        }

    def prep_seal_buckets(self, oil_spot_area: float) -> int:
        if not oil_spot_area:
            return 0
        coverage = self.rates.application_rates.sealcoating.prep_seal_coverage
        gallons = self.round_up(oil_spot_area / coverage)
        return self.round_up(gallons / BUCKET_GALLONS)

    def sealcoating(self, details: SealcoatingDetails) -> dict:
        costs = self.rates.material_costs.sealcoat
        qty = self.sealcoat_quantities(details.square_footage)

        section = {
            "pmm_concentrate": self.make_line_item(qty["concentrate_gallons"], costs.pmm_concentrate),
            "sand": self.make_line_item(qty["sand_bags"], costs.sand_50lb),
            "water": self.make_line_item(qty["water_gallons"], costs.water),
            "fast_dry": self.make_line_item(qty["fast_dry_buckets"], costs.fast_dry_5gal),
        }

        if details.oil_spots:
            buckets = self.prep_seal_buckets(details.oil_spot_area or 0)
            if buckets:
                section["prep_seal"] = self.make_line_item(buckets, costs.prep_seal_5gal)

        section["total"] = self.sum_costs(list(section.values()))
        return section

    # --- Crack filling ---

    def crack_filling(self, details: CrackFillingDetails) -> dict:
        app = self.rates.application_rates.crack_filling
        costs = self.rates.material_costs.crack_filling
        feet = details.linear_footage

        boxes = self.round_up(feet / app.material_coverage_linear_feet)
        propane_tanks = max(1, self.round_up(feet / app.feet_per_propane_tank))

        section = {
            "crack_master": self.make_line_item(boxes, costs.crack_master_30lb),
            "propane": self.make_line_item(propane_tanks, costs.propane_tank),
        }

        # Deep cracks get a sand base before filler
        if details.requires_sand_fill:
            sand_bags = max(1, self.round_up(feet / app.feet_per_sand_bag))
            section["sand"] = self.make_line_item(sand_bags, costs.sand_50lb)

        section["total"] = self.sum_costs(list(section.values()))
        return section

    # --- Line striping ---

    def striping_linear_feet(self, standard_stalls: int, double_stalls: int, crosswalks: int) -> float:
        app = self.rates.application_rates.line_striping
        return (
            standard_stalls * app.standard_stall
            + double_stalls * app.double_stall
            + crosswalks * app.crosswalk
        )

    def line_striping(self, details: LineStripingDetails) -> dict:
        costs = self.rates.material_costs.line_striping
        linear_feet = self.striping_linear_feet(
            details.standard_stalls, details.double_stalls, details.crosswalks,
        )
        stencil_count = details.handicap_stalls + details.custom_stencils

        section = {
            "paint": self.make_line_item(linear_feet, costs.paint),
            "stencils": self.make_line_item(stencil_count, costs.stencils),
        }
        section["total"] = self.sum_costs(list(section.values()))
        return section

    # --- Patching ---

    def patching(self, details: PatchingDetails) -> dict:
        app = self.rates.application_rates.patching
        blended = app.hot_mix if details.patch_type == PatchType.HOT_MIX else app.cold_patch
        # Material share of the blended installed rate
        material_cost = money(details.square_footage * blended.avg * app.material_fraction)

        return {
            "material": {
                "quantity": details.square_footage,
                "unit_cost": round(blended.avg * app.material_fraction, 4),
                "total_cost": material_cost,
            },
            "total": material_cost,
        }
