"""
Quick calculations — single-category answers for the field tools
("how much sealer for 8,000 sq ft?").

Every number comes from the same calculator methods the full estimate
uses, so a quick answer never disagrees with the estimate.
"""

from .calculators import MaterialCalculator, WeightAnalyzer
from .calculators.base import round_up
from .rates import RateTables
from .schemas import (
    CrackFillingDetails,
    CrackSeverity,
    LineStripingDetails,
    LoadCheckDetails,
    SealcoatingDetails,
    SurfaceCondition,
)

CALCULATION_TYPES = ("sealcoat_materials", "crack_filler", "paint_quantity", "weight_analysis")


def sealcoat_materials(rates: RateTables, square_footage: float, condition: str = "good") -> dict:
    calc = MaterialCalculator(rates)
    details = SealcoatingDetails(square_footage=square_footage, condition=SurfaceCondition(condition))
    quantities = calc.sealcoat_quantities(details.square_footage)
    section = calc.sealcoating(details)
    return {
        "coverage": {
            "square_footage": details.square_footage,
            "total_gallons_needed": quantities["gallons_needed"],
            "condition": details.condition.value,
        },
        "materials": {k: v for k, v in section.items() if k != "total"},
        "total_cost": section["total"],
    }


def crack_filler(rates: RateTables, linear_footage: float, severity: str = "moderate") -> dict:
    """
    Filler and propane for a crack run. Severity is echoed back; it changes
    labor, not material, so box counts match the full estimate.
    """
    calc = MaterialCalculator(rates)
    details = CrackFillingDetails(linear_footage=linear_footage, crack_severity=CrackSeverity(severity))
    section = calc.crack_filling(details)
    return {
        "linear_footage": details.linear_footage,
        "severity": details.crack_severity.value,
        "materials": {k: v for k, v in section.items() if k != "total"},
        "total_cost": section["total"],
    }


def paint_quantity(rates: RateTables, standard_stalls: int = 0, double_stalls: int = 0,
                   crosswalks: int = 0) -> dict:
    calc = MaterialCalculator(rates)
    details = LineStripingDetails(
        standard_stalls=standard_stalls, double_stalls=double_stalls, crosswalks=crosswalks,
    )
    linear_feet = calc.striping_linear_feet(
        details.standard_stalls, details.double_stalls, details.crosswalks,
    )
    feet_per_gallon = rates.application_rates.line_striping.feet_per_gallon
    return {
        "stalls": {"standard": details.standard_stalls, "double": details.double_stalls},
        "crosswalks": details.crosswalks,
        "total_linear_feet": linear_feet,
        "paint_cost": round(linear_feet * rates.material_costs.line_striping.paint, 2),
        "estimated_gallons": round_up(linear_feet / feet_per_gallon),
    }


def weight_analysis(rates: RateTables, sealer_gallons: float = 0, sand_bags: int = 0) -> dict:
    analyzer = WeightAnalyzer(rates)
    load = LoadCheckDetails(sealer_gallons=sealer_gallons, sand_bags=sand_bags)
    parts = analyzer.load_components(load.sealer_gallons, load.sand_bags)
    total_weight = sum(parts.values())
    gvwr = rates.business.equipment.haul_truck.gvwr
    margin = analyzer.safety_margin(total_weight)

    return {
        "breakdown": {
            "vehicle_weight": parts["vehicle_weight"],
            "equipment_weight": parts["tank_empty_weight"],
            "sealer_weight": parts["sealer_weight"],
            "sand_weight": parts["sand_weight"],
            "crew_weight": parts["crew_weight"],
            "total_weight": total_weight,
        },
        "limits": {
            "gvwr": gvwr,
            "within_limits": total_weight <= gvwr,
            "safety_margin": round(margin, 2),
            "over_weight": max(0, total_weight - gvwr),
        },
        "recommendations": weight_recommendations(rates, total_weight, margin),
    }


def weight_recommendations(rates: RateTables, total_weight: float, safety_margin: float) -> list:
    gvwr = rates.business.equipment.haul_truck.gvwr
    recommendations = []

    if total_weight > gvwr:
        recommendations.append("OVERWEIGHT: Reduce load or make multiple trips")
    elif safety_margin < rates.load.low_margin_percent:
        recommendations.append("Low safety margin: Consider reducing load")
    elif safety_margin > 25:
        recommendations.append("Good safety margin: Can add more material if needed")

    if total_weight > gvwr * 0.9:
        recommendations.append("Near weight limit: Check tire pressure and suspension")

    return recommendations


def quick_calculate(rates: RateTables, calculation_type: str, parameters: dict) -> dict:
    """
    Dispatch a quick calculation by name.

    Raises ValueError for an unknown calculation type or a bad value,
    KeyError for a missing required parameter.
    """
    params = parameters or {}
    if calculation_type == "sealcoat_materials":
        return sealcoat_materials(
            rates, params["square_footage"], params.get("condition", "good"))
    if calculation_type == "crack_filler":
        return crack_filler(
            rates, params["linear_footage"], params.get("severity", "moderate"))
    if calculation_type == "paint_quantity":
        return paint_quantity(
            rates,
            params.get("standard_stalls", 0),
            params.get("double_stalls", 0),
            params.get("crosswalks", 0),
        )
    if calculation_type == "weight_analysis":
        return weight_analysis(
            rates, params.get("sealer_gallons", 0), params.get("sand_bags", 0))
    raise ValueError(
        "Invalid calculation type: %s. Available: %s" % (calculation_type, list(CALCULATION_TYPES))
    )
