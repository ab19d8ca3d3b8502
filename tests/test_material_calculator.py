"""
Material calculator tests — quantities round up, totals add up.

Tests:
1-6.   Sealcoating quantities, line items, oil-spot prep seal
7-9.   Crack filling boxes / propane / sand
10-11. Line striping paint and stencils
12-13. Patching material share
14-15. grand_total across services, round_up float noise
"""

import pytest

from blacktop.calculators import MaterialCalculator, round_up
from blacktop.schemas import SealcoatingDetails


def _line_item_sum(section):
    return round(sum(v["total_cost"] for k, v in section.items() if k != "total"), 2)


# ============================================================
# 1-6. Sealcoating
# ============================================================

def test_sealcoat_quantities_5000_sqft(rates):
    """66 mixed gallons -> 55 concentrate at 20% water."""
    qty = MaterialCalculator(rates).sealcoat_quantities(5000)
    assert qty["gallons_needed"] == 66
    assert qty["concentrate_gallons"] == 55
    assert qty["sand_bags"] == 4  # 165 lbs -> 4 x 50 lb bags
    assert qty["water_gallons"] == 11
    assert qty["fast_dry_buckets"] == 1


def test_sealcoating_line_items_and_total(rates, make_project):
    project = make_project(sealcoating={"square_footage": 5000})
    materials = MaterialCalculator(rates).calculate(project)
    seal = materials["sealcoating"]

    assert seal["pmm_concentrate"] == {"quantity": 55, "unit_cost": 3.79, "total_cost": 208.45}
    assert seal["sand"]["total_cost"] == 40.0
    assert seal["water"]["total_cost"] == 0.22
    assert seal["fast_dry"]["total_cost"] == 50.0
    assert "prep_seal" not in seal
    assert seal["total"] == pytest.approx(298.67)
    assert seal["total"] == pytest.approx(_line_item_sum(seal))


def test_sealcoating_only_grand_total_equals_section(rates, make_project):
    project = make_project(sealcoating={"square_footage": 12345, "condition": "poor"})
    materials = MaterialCalculator(rates).calculate(project)
    assert set(materials) == {"sealcoating", "grand_total"}
    assert materials["grand_total"] == pytest.approx(materials["sealcoating"]["total"])


def test_minimum_area_still_buys_material(rates, make_project):
    project = make_project(sealcoating={"square_footage": 100})
    calc = MaterialCalculator(rates)
    assert calc.sealcoat_quantities(100)["gallons_needed"] >= 1
    materials = calc.calculate(project)
    assert materials["sealcoating"]["total"] > 0
    assert materials["sealcoating"]["total"] == pytest.approx(67.60)


def test_oil_spots_add_prep_seal(rates, make_project):
    """400 sq ft of oil spots -> 3 gal prep seal -> 1 bucket."""
    project = make_project(sealcoating={
        "square_footage": 5000, "oil_spots": True, "oil_spot_area": 400,
    })
    seal = MaterialCalculator(rates).calculate(project)["sealcoating"]
    assert seal["prep_seal"] == {"quantity": 1, "unit_cost": 50.0, "total_cost": 50.0}
    assert seal["total"] == pytest.approx(348.67)
    assert seal["total"] == pytest.approx(_line_item_sum(seal))


def test_oil_spots_without_area_contribute_nothing(rates):
    calc = MaterialCalculator(rates)
    seal = calc.sealcoating(SealcoatingDetails(square_footage=5000, oil_spots=True))
    assert "prep_seal" not in seal
    assert seal["total"] == pytest.approx(298.67)


# ============================================================
# 7-9. Crack filling
# ============================================================

def test_crack_filling_boxes_and_propane(rates, make_project):
    project = make_project(crack_filling={"linear_footage": 1200})
    crack = MaterialCalculator(rates).calculate(project)["crack_filling"]
    assert crack["crack_master"]["quantity"] == 3  # 1200 / 500 ft per box
    assert crack["propane"]["quantity"] == 2
    assert "sand" not in crack
    assert crack["total"] == pytest.approx(154.85)


def test_crack_filling_minimum_one_propane_tank(rates, make_project):
    project = make_project(crack_filling={"linear_footage": 1})
    crack = MaterialCalculator(rates).calculate(project)["crack_filling"]
    assert crack["crack_master"]["quantity"] == 1
    assert crack["propane"]["quantity"] == 1


def test_crack_filling_sand_fill(rates, make_project):
    project = make_project(crack_filling={
        "linear_footage": 1200, "crack_severity": "severe", "requires_sand_fill": True,
    })
    crack = MaterialCalculator(rates).calculate(project)["crack_filling"]
    assert crack["sand"] == {"quantity": 3, "unit_cost": 10.0, "total_cost": 30.0}
    assert crack["total"] == pytest.approx(184.85)


# ============================================================
# 10-11. Line striping
# ============================================================

def test_line_striping_ten_standard_stalls(rates, make_project):
    project = make_project(line_striping={"standard_stalls": 10})
    stripe = MaterialCalculator(rates).calculate(project)["line_striping"]
    assert stripe["paint"]["quantity"] == 200
    assert stripe["paint"]["total_cost"] == 170.00
    assert stripe["stencils"]["total_cost"] == 0
    assert stripe["total"] == 170.00


def test_line_striping_doubles_crosswalks_and_stencils(rates, make_project):
    project = make_project(line_striping={
        "standard_stalls": 4, "double_stalls": 2, "crosswalks": 1,
        "handicap_stalls": 2, "custom_stencils": 1,
    })
    stripe = MaterialCalculator(rates).calculate(project)["line_striping"]
    assert stripe["paint"]["quantity"] == 4 * 20 + 2 * 25 + 50
    assert stripe["stencils"] == {"quantity": 3, "unit_cost": 15.0, "total_cost": 45.0}
    assert stripe["total"] == pytest.approx(180 * 0.85 + 45)


# ============================================================
# 12-13. Patching
# ============================================================

def test_patching_hot_mix(rates, make_project):
    project = make_project(patching={"square_footage": 100, "patch_type": "hot_mix", "thickness": 2})
    patch = MaterialCalculator(rates).calculate(project)["patching"]
    assert patch["material"]["quantity"] == 100
    assert patch["total"] == pytest.approx(210.0)  # 100 x $3.50 x 60%


def test_patching_cold_patch(rates, make_project):
    project = make_project(patching={"square_footage": 100, "patch_type": "cold_patch", "thickness": 2})
    patch = MaterialCalculator(rates).calculate(project)["patching"]
    assert patch["total"] == pytest.approx(180.0)


# ============================================================
# 14-15. grand_total, rounding helper
# ============================================================

def test_grand_total_sums_present_services(rates, make_project):
    project = make_project(
        sealcoating={"square_footage": 5000},
        crack_filling={"linear_footage": 1200},
        line_striping={"standard_stalls": 10},
        patching={"square_footage": 100},
    )
    materials = MaterialCalculator(rates).calculate(project)
    expected = sum(materials[k]["total"] for k in ("sealcoating", "crack_filling", "line_striping", "patching"))
    assert materials["grand_total"] == pytest.approx(expected)
    assert materials["grand_total"] == pytest.approx(298.67 + 154.85 + 170.0 + 210.0)


def test_round_up_ignores_float_noise():
    assert round_up(66 / 1.2) == 55
    assert round_up(55 * 0.2) == 11
    assert round_up(54.01) == 55
    assert round_up(0.0001) == 1
    assert round_up(0) == 0
