"""
Labor calculator tests — phase hours, condition multipliers, and the
total-vs-phase rounding rule.
"""

import pytest

from blacktop.calculators import LaborCalculator


def test_sealcoating_phases_round_up_individually(rates, make_project):
    project = make_project(sealcoating={"square_footage": 5000})
    labor = LaborCalculator(rates).calculate(project)

    assert labor["preparation"] == {"hours": 3, "rate": 50.0, "cost": 150.0}  # 2.5 h
    assert labor["application"] == {"hours": 4, "rate": 50.0, "cost": 200.0}  # 3.33 h
    assert labor["cleanup"] == {"hours": 1, "rate": 50.0, "cost": 50.0}


def test_total_is_ceiling_of_unrounded_sum(rates, make_project):
    """2.5 + 3.33 + 1 = 6.83 -> 7 hours, less than the 8 billed by phase."""
    project = make_project(sealcoating={"square_footage": 5000})
    labor = LaborCalculator(rates).calculate(project)

    assert labor["total_hours"] == 7
    assert labor["total"] == 350.0
    phase_sum = labor["preparation"]["cost"] + labor["application"]["cost"] + labor["cleanup"]["cost"]
    assert phase_sum == 400.0
    assert labor["total"] < phase_sum


def test_heavily_oxidized_multiplies_prep(rates, make_project):
    project = make_project(sealcoating={"square_footage": 5000, "condition": "heavily_oxidized"})
    calc = LaborCalculator(rates)
    hours = calc.phase_hours(project)
    assert hours["preparation"] == pytest.approx(3.75)

    labor = calc.calculate(project)
    assert labor["preparation"]["hours"] == 4
    assert labor["total_hours"] == 9
    assert labor["total"] == 450.0


def test_severe_cracks_multiply_crack_application(rates, make_project):
    project = make_project(crack_filling={"linear_footage": 1200, "crack_severity": "severe"})
    labor = LaborCalculator(rates).calculate(project)
    assert labor["preparation"]["hours"] == 0
    assert labor["application"]["hours"] == 18
    assert labor["total_hours"] == 19
    assert labor["total"] == 950.0


def test_severe_multiplier_does_not_touch_sealcoat_application(rates, make_project):
    """Only the crack-filling hours scale; sealcoat application stays 3.33 h."""
    project = make_project(
        sealcoating={"square_footage": 5000},
        crack_filling={"linear_footage": 100, "crack_severity": "severe"},
    )
    hours = LaborCalculator(rates).phase_hours(project)
    assert hours["application"] == pytest.approx(5000 / 1500 + 1.5)


def test_striping_and_patching_hours(rates, make_project):
    project = make_project(
        line_striping={"standard_stalls": 20, "double_stalls": 10},
        patching={"square_footage": 300},
    )
    hours = LaborCalculator(rates).phase_hours(project)
    assert hours["preparation"] == pytest.approx(30 / 20 + 300 / 200)
    assert hours["application"] == pytest.approx(30 / 15 + 300 / 150)


def test_handicap_stalls_and_crosswalks_add_no_labor(rates, make_project):
    project = make_project(line_striping={"handicap_stalls": 4, "crosswalks": 2})
    labor = LaborCalculator(rates).calculate(project)
    assert labor["preparation"]["hours"] == 0
    assert labor["application"]["hours"] == 0
    assert labor["total_hours"] == 1
    assert labor["total"] == 50.0
