"""
Deterministic estimate calculators.

Pure Python math. No I/O.
Given a validated ProjectDetails and a RateTables snapshot, produce the
material, labor, equipment and fuel breakdowns and the truck weight analysis.
"""

from .base import BaseCalculator, estimate_project_hours, round_up
from .equipment import EquipmentCalculator, FuelCalculator
from .labor import LaborCalculator
from .materials import MaterialCalculator
from .weight import WeightAnalyzer

__all__ = [
    "BaseCalculator",
    "EquipmentCalculator",
    "FuelCalculator",
    "LaborCalculator",
    "MaterialCalculator",
    "WeightAnalyzer",
    "estimate_project_hours",
    "round_up",
]
