"""
Labor calculator — crew hours by phase at the blended hourly rate.

Productivity (crew, per hour):
    sealcoating   2000 sq ft prep, 1500 sq ft application
    crack filling 100 linear ft application
    striping      20 stalls prep, 15 stalls application
    patching      200 sq ft prep, 150 sq ft application
Cleanup is a flat 1 hour per job.

Condition multipliers scale that service's own base hours: heavily
oxidized pavement x1.5 sealcoating prep, severe cracks x1.5 crack
application.

Rounding: preparation and application are each rounded up before pricing,
but total is the rounded-up sum of the unrounded phases. total can
therefore be less than the sum of the three phase costs. Existing estimates
depend on this, keep it.
"""

from .base import BaseCalculator, money
from ..schemas import CrackSeverity, ProjectDetails, SurfaceCondition

CLEANUP_HOURS = 1
CONDITION_MULTIPLIER = 1.5


class LaborCalculator(BaseCalculator):

    def phase_hours(self, project: ProjectDetails) -> dict:
        """Unrounded prep / application / cleanup hours."""
        prep = 0.0
        application = 0.0

        if project.sealcoating:
            sqft = project.sealcoating.square_footage
            seal_prep = sqft / 2000
            if project.sealcoating.condition == SurfaceCondition.HEAVILY_OXIDIZED:
                seal_prep *= CONDITION_MULTIPLIER
            prep += seal_prep
            application += sqft / 1500

        if project.crack_filling:
            feet = project.crack_filling.linear_footage
            per_hundred = self.rates.application_rates.crack_filling.labor_hours_per_hundred_feet
            crack_application = feet / 100 * per_hundred
            if project.crack_filling.crack_severity == CrackSeverity.SEVERE:
                crack_application *= CONDITION_MULTIPLIER
            application += crack_application

        if project.line_striping:
            stalls = project.line_striping.standard_stalls + project.line_striping.double_stalls
            prep += stalls / 20
            application += stalls / 15

        if project.patching:
            sqft = project.patching.square_footage
            prep += sqft / 200
            application += sqft / 150

        return {
            "preparation": prep,
            "application": application,
            "cleanup": float(CLEANUP_HOURS),
        }

    def calculate(self, project: ProjectDetails) -> dict:
        rate = self.rates.business.crew.blended_hourly_rate
        hours = self.phase_hours(project)
        total_hours = self.round_up(sum(hours.values()))

        return {
            "preparation": self.make_hours_item(self.round_up(hours["preparation"]), rate),
            "application": self.make_hours_item(self.round_up(hours["application"]), rate),
            "cleanup": self.make_hours_item(CLEANUP_HOURS, rate),
            "total_hours": total_hours,
            "total": money(total_hours * rate),
        }
