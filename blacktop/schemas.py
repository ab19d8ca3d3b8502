from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class ProjectType(str, Enum):
    SEALCOATING = "sealcoating"
    CRACKFILLING = "crackfilling"
    PATCHING = "patching"
    LINESTRIPING = "linestriping"
    COMBINATION = "combination"


class SurfaceCondition(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    HEAVILY_OXIDIZED = "heavily_oxidized"


class CrackSeverity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    SEVERE = "severe"


class PatchType(str, Enum):
    HOT_MIX = "hot_mix"
    COLD_PATCH = "cold_patch"


class _Input(BaseModel):
    """Snake-case attributes; the front end's camelCase keys are accepted too."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Location(_Input):
    address: str = Field(min_length=1)
    distance_from_base: Optional[float] = Field(default=None, ge=0)  # miles, one way


class Timeline(_Input):
    start_date: date
    estimated_days: int = Field(ge=1, le=30)


class SealcoatingDetails(_Input):
    square_footage: float = Field(ge=100)
    condition: SurfaceCondition = SurfaceCondition.GOOD
    oil_spots: bool = False
    oil_spot_area: Optional[float] = Field(default=None, ge=0)  # sq ft


class CrackFillingDetails(_Input):
    linear_footage: float = Field(ge=1)
    crack_severity: CrackSeverity = CrackSeverity.MODERATE
    requires_sand_fill: bool = False


class PatchingDetails(_Input):
    square_footage: float = Field(ge=1)
    patch_type: PatchType = PatchType.HOT_MIX
    thickness: float = Field(default=2.0, ge=1, le=6)  # inches


class LineStripingDetails(_Input):
    standard_stalls: int = Field(default=0, ge=0)
    double_stalls: int = Field(default=0, ge=0)
    handicap_stalls: int = Field(default=0, ge=0)
    custom_stencils: int = Field(default=0, ge=0)
    crosswalks: int = Field(default=0, ge=0)
    restripe: bool = False  # True = re-stripe existing layout


class LoadCheckDetails(_Input):
    """What goes on the haul truck for a stand-alone load check."""
    sealer_gallons: float = Field(default=0, ge=0)
    sand_bags: int = Field(default=0, ge=0)


class ProjectDetails(_Input):
    project_type: ProjectType
    location: Location
    timeline: Timeline
    weather_considerations: bool = False
    sealcoating: Optional[SealcoatingDetails] = None
    crack_filling: Optional[CrackFillingDetails] = None
    patching: Optional[PatchingDetails] = None
    line_striping: Optional[LineStripingDetails] = None

    def services(self) -> list:
        """Names of the service sub-records present, in estimate order."""
        return [
            name for name in ("sealcoating", "crack_filling", "patching", "line_striping")
            if getattr(self, name) is not None
        ]

    @model_validator(mode="after")
    def check_services(self):
        count = len(self.services())
        if count == 0:
            raise ValueError("At least one service type must be specified")
        if self.project_type == ProjectType.COMBINATION and count < 2:
            raise ValueError("A combination project needs two or more services")
        return self


# --- Request bodies ---

class QuickCalculateRequest(BaseModel):
    calculation_type: str
    parameters: dict = {}


class MaterialCostUpdate(BaseModel):
    material: str  # dotted rate key, e.g. "material_costs.sealcoat.pmm_concentrate"
    new_price: float = Field(ge=0)
    effective_date: date
    notes: Optional[str] = None


class MaterialPriceOverride(BaseModel):
    rate_key: str
    price: float
    effective_date: Optional[date] = None
    notes: Optional[str] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
