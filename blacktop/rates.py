"""
Rate tables — business location, equipment specs, unit material costs,
application/coverage rates and the pricing policy.

Virginia operations, 2025 prices. Every estimate reads one immutable
RateTables snapshot; RateTableStore owns the load-once / reload lifecycle.
A price change is applied by building a new snapshot, never by mutating the
one an estimate is already using.
"""

import json
import logging
from datetime import date, datetime
from typing import Callable, Dict, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class UnknownRateError(KeyError):
    """Override key does not name a numeric rate."""


class _Frozen(BaseModel):
    class Config:
        frozen = True


# --- Business + equipment ---

class Crew(_Frozen):
    full_time: int = 2
    part_time: int = 1
    blended_hourly_rate: float = 50.0  # $40-60 range incl. overhead


class Supplier(_Frozen):
    name: str = "SealMaster"
    address: str = "703 West Decatur Street, Madison, NC 27025"


class HaulTruck(_Frozen):
    model: str = "1978 Chevy C30 Custom Deluxe"
    curb_weight: float = 4300.0  # lbs
    gvwr: float = Field(default=12000.0, gt=0)  # conservative for a 1-ton truck
    mpg: float = Field(default=15.0, gt=0)
    fuel_capacity: float = 40.0  # gallons


class SealerTank(_Frozen):
    model: str = "SealMaster SK 550 Tank Sealing Machine"
    empty_weight: float = 1865.0  # lbs
    capacity: float = 550.0  # gallons


class SupportTruck(_Frozen):
    model: str = "1995 Dodge Dakota V6 Magnum"
    mpg: float = 18.0
    trailer_capacity: float = 3000.0  # lbs, 8ft utility trailer


class Equipment(_Frozen):
    haul_truck: HaulTruck = HaulTruck()
    sealer_tank: SealerTank = SealerTank()
    support_truck: SupportTruck = SupportTruck()


class BusinessConfig(_Frozen):
    address: str = "337 Ayers Orchard Road, Stuart, VA 24171"
    crew: Crew = Crew()
    supplier: Supplier = Supplier()
    equipment: Equipment = Equipment()


# --- Unit material costs ---

class SealcoatCosts(_Frozen):
    pmm_concentrate: float = 3.79  # per gallon
    sand_50lb: float = 10.00  # per bag
    prep_seal_5gal: float = 50.00  # per bucket
    fast_dry_5gal: float = 50.00  # per bucket
    water: float = 0.02  # nominal, per gallon


class CrackFillingCosts(_Frozen):
    crack_master_30lb: float = 44.95  # per box
    propane_tank: float = 10.00  # refill
    sand_50lb: float = 10.00


class LineStripingCosts(_Frozen):
    paint: float = 0.85  # per linear foot
    stencils: float = 15.00  # per stencil
    mobilization: float = 250.00  # base mobilization fee, all jobs


class FuelCosts(_Frozen):
    diesel: float = 3.45
    gasoline: float = 3.25


class MaterialCosts(_Frozen):
    sealcoat: SealcoatCosts = SealcoatCosts()
    crack_filling: CrackFillingCosts = CrackFillingCosts()
    line_striping: LineStripingCosts = LineStripingCosts()
    fuel: FuelCosts = FuelCosts()


# --- Application + coverage ---

class PriceRange(_Frozen):
    min: float
    max: float
    avg: float


class SealcoatingRates(_Frozen):
    coverage_per_gallon: float = Field(default=76.0, gt=0)  # sq ft per gallon of mixed sealer
    sand_ratio: float = 300.0  # lbs sand per 100 gallons concentrate
    water_ratio: float = Field(default=20.0, ge=0)  # percent water by volume
    fast_dry_ratio: float = 2.0  # gallons per 125 gallons concentrate
    prep_seal_coverage: float = Field(default=175.0, gt=0)  # sq ft per gallon


class CrackFillingRates(_Frozen):
    cost_per_linear_foot: PriceRange = PriceRange(min=0.50, max=3.00, avg=1.50)
    labor_hours_per_hundred_feet: float = 1.0
    material_coverage_linear_feet: float = Field(default=500.0, gt=0)  # feet per 30lb box
    feet_per_propane_tank: float = Field(default=1000.0, gt=0)
    feet_per_sand_bag: float = Field(default=500.0, gt=0)


class PatchingRates(_Frozen):
    hot_mix: PriceRange = PriceRange(min=2.00, max=5.00, avg=3.50)  # per sq ft
    cold_patch: PriceRange = PriceRange(min=2.00, max=4.00, avg=3.00)
    material_fraction: float = 0.6  # share of the blended rate that is material


class LineStripingRates(_Frozen):
    standard_stall: float = 20.0  # linear feet
    double_stall: float = 25.0
    crosswalk: float = 50.0
    cost_per_linear_foot: PriceRange = PriceRange(min=0.75, max=1.00, avg=0.875)
    avg_cost_per_stall: float = 4.50
    feet_per_gallon: float = Field(default=1600.0, gt=0)


class ApplicationRates(_Frozen):
    sealcoating: SealcoatingRates = SealcoatingRates()
    crack_filling: CrackFillingRates = CrackFillingRates()
    patching: PatchingRates = PatchingRates()
    line_striping: LineStripingRates = LineStripingRates()


# --- Equipment usage, load and pricing policy ---

class EquipmentRates(_Frozen):
    sealcoating_machine: float = 50.0  # $/hr, SK 550
    crack_filling_machine: float = 30.0
    line_striping_equipment: float = 25.0
    misc_equipment: float = 50.0  # flat per job
    fuel_burn_gallons_per_hour: float = 2.0
    minimum_project_hours: float = 2.0


class LoadAssumptions(_Frozen):
    sealer_lbs_per_gallon: float = 10.0
    sand_bag_lbs: float = Field(default=50.0, gt=0)
    crew_count: int = 3
    crew_member_lbs: float = 200.0  # conservative
    low_margin_percent: float = 10.0


class PricingPolicy(_Frozen):
    overhead_rate: float = 0.15
    profit_rate: float = 0.20
    alternative_markup_rate: float = 0.25
    rounding_increment: float = Field(default=10.0, gt=0)
    free_mobilization_miles: float = 30.0
    mobilization_per_mile: float = 5.0
    validity_days: int = 30
    default_distance_miles: float = 50.0
    long_distance_miles: float = 50.0


class RateTables(_Frozen):
    business: BusinessConfig = BusinessConfig()
    material_costs: MaterialCosts = MaterialCosts()
    application_rates: ApplicationRates = ApplicationRates()
    equipment_rates: EquipmentRates = EquipmentRates()
    load: LoadAssumptions = LoadAssumptions()
    pricing: PricingPolicy = PricingPolicy()


DEFAULT_RATE_TABLES = RateTables()


def rate_keys(tables: RateTables = DEFAULT_RATE_TABLES) -> Dict[str, float]:
    """Flatten every numeric rate to {"section.sub.name": value}."""
    flat = {}

    def _walk(prefix, node):
        for key, value in node.items():
            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                _walk(path, value)
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                flat[path] = value

    _walk("", tables.model_dump())
    return flat


def apply_overrides(tables: RateTables, overrides: Dict[str, float]) -> RateTables:
    """
    Return a new RateTables with dotted-key overrides applied.

    Raises UnknownRateError for a key that is not a numeric rate.
    """
    if not overrides:
        return tables
    known = rate_keys(tables)
    data = tables.model_dump()
    for key, value in overrides.items():
        if key not in known:
            raise UnknownRateError(key)
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            node = node[part]
        node[leaf] = value
    return RateTables.model_validate(data)


def load_rate_file(path: str) -> RateTables:
    """Read a rate table JSON file. Missing sections keep their defaults."""
    with open(path) as f:
        return RateTables.model_validate(json.load(f))


class RateTableStore:
    """
    Holds the current RateTables snapshot.

    load() runs once (lazily on first access); reload() rebuilds from the
    base tables plus the overrides returned by overrides_loader(as_of) and
    swaps the reference. Callers keep whatever snapshot they already took.

    The snapshot is dated: the first access on a new day reloads, so a price
    override with a future effective_date goes live on that date.
    """

    def __init__(self, source_path: str = "",
                 overrides_loader: Optional[Callable[[date], Dict[str, float]]] = None,
                 today: Optional[Callable[[], date]] = None):
        self.source_path = source_path
        self.overrides_loader = overrides_loader
        self.today = today or date.today
        self._current = None  # type: Optional[RateTables]
        self.loaded_at = None  # type: Optional[datetime]
        self.loaded_for = None  # type: Optional[date]

    @property
    def current(self) -> RateTables:
        if self._current is None or self.loaded_for != self.today():
            self.load()
        return self._current

    def load(self) -> RateTables:
        as_of = self.today()
        base = load_rate_file(self.source_path) if self.source_path else DEFAULT_RATE_TABLES
        tables = base
        if self.overrides_loader is not None:
            try:
                tables = apply_overrides(base, self.overrides_loader(as_of))
            except Exception as e:
                # Bad or unreadable overrides must not take the estimator down
                logger.warning("Rate overrides not applied: %s", e)
                tables = base
        self._current = tables
        self.loaded_for = as_of
        self.loaded_at = datetime.utcnow()
        logger.info("Rate tables loaded for %s (source=%s)", as_of, self.source_path or "defaults")
        return tables

    def reload(self) -> RateTables:
        return self.load()
