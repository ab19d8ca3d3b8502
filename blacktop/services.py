"""
Process-wide rate store and the per-request engine factories.

The rate store is the only long-lived object: it hands out immutable
snapshots. Engines and distance resolvers are built fresh for each request.
"""

from datetime import date

from fastapi import Depends

from .config import settings
from .database import SessionLocal
from .distance import DistanceResolver, default_resolver
from .estimation_engine import EstimationEngine
from .models import load_price_overrides
from .rates import RateTables, RateTableStore


def _overrides_from_db(as_of: date) -> dict:
    db = SessionLocal()
    try:
        return load_price_overrides(db, as_of)
    finally:
        db.close()


rate_store = RateTableStore(settings.RATE_TABLE_PATH, overrides_loader=_overrides_from_db)


def get_rates() -> RateTables:
    return rate_store.current


def get_distance_resolver(rates: RateTables = Depends(get_rates)) -> DistanceResolver:
    return default_resolver(rates.business.address, rates.pricing.default_distance_miles)


def get_engine(
    rates: RateTables = Depends(get_rates),
    resolver: DistanceResolver = Depends(get_distance_resolver),
) -> EstimationEngine:
    return EstimationEngine(rates, resolver)
