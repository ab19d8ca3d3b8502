"""
Estimation API.

POST /api/estimation/generate         — Full project estimate
GET  /api/estimation/business-config  — Current rate tables
POST /api/estimation/quick-calculate  — Single-category quick answers
GET  /api/estimation/distance         — Shop-to-site distance, drive time, fuel
"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query

from ..calculators import FuelCalculator
from ..distance import DistanceResolver
from ..estimation_engine import EstimateGenerationError, EstimationEngine, InvalidProjectError
from ..quick_calc import quick_calculate
from ..rates import RateTables
from ..schemas import ProjectDetails, QuickCalculateRequest
from ..services import get_distance_resolver, get_engine, get_rates, rate_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimation", tags=["estimation"])

AVERAGE_DRIVE_MPH = 35


@router.post("/generate")
def generate_estimate(
    project: ProjectDetails,
    engine: EstimationEngine = Depends(get_engine),
):
    """
    Generate a full estimate.

    Body validation (ranges, enums, at least one service) happens before
    the engine runs; schema errors come back as 422.
    """
    logger.info("Estimate requested: %s at %s", project.project_type.value, project.location.address)
    try:
        estimate = engine.generate_estimate(project)
    except InvalidProjectError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EstimateGenerationError:
        raise HTTPException(status_code=500, detail="Failed to generate estimate")

    return {"success": True, "data": estimate}


@router.get("/business-config")
def business_config(rates: RateTables = Depends(get_rates)):
    """Current business configuration and pricing."""
    return {
        "success": True,
        "data": {
            "business_config": rates.business.model_dump(),
            "material_costs": rates.material_costs.model_dump(),
            "application_rates": rates.application_rates.model_dump(),
            "equipment_rates": rates.equipment_rates.model_dump(),
            "load": rates.load.model_dump(),
            "pricing": rates.pricing.model_dump(),
            "last_updated": rate_store.loaded_at.isoformat() if rate_store.loaded_at else None,
        },
    }


@router.post("/quick-calculate")
def quick_calculate_endpoint(
    request: QuickCalculateRequest,
    rates: RateTables = Depends(get_rates),
):
    """Quick material / paint / load calculation using the estimate formulas."""
    try:
        result = quick_calculate(rates, request.calculation_type, request.parameters)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Missing parameter: {e.args[0]}")
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "calculation_type": request.calculation_type,
        "data": result,
    }


@router.get("/distance")
def distance(
    to_address: str = Query(..., min_length=1),
    from_address: str = Query(None),
    rates: RateTables = Depends(get_rates),
    resolver: DistanceResolver = Depends(get_distance_resolver),
):
    """Distance from the shop (or from_address) to a site. Falls back to the default distance."""
    if from_address:
        resolver = DistanceResolver(resolver.lookup, from_address, resolver.default_miles)
    miles = resolver.distance_to(to_address)

    transportation = FuelCalculator(rates).transportation(miles * 2)
    return {
        "success": True,
        "data": {
            "from": resolver.base_address,
            "to": to_address,
            "distance_miles": miles,
            "estimated_drive_time_minutes": math.ceil(miles / AVERAGE_DRIVE_MPH * 60),
            "fuel_cost": transportation["cost"],
        },
    }
