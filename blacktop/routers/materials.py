from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from .. import models, schemas
from ..auth import require_admin
from ..database import get_db
from ..rates import UnknownRateError, apply_overrides, rate_keys
from ..services import rate_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/materials", tags=["materials"])


@router.get("/", response_model=List[schemas.MaterialPriceOverride])
def list_overrides(db: Session = Depends(get_db)):
    """Stored price overrides (future-dated ones included)."""
    return db.query(models.MaterialPriceOverride).order_by(models.MaterialPriceOverride.rate_key).all()


@router.get("/rates")
def list_rates():
    """Every numeric rate by dotted key, as currently in effect."""
    return rate_keys(rate_store.current)


@router.post("/cost-update")
def update_cost(
    update: schemas.MaterialCostUpdate,
    db: Session = Depends(get_db),
    claims: dict = Depends(require_admin),
):
    """
    Record a price change and reload the rate tables.

    Estimates already running keep the old prices; the next one sees the
    new price once effective_date has arrived.
    """
    try:
        apply_overrides(rate_store.current, {update.material: update.new_price})
    except UnknownRateError:
        raise HTTPException(status_code=404, detail=f"Unknown rate: {update.material}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid value for {update.material}: {e}")

    logger.info(
        "Material cost update: %s = %s effective %s by %s",
        update.material, update.new_price, update.effective_date, claims["sub"],
    )

    override = db.query(models.MaterialPriceOverride).filter(
        models.MaterialPriceOverride.rate_key == update.material
    ).first()
    if not override:
        override = models.MaterialPriceOverride(rate_key=update.material)
        db.add(override)
    override.price = update.new_price
    override.effective_date = update.effective_date
    override.notes = update.notes
    override.updated_by = claims["sub"]
    override.updated_at = datetime.utcnow()
    db.commit()

    rate_store.reload()

    return {
        "success": True,
        "message": f"Material cost updated: {update.material} = ${update.new_price}",
        "effective_date": update.effective_date.isoformat(),
        "updated_by": claims["sub"],
    }
