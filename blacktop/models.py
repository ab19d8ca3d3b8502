from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text
from datetime import date, datetime
from .database import Base


class MaterialPriceOverride(Base):
    """
    A price change entered by an admin. Keyed by dotted rate key
    (e.g. "material_costs.sealcoat.pmm_concentrate"); applied on top of the
    rate table defaults every time the tables are (re)loaded.
    """
    __tablename__ = "material_price_overrides"

    id = Column(Integer, primary_key=True, index=True)
    rate_key = Column(String, unique=True, nullable=False, index=True)
    price = Column(Float, nullable=False)
    effective_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    updated_by = Column(String, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def load_price_overrides(db, as_of: date = None) -> dict:
    """{rate_key: price} for every override already in effect on as_of (default today)."""
    as_of = as_of or date.today()
    return {
        row.rate_key: row.price
        for row in db.query(MaterialPriceOverride).all()
        if row.effective_date is None or row.effective_date <= as_of
    }
