from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import estimation, materials
from .services import rate_store

logger = logging.getLogger("blacktop")

# Create tables (price overrides)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Blacktop Estimator",
    description=f"Sealcoating, crack filling, patching and line striping estimates for {settings.COMPANY_NAME}",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimation.router, prefix="/api")
app.include_router(materials.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "blacktop-estimator"}


@app.on_event("startup")
def load_rate_tables():
    """Load rate tables once, with any stored price overrides applied."""
    tables = rate_store.load()
    logger.info(
        "Rate tables ready — concentrate $%.2f/gal, diesel $%.2f/gal",
        tables.material_costs.sealcoat.pmm_concentrate,
        tables.material_costs.fuel.diesel,
    )
