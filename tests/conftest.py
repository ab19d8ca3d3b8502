"""
Shared test fixtures — SQLite database, test client, token helpers,
project builders and a fixed-distance engine.
"""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set JWT_SECRET before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["DISTANCE_API_KEY"] = ""

from blacktop.auth import create_access_token
from blacktop.database import Base, get_db
from blacktop.distance import DistanceResolver, FixedDistanceLookup
from blacktop.estimation_engine import EstimationEngine
from blacktop.main import app
from blacktop.rates import DEFAULT_RATE_TABLES
from blacktop.schemas import ProjectDetails
from blacktop.services import get_distance_resolver, rate_store


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_DISTANCE_MILES = 25.0
ESTIMATE_DATE = date(2025, 6, 1)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_distance_resolver():
    return DistanceResolver(FixedDistanceLookup(TEST_DISTANCE_MILES), DEFAULT_RATE_TABLES.business.address)


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_distance_resolver] = override_get_distance_resolver


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables and reload rate tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    rate_store.load()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_headers():
    token = create_access_token("owner@blacktop.test", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token("crew@blacktop.test", role="user")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def rates():
    return DEFAULT_RATE_TABLES


@pytest.fixture
def make_project():
    """
    Build a ProjectDetails. Pass service sections as dicts:
        make_project(sealcoating={"square_footage": 5000})
    distance defaults to 25 miles; pass distance=None to leave it unresolved.
    """
    def _make(project_type=None, distance=TEST_DISTANCE_MILES, estimated_days=1, **services):
        if project_type is None:
            if len(services) > 1:
                project_type = "combination"
            else:
                project_type = {
                    "sealcoating": "sealcoating",
                    "crack_filling": "crackfilling",
                    "patching": "patching",
                    "line_striping": "linestriping",
                }[next(iter(services))]
        data = {
            "project_type": project_type,
            "location": {"address": "120 Main St, Martinsville, VA", "distance_from_base": distance},
            "timeline": {"start_date": "2025-06-02", "estimated_days": estimated_days},
            "weather_considerations": True,
        }
        data.update(services)
        return ProjectDetails.model_validate(data)

    return _make


@pytest.fixture
def make_engine(rates):
    """Engine with a fixed-distance lookup and a fixed date."""
    def _make(miles=TEST_DISTANCE_MILES, lookup=None, tables=None):
        tables = tables or rates
        resolver = DistanceResolver(lookup or FixedDistanceLookup(miles), tables.business.address)
        return EstimationEngine(tables, resolver, today=lambda: ESTIMATE_DATE)

    return _make
