"""Shared fixtures: in-memory database seeded with the catalog."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_fixture"
os.environ.pop("STRIPE_PUBLISHABLE_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from nouripet.core.calculations import RecipeProfile
from nouripet.core.database import Base, build_engine, get_db
from nouripet.main import app
from nouripet.seed_data import RECIPES, seed_catalog

engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_catalog(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def catalog():
    """The seeded fresh recipes as profiles, in catalog order."""
    return [
        RecipeProfile(
            slug=r["slug"],
            name=r["name"],
            kcal_per_100g=r["kcal_per_100g"],
            protein=r["protein"],
            fat=r["fat"],
            carbs=r["carbs"],
            fiber=r["fiber"],
            moisture=r["moisture"],
            calcium=r["calcium_mg"],
            phosphorus=r["phosphorus_mg"],
            epa=r["epa_mg"],
            dha=r["dha_mg"],
            allergens=list(r["allergens"]),
            aafco_life_stage=r["aafco_life_stage"],
        )
        for r in RECIPES
    ]
