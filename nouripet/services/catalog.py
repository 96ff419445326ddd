"""
Catalog lookups.

Converts database rows into the profiles used by the calculators, the scorer
and the pricing resolver.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from nouripet.core.calculations import (
    DogProfile,
    RecipeProfile,
    HealthGoals,
    ActivityLevel,
    LifeStage,
    Sex,
    WeightGoal,
)
from nouripet.core.exceptions import UnknownRecipeError
from nouripet.core.pricing import PriceEntry, PriceTable, SizeTier
from nouripet.core.units import WeightUnit, AgeUnit
from nouripet.models.models import Dog, Recipe, RecipePrice

logger = logging.getLogger(__name__)


def dog_to_profile(dog: Dog) -> DogProfile:
    goals = HealthGoals(
        weight_management=bool(dog.goal_weight_management),
        skin_coat=bool(dog.goal_skin_coat),
        joints=bool(dog.goal_joints),
        digestive_health=bool(dog.goal_digestive_health),
        target_weight=dog.target_weight,
        weight_goal=WeightGoal(dog.weight_goal) if dog.weight_goal else None,
    )
    return DogProfile(
        weight=dog.weight,
        weight_unit=WeightUnit(dog.weight_unit or WeightUnit.LB.value),
        name=dog.name,
        age=dog.age,
        age_unit=AgeUnit(dog.age_unit or AgeUnit.YEARS.value),
        sex=Sex(dog.sex) if dog.sex else None,
        breed=dog.breed or "",
        activity=ActivityLevel(dog.activity_level) if dog.activity_level else None,
        body_condition=dog.body_condition,
        neutered=dog.neutered if dog.neutered is not None else True,
        life_stage=LifeStage(dog.life_stage) if dog.life_stage else None,
        allergens=list(dog.allergens or []),
        medical_condition=dog.medical_condition,
        health_goals=goals,
        daily_kcal=dog.target_daily_kcal,
        dog_id=dog.id,
    )


def recipe_to_profile(recipe: Recipe) -> RecipeProfile:
    return RecipeProfile(
        slug=recipe.slug,
        name=recipe.name,
        kcal_per_100g=recipe.kcal_per_100g,
        protein=recipe.protein or 0,
        fat=recipe.fat or 0,
        carbs=recipe.carbs or 0,
        fiber=recipe.fiber or 0,
        moisture=recipe.moisture or 0,
        calcium=recipe.calcium_mg or 0,
        phosphorus=recipe.phosphorus_mg or 0,
        epa=recipe.epa_mg or 0,
        dha=recipe.dha_mg or 0,
        allergens=list(recipe.allergens or []),
        aafco_life_stage=recipe.aafco_life_stage or "adult",
        is_prescription=bool(recipe.is_prescription),
        condition_id=recipe.condition_id,
    )


def load_catalog(db: Session, include_prescription: bool = True) -> list[RecipeProfile]:
    """Active recipes in catalog order."""
    query = db.query(Recipe).filter(Recipe.is_active.is_(True))
    if not include_prescription:
        query = query.filter(Recipe.is_prescription.is_(False))
    return [recipe_to_profile(r) for r in query.order_by(Recipe.id).all()]


def load_recipes_by_slug(db: Session, slugs: list[str]) -> list[RecipeProfile]:
    """
    Load recipes in the order given.

    Raises:
        UnknownRecipeError: If a slug is not in the catalog
    """
    rows = {r.slug: r for r in db.query(Recipe).filter(Recipe.slug.in_(slugs)).all()}
    profiles = []
    for slug in slugs:
        recipe = rows.get(slug)
        if recipe is None:
            raise UnknownRecipeError(slug)
        profiles.append(recipe_to_profile(recipe))
    return profiles


def load_price_table(db: Session, mode: str, cadence: str, slugs: Optional[list[str]] = None) -> PriceTable:
    """Price rows for one Stripe mode and cadence, grouped by recipe slug."""
    query = (
        db.query(RecipePrice, Recipe.slug)
        .join(Recipe, RecipePrice.recipe_id == Recipe.id)
        .filter(RecipePrice.mode == mode)
        .filter(RecipePrice.cadence == cadence)
    )
    if slugs:
        query = query.filter(Recipe.slug.in_(slugs))

    table: PriceTable = {}
    for price, slug in query.order_by(RecipePrice.id).all():
        table.setdefault(slug, []).append(PriceEntry(
            recipe_slug=slug,
            tier=SizeTier(price.tier),
            price_id=price.price_id,
            amount_cents=price.amount_cents,
            interval=price.interval or "week",
            interval_count=price.interval_count or 1,
            product_name=price.product_name or "",
        ))

    logger.debug("Loaded %d priced recipes (mode=%s, cadence=%s)", len(table), mode, cadence)
    return table
