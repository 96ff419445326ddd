"""Pricing API endpoints."""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nouripet.core.config import settings
from nouripet.core.database import get_db
from nouripet.core.pricing import (
    Cadence,
    SizeTier,
    TIER_BOUNDS,
    TIER_LABELS,
    BASE_PRICE_PER_100G,
    TOPPER_PRICES,
    price_plan,
    price_topper,
    validate_price_invariance,
)
from nouripet.schemas.schemas import (
    QuoteRequest,
    PlanPricingResponse,
    TopperRequest,
    TopperQuoteResponse,
    SizeTierResponse,
    InvarianceRequest,
    InvarianceResponse,
)
from nouripet.services.catalog import dog_to_profile, load_recipes_by_slug, load_price_table
from nouripet.api.dogs import get_dog_or_404

router = APIRouter(prefix="/pricing", tags=["pricing"])


def resolve_cadence(cadence: Optional[Cadence]) -> Cadence:
    return cadence or Cadence(settings.DEFAULT_CADENCE)


@router.post("/quote", response_model=PlanPricingResponse)
def quote_plan(request: QuoteRequest, db: Session = Depends(get_db)):
    """
    Price a plan for one dog.

    Uses the Stripe price table for the active mode and cadence, falling back
    to the per-100g price when the recipe has no table entries.
    """
    dog = get_dog_or_404(db, request.dog_id)
    recipes = load_recipes_by_slug(db, request.recipe_slugs)
    cadence = resolve_cadence(request.cadence)
    table = load_price_table(db, settings.stripe_mode, cadence.value, request.recipe_slugs)

    profile = dog_to_profile(dog)
    pricing = price_plan(profile, recipes, table, request.meals_per_day, der=profile.daily_kcal)
    return PlanPricingResponse(**asdict(pricing))


@router.post("/topper", response_model=TopperQuoteResponse)
def quote_topper(request: TopperRequest, db: Session = Depends(get_db)):
    """Quote a topper subscription covering part of the dog's daily calories."""
    dog = get_dog_or_404(db, request.dog_id)
    recipe = load_recipes_by_slug(db, [request.recipe_slug])[0]
    profile = dog_to_profile(dog)
    quote = price_topper(profile, recipe, request.fraction, der=profile.daily_kcal)
    return TopperQuoteResponse(**asdict(quote))


@router.get("/tiers", response_model=list[SizeTierResponse])
def list_size_tiers():
    """Size tiers with their weight bands and fallback prices."""
    tiers = []
    lower = 0
    bounds = dict((tier, upper) for upper, tier in TIER_BOUNDS)
    for tier in SizeTier:
        upper = bounds.get(tier)
        tiers.append(SizeTierResponse(
            tier=tier,
            label=TIER_LABELS[tier],
            min_lbs=lower,
            max_lbs=upper,
            base_price_per_100g=BASE_PRICE_PER_100G[tier],
            topper_biweekly_prices=TOPPER_PRICES[tier],
        ))
        lower = upper
    return tiers


@router.post("/invariance", response_model=InvarianceResponse)
def check_price_invariance(request: InvarianceRequest, db: Session = Depends(get_db)):
    """Re-price a plan with a different number of meals and confirm the cost is unchanged."""
    dog = get_dog_or_404(db, request.dog_id)
    recipes = load_recipes_by_slug(db, request.recipe_slugs)
    cadence = resolve_cadence(request.cadence)
    table = load_price_table(db, settings.stripe_mode, cadence.value, request.recipe_slugs)
    profile = dog_to_profile(dog)

    before = price_plan(profile, recipes, table, request.meals_per_day_before, der=profile.daily_kcal)
    after = price_plan(profile, recipes, table, request.meals_per_day_after, der=profile.daily_kcal)

    return InvarianceResponse(
        valid=validate_price_invariance(before.cost_per_day, after.cost_per_day),
        cost_per_day_before=before.cost_per_day,
        cost_per_day_after=after.cost_per_day,
        diff=round(abs(after.cost_per_day - before.cost_per_day), 4),
        grams_per_meal_before=before.grams_per_meal,
        grams_per_meal_after=after.grams_per_meal,
    )
