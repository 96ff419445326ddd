"""Feeding plan API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from nouripet.core.config import settings
from nouripet.core.database import get_db
from nouripet.core.pricing import WEEKS_PER_MONTH, price_plan
from nouripet.core.scoring import recommend_meal_variety
from nouripet.models.models import FeedingPlan, FeedingPlanItem
from nouripet.schemas.schemas import (
    PlanComputeRequest,
    FeedingPlanResponse,
    PlanItemResponse,
    MealVarietyRequest,
    MealVarietyResponse,
)
from nouripet.services.catalog import dog_to_profile, load_recipes_by_slug, load_price_table, load_catalog
from nouripet.api.dogs import get_dog_or_404
from nouripet.api.pricing import resolve_cadence

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plan", tags=["feeding plans"])


@router.post("/compute", response_model=FeedingPlanResponse)
def compute_feeding_plan(request: PlanComputeRequest, db: Session = Depends(get_db)):
    """
    Compute a plan for one or more dogs.

    Returns per-dog portions and prices plus plan totals. The plan is stored
    unless `save` is false.
    """
    cadence = resolve_cadence(request.cadence)
    mode = settings.stripe_mode

    items = []
    for selection in request.dogs:
        dog = get_dog_or_404(db, selection.dog_id)
        recipes = load_recipes_by_slug(db, selection.recipe_slugs)
        table = load_price_table(db, mode, cadence.value, selection.recipe_slugs)
        profile = dog_to_profile(dog)
        pricing = price_plan(profile, recipes, table, request.meals_per_day, der=profile.daily_kcal)

        items.append(PlanItemResponse(
            dog_id=dog.id,
            dog_name=dog.name,
            recipe_slugs=pricing.recipe_slugs,
            daily_kcal=pricing.der,
            kcal_per_100g=pricing.kcal_per_100g,
            daily_grams=pricing.daily_grams,
            grams_per_meal=pricing.grams_per_meal,
            price_per_100g=pricing.price_per_100g,
            cost_per_day=pricing.cost_per_day,
            cost_per_week=pricing.cost_per_week,
            cost_per_month=pricing.cost_per_month,
            tier=pricing.tier,
            source=pricing.source,
            price_id=pricing.price_id,
        ))

    total_week = round(sum(item.cost_per_week for item in items), 2)
    response = FeedingPlanResponse(
        id=None,
        name=request.name,
        cadence=cadence,
        meals_per_day=request.meals_per_day,
        stripe_mode=mode,
        total_cost_per_week=total_week,
        total_cost_per_month=round(total_week * WEEKS_PER_MONTH, 2),
        items=items,
        created_at=None,
    )
    if not request.save:
        return response

    plan = FeedingPlan(
        name=response.name,
        cadence=cadence.value,
        meals_per_day=response.meals_per_day,
        stripe_mode=mode,
        items=[
            FeedingPlanItem(**item.model_dump(exclude={"dog_name", "tier", "source"}),
                            tier=item.tier.value, source=item.source.value)
            for item in items
        ],
    )
    plan.refresh_totals()
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info("Saved plan %s for %d dog(s)", plan.id, len(items))

    return _plan_to_response(plan)


@router.get("", response_model=list[FeedingPlanResponse])
def list_feeding_plans(db: Session = Depends(get_db)):
    """List saved plans, newest first."""
    plans = db.query(FeedingPlan).order_by(FeedingPlan.id.desc()).all()
    return [_plan_to_response(p) for p in plans]


@router.get("/{plan_id}", response_model=FeedingPlanResponse)
def get_feeding_plan(plan_id: int, db: Session = Depends(get_db)):
    """Get a saved plan."""
    plan = db.query(FeedingPlan).filter(FeedingPlan.id == plan_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="Feeding plan not found")
    return _plan_to_response(plan)


@router.delete("/{plan_id}", status_code=204)
def delete_feeding_plan(plan_id: int, db: Session = Depends(get_db)):
    """Delete a saved plan."""
    plan = db.query(FeedingPlan).filter(FeedingPlan.id == plan_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="Feeding plan not found")

    db.delete(plan)
    db.commit()
    return None


@router.post("/variety", response_model=MealVarietyResponse)
def suggest_meal_variety(request: MealVarietyRequest, db: Session = Depends(get_db)):
    """Find recipes several dogs in the household can share."""
    profiles = [dog_to_profile(get_dog_or_404(db, dog_id)) for dog_id in request.dog_ids]
    variety = recommend_meal_variety(profiles, load_catalog(db))
    return MealVarietyResponse(
        shared_meals=variety.shared_meals,
        individual_meals=variety.individual_meals,
        reasoning=variety.reasoning,
    )


def _plan_to_response(plan: FeedingPlan) -> FeedingPlanResponse:
    return FeedingPlanResponse(
        id=plan.id,
        name=plan.name,
        cadence=plan.cadence,
        meals_per_day=plan.meals_per_day,
        stripe_mode=plan.stripe_mode,
        total_cost_per_week=plan.total_cost_per_week,
        total_cost_per_month=plan.total_cost_per_month,
        created_at=plan.created_at,
        items=[
            PlanItemResponse(
                dog_id=item.dog_id,
                dog_name=item.dog.name,
                recipe_slugs=item.recipe_slugs,
                daily_kcal=item.daily_kcal,
                kcal_per_100g=item.kcal_per_100g,
                daily_grams=item.daily_grams,
                grams_per_meal=item.grams_per_meal,
                price_per_100g=item.price_per_100g,
                cost_per_day=item.cost_per_day,
                cost_per_week=item.cost_per_week,
                cost_per_month=item.cost_per_month,
                tier=item.tier,
                source=item.source,
                price_id=item.price_id,
            )
            for item in plan.items
        ],
    )
