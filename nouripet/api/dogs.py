"""Dog API endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from nouripet.core.database import get_db
from nouripet.core.calculations import energy_summary, calculate_epa_dha_target
from nouripet.core.insights import build_insights, WeightEntry, StoolEntry
from nouripet.core.pricing import get_size_tier
from nouripet.core.scoring import recommend_recipes
from nouripet.core.units import convert_weight
from nouripet.models.models import Dog, WeightLog, FeedingPlanItem
from nouripet.schemas.schemas import (
    DogCreate,
    DogUpdate,
    DogResponse,
    DogWithCalculations,
    RecommendationResponse,
    InsightResponse,
)
from nouripet.services.catalog import dog_to_profile, load_catalog

router = APIRouter(prefix="/dog", tags=["dogs"])

ENUM_FIELDS = ("age_unit", "sex", "weight_unit", "activity_level", "life_stage", "weight_goal")


def get_dog_or_404(db: Session, dog_id: int) -> Dog:
    dog = db.query(Dog).filter(Dog.id == dog_id).first()
    if not dog:
        raise HTTPException(status_code=404, detail="Dog not found")
    return dog


@router.post("", response_model=DogResponse, status_code=201)
def create_dog(dog: DogCreate, db: Session = Depends(get_db)):
    """Create a new dog profile."""
    data = dog.model_dump()
    for field in ENUM_FIELDS:
        if data[field] is not None:
            data[field] = data[field].value

    db_dog = Dog(**data)
    db.add(db_dog)
    db.commit()
    db.refresh(db_dog)

    # Initial weight log entry
    db.add(WeightLog(dog_id=db_dog.id, weight=dog.weight, notes="Initial weight"))
    db.commit()

    return db_dog


@router.get("/{dog_id}", response_model=DogWithCalculations)
def get_dog(dog_id: int, db: Session = Depends(get_db)):
    """Get a dog profile with calculated RER and DER."""
    dog = get_dog_or_404(db, dog_id)
    profile = dog_to_profile(dog)
    summary = energy_summary(profile)

    # Use target_daily_kcal if set, otherwise use calculated DER
    effective_daily_kcal = dog.target_daily_kcal if dog.target_daily_kcal else summary.der

    return DogWithCalculations(
        **DogResponse.model_validate(dog).model_dump(),
        weight_kg=round(summary.weight_kg, 2),
        weight_lbs=round(profile.weight_lbs, 2),
        resolved_life_stage=summary.life_stage,
        rer=round(summary.rer, 2),
        der=round(summary.der, 2),
        der_factor=round(summary.factor, 4),
        effective_daily_kcal=round(effective_daily_kcal, 2),
        size_tier=get_size_tier(profile.weight_lbs),
        epa_dha_target_mg=round(calculate_epa_dha_target(summary.weight_kg), 1),
    )


@router.get("", response_model=list[DogResponse])
def list_dogs(db: Session = Depends(get_db)):
    """List all dogs."""
    return db.query(Dog).order_by(Dog.id).all()


@router.put("/{dog_id}", response_model=DogResponse)
def update_dog(dog_id: int, dog_update: DogUpdate, db: Session = Depends(get_db)):
    """Update a dog profile."""
    dog = get_dog_or_404(db, dog_id)

    old_weight = dog.weight
    old_unit = dog.weight_unit
    update_data = dog_update.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if field in ENUM_FIELDS and value is not None:
            setattr(dog, field, value.value)
        elif field in ("target_weight", "target_daily_kcal") and value == 0:
            # Allow clearing target values by setting to 0
            setattr(dog, field, None)
        else:
            setattr(dog, field, value)

    if dog.weight_unit and dog.weight_unit != old_unit:
        _convert_stored_weights(dog, old_unit, update_data)

    if "weight" in update_data and update_data["weight"] != old_weight:
        db.add(WeightLog(dog_id=dog.id, weight=update_data["weight"], notes="Weight updated"))

    db.commit()
    db.refresh(dog)
    return dog


@router.delete("/{dog_id}", status_code=204)
def delete_dog(dog_id: int, db: Session = Depends(get_db)):
    """Delete a dog profile along with its logs and plan entries."""
    dog = get_dog_or_404(db, dog_id)
    plans = {item.plan for item in dog.plan_items}
    db.delete(dog)

    # Plans keep the other dogs; a plan left empty goes too
    for plan in plans:
        remaining = [item for item in plan.items if item.dog_id != dog_id]
        if remaining:
            plan.refresh_totals(remaining)
        else:
            db.delete(plan)

    db.commit()
    return None


def _convert_stored_weights(dog: Dog, old_unit: str, update_data: dict) -> None:
    """Re-express weights recorded in the previous unit in the dog's new unit."""
    new_unit = dog.weight_unit
    for log in dog.weight_logs:
        log.weight = convert_weight(log.weight, old_unit, new_unit)
    if "weight" not in update_data:
        dog.weight = convert_weight(dog.weight, old_unit, new_unit)
    if dog.target_weight and "target_weight" not in update_data:
        dog.target_weight = convert_weight(dog.target_weight, old_unit, new_unit)


@router.get("/{dog_id}/recommendations", response_model=RecommendationResponse)
def get_recommendations(dog_id: int, db: Session = Depends(get_db)):
    """Rank catalog recipes for a dog."""
    dog = get_dog_or_404(db, dog_id)
    recommendation = recommend_recipes(dog_to_profile(dog), load_catalog(db))
    return RecommendationResponse.model_validate(asdict(recommendation))


@router.get("/{dog_id}/insights", response_model=list[InsightResponse])
def get_insights(dog_id: int, db: Session = Depends(get_db)):
    """Follow-up suggestions from the dog's weight and stool logs."""
    dog = get_dog_or_404(db, dog_id)
    profile = dog_to_profile(dog)

    weights = [WeightEntry(logged_at=log.logged_at, weight=log.weight) for log in dog.weight_logs]
    stools = [StoolEntry(logged_at=log.logged_at, score=log.score) for log in dog.stool_logs]

    latest_item = (
        db.query(FeedingPlanItem)
        .filter(FeedingPlanItem.dog_id == dog_id)
        .order_by(FeedingPlanItem.id.desc())
        .first()
    )
    daily_kcal = dog.target_daily_kcal or (latest_item.daily_kcal if latest_item else None)

    insights = build_insights(
        profile,
        weights,
        stools,
        weight_goal=profile.health_goals.weight_goal,
        daily_kcal=daily_kcal,
    )
    return [InsightResponse(**asdict(insight)) for insight in insights]
