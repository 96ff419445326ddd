"""Recipe catalog API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from nouripet.core.config import settings
from nouripet.core.database import get_db
from nouripet.core.medical import (
    PRESCRIPTION_DIETS,
    get_medical_condition,
    validate_nutritional_compliance,
)
from nouripet.models.models import Recipe, RecipePrice
from nouripet.schemas.schemas import (
    RecipeCreate,
    RecipeResponse,
    RecipeDetailResponse,
    RecipePriceResponse,
    PrescriptionDietResponse,
    ComplianceResponse,
)

router = APIRouter(prefix="/recipe", tags=["recipes"])


@router.post("", response_model=RecipeResponse, status_code=201)
def create_recipe(recipe: RecipeCreate, db: Session = Depends(get_db)):
    """Add a recipe to the catalog."""
    if db.query(Recipe).filter(Recipe.slug == recipe.slug).first():
        raise HTTPException(status_code=409, detail=f"Recipe '{recipe.slug}' already exists")

    db_recipe = Recipe(**recipe.model_dump())
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


@router.get("", response_model=list[RecipeResponse])
def list_recipes(
    include_prescription: bool = Query(False),
    db: Session = Depends(get_db),
):
    """List active catalog recipes."""
    query = db.query(Recipe).filter(Recipe.is_active.is_(True))
    if not include_prescription:
        query = query.filter(Recipe.is_prescription.is_(False))
    return query.order_by(Recipe.id).all()


@router.get("/prescription", response_model=list[PrescriptionDietResponse])
def list_prescription_diets():
    """Prescription diets with their compliance against the target condition."""
    diets = []
    for diet in PRESCRIPTION_DIETS:
        condition = get_medical_condition(diet.condition_id)
        compliance = validate_nutritional_compliance(diet, condition)
        diets.append(PrescriptionDietResponse(
            id=diet.id,
            name=diet.name,
            condition_id=diet.condition_id,
            condition_name=condition.name,
            description=diet.description,
            nutritional_profile=diet.nutritional_profile,
            availability_status=diet.availability_status,
            prescription_required=diet.prescription_required,
            compliance=ComplianceResponse(
                compliant=compliance.compliant,
                violations=compliance.violations,
                recommendations=compliance.recommendations,
            ),
        ))
    return diets


@router.get("/{slug}", response_model=RecipeDetailResponse)
def get_recipe(slug: str, db: Session = Depends(get_db)):
    """Get a recipe with its prices for the active Stripe mode."""
    recipe = db.query(Recipe).filter(Recipe.slug == slug).first()
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")

    prices = (
        db.query(RecipePrice)
        .filter(RecipePrice.recipe_id == recipe.id)
        .filter(RecipePrice.mode == settings.stripe_mode)
        .order_by(RecipePrice.id)
        .all()
    )
    return RecipeDetailResponse(
        **RecipeResponse.model_validate(recipe).model_dump(),
        prices=[RecipePriceResponse.model_validate(p) for p in prices],
    )
