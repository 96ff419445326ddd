"""Pydantic schemas for request/response validation."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from nouripet.core.calculations import Sex, ActivityLevel, LifeStage, WeightGoal
from nouripet.core.insights import Priority
from nouripet.core.pricing import SizeTier, Cadence, PricingSource
from nouripet.core.units import WeightUnit, AgeUnit


# Dog schemas
class DogCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    breed: Optional[str] = Field(None, max_length=100)
    age: Optional[float] = Field(None, ge=0, le=360)
    age_unit: AgeUnit = AgeUnit.YEARS
    sex: Optional[Sex] = None
    neutered: bool = True
    weight: float = Field(..., gt=0, le=400)
    weight_unit: WeightUnit = WeightUnit.LB
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    body_condition: Optional[int] = Field(None, ge=1, le=9)
    life_stage: Optional[LifeStage] = None
    allergens: list[str] = []
    medical_condition: Optional[str] = Field(None, max_length=100)
    target_weight: Optional[float] = Field(None, gt=0, le=400)
    weight_goal: Optional[WeightGoal] = None
    goal_weight_management: bool = False
    goal_skin_coat: bool = False
    goal_joints: bool = False
    goal_digestive_health: bool = False
    target_daily_kcal: Optional[float] = Field(None, gt=0, le=10000)
    notes: Optional[str] = None


class DogUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    breed: Optional[str] = Field(None, max_length=100)
    age: Optional[float] = Field(None, ge=0, le=360)
    age_unit: Optional[AgeUnit] = None
    sex: Optional[Sex] = None
    neutered: Optional[bool] = None
    weight: Optional[float] = Field(None, gt=0, le=400)
    weight_unit: Optional[WeightUnit] = None
    activity_level: Optional[ActivityLevel] = None
    body_condition: Optional[int] = Field(None, ge=1, le=9)
    life_stage: Optional[LifeStage] = None
    allergens: Optional[list[str]] = None
    medical_condition: Optional[str] = Field(None, max_length=100)
    target_weight: Optional[float] = Field(None, ge=0, le=400)  # Allow 0 to clear
    weight_goal: Optional[WeightGoal] = None
    goal_weight_management: Optional[bool] = None
    goal_skin_coat: Optional[bool] = None
    goal_joints: Optional[bool] = None
    goal_digestive_health: Optional[bool] = None
    target_daily_kcal: Optional[float] = Field(None, ge=0, le=10000)  # Allow 0 to clear
    notes: Optional[str] = None


class DogResponse(BaseModel):
    id: int
    name: str
    breed: Optional[str]
    age: Optional[float]
    age_unit: AgeUnit
    sex: Optional[Sex]
    neutered: bool
    weight: float
    weight_unit: WeightUnit
    activity_level: ActivityLevel
    body_condition: Optional[int]
    life_stage: Optional[LifeStage]
    allergens: list[str]
    medical_condition: Optional[str]
    target_weight: Optional[float]
    weight_goal: Optional[WeightGoal]
    goal_weight_management: bool
    goal_skin_coat: bool
    goal_joints: bool
    goal_digestive_health: bool
    target_daily_kcal: Optional[float]
    notes: Optional[str]

    class Config:
        from_attributes = True


class DogWithCalculations(DogResponse):
    weight_kg: float
    weight_lbs: float
    resolved_life_stage: LifeStage
    rer: float
    der: float
    der_factor: float
    effective_daily_kcal: float  # Uses target_daily_kcal if set, otherwise DER
    size_tier: SizeTier
    epa_dha_target_mg: float


# Recipe schemas
class RecipeCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    kcal_per_100g: float = Field(..., gt=0, le=1000)
    protein: float = Field(0, ge=0, le=100)
    fat: float = Field(0, ge=0, le=100)
    carbs: float = Field(0, ge=0, le=100)
    fiber: float = Field(0, ge=0, le=100)
    moisture: float = Field(0, ge=0, le=100)
    calcium_mg: float = Field(0, ge=0)
    phosphorus_mg: float = Field(0, ge=0)
    epa_mg: float = Field(0, ge=0)
    dha_mg: float = Field(0, ge=0)
    allergens: list[str] = []
    aafco_life_stage: str = "adult"
    sustainability_score: Optional[int] = Field(None, ge=0, le=100)
    is_prescription: bool = False
    condition_id: Optional[str] = None


class RecipeResponse(BaseModel):
    id: int
    slug: str
    name: str
    description: Optional[str]
    kcal_per_100g: float
    protein: float
    fat: float
    carbs: float
    fiber: float
    moisture: float
    calcium_mg: float
    phosphorus_mg: float
    epa_mg: float
    dha_mg: float
    allergens: list[str]
    aafco_life_stage: str
    sustainability_score: Optional[int]
    is_prescription: bool
    condition_id: Optional[str]

    class Config:
        from_attributes = True


class RecipePriceResponse(BaseModel):
    mode: str
    cadence: Cadence
    tier: SizeTier
    price_id: str
    amount_cents: int
    interval: str
    interval_count: int
    product_name: Optional[str]

    class Config:
        from_attributes = True


class RecipeDetailResponse(RecipeResponse):
    prices: list[RecipePriceResponse] = []


class ComplianceResponse(BaseModel):
    compliant: bool
    violations: list[str]
    recommendations: list[str]


class PrescriptionDietResponse(BaseModel):
    id: str
    name: str
    condition_id: str
    condition_name: str
    description: str
    nutritional_profile: dict[str, float]
    availability_status: str
    prescription_required: bool
    compliance: ComplianceResponse


# Recommendation schemas
class ScoringFactorResponse(BaseModel):
    factor: str
    points: int
    description: str
    impact: str
    category: str


class ConfidenceBreakdownResponse(BaseModel):
    base_score: int
    adjustments: list[ScoringFactorResponse]
    total_score: int
    confidence_level: str
    label: str


class AlternativeResponse(BaseModel):
    recipe_slug: str
    recipe_name: str
    confidence: int
    reasoning: str
    difference_from_top: str


class RecommendationResponse(BaseModel):
    dog_id: Optional[int]
    dog_name: str
    recommended_recipes: list[str]
    reasoning: str
    confidence: int
    nutritional_focus: list[str]
    factors_considered: list[ScoringFactorResponse]
    confidence_breakdown: Optional[ConfidenceBreakdownResponse]
    missing_data: list[str]
    edge_cases: list[str]
    alternatives: list[AlternativeResponse]


class MealVarietyRequest(BaseModel):
    dog_ids: list[int] = Field(..., min_length=1)


class MealVarietyResponse(BaseModel):
    shared_meals: list[str]
    individual_meals: dict[int, list[str]]
    reasoning: str


class InsightResponse(BaseModel):
    id: str
    type: str
    title: str
    description: str
    action: str
    priority: Priority
    reason: str


# Pricing schemas
class PackInfoResponse(BaseModel):
    pack_size_g: float
    packs_per_day: float
    packs_per_month: int
    grams_per_day: float


class QuoteRequest(BaseModel):
    dog_id: int
    recipe_slugs: list[str] = Field(..., min_length=1)
    meals_per_day: int = Field(2, ge=1, le=6)
    cadence: Optional[Cadence] = None


class PlanPricingResponse(BaseModel):
    recipe_slugs: list[str]
    primary_slug: str
    kcal_per_100g: float
    der: float
    daily_grams: float
    meals_per_day: int
    grams_per_meal: float
    price_per_100g: float
    cost_per_day: float
    cost_per_week: float
    cost_per_month: float
    tier: SizeTier
    source: PricingSource
    is_medical: bool
    pack: PackInfoResponse
    price_id: Optional[str]


class TopperRequest(BaseModel):
    dog_id: int
    recipe_slug: str
    fraction: float = Field(..., gt=0, lt=1)


class TopperQuoteResponse(BaseModel):
    recipe_slug: str
    tier: SizeTier
    fraction: float
    der: float
    topper_kcal: float
    remaining_kcal: float
    daily_grams: float
    biweekly_price: float
    weekly_price: float


class SizeTierResponse(BaseModel):
    tier: SizeTier
    label: str
    min_lbs: float
    max_lbs: Optional[float]
    base_price_per_100g: float
    topper_biweekly_prices: dict[int, float]


class InvarianceRequest(BaseModel):
    dog_id: int
    recipe_slugs: list[str] = Field(..., min_length=1)
    meals_per_day_before: int = Field(..., ge=1, le=6)
    meals_per_day_after: int = Field(..., ge=1, le=6)
    cadence: Optional[Cadence] = None


class InvarianceResponse(BaseModel):
    valid: bool
    cost_per_day_before: float
    cost_per_day_after: float
    diff: float
    grams_per_meal_before: float
    grams_per_meal_after: float


# Feeding plan schemas
class PlanDogSelection(BaseModel):
    dog_id: int
    recipe_slugs: list[str] = Field(..., min_length=1)


class PlanComputeRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    dogs: list[PlanDogSelection] = Field(..., min_length=1)
    meals_per_day: int = Field(2, ge=1, le=6)
    cadence: Optional[Cadence] = None
    save: bool = True


class PlanItemResponse(BaseModel):
    dog_id: int
    dog_name: str
    recipe_slugs: list[str]
    daily_kcal: float
    kcal_per_100g: float
    daily_grams: float
    grams_per_meal: float
    price_per_100g: float
    cost_per_day: float
    cost_per_week: float
    cost_per_month: float
    tier: SizeTier
    source: PricingSource
    price_id: Optional[str]


class FeedingPlanResponse(BaseModel):
    id: Optional[int]
    name: Optional[str]
    cadence: Cadence
    meals_per_day: int
    stripe_mode: str
    total_cost_per_week: float
    total_cost_per_month: float
    items: list[PlanItemResponse]
    created_at: Optional[datetime]


# Log schemas
class WeightLogCreate(BaseModel):
    dog_id: int
    weight: float = Field(..., gt=0, le=400)
    notes: Optional[str] = None
    logged_at: Optional[datetime] = None


class WeightLogResponse(BaseModel):
    id: int
    dog_id: int
    weight: float
    notes: Optional[str]
    logged_at: datetime

    class Config:
        from_attributes = True


class StoolLogCreate(BaseModel):
    dog_id: int
    score: int = Field(..., ge=1, le=7)
    notes: Optional[str] = None
    logged_at: Optional[datetime] = None


class StoolLogResponse(BaseModel):
    id: int
    dog_id: int
    score: int
    notes: Optional[str]
    logged_at: datetime

    class Config:
        from_attributes = True
