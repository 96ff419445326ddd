"""
Core math engine for fresh-food portioning.

RER (Resting Energy Requirement): 70 × (weight_kg ^ 0.75)
DER (Daily Energy Requirement): RER × life stage / activity / body condition factor
"""

import enum
import math
from typing import Optional
from dataclasses import dataclass, field

from nouripet.core.units import WeightUnit, AgeUnit, to_kg, to_lbs, age_in_months


class Sex(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, enum.Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class LifeStage(str, enum.Enum):
    PUPPY = "puppy"
    ADULT = "adult"
    SENIOR = "senior"


class WeightGoal(str, enum.Enum):
    LOSE = "lose"
    GAIN = "gain"
    MAINTAIN = "maintain"


# Factors applied to RER
DER_FACTORS = {
    "adult": 1.6,           # Neutered, moderate activity
    "low_activity": 1.35,
    "high_activity": 1.9,
    "puppy_young": 3.0,     # Under 4 months
    "puppy_older": 2.0,     # 4-12 months
    "puppy_grown": 1.8,     # Puppy stage declared past 12 months
    "senior_floor": 1.3,
    "intact_adult_floor": 1.8,
}
SENIOR_REDUCTION = 0.1
UNDERWEIGHT_MULTIPLIER = 1.1  # BCS <= 3
OVERWEIGHT_MULTIPLIER = 0.9   # BCS >= 7

PUPPY_MAX_MONTHS = 12
SENIOR_MIN_MONTHS = 84

TOPPER_FRACTIONS = (0.25, 0.5, 0.75)

# 12 oz vacuum packs
PACK_SIZE_G = 12 * 28.3495
WASTE_BUFFER = 1.1
DAYS_PER_MONTH = 30

EPA_DHA_MG_PER_10_LBS = 90


@dataclass
class HealthGoals:
    """Owner-selected goals from the plan builder."""
    weight_management: bool = False
    skin_coat: bool = False
    joints: bool = False
    digestive_health: bool = False
    target_weight: Optional[float] = None  # Same unit as the dog's weight
    weight_goal: Optional[WeightGoal] = None
    stool_score: Optional[int] = None  # 1-7 scale

    def is_empty(self) -> bool:
        return not (
            self.weight_management or self.skin_coat or self.joints
            or self.digestive_health or self.target_weight or self.weight_goal
        )


@dataclass
class DogProfile:
    """Everything the calculators and the scorer know about one dog."""
    weight: float
    weight_unit: WeightUnit = WeightUnit.LB
    name: str = ""
    age: Optional[float] = None
    age_unit: AgeUnit = AgeUnit.YEARS
    sex: Optional[Sex] = None
    breed: str = ""
    activity: Optional[ActivityLevel] = ActivityLevel.MODERATE
    body_condition: Optional[int] = None  # 1-9 scale
    neutered: bool = True
    life_stage: Optional[LifeStage] = None
    allergens: list[str] = field(default_factory=list)
    medical_condition: Optional[str] = None
    health_goals: Optional[HealthGoals] = None
    daily_kcal: Optional[float] = None  # Current portion plan, if any
    dog_id: Optional[int] = None

    @property
    def weight_kg(self) -> float:
        return to_kg(self.weight, self.weight_unit)

    @property
    def weight_lbs(self) -> float:
        return to_lbs(self.weight, self.weight_unit)

    @property
    def age_months(self) -> Optional[float]:
        if self.age is None:
            return None
        return age_in_months(self.age, self.age_unit)


@dataclass
class RecipeProfile:
    """Macro profile of a catalog recipe (percentages unless noted)."""
    slug: str
    name: str
    kcal_per_100g: float
    protein: float = 0
    fat: float = 0
    carbs: float = 0
    fiber: float = 0
    moisture: float = 0
    calcium: float = 0      # mg per 100g
    phosphorus: float = 0   # mg per 100g
    epa: float = 0          # mg per 100g
    dha: float = 0          # mg per 100g
    allergens: list[str] = field(default_factory=list)
    aafco_life_stage: str = "adult"
    is_prescription: bool = False
    condition_id: Optional[str] = None


@dataclass
class EnergySummary:
    rer: float
    der: float
    factor: float
    life_stage: LifeStage
    weight_kg: float


@dataclass
class TopperSplit:
    fraction: float
    topper_kcal: float
    remaining_kcal: float


@dataclass
class PackInfo:
    pack_size_g: float
    packs_per_day: float
    packs_per_month: int
    grams_per_day: float


def calculate_rer(weight_kg: float) -> float:
    """
    Calculate Resting Energy Requirement (RER).

    Formula: RER = 70 × (weight_kg ^ 0.75)

    Args:
        weight_kg: Dog's weight in kilograms

    Returns:
        RER in kcal/day
    """
    if weight_kg <= 0:
        raise ValueError("Weight must be positive")
    return 70 * (weight_kg ** 0.75)


def resolve_life_stage(profile: DogProfile) -> LifeStage:
    """Use the declared life stage, otherwise derive it from age."""
    if profile.life_stage is not None:
        return LifeStage(profile.life_stage)
    months = profile.age_months
    if months is None:
        return LifeStage.ADULT
    if months < PUPPY_MAX_MONTHS:
        return LifeStage.PUPPY
    if months > SENIOR_MIN_MONTHS:
        return LifeStage.SENIOR
    return LifeStage.ADULT


def get_der_factor(profile: DogProfile) -> float:
    """
    Determine the RER multiplier for a dog.

    Activity sets the baseline, life stage overrides it (puppies) or trims
    it (seniors), intact adults get at least the intact factor and the
    body condition score nudges the result up or down by 10%.

    Args:
        profile: Dog profile

    Returns:
        DER factor
    """
    bcs = profile.body_condition
    if bcs is not None and not 1 <= bcs <= 9:
        raise ValueError("Body condition score must be between 1 and 9")

    factor = DER_FACTORS["adult"]
    if profile.activity == ActivityLevel.LOW:
        factor = DER_FACTORS["low_activity"]
    elif profile.activity == ActivityLevel.HIGH:
        factor = DER_FACTORS["high_activity"]

    life_stage = resolve_life_stage(profile)
    if life_stage == LifeStage.PUPPY:
        months = profile.age_months
        if months is None:
            factor = DER_FACTORS["puppy_older"]
        elif months < 4:
            factor = DER_FACTORS["puppy_young"]
        elif months < PUPPY_MAX_MONTHS:
            factor = DER_FACTORS["puppy_older"]
        else:
            factor = DER_FACTORS["puppy_grown"]
    elif life_stage == LifeStage.SENIOR:
        factor = max(DER_FACTORS["senior_floor"], factor - SENIOR_REDUCTION)

    if not profile.neutered and life_stage == LifeStage.ADULT:
        factor = max(factor, DER_FACTORS["intact_adult_floor"])

    if bcs is not None:
        if bcs <= 3:
            factor *= UNDERWEIGHT_MULTIPLIER
        elif bcs >= 7:
            factor *= OVERWEIGHT_MULTIPLIER

    return factor


def calculate_der(profile: DogProfile) -> float:
    """
    Calculate Daily Energy Requirement (DER).

    Formula: DER = RER × factor

    Returns:
        DER in kcal/day
    """
    return calculate_rer(profile.weight_kg) * get_der_factor(profile)


def energy_summary(profile: DogProfile) -> EnergySummary:
    """RER, factor and DER in one pass."""
    weight_kg = profile.weight_kg
    rer = calculate_rer(weight_kg)
    factor = get_der_factor(profile)
    return EnergySummary(
        rer=rer,
        der=rer * factor,
        factor=factor,
        life_stage=resolve_life_stage(profile),
        weight_kg=weight_kg,
    )


def kcal_to_grams(desired_kcal: float, kcal_per_100g: float) -> float:
    """
    Convert desired calories to grams of food.

    Formula: grams = (desired_kcal / kcal_per_100g) × 100

    Args:
        desired_kcal: Target calories
        kcal_per_100g: Caloric density of the food

    Returns:
        Grams needed to achieve desired calories
    """
    if kcal_per_100g <= 0:
        raise ValueError("kcal_per_100g must be positive")
    return (desired_kcal / kcal_per_100g) * 100


def grams_to_kcal(grams: float, kcal_per_100g: float) -> float:
    """
    Convert grams to calories.

    Formula: kcal = (grams / 100) × kcal_per_100g
    """
    return (grams / 100) * kcal_per_100g


def calculate_daily_grams(der_kcal: float, kcal_per_100g: float) -> float:
    """Grams of food per day that deliver the DER at a given density."""
    return kcal_to_grams(der_kcal, kcal_per_100g)


def grams_per_meal(daily_grams: float, meals_per_day: int) -> float:
    """Split the daily amount evenly across meals."""
    if meals_per_day < 1:
        raise ValueError("meals_per_day must be at least 1")
    return daily_grams / meals_per_day


def calculate_topper_kcal(der_kcal: float, fraction: float) -> TopperSplit:
    """
    Split daily calories between a topper and the dog's existing food.

    Formula: topper = DER × fraction, remaining = DER - topper

    Args:
        der_kcal: Daily energy requirement
        fraction: Share of calories covered by fresh food (0.25, 0.5, 0.75)

    Returns:
        TopperSplit with kcal for each side
    """
    if fraction not in TOPPER_FRACTIONS:
        raise ValueError(f"Topper fraction must be one of {TOPPER_FRACTIONS}")
    topper_kcal = der_kcal * fraction
    return TopperSplit(
        fraction=fraction,
        topper_kcal=topper_kcal,
        remaining_kcal=max(0, der_kcal - topper_kcal),
    )


def get_pack_portion(daily_grams: float) -> PackInfo:
    """Express a daily amount in 12 oz packs."""
    packs_per_day = daily_grams / PACK_SIZE_G if daily_grams > 0 else 0
    return PackInfo(
        pack_size_g=PACK_SIZE_G,
        packs_per_day=packs_per_day,
        packs_per_month=math.ceil(packs_per_day * DAYS_PER_MONTH),
        grams_per_day=daily_grams,
    )


def calculate_batch_grams(daily_grams: float, days: int) -> float:
    """Grams to cook for a batch, including the kitchen waste buffer."""
    if days < 1:
        raise ValueError("days must be at least 1")
    return daily_grams * days * WASTE_BUFFER


def calculate_epa_dha_target(weight_kg: float) -> float:
    """
    Daily combined EPA + DHA target.

    Guideline: ~90 mg per 10 lb of body weight.
    """
    weight_lbs = to_lbs(weight_kg, WeightUnit.KG)
    return (weight_lbs / 10) * EPA_DHA_MG_PER_10_LBS


def fish_oil_ml(target_mg: float, epa_per_ml: float) -> float:
    """Millilitres of fish oil needed to reach an EPA target."""
    if epa_per_ml <= 0:
        raise ValueError("epa_per_ml must be positive")
    return target_mg / epa_per_ml
