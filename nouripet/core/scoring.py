"""
Recipe scoring and recommendations.

Every catalog recipe starts at a base score of 50 and collects points for
each rule its macro profile satisfies for the given dog. The two highest
scoring recipes are recommended, the next three are offered as alternatives.
"""

import logging
from typing import Optional
from dataclasses import dataclass, field

from nouripet.core.calculations import (
    DogProfile,
    RecipeProfile,
    ActivityLevel,
    WeightGoal,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MAX_CONFIDENCE = 95
MIN_CONFIDENCE_WITH_DATA = 60
PRESCRIPTION_CONFIDENCE = 95
TOP_RECIPES = 2
MAX_ALTERNATIVES = 3

LARGE_BREED_KEYWORDS = ["German Shepherd", "Golden Retriever", "Labrador", "Great Dane", "Mastiff"]
SMALL_BREED_KEYWORDS = ["Chihuahua", "Yorkshire", "Maltese", "Pomeranian", "Papillon"]

CONFIDENCE_LEVELS = [
    (85, "very-high", "Very High Match"),
    (70, "high", "High Match"),
    (55, "moderate", "Moderate Match"),
    (0, "needs-more-info", "Needs More Info"),
]


@dataclass
class ScoringFactor:
    factor: str
    points: int
    description: str
    impact: str    # "high", "medium" or "low"
    category: str  # "age", "activity", "weight", "health", "breed", "portions"


@dataclass
class ScoredRecipe:
    recipe: RecipeProfile
    score: int = BASE_SCORE
    reasons: list[str] = field(default_factory=list)
    nutritional_focus: list[str] = field(default_factory=list)
    factors: list[ScoringFactor] = field(default_factory=list)

    @property
    def reasoning(self) -> str:
        return ", ".join(self.reasons)

    def add(self, points: int, reason: str, focus: str, factor: str,
            description: str, impact: str, category: str) -> None:
        self.score += points
        self.reasons.append(reason)
        self.nutritional_focus.append(focus)
        self.factors.append(ScoringFactor(factor, points, description, impact, category))

    def top_factors(self, limit: int) -> list[ScoringFactor]:
        return sorted(self.factors, key=lambda f: f.points, reverse=True)[:limit]


@dataclass
class ConfidenceBreakdown:
    base_score: int
    adjustments: list[ScoringFactor]
    total_score: int
    confidence_level: str
    label: str


@dataclass
class Alternative:
    recipe_slug: str
    recipe_name: str
    confidence: int
    reasoning: str
    difference_from_top: str


@dataclass
class Recommendation:
    dog_id: Optional[int]
    dog_name: str
    recommended_recipes: list[str] = field(default_factory=list)
    reasoning: str = ""
    confidence: int = 0
    nutritional_focus: list[str] = field(default_factory=list)
    factors_considered: list[ScoringFactor] = field(default_factory=list)
    confidence_breakdown: Optional[ConfidenceBreakdown] = None
    missing_data: list[str] = field(default_factory=list)
    edge_cases: list[str] = field(default_factory=list)
    alternatives: list[Alternative] = field(default_factory=list)


@dataclass
class MealVariety:
    shared_meals: list[str]
    individual_meals: dict[Optional[int], list[str]]
    reasoning: str


def calculate_confidence(score: float) -> tuple[str, str]:
    """Map a 0-100 score to a (level, label) pair."""
    percentage = min(100, max(0, score))
    for threshold, level, label in CONFIDENCE_LEVELS:
        if percentage >= threshold:
            return level, label
    return CONFIDENCE_LEVELS[-1][1], CONFIDENCE_LEVELS[-1][2]


def _weight_change_pct(profile: DogProfile) -> Optional[float]:
    goals = profile.health_goals
    if not goals or not goals.target_weight or not profile.weight:
        return None
    return abs(profile.weight - goals.target_weight) / profile.weight * 100


def score_recipe(profile: DogProfile, recipe: RecipeProfile) -> ScoredRecipe:
    """
    Score one recipe against a dog profile.

    Args:
        profile: Dog profile including health goals
        recipe: Candidate recipe

    Returns:
        ScoredRecipe with the total score, reasons and scoring factors
    """
    scored = ScoredRecipe(recipe=recipe)
    kcal = recipe.kcal_per_100g

    months = profile.age_months
    if months is not None:
        if months < 12:
            if recipe.protein >= 45:
                scored.add(15, "high protein for growing puppy", "growth-support",
                           "Puppy Growth Nutrition",
                           f"High protein ({recipe.protein}%) supports rapid growth phase",
                           "high", "age")
        elif months > 84:
            if recipe.fiber >= 8:
                scored.add(10, "higher fiber for senior digestion", "digestive-health",
                           "Senior Digestive Support",
                           f"Higher fiber ({recipe.fiber}%) aids senior digestion",
                           "medium", "age")

    if profile.activity == ActivityLevel.HIGH and kcal >= 170:
        scored.add(12, "higher calories for active lifestyle", "energy-support",
                   "High Activity Energy",
                   f"Calorie-dense ({kcal} kcal/100g) for active lifestyle",
                   "high", "activity")
    elif profile.activity == ActivityLevel.LOW and kcal <= 160:
        scored.add(10, "moderate calories for less active dogs", "weight-management",
                   "Low Activity Portion Control",
                   f"Moderate calories ({kcal} kcal/100g) for less active dogs",
                   "medium", "activity")

    bcs = profile.body_condition
    if bcs:
        if bcs <= 3 and recipe.fat >= 15:
            scored.add(15, "higher fat content to support healthy weight gain", "weight-gain",
                       "Underweight - Weight Gain Support",
                       f"Higher fat ({recipe.fat}%) for healthy weight gain (body condition: {bcs}/9)",
                       "high", "weight")
        elif bcs >= 7 and recipe.fat <= 15:
            scored.add(12, "lower fat content for weight management", "weight-loss",
                       "Overweight - Weight Management",
                       f"Lower fat ({recipe.fat}%) for weight management (body condition: {bcs}/9)",
                       "high", "weight")

    goals = profile.health_goals
    if goals:
        omega = recipe.epa + recipe.dha
        if goals.skin_coat and omega >= 100:
            scored.add(10, "omega fatty acids for skin and coat health", "skin-coat-support",
                       "Skin & Coat Health",
                       f"Omega-3s ({omega}mg) support healthy skin and coat",
                       "medium", "health")
        if goals.joints and recipe.protein >= 45:
            scored.add(8, "high-quality protein for joint support", "joint-support",
                       "Joint Health Support",
                       f"High protein ({recipe.protein}%) maintains muscle to support joints",
                       "medium", "health")
        if goals.digestive_health and recipe.fiber >= 8:
            scored.add(10, "optimal fiber for digestive health", "digestive-support",
                       "Digestive Health",
                       f"Optimal fiber ({recipe.fiber}%) promotes healthy digestion",
                       "medium", "health")

    if profile.breed:
        if any(keyword in profile.breed for keyword in LARGE_BREED_KEYWORDS):
            if recipe.calcium >= 1200 and recipe.phosphorus >= 900:
                scored.add(8, "balanced calcium/phosphorus for large breed bone health", "bone-health",
                           "Large Breed Bone Health",
                           f"Balanced Ca:P ratio ({recipe.calcium}:{recipe.phosphorus}mg) for large breed joints",
                           "medium", "breed")
        elif any(keyword in profile.breed for keyword in SMALL_BREED_KEYWORDS):
            if kcal >= 165:
                scored.add(6, "nutrient-dense formula ideal for small breeds", "small-breed-nutrition",
                           "Small Breed Nutrient Density",
                           f"Nutrient-dense ({kcal} kcal/100g) ideal for small breed metabolism",
                           "low", "breed")

    change_pct = _weight_change_pct(profile)
    if change_pct is not None:
        _score_weight_goal(scored, profile, change_pct)

    if goals and goals.target_weight and profile.daily_kcal:
        if goals.weight_goal == WeightGoal.LOSE:
            if recipe.protein >= 25 and recipe.fiber >= 6:
                scored.add(8, "high protein and fiber to maintain satiety with smaller portions",
                           "portion-optimization", "Portion Satiety",
                           f"Protein ({recipe.protein}%) + fiber ({recipe.fiber}%) keeps "
                           f"{profile.name} satisfied with smaller portions",
                           "medium", "portions")
        elif goals.weight_goal == WeightGoal.GAIN:
            if kcal >= 170:
                scored.add(10, "calorie-dense formula allows smaller volume increases",
                           "efficient-portions", "Efficient Portion Increases",
                           f"Calorie-dense ({kcal} kcal/100g) allows smaller portion increases",
                           "medium", "portions")

    return scored


def _score_weight_goal(scored: ScoredRecipe, profile: DogProfile, change_pct: float) -> None:
    recipe = scored.recipe
    kcal = recipe.kcal_per_100g
    current = profile.weight
    target = profile.health_goals.target_weight
    goal = profile.health_goals.weight_goal
    unit = profile.weight_unit.value

    if goal == WeightGoal.LOSE and current > target:
        if recipe.fat <= 12 and recipe.fiber >= 8:
            scored.add(18, f"lower fat ({recipe.fat}%) and higher fiber for weight loss goal",
                       "weight-loss", "Weight Loss Formula",
                       f"Lower fat ({recipe.fat}%) + higher fiber ({recipe.fiber}%) for weight loss "
                       f"({current}→{target} {unit})",
                       "high", "weight")
        if recipe.protein >= 25:
            scored.add(12, "higher protein to maintain muscle during weight loss",
                       "muscle-maintenance", "Muscle Maintenance During Weight Loss",
                       f"High protein ({recipe.protein}%) preserves lean muscle mass",
                       "high", "weight")
        if kcal <= 155:
            scored.add(15, "lower calorie density for weight management",
                       "calorie-control", "Calorie Control",
                       f"Lower calorie density ({kcal} kcal/100g) for portion control",
                       "high", "weight")
    elif goal == WeightGoal.GAIN and current < target:
        if recipe.fat >= 15 and recipe.protein >= 25:
            scored.add(16, f"higher fat ({recipe.fat}%) and protein for healthy weight gain",
                       "weight-gain", "Weight Gain Formula",
                       f"Higher fat ({recipe.fat}%) + protein ({recipe.protein}%) for healthy weight gain "
                       f"({current}→{target} {unit})",
                       "high", "weight")
        if kcal >= 170:
            scored.add(14, "higher calorie density to support weight gain",
                       "calorie-dense", "Calorie Dense for Weight Gain",
                       f"High calorie density ({kcal} kcal/100g) supports weight gain",
                       "high", "weight")
    elif goal == WeightGoal.MAINTAIN:
        if 12 <= recipe.fat <= 16:
            scored.add(10, "balanced fat content for weight maintenance",
                       "weight-maintenance", "Weight Maintenance Balance",
                       f"Balanced fat ({recipe.fat}%) for maintaining {target} {unit}",
                       "medium", "weight")
        if 160 <= kcal <= 170:
            scored.add(8, "moderate calorie density for stable weight",
                       "balanced-nutrition", "Stable Calorie Balance",
                       f"Moderate calories ({kcal} kcal/100g) for stable weight",
                       "medium", "weight")

    if change_pct > 15:
        scored.add(5, "prioritized for significant weight adjustment needed",
                   "weight-adjustment", "Significant Weight Adjustment Priority",
                   f"Urgent weight management needed ({change_pct:.1f}% change)",
                   "low", "weight")


def _prescription_recommendation(profile: DogProfile, recipes: list[RecipeProfile]) -> Optional[Recommendation]:
    condition = profile.medical_condition
    if not condition or condition == "other":
        return None

    match = next(
        (r for r in recipes if r.is_prescription and r.condition_id == condition),
        None,
    )
    if match is None:
        logger.info("No prescription recipe for condition %s, using regular scoring", condition)
        return None

    factor = ScoringFactor(
        factor="Prescription Medical Diet",
        points=PRESCRIPTION_CONFIDENCE,
        description=f"Veterinary therapeutic formula for {condition}",
        impact="high",
        category="health",
    )
    level, label = calculate_confidence(PRESCRIPTION_CONFIDENCE)
    return Recommendation(
        dog_id=profile.dog_id,
        dog_name=profile.name,
        recommended_recipes=[match.slug],
        reasoning=(
            f"Prescription diet recommended for {condition}. This therapeutic formula is "
            "specifically designed to support your dog's medical condition."
        ),
        confidence=PRESCRIPTION_CONFIDENCE,
        nutritional_focus=["medical-support", "therapeutic-nutrition"],
        factors_considered=[factor],
        confidence_breakdown=ConfidenceBreakdown(
            base_score=PRESCRIPTION_CONFIDENCE,
            adjustments=[],
            total_score=PRESCRIPTION_CONFIDENCE,
            confidence_level=level,
            label=label,
        ),
    )


def _profile_reasoning(profile: DogProfile, primary_benefits: str) -> str:
    activity = profile.activity.value if profile.activity else "unknown"
    age = f"{profile.age:g} {profile.age_unit.value}" if profile.age is not None else "unknown age"
    text = f"Based on {profile.name}'s profile ({age} old, {activity} activity, {profile.breed or 'unknown breed'})"

    goals = profile.health_goals
    if goals and goals.target_weight and profile.weight:
        unit = profile.weight_unit.value
        if goals.weight_goal == WeightGoal.LOSE:
            text += f" and weight loss goal ({profile.weight:g} → {goals.target_weight:g} {unit})"
        elif goals.weight_goal == WeightGoal.GAIN:
            text += f" and weight gain goal ({profile.weight:g} → {goals.target_weight:g} {unit})"
        elif goals.weight_goal == WeightGoal.MAINTAIN:
            text += f" and weight maintenance goal ({goals.target_weight:g} {unit})"

    if profile.daily_kcal:
        text += f" and current portion plan ({profile.daily_kcal:g} kcal/day)"

    return f"{text}, I recommend these recipes because they provide {primary_benefits}."


def _missing_data(profile: DogProfile) -> list[str]:
    missing = []
    if not profile.breed:
        missing.append("Breed information for breed-specific recommendations")
    if not profile.body_condition:
        missing.append("Body condition score for weight management guidance")
    if not profile.health_goals or profile.health_goals.is_empty():
        missing.append("Health goals for targeted nutrition")
    return missing


def _edge_cases(profile: DogProfile) -> list[str]:
    edge_cases = []
    change_pct = _weight_change_pct(profile)
    if change_pct is not None and change_pct > 20:
        edge_cases.append(
            f"Significant weight change goal ({change_pct:.1f}%) - veterinary consultation recommended"
        )
    if len(profile.allergens) >= 3:
        edge_cases.append(
            f"Multiple allergen restrictions ({len(profile.allergens)}) may limit recipe options"
        )
    months = profile.age_months
    if months is not None and months < 6:
        edge_cases.append("Very young puppy - consult veterinarian for specialized puppy nutrition")
    return edge_cases


def _default_focus(profile: DogProfile) -> list[str]:
    focus = []
    months = profile.age_months
    if months is not None and months > 84:
        focus.append("senior-support")
    if profile.activity == ActivityLevel.HIGH:
        focus.append("energy-support")
    elif profile.activity == ActivityLevel.MODERATE:
        focus.append("balanced-nutrition")
    elif profile.activity == ActivityLevel.LOW:
        focus.append("weight-management")
    focus.append("overall-health")
    return focus


def recommend_recipes(profile: DogProfile, recipes: list[RecipeProfile]) -> Recommendation:
    """
    Rank catalog recipes for one dog.

    A medical condition with a matching prescription recipe short-circuits
    the ranking. Otherwise recipes containing one of the dog's allergens are
    dropped, the rest are scored and sorted (ties keep catalog order).

    Args:
        profile: Dog profile
        recipes: Full catalog, prescription recipes included

    Returns:
        Recommendation for the dog
    """
    prescription = _prescription_recommendation(profile, recipes)
    if prescription is not None:
        return prescription

    allergens = set(profile.allergens)
    eligible = [
        r for r in recipes
        if not r.is_prescription and not allergens.intersection(r.allergens)
    ]

    recommendation = Recommendation(dog_id=profile.dog_id, dog_name=profile.name)
    recommendation.missing_data = _missing_data(profile)
    recommendation.edge_cases = _edge_cases(profile)

    if not eligible:
        logger.warning("All recipes excluded for dog %s (allergens=%s)", profile.name, sorted(allergens))
        recommendation.reasoning = "No recipes are free of the selected allergens."
        recommendation.nutritional_focus = _default_focus(profile)
        return recommendation

    scored = sorted(
        (score_recipe(profile, recipe) for recipe in eligible),
        key=lambda s: s.score,
        reverse=True,
    )
    top = scored[:TOP_RECIPES]
    best = top[0]

    recommendation.recommended_recipes = [s.recipe.slug for s in top]
    recommendation.reasoning = _profile_reasoning(
        profile, best.reasoning or "balanced nutrition for optimal health"
    )

    has_sufficient_data = bool(
        profile.weight and profile.age
        and (profile.activity or profile.breed or profile.body_condition)
    )
    floor = MIN_CONFIDENCE_WITH_DATA if has_sufficient_data else 0
    recommendation.confidence = min(MAX_CONFIDENCE, max(floor, best.score))

    level, label = calculate_confidence(recommendation.confidence)
    recommendation.confidence_breakdown = ConfidenceBreakdown(
        base_score=BASE_SCORE,
        adjustments=best.top_factors(5),
        total_score=recommendation.confidence,
        confidence_level=level,
        label=label,
    )
    recommendation.factors_considered = best.top_factors(len(best.factors))

    for alt in scored[TOP_RECIPES:TOP_RECIPES + MAX_ALTERNATIVES]:
        names = ", ".join(f.factor for f in alt.top_factors(2))
        recommendation.alternatives.append(Alternative(
            recipe_slug=alt.recipe.slug,
            recipe_name=alt.recipe.name,
            confidence=min(MAX_CONFIDENCE, max(MIN_CONFIDENCE_WITH_DATA, alt.score)),
            reasoning=alt.reasoning or "Balanced nutrition",
            difference_from_top=f"{best.score - alt.score} points lower - {names}",
        ))

    focus = list(dict.fromkeys(tag for s in top for tag in s.nutritional_focus))
    recommendation.nutritional_focus = focus or _default_focus(profile)

    logger.debug(
        "Recommended %s for dog %s (confidence %s)",
        recommendation.recommended_recipes, profile.name, recommendation.confidence,
    )
    return recommendation


def recommend_meal_variety(profiles: list[DogProfile], recipes: list[RecipeProfile]) -> MealVariety:
    """
    Find recipes a multi-dog household can share.

    A recipe recommended to more than one dog is shared; each dog keeps the
    rest of its recommendations as individual meals.
    """
    recommendations = [recommend_recipes(p, recipes) for p in profiles]

    frequency: dict[str, int] = {}
    for rec in recommendations:
        for slug in rec.recommended_recipes:
            frequency[slug] = frequency.get(slug, 0) + 1
    shared = [slug for slug, count in frequency.items() if count > 1]

    individual = {}
    for rec in recommendations:
        own = [slug for slug in rec.recommended_recipes if slug not in shared]
        if own:
            individual[rec.dog_id] = own

    reasoning = ""
    if shared:
        reasoning += f"{len(shared)} recipe(s) work well for multiple dogs in your pack. "
    if individual:
        reasoning += f"{len(individual)} dog(s) have specific nutritional needs requiring individual recipes."

    return MealVariety(
        shared_meals=shared,
        individual_meals=individual,
        reasoning=reasoning.strip() or "All dogs can share the same meals based on their similar nutritional needs.",
    )
