"""Medical conditions and the prescription diets formulated for them."""

from typing import Optional
from dataclasses import dataclass, field

from nouripet.core.calculations import RecipeProfile

TARGET_TOLERANCE = 0.1


@dataclass
class NutrientRange:
    min: Optional[float] = None
    max: Optional[float] = None
    target: Optional[float] = None


@dataclass
class MedicalCondition:
    id: str
    name: str
    description: str
    dietary_restrictions: list[str]
    required_nutrients: dict[str, NutrientRange]
    contraindications: list[str] = field(default_factory=list)


@dataclass
class PrescriptionDiet:
    """Nutritional profile values are percentages, calories are kcal per 100g."""
    id: str
    name: str
    condition_id: str
    description: str
    nutritional_profile: dict[str, float]
    vet_approved: bool = True
    prescription_required: bool = True
    availability_status: str = "coming-soon"

    @property
    def kcal_per_100g(self) -> float:
        return self.nutritional_profile["calories"]

    def to_recipe_profile(self) -> RecipeProfile:
        nutrients = self.nutritional_profile
        return RecipeProfile(
            slug=self.id,
            name=self.name,
            kcal_per_100g=self.kcal_per_100g,
            protein=nutrients.get("protein", 0),
            fat=nutrients.get("fat", 0),
            fiber=nutrients.get("fiber", 0),
            moisture=nutrients.get("moisture", 0),
            # Profile minerals are percentages, recipes carry mg per 100g
            calcium=nutrients.get("calcium", 0) * 1000,
            phosphorus=nutrients.get("phosphorus", 0) * 1000,
            is_prescription=True,
            condition_id=self.condition_id,
        )


@dataclass
class ComplianceResult:
    compliant: bool
    violations: list[str]
    recommendations: list[str]


MEDICAL_CONDITIONS = [
    MedicalCondition(
        id="kidney-disease",
        name="Kidney Disease",
        description="Chronic kidney disease requiring reduced phosphorus and protein",
        dietary_restrictions=["high-phosphorus", "excessive-protein"],
        required_nutrients={
            "protein": NutrientRange(min=14, max=18),
            "phosphorus": NutrientRange(max=0.4),
            "sodium": NutrientRange(max=0.3),
            "omega3": NutrientRange(min=0.4),
        },
        contraindications=["organ-meat", "fish-meal", "bone-meal"],
    ),
    MedicalCondition(
        id="liver-disease",
        name="Liver Disease",
        description="Hepatic conditions requiring modified protein and copper restriction",
        dietary_restrictions=["high-copper", "poor-quality-protein"],
        required_nutrients={
            "protein": NutrientRange(min=16, max=20),
            "copper": NutrientRange(max=7),
            "zinc": NutrientRange(min=120),
            "vitamin_e": NutrientRange(min=60),
        },
        contraindications=["organ-meat", "shellfish", "nuts"],
    ),
    MedicalCondition(
        id="heart-disease",
        name="Heart Disease",
        description="Cardiac conditions requiring sodium restriction and taurine support",
        dietary_restrictions=["high-sodium", "excessive-fat"],
        required_nutrients={
            "sodium": NutrientRange(max=0.25),
            "taurine": NutrientRange(min=0.1),
            "carnitine": NutrientRange(min=200),
            "omega3": NutrientRange(min=0.4),
        },
        contraindications=["salt", "processed-meats", "high-sodium-vegetables"],
    ),
    MedicalCondition(
        id="diabetes",
        name="Diabetes",
        description="Blood sugar management through controlled carbohydrates and fiber",
        dietary_restrictions=["simple-carbs", "high-glycemic"],
        required_nutrients={
            "fiber": NutrientRange(min=8, max=15),
            "protein": NutrientRange(min=25),
            "fat": NutrientRange(max=12),
            "chromium": NutrientRange(min=0.2),
        },
        contraindications=["corn-syrup", "white-rice", "potatoes"],
    ),
    MedicalCondition(
        id="pancreatitis",
        name="Pancreatitis",
        description="Low-fat diet to reduce pancreatic stress and inflammation",
        dietary_restrictions=["high-fat", "rich-foods"],
        required_nutrients={
            "fat": NutrientRange(max=8),
            "fiber": NutrientRange(min=4),
            "protein": NutrientRange(min=22),
            "omega3": NutrientRange(min=0.3),
        },
        contraindications=["fatty-meats", "oils", "nuts", "seeds"],
    ),
]

PRESCRIPTION_DIETS = [
    PrescriptionDiet(
        id="renal-support",
        name="Renal Support Formula",
        condition_id="kidney-disease",
        description="Veterinary-formulated low-phosphorus diet for kidney health support",
        nutritional_profile={
            "protein": 16, "fat": 12, "fiber": 4, "moisture": 78, "ash": 4,
            "calories": 95, "phosphorus": 0.35, "sodium": 0.25, "potassium": 0.8, "calcium": 0.6,
        },
    ),
    PrescriptionDiet(
        id="hepatic-support",
        name="Hepatic Support Formula",
        condition_id="liver-disease",
        description="Copper-restricted diet with high-quality protein for liver health",
        nutritional_profile={
            "protein": 18, "fat": 8, "fiber": 3, "moisture": 75, "ash": 5,
            "calories": 88, "phosphorus": 0.6, "sodium": 0.3, "potassium": 0.9, "calcium": 0.8,
        },
    ),
    PrescriptionDiet(
        id="cardiac-support",
        name="Cardiac Support Formula",
        condition_id="heart-disease",
        description="Low-sodium diet with taurine and carnitine for heart health",
        nutritional_profile={
            "protein": 22, "fat": 10, "fiber": 5, "moisture": 76, "ash": 4.5,
            "calories": 92, "phosphorus": 0.7, "sodium": 0.2, "potassium": 1.1, "calcium": 0.9,
        },
    ),
]


def get_medical_condition(condition_id: str) -> Optional[MedicalCondition]:
    return next((c for c in MEDICAL_CONDITIONS if c.id == condition_id), None)


def get_prescription_diets(condition_id: str) -> list[PrescriptionDiet]:
    return [d for d in PRESCRIPTION_DIETS if d.condition_id == condition_id]


def validate_nutritional_compliance(diet: PrescriptionDiet, condition: MedicalCondition) -> ComplianceResult:
    """
    Check a prescription diet against a condition's nutrient limits.

    Nutrients the diet profile does not report are skipped.
    """
    violations = []
    recommendations = []

    for nutrient, limits in condition.required_nutrients.items():
        value = diet.nutritional_profile.get(nutrient)
        if value is None:
            continue
        if limits.min is not None and value < limits.min:
            violations.append(f"{nutrient} below minimum requirement ({value:g} < {limits.min:g})")
        if limits.max is not None and value > limits.max:
            violations.append(f"{nutrient} exceeds maximum limit ({value:g} > {limits.max:g})")
        if limits.target is not None and abs(value - limits.target) > limits.target * TARGET_TOLERANCE:
            recommendations.append(
                f"Consider adjusting {nutrient} closer to target value of {limits.target:g}"
            )

    return ComplianceResult(
        compliant=not violations,
        violations=violations,
        recommendations=recommendations,
    )
