"""Tests for medical conditions and prescription diets."""

import pytest
from nouripet.core.medical import (
    MedicalCondition,
    NutrientRange,
    PRESCRIPTION_DIETS,
    get_medical_condition,
    get_prescription_diets,
    validate_nutritional_compliance,
)


def diet(diet_id):
    return next(d for d in PRESCRIPTION_DIETS if d.id == diet_id)


class TestLookups:
    """Tests for condition and diet lookups."""

    def test_known_condition(self):
        condition = get_medical_condition("kidney-disease")
        assert condition.name == "Kidney Disease"
        assert condition.required_nutrients["phosphorus"].max == 0.4

    def test_unknown_condition(self):
        assert get_medical_condition("unknown") is None

    def test_diets_for_condition(self):
        assert [d.id for d in get_prescription_diets("heart-disease")] == ["cardiac-support"]
        assert get_prescription_diets("diabetes") == []

    def test_recipe_profile(self):
        profile = diet("renal-support").to_recipe_profile()
        assert profile.kcal_per_100g == 95
        assert profile.is_prescription
        assert profile.condition_id == "kidney-disease"
        assert profile.calcium == pytest.approx(600)
        assert profile.phosphorus == pytest.approx(350)


class TestCompliance:
    """Tests for nutrient limit checks."""

    def test_each_diet_fits_its_condition(self):
        for prescription in PRESCRIPTION_DIETS:
            condition = get_medical_condition(prescription.condition_id)
            result = validate_nutritional_compliance(prescription, condition)
            assert result.compliant, prescription.id
            assert result.violations == []

    def test_renal_diet_fails_pancreatitis(self):
        result = validate_nutritional_compliance(diet("renal-support"), get_medical_condition("pancreatitis"))
        assert not result.compliant
        assert result.violations == [
            "fat exceeds maximum limit (12 > 8)",
            "protein below minimum requirement (16 < 22)",
        ]

    def test_target_recommendation(self):
        condition = MedicalCondition(
            id="custom",
            name="Custom",
            description="",
            dietary_restrictions=[],
            required_nutrients={"protein": NutrientRange(target=25), "fat": NutrientRange(target=12)},
        )
        result = validate_nutritional_compliance(diet("renal-support"), condition)
        assert result.compliant
        assert result.recommendations == ["Consider adjusting protein closer to target value of 25"]
