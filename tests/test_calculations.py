"""Tests for core calculation functions."""

import pytest
from nouripet.core.calculations import (
    DogProfile,
    ActivityLevel,
    LifeStage,
    calculate_rer,
    calculate_der,
    get_der_factor,
    resolve_life_stage,
    energy_summary,
    kcal_to_grams,
    grams_to_kcal,
    calculate_daily_grams,
    grams_per_meal,
    calculate_topper_kcal,
    get_pack_portion,
    calculate_batch_grams,
    calculate_epa_dha_target,
    fish_oil_ml,
    DER_FACTORS,
    PACK_SIZE_G,
)
from nouripet.core.units import WeightUnit, AgeUnit


def adult(**overrides):
    data = dict(weight=10, weight_unit=WeightUnit.KG, age=3, age_unit=AgeUnit.YEARS)
    data.update(overrides)
    return DogProfile(**data)


class TestRERCalculation:
    """Tests for Resting Energy Requirement calculation."""

    def test_rer_10kg_dog(self):
        """Test RER for a 10kg dog."""
        # RER = 70 * (10 ^ 0.75) = 70 * 5.623 = 393.62
        rer = calculate_rer(10)
        assert round(rer, 2) == 393.62

    def test_rer_20kg_dog(self):
        """Test RER for a 20kg dog."""
        # RER = 70 * (20 ^ 0.75) = 70 * 9.457 = 662.0
        rer = calculate_rer(20)
        assert round(rer, 1) == 662.0

    def test_rer_5kg_dog(self):
        """Test RER for a small 5kg dog."""
        rer = calculate_rer(5)
        assert round(rer, 2) == 234.08

    def test_rer_invalid_weight(self):
        """Test RER with invalid weight raises error."""
        with pytest.raises(ValueError):
            calculate_rer(0)
        with pytest.raises(ValueError):
            calculate_rer(-5)


class TestLifeStage:
    """Tests for life stage resolution."""

    def test_derived_from_age(self):
        assert resolve_life_stage(adult(age=11, age_unit=AgeUnit.MONTHS)) == LifeStage.PUPPY
        assert resolve_life_stage(adult(age=12, age_unit=AgeUnit.MONTHS)) == LifeStage.ADULT
        assert resolve_life_stage(adult(age=7)) == LifeStage.ADULT
        assert resolve_life_stage(adult(age=85, age_unit=AgeUnit.MONTHS)) == LifeStage.SENIOR

    def test_senior_starts_after_84_months(self):
        assert resolve_life_stage(adult(age=84, age_unit=AgeUnit.MONTHS)) == LifeStage.ADULT
        assert resolve_life_stage(adult(age=7)) == LifeStage.ADULT

    def test_unknown_age_is_adult(self):
        assert resolve_life_stage(adult(age=None)) == LifeStage.ADULT

    def test_explicit_stage_wins(self):
        profile = adult(age=2, life_stage=LifeStage.SENIOR)
        assert resolve_life_stage(profile) == LifeStage.SENIOR


class TestDERFactors:
    """Tests for DER factor determination."""

    def test_neutered_adult(self):
        """Test factor for neutered adult dog."""
        factor = get_der_factor(adult())
        assert factor == DER_FACTORS["adult"]
        assert factor == 1.6

    def test_activity_levels(self):
        assert get_der_factor(adult(activity=ActivityLevel.LOW)) == 1.35
        assert get_der_factor(adult(activity=ActivityLevel.HIGH)) == 1.9

    def test_young_puppy(self):
        """Puppies under 4 months get the highest factor."""
        profile = adult(age=3, age_unit=AgeUnit.MONTHS)
        assert get_der_factor(profile) == 3.0

    def test_older_puppy(self):
        profile = adult(age=8, age_unit=AgeUnit.MONTHS, activity=ActivityLevel.HIGH)
        assert get_der_factor(profile) == 2.0

    def test_declared_puppy_past_twelve_months(self):
        profile = adult(age=14, age_unit=AgeUnit.MONTHS, life_stage=LifeStage.PUPPY)
        assert get_der_factor(profile) == 1.8

    def test_declared_puppy_without_age(self):
        profile = adult(age=None, life_stage=LifeStage.PUPPY)
        assert get_der_factor(profile) == 2.0

    def test_senior_reduction(self):
        """Seniors lose 0.1 from the activity factor, down to 1.3."""
        assert get_der_factor(adult(age=10)) == pytest.approx(1.5)
        assert get_der_factor(adult(age=10, activity=ActivityLevel.LOW)) == 1.3

    def test_intact_adult_floor(self):
        assert get_der_factor(adult(neutered=False)) == 1.8
        assert get_der_factor(adult(neutered=False, activity=ActivityLevel.HIGH)) == 1.9

    def test_intact_floor_skips_puppies(self):
        profile = adult(age=8, age_unit=AgeUnit.MONTHS, neutered=False)
        assert get_der_factor(profile) == 2.0

    def test_body_condition_adjustments(self):
        assert get_der_factor(adult(body_condition=2)) == pytest.approx(1.76)
        assert get_der_factor(adult(body_condition=8)) == pytest.approx(1.44)
        assert get_der_factor(adult(body_condition=5)) == 1.6

    def test_body_condition_out_of_range(self):
        with pytest.raises(ValueError):
            get_der_factor(adult(body_condition=0))
        with pytest.raises(ValueError):
            get_der_factor(adult(body_condition=10))


class TestDERCalculation:
    """Tests for Daily Energy Requirement calculation."""

    def test_der_neutered_adult(self):
        der = calculate_der(adult())
        assert der == pytest.approx(calculate_rer(10) * 1.6)

    def test_der_uses_pounds(self):
        profile = DogProfile(weight=22.0462, weight_unit=WeightUnit.LB, age=3)
        assert calculate_der(profile) == pytest.approx(calculate_rer(10) * 1.6, rel=1e-4)

    def test_energy_summary(self):
        summary = energy_summary(adult(activity=ActivityLevel.HIGH))
        assert summary.factor == 1.9
        assert summary.life_stage == LifeStage.ADULT
        assert summary.der == pytest.approx(summary.rer * 1.9)
        assert summary.weight_kg == 10


class TestConversions:
    """Tests for kcal/gram conversions."""

    def test_kcal_to_grams(self):
        """Test converting kcal to grams."""
        # 500 kcal at 200 kcal/100g = 250g
        assert kcal_to_grams(500, 200) == 250

    def test_kcal_to_grams_invalid_density(self):
        with pytest.raises(ValueError):
            kcal_to_grams(500, 0)
        with pytest.raises(ValueError):
            calculate_daily_grams(500, -1)

    def test_grams_to_kcal(self):
        """Test converting grams to kcal."""
        # 250g at 200 kcal/100g = 500 kcal
        assert grams_to_kcal(250, 200) == 500

    def test_daily_grams(self):
        assert calculate_daily_grams(700, 175) == pytest.approx(400)

    def test_grams_per_meal(self):
        assert grams_per_meal(300, 2) == 150
        assert grams_per_meal(300, 3) == 100

    def test_grams_per_meal_requires_a_meal(self):
        with pytest.raises(ValueError):
            grams_per_meal(300, 0)


class TestTopperAndPortions:
    """Tests for topper splits, packs and batches."""

    def test_topper_split(self):
        split = calculate_topper_kcal(1000, 0.25)
        assert split.topper_kcal == 250
        assert split.remaining_kcal == 750

    def test_topper_invalid_fraction(self):
        with pytest.raises(ValueError):
            calculate_topper_kcal(1000, 0.3)

    def test_one_pack_a_day(self):
        pack = get_pack_portion(PACK_SIZE_G)
        assert pack.packs_per_day == 1.0
        assert pack.packs_per_month == 30

    def test_packs_round_up(self):
        pack = get_pack_portion(PACK_SIZE_G / 2 + 1)
        assert pack.packs_per_month == 16

    def test_no_food_no_packs(self):
        pack = get_pack_portion(0)
        assert pack.packs_per_day == 0
        assert pack.packs_per_month == 0

    def test_batch_includes_waste_buffer(self):
        assert calculate_batch_grams(200, 7) == pytest.approx(1540)

    def test_batch_requires_a_day(self):
        with pytest.raises(ValueError):
            calculate_batch_grams(200, 0)


class TestOmegaTargets:
    """Tests for EPA/DHA targets."""

    def test_epa_dha_target(self):
        # 10 kg = 22.0462 lb -> 2.20462 * 90 mg
        assert calculate_epa_dha_target(10) == pytest.approx(198.4158)

    def test_fish_oil_ml(self):
        assert fish_oil_ml(300, 150) == 2

    def test_fish_oil_invalid_concentration(self):
        with pytest.raises(ValueError):
            fish_oil_ml(300, 0)
