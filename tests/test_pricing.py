"""Tests for the pricing resolver."""

import logging

import pytest
from nouripet.core.calculations import DogProfile, RecipeProfile
from nouripet.core.config import Settings
from nouripet.core.exceptions import NoEnergyDensityError
from nouripet.core.medical import PRESCRIPTION_DIETS
from nouripet.core.pricing import (
    SizeTier,
    PriceEntry,
    PricingSource,
    get_size_tier,
    resolve_price_entry,
    get_base_price_per_100g,
    active_energy_density,
    price_plan,
    validate_price_invariance,
    price_topper,
)
from nouripet.core.units import WeightUnit

BEEF = RecipeProfile(slug="beef-quinoa-harvest", name="Beef & Quinoa Harvest", kcal_per_100g=175)
CHICKEN = RecipeProfile(slug="low-fat-chicken-garden-veggie", name="Low-Fat Chicken & Garden Veggie", kcal_per_100g=165)


def weekly_table():
    return {
        BEEF.slug: [
            PriceEntry(BEEF.slug, SizeTier.SMALL, "price_small", 2900),
            PriceEntry(BEEF.slug, SizeTier.MEDIUM, "price_medium", 4700),
            PriceEntry(BEEF.slug, SizeTier.LARGE, "price_large", 6900),
            PriceEntry(BEEF.slug, SizeTier.XL, "price_xl", 8700),
        ]
    }


class TestSizeTiers:
    """Tests for weight to tier mapping."""

    def test_tier_boundaries(self):
        assert get_size_tier(0) == SizeTier.SMALL
        assert get_size_tier(20) == SizeTier.SMALL
        assert get_size_tier(20.5) == SizeTier.SMALL
        assert get_size_tier(21) == SizeTier.MEDIUM
        assert get_size_tier(50.9) == SizeTier.MEDIUM
        assert get_size_tier(51) == SizeTier.LARGE
        assert get_size_tier(90.5) == SizeTier.LARGE
        assert get_size_tier(91) == SizeTier.XL
        assert get_size_tier(150) == SizeTier.XL


class TestResolvePriceEntry:
    """Tests for price table lookup."""

    def test_entry_for_tier(self):
        entry = resolve_price_entry(weekly_table(), BEEF.slug, 30)
        assert entry.price_id == "price_medium"

    def test_missing_tier_uses_first_entry(self):
        table = {BEEF.slug: weekly_table()[BEEF.slug][:2]}
        entry = resolve_price_entry(table, BEEF.slug, 120)
        assert entry.price_id == "price_small"

    def test_unknown_recipe(self):
        assert resolve_price_entry(weekly_table(), "mystery-stew", 30) is None
        assert resolve_price_entry({"mystery-stew": []}, "mystery-stew", 30) is None

    def test_biweekly_weekly_cost(self):
        entry = PriceEntry(BEEF.slug, SizeTier.MEDIUM, "price_bi", 9400, interval_count=2)
        assert entry.weekly_cost == 47.0


class TestBasePrice:
    """Tests for the per-100g fallback price."""

    def test_by_tier(self):
        assert get_base_price_per_100g(10) == 1.0
        assert get_base_price_per_100g(30) == 0.85
        assert get_base_price_per_100g(70) == 0.75
        assert get_base_price_per_100g(100) == 0.7

    def test_medical_surcharge(self):
        assert get_base_price_per_100g(30, is_medical=True) == 1.0625


class TestPricePlan:
    """Tests for plan pricing."""

    def test_stripe_pricing(self):
        profile = DogProfile(weight=30, age=4)
        pricing = price_plan(profile, [BEEF], weekly_table(), meals_per_day=2, der=1000)

        assert pricing.source == PricingSource.STRIPE
        assert pricing.price_id == "price_medium"
        assert pricing.tier == SizeTier.MEDIUM
        assert pricing.daily_grams == 571.4
        assert pricing.grams_per_meal == 285.7
        assert pricing.cost_per_week == 47.0
        assert pricing.cost_per_day == 6.71
        assert pricing.cost_per_month == pytest.approx(203.51)
        assert pricing.price_per_100g == pytest.approx(1.175)

    def test_fallback_pricing(self):
        profile = DogProfile(weight=30, age=4)
        pricing = price_plan(profile, [BEEF], {}, der=1000)

        assert pricing.source == PricingSource.FALLBACK
        assert pricing.price_id is None
        assert pricing.price_per_100g == 0.85
        assert pricing.cost_per_day == pytest.approx(4.86)
        assert pricing.cost_per_week == pytest.approx(34.0)
        assert pricing.cost_per_month == pytest.approx(147.22)

    def test_price_ignores_meals_per_day(self):
        profile = DogProfile(weight=30, age=4)
        for table in (weekly_table(), {}):
            two = price_plan(profile, [BEEF], table, meals_per_day=2, der=1000)
            three = price_plan(profile, [BEEF], table, meals_per_day=3, der=1000)
            assert two.cost_per_day == three.cost_per_day
            assert two.grams_per_meal != three.grams_per_meal
            assert validate_price_invariance(two.cost_per_day, three.cost_per_day)

    def test_multiple_recipes_average_density(self):
        profile = DogProfile(weight=30, age=4)
        pricing = price_plan(profile, [BEEF, CHICKEN], weekly_table(), der=1020)
        assert pricing.kcal_per_100g == 170
        assert pricing.daily_grams == 600.0
        assert pricing.primary_slug == BEEF.slug
        assert pricing.source == PricingSource.STRIPE

    def test_prescription_density_and_surcharge(self):
        renal = PRESCRIPTION_DIETS[0].to_recipe_profile()
        profile = DogProfile(weight=30, age=9, medical_condition="kidney-disease")
        pricing = price_plan(profile, [BEEF, renal], weekly_table(), der=950)
        assert pricing.kcal_per_100g == 95
        assert pricing.daily_grams == 1000.0
        assert pricing.primary_slug == "renal-support"
        assert pricing.is_medical
        assert pricing.source == PricingSource.FALLBACK
        assert pricing.price_per_100g == 1.0625

    def test_calculated_der_by_default(self):
        profile = DogProfile(weight=10, weight_unit=WeightUnit.KG, age=4)
        pricing = price_plan(profile, [BEEF], weekly_table())
        assert pricing.der == round(70 * 10 ** 0.75 * 1.6, 1)

    def test_requires_a_recipe(self):
        with pytest.raises(NoEnergyDensityError):
            price_plan(DogProfile(weight=30, age=4), [], weekly_table())
        with pytest.raises(ValueError):
            active_energy_density([])


class TestPriceInvariance:
    """Tests for the invariance check."""

    def test_within_tolerance(self):
        assert validate_price_invariance(10.0, 10.005)

    def test_violation_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="nouripet.core.pricing"):
            assert not validate_price_invariance(10.0, 10.02)
        assert "Price invariance violation" in caplog.text


class TestTopper:
    """Tests for topper quotes."""

    def test_half_topper(self):
        quote = price_topper(DogProfile(weight=30, age=4), BEEF, 0.5, der=1000)
        assert quote.tier == SizeTier.MEDIUM
        assert quote.topper_kcal == 500
        assert quote.remaining_kcal == 500
        assert quote.daily_grams == 285.7
        assert quote.biweekly_price == 47
        assert quote.weekly_price == 23.5

    def test_small_quarter_topper(self):
        quote = price_topper(DogProfile(weight=12, age=4), BEEF, 0.25, der=400)
        assert quote.biweekly_price == 15

    def test_invalid_fraction(self):
        with pytest.raises(ValueError):
            price_topper(DogProfile(weight=30, age=4), BEEF, 0.4, der=1000)


class TestStripeMode:
    """Tests for Stripe mode detection."""

    def test_defaults_to_test(self):
        assert Settings(STRIPE_SECRET_KEY="", STRIPE_PUBLISHABLE_KEY="").stripe_mode == "test"

    def test_live_key(self):
        assert Settings(STRIPE_SECRET_KEY="sk_live_abc").stripe_mode == "live"
        assert Settings(STRIPE_SECRET_KEY="", STRIPE_PUBLISHABLE_KEY="pk_live_abc").stripe_mode == "live"

    def test_test_key(self):
        assert Settings(STRIPE_SECRET_KEY="sk_test_abc").stripe_mode == "test"
