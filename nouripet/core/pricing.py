"""
Plan pricing.

A plan is priced from the Stripe price table when the primary recipe has an
entry for the dog's size tier. Without one, the cost is derived from daily
grams and a per-100g base price. The number of meals per day only changes
how the daily amount is split, never the price.
"""

import enum
import logging
from typing import Optional
from dataclasses import dataclass

from nouripet.core.calculations import (
    DogProfile,
    RecipeProfile,
    PackInfo,
    calculate_der,
    calculate_daily_grams,
    calculate_topper_kcal,
    grams_per_meal,
    get_pack_portion,
)
from nouripet.core.exceptions import NoEnergyDensityError

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH = 4.33
DAYS_PER_WEEK = 7
INVARIANCE_TOLERANCE = 0.01
MEDICAL_SURCHARGE = 1.25


class SizeTier(str, enum.Enum):
    SMALL = "small"    # 5-20 lbs
    MEDIUM = "medium"  # 21-50 lbs
    LARGE = "large"    # 51-90 lbs
    XL = "xl"          # 91+ lbs


class Cadence(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


class PricingSource(str, enum.Enum):
    STRIPE = "stripe"
    FALLBACK = "fallback"


TIER_LABELS = {
    SizeTier.SMALL: "Small (5–20 lbs)",
    SizeTier.MEDIUM: "Medium (21–50 lbs)",
    SizeTier.LARGE: "Large (51–90 lbs)",
    SizeTier.XL: "XL (91+ lbs)",
}

# Upper bounds (exclusive) in lbs
TIER_BOUNDS = [
    (21, SizeTier.SMALL),
    (51, SizeTier.MEDIUM),
    (91, SizeTier.LARGE),
]

# Fallback price per 100g in dollars
BASE_PRICE_PER_100G = {
    SizeTier.SMALL: 1.00,
    SizeTier.MEDIUM: 0.85,
    SizeTier.LARGE: 0.75,
    SizeTier.XL: 0.70,
}

# Biweekly topper prices in dollars, keyed by percent of daily calories
TOPPER_PRICES = {
    SizeTier.SMALL: {25: 15, 50: 29, 75: 44},
    SizeTier.MEDIUM: {25: 24, 50: 47, 75: 71},
    SizeTier.LARGE: {25: 35, 50: 69, 75: 104},
    SizeTier.XL: {25: 44, 50: 87, 75: 131},
}


@dataclass
class PriceEntry:
    """One row of the Stripe price table."""
    recipe_slug: str
    tier: SizeTier
    price_id: str
    amount_cents: int
    interval: str = "week"
    interval_count: int = 1
    product_name: str = ""

    @property
    def weekly_cost(self) -> float:
        return self.amount_cents / 100 / max(1, self.interval_count)


# recipe slug -> entries
PriceTable = dict[str, list[PriceEntry]]


@dataclass
class PlanPricing:
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
    pack: PackInfo
    price_id: Optional[str] = None


@dataclass
class TopperQuote:
    recipe_slug: str
    tier: SizeTier
    fraction: float
    der: float
    topper_kcal: float
    remaining_kcal: float
    daily_grams: float
    biweekly_price: float
    weekly_price: float


def get_size_tier(weight_lbs: float) -> SizeTier:
    """Map a weight in pounds to its pricing tier."""
    for upper, tier in TIER_BOUNDS:
        if weight_lbs < upper:
            return tier
    return SizeTier.XL


def resolve_price_entry(table: PriceTable, recipe_slug: str, weight_lbs: float) -> Optional[PriceEntry]:
    """
    Find the price table entry for a recipe and dog weight.

    Args:
        table: Price table for the active Stripe mode and cadence
        recipe_slug: Recipe to price
        weight_lbs: Dog weight in pounds

    Returns:
        The entry for the dog's tier, the recipe's first entry when that tier
        is missing, or None when the recipe has no entries at all
    """
    entries = table.get(recipe_slug) or []
    if not entries:
        return None

    tier = get_size_tier(weight_lbs)
    for entry in entries:
        if entry.tier == tier:
            return entry

    logger.warning("No %s price for %s, using %s", tier.value, recipe_slug, entries[0].tier.value)
    return entries[0]


def get_base_price_per_100g(weight_lbs: float, is_medical: bool = False) -> float:
    """Fallback per-100g price in dollars."""
    price = BASE_PRICE_PER_100G[get_size_tier(weight_lbs)]
    if is_medical:
        price *= MEDICAL_SURCHARGE
    return round(price, 4)


def active_energy_density(recipes: list[RecipeProfile]) -> float:
    """
    Energy density used for portioning.

    A prescription recipe wins outright, several regular recipes are
    averaged, a single recipe is used as is.
    """
    if not recipes:
        raise NoEnergyDensityError("At least one recipe is required")
    for recipe in recipes:
        if recipe.is_prescription:
            return recipe.kcal_per_100g
    return sum(r.kcal_per_100g for r in recipes) / len(recipes)


def _primary_recipe(recipes: list[RecipeProfile]) -> RecipeProfile:
    return next((r for r in recipes if r.is_prescription), recipes[0])


def price_plan(profile: DogProfile, recipes: list[RecipeProfile], table: PriceTable,
               meals_per_day: int = 2, der: Optional[float] = None) -> PlanPricing:
    """
    Price a plan for one dog.

    Args:
        profile: Dog profile
        recipes: Selected recipes, first one drives the price lookup
        table: Price table for the active Stripe mode and cadence
        meals_per_day: Meals the daily amount is split into
        der: Daily kcal override, defaults to the calculated DER

    Returns:
        PlanPricing with grams, costs and the pricing source
    """
    if der is None:
        der = calculate_der(profile)

    density = active_energy_density(recipes)
    daily_grams = calculate_daily_grams(der, density)
    per_meal = grams_per_meal(daily_grams, meals_per_day)

    primary = _primary_recipe(recipes)
    weight_lbs = profile.weight_lbs
    is_medical = primary.is_prescription or bool(profile.medical_condition and profile.medical_condition != "other")

    entry = resolve_price_entry(table, primary.slug, weight_lbs)
    if entry is not None:
        cost_per_week = entry.weekly_cost
        cost_per_day = cost_per_week / DAYS_PER_WEEK
        price_per_100g = cost_per_day / daily_grams * 100 if daily_grams > 0 else 0
        source = PricingSource.STRIPE
    else:
        logger.info("No price table entry for %s, using per-100g fallback", primary.slug)
        price_per_100g = get_base_price_per_100g(weight_lbs, is_medical)
        cost_per_day = daily_grams / 100 * price_per_100g
        cost_per_week = cost_per_day * DAYS_PER_WEEK
        source = PricingSource.FALLBACK

    return PlanPricing(
        recipe_slugs=[r.slug for r in recipes],
        primary_slug=primary.slug,
        kcal_per_100g=round(density, 2),
        der=round(der, 1),
        daily_grams=round(daily_grams, 1),
        meals_per_day=meals_per_day,
        grams_per_meal=round(per_meal, 1),
        price_per_100g=round(price_per_100g, 4),
        cost_per_day=round(cost_per_day, 2),
        cost_per_week=round(cost_per_week, 2),
        cost_per_month=round(cost_per_week * WEEKS_PER_MONTH, 2),
        tier=get_size_tier(weight_lbs),
        source=source,
        is_medical=is_medical,
        pack=get_pack_portion(daily_grams),
        price_id=entry.price_id if entry else None,
    )


def validate_price_invariance(old_cost: float, new_cost: float,
                              tolerance: float = INVARIANCE_TOLERANCE) -> bool:
    """Check that a re-priced plan costs the same as before."""
    diff = abs(new_cost - old_cost)
    if diff < tolerance:
        return True
    logger.warning(
        "Price invariance violation: old=%.4f new=%.4f diff=%.4f tolerance=%s",
        old_cost, new_cost, diff, tolerance,
    )
    return False


def price_topper(profile: DogProfile, recipe: RecipeProfile, fraction: float,
                 der: Optional[float] = None) -> TopperQuote:
    """
    Quote a topper subscription.

    Args:
        profile: Dog profile
        recipe: Topper recipe
        fraction: Share of daily calories replaced (0.25, 0.5 or 0.75)
        der: Daily kcal override, defaults to the calculated DER

    Returns:
        TopperQuote with the biweekly price for the dog's tier
    """
    if der is None:
        der = calculate_der(profile)
    split = calculate_topper_kcal(der, fraction)
    tier = get_size_tier(profile.weight_lbs)
    biweekly = TOPPER_PRICES[tier][int(round(fraction * 100))]

    return TopperQuote(
        recipe_slug=recipe.slug,
        tier=tier,
        fraction=fraction,
        der=round(der, 1),
        topper_kcal=round(split.topper_kcal, 1),
        remaining_kcal=round(split.remaining_kcal, 1),
        daily_grams=round(calculate_daily_grams(split.topper_kcal, recipe.kcal_per_100g), 1),
        biweekly_price=biweekly,
        weekly_price=round(biweekly / 2, 2),
    )
