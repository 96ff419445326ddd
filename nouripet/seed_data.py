"""
Seed data for the NouriPet database.

Includes:
- The four fresh recipes of the catalog
- Prescription diets (listed but not orderable)
- Stripe prices per recipe, size tier, cadence and Stripe mode
"""

import logging

from nouripet.core.config import settings
from nouripet.core.database import session_scope, engine, Base
from nouripet.core.log import configure_logging
from nouripet.core.medical import PRESCRIPTION_DIETS
from nouripet.core.pricing import SizeTier, TIER_LABELS
from nouripet.models.models import Recipe, RecipePrice

logger = logging.getLogger(__name__)

RECIPES = [
    {
        "slug": "beef-quinoa-harvest",
        "name": "Beef & Quinoa Harvest",
        "description": "Lean beef with quinoa and seasonal vegetables.",
        "kcal_per_100g": 175,
        "protein": 48, "fat": 16, "carbs": 22, "fiber": 7, "moisture": 7,
        "calcium_mg": 1150, "phosphorus_mg": 880, "epa_mg": 180, "dha_mg": 120,
        "allergens": ["beef"],
        "aafco_life_stage": "adult",
        "sustainability_score": 90,
    },
    {
        "slug": "lamb-pumpkin-feast",
        "name": "Lamb & Pumpkin Feast",
        "description": "Pasture-raised lamb with pumpkin for sensitive stomachs.",
        "kcal_per_100g": 170,
        "protein": 46, "fat": 15, "carbs": 24, "fiber": 8, "moisture": 7,
        "calcium_mg": 1150, "phosphorus_mg": 850, "epa_mg": 150, "dha_mg": 100,
        "allergens": ["lamb"],
        "aafco_life_stage": "adult",
        "sustainability_score": 91,
    },
    {
        "slug": "low-fat-chicken-garden-veggie",
        "name": "Low-Fat Chicken & Garden Veggie",
        "description": "Chicken breast and garden vegetables, suitable for all life stages.",
        "kcal_per_100g": 165,
        "protein": 45, "fat": 15, "carbs": 25, "fiber": 8, "moisture": 7,
        "calcium_mg": 1200, "phosphorus_mg": 900, "epa_mg": 50, "dha_mg": 80,
        "allergens": ["chicken", "egg"],
        "aafco_life_stage": "all",
        "sustainability_score": 92,
    },
    {
        "slug": "turkey-brown-rice-comfort",
        "name": "Turkey & Brown Rice Comfort",
        "description": "Ground turkey with brown rice and greens.",
        "kcal_per_100g": 168,
        "protein": 47, "fat": 14, "carbs": 26, "fiber": 7, "moisture": 6,
        "calcium_mg": 1180, "phosphorus_mg": 870, "epa_mg": 160, "dha_mg": 110,
        "allergens": ["turkey"],
        "aafco_life_stage": "adult",
        "sustainability_score": 89,
    },
]

TIERS = [SizeTier.SMALL, SizeTier.MEDIUM, SizeTier.LARGE, SizeTier.XL]
WEEKLY_AMOUNTS = [2900, 4700, 6900, 8700]
BIWEEKLY_AMOUNTS = [5800, 9400, 13800, 17400]

# Product name prefix used in Stripe, per recipe
PRODUCT_NAMES = {
    "beef-quinoa-harvest": "Beef & Quinoa Harvest",
    "lamb-pumpkin-feast": "Lamb & Pumpkin Feast",
    "low-fat-chicken-garden-veggie": "Chicken & Garden Veggie",
    "turkey-brown-rice-comfort": "Turkey & Brown Rice Comfort",
}

# Price IDs in tier order: small, medium, large, xl
LIVE_WEEKLY_PRICE_IDS = {
    "beef-quinoa-harvest": [
        "price_1SKqwA0WbfuHe9kAtFwQJJpC", "price_1SKqxh0WbfuHe9kAqrT9zev1",
        "price_1SKr010WbfuHe9kA6ici7Itt", "price_1SKr0U0WbfuHe9kAsrwjzjAt",
    ],
    "lamb-pumpkin-feast": [
        "price_1SKr0w0WbfuHe9kAa0hxVCHK", "price_1SKr1T0WbfuHe9kA6LiBOgO3",
        "price_1SKr1q0WbfuHe9kAsCidrsh9", "price_1SKr2l0WbfuHe9kAAOhmv5qP",
    ],
    "low-fat-chicken-garden-veggie": [
        "price_1SKr3Y0WbfuHe9kA1wFFHqKw", "price_1SKr3x0WbfuHe9kABRfAJ5de",
        "price_1SKr4a0WbfuHe9kAkiYk2ckP", "price_1SKr5Y0WbfuHe9kAn0wsixX6",
    ],
    "turkey-brown-rice-comfort": [
        "price_1SKr690WbfuHe9kAPmGhPxBD", "price_1SKr6o0WbfuHe9kA7xEryQBt",
        "price_1SKr770WbfuHe9kAZzxskUuo", "price_1SKr7r0WbfuHe9kAkBWHICvz",
    ],
}

# Live biweekly prices are one "Full Meal Plan" product shared by every recipe
LIVE_BIWEEKLY_PRICE_IDS = [
    "price_1SSTTg0WbfuHe9kAV61mhHJq", "price_1SSTTS0WbfuHe9kAF9BaE2bA",
    "price_1SSTTD0WbfuHe9kA5WzTgnc8", "price_1SSTSv0WbfuHe9kAKV9N9wea",
]

TEST_PRICE_IDS = {
    "beef-quinoa-harvest": [
        "price_1SOlze0R4BbWwBbfnGtRhmpr", "price_1SOlzQ0R4BbWwBbfHXu1vnVC",
        "price_1S33yk0R4BbWwBbfKd5aOJpk", "price_1S33zx0R4BbWwBbf1AC8sUHf",
    ],
    "lamb-pumpkin-feast": [
        "price_1SOlxL0R4BbWwBbfFfZJAx0A", "price_1SOlx40R4BbWwBbfsBTtag7d",
        "price_1SOlwj0R4BbWwBbfVVtzIQCO", "price_1S348p0R4BbWwBbfHoE8iLIi",
    ],
    "low-fat-chicken-garden-veggie": [
        "price_1SOlyb0R4BbWwBbfElVciayU", "price_1SOlyG0R4BbWwBbfFa0nVZOH",
        "price_1SOlxy0R4BbWwBbflsEWYE34", "price_1S343o0R4BbWwBbf5RVMEC8L",
    ],
    "turkey-brown-rice-comfort": [
        "price_1SOlvp0R4BbWwBbfa5xkLVd9", "price_1SOlvT0R4BbWwBbfPgFG1MH9",
        "price_1S8kuf0R4BbWwBbfRB6gwhiA", "price_1S8kww0R4BbWwBbfGsB8CiwP",
    ],
}

# Test biweekly reuses the weekly IDs except where a dedicated price exists
TEST_BIWEEKLY_OVERRIDES = {
    ("lamb-pumpkin-feast", SizeTier.SMALL): "price_1SRg1U0R4BbWwBbfjVHM4nam",
}


def build_price_rows(slug: str) -> list[dict]:
    """All price rows for one recipe, both Stripe modes and both cadences."""
    name = PRODUCT_NAMES[slug]
    rows = []
    for i, tier in enumerate(TIERS):
        label = TIER_LABELS[tier]
        rows.append({
            "mode": "live", "cadence": "weekly", "tier": tier.value,
            "price_id": LIVE_WEEKLY_PRICE_IDS[slug][i],
            "amount_cents": WEEKLY_AMOUNTS[i], "interval": "week", "interval_count": 1,
            "product_name": f"{name} – {label} (Weekly)",
        })
        rows.append({
            "mode": "live", "cadence": "biweekly", "tier": tier.value,
            "price_id": LIVE_BIWEEKLY_PRICE_IDS[i],
            "amount_cents": BIWEEKLY_AMOUNTS[i], "interval": "week", "interval_count": 2,
            "product_name": f"Full Meal Plan – {label} (Every Two Weeks)",
        })
        rows.append({
            "mode": "test", "cadence": "weekly", "tier": tier.value,
            "price_id": TEST_PRICE_IDS[slug][i],
            "amount_cents": WEEKLY_AMOUNTS[i], "interval": "week", "interval_count": 1,
            "product_name": f"{name} – {label} (Weekly)",
        })
        rows.append({
            "mode": "test", "cadence": "biweekly", "tier": tier.value,
            "price_id": TEST_BIWEEKLY_OVERRIDES.get((slug, tier), TEST_PRICE_IDS[slug][i]),
            "amount_cents": BIWEEKLY_AMOUNTS[i], "interval": "week", "interval_count": 2,
            "product_name": f"{name} – {label} (Every Two Weeks)",
        })
    return rows


def seed_recipes(db):
    """Seed the fresh recipes and their Stripe prices."""
    for recipe_data in RECIPES:
        existing = db.query(Recipe).filter(Recipe.slug == recipe_data["slug"]).first()
        if existing:
            continue
        recipe = Recipe(**recipe_data)
        recipe.prices = [RecipePrice(**row) for row in build_price_rows(recipe_data["slug"])]
        db.add(recipe)

    db.commit()
    logger.info("Recipes and prices seeded.")


def seed_prescription_diets(db):
    """Seed prescription diets. They have no Stripe prices yet."""
    for diet in PRESCRIPTION_DIETS:
        existing = db.query(Recipe).filter(Recipe.slug == diet.id).first()
        if existing:
            continue
        profile = diet.to_recipe_profile()
        db.add(Recipe(
            slug=profile.slug,
            name=profile.name,
            description=diet.description,
            kcal_per_100g=profile.kcal_per_100g,
            protein=profile.protein,
            fat=profile.fat,
            fiber=profile.fiber,
            moisture=profile.moisture,
            calcium_mg=profile.calcium,
            phosphorus_mg=profile.phosphorus,
            allergens=[],
            is_prescription=True,
            condition_id=profile.condition_id,
        ))

    db.commit()
    logger.info("Prescription diets seeded.")


def seed_catalog(db):
    seed_recipes(db)
    seed_prescription_diets(db)


def run_seed():
    configure_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        seed_catalog(db)
    logger.info("Seed data complete!")


if __name__ == "__main__":
    run_seed()
