from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, JSON, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from nouripet.core.database import Base
from nouripet.core.pricing import WEEKS_PER_MONTH


class Dog(Base):
    __tablename__ = "dogs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    breed = Column(String, nullable=True)
    age = Column(Float, nullable=True)
    age_unit = Column(String, default="years")
    sex = Column(String, nullable=True)
    neutered = Column(Boolean, default=True)
    weight = Column(Float, nullable=False)
    weight_unit = Column(String, default="lb")
    activity_level = Column(String, default="moderate")
    body_condition = Column(Integer, nullable=True)  # 1-9
    life_stage = Column(String, nullable=True)       # Derived from age when empty
    allergens = Column(JSON, default=list)
    medical_condition = Column(String, nullable=True)

    # Health goals
    target_weight = Column(Float, nullable=True)
    weight_goal = Column(String, nullable=True)
    goal_weight_management = Column(Boolean, default=False)
    goal_skin_coat = Column(Boolean, default=False)
    goal_joints = Column(Boolean, default=False)
    goal_digestive_health = Column(Boolean, default=False)

    target_daily_kcal = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    weight_logs = relationship("WeightLog", back_populates="dog", cascade="all, delete-orphan")
    stool_logs = relationship("StoolLog", back_populates="dog", cascade="all, delete-orphan")
    plan_items = relationship("FeedingPlanItem", back_populates="dog", cascade="all, delete-orphan")


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Per 100g as fed
    kcal_per_100g = Column(Float, nullable=False)
    protein = Column(Float, default=0)
    fat = Column(Float, default=0)
    carbs = Column(Float, default=0)
    fiber = Column(Float, default=0)
    moisture = Column(Float, default=0)
    calcium_mg = Column(Float, default=0)
    phosphorus_mg = Column(Float, default=0)
    epa_mg = Column(Float, default=0)
    dha_mg = Column(Float, default=0)

    allergens = Column(JSON, default=list)
    aafco_life_stage = Column(String, default="adult")
    sustainability_score = Column(Integer, nullable=True)
    is_prescription = Column(Boolean, default=False)
    condition_id = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    prices = relationship("RecipePrice", back_populates="recipe", cascade="all, delete-orphan")


class RecipePrice(Base):
    """Stripe price for one recipe, size tier, cadence and Stripe mode."""
    __tablename__ = "recipe_prices"
    __table_args__ = (
        UniqueConstraint("recipe_id", "mode", "cadence", "tier", name="uq_recipe_price"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False)
    mode = Column(String, nullable=False)      # "test" or "live"
    cadence = Column(String, nullable=False)   # "weekly" or "biweekly"
    tier = Column(String, nullable=False)      # "small", "medium", "large", "xl"
    price_id = Column(String, nullable=False)
    amount_cents = Column(Integer, nullable=False)
    interval = Column(String, default="week")
    interval_count = Column(Integer, default=1)
    product_name = Column(String, nullable=True)

    recipe = relationship("Recipe", back_populates="prices")


class FeedingPlan(Base):
    __tablename__ = "feeding_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    cadence = Column(String, default="weekly")
    meals_per_day = Column(Integer, default=2)
    stripe_mode = Column(String, default="test")
    total_cost_per_week = Column(Float, default=0)
    total_cost_per_month = Column(Float, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    items = relationship("FeedingPlanItem", back_populates="plan", cascade="all, delete-orphan")

    def refresh_totals(self, items=None):
        """Recompute plan totals from its items."""
        items = self.items if items is None else items
        self.total_cost_per_week = round(sum(item.cost_per_week for item in items), 2)
        self.total_cost_per_month = round(self.total_cost_per_week * WEEKS_PER_MONTH, 2)


class FeedingPlanItem(Base):
    """Portion and price for one dog within a plan."""
    __tablename__ = "feeding_plan_items"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("feeding_plans.id"), nullable=False)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False)
    recipe_slugs = Column(JSON, default=list)
    daily_kcal = Column(Float, nullable=False)
    kcal_per_100g = Column(Float, nullable=False)
    daily_grams = Column(Float, nullable=False)
    grams_per_meal = Column(Float, nullable=False)
    price_per_100g = Column(Float, default=0)
    cost_per_day = Column(Float, default=0)
    cost_per_week = Column(Float, default=0)
    cost_per_month = Column(Float, default=0)
    tier = Column(String, nullable=False)
    source = Column(String, nullable=False)  # "stripe" or "fallback"
    price_id = Column(String, nullable=True)

    plan = relationship("FeedingPlan", back_populates="items")
    dog = relationship("Dog", back_populates="plan_items")


class WeightLog(Base):
    __tablename__ = "weight_logs"

    id = Column(Integer, primary_key=True, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False)
    weight = Column(Float, nullable=False)  # In the dog's weight unit
    notes = Column(Text, nullable=True)
    logged_at = Column(DateTime, default=datetime.utcnow, index=True)

    dog = relationship("Dog", back_populates="weight_logs")


class StoolLog(Base):
    __tablename__ = "stool_logs"

    id = Column(Integer, primary_key=True, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id"), nullable=False)
    score = Column(Integer, nullable=False)  # 1 (hard) - 7 (liquid)
    notes = Column(Text, nullable=True)
    logged_at = Column(DateTime, default=datetime.utcnow, index=True)

    dog = relationship("Dog", back_populates="stool_logs")
