"""Follow-up suggestions derived from a dog's weight and stool logs."""

import enum
import logging
import statistics
from typing import Optional
from datetime import datetime, timedelta
from dataclasses import dataclass

from nouripet.core.calculations import DogProfile, ActivityLevel, WeightGoal
from nouripet.core.pricing import get_size_tier, SizeTier
from nouripet.core.scoring import LARGE_BREED_KEYWORDS
from nouripet.core.units import age_in_years

logger = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 30
RECENT_WINDOW_DAYS = 14
PORTION_CHANGE_PCT = 5
VET_ADVISORY_PCT = 10
HIGH_ACTIVITY_MIN_KCAL = 1000


class Priority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass
class WeightEntry:
    logged_at: datetime
    weight: float


@dataclass
class StoolEntry:
    logged_at: datetime
    score: int


@dataclass
class Insight:
    id: str
    type: str  # "nutrition", "health", "portion" or "supplement"
    title: str
    description: str
    action: str
    priority: Priority
    reason: str


def weight_change_pct(weights: list[WeightEntry], now: datetime) -> float:
    """Percent change from the first entry in the last 30 days to the latest entry."""
    if len(weights) < 2:
        return 0.0
    ordered = sorted(weights, key=lambda w: w.logged_at)
    last = ordered[-1].weight
    cutoff = now - timedelta(days=TREND_WINDOW_DAYS)
    base = next((w.weight for w in ordered if w.logged_at >= cutoff), ordered[0].weight)
    if not base:
        return 0.0
    return (last - base) / base * 100


def median_stool(stools: list[StoolEntry]) -> Optional[float]:
    if not stools:
        return None
    return statistics.median(s.score for s in stools)


def _has_recent(entries: list, now: datetime) -> bool:
    cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
    return any(e.logged_at >= cutoff for e in entries)


def _is_large_breed(profile: DogProfile) -> bool:
    if profile.breed and any(keyword in profile.breed for keyword in LARGE_BREED_KEYWORDS):
        return True
    return get_size_tier(profile.weight_lbs) in (SizeTier.LARGE, SizeTier.XL)


def build_insights(profile: DogProfile, weights: list[WeightEntry], stools: list[StoolEntry],
                   weight_goal: Optional[WeightGoal] = None, daily_kcal: Optional[float] = None,
                   now: Optional[datetime] = None) -> list[Insight]:
    """
    Build follow-up suggestions for one dog.

    Args:
        profile: Dog profile
        weights: Weight log entries in any order
        stools: Stool log entries (1-7 scale)
        weight_goal: Goal from the active plan, defaults to maintain
        daily_kcal: Daily kcal from the active plan
        now: Reference time, defaults to the current UTC time

    Returns:
        Insights ordered high, medium, then low priority
    """
    now = now or datetime.utcnow()
    goal = weight_goal or WeightGoal.MAINTAIN
    change = weight_change_pct(weights, now)
    median = median_stool(stools)
    recent_stools = _has_recent(stools, now)
    recent_weights = _has_recent(weights, now)
    age = age_in_years(profile.age, profile.age_unit) if profile.age is not None else None

    insights: list[Insight] = []

    if change >= PORTION_CHANGE_PCT and goal != WeightGoal.GAIN:
        insights.append(Insight(
            id="portion-down",
            type="portion",
            title="Consider reducing daily portions",
            description="Trend shows weight gain over the past month.",
            action="Adjust portions",
            priority=Priority.MEDIUM,
            reason=f"Weight change ≈ +{change:.1f}% in ~30 days.",
        ))

    if change <= -PORTION_CHANGE_PCT and goal != WeightGoal.LOSE:
        insights.append(Insight(
            id="portion-up",
            type="portion",
            title="Consider increasing daily portions",
            description="Trend shows weight loss over the past month.",
            action="Adjust portions",
            priority=Priority.MEDIUM,
            reason=f"Weight change ≈ {change:.1f}% in ~30 days.",
        ))

    if median is not None and recent_stools:
        if median <= 2:
            insights.append(Insight(
                id="stool-firm",
                type="nutrition",
                title="Add fiber or split meals",
                description="Recent logs indicate firm stools.",
                action="See recipe tips",
                priority=Priority.MEDIUM,
                reason=f"Median stool ≈ {median:g}.",
            ))
        elif median >= 4:
            insights.append(Insight(
                id="stool-soft",
                type="nutrition",
                title="Try lower-fat recipe or add soluble fiber",
                description="Softer stools in recent logs.",
                action="See recipe tips",
                priority=Priority.MEDIUM,
                reason=f"Median stool ≈ {median:g}.",
            ))

    large_breed_early = age is not None and age >= 3 and _is_large_breed(profile)
    if (age is not None and age >= 4) or large_breed_early:
        insights.append(Insight(
            id="joint-support",
            type="supplement",
            title="Add joint support supplement",
            description="Preventative support for joints and mobility.",
            action="Add joint blend",
            priority=Priority.LOW,
            reason=f"Age {age:g}{', large breed' if large_breed_early else ''}.",
        ))

    if profile.activity == ActivityLevel.HIGH and daily_kcal and daily_kcal < HIGH_ACTIVITY_MIN_KCAL:
        insights.append(Insight(
            id="activity-mismatch",
            type="portion",
            title="Consider increasing portions for high activity",
            description="High activity level may require more calories.",
            action="Adjust portions",
            priority=Priority.LOW,
            reason="High activity level with current calorie intake.",
        ))

    if profile.medical_condition and "pancreatitis" in profile.medical_condition.lower():
        insights.append(Insight(
            id="medical-low-fat",
            type="nutrition",
            title="Maintain low-fat diet",
            description="Keep current low-fat recipe for pancreatitis management.",
            action="Review recipe",
            priority=Priority.HIGH,
            reason="Pancreatitis requires low-fat diet.",
        ))

    if abs(change) >= VET_ADVISORY_PCT:
        logger.info("Weight changed %.1f%% in 30 days for dog %s", change, profile.name)
        insights.append(Insight(
            id="vet-advisory",
            type="health",
            title="Noticeable weight change, consider a vet check",
            description="Large changes can have underlying causes.",
            action="Find local vet",
            priority=Priority.HIGH,
            reason=f"Weight change ≈ {change:.1f}% in ~30 days.",
        ))

    if not recent_stools or not recent_weights:
        insights.append(Insight(
            id="log-nudge",
            type="health",
            title="Keep logs for better insights",
            description="Add stool and weight entries to keep plans optimized.",
            action="Log entries",
            priority=Priority.LOW,
            reason="Insufficient recent data.",
        ))

    return sorted(insights, key=lambda i: PRIORITY_ORDER[i.priority])
