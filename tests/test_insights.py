"""Tests for log-driven insights."""

from datetime import datetime, timedelta

import pytest
from nouripet.core.calculations import DogProfile, ActivityLevel, WeightGoal
from nouripet.core.insights import (
    Priority,
    WeightEntry,
    StoolEntry,
    build_insights,
    weight_change_pct,
    median_stool,
)

NOW = datetime(2026, 3, 1, 12, 0)


def days_ago(days):
    return NOW - timedelta(days=days)


def weights(*points):
    return [WeightEntry(logged_at=days_ago(d), weight=w) for d, w in points]


def stools(*points):
    return [StoolEntry(logged_at=days_ago(d), score=s) for d, s in points]


def ids(insights):
    return [i.id for i in insights]


RECENT_STOOLS = stools((2, 3))


class TestTrendHelpers:
    """Tests for trend and median helpers."""

    def test_change_from_first_entry_in_window(self):
        log = weights((40, 40), (20, 50), (1, 53))
        assert weight_change_pct(log, NOW) == pytest.approx(6.0)

    def test_change_falls_back_to_first_entry(self):
        log = weights((60, 50), (45, 55))
        assert weight_change_pct(log, NOW) == pytest.approx(10.0)

    def test_change_needs_two_entries(self):
        assert weight_change_pct(weights((1, 50)), NOW) == 0

    def test_median(self):
        assert median_stool(stools((1, 1), (2, 2), (3, 3), (4, 4))) == 2.5
        assert median_stool([]) is None


class TestBuildInsights:
    """Tests for insight rules."""

    def test_weight_gain_suggests_smaller_portions(self):
        profile = DogProfile(weight=53, age=2)
        insights = build_insights(profile, weights((20, 50), (1, 53)), RECENT_STOOLS, now=NOW)
        assert ids(insights) == ["portion-down"]
        assert insights[0].reason == "Weight change ≈ +6.0% in ~30 days."

    def test_gain_goal_skips_portion_down(self):
        profile = DogProfile(weight=53, age=2)
        insights = build_insights(
            profile, weights((20, 50), (1, 53)), RECENT_STOOLS,
            weight_goal=WeightGoal.GAIN, now=NOW,
        )
        assert "portion-down" not in ids(insights)

    def test_weight_loss_suggests_larger_portions(self):
        profile = DogProfile(weight=47, age=2)
        insights = build_insights(profile, weights((20, 50), (1, 47)), RECENT_STOOLS, now=NOW)
        assert ids(insights) == ["portion-up"]

    def test_large_change_adds_vet_advisory_first(self):
        profile = DogProfile(weight=56, age=2)
        insights = build_insights(profile, weights((20, 50), (1, 56)), RECENT_STOOLS, now=NOW)
        assert ids(insights) == ["vet-advisory", "portion-down"]
        assert insights[0].priority == Priority.HIGH

    def test_soft_stool(self):
        profile = DogProfile(weight=30, age=2)
        insights = build_insights(profile, weights((1, 30)), stools((1, 5), (2, 4), (3, 6)), now=NOW)
        assert ids(insights) == ["stool-soft"]

    def test_firm_stool(self):
        profile = DogProfile(weight=30, age=2)
        insights = build_insights(profile, weights((1, 30)), stools((1, 1), (2, 2), (3, 2)), now=NOW)
        assert ids(insights) == ["stool-firm"]

    def test_old_logs_nudge(self):
        profile = DogProfile(weight=30, age=2)
        insights = build_insights(profile, weights((1, 30)), stools((20, 6)), now=NOW)
        assert ids(insights) == ["log-nudge"]

    def test_no_logs_nudge(self):
        insights = build_insights(DogProfile(weight=30, age=2), [], [], now=NOW)
        assert ids(insights) == ["log-nudge"]
        assert insights[0].priority == Priority.LOW

    def test_joint_support_by_age(self):
        profile = DogProfile(weight=30, age=5)
        insights = build_insights(profile, weights((1, 30)), RECENT_STOOLS, now=NOW)
        assert ids(insights) == ["joint-support"]
        assert insights[0].reason == "Age 5."

    def test_joint_support_large_breed(self):
        profile = DogProfile(weight=70, age=3, breed="Labrador Retriever")
        insights = build_insights(profile, weights((1, 70)), RECENT_STOOLS, now=NOW)
        assert ids(insights) == ["joint-support"]
        assert insights[0].reason == "Age 3, large breed."

    def test_activity_mismatch(self):
        profile = DogProfile(weight=30, age=2, activity=ActivityLevel.HIGH)
        insights = build_insights(profile, weights((1, 30)), RECENT_STOOLS, daily_kcal=900, now=NOW)
        assert ids(insights) == ["activity-mismatch"]

    def test_pancreatitis_first(self):
        profile = DogProfile(weight=30, age=5, medical_condition="pancreatitis")
        insights = build_insights(profile, [], [], now=NOW)
        assert ids(insights) == ["medical-low-fat", "joint-support", "log-nudge"]
