"""Daily progress accumulation: goals met, streak and plant growth.

Each accumulation compares today's consumption to five daily goals, upserts
today's row into the 7-day and 30-day windows, then advances the streak and
the plant-growth meter.

Two growth policies exist because repeated accumulations within one day are
ambiguous (every logged meal triggers one):

- ``per_update`` applies the growth and streak step on every call, so
  logging three meals in one day grows the plant three times.
- ``per_day`` (default) credits each day at most once: only goals newly met
  since the previous call that day add growth, and the streak moves once per
  day. Repeating a call with unchanged consumption changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional

from nutrisprout.tracking.models import (
    Consumption,
    DailyStats,
    NutritionGoals,
    PlantStage,
    UserStats,
)

if TYPE_CHECKING:
    from nutrisprout.storage.base import Store

logger = logging.getLogger(__name__)

# Adherence tolerances
CALORIE_TOLERANCE = 0.05  # within +/-5% of goal
PROTEIN_MIN_RATIO = 0.95  # at least 95% of goal
CARBS_MAX_RATIO = 1.05  # at most 105% of goal
FAT_MAX_RATIO = 1.05

TOTAL_GOALS = 5
PROGRESS_PER_GOAL = 20
STAGE_COMPLETE = 100

WEEKLY_CAPACITY = 7
MONTHLY_CAPACITY = 30


class GrowthPolicy(Enum):
    """When plant growth and streak changes are applied."""

    PER_DAY = "per_day"
    PER_UPDATE = "per_update"


def count_goals_met(consumption: Consumption, goals: NutritionGoals) -> int:
    """Count how many of the five daily goals are met. No partial credit."""
    met = 0
    if (
        goals.calories * (1 - CALORIE_TOLERANCE)
        <= consumption.calories
        <= goals.calories * (1 + CALORIE_TOLERANCE)
    ):
        met += 1
    if consumption.protein >= goals.protein * PROTEIN_MIN_RATIO:
        met += 1
    if consumption.carbs <= goals.carbs * CARBS_MAX_RATIO:
        met += 1
    if consumption.fat <= goals.fat * FAT_MAX_RATIO:
        met += 1
    if consumption.water >= goals.water:
        met += 1
    return met


def build_daily_stats(
    day: date, consumption: Consumption, goals: NutritionGoals
) -> DailyStats:
    """Build the DailyStats row for a day."""
    return DailyStats(
        date=day,
        calories_consumed=consumption.calories,
        calories_goal=goals.calories,
        protein_consumed=consumption.protein,
        protein_goal=goals.protein,
        carbs_consumed=consumption.carbs,
        carbs_goal=goals.carbs,
        fat_consumed=consumption.fat,
        fat_goal=goals.fat,
        water_consumed=consumption.water,
        water_goal=goals.water,
        goals_met=count_goals_met(consumption, goals),
    )


def upsert_window(
    window: list[DailyStats], entry: DailyStats, capacity: int
) -> list[DailyStats]:
    """Insert or replace a day in a bounded window.

    An existing row for the same date is replaced in place. Otherwise the row
    is added and, past capacity, the oldest dates are evicted.

    Returns:
        A new list, oldest first; the input is not modified.
    """
    updated = list(window)
    for i, existing in enumerate(updated):
        if existing.date == entry.date:
            updated[i] = entry
            return updated

    updated.append(entry)
    updated.sort(key=lambda s: s.date)
    if len(updated) > capacity:
        updated = updated[-capacity:]
    return updated


def grow_plant(
    stage: PlantStage, progress: int, goals_met: int
) -> tuple[PlantStage, int]:
    """Add growth for goals met and advance stages.

    Every full 100 points advances one stage, carrying the remainder. At
    Mature, progress is clamped to 100 and stays there.
    """
    progress += goals_met * PROGRESS_PER_GOAL
    while progress >= STAGE_COMPLETE:
        if stage < PlantStage.MATURE:
            stage = PlantStage(stage + 1)
            progress -= STAGE_COMPLETE
        else:
            progress = STAGE_COMPLETE
            break
    return stage, progress


def next_streak(streak_days: int, goals_met: int) -> int:
    """Extend the streak on any goal met, otherwise break it."""
    return streak_days + 1 if goals_met > 0 else 0


def record_daily_progress(
    stats: UserStats,
    consumption: Consumption,
    goals: NutritionGoals,
    today: date,
    policy: GrowthPolicy = GrowthPolicy.PER_DAY,
) -> UserStats:
    """Accumulate today's consumption into a user's stats.

    Args:
        stats: Current stats (not modified)
        consumption: Total consumption so far today
        goals: Daily goals to compare against
        today: Calendar day being accumulated
        policy: When growth and streak changes apply

    Returns:
        Updated stats with last_updated set to today.
    """
    daily = build_daily_stats(today, consumption, goals)
    goals_met = daily.goals_met

    weekly = upsert_window(stats.weekly_stats, daily, WEEKLY_CAPACITY)
    monthly = upsert_window(stats.monthly_stats, daily, MONTHLY_CAPACITY)

    if policy == GrowthPolicy.PER_UPDATE:
        stage, progress = grow_plant(stats.plant_stage, stats.plant_progress, goals_met)
        streak = next_streak(stats.streak_days, goals_met)
        credited_date = today
        credited_goals = goals_met
    else:
        seen_today = stats.credited_date == today
        already = stats.credited_goals if seen_today else 0
        newly_met = max(0, goals_met - already)
        stage, progress = grow_plant(stats.plant_stage, stats.plant_progress, newly_met)

        if goals_met > 0 and already == 0:
            streak = stats.streak_days + 1
        elif goals_met == 0 and not seen_today:
            streak = 0
        else:
            # Today's streak change has already been applied
            streak = stats.streak_days

        credited_date = today
        credited_goals = max(already, goals_met)

    return replace(
        stats,
        streak_days=streak,
        plant_stage=stage,
        plant_progress=progress,
        weekly_stats=weekly,
        monthly_stats=monthly,
        last_updated=today,
        credited_date=credited_date,
        credited_goals=credited_goals,
    )


@dataclass
class ProgressSummary:
    """Display-oriented view of a user's stats."""

    stage_label: str
    plant_progress: int
    streak_days: int
    days_tracked: int
    average_goals_met: float
    perfect_days: int

    def to_dict(self) -> dict:
        return {
            "stage": self.stage_label,
            "plant_progress": self.plant_progress,
            "streak_days": self.streak_days,
            "days_tracked": self.days_tracked,
            "average_goals_met": self.average_goals_met,
            "perfect_days": self.perfect_days,
        }


def summarize(stats: UserStats, window: Optional[list[DailyStats]] = None) -> ProgressSummary:
    """Summarize stats over a window (weekly by default)."""
    rows = stats.weekly_stats if window is None else window
    average = sum(r.goals_met for r in rows) / len(rows) if rows else 0.0
    return ProgressSummary(
        stage_label=stats.plant_stage.label,
        plant_progress=stats.plant_progress,
        streak_days=stats.streak_days,
        days_tracked=len(rows),
        average_goals_met=round(average, 1),
        perfect_days=sum(1 for r in rows if r.goals_met == TOTAL_GOALS),
    )


class ProgressTracker:
    """Runs accumulations against a session's store.

    The store decides where state lives (relational store, local storage, or
    both); the tracker only loads, updates and saves full snapshots.
    """

    def __init__(
        self,
        store: "Store",
        default_goals: Optional[NutritionGoals] = None,
        policy: GrowthPolicy = GrowthPolicy.PER_DAY,
    ):
        self.store = store
        self.default_goals = default_goals or NutritionGoals()
        self.policy = policy

    def goals(self) -> NutritionGoals:
        """Daily goals: profile overrides on top of the defaults."""
        profile = self.store.load_profile()
        if profile is None:
            return self.default_goals
        return self.default_goals.with_overrides(
            calories=profile.daily_calories_target,
            protein=profile.daily_protein_target,
            carbs=profile.daily_carbs_target,
            fat=profile.daily_fat_target,
            water=profile.daily_water_target,
        )

    def load(self, today: Optional[date] = None) -> UserStats:
        """Load stats, initializing and saving defaults when none exist."""
        stats = self.store.load_stats()
        if stats is None:
            logger.info("No statistics found, creating initial record")
            stats = UserStats.default(today)
            self.store.save_stats(stats)
        return stats

    def consumption_for(self, day: date) -> Consumption:
        """Total consumption logged for a day."""
        meals = self.store.meals_for_date(day)
        water = self.store.water_for_date(day)
        return Consumption.from_meals(meals, water=water)

    def record(self, consumption: Consumption, today: Optional[date] = None) -> UserStats:
        """Accumulate a known consumption for today and save the result."""
        today = today or date.today()
        stats = self.load(today)
        updated = record_daily_progress(
            stats, consumption, self.goals(), today, policy=self.policy
        )
        self.store.save_stats(updated)
        return updated

    def record_today(self, today: Optional[date] = None) -> UserStats:
        """Accumulate whatever the store has logged for today."""
        today = today or date.today()
        return self.record(self.consumption_for(today), today)

    def needs_update(self, today: Optional[date] = None) -> bool:
        """True when the date has moved past the last accumulation."""
        today = today or date.today()
        stats = self.store.load_stats()
        return stats is None or stats.last_updated != today

    def reset(self, today: Optional[date] = None) -> UserStats:
        """Reset to default stats and save them."""
        stats = UserStats.default(today)
        self.store.save_stats(stats)
        return stats
