"""Meal logging and daily progress tracking."""

from nutrisprout.tracking.models import (
    Consumption,
    DailyStats,
    FoodItem,
    Meal,
    MealType,
    NutritionGoals,
    PlantStage,
    UserStats,
)
from nutrisprout.tracking.progress import (
    GrowthPolicy,
    ProgressSummary,
    ProgressTracker,
    count_goals_met,
    grow_plant,
    record_daily_progress,
    summarize,
    upsert_window,
)

__all__ = [
    "Consumption",
    "DailyStats",
    "FoodItem",
    "GrowthPolicy",
    "Meal",
    "MealType",
    "NutritionGoals",
    "PlantStage",
    "ProgressSummary",
    "ProgressTracker",
    "UserStats",
    "count_goals_met",
    "grow_plant",
    "record_daily_progress",
    "summarize",
    "upsert_window",
]
