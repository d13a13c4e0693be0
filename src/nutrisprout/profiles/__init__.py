"""User metrics, profiles and calorie target calculation."""

from __future__ import annotations

from nutrisprout.profiles.body_calc import (
    ActivityLevel,
    Gender,
    Goal,
    MacroTargets,
    calculate_bmi,
    calculate_bmr,
    calculate_target_calories,
    calculate_tdee,
    resolve_target_calories,
)
from nutrisprout.profiles.models import UserMetrics, UserProfile, onboarding_metrics

__all__ = [
    "ActivityLevel",
    "Gender",
    "Goal",
    "MacroTargets",
    "UserMetrics",
    "UserProfile",
    "calculate_bmi",
    "calculate_bmr",
    "calculate_target_calories",
    "calculate_tdee",
    "onboarding_metrics",
    "resolve_target_calories",
]
