"""Data models for user metrics and profiles."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from nutrisprout.profiles.body_calc import (
    DEFAULT_TARGET_CALORIES,
    GOAL_DEFAULT_CALORIES,
    ActivityLevel,
    Gender,
    Goal,
    compute_target_calories,
)

# Values substituted for fields left blank at onboarding
DEFAULT_WEIGHT_KG = 70.0
DEFAULT_HEIGHT_CM = 170.0
DEFAULT_AGE = 30


@dataclass
class UserMetrics:
    """Body metrics and goal captured at onboarding.

    Numeric fields may be None while onboarding is incomplete; the calculator
    treats them as missing and yields 0.
    """

    weight: Optional[float] = None  # kg
    height: Optional[float] = None  # cm
    age: Optional[int] = None
    gender: Gender = Gender.MALE
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    goal: Goal = Goal.MAINTAIN
    target_calories: Optional[int] = None

    def __post_init__(self) -> None:
        # Accept plain strings at the boundary, reject unknown values
        try:
            self.gender = Gender(self.gender)
        except ValueError:
            raise ValueError(
                f"gender must be one of {[g.value for g in Gender]}, got '{self.gender}'"
            ) from None
        try:
            self.activity_level = ActivityLevel(self.activity_level)
        except ValueError:
            raise ValueError(
                f"activity_level must be one of {[a.value for a in ActivityLevel]}, "
                f"got '{self.activity_level}'"
            ) from None
        try:
            self.goal = Goal(self.goal)
        except ValueError:
            raise ValueError(
                f"goal must be one of {[g.value for g in Goal]}, got '{self.goal}'"
            ) from None

    def to_dict(self) -> dict[str, Any]:
        return {
            "weight": self.weight,
            "height": self.height,
            "age": self.age,
            "gender": self.gender.value,
            "activityLevel": self.activity_level.value,
            "goal": self.goal.value,
            "targetCalories": self.target_calories,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserMetrics":
        return cls(
            weight=data.get("weight"),
            height=data.get("height"),
            age=data.get("age"),
            gender=data.get("gender") or Gender.MALE,
            activity_level=data.get("activityLevel") or ActivityLevel.MODERATE,
            goal=data.get("goal") or Goal.MAINTAIN,
            target_calories=data.get("targetCalories"),
        )


def onboarding_metrics(
    weight: Optional[float] = None,
    height: Optional[float] = None,
    age: Optional[int] = None,
    gender: Optional[str] = None,
    activity_level: Optional[str] = None,
    goal: Optional[str] = None,
    target_calories: Optional[int] = None,
) -> UserMetrics:
    """Build metrics the way onboarding saves them.

    The target is computed from the raw inputs when all of them are present;
    otherwise the supplied (or goal default) target is kept. Blank fields are
    then filled with fixed defaults so later calculations have values.
    """
    goal_enum = Goal(goal) if goal else Goal.MAINTAIN
    gender_enum = Gender(gender) if gender else Gender.MALE
    activity_enum = ActivityLevel(activity_level) if activity_level else ActivityLevel.MODERATE

    target = target_calories or GOAL_DEFAULT_CALORIES[goal_enum]
    if weight and height and age:
        target = compute_target_calories(
            weight, height, age, gender_enum, activity_enum, goal_enum
        ) or target

    return UserMetrics(
        weight=weight or DEFAULT_WEIGHT_KG,
        height=height or DEFAULT_HEIGHT_CM,
        age=age or DEFAULT_AGE,
        gender=gender_enum,
        activity_level=activity_enum,
        goal=goal_enum,
        target_calories=target or DEFAULT_TARGET_CALORIES,
    )


@dataclass
class UserProfile:
    """Per-user profile: metrics, goal overrides and selected program."""

    user_id: str
    metrics: Optional[UserMetrics] = None
    daily_calories_target: Optional[float] = None
    daily_protein_target: Optional[float] = None
    daily_carbs_target: Optional[float] = None
    daily_fat_target: Optional[float] = None
    daily_water_target: Optional[float] = None
    selected_program_id: Optional[str] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def with_metrics(self, metrics: UserMetrics) -> "UserProfile":
        """Return a copy with metrics replaced wholesale."""
        return replace(self, metrics=metrics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "dailyCaloriesTarget": self.daily_calories_target,
            "dailyProteinTarget": self.daily_protein_target,
            "dailyCarbsTarget": self.daily_carbs_target,
            "dailyFatTarget": self.daily_fat_target,
            "dailyWaterTarget": self.daily_water_target,
            "selectedProgramId": self.selected_program_id,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        metrics = data.get("metrics")
        updated_at = data.get("updatedAt")
        return cls(
            user_id=data["userId"],
            metrics=UserMetrics.from_dict(metrics) if metrics else None,
            daily_calories_target=data.get("dailyCaloriesTarget"),
            daily_protein_target=data.get("dailyProteinTarget"),
            daily_carbs_target=data.get("dailyCarbsTarget"),
            daily_fat_target=data.get("dailyFatTarget"),
            daily_water_target=data.get("dailyWaterTarget"),
            selected_program_id=data.get("selectedProgramId"),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
