"""Data models for the meal program catalog.

Programs are static: they are defined once in ``definitions`` and never
created or mutated at runtime, so every model here is a frozen dataclass.
The ``to_dict``/``from_dict`` pair uses the camelCase JSON shape the mobile
client persisted, which is kept stable for round-tripping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nutrisprout.profiles.body_calc import ActivityLevel, Goal


@dataclass(frozen=True)
class CalorieRange:
    """Daily calorie band a program is designed for."""

    min: int
    max: int

    def contains(self, calories: float, slack: float = 0) -> bool:
        """True if calories is within [min - slack, max + slack]."""
        return self.min - slack <= calories <= self.max + slack


@dataclass(frozen=True)
class MacroDistribution:
    """Macro split in percent of calories.

    The three values are meant to sum to about 100; nothing enforces it.
    """

    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class SampleMeal:
    """One illustrative meal in a sample day."""

    name: str
    description: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class SampleDay:
    """An illustrative daily menu."""

    day: str
    meals: tuple[SampleMeal, ...]

    @property
    def total_calories(self) -> float:
        return sum(m.calories for m in self.meals)


@dataclass(frozen=True)
class MealProgram:
    """A meal program from the bundled catalog.

    Attributes:
        id: Unique program identifier (e.g., "low-calorie")
        name: Display name
        description: Human-readable description
        target_goal: Goal the program is built for
        activity_levels: Activity levels the program suits
        calorie_range: Designed daily calorie band
        macro_distribution: Percent split of protein/carbs/fat
        sample_days: Ordered illustrative menus
        tags: Free-form labels
    """

    id: str
    name: str
    description: str
    target_goal: Goal
    activity_levels: frozenset[ActivityLevel]
    calorie_range: CalorieRange
    macro_distribution: MacroDistribution
    sample_days: tuple[SampleDay, ...] = ()
    tags: tuple[str, ...] = field(default=())

    def suits_activity(self, activity_level: ActivityLevel | str) -> bool:
        try:
            return ActivityLevel(activity_level) in self.activity_levels
        except ValueError:
            return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "targetGoal": self.target_goal.value,
            "suitableFor": {
                # Catalog order of levels, not set order
                "activityLevels": [
                    level.value for level in ActivityLevel if level in self.activity_levels
                ],
            },
            "calorieRange": {
                "min": self.calorie_range.min,
                "max": self.calorie_range.max,
            },
            "macroDistribution": {
                "protein": self.macro_distribution.protein,
                "carbs": self.macro_distribution.carbs,
                "fat": self.macro_distribution.fat,
            },
            "sampleDays": [
                {
                    "day": day.day,
                    "meals": [
                        {
                            "name": meal.name,
                            "description": meal.description,
                            "calories": meal.calories,
                            "protein": meal.protein,
                            "carbs": meal.carbs,
                            "fat": meal.fat,
                        }
                        for meal in day.meals
                    ],
                }
                for day in self.sample_days
            ],
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MealProgram":
        calorie_range = data["calorieRange"]
        macros = data["macroDistribution"]
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            target_goal=Goal(data["targetGoal"]),
            activity_levels=frozenset(
                ActivityLevel(level)
                for level in data.get("suitableFor", {}).get("activityLevels", [])
            ),
            calorie_range=CalorieRange(min=calorie_range["min"], max=calorie_range["max"]),
            macro_distribution=MacroDistribution(
                protein=macros["protein"],
                carbs=macros["carbs"],
                fat=macros["fat"],
            ),
            sample_days=tuple(
                SampleDay(
                    day=day["day"],
                    meals=tuple(
                        SampleMeal(
                            name=meal["name"],
                            description=meal.get("description", ""),
                            calories=meal.get("calories", 0),
                            protein=meal.get("protein", 0),
                            carbs=meal.get("carbs", 0),
                            fat=meal.get("fat", 0),
                        )
                        for meal in day.get("meals", [])
                    ),
                )
                for day in data.get("sampleDays", [])
            ),
            tags=tuple(data.get("tags", [])),
        )
