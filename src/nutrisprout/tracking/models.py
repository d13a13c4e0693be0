"""Data models for meal logging and daily progress."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Optional


class MealType(Enum):
    """Meal slot a logged meal belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class PlantStage(IntEnum):
    """Growth ladder for cumulative goal adherence. Only ever moves up."""

    SEED = 0
    SPROUT = 1
    SMALL_PLANT = 2
    MEDIUM_PLANT = 3
    LARGE_PLANT = 4
    FLOWERING = 5
    MATURE = 6

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass
class FoodItem:
    """A food within a logged meal. Nutrition values are for the whole item."""

    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    quantity: Optional[float] = None
    unit: Optional[str] = None
    is_ai_generated: bool = False
    item_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "isAiGenerated": self.is_ai_generated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FoodItem":
        return cls(
            name=data["name"],
            calories=data.get("calories") or 0.0,
            protein=data.get("protein") or 0.0,
            carbs=data.get("carbs") or 0.0,
            fat=data.get("fat") or 0.0,
            quantity=data.get("quantity"),
            unit=data.get("unit"),
            is_ai_generated=bool(data.get("isAiGenerated", False)),
            item_id=data.get("id"),
        )


@dataclass
class Meal:
    """A logged meal.

    Totals are explicit so a quick entry can be logged without items; use
    ``Meal.from_items`` to derive them from food items.
    """

    meal_date: date
    meal_type: MealType
    name: str
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    items: list[FoodItem] = field(default_factory=list)
    meal_time: Optional[str] = None  # HH:MM:SS
    notes: Optional[str] = None
    meal_id: Optional[int] = None

    @classmethod
    def from_items(
        cls,
        meal_date: date,
        meal_type: MealType,
        name: str,
        items: list[FoodItem],
        meal_time: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "Meal":
        return cls(
            meal_date=meal_date,
            meal_type=meal_type,
            name=name,
            total_calories=round(sum(i.calories for i in items), 1),
            total_protein=round(sum(i.protein for i in items), 1),
            total_carbs=round(sum(i.carbs for i in items), 1),
            total_fat=round(sum(i.fat for i in items), 1),
            items=list(items),
            meal_time=meal_time,
            notes=notes,
        )

    def _adjusted(self, item: FoodItem, sign: int, items: list[FoodItem]) -> "Meal":
        return replace(
            self,
            total_calories=round(max(0.0, self.total_calories + sign * item.calories), 1),
            total_protein=round(max(0.0, self.total_protein + sign * item.protein), 1),
            total_carbs=round(max(0.0, self.total_carbs + sign * item.carbs), 1),
            total_fat=round(max(0.0, self.total_fat + sign * item.fat), 1),
            items=items,
        )

    def with_item(self, item: FoodItem) -> "Meal":
        """Copy with the item appended and its nutrients added to the totals."""
        return self._adjusted(item, 1, self.items + [item])

    def without_item(self, item_id: int) -> "Meal":
        """Copy without the item, its nutrients taken off the totals.

        Raises:
            KeyError: If the meal has no item with that id
        """
        for item in self.items:
            if item.item_id == item_id:
                remaining = [i for i in self.items if i.item_id != item_id]
                return self._adjusted(item, -1, remaining)
        raise KeyError(item_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.meal_id,
            "mealDate": self.meal_date.isoformat(),
            "mealTime": self.meal_time,
            "mealType": self.meal_type.value,
            "name": self.name,
            "totalCalories": self.total_calories,
            "totalProtein": self.total_protein,
            "totalCarbs": self.total_carbs,
            "totalFat": self.total_fat,
            "notes": self.notes,
            "items": [i.to_dict() for i in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Meal":
        return cls(
            meal_date=date.fromisoformat(data["mealDate"]),
            meal_type=MealType(data["mealType"]),
            name=data["name"],
            total_calories=data.get("totalCalories") or 0.0,
            total_protein=data.get("totalProtein") or 0.0,
            total_carbs=data.get("totalCarbs") or 0.0,
            total_fat=data.get("totalFat") or 0.0,
            items=[FoodItem.from_dict(i) for i in data.get("items", [])],
            meal_time=data.get("mealTime"),
            notes=data.get("notes"),
            meal_id=data.get("id"),
        )


@dataclass
class Consumption:
    """Totals consumed over one day."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    water: float = 0.0

    @classmethod
    def from_meals(cls, meals: list[Meal], water: float = 0.0) -> "Consumption":
        return cls(
            calories=sum(m.total_calories for m in meals),
            protein=sum(m.total_protein for m in meals),
            carbs=sum(m.total_carbs for m in meals),
            fat=sum(m.total_fat for m in meals),
            water=water,
        )


@dataclass
class NutritionGoals:
    """Daily goal values the five adherence checks compare against."""

    calories: float = 2000
    protein: float = 120
    carbs: float = 250
    fat: float = 65
    water: float = 8

    def with_overrides(
        self,
        calories: Optional[float] = None,
        protein: Optional[float] = None,
        carbs: Optional[float] = None,
        fat: Optional[float] = None,
        water: Optional[float] = None,
    ) -> "NutritionGoals":
        """Return a copy where every truthy override replaces the default."""
        return NutritionGoals(
            calories=calories or self.calories,
            protein=protein or self.protein,
            carbs=carbs or self.carbs,
            fat=fat or self.fat,
            water=water or self.water,
        )


@dataclass
class DailyStats:
    """One day's consumption against goals."""

    date: date
    calories_consumed: float
    calories_goal: float
    protein_consumed: float
    protein_goal: float
    carbs_consumed: float
    carbs_goal: float
    fat_consumed: float
    fat_goal: float
    water_consumed: float
    water_goal: float
    goals_met: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "caloriesConsumed": self.calories_consumed,
            "caloriesGoal": self.calories_goal,
            "proteinConsumed": self.protein_consumed,
            "proteinGoal": self.protein_goal,
            "carbsConsumed": self.carbs_consumed,
            "carbsGoal": self.carbs_goal,
            "fatConsumed": self.fat_consumed,
            "fatGoal": self.fat_goal,
            "waterConsumed": self.water_consumed,
            "waterGoal": self.water_goal,
            "goalsMet": self.goals_met,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyStats":
        return cls(
            date=date.fromisoformat(data["date"]),
            calories_consumed=data.get("caloriesConsumed", 0),
            calories_goal=data.get("caloriesGoal", 0),
            protein_consumed=data.get("proteinConsumed", 0),
            protein_goal=data.get("proteinGoal", 0),
            carbs_consumed=data.get("carbsConsumed", 0),
            carbs_goal=data.get("carbsGoal", 0),
            fat_consumed=data.get("fatConsumed", 0),
            fat_goal=data.get("fatGoal", 0),
            water_consumed=data.get("waterConsumed", 0),
            water_goal=data.get("waterGoal", 0),
            goals_met=int(data.get("goalsMet", 0)),
        )


@dataclass
class UserStats:
    """Accumulated progress for one user or guest session.

    Attributes:
        streak_days: Consecutive accumulations with at least one goal met
        plant_stage: Current growth stage
        plant_progress: Percent toward the next stage; pinned at 100 once Mature
        weekly_stats: Last 7 days, oldest first
        monthly_stats: Last 30 days, oldest first
        last_updated: Date of the last accumulation
        credited_date: Day the once-per-day growth policy last credited
        credited_goals: Goals already credited on credited_date
    """

    streak_days: int = 0
    plant_stage: PlantStage = PlantStage.SEED
    plant_progress: int = 0
    weekly_stats: list[DailyStats] = field(default_factory=list)
    monthly_stats: list[DailyStats] = field(default_factory=list)
    last_updated: date = field(default_factory=date.today)
    credited_date: Optional[date] = None
    credited_goals: int = 0

    @classmethod
    def default(cls, today: Optional[date] = None) -> "UserStats":
        return cls(last_updated=today or date.today())

    def to_dict(self) -> dict[str, Any]:
        return {
            "streakDays": self.streak_days,
            "plantStage": int(self.plant_stage),
            "plantProgress": self.plant_progress,
            "weeklyStats": [s.to_dict() for s in self.weekly_stats],
            "monthlyStats": [s.to_dict() for s in self.monthly_stats],
            "lastUpdated": self.last_updated.isoformat(),
            "creditedDate": self.credited_date.isoformat() if self.credited_date else None,
            "creditedGoals": self.credited_goals,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserStats":
        last_updated = data.get("lastUpdated")
        credited_date = data.get("creditedDate")
        return cls(
            streak_days=int(data.get("streakDays", 0)),
            plant_stage=PlantStage(int(data.get("plantStage", 0))),
            plant_progress=int(data.get("plantProgress", 0)),
            weekly_stats=[DailyStats.from_dict(s) for s in data.get("weeklyStats", [])],
            monthly_stats=[DailyStats.from_dict(s) for s in data.get("monthlyStats", [])],
            # Stored dates may carry a time part
            last_updated=date.fromisoformat(last_updated[:10]) if last_updated else date.today(),
            credited_date=date.fromisoformat(credited_date[:10]) if credited_date else None,
            credited_goals=int(data.get("creditedGoals", 0)),
        )
