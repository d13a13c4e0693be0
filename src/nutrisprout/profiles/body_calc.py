"""Body metric calculator for calorie targets.

Calculates BMR, TDEE and a goal-adjusted daily calorie target from body
metrics, using the Mifflin-St Jeor equation for BMR.

None of these functions raise on incomplete input: a missing or zero weight,
height or age degrades to 0 all the way down the chain, and callers substitute
their own default target (see ``resolve_target_calories``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from nutrisprout.profiles.models import UserMetrics
    from nutrisprout.programs.models import MacroDistribution


class Gender(str, Enum):
    """Gender as recorded at onboarding."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"          # Little or no exercise
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    ACTIVE = "active"                # Hard exercise 6-7 days/week


class Goal(str, Enum):
    """Directional weight goal."""
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
}

DEFAULT_ACTIVITY_MULTIPLIER = 1.2

# Calorie adjustments by goal (deficit or surplus from TDEE)
GOAL_ADJUSTMENTS = {
    Goal.LOSE: -500,
    Goal.MAINTAIN: 0,
    Goal.GAIN: 500,
}

# Targets used when metrics are too incomplete to compute one
GOAL_DEFAULT_CALORIES = {
    Goal.LOSE: 1800,
    Goal.MAINTAIN: 2000,
    Goal.GAIN: 2500,
}

DEFAULT_TARGET_CALORIES = 2000

# Energy density of macronutrients (kcal per gram)
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

EnumLike = Union[str, Enum, None]


@dataclass
class MacroTargets:
    """Daily macronutrient targets in grams for a calorie budget."""

    calories: int
    protein: int
    carbs: int
    fat: int

    def to_dict(self) -> dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not to even)."""
    return int(math.floor(value + 0.5))


def _enum_value(value: EnumLike) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip().lower()


def _parse(enum_cls, value: EnumLike):
    """Return the enum member for value, or None if unrecognized."""
    raw = _enum_value(value)
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def calculate_bmr(
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age_years: Optional[float],
    gender: EnumLike,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age_years: Age in years
        gender: "male" uses the +5 variant; anything else uses -161

    Returns:
        BMR in calories per day, or 0 if weight, height or age is missing
    """
    if not weight_kg or not height_cm or not age_years:
        return 0

    if _enum_value(gender) == Gender.MALE.value:
        return (10 * weight_kg) + (6.25 * height_cm) - (5 * age_years) + 5
    return (10 * weight_kg) + (6.25 * height_cm) - (5 * age_years) - 161


def calculate_tdee(bmr: float, activity_level: EnumLike) -> int:
    """Calculate Total Daily Energy Expenditure.

    Unrecognized activity levels use the sedentary multiplier.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: "sedentary", "moderate" or "active"

    Returns:
        TDEE in calories per day, rounded; 0 if bmr is 0
    """
    if not bmr:
        return 0

    level = _parse(ActivityLevel, activity_level)
    multiplier = ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)
    return round_half_up(bmr * multiplier)


def calculate_target_calories(tdee: float, goal: EnumLike) -> int:
    """Calculate the daily calorie target for a goal.

    Args:
        tdee: Total Daily Energy Expenditure
        goal: "lose" (-500), "gain" (+500); "maintain" or unknown leaves TDEE

    Returns:
        Target calories, rounded; 0 if tdee is 0
    """
    if not tdee:
        return 0

    adjustment = GOAL_ADJUSTMENTS.get(_parse(Goal, goal), 0)
    return round_half_up(tdee + adjustment)


def calculate_bmi(
    weight_kg: Optional[float], height_cm: Optional[float]
) -> Optional[float]:
    """Body mass index, or None when weight or height is missing."""
    if not weight_kg or not height_cm:
        return None
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def compute_target_calories(
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age_years: Optional[float],
    gender: EnumLike,
    activity_level: EnumLike,
    goal: EnumLike,
) -> int:
    """Run the full BMR -> TDEE -> target chain. Returns 0 on incomplete input."""
    bmr = calculate_bmr(weight_kg, height_cm, age_years, gender)
    tdee = calculate_tdee(bmr, activity_level)
    return calculate_target_calories(tdee, goal)


def resolve_target_calories(metrics: "UserMetrics") -> int:
    """Return the calorie target to use for a user.

    Order: an explicit non-zero target on the metrics, the computed chain,
    the goal's default, then 2000.
    """
    if metrics.target_calories:
        return int(metrics.target_calories)

    computed = compute_target_calories(
        metrics.weight,
        metrics.height,
        metrics.age,
        metrics.gender,
        metrics.activity_level,
        metrics.goal,
    )
    if computed:
        return computed

    return GOAL_DEFAULT_CALORIES.get(_parse(Goal, metrics.goal), DEFAULT_TARGET_CALORIES)


def macro_targets(calories: float, distribution: "MacroDistribution") -> MacroTargets:
    """Convert a percentage macro split into gram targets for a calorie budget."""
    return MacroTargets(
        calories=round_half_up(calories),
        protein=round_half_up(calories * distribution.protein / 100 / KCAL_PER_GRAM_PROTEIN),
        carbs=round_half_up(calories * distribution.carbs / 100 / KCAL_PER_GRAM_CARBS),
        fat=round_half_up(calories * distribution.fat / 100 / KCAL_PER_GRAM_FAT),
    )
