"""Meal program catalog and recommendation."""

from nutrisprout.programs.definitions import (
    MEAL_PROGRAMS,
    get_program,
    list_program_ids,
    list_programs,
)
from nutrisprout.programs.models import (
    CalorieRange,
    MacroDistribution,
    MealProgram,
    SampleDay,
    SampleMeal,
)
from nutrisprout.programs.selector import (
    Recommendation,
    RecommendationTier,
    programs_for_user,
    recommend,
    recommend_programs,
)

__all__ = [
    "MEAL_PROGRAMS",
    "CalorieRange",
    "MacroDistribution",
    "MealProgram",
    "Recommendation",
    "RecommendationTier",
    "SampleDay",
    "SampleMeal",
    "get_program",
    "list_program_ids",
    "list_programs",
    "programs_for_user",
    "recommend",
    "recommend_programs",
]
