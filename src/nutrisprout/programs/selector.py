"""Meal program recommendation.

Programs are matched against a user's goal, activity level and calorie
target in tiers, most specific first. The first tier that matches anything
wins; later tiers relax criteria so a non-empty catalog always yields a
non-empty recommendation list.

Tiers:
    A. goal + activity level + calories within 200 kcal of the program range
    B. goal only
    C. calories within 300 kcal of the program range
    D. the first programs of the catalog, unconditionally
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from nutrisprout.profiles.body_calc import (
    Goal,
    compute_target_calories,
)
from nutrisprout.profiles.models import UserMetrics
from nutrisprout.programs.definitions import MEAL_PROGRAMS
from nutrisprout.programs.models import MealProgram

# Slack around a program's calorie range, in kcal
STRICT_CALORIE_SLACK = 200
LOOSE_CALORIE_SLACK = 300

DEFAULT_LIMIT = 3


class RecommendationTier(Enum):
    """Which matching tier produced a recommendation."""

    GOAL_ACTIVITY_CALORIES = "goal_activity_calories"
    GOAL = "goal"
    CALORIES = "calories"
    FALLBACK = "fallback"


@dataclass
class Recommendation:
    """Result of a recommendation run.

    Attributes:
        programs: Recommended programs in catalog order
        tier: Tier that produced the programs
        target_calories: Calorie target used for matching
    """

    programs: list[MealProgram]
    tier: RecommendationTier
    target_calories: int

    @property
    def program_ids(self) -> list[str]:
        return [p.id for p in self.programs]

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "target_calories": self.target_calories,
            "programs": [p.to_dict() for p in self.programs],
        }


def matching_target_calories(metrics: UserMetrics) -> int:
    """Calorie target used for matching.

    A precomputed non-zero target wins; otherwise the calculator chain runs,
    which may yield 0 for incomplete metrics. No default is substituted here.
    """
    if metrics.target_calories:
        return int(metrics.target_calories)
    return compute_target_calories(
        metrics.weight,
        metrics.height,
        metrics.age,
        metrics.gender,
        metrics.activity_level,
        metrics.goal,
    )


def _matches_goal(program: MealProgram, goal: Goal) -> bool:
    return program.target_goal == goal


def _tier_candidates(
    tier: RecommendationTier,
    metrics: UserMetrics,
    target: int,
    catalog: Sequence[MealProgram],
    limit: int,
) -> list[MealProgram]:
    if tier == RecommendationTier.GOAL_ACTIVITY_CALORIES:
        return [
            p for p in catalog
            if _matches_goal(p, metrics.goal)
            and p.suits_activity(metrics.activity_level)
            and p.calorie_range.contains(target, STRICT_CALORIE_SLACK)
        ]

    elif tier == RecommendationTier.GOAL:
        return [p for p in catalog if _matches_goal(p, metrics.goal)]

    elif tier == RecommendationTier.CALORIES:
        return [p for p in catalog if p.calorie_range.contains(target, LOOSE_CALORIE_SLACK)]

    else:
        return list(catalog[:limit])


def recommend(
    metrics: UserMetrics,
    catalog: Sequence[MealProgram] = MEAL_PROGRAMS,
    limit: int = DEFAULT_LIMIT,
) -> Recommendation:
    """Recommend programs for a user, reporting the tier that matched.

    Args:
        metrics: User metrics; target_calories is computed if not set
        catalog: Programs to choose from, in tie-break order
        limit: Maximum number of programs to return

    Returns:
        Recommendation with at most ``limit`` programs.
    """
    target = matching_target_calories(metrics)

    if limit <= 0:
        return Recommendation(programs=[], tier=RecommendationTier.FALLBACK, target_calories=target)

    for tier in RecommendationTier:
        matched = _tier_candidates(tier, metrics, target, catalog, limit)
        if matched:
            return Recommendation(programs=matched[:limit], tier=tier, target_calories=target)

    # Only reachable with an empty catalog
    return Recommendation(programs=[], tier=RecommendationTier.FALLBACK, target_calories=target)


def recommend_programs(
    metrics: UserMetrics,
    catalog: Sequence[MealProgram] = MEAL_PROGRAMS,
    limit: int = DEFAULT_LIMIT,
) -> list[MealProgram]:
    """Recommend programs for a user. See ``recommend``."""
    return recommend(metrics, catalog, limit).programs


def programs_for_user(
    metrics: Optional[UserMetrics],
    catalog: Sequence[MealProgram] = MEAL_PROGRAMS,
    limit: int = DEFAULT_LIMIT,
) -> list[MealProgram]:
    """Programs to offer a user: the whole catalog until metrics are known."""
    if metrics is None:
        return list(catalog)
    return recommend_programs(metrics, catalog, limit)
