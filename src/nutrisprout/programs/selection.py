"""Program selection and onboarding, persisted on the user's profile."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from nutrisprout.profiles.models import UserProfile, onboarding_metrics
from nutrisprout.programs.definitions import MEAL_PROGRAMS, get_program
from nutrisprout.programs.models import MealProgram
from nutrisprout.storage.base import Store

logger = logging.getLogger(__name__)


def select_program(store: Store, program_id: str) -> MealProgram:
    """Store a program as the user's selection, replacing any previous one.

    Raises:
        ValueError: If the program id is not in the catalog
    """
    program = get_program(program_id)
    if program is None:
        raise ValueError(f"Unknown program: {program_id}")

    profile = store.profile_or_new()
    store.save_profile(replace(profile, selected_program_id=program.id))
    logger.info("Selected program %s for %s", program.id, store.user_id)
    return program


def clear_selected_program(store: Store) -> None:
    profile = store.load_profile()
    if profile is None or profile.selected_program_id is None:
        return
    store.save_profile(replace(profile, selected_program_id=None))


def get_selected_program(store: Store) -> Optional[MealProgram]:
    """The user's selected program, or None.

    A stored id that is no longer in the catalog is treated as no selection.
    """
    profile = store.load_profile()
    if profile is None or not profile.selected_program_id:
        return None
    program = get_program(profile.selected_program_id)
    if program is None:
        logger.warning("Stored program '%s' is not in the catalog", profile.selected_program_id)
    return program


def onboard(
    store: Store,
    weight: Optional[float] = None,
    height: Optional[float] = None,
    age: Optional[int] = None,
    gender: Optional[str] = None,
    activity_level: Optional[str] = None,
    goal: Optional[str] = None,
    target_calories: Optional[int] = None,
    catalog: Sequence[MealProgram] = MEAL_PROGRAMS,
) -> UserProfile:
    """Save onboarding metrics and pre-select a program.

    Blank fields get defaults and the calorie target is computed when all
    body metrics are given. The first catalog program for the user's goal
    becomes the selected program.

    Returns:
        The saved profile
    """
    metrics = onboarding_metrics(
        weight=weight,
        height=height,
        age=age,
        gender=gender,
        activity_level=activity_level,
        goal=goal,
        target_calories=target_calories,
    )

    profile: UserProfile = store.profile_or_new().with_metrics(metrics)
    first_match = next((p for p in catalog if p.target_goal == metrics.goal), None)
    if first_match is not None:
        profile = replace(profile, selected_program_id=first_match.id)

    store.save_profile(profile)
    return profile
