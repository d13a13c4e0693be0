"""Primary store with a local fallback."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, TypeVar

from nutrisprout.errors import StoreError
from nutrisprout.profiles.models import UserProfile
from nutrisprout.storage.base import Store
from nutrisprout.storage.local import LocalStore
from nutrisprout.tracking.models import Meal, UserStats

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResilientStore(Store):
    """Uses the primary store and falls back to local storage on failure.

    Successful stats and profile writes are mirrored to the local store so a
    later read failure can still return the last snapshot. When the primary
    store fails, writes go to the local store only and reads come from it.
    """

    def __init__(self, primary: Store, fallback: LocalStore):
        self.primary = primary
        self.fallback = fallback
        self.user_id = primary.user_id
        self.degraded = False

    def _attempt(
        self,
        operation: str,
        primary_call: Callable[[], T],
        fallback_call: Callable[[], T],
    ) -> T:
        try:
            return primary_call()
        except StoreError as e:
            self.degraded = True
            logger.warning("%s failed on primary store, using local storage: %s", operation, e)
            return fallback_call()

    def _mirror(self, call: Callable[[], None]) -> None:
        try:
            call()
        except StoreError as e:
            logger.debug("Could not refresh local cache: %s", e)

    def load_stats(self) -> Optional[UserStats]:
        return self._attempt("load_stats", self.primary.load_stats, self.fallback.load_stats)

    def save_stats(self, stats: UserStats) -> None:
        def primary() -> None:
            self.primary.save_stats(stats)
            self._mirror(lambda: self.fallback.save_stats(stats))

        self._attempt("save_stats", primary, lambda: self.fallback.save_stats(stats))

    def load_profile(self) -> Optional[UserProfile]:
        return self._attempt(
            "load_profile", self.primary.load_profile, self.fallback.load_profile
        )

    def save_profile(self, profile: UserProfile) -> None:
        def primary() -> None:
            self.primary.save_profile(profile)
            self._mirror(lambda: self.fallback.save_profile(profile))

        self._attempt("save_profile", primary, lambda: self.fallback.save_profile(profile))

    def add_meal(self, meal: Meal) -> Meal:
        return self._attempt(
            "add_meal",
            lambda: self.primary.add_meal(meal),
            lambda: self.fallback.add_meal(meal),
        )

    def meals_for_date(self, day: date) -> list[Meal]:
        return self._attempt(
            "meals_for_date",
            lambda: self.primary.meals_for_date(day),
            lambda: self.fallback.meals_for_date(day),
        )

    def get_meal(self, meal_id: int) -> Optional[Meal]:
        return self._attempt(
            "get_meal",
            lambda: self.primary.get_meal(meal_id),
            lambda: self.fallback.get_meal(meal_id),
        )

    def update_meal(self, meal: Meal) -> Optional[Meal]:
        return self._attempt(
            "update_meal",
            lambda: self.primary.update_meal(meal),
            lambda: self.fallback.update_meal(meal),
        )

    def delete_meal(self, meal_id: int) -> bool:
        return self._attempt(
            "delete_meal",
            lambda: self.primary.delete_meal(meal_id),
            lambda: self.fallback.delete_meal(meal_id),
        )

    def add_water(self, day: date, glasses: float) -> float:
        return self._attempt(
            "add_water",
            lambda: self.primary.add_water(day, glasses),
            lambda: self.fallback.add_water(day, glasses),
        )

    def water_for_date(self, day: date) -> float:
        return self._attempt(
            "water_for_date",
            lambda: self.primary.water_for_date(day),
            lambda: self.fallback.water_for_date(day),
        )
