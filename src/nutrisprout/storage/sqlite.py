"""Store backed by the SQLite relational database."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date
from typing import Generator, Optional

from nutrisprout.db.connection import DatabaseConnection
from nutrisprout.errors import StoreError
from nutrisprout.profiles.models import UserProfile
from nutrisprout.storage.base import Store
from nutrisprout.tracking.models import Meal, UserStats
from nutrisprout.tracking.queries import (
    MealQueries,
    ProfileQueries,
    StatisticsQueries,
    WaterQueries,
)

logger = logging.getLogger(__name__)


class SqliteStore(Store):
    """Per-user store over a DatabaseConnection.

    sqlite3 errors are re-raised as StoreError so callers can fall back to
    local storage without knowing the backend.
    """

    def __init__(self, db: DatabaseConnection, user_id: str):
        self.db = db
        self.user_id = user_id

    @contextmanager
    def _connection(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        try:
            with self.db.get_connection() as conn:
                yield conn
        except sqlite3.Error as e:
            logger.debug("SQLite %s failed for %s: %s", operation, self.user_id, e)
            raise StoreError(f"{operation} failed: {e}", operation=operation) from e

    def load_stats(self) -> Optional[UserStats]:
        with self._connection("load_stats") as conn:
            return StatisticsQueries.get_stats(conn, self.user_id)

    def save_stats(self, stats: UserStats) -> None:
        with self._connection("save_stats") as conn:
            StatisticsQueries.save_stats(conn, self.user_id, stats)

    def load_profile(self) -> Optional[UserProfile]:
        with self._connection("load_profile") as conn:
            return ProfileQueries.get_profile(conn, self.user_id)

    def save_profile(self, profile: UserProfile) -> None:
        with self._connection("save_profile") as conn:
            ProfileQueries.save_profile(conn, profile)

    def add_meal(self, meal: Meal) -> Meal:
        with self._connection("add_meal") as conn:
            return MealQueries.add_meal(conn, self.user_id, meal)

    def meals_for_date(self, day: date) -> list[Meal]:
        with self._connection("meals_for_date") as conn:
            return MealQueries.get_meals_by_date(conn, self.user_id, day)

    def get_meal(self, meal_id: int) -> Optional[Meal]:
        with self._connection("get_meal") as conn:
            return MealQueries.get_meal(conn, self.user_id, meal_id)

    def update_meal(self, meal: Meal) -> Optional[Meal]:
        with self._connection("update_meal") as conn:
            return MealQueries.update_meal(conn, self.user_id, meal)

    def delete_meal(self, meal_id: int) -> bool:
        with self._connection("delete_meal") as conn:
            return MealQueries.delete_meal(conn, self.user_id, meal_id)

    def add_water(self, day: date, glasses: float) -> float:
        with self._connection("add_water") as conn:
            return WaterQueries.add_water(conn, self.user_id, day, glasses)

    def water_for_date(self, day: date) -> float:
        with self._connection("water_for_date") as conn:
            return WaterQueries.get_water(conn, self.user_id, day)
