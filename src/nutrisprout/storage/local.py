"""On-device key-value storage kept as JSON files in a directory."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Optional

from nutrisprout.errors import StoreError
from nutrisprout.profiles.models import UserProfile
from nutrisprout.storage.base import Store
from nutrisprout.tracking.models import FoodItem, Meal, UserStats

logger = logging.getLogger(__name__)

GUEST_USER_ID = "guest"

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class LocalKeyValueStore:
    """String values under string keys, one file per key.

    Keys map to ``<directory>/<key>.json``; characters outside
    ``[A-Za-z0-9_.-]`` are replaced so any user id makes a valid file name.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is not set."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not read '{key}': {e}", operation="get_item") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not write '{key}': {e}", operation="set_item") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Could not remove '{key}': {e}", operation="remove_item") from e

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))


class LocalStore(Store):
    """Store over local key-value storage.

    The guest session uses ``guest_<name>`` keys (``guest_statistics``,
    ``guest_profile``, ...). A signed-in user's cached copy uses
    ``user_<name>_<user_id>`` (``user_statistics_<user_id>``, ...).
    """

    def __init__(self, kv: LocalKeyValueStore, user_id: str = GUEST_USER_ID):
        self.kv = kv
        self.user_id = user_id

    @property
    def is_guest(self) -> bool:
        return self.user_id == GUEST_USER_ID

    def key(self, name: str) -> str:
        """Storage key for one of this store's documents."""
        if self.is_guest:
            return f"{GUEST_USER_ID}_{name}"
        return f"user_{name}_{self.user_id}"

    def _read(self, name: str) -> Optional[Any]:
        key = self.key(name)
        raw = self.kv.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable local value for '%s'", key)
            return None

    def _write(self, name: str, value: Any) -> None:
        self.kv.set_item(self.key(name), json.dumps(value))

    def load_stats(self) -> Optional[UserStats]:
        data = self._read("statistics")
        return UserStats.from_dict(data) if data else None

    def save_stats(self, stats: UserStats) -> None:
        self._write("statistics", stats.to_dict())

    def load_profile(self) -> Optional[UserProfile]:
        data = self._read("profile")
        return UserProfile.from_dict(data) if data else None

    def save_profile(self, profile: UserProfile) -> None:
        self._write("profile", profile.to_dict())

    def _all_meals(self) -> list[Meal]:
        return [Meal.from_dict(m) for m in self._read("meals") or []]

    def _save_meals(self, meals: list[Meal]) -> None:
        self._write("meals", [m.to_dict() for m in meals])

    @staticmethod
    def _number_items(meal_id: int, items: list[FoodItem]) -> list[FoodItem]:
        """Give unnumbered items ids of the form ``meal_id * 1000 + n``."""
        used = [i.item_id for i in items if i.item_id is not None]
        next_id = max(used, default=meal_id * 1000) + 1
        numbered = []
        for item in items:
            if item.item_id is None:
                item = replace(item, item_id=next_id)
                next_id += 1
            numbered.append(item)
        return numbered

    def add_meal(self, meal: Meal) -> Meal:
        meals = self._all_meals()
        next_id = max((m.meal_id or 0 for m in meals), default=0) + 1
        items = [replace(item, item_id=None) for item in meal.items]
        saved = replace(meal, meal_id=next_id, items=self._number_items(next_id, items))
        meals.append(saved)
        self._save_meals(meals)
        return saved

    def meals_for_date(self, day: date) -> list[Meal]:
        meals = [m for m in self._all_meals() if m.meal_date == day]
        return sorted(meals, key=lambda m: (m.meal_time or "", m.meal_id or 0))

    def get_meal(self, meal_id: int) -> Optional[Meal]:
        for meal in self._all_meals():
            if meal.meal_id == meal_id:
                return meal
        return None

    def update_meal(self, meal: Meal) -> Optional[Meal]:
        meals = self._all_meals()
        for i, existing in enumerate(meals):
            if existing.meal_id == meal.meal_id:
                saved = replace(meal, items=self._number_items(meal.meal_id, meal.items))
                meals[i] = saved
                self._save_meals(meals)
                return saved
        return None

    def delete_meal(self, meal_id: int) -> bool:
        meals = self._all_meals()
        remaining = [m for m in meals if m.meal_id != meal_id]
        if len(remaining) == len(meals):
            return False
        self._save_meals(remaining)
        return True

    def add_water(self, day: date, glasses: float) -> float:
        water = self._read("water") or {}
        total = water.get(day.isoformat(), 0) + glasses
        water[day.isoformat()] = total
        self._write("water", water)
        return total

    def water_for_date(self, day: date) -> float:
        water = self._read("water") or {}
        return water.get(day.isoformat(), 0.0)

    def clear(self) -> None:
        """Remove every document this store owns."""
        for name in ("statistics", "profile", "meals", "water"):
            self.kv.remove_item(self.key(name))
