"""Storage capability shared by the SQLite and local backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from nutrisprout.errors import StoreError
from nutrisprout.profiles.models import UserProfile
from nutrisprout.tracking.models import FoodItem, Meal, UserStats

__all__ = ["Store", "StoreError"]


class Store(ABC):
    """Per-user persistence for statistics, profile, meals and water.

    A store is bound to one user (or the guest session) when created, so no
    method takes a user id. Backends raise StoreError on failure.
    """

    user_id: str

    @abstractmethod
    def load_stats(self) -> Optional[UserStats]:
        """Return the saved stats, or None if none exist."""
        pass

    @abstractmethod
    def save_stats(self, stats: UserStats) -> None:
        """Overwrite the saved stats."""
        pass

    @abstractmethod
    def load_profile(self) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def save_profile(self, profile: UserProfile) -> None:
        pass

    @abstractmethod
    def add_meal(self, meal: Meal) -> Meal:
        """Persist a meal and return it with ids assigned."""
        pass

    @abstractmethod
    def meals_for_date(self, day: date) -> list[Meal]:
        pass

    @abstractmethod
    def get_meal(self, meal_id: int) -> Optional[Meal]:
        pass

    @abstractmethod
    def update_meal(self, meal: Meal) -> Optional[Meal]:
        """Overwrite a stored meal, items included.

        New items get ids assigned. Returns None if the meal does not exist.
        """
        pass

    @abstractmethod
    def delete_meal(self, meal_id: int) -> bool:
        """Delete a meal and its items. Returns False if it did not exist."""
        pass

    @abstractmethod
    def add_water(self, day: date, glasses: float) -> float:
        """Add glasses to a day's water total and return the new total."""
        pass

    @abstractmethod
    def water_for_date(self, day: date) -> float:
        pass

    def profile_or_new(self) -> UserProfile:
        """Saved profile, or an empty one for this store's user."""
        return self.load_profile() or UserProfile(user_id=self.user_id)

    def add_item_to_meal(self, meal_id: int, item: FoodItem) -> Optional[Meal]:
        """Append a food item to a meal and update its totals."""
        meal = self.get_meal(meal_id)
        if meal is None:
            return None
        return self.update_meal(meal.with_item(item))

    def remove_item_from_meal(self, meal_id: int, item_id: int) -> Optional[Meal]:
        """Remove a food item from a meal and update its totals.

        Returns None if the meal or the item does not exist.
        """
        meal = self.get_meal(meal_id)
        if meal is None:
            return None
        try:
            updated = meal.without_item(item_id)
        except KeyError:
            return None
        return self.update_meal(updated)
