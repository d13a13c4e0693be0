"""Database queries for profiles, meals, water and statistics."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from nutrisprout.profiles.models import UserMetrics, UserProfile
from nutrisprout.tracking.models import FoodItem, Meal, MealType, UserStats


class ProfileQueries:
    """Database queries for user profiles."""

    @staticmethod
    def get_profile(conn: sqlite3.Connection, user_id: str) -> Optional[UserProfile]:
        """Get a user's profile, or None if the user has none yet."""
        row = conn.execute(
            """
            SELECT user_id, weight_kg, height_cm, age, gender, activity_level, goal,
                   target_calories, daily_calories_target, daily_protein_target,
                   daily_carbs_target, daily_fat_target, daily_water_target,
                   selected_program_id, updated_at
            FROM user_profiles WHERE user_id = ?
            """,
            (user_id,),
        ).fetchone()

        if row is None:
            return None

        metrics = None
        if row[6] is not None:
            metrics = UserMetrics(
                weight=row[1],
                height=row[2],
                age=row[3],
                gender=row[4],
                activity_level=row[5],
                goal=row[6],
                target_calories=row[7],
            )

        return UserProfile(
            user_id=row[0],
            metrics=metrics,
            daily_calories_target=row[8],
            daily_protein_target=row[9],
            daily_carbs_target=row[10],
            daily_fat_target=row[11],
            daily_water_target=row[12],
            selected_program_id=row[13],
            updated_at=datetime.fromisoformat(row[14]) if row[14] else None,
        )

    @staticmethod
    def save_profile(conn: sqlite3.Connection, profile: UserProfile) -> None:
        """Insert or overwrite a user's profile (last write wins)."""
        metrics = profile.metrics
        conn.execute(
            """
            INSERT INTO user_profiles (
                user_id, weight_kg, height_cm, age, gender, activity_level, goal,
                target_calories, daily_calories_target, daily_protein_target,
                daily_carbs_target, daily_fat_target, daily_water_target,
                selected_program_id, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(user_id) DO UPDATE SET
                weight_kg = excluded.weight_kg,
                height_cm = excluded.height_cm,
                age = excluded.age,
                gender = excluded.gender,
                activity_level = excluded.activity_level,
                goal = excluded.goal,
                target_calories = excluded.target_calories,
                daily_calories_target = excluded.daily_calories_target,
                daily_protein_target = excluded.daily_protein_target,
                daily_carbs_target = excluded.daily_carbs_target,
                daily_fat_target = excluded.daily_fat_target,
                daily_water_target = excluded.daily_water_target,
                selected_program_id = excluded.selected_program_id,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                profile.user_id,
                metrics.weight if metrics else None,
                metrics.height if metrics else None,
                metrics.age if metrics else None,
                metrics.gender.value if metrics else None,
                metrics.activity_level.value if metrics else None,
                metrics.goal.value if metrics else None,
                metrics.target_calories if metrics else None,
                profile.daily_calories_target,
                profile.daily_protein_target,
                profile.daily_carbs_target,
                profile.daily_fat_target,
                profile.daily_water_target,
                profile.selected_program_id,
            ),
        )
        conn.commit()


class MealQueries:
    """Database queries for meals and their food items.

    Every query is scoped to a user; a meal id belonging to someone else
    behaves as if it did not exist.
    """

    @staticmethod
    def add_meal(conn: sqlite3.Connection, user_id: str, meal: Meal) -> Meal:
        """Insert a meal with its items and return it with ids set."""
        cursor = conn.execute(
            """
            INSERT INTO meals (user_id, meal_date, meal_time, meal_type, name,
                               total_calories, total_protein, total_carbs, total_fat, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                meal.meal_date.isoformat(),
                meal.meal_time,
                meal.meal_type.value,
                meal.name,
                meal.total_calories,
                meal.total_protein,
                meal.total_carbs,
                meal.total_fat,
                meal.notes,
            ),
        )
        meal_id = cursor.lastrowid
        items = _insert_items(conn, meal_id, meal.items)
        conn.commit()

        return replace(meal, meal_id=meal_id, items=items)

    @staticmethod
    def get_meal(
        conn: sqlite3.Connection, user_id: str, meal_id: int
    ) -> Optional[Meal]:
        """Get one of a user's meals with its items, or None."""
        row = conn.execute(
            f"SELECT {_MEAL_COLUMNS} FROM meals WHERE meal_id = ? AND user_id = ?",
            (meal_id, user_id),
        ).fetchone()
        if row is None:
            return None
        return _meal_from_row(conn, row)

    @staticmethod
    def get_meals_by_date(
        conn: sqlite3.Connection, user_id: str, meal_date: date
    ) -> list[Meal]:
        """Get a user's meals for one day, ordered by meal time."""
        rows = conn.execute(
            f"""
            SELECT {_MEAL_COLUMNS}
            FROM meals
            WHERE user_id = ? AND meal_date = ?
            ORDER BY meal_time, meal_id
            """,
            (user_id, meal_date.isoformat()),
        ).fetchall()

        return [_meal_from_row(conn, row) for row in rows]

    @staticmethod
    def update_meal(
        conn: sqlite3.Connection, user_id: str, meal: Meal
    ) -> Optional[Meal]:
        """Overwrite a meal and replace its items.

        Returns:
            The saved meal with new item ids, or None if the user has no
            meal with that id.
        """
        cursor = conn.execute(
            """
            UPDATE meals
            SET meal_date = ?, meal_time = ?, meal_type = ?, name = ?,
                total_calories = ?, total_protein = ?, total_carbs = ?,
                total_fat = ?, notes = ?
            WHERE meal_id = ? AND user_id = ?
            """,
            (
                meal.meal_date.isoformat(),
                meal.meal_time,
                meal.meal_type.value,
                meal.name,
                meal.total_calories,
                meal.total_protein,
                meal.total_carbs,
                meal.total_fat,
                meal.notes,
                meal.meal_id,
                user_id,
            ),
        )
        if cursor.rowcount == 0:
            return None

        # Ownership was checked by the UPDATE above
        conn.execute("DELETE FROM food_items WHERE meal_id = ?", (meal.meal_id,))
        items = _insert_items(conn, meal.meal_id, meal.items)
        conn.commit()

        return replace(meal, items=items)

    @staticmethod
    def delete_meal(conn: sqlite3.Connection, user_id: str, meal_id: int) -> bool:
        """Delete one of a user's meals. Returns False if it did not exist.

        Food items go with the meal through ON DELETE CASCADE.
        """
        cursor = conn.execute(
            "DELETE FROM meals WHERE meal_id = ? AND user_id = ?",
            (meal_id, user_id),
        )
        conn.commit()
        return cursor.rowcount > 0


class WaterQueries:
    """Database queries for the water log."""

    @staticmethod
    def add_water(
        conn: sqlite3.Connection, user_id: str, log_date: date, glasses: float
    ) -> float:
        """Add glasses to a day's total and return the new total."""
        conn.execute(
            """
            INSERT INTO water_log (user_id, log_date, glasses) VALUES (?, ?, ?)
            ON CONFLICT(user_id, log_date) DO UPDATE SET glasses = glasses + excluded.glasses
            """,
            (user_id, log_date.isoformat(), glasses),
        )
        conn.commit()
        return WaterQueries.get_water(conn, user_id, log_date)

    @staticmethod
    def get_water(conn: sqlite3.Connection, user_id: str, log_date: date) -> float:
        """Glasses logged for a day (0 if none)."""
        row = conn.execute(
            "SELECT glasses FROM water_log WHERE user_id = ? AND log_date = ?",
            (user_id, log_date.isoformat()),
        ).fetchone()
        return row[0] if row else 0.0


class StatisticsQueries:
    """Database queries for the per-user statistics document."""

    @staticmethod
    def get_stats(conn: sqlite3.Connection, user_id: str) -> Optional[UserStats]:
        """Get a user's statistics, or None if no record exists."""
        row = conn.execute(
            "SELECT statistics FROM user_statistics WHERE user_id = ?",
            (user_id,),
        ).fetchone()

        if row is None:
            return None

        return UserStats.from_dict(json.loads(row[0]))

    @staticmethod
    def save_stats(conn: sqlite3.Connection, user_id: str, stats: UserStats) -> None:
        """Insert or overwrite a user's statistics."""
        conn.execute(
            """
            INSERT INTO user_statistics (user_id, statistics, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(user_id) DO UPDATE SET
                statistics = excluded.statistics,
                updated_at = CURRENT_TIMESTAMP
            """,
            (user_id, json.dumps(stats.to_dict())),
        )
        conn.commit()


_MEAL_COLUMNS = """meal_id, meal_date, meal_time, meal_type, name, total_calories,
                   total_protein, total_carbs, total_fat, notes"""


def _insert_items(
    conn: sqlite3.Connection, meal_id: int, items: list[FoodItem]
) -> list[FoodItem]:
    saved = []
    for item in items:
        cursor = conn.execute(
            """
            INSERT INTO food_items (meal_id, name, quantity, unit, calories,
                                    protein, carbs, fat, is_ai_generated)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                meal_id,
                item.name,
                item.quantity,
                item.unit,
                item.calories,
                item.protein,
                item.carbs,
                item.fat,
                item.is_ai_generated,
            ),
        )
        saved.append(replace(item, item_id=cursor.lastrowid))
    return saved


def _meal_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> Meal:
    item_rows = conn.execute(
        """
        SELECT item_id, name, quantity, unit, calories, protein, carbs, fat,
               is_ai_generated
        FROM food_items WHERE meal_id = ? ORDER BY item_id
        """,
        (row[0],),
    ).fetchall()

    return Meal(
        meal_id=row[0],
        meal_date=date.fromisoformat(row[1]),
        meal_time=row[2],
        meal_type=MealType(row[3]),
        name=row[4],
        total_calories=row[5] or 0.0,
        total_protein=row[6] or 0.0,
        total_carbs=row[7] or 0.0,
        total_fat=row[8] or 0.0,
        notes=row[9],
        items=[
            FoodItem(
                item_id=item[0],
                name=item[1],
                quantity=item[2],
                unit=item[3],
                calories=item[4] or 0.0,
                protein=item[5] or 0.0,
                carbs=item[6] or 0.0,
                fat=item[7] or 0.0,
                is_ai_generated=bool(item[8]),
            )
            for item in item_rows
        ],
    )
