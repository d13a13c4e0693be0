"""Tests for daily progress accumulation."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from nutrisprout.profiles.models import UserProfile
from nutrisprout.tracking.models import (
    Consumption,
    Meal,
    MealType,
    NutritionGoals,
    PlantStage,
    UserStats,
)
from nutrisprout.tracking.progress import (
    GrowthPolicy,
    ProgressTracker,
    build_daily_stats,
    count_goals_met,
    grow_plant,
    record_daily_progress,
    summarize,
    upsert_window,
)

GOALS = NutritionGoals()


class TestCountGoalsMet:
    """Tests for the five adherence checks."""

    def test_all_met(self, all_goals_met):
        assert count_goals_met(all_goals_met, GOALS) == 5

    def test_none_met(self, no_goals_met):
        assert count_goals_met(no_goals_met, GOALS) == 0

    def test_nothing_eaten_meets_the_limits(self):
        # Carbs and fat are upper limits, so an empty day meets both
        assert count_goals_met(Consumption(), GOALS) == 2

    @pytest.mark.parametrize("calories,met", [(1890, False), (1910, True), (2090, True), (2110, False)])
    def test_calories_within_five_percent(self, all_goals_met, calories, met):
        consumption = replace(all_goals_met, calories=calories)
        assert count_goals_met(consumption, GOALS) == (5 if met else 4)

    def test_protein_is_a_minimum(self, all_goals_met):
        assert count_goals_met(replace(all_goals_met, protein=115), GOALS) == 5
        assert count_goals_met(replace(all_goals_met, protein=113), GOALS) == 4
        assert count_goals_met(replace(all_goals_met, protein=300), GOALS) == 5

    def test_carbs_and_fat_are_maximums(self, all_goals_met):
        assert count_goals_met(replace(all_goals_met, carbs=262), GOALS) == 5
        assert count_goals_met(replace(all_goals_met, carbs=263), GOALS) == 4
        assert count_goals_met(replace(all_goals_met, fat=68), GOALS) == 5
        assert count_goals_met(replace(all_goals_met, fat=69), GOALS) == 4

    def test_water_needs_full_goal(self, all_goals_met):
        assert count_goals_met(replace(all_goals_met, water=7.5), GOALS) == 4

    def test_daily_stats_row(self, all_goals_met, today):
        row = build_daily_stats(today, all_goals_met, GOALS)
        assert row.date == today
        assert row.goals_met == 5
        assert row.to_dict()["caloriesGoal"] == 2000


class TestGrowPlant:
    """Tests for stage advancement."""

    def test_five_goals_from_seed(self):
        assert grow_plant(PlantStage.SEED, 0, 5) == (PlantStage.SPROUT, 0)

    def test_remainder_carries(self):
        assert grow_plant(PlantStage.SEED, 80, 2) == (PlantStage.SPROUT, 20)

    def test_partial(self):
        assert grow_plant(PlantStage.SPROUT, 20, 3) == (PlantStage.SPROUT, 80)

    def test_reaches_mature(self):
        assert grow_plant(PlantStage.FLOWERING, 60, 5) == (PlantStage.MATURE, 60)

    def test_mature_is_pinned_at_100(self):
        assert grow_plant(PlantStage.MATURE, 60, 3) == (PlantStage.MATURE, 100)
        assert grow_plant(PlantStage.MATURE, 100, 5) == (PlantStage.MATURE, 100)

    def test_no_goals_no_growth(self):
        assert grow_plant(PlantStage.LARGE_PLANT, 40, 0) == (PlantStage.LARGE_PLANT, 40)


class TestUpsertWindow:
    """Tests for the bounded 7/30 day windows."""

    def _row(self, day):
        return build_daily_stats(day, Consumption(), GOALS)

    def test_replaces_same_date(self, today, all_goals_met):
        window = [self._row(today)]
        updated = upsert_window(window, build_daily_stats(today, all_goals_met, GOALS), 7)

        assert len(updated) == 1
        assert updated[0].goals_met == 5
        assert window[0].goals_met == 2  # input untouched

    def test_evicts_oldest(self, today):
        window = [self._row(today + timedelta(days=i)) for i in range(7)]
        updated = upsert_window(window, self._row(today + timedelta(days=7)), 7)

        assert len(updated) == 7
        assert updated[0].date == today + timedelta(days=1)
        assert updated[-1].date == today + timedelta(days=7)

    def test_late_older_date_is_evicted(self, today):
        window = [self._row(today + timedelta(days=i)) for i in range(7)]
        updated = upsert_window(window, self._row(today - timedelta(days=1)), 7)

        assert [r.date for r in updated] == [r.date for r in window]


class TestRecordDailyProgress:
    """Tests for one accumulation step."""

    def test_fresh_user_all_goals(self, all_goals_met, today):
        stats = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today)

        assert stats.plant_stage == PlantStage.SPROUT
        assert stats.plant_progress == 0
        assert stats.streak_days == 1
        assert stats.last_updated == today
        assert len(stats.weekly_stats) == 1
        assert len(stats.monthly_stats) == 1

    def test_no_goals_resets_streak(self, no_goals_met, today):
        stats = replace(UserStats.default(today), streak_days=4)
        updated = record_daily_progress(stats, no_goals_met, GOALS, today)

        assert updated.streak_days == 0
        assert updated.plant_progress == 0

    def test_input_not_modified(self, all_goals_met, today):
        stats = UserStats.default(today)
        record_daily_progress(stats, all_goals_met, GOALS, today)
        assert stats.streak_days == 0
        assert stats.weekly_stats == []

    def test_windows_cap(self, all_goals_met, today):
        stats = UserStats.default(today)
        for i in range(35):
            stats = record_daily_progress(stats, all_goals_met, GOALS, today + timedelta(days=i))

        assert len(stats.weekly_stats) == 7
        assert len(stats.monthly_stats) == 30
        assert stats.weekly_stats[-1].date == today + timedelta(days=34)
        assert stats.monthly_stats[0].date == today + timedelta(days=5)


class TestPerDayPolicy:
    """Repeated accumulations within a day credit the day once."""

    def test_same_day_is_idempotent(self, all_goals_met, today):
        first = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today)
        second = record_daily_progress(first, all_goals_met, GOALS, today)

        assert second.streak_days == first.streak_days
        assert second.plant_stage == first.plant_stage
        assert second.plant_progress == first.plant_progress
        assert len(second.weekly_stats) == 1

    def test_only_new_goals_add_growth(self, today):
        partial = Consumption(calories=0, protein=0, carbs=0, fat=0, water=0)  # 2 goals
        more = Consumption(calories=2000, protein=120, carbs=0, fat=0, water=0)  # 4 goals

        first = record_daily_progress(UserStats.default(today), partial, GOALS, today)
        second = record_daily_progress(first, more, GOALS, today)

        assert first.plant_progress == 40
        assert second.plant_progress == 80
        assert second.streak_days == 1

    def test_fewer_goals_later_does_not_shrink(self, all_goals_met, no_goals_met, today):
        first = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today)
        second = record_daily_progress(first, no_goals_met, GOALS, today)

        assert second.streak_days == 1
        assert second.plant_stage == PlantStage.SPROUT
        assert second.weekly_stats[-1].goals_met == 0

    def test_next_day_extends_streak(self, all_goals_met, today):
        stats = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today)
        stats = record_daily_progress(stats, all_goals_met, GOALS, today + timedelta(days=1))

        assert stats.streak_days == 2
        assert stats.plant_stage == PlantStage.SMALL_PLANT

    def test_stats_without_credit_fields(self, all_goals_met, today):
        # Records saved before the credit fields existed
        data = UserStats.default(today).to_dict()
        del data["creditedDate"]
        del data["creditedGoals"]
        stats = record_daily_progress(UserStats.from_dict(data), all_goals_met, GOALS, today)

        assert stats.plant_stage == PlantStage.SPROUT


class TestPerUpdatePolicy:
    """Every accumulation applies growth and streak again."""

    def test_same_day_compounds(self, all_goals_met, today):
        policy = GrowthPolicy.PER_UPDATE
        first = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today, policy)
        second = record_daily_progress(first, all_goals_met, GOALS, today, policy)

        assert second.streak_days == 2
        assert second.plant_stage == PlantStage.SMALL_PLANT
        assert len(second.weekly_stats) == 1

    def test_stage_is_monotonic_and_capped(self, today):
        stats = UserStats.default(today)
        consumptions = [
            Consumption(calories=2000, protein=120, carbs=250, fat=65, water=8),
            Consumption(calories=5000, protein=0, carbs=900, fat=300, water=0),
            Consumption(),
        ]
        previous = stats.plant_stage
        for i in range(60):
            stats = record_daily_progress(
                stats, consumptions[i % 3], GOALS, today, GrowthPolicy.PER_UPDATE
            )
            assert stats.plant_stage >= previous
            assert stats.plant_stage <= PlantStage.MATURE
            previous = stats.plant_stage

        assert stats.plant_stage == PlantStage.MATURE
        assert stats.plant_progress == 100


class TestStatsSerialization:
    def test_camel_case_keys(self, all_goals_met, today):
        stats = record_daily_progress(UserStats.default(today), all_goals_met, GOALS, today)
        data = stats.to_dict()

        assert data["plantStage"] == 1
        assert data["weeklyStats"][0]["goalsMet"] == 5
        assert UserStats.from_dict(data) == stats

    def test_timestamp_dates(self):
        stats = UserStats.from_dict({"lastUpdated": "2025-04-14T09:30:00.000Z"})
        assert stats.last_updated == date(2025, 4, 14)
        assert stats.plant_stage == PlantStage.SEED


class TestSummarize:
    def test_summary(self, all_goals_met, today):
        stats = UserStats.default(today)
        stats = record_daily_progress(stats, all_goals_met, GOALS, today)
        stats = record_daily_progress(stats, Consumption(), GOALS, today + timedelta(days=1))
        summary = summarize(stats)

        assert summary.stage_label == "Sprout"
        assert summary.days_tracked == 2
        assert summary.average_goals_met == 3.5
        assert summary.perfect_days == 1

    def test_empty(self, today):
        summary = summarize(UserStats.default(today))
        assert summary.stage_label == "Seed"
        assert summary.average_goals_met == 0.0


class TestProgressTracker:
    """Tests for accumulating against a store."""

    def test_load_creates_defaults(self, guest_store, today):
        tracker = ProgressTracker(guest_store)
        stats = tracker.load(today)

        assert stats == UserStats.default(today)
        assert guest_store.load_stats() == stats

    def test_record_today_reads_meals_and_water(self, guest_store, today):
        guest_store.add_meal(
            Meal(today, MealType.LUNCH, "Lunch", total_calories=1200, total_protein=70,
                 total_carbs=150, total_fat=40)
        )
        guest_store.add_meal(
            Meal(today, MealType.DINNER, "Dinner", total_calories=800, total_protein=50,
                 total_carbs=100, total_fat=25)
        )
        guest_store.add_water(today, 8)

        stats = ProgressTracker(guest_store).record_today(today)

        assert stats.weekly_stats[-1].goals_met == 5
        assert stats.weekly_stats[-1].calories_consumed == 2000
        assert guest_store.load_stats().plant_stage == PlantStage.SPROUT

    def test_other_days_ignored(self, guest_store, today):
        guest_store.add_meal(
            Meal(today - timedelta(days=1), MealType.LUNCH, "Yesterday", total_calories=2000)
        )
        stats = ProgressTracker(guest_store).record_today(today)
        assert stats.weekly_stats[-1].calories_consumed == 0

    @pytest.mark.parametrize("store_fixture", ["guest_store", "sqlite_store"])
    def test_deleted_meal_lowers_todays_row(self, store_fixture, request, today):
        store = request.getfixturevalue(store_fixture)
        tracker = ProgressTracker(store)
        store.add_meal(Meal(today, MealType.LUNCH, "Lunch", total_calories=1200))
        typo = store.add_meal(Meal(today, MealType.DINNER, "Typo", total_calories=8000))
        assert tracker.record_today(today).weekly_stats[-1].calories_consumed == 9200

        assert store.delete_meal(typo.meal_id)
        stats = tracker.record_today(today)

        assert len(stats.weekly_stats) == 1
        assert stats.weekly_stats[-1].calories_consumed == 1200
        assert stats.monthly_stats[-1].calories_consumed == 1200

    def test_corrected_meal_updates_todays_row(self, guest_store, today):
        tracker = ProgressTracker(guest_store)
        meal = guest_store.add_meal(Meal(today, MealType.LUNCH, "Lunch", total_calories=20000))
        tracker.record_today(today)

        guest_store.update_meal(replace(meal, total_calories=2000))
        stats = tracker.record_today(today)

        assert stats.weekly_stats[-1].calories_consumed == 2000

    def test_profile_overrides_goals(self, guest_store):
        guest_store.save_profile(
            UserProfile(user_id="guest", daily_calories_target=1600, daily_water_target=10)
        )
        goals = ProgressTracker(guest_store, default_goals=NutritionGoals(protein=100)).goals()

        assert goals.calories == 1600
        assert goals.water == 10
        assert goals.protein == 100

    def test_reset(self, guest_store, all_goals_met, today):
        tracker = ProgressTracker(guest_store)
        tracker.record(all_goals_met, today)
        stats = tracker.reset(today)

        assert stats.streak_days == 0
        assert guest_store.load_stats().plant_stage == PlantStage.SEED

    def test_needs_update(self, guest_store, all_goals_met, today):
        tracker = ProgressTracker(guest_store)
        assert tracker.needs_update(today)

        tracker.record(all_goals_met, today)
        assert not tracker.needs_update(today)
        assert tracker.needs_update(today + timedelta(days=1))

    def test_sqlite_store(self, sqlite_store, all_goals_met, today):
        tracker = ProgressTracker(sqlite_store, policy=GrowthPolicy.PER_UPDATE)
        tracker.record(all_goals_met, today)
        tracker.record(all_goals_met, today)

        assert sqlite_store.load_stats().streak_days == 2
