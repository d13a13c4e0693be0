"""Tests for CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from nutrisprout.cli import app

runner = CliRunner()


def invoke_json(args):
    result = runner.invoke(app, args + ["--json"])
    return result, json.loads(result.stdout)


@pytest.fixture(autouse=True)
def isolated_settings(test_settings, monkeypatch):
    """Every CLI test runs against temporary storage."""
    monkeypatch.delenv("NUTRISPROUT_VISION_API_KEY", raising=False)
    return test_settings


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "nutrition" in result.output.lower()

    def test_targets(self):
        result, data = invoke_json(["targets", "--weight", "70", "--height", "170", "--age", "30"])

        assert result.exit_code == 0
        assert data["success"] is True
        assert data["data"]["bmr"] == 1617.5
        assert data["data"]["tdee"] == 2507
        assert data["data"]["target_calories"] == 2507

    def test_targets_lose(self):
        result, data = invoke_json(
            ["targets", "--weight", "70", "--height", "170", "--age", "30", "--goal", "lose"]
        )
        assert data["data"]["target_calories"] == 2007

    def test_targets_incomplete(self):
        result = runner.invoke(app, ["targets", "--weight", "70"])
        assert result.exit_code == 0
        assert "needed" in result.output


class TestSessionHandling:
    def test_no_session(self):
        result = runner.invoke(app, ["stats", "show"])
        assert result.exit_code == 1
        assert "--guest" in result.output

    def test_no_session_json(self):
        result, data = invoke_json(["stats", "show"])
        assert result.exit_code == 1
        assert data["success"] is False
        assert data["errors"]

    def test_default_user_from_settings(self, isolated_settings):
        isolated_settings.session.default_user = "alice"
        result = runner.invoke(app, ["stats", "show"])
        assert result.exit_code == 0


class TestProgramsCommands:
    """Tests for programs subcommands."""

    def test_list(self):
        result, data = invoke_json(["programs", "list"])
        assert result.exit_code == 0
        assert len(data["data"]["programs"]) == 5

    def test_show(self):
        result = runner.invoke(app, ["programs", "show", "low-calorie"])
        assert result.exit_code == 0
        assert "Calorie-Controlled Plan" in result.output

    def test_show_unknown(self):
        result = runner.invoke(app, ["programs", "show", "keto"])
        assert result.exit_code == 1

    def test_recommend_without_profile(self):
        result, data = invoke_json(["--guest", "programs", "recommend"])
        assert result.exit_code == 0
        assert len(data["data"]["programs"]) == 5

    def test_recommend_after_setup(self):
        runner.invoke(app, ["--guest", "profile", "setup", "--goal", "lose", "--target", "1700"])
        result, data = invoke_json(["--guest", "programs", "recommend"])

        assert result.exit_code == 0
        assert data["data"]["tier"] == "goal_activity_calories"
        assert [p["id"] for p in data["data"]["programs"]] == ["low-calorie", "carb-cycling"]

    def test_select_current_clear(self):
        result = runner.invoke(app, ["--user", "alice", "programs", "select", "high-protein"])
        assert result.exit_code == 0

        _, data = invoke_json(["--user", "alice", "programs", "current"])
        assert data["data"]["program"]["id"] == "high-protein"

        runner.invoke(app, ["--user", "alice", "programs", "clear"])
        _, data = invoke_json(["--user", "alice", "programs", "current"])
        assert data["data"]["program"] is None

    def test_select_unknown(self):
        result = runner.invoke(app, ["--guest", "programs", "select", "keto"])
        assert result.exit_code == 1


class TestProfileCommands:
    def test_setup_and_show(self):
        result = runner.invoke(
            app,
            ["--user", "bob", "profile", "setup", "--weight", "70", "--height", "170",
             "--age", "30", "--gender", "male", "--activity", "moderate", "--goal", "gain"],
        )
        assert result.exit_code == 0

        _, data = invoke_json(["--user", "bob", "profile", "show"])
        assert data["data"]["metrics"]["targetCalories"] == 3007
        assert data["data"]["selectedProgramId"] == "high-protein"

    def test_setup_invalid_goal(self):
        result = runner.invoke(app, ["--guest", "profile", "setup", "--goal", "shred"])
        assert result.exit_code == 1

    def test_show_missing(self):
        result = runner.invoke(app, ["--guest", "profile", "show"])
        assert result.exit_code == 1

    def test_goal_overrides(self):
        result, data = invoke_json(["--guest", "profile", "goals", "--calories", "1800", "--water", "10"])
        assert result.exit_code == 0
        assert data["data"]["calories"] == 1800
        assert data["data"]["water"] == 10
        assert data["data"]["protein"] == 120


class TestTrackingCommands:
    """Tests for meals, water and stats."""

    def test_logging_updates_stats(self):
        runner.invoke(
            app,
            ["--guest", "meals", "add", "Lunch", "--type", "lunch", "--calories", "2000",
             "--protein", "120", "--carbs", "250", "--fat", "65"],
        )
        runner.invoke(app, ["--guest", "water", "add", "8"])

        result, data = invoke_json(["--guest", "stats", "show"])
        assert result.exit_code == 0
        stats = data["data"]["statistics"]
        assert stats["weeklyStats"][-1]["goalsMet"] == 5
        assert stats["plantStage"] == 1
        assert stats["streakDays"] == 1

    def test_meals_list(self):
        runner.invoke(app, ["--guest", "meals", "add", "Toast", "--calories", "250"])
        result, data = invoke_json(["--guest", "meals", "list"])

        assert result.exit_code == 0
        assert [m["name"] for m in data["data"]["meals"]] == ["Toast"]

    def test_delete_meal_updates_stats(self):
        runner.invoke(
            app,
            ["--guest", "meals", "add", "Lunch", "--calories", "2000",
             "--protein", "120", "--carbs", "250", "--fat", "65"],
        )
        _, added = invoke_json(["--guest", "meals", "add", "Typo", "--calories", "9000"])
        runner.invoke(app, ["--guest", "water", "add", "8"])

        _, data = invoke_json(["--guest", "stats", "show"])
        assert data["data"]["statistics"]["weeklyStats"][-1]["caloriesConsumed"] == 11000

        result, data = invoke_json(["--guest", "meals", "delete", str(added["data"]["id"])])
        assert result.exit_code == 0
        assert data["data"]["name"] == "Typo"

        _, data = invoke_json(["--guest", "stats", "show"])
        today_row = data["data"]["statistics"]["weeklyStats"][-1]
        assert today_row["caloriesConsumed"] == 2000
        assert today_row["goalsMet"] == 5

    def test_delete_missing_meal(self):
        result = runner.invoke(app, ["--guest", "meals", "delete", "99"])
        assert result.exit_code == 1

    def test_edit_meal(self):
        _, added = invoke_json(["--guest", "meals", "add", "Lunch", "--calories", "20000"])
        meal_id = str(added["data"]["id"])

        result, data = invoke_json(
            ["--guest", "meals", "edit", meal_id, "--calories", "2000", "--type", "lunch"]
        )
        assert result.exit_code == 0
        assert data["data"]["totalCalories"] == 2000
        assert data["data"]["mealType"] == "lunch"
        assert data["data"]["name"] == "Lunch"

        _, data = invoke_json(["--guest", "stats", "show"])
        assert data["data"]["statistics"]["weeklyStats"][-1]["caloriesConsumed"] == 2000

    def test_add_and_remove_item(self):
        _, added = invoke_json(["--guest", "meals", "add", "Breakfast", "--calories", "300"])
        meal_id = str(added["data"]["id"])

        result, data = invoke_json(
            ["--guest", "meals", "add-item", meal_id, "Banana", "--calories", "105"]
        )
        assert result.exit_code == 0
        assert data["data"]["totalCalories"] == 405
        item_id = str(data["data"]["items"][0]["id"])

        result, data = invoke_json(["--guest", "meals", "remove-item", meal_id, item_id])
        assert result.exit_code == 0
        assert data["data"]["totalCalories"] == 300
        assert data["data"]["items"] == []

    def test_remove_missing_item(self):
        _, added = invoke_json(["--guest", "meals", "add", "Breakfast", "--calories", "300"])
        result = runner.invoke(
            app, ["--guest", "meals", "remove-item", str(added["data"]["id"]), "5"]
        )
        assert result.exit_code == 1

    def test_invalid_meal_type(self):
        result = runner.invoke(app, ["--guest", "meals", "add", "Toast", "--type", "brunch"])
        assert result.exit_code == 1

    def test_invalid_date(self):
        result = runner.invoke(app, ["--guest", "meals", "list", "--date", "14/04/2025"])
        assert result.exit_code == 1

    def test_water_must_be_positive(self):
        result = runner.invoke(app, ["--guest", "water", "add", "0"])
        assert result.exit_code == 1

    def test_analyze_demo_mode(self, tmp_path):
        image = tmp_path / "meal.jpg"
        image.write_bytes(b"\xff\xd8")

        result, data = invoke_json(["--guest", "meals", "analyze", str(image), "--seed", "3", "--save"])
        assert result.exit_code == 0
        assert data["data"]["simulated"] is True
        assert data["data"]["savedMeal"]["items"]

    def test_stats_update_and_reset(self):
        result = runner.invoke(app, ["--user", "carol", "stats", "update"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["--user", "carol", "stats", "reset", "--yes"])
        assert result.exit_code == 0

        _, data = invoke_json(["--user", "carol", "stats", "show"])
        assert data["data"]["statistics"]["weeklyStats"] == []
