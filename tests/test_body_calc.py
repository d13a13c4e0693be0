"""Tests for BMR, TDEE and calorie target calculation."""

from __future__ import annotations

import pytest

from nutrisprout.profiles.body_calc import (
    ActivityLevel,
    Goal,
    calculate_bmi,
    calculate_bmr,
    calculate_target_calories,
    calculate_tdee,
    compute_target_calories,
    macro_targets,
    resolve_target_calories,
    round_half_up,
)
from nutrisprout.profiles.models import UserMetrics, onboarding_metrics
from nutrisprout.programs.models import MacroDistribution


class TestCalculateBMR:
    """Tests for the Mifflin-St Jeor BMR."""

    def test_reference_male(self):
        # 700 + 1062.5 - 150 + 5
        assert calculate_bmr(70, 170, 30, "male") == pytest.approx(1617.5)

    def test_reference_female(self):
        # 600 + 1031.25 - 125 - 161
        assert calculate_bmr(60, 165, 25, "female") == pytest.approx(1345.25)

    @pytest.mark.parametrize("weight,height,age", [(50, 150, 20), (70, 170, 30), (110, 195, 64)])
    def test_male_exceeds_female_by_166(self, weight, height, age):
        male = calculate_bmr(weight, height, age, "male")
        female = calculate_bmr(weight, height, age, "female")
        assert male - female == pytest.approx(166)

    def test_other_uses_female_formula(self):
        assert calculate_bmr(70, 170, 30, "other") == calculate_bmr(70, 170, 30, "female")

    def test_unknown_gender_uses_female_formula(self):
        assert calculate_bmr(70, 170, 30, "unknown") == calculate_bmr(70, 170, 30, "female")

    @pytest.mark.parametrize("weight,height,age", [(None, 170, 30), (70, 0, 30), (70, 170, None)])
    def test_missing_metric_gives_zero(self, weight, height, age):
        assert calculate_bmr(weight, height, age, "male") == 0


class TestCalculateTDEE:
    """Tests for activity scaling."""

    def test_zero_bmr(self):
        for level in ("sedentary", "moderate", "active", "unknown"):
            assert calculate_tdee(0, level) == 0

    def test_multipliers(self):
        assert calculate_tdee(1000, "sedentary") == 1200
        assert calculate_tdee(1000, "moderate") == 1550
        assert calculate_tdee(1000, ActivityLevel.ACTIVE) == 1725

    def test_sedentary_is_rounded_bmr_times_1_2(self):
        assert calculate_tdee(1345.25, "sedentary") == round_half_up(1345.25 * 1.2)

    def test_unknown_level_uses_sedentary(self):
        assert calculate_tdee(1500, "couch") == calculate_tdee(1500, "sedentary")

    def test_reference_scenario(self):
        bmr = calculate_bmr(70, 170, 30, "male")
        # 1617.5 * 1.55 = 2507.125
        assert calculate_tdee(bmr, "moderate") == 2507


class TestCalculateTargetCalories:
    """Tests for goal adjustment."""

    def test_adjustments_are_500_apart(self):
        for tdee in (1500, 2507, 3100):
            lose = calculate_target_calories(tdee, "lose")
            maintain = calculate_target_calories(tdee, "maintain")
            gain = calculate_target_calories(tdee, "gain")
            assert lose + 500 == maintain == gain - 500

    def test_zero_tdee(self):
        assert calculate_target_calories(0, Goal.GAIN) == 0

    def test_unknown_goal_leaves_tdee(self):
        assert calculate_target_calories(2200, "bulk") == 2200

    def test_full_chain(self):
        assert compute_target_calories(70, 170, 30, "male", "moderate", "maintain") == 2507
        assert compute_target_calories(70, 170, 30, "male", "moderate", "lose") == 2007
        assert compute_target_calories(None, 170, 30, "male", "moderate", "lose") == 0


class TestRounding:
    """Halves round up, unlike Python's round()."""

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(1672.5) == 1673

    def test_below_half_rounds_down(self):
        assert round_half_up(2507.125) == 2507


class TestResolveTargetCalories:
    """Tests for choosing the target a user works with."""

    def test_explicit_target_wins(self, reference_metrics):
        reference_metrics.target_calories = 1850
        assert resolve_target_calories(reference_metrics) == 1850

    def test_zero_target_is_absent(self, reference_metrics):
        reference_metrics.target_calories = 0
        assert resolve_target_calories(reference_metrics) == 2507

    def test_goal_default_when_incomplete(self):
        assert resolve_target_calories(UserMetrics(goal="lose")) == 1800
        assert resolve_target_calories(UserMetrics(goal="gain")) == 2500
        assert resolve_target_calories(UserMetrics()) == 2000


class TestMacroTargets:
    """Tests for gram targets from a macro split."""

    def test_balanced_split(self):
        macros = macro_targets(2000, MacroDistribution(protein=30, carbs=45, fat=25))
        assert macros.calories == 2000
        assert macros.protein == 150
        assert macros.carbs == 225
        assert macros.fat == 56  # 55.56


class TestBMI:
    def test_bmi(self):
        assert calculate_bmi(70, 170) == pytest.approx(24.22, abs=0.01)

    def test_missing_height(self):
        assert calculate_bmi(70, None) is None


class TestUserMetrics:
    """Tests for metric validation and onboarding defaults."""

    def test_strings_become_enums(self, reference_metrics):
        assert reference_metrics.goal is Goal.MAINTAIN
        assert reference_metrics.activity_level is ActivityLevel.MODERATE

    def test_invalid_goal_rejected(self):
        with pytest.raises(ValueError, match="goal"):
            UserMetrics(goal="shred")

    def test_invalid_activity_rejected(self):
        with pytest.raises(ValueError, match="activity_level"):
            UserMetrics(activity_level="extreme")

    def test_onboarding_defaults(self):
        metrics = onboarding_metrics()
        assert metrics.weight == 70
        assert metrics.height == 170
        assert metrics.age == 30
        assert metrics.target_calories == 2000

    def test_onboarding_goal_default_target(self):
        assert onboarding_metrics(goal="lose").target_calories == 1800

    def test_onboarding_computes_target(self):
        metrics = onboarding_metrics(
            weight=70, height=170, age=30, gender="male", activity_level="moderate", goal="gain"
        )
        assert metrics.target_calories == 3007

    def test_dict_uses_camel_case(self, reference_metrics):
        data = reference_metrics.to_dict()
        assert data["activityLevel"] == "moderate"
        assert UserMetrics.from_dict(data) == reference_metrics
