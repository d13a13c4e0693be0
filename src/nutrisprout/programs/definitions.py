"""Built-in meal program catalog.

The catalog is a module-level tuple loaded once at import. Its order is
meaningful: the recommender breaks ties by catalog order at every tier.
"""

from __future__ import annotations

from nutrisprout.profiles.body_calc import ActivityLevel, Goal
from nutrisprout.programs.models import (
    CalorieRange,
    MacroDistribution,
    MealProgram,
    SampleDay,
    SampleMeal,
)


# =============================================================================
# Helpers
# =============================================================================

def _meal(
    name: str, description: str, calories: float, protein: float, carbs: float, fat: float
) -> SampleMeal:
    return SampleMeal(
        name=name,
        description=description,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


ALL_LEVELS = frozenset(ActivityLevel)


# =============================================================================
# Programs
# =============================================================================

BALANCED_PROGRAM = MealProgram(
    id="balanced",
    name="Balanced Nutrition Plan",
    description="A well-rounded approach with balanced macronutrients suitable for most people",
    target_goal=Goal.MAINTAIN,
    activity_levels=ALL_LEVELS,
    calorie_range=CalorieRange(min=1800, max=2500),
    macro_distribution=MacroDistribution(protein=30, carbs=45, fat=25),
    sample_days=(
        SampleDay(
            day="Monday",
            meals=(
                _meal("Breakfast", "Greek yogurt with berries and honey, whole grain toast", 450, 25, 60, 12),
                _meal("Lunch", "Grilled chicken salad with olive oil dressing and quinoa", 550, 35, 40, 20),
                _meal("Dinner", "Baked salmon with roasted vegetables and brown rice", 650, 40, 50, 25),
                _meal("Snack", "Apple with almond butter", 250, 8, 25, 12),
            ),
        ),
    ),
    tags=("balanced", "sustainable", "beginner-friendly"),
)

HIGH_PROTEIN_PROGRAM = MealProgram(
    id="high-protein",
    name="High Protein Plan",
    description="Higher protein intake to support muscle recovery and growth",
    target_goal=Goal.GAIN,
    activity_levels=frozenset({ActivityLevel.MODERATE, ActivityLevel.ACTIVE}),
    calorie_range=CalorieRange(min=2200, max=3000),
    macro_distribution=MacroDistribution(protein=40, carbs=40, fat=20),
    sample_days=(
        SampleDay(
            day="Monday",
            meals=(
                _meal("Breakfast", "Protein smoothie with banana, protein powder, and oats", 550, 40, 60, 10),
                _meal("Lunch", "Turkey and avocado wrap with side of cottage cheese", 650, 45, 45, 25),
                _meal("Dinner", "Steak with sweet potato and steamed broccoli", 750, 50, 50, 25),
                _meal("Snack", "Protein bar and banana", 300, 20, 30, 8),
            ),
        ),
    ),
    tags=("muscle-building", "strength", "recovery"),
)

LOW_CALORIE_PROGRAM = MealProgram(
    id="low-calorie",
    name="Calorie-Controlled Plan",
    description="Lower calorie intake with focus on nutrient density for weight loss",
    target_goal=Goal.LOSE,
    activity_levels=frozenset({ActivityLevel.SEDENTARY, ActivityLevel.MODERATE}),
    calorie_range=CalorieRange(min=1400, max=1900),
    macro_distribution=MacroDistribution(protein=35, carbs=35, fat=30),
    sample_days=(
        SampleDay(
            day="Monday",
            meals=(
                _meal("Breakfast", "Veggie egg white omelet with whole grain toast", 350, 25, 30, 10),
                _meal("Lunch", "Large garden salad with grilled chicken and light vinaigrette", 400, 30, 20, 15),
                _meal("Dinner", "Baked white fish with steamed vegetables and small portion of quinoa", 450, 35, 30, 12),
                _meal("Snack", "Greek yogurt with berries", 150, 15, 10, 5),
            ),
        ),
    ),
    tags=("weight-loss", "calorie-deficit", "portion-control"),
)

CARB_CYCLING_PROGRAM = MealProgram(
    id="carb-cycling",
    name="Carb Cycling Plan",
    description=(
        "Alternates between high and low carb days to maximize fat loss "
        "while maintaining performance"
    ),
    target_goal=Goal.LOSE,
    activity_levels=frozenset({ActivityLevel.MODERATE, ActivityLevel.ACTIVE}),
    calorie_range=CalorieRange(min=1600, max=2200),
    macro_distribution=MacroDistribution(protein=35, carbs=30, fat=35),
    sample_days=(
        SampleDay(
            day="High Carb Day (Training)",
            meals=(
                _meal("Breakfast", "Oatmeal with banana, protein powder and almond milk", 450, 30, 60, 8),
                _meal("Lunch", "Brown rice bowl with lean protein and vegetables", 550, 35, 65, 10),
                _meal("Dinner", "Whole grain pasta with turkey meatballs and tomato sauce", 600, 40, 70, 12),
            ),
        ),
        SampleDay(
            day="Low Carb Day (Rest)",
            meals=(
                _meal("Breakfast", "Eggs with avocado and vegetables", 400, 25, 10, 28),
                _meal("Lunch", "Large salad with grilled chicken, olive oil and nuts", 500, 35, 15, 30),
                _meal("Dinner", "Grilled salmon with roasted vegetables", 550, 40, 15, 32),
            ),
        ),
    ),
    tags=("athletic", "performance", "fat-loss", "advanced"),
)

PLANT_BASED_PROGRAM = MealProgram(
    id="plant-based",
    name="Plant-Based Plan",
    description="Nutrient-rich vegetarian approach focusing on whole foods",
    target_goal=Goal.MAINTAIN,
    activity_levels=ALL_LEVELS,
    calorie_range=CalorieRange(min=1700, max=2400),
    macro_distribution=MacroDistribution(protein=25, carbs=55, fat=20),
    sample_days=(
        SampleDay(
            day="Monday",
            meals=(
                _meal("Breakfast", "Smoothie bowl with plant protein, fruits, and chia seeds", 450, 20, 65, 10),
                _meal("Lunch", "Lentil soup with whole grain bread and hummus", 500, 22, 70, 10),
                _meal("Dinner", "Tofu stir-fry with brown rice and vegetables", 550, 25, 70, 15),
                _meal("Snack", "Mixed nuts and dried fruit", 250, 8, 20, 16),
            ),
        ),
    ),
    tags=("vegetarian", "plant-based", "sustainable"),
)


# =============================================================================
# Catalog
# =============================================================================

MEAL_PROGRAMS: tuple[MealProgram, ...] = (
    BALANCED_PROGRAM,
    HIGH_PROTEIN_PROGRAM,
    LOW_CALORIE_PROGRAM,
    CARB_CYCLING_PROGRAM,
    PLANT_BASED_PROGRAM,
)

PROGRAM_REGISTRY: dict[str, MealProgram] = {p.id: p for p in MEAL_PROGRAMS}


def get_program(program_id: str) -> MealProgram | None:
    """Get a program by id.

    Args:
        program_id: Program identifier (e.g., "balanced", "low-calorie")

    Returns:
        MealProgram or None if not found.
    """
    return PROGRAM_REGISTRY.get(program_id.lower())


def list_programs() -> list[MealProgram]:
    """Return the catalog in catalog order."""
    return list(MEAL_PROGRAMS)


def list_program_ids() -> list[str]:
    """Return program ids in catalog order."""
    return [p.id for p in MEAL_PROGRAMS]
