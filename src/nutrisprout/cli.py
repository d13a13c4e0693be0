"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from nutrisprout.config import Settings, get_settings, set_settings
from nutrisprout.errors import SessionError, StoreError
from nutrisprout.profiles.body_calc import (
    calculate_bmi,
    calculate_bmr,
    calculate_target_calories,
    calculate_tdee,
    macro_targets,
    resolve_target_calories,
)
from nutrisprout.programs import get_program, list_programs, recommend
from nutrisprout.session import Session, open_store, open_tracker
from nutrisprout.storage.base import Store

app = typer.Typer(
    help="Nutrition targets, meal programs and daily progress tracking",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
profile_app = typer.Typer(help="Onboarding, body metrics and goal overrides")
programs_app = typer.Typer(help="Browse, recommend and select meal programs")
meals_app = typer.Typer(help="Log meals and analyze meal photos")
water_app = typer.Typer(help="Log water intake")
stats_app = typer.Typer(help="Goal adherence, streak and plant growth")

app.add_typer(profile_app, name="profile")
app.add_typer(programs_app, name="programs")
app.add_typer(meals_app, name="meals")
app.add_typer(water_app, name="water")
app.add_typer(stats_app, name="stats")

# Session options from the top-level callback
_state: dict = {"user": None, "guest": False}


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(command: str, message: str, json_output: bool, hint: Optional[str] = None) -> NoReturn:
    """Report a user error and exit with status 1."""
    if json_output:
        response: dict = {"success": False, "command": command, "errors": [message]}
        if hint:
            response["suggestions"] = [hint]
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        if hint:
            console.print(hint)
    raise typer.Exit(1)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def current_session(settings: Settings) -> Session:
    """Session from --guest / --user, else the configured default user."""
    if _state["guest"]:
        return Session.guest()
    user_id = _state["user"] or settings.session.default_user
    if user_id:
        return Session.for_user(user_id)
    return Session()


def session_store(command: str, json_output: bool) -> Store:
    """Open the store for the current session or exit with a hint."""
    settings = get_settings()
    try:
        return open_store(current_session(settings), settings)
    except SessionError as e:
        fail(
            command,
            str(e),
            json_output,
            hint="Pass --user <id> or --guest before the command, e.g. nutrisprout --guest stats show",
        )


def parse_day(value: Optional[str], command: str, json_output: bool) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(command, f"Invalid date '{value}', expected YYYY-MM-DD", json_output)


@app.callback()
def main(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Act as a signed-in user"),
    guest: bool = typer.Option(False, "--guest", help="Act as the guest session (local storage only)"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Nutrition targets, meal programs and daily progress tracking."""
    setup_logging(verbose)
    if config is not None:
        set_settings(Settings.load(config))
    _state["user"] = user
    _state["guest"] = guest


# ============================================================================
# Calorie Target Command
# ============================================================================


@app.command()
def targets(
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    gender: str = typer.Option("male", "--gender", help="Gender (male/female/other)"),
    activity: str = typer.Option(
        "moderate", "--activity", help="Activity level (sedentary/moderate/active)"
    ),
    goal: str = typer.Option("maintain", "--goal", help="Goal (lose/maintain/gain)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate BMR, TDEE and a daily calorie target from body metrics."""
    bmr = calculate_bmr(weight, height, age, gender)
    tdee = calculate_tdee(bmr, activity)
    target = calculate_target_calories(tdee, goal)
    bmi = calculate_bmi(weight, height)

    if json_output:
        output_json({
            "success": True,
            "command": "targets",
            "data": {
                "bmr": bmr,
                "tdee": tdee,
                "target_calories": target,
                "bmi": round(bmi, 1) if bmi else None,
            },
            "human_summary": f"Target: {target} kcal/day (TDEE {tdee})",
        })
        return

    if not bmr:
        console.print("[yellow]Weight, height and age are all needed to compute a target.[/yellow]")
        return

    console.print(f"[bold]BMR:[/bold] {bmr:.1f} kcal/day (Mifflin-St Jeor)")
    console.print(f"[bold]TDEE:[/bold] {tdee} kcal/day ({activity})")
    console.print(f"[bold green]Target:[/bold green] {target} kcal/day ({goal})")
    if bmi:
        console.print(f"[dim]BMI: {bmi:.1f}[/dim]")


# ============================================================================
# Profile Commands
# ============================================================================


@profile_app.command("setup")
def profile_setup(
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg (default 70)"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm (default 170)"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years (default 30)"),
    gender: Optional[str] = typer.Option(None, "--gender", help="Gender (male/female/other)"),
    activity: Optional[str] = typer.Option(
        None, "--activity", help="Activity level (sedentary/moderate/active)"
    ),
    goal: Optional[str] = typer.Option(None, "--goal", help="Goal (lose/maintain/gain)"),
    target: Optional[int] = typer.Option(None, "--target", help="Calorie target override"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Save onboarding metrics and pre-select a matching program."""
    from nutrisprout.programs.selection import onboard

    store = session_store("profile setup", json_output)
    try:
        profile = onboard(
            store,
            weight=weight,
            height=height,
            age=age,
            gender=gender,
            activity_level=activity,
            goal=goal,
            target_calories=target,
        )
    except ValueError as e:
        fail("profile setup", str(e), json_output)

    metrics = profile.metrics
    if json_output:
        output_json({
            "success": True,
            "command": "profile setup",
            "data": profile.to_dict(),
            "human_summary": f"Target {metrics.target_calories} kcal/day, program {profile.selected_program_id}",
        })
    else:
        console.print(f"[green]Saved profile for {store.user_id}[/green]")
        console.print(f"  Target: {metrics.target_calories} kcal/day")
        if profile.selected_program_id:
            console.print(f"  Selected program: {profile.selected_program_id}")


@profile_app.command("show")
def profile_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the saved profile."""
    store = session_store("profile show", json_output)
    profile = store.load_profile()

    if profile is None:
        fail(
            "profile show",
            "No profile found",
            json_output,
            hint="Create one with: nutrisprout profile setup --weight 70 --height 170 --age 30",
        )

    if json_output:
        output_json({
            "success": True,
            "command": "profile show",
            "data": profile.to_dict(),
            "human_summary": f"Profile for {profile.user_id}",
        })
        return

    console.print(f"[bold]Profile ({profile.user_id})[/bold]")
    metrics = profile.metrics
    if metrics:
        console.print(f"  Weight: {metrics.weight} kg")
        console.print(f"  Height: {metrics.height} cm")
        console.print(f"  Age: {metrics.age}")
        console.print(f"  Gender: {metrics.gender.value}")
        console.print(f"  Activity: {metrics.activity_level.value}")
        console.print(f"  Goal: {metrics.goal.value}")
        console.print(f"  Target: {resolve_target_calories(metrics)} kcal/day")
    if profile.selected_program_id:
        console.print(f"  Program: {profile.selected_program_id}")

    overrides = {
        "calories": profile.daily_calories_target,
        "protein": profile.daily_protein_target,
        "carbs": profile.daily_carbs_target,
        "fat": profile.daily_fat_target,
        "water": profile.daily_water_target,
    }
    set_overrides = {k: v for k, v in overrides.items() if v}
    if set_overrides:
        console.print("  Goal overrides: " + ", ".join(f"{k}={v:g}" for k, v in set_overrides.items()))


@profile_app.command("goals")
def profile_goals(
    calories: Optional[float] = typer.Option(None, "--calories", help="Daily calorie goal"),
    protein: Optional[float] = typer.Option(None, "--protein", help="Daily protein goal (g)"),
    carbs: Optional[float] = typer.Option(None, "--carbs", help="Daily carbs limit (g)"),
    fat: Optional[float] = typer.Option(None, "--fat", help="Daily fat limit (g)"),
    water: Optional[float] = typer.Option(None, "--water", help="Daily water goal (glasses)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Set per-user daily goal overrides used for progress tracking."""
    from dataclasses import replace

    store = session_store("profile goals", json_output)
    profile = store.profile_or_new()

    updates = {
        "daily_calories_target": calories,
        "daily_protein_target": protein,
        "daily_carbs_target": carbs,
        "daily_fat_target": fat,
        "daily_water_target": water,
    }
    profile = replace(profile, **{k: v for k, v in updates.items() if v is not None})
    store.save_profile(profile)

    goals = open_tracker(store).goals()
    if json_output:
        output_json({
            "success": True,
            "command": "profile goals",
            "data": {
                "calories": goals.calories,
                "protein": goals.protein,
                "carbs": goals.carbs,
                "fat": goals.fat,
                "water": goals.water,
            },
            "human_summary": "Goals updated",
        })
    else:
        console.print("[green]Goals updated[/green]")
        console.print(
            f"  {goals.calories:g} kcal, {goals.protein:g}g protein, {goals.carbs:g}g carbs, "
            f"{goals.fat:g}g fat, {goals.water:g} glasses water"
        )


# ============================================================================
# Program Commands
# ============================================================================


def _program_table(programs: list, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Goal")
    table.add_column("Calories", justify="right")
    table.add_column("P/C/F %", justify="right")

    for p in programs:
        macros = p.macro_distribution
        table.add_row(
            p.id,
            p.name,
            p.target_goal.value,
            f"{p.calorie_range.min}-{p.calorie_range.max}",
            f"{macros.protein:g}/{macros.carbs:g}/{macros.fat:g}",
        )
    return table


@programs_app.command("list")
def programs_list(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all meal programs."""
    programs = list_programs()

    if json_output:
        output_json({
            "success": True,
            "command": "programs list",
            "data": {"programs": [p.to_dict() for p in programs]},
            "human_summary": f"{len(programs)} programs",
        })
    else:
        console.print(_program_table(programs, "Meal Programs"))


@programs_app.command("show")
def programs_show(
    program_id: str = typer.Argument(..., help="Program ID (e.g., balanced)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a program with its sample days."""
    program = get_program(program_id)
    if program is None:
        fail("programs show", f"Unknown program: {program_id}", json_output,
             hint="See available programs with: nutrisprout programs list")

    if json_output:
        output_json({
            "success": True,
            "command": "programs show",
            "data": program.to_dict(),
            "human_summary": program.name,
        })
        return

    console.print(Panel(program.description, title=f"[bold]{program.name}[/bold] ({program.id})"))
    console.print(f"Goal: {program.target_goal.value}")
    console.print(
        "Activity levels: " + ", ".join(sorted(level.value for level in program.activity_levels))
    )
    console.print(f"Calories: {program.calorie_range.min}-{program.calorie_range.max} kcal/day")
    if program.tags:
        console.print(f"Tags: {', '.join(program.tags)}")

    for day in program.sample_days:
        table = Table(title=day.day)
        table.add_column("Meal")
        table.add_column("Description")
        table.add_column("kcal", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")
        for meal in day.meals:
            table.add_row(
                meal.name, meal.description, f"{meal.calories:g}",
                f"{meal.protein:g}", f"{meal.carbs:g}", f"{meal.fat:g}",
            )
        console.print(table)


@programs_app.command("recommend")
def programs_recommend(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum programs to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recommend programs for the saved profile."""
    store = session_store("programs recommend", json_output)
    profile = store.load_profile()
    limit = get_settings().programs.limit if limit is None else limit

    if profile is None or profile.metrics is None:
        # Without metrics every program is offered
        programs = list_programs()
        if json_output:
            output_json({
                "success": True,
                "command": "programs recommend",
                "data": {"tier": None, "programs": [p.to_dict() for p in programs]},
                "human_summary": "No profile yet, showing all programs",
            })
        else:
            console.print("[yellow]No profile yet, showing all programs[/yellow]")
            console.print(_program_table(programs, "Meal Programs"))
        return

    rec = recommend(profile.metrics, limit=limit)
    if json_output:
        output_json({
            "success": True,
            "command": "programs recommend",
            "data": rec.to_dict(),
            "human_summary": f"{len(rec.programs)} programs ({rec.tier.value} match)",
        })
    else:
        console.print(_program_table(rec.programs, f"Recommended ({rec.tier.value} match)"))
        console.print(f"[dim]Matched against {rec.target_calories} kcal/day[/dim]")


@programs_app.command("select")
def programs_select(
    program_id: str = typer.Argument(..., help="Program ID to select"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Select a program, replacing any current selection."""
    from nutrisprout.programs.selection import select_program

    store = session_store("programs select", json_output)
    try:
        program = select_program(store, program_id)
    except ValueError as e:
        fail("programs select", str(e), json_output,
             hint="See available programs with: nutrisprout programs list")

    if json_output:
        output_json({
            "success": True,
            "command": "programs select",
            "data": {"program_id": program.id},
            "human_summary": f"Selected {program.name}",
        })
    else:
        console.print(f"[green]Selected {program.name}[/green]")


@programs_app.command("current")
def programs_current(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the selected program."""
    from nutrisprout.programs.selection import get_selected_program

    store = session_store("programs current", json_output)
    program = get_selected_program(store)

    if json_output:
        output_json({
            "success": True,
            "command": "programs current",
            "data": {"program": program.to_dict() if program else None},
            "human_summary": program.name if program else "No program selected",
        })
    elif program is None:
        console.print("[dim]No program selected[/dim]")
    else:
        console.print(f"[bold]{program.name}[/bold] ({program.id})")
        metrics = store.profile_or_new().metrics
        if metrics:
            macros = macro_targets(resolve_target_calories(metrics), program.macro_distribution)
            console.print(
                f"  Daily targets: {macros.calories} kcal, {macros.protein}g protein, "
                f"{macros.carbs}g carbs, {macros.fat}g fat"
            )


@programs_app.command("clear")
def programs_clear(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Clear the selected program."""
    from nutrisprout.programs.selection import clear_selected_program

    store = session_store("programs clear", json_output)
    clear_selected_program(store)

    if json_output:
        output_json({
            "success": True,
            "command": "programs clear",
            "data": {},
            "human_summary": "Program selection cleared",
        })
    else:
        console.print("[green]Program selection cleared[/green]")


# ============================================================================
# Meal and Water Commands
# ============================================================================


def _record_progress(store: Store, day: date) -> None:
    """Re-accumulate today's progress after a log change."""
    if day != date.today():
        return
    try:
        open_tracker(store).record_today(day)
    except StoreError as e:
        logging.getLogger(__name__).warning("Could not update statistics: %s", e)


@meals_app.command("add")
def meals_add(
    name: str = typer.Argument(..., help="Meal name"),
    meal_type: str = typer.Option("snack", "--type", "-t", help="breakfast/lunch/dinner/snack"),
    calories: float = typer.Option(0.0, "--calories", help="Total calories"),
    protein: float = typer.Option(0.0, "--protein", help="Total protein (g)"),
    carbs: float = typer.Option(0.0, "--carbs", help="Total carbs (g)"),
    fat: float = typer.Option(0.0, "--fat", help="Total fat (g)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    time_str: Optional[str] = typer.Option(None, "--time", help="Time (HH:MM)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a meal by its totals."""
    from nutrisprout.tracking.models import Meal, MealType

    day = parse_day(date_str, "meals add", json_output)
    try:
        kind = MealType(meal_type.lower())
    except ValueError:
        fail("meals add", f"Invalid meal type '{meal_type}'", json_output)

    store = session_store("meals add", json_output)
    meal = store.add_meal(
        Meal(
            meal_date=day,
            meal_type=kind,
            name=name,
            total_calories=calories,
            total_protein=protein,
            total_carbs=carbs,
            total_fat=fat,
            meal_time=time_str,
            notes=notes,
        )
    )
    _record_progress(store, day)

    if json_output:
        output_json({
            "success": True,
            "command": "meals add",
            "data": meal.to_dict(),
            "human_summary": f"Logged {name} ({calories:g} kcal)",
        })
    else:
        console.print(f"[green]Logged:[/green] {name} ({calories:g} kcal) on {day}")


@meals_app.command("list")
def meals_list(
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List meals logged for a day."""
    day = parse_day(date_str, "meals list", json_output)
    store = session_store("meals list", json_output)
    meals = store.meals_for_date(day)
    water = store.water_for_date(day)

    if json_output:
        output_json({
            "success": True,
            "command": "meals list",
            "data": {
                "date": day.isoformat(),
                "meals": [m.to_dict() for m in meals],
                "water": water,
            },
            "human_summary": f"{len(meals)} meals on {day}",
        })
        return

    if not meals:
        console.print(f"[dim]No meals logged on {day}[/dim]")
    else:
        table = Table(title=f"Meals on {day}")
        table.add_column("ID", justify="right", style="dim")
        table.add_column("Type")
        table.add_column("Name")
        table.add_column("kcal", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")
        for m in meals:
            table.add_row(
                str(m.meal_id), m.meal_type.value, m.name, f"{m.total_calories:g}",
                f"{m.total_protein:g}", f"{m.total_carbs:g}", f"{m.total_fat:g}",
            )
        console.print(table)
    console.print(f"Water: {water:g} glasses")


def _meal_result(command: str, meal, message: str, json_output: bool) -> None:
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": meal.to_dict(),
            "human_summary": message,
        })
    else:
        console.print(f"[green]{message}[/green]")


@meals_app.command("delete")
def meals_delete(
    meal_id: int = typer.Argument(..., help="Meal ID (see 'meals list')"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a logged meal and its food items."""
    store = session_store("meals delete", json_output)
    meal = store.get_meal(meal_id)
    if meal is None or not store.delete_meal(meal_id):
        fail("meals delete", f"Meal {meal_id} not found", json_output)
    _record_progress(store, meal.meal_date)

    _meal_result("meals delete", meal, f"Deleted {meal.name} ({meal.total_calories:g} kcal)", json_output)


@meals_app.command("edit")
def meals_edit(
    meal_id: int = typer.Argument(..., help="Meal ID (see 'meals list')"),
    name: Optional[str] = typer.Option(None, "--name", help="New meal name"),
    meal_type: Optional[str] = typer.Option(None, "--type", "-t", help="breakfast/lunch/dinner/snack"),
    calories: Optional[float] = typer.Option(None, "--calories", help="Total calories"),
    protein: Optional[float] = typer.Option(None, "--protein", help="Total protein (g)"),
    carbs: Optional[float] = typer.Option(None, "--carbs", help="Total carbs (g)"),
    fat: Optional[float] = typer.Option(None, "--fat", help="Total fat (g)"),
    time_str: Optional[str] = typer.Option(None, "--time", help="Time (HH:MM)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Correct a logged meal. Only the given fields change."""
    from dataclasses import replace

    from nutrisprout.tracking.models import MealType

    store = session_store("meals edit", json_output)
    meal = store.get_meal(meal_id)
    if meal is None:
        fail("meals edit", f"Meal {meal_id} not found", json_output)

    changes = {
        "name": name,
        "total_calories": calories,
        "total_protein": protein,
        "total_carbs": carbs,
        "total_fat": fat,
        "meal_time": time_str,
        "notes": notes,
    }
    if meal_type is not None:
        try:
            changes["meal_type"] = MealType(meal_type.lower())
        except ValueError:
            fail("meals edit", f"Invalid meal type '{meal_type}'", json_output)

    updated = store.update_meal(
        replace(meal, **{k: v for k, v in changes.items() if v is not None})
    )
    if updated is None:
        fail("meals edit", f"Meal {meal_id} not found", json_output)
    _record_progress(store, updated.meal_date)

    _meal_result("meals edit", updated, f"Updated {updated.name} ({updated.total_calories:g} kcal)", json_output)


@meals_app.command("add-item")
def meals_add_item(
    meal_id: int = typer.Argument(..., help="Meal ID (see 'meals list')"),
    name: str = typer.Argument(..., help="Food name"),
    calories: float = typer.Option(0.0, "--calories", help="Calories"),
    protein: float = typer.Option(0.0, "--protein", help="Protein (g)"),
    carbs: float = typer.Option(0.0, "--carbs", help="Carbs (g)"),
    fat: float = typer.Option(0.0, "--fat", help="Fat (g)"),
    quantity: Optional[float] = typer.Option(None, "--quantity", "-q", help="Amount"),
    unit: Optional[str] = typer.Option(None, "--unit", help="Unit for the amount"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a food item to a meal; the meal's totals grow by its nutrients."""
    from nutrisprout.tracking.models import FoodItem

    store = session_store("meals add-item", json_output)
    item = FoodItem(
        name=name,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        quantity=quantity,
        unit=unit,
    )
    meal = store.add_item_to_meal(meal_id, item)
    if meal is None:
        fail("meals add-item", f"Meal {meal_id} not found", json_output)
    _record_progress(store, meal.meal_date)

    _meal_result("meals add-item", meal, f"Added {name} to {meal.name}", json_output)


@meals_app.command("remove-item")
def meals_remove_item(
    meal_id: int = typer.Argument(..., help="Meal ID (see 'meals list')"),
    item_id: int = typer.Argument(..., help="Food item ID (see 'meals list --json')"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Remove a food item from a meal; its nutrients come off the totals."""
    store = session_store("meals remove-item", json_output)
    meal = store.remove_item_from_meal(meal_id, item_id)
    if meal is None:
        fail("meals remove-item", f"Item {item_id} not found in meal {meal_id}", json_output)
    _record_progress(store, meal.meal_date)

    _meal_result("meals remove-item", meal, f"Removed item {item_id} from {meal.name}", json_output)


@meals_app.command("analyze")
def meals_analyze(
    image: Path = typer.Argument(..., help="Path to a meal photo"),
    save: bool = typer.Option(False, "--save", help="Log the detected foods as a meal"),
    meal_type: str = typer.Option("snack", "--type", "-t", help="Meal type when saving"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for demo-mode detection"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Detect foods in a meal photo."""
    import random

    from nutrisprout.tracking.models import Meal, MealType
    from nutrisprout.vision import VisionClient

    try:
        kind = MealType(meal_type.lower())
    except ValueError:
        fail("meals analyze", f"Invalid meal type '{meal_type}'", json_output)

    client = VisionClient.from_settings(rng=random.Random(seed) if seed is not None else None)
    result = client.analyze_file(image)

    saved = None
    if save and result.items:
        store = session_store("meals analyze", json_output)
        today = date.today()
        saved = store.add_meal(
            Meal.from_items(today, kind, ", ".join(i.name for i in result.items), result.items)
        )
        _record_progress(store, today)

    if json_output:
        data = result.to_dict()
        data["savedMeal"] = saved.to_dict() if saved else None
        output_json({
            "success": True,
            "command": "meals analyze",
            "data": data,
            "human_summary": result.message,
        })
        return

    style = "yellow" if result.simulated else "green"
    console.print(f"[{style}]{result.message}[/{style}] (confidence {result.confidence:.0%})")
    for item in result.items:
        console.print(
            f"  {item.name}: {item.calories:g} kcal, {item.protein:g}g P, "
            f"{item.carbs:g}g C, {item.fat:g}g F"
        )
    if saved:
        console.print(f"[green]Logged as {kind.value}[/green]")


@water_app.command("add")
def water_add(
    glasses: float = typer.Argument(1.0, help="Glasses of water"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log glasses of water."""
    if glasses <= 0:
        fail("water add", "Glasses must be positive", json_output)

    day = parse_day(date_str, "water add", json_output)
    store = session_store("water add", json_output)
    total = store.add_water(day, glasses)
    _record_progress(store, day)

    if json_output:
        output_json({
            "success": True,
            "command": "water add",
            "data": {"date": day.isoformat(), "glasses": total},
            "human_summary": f"{total:g} glasses on {day}",
        })
    else:
        console.print(f"[green]Logged {glasses:g} glasses[/green] ({total:g} total on {day})")


# ============================================================================
# Statistics Commands
# ============================================================================


@stats_app.command("show")
def stats_show(
    monthly: bool = typer.Option(False, "--monthly", help="Show the 30-day window"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show streak, plant growth and recent goal adherence."""
    from nutrisprout.tracking.progress import TOTAL_GOALS, summarize

    store = session_store("stats show", json_output)
    stats = open_tracker(store).load()
    window = stats.monthly_stats if monthly else stats.weekly_stats
    summary = summarize(stats, window)

    if json_output:
        output_json({
            "success": True,
            "command": "stats show",
            "data": {"summary": summary.to_dict(), "statistics": stats.to_dict()},
            "human_summary": (
                f"{summary.stage_label} ({summary.plant_progress}%), "
                f"{summary.streak_days}-day streak"
            ),
        })
        return

    console.print(
        f"[bold green]{summary.stage_label}[/bold green] "
        f"{summary.plant_progress}% toward next stage"
    )
    console.print(f"Streak: {summary.streak_days} days")

    if not window:
        console.print("[dim]No days tracked yet[/dim]")
        return

    table = Table(title="Last 30 days" if monthly else "Last 7 days")
    table.add_column("Date")
    table.add_column("kcal", justify="right")
    table.add_column("Protein", justify="right")
    table.add_column("Carbs", justify="right")
    table.add_column("Fat", justify="right")
    table.add_column("Water", justify="right")
    table.add_column("Goals", justify="right")
    for day in window:
        table.add_row(
            day.date.isoformat(),
            f"{day.calories_consumed:g}/{day.calories_goal:g}",
            f"{day.protein_consumed:g}/{day.protein_goal:g}",
            f"{day.carbs_consumed:g}/{day.carbs_goal:g}",
            f"{day.fat_consumed:g}/{day.fat_goal:g}",
            f"{day.water_consumed:g}/{day.water_goal:g}",
            f"{day.goals_met}/{TOTAL_GOALS}",
        )
    console.print(table)
    console.print(
        f"Average {summary.average_goals_met} goals met over {summary.days_tracked} days, "
        f"{summary.perfect_days} perfect"
    )


@stats_app.command("update")
def stats_update(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Accumulate today's logged meals and water into the statistics."""
    store = session_store("stats update", json_output)
    stats = open_tracker(store).record_today()
    today = stats.weekly_stats[-1] if stats.weekly_stats else None
    goals_met = today.goals_met if today else 0

    if json_output:
        output_json({
            "success": True,
            "command": "stats update",
            "data": stats.to_dict(),
            "human_summary": f"{goals_met} goals met today",
        })
    else:
        console.print(f"[green]Updated:[/green] {goals_met} goals met today")
        console.print(
            f"  {stats.plant_stage.label} ({stats.plant_progress}%), "
            f"{stats.streak_days}-day streak"
        )


@stats_app.command("reset")
def stats_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Reset streak, plant growth and history."""
    if not yes and not json_output:
        typer.confirm("Reset all progress?", abort=True)

    store = session_store("stats reset", json_output)
    open_tracker(store).reset()

    if json_output:
        output_json({
            "success": True,
            "command": "stats reset",
            "data": {},
            "human_summary": "Progress reset",
        })
    else:
        console.print("[green]Progress reset[/green]")


if __name__ == "__main__":
    app()
