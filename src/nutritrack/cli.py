"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
import math
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nutritrack.config import (
    ConfigError,
    default_config_path,
    get_settings,
    reload_settings,
)
from nutritrack.lookup import estimate_description, estimate_nutrition, find_food
from nutritrack.profiles import (
    NutritionError,
    UserMetrics,
    build_target_report,
    calculate_lean_body_mass,
    calculate_macro_targets,
    calculate_target_weight,
    estimate_time_to_target,
)
from nutritrack.tracking import load_entries, summarize_day
from nutritrack.tracking.daily import load_records

app = typer.Typer(
    help="Personal nutrition targets and daily food tracking",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the config file")
app.add_typer(config_app, name="config")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
) -> None:
    """Nutrition targets and tracking."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    try:
        if config is not None:
            reload_settings(config)
        else:
            get_settings()
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict) -> None:
    """Output JSON response to stdout."""
    print(json.dumps(response, indent=2))


def _use_json(json_output: bool) -> bool:
    return json_output or get_settings().defaults.output_format == "json"


def fail(command: str, message: str, json_output: bool) -> NoReturn:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


# ============================================================================
# Targets
# ============================================================================


@app.command()
def targets(
    weight: float = typer.Option(..., "--weight", "-w", help="Weight in kg"),
    height: float = typer.Option(..., "--height", help="Height in cm"),
    age: int = typer.Option(..., "--age", help="Age in years"),
    gender: str = typer.Option(..., "--gender", "-g", help="male, female or other"),
    goal: str = typer.Option(
        "maintain_weight", "--goal", help="lose_weight, maintain_weight or gain_weight"
    ),
    activity: str = typer.Option(
        "sedentary",
        "--activity",
        "-a",
        help="sedentary, light, moderate, active or very_active",
    ),
    body_fat: float = typer.Option(0.0, "--body-fat", help="Current body fat %"),
    target_body_fat: float = typer.Option(
        0.0, "--target-body-fat", help="Target body fat %"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate daily calorie and macro targets."""
    json_output = _use_json(json_output)
    try:
        policy = get_settings().policy
        metrics = UserMetrics.from_dict(
            {
                "weight": weight,
                "height": height,
                "age": age,
                "gender": gender,
                "goal": goal,
                "activity_level": activity,
                "current_body_fat_percentage": body_fat,
                "target_body_fat_percentage": target_body_fat,
            },
            policy,
        )
        report = build_target_report(metrics, policy)
    except NutritionError as e:
        fail("targets", str(e), json_output)

    if json_output:
        output_json({"success": True, "command": "targets", "data": report})
        return

    t = report["targets"]
    ref = report["reference"]
    table = Table(title="Daily Targets")
    table.add_column("Nutrient", style="cyan")
    table.add_column("Target", justify="right", style="green")
    table.add_row("Calories", f"{t['calories']} kcal")
    table.add_row("Protein", f"{t['protein']} g")
    table.add_row("Carbohydrates", f"{t['carbohydrates']} g")
    table.add_row("Fat", f"{t['fat']} g")
    console.print(table)

    console.print(
        f"[dim]BMR {ref['bmr']:.0f} kcal, TDEE {ref['tdee']:.0f} kcal "
        f"({ref['activity_level']}), {ref['goal_adjustment']:+d} kcal for {ref['goal']}[/dim]"
    )

    projection = report["projection"]
    if projection:
        console.print(
            Panel(
                f"Lean mass: {projection['lean_body_mass_kg']} kg\n"
                f"Target weight: {projection['target_weight_kg']} kg\n"
                f"Estimated time: {projection['weeks_to_target']} weeks",
                title="Body Composition",
            )
        )


@app.command("lean-mass")
def lean_mass(
    weight: float = typer.Argument(..., help="Weight in kg"),
    body_fat: float = typer.Argument(..., help="Body fat %"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate lean body mass."""
    json_output = _use_json(json_output)
    if not (math.isfinite(weight) and weight > 0):
        fail("lean-mass", f"weight must be a positive number, got {weight}", json_output)
    if not 0 <= body_fat <= 100:
        fail("lean-mass", f"body fat must be between 0 and 100, got {body_fat}", json_output)

    lbm = calculate_lean_body_mass(weight, body_fat)
    if json_output:
        output_json({
            "success": True,
            "command": "lean-mass",
            "data": {"weight_kg": weight, "body_fat_percentage": body_fat,
                     "lean_body_mass_kg": round(lbm, 2)},
        })
    else:
        console.print(f"Lean body mass: [green]{lbm:.1f} kg[/green]")


@app.command()
def timeline(
    weight: float = typer.Option(..., "--weight", "-w", help="Current weight in kg"),
    body_fat: float = typer.Option(..., "--body-fat", help="Current body fat %"),
    target_body_fat: float = typer.Option(
        ..., "--target-body-fat", help="Target body fat %"
    ),
    goal: Optional[str] = typer.Option(None, "--goal", help="Goal (informational)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate weeks to reach a target body fat percentage."""
    json_output = _use_json(json_output)
    try:
        policy = get_settings().policy
        weeks = estimate_time_to_target(weight, body_fat, target_body_fat, goal, policy)
        target_weight = calculate_target_weight(weight, body_fat, target_body_fat)
    except NutritionError as e:
        fail("timeline", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "timeline",
            "data": {
                "current_weight_kg": weight,
                "target_weight_kg": round(target_weight, 2),
                "weekly_change_kg": policy.weekly_change_kg,
                "weeks_to_target": weeks,
            },
        })
    else:
        console.print(
            f"Target weight [green]{target_weight:.1f} kg[/green] "
            f"in about [green]{weeks}[/green] weeks "
            f"at {policy.weekly_change_kg} kg/week"
        )


# ============================================================================
# Lookup
# ============================================================================


@app.command()
def lookup(
    food: Optional[str] = typer.Argument(None, help="Food name"),
    quantity: Optional[float] = typer.Argument(None, help="Quantity"),
    unit: Optional[str] = typer.Argument(None, help="Unit (grams, cups, pieces, ...)"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Free-text meal description"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate nutrition for a food portion or a meal description."""
    json_output = _use_json(json_output)

    try:
        if description:
            data = estimate_description(description)
            matched = None
        elif food and quantity is not None and unit:
            data = estimate_nutrition(food, quantity, unit)
            match = find_food(food)
            matched = match[0] if match else None
        else:
            fail(
                "lookup",
                "Either --description OR food, quantity and unit are required",
                json_output,
            )
    except NutritionError as e:
        fail("lookup", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "lookup",
            "data": {"matched": matched, "nutrition": data.to_dict()},
        })
        return

    title = description if description else f"{quantity:g} {unit} {food}"
    table = Table(title=title)
    table.add_column("Nutrient", style="cyan")
    table.add_column("Amount", justify="right")
    for name, value in data.to_dict().items():
        if value is None:
            continue
        suffix = "kcal" if name == "calories" else "mg" if name == "sodium" else "g"
        table.add_row(name.capitalize(), f"{value:g} {suffix}")
    console.print(table)
    if not description and matched is None:
        console.print("[yellow]No match in food table, generic values used[/yellow]")


# ============================================================================
# Daily tracking
# ============================================================================


@app.command()
def day(
    entries_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="YAML/JSON file of food entries"
    ),
    profile: Path = typer.Option(
        ..., "--profile", "-p", exists=True, dir_okay=False,
        help="YAML/JSON file with body metrics",
    ),
    on: Optional[str] = typer.Option(
        None, "--date", help="Day to summarize (YYYY-MM-DD, default today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Summarize one day's food entries against daily targets."""
    json_output = _use_json(json_output)

    try:
        summary_day = date.fromisoformat(on) if on else date.today()
    except ValueError:
        fail("day", f"Invalid --date: {on}", json_output)

    try:
        policy = get_settings().policy
        profile_data = load_records(profile)
        if not isinstance(profile_data, dict):
            fail("day", f"{profile} does not contain body metrics", json_output)
        metrics = UserMetrics.from_dict(profile_data, policy)
        daily_targets = calculate_macro_targets(metrics, policy)
        entries = load_entries(entries_file)
    except (NutritionError, ValueError) as e:
        fail("day", str(e), json_output)

    summary = summarize_day(entries, daily_targets, summary_day)

    if json_output:
        output_json({"success": True, "command": "day", "data": summary.to_dict()})
        return

    if summary.entry_count == 0:
        console.print(f"[yellow]No entries for {summary_day.isoformat()}[/yellow]")

    for meal, meal_entries in summary.entries_by_meal.items():
        table = Table(title=meal.value.capitalize())
        table.add_column("Food", style="cyan")
        table.add_column("Qty", justify="right")
        table.add_column("kcal", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")
        for entry in meal_entries:
            table.add_row(
                entry.food_name,
                f"{entry.quantity:g} {entry.unit}",
                f"{entry.calories:.0f}",
                f"{entry.protein:.1f}",
                f"{entry.carbohydrates:.1f}",
                f"{entry.fat:.1f}",
            )
        console.print(table)

    totals = summary.totals
    progress = Table(title=f"Progress {summary_day.isoformat()}")
    progress.add_column("Nutrient", style="cyan")
    progress.add_column("Eaten", justify="right")
    progress.add_column("Target", justify="right")
    progress.add_column("%", justify="right")
    for name, eaten, target in (
        ("Calories", totals.calories, daily_targets.calories),
        ("Protein", totals.protein, daily_targets.protein),
        ("Carbohydrates", totals.carbohydrates, daily_targets.carbohydrates),
        ("Fat", totals.fat, daily_targets.fat),
    ):
        pct = summary.progress[name.lower()]
        color = "green" if pct >= 90 else "yellow" if pct >= 70 else "red"
        progress.add_row(name, f"{eaten:.1f}", f"{target}", f"[{color}]{pct:.0f}%[/{color}]")
    console.print(progress)
    console.print(f"Remaining: [green]{summary.remaining_calories:.2f} kcal[/green]")


# ============================================================================
# Config
# ============================================================================


@config_app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the active settings."""
    settings = get_settings()
    try:
        settings.policy
    except ConfigError as e:
        fail("config show", str(e), json_output)
    data = settings.to_dict()
    if json_output:
        output_json(data)
        return

    nutrition = data["nutrition"]
    table = Table(title="Nutrition Policy")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")
    for level, mult in nutrition["activity_multipliers"].items():
        table.add_row(f"activity: {level}", f"x{mult}")
    for goal, adj in nutrition["goal_adjustments"].items():
        table.add_row(f"adjustment: {goal}", f"{adj:+d} kcal")
    for goal, pct in nutrition["fat_percentages"].items():
        table.add_row(f"fat share: {goal}", f"{pct:.0%}")
    table.add_row("protein", f"{nutrition['protein_grams_per_kg']} g/kg")
    table.add_row("weekly change", f"{nutrition['weekly_change_kg']} kg")
    table.add_row("strict activity level", str(nutrition["strict_activity_level"]))
    console.print(table)


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write config.yaml"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write the current settings to a config file."""
    settings = get_settings()
    path = path or default_config_path()
    if path.exists() and not force:
        console.print(f"[red]{path} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)
    written = settings.save(path)
    console.print(f"[green]Wrote {written}[/green]")


if __name__ == "__main__":
    app()
