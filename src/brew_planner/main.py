"""Command-line entry point."""

import json
import logging
from dataclasses import asdict
from pathlib import Path

import click
from pydantic import ValidationError

from brew_planner.adapters.recipe_payload import parse_recipe
from brew_planner.app_logging import configure_logging
from brew_planner.containers import AppContainer, build_container
from brew_planner.domain.recipe import Recipe

_logger = logging.getLogger(__name__)


def _load_recipe(path: Path) -> Recipe:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise click.ClickException(f"{path} must contain a single recipe object")
    try:
        return parse_recipe(raw).to_domain()
    except (ValidationError, ValueError) as exc:
        raise click.ClickException(f"Invalid recipe in {path}: {exc}") from exc


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Beer recipe calculator."""
    if ctx.obj is None:
        container = build_container()
        configure_logging(container.settings.log_level)
        ctx.obj = container


@cli.command()
@click.argument("recipe_file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_obj
def calc(container: AppContainer, recipe_file: Path, output_json: bool) -> None:
    """Calculate gravity, bitterness, color, and water for RECIPE_FILE."""
    recipe = _load_recipe(recipe_file)
    result = container.recipe_calculator.calculate(recipe)
    if output_json:
        click.echo(json.dumps(asdict(result), indent=2))
        return
    click.echo(f"{recipe.name}")
    click.echo(f"  OG:  {result.og:.3f}")
    click.echo(f"  FG:  {result.fg:.3f}")
    click.echo(f"  ABV: {result.abv:.1f}%")
    click.echo(f"  IBU: {result.ibu:.1f}")
    click.echo(f"  SRM: {result.srm:.1f}")
    click.echo(
        f"  Water: mash {result.mash_water_l:.1f} L, "
        f"sparge {result.sparge_water_l:.1f} L, "
        f"pre-boil {result.pre_boil_volume_l:.1f} L"
    )
    if result.estimated_mash_ph is not None:
        click.echo(f"  Mash pH: {result.estimated_mash_ph:.2f}")


@cli.command()
@click.argument("recipe_file", type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def report(container: AppContainer, recipe_file: Path) -> None:
    """Print a markdown brew sheet for RECIPE_FILE."""
    recipe = _load_recipe(recipe_file)
    click.echo(container.report_service.render(recipe), nl=False)


@cli.command(name="list")
@click.pass_obj
def list_recipes(container: AppContainer) -> None:
    """List recipes in the configured recipe store."""
    try:
        recipes = container.recipe_service.list_recipes()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
    if not recipes:
        click.echo("No recipes found.")
        return
    for recipe in recipes:
        style = f" ({recipe.style})" if recipe.style else ""
        click.echo(f"{recipe.id}  {recipe.name}{style}  v{recipe.current_version}")
    _logger.debug("Listed %s recipes", len(recipes))


if __name__ == "__main__":
    cli()
