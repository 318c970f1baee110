"""Tests for the command-line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from brew_planner.containers import AppContainer
from brew_planner.main import cli
from tests.conftest import pale_ale_document


def _write_recipe(tmp_path: Path, document: dict) -> Path:
    path = tmp_path / "recipe.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_calc_prints_summary(tmp_path: Path, container: AppContainer) -> None:
    path = _write_recipe(tmp_path, pale_ale_document())

    result = CliRunner().invoke(cli, ["calc", str(path)], obj=container)

    assert result.exit_code == 0
    assert "Pale Ale" in result.output
    assert "OG:  1.058" in result.output


def test_calc_json_output(tmp_path: Path, container: AppContainer) -> None:
    path = _write_recipe(tmp_path, pale_ale_document())

    result = CliRunner().invoke(cli, ["calc", str(path), "--json"], obj=container)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert 1.050 <= payload["og"] <= 1.070
    assert payload["mash_ph_adjustment"]["target_ph"] == 5.4


def test_calc_migrates_legacy_recipe(tmp_path: Path, container: AppContainer) -> None:
    legacy = pale_ale_document()
    del legacy["yeasts"]
    legacy["yeast"] = {"name": "US-05", "attenuation": 0.75}
    path = _write_recipe(tmp_path, legacy)

    result = CliRunner().invoke(cli, ["calc", str(path)], obj=container)

    assert result.exit_code == 0


def test_calc_rejects_invalid_recipe(tmp_path: Path, container: AppContainer) -> None:
    path = _write_recipe(tmp_path, pale_ale_document(batchVolumeL="lots"))

    result = CliRunner().invoke(cli, ["calc", str(path)], obj=container)

    assert result.exit_code == 1
    assert "Invalid recipe" in result.output


def test_calc_rejects_malformed_json(tmp_path: Path, container: AppContainer) -> None:
    path = tmp_path / "recipe.json"
    path.write_text("{", encoding="utf-8")

    result = CliRunner().invoke(cli, ["calc", str(path)], obj=container)

    assert result.exit_code == 1


def test_report_prints_markdown(tmp_path: Path, container: AppContainer) -> None:
    path = _write_recipe(tmp_path, pale_ale_document())

    result = CliRunner().invoke(cli, ["report", str(path)], obj=container)

    assert result.exit_code == 0
    assert result.output.startswith("# Pale Ale")
    assert "## Vital Statistics" in result.output


def test_list_empty_store(container: AppContainer) -> None:
    result = CliRunner().invoke(cli, ["list"], obj=container)

    assert result.exit_code == 0
    assert "No recipes found." in result.output


def test_list_stored_recipes(container: AppContainer) -> None:
    container.recipe_service.save_recipe(pale_ale_document())

    result = CliRunner().invoke(cli, ["list"], obj=container)

    assert result.exit_code == 0
    assert "pale-ale  Pale Ale (American Pale Ale)  v1" in result.output


def test_list_reports_corrupted_store(container: AppContainer) -> None:
    Path(container.settings.recipes_path).write_text("[", encoding="utf-8")

    result = CliRunner().invoke(cli, ["list"], obj=container)

    assert result.exit_code == 1
