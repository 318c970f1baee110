"""Tests for container wiring."""

from brew_planner.config import Settings
from brew_planner.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.recipe_calculator is not None
    assert container.report_service.calculator is container.recipe_calculator
    assert container.recipe_service.list_recipes() == []


def test_build_container_applies_settings(settings: Settings) -> None:
    tuned = settings.model_copy(
        update={"target_mash_ph": 5.3, "pitch_rate": 1.5, "grain_temp_c": 15.0}
    )

    container = build_container(tuned)

    assert container.recipe_calculator.target_mash_ph == 5.3
    assert container.starter_service.pitch_rate == 1.5
    assert container.volume_service.grain_temp_c == 15.0


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("BREW_PLANNER_DEFAULT_ATTENUATION", "0.8")
    monkeypatch.setenv("BREW_PLANNER_DEBUG", "true")

    settings = Settings()

    assert settings.default_attenuation == 0.8
    assert settings.debug is True
