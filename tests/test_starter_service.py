"""Tests for yeast starter calculations."""

from datetime import date

import pytest

from brew_planner.domain.recipe import (
    BraukaiserGrowth,
    StarterInfo,
    StarterStep,
    WhiteGrowth,
    Yeast,
)
from brew_planner.services.starter import StarterService, sg_to_plato
from tests.conftest import pale_ale

TODAY = date(2026, 3, 1)


def test_sg_to_plato() -> None:
    assert sg_to_plato(1.000) == pytest.approx(0, abs=0.01)
    assert sg_to_plato(1.040) == pytest.approx(10.0, abs=0.1)


def test_viability_without_date_is_full(starter_service: StarterService) -> None:
    assert starter_service.viability(None) == 1.0
    assert starter_service.viability("") == 1.0
    assert starter_service.viability("not a date") == 1.0


def test_viability_declines_with_age(starter_service: StarterService) -> None:
    assert starter_service.viability("2026-03-01", TODAY) == 1.0
    assert starter_service.viability("2026-01-30", TODAY) == pytest.approx(0.79)
    assert starter_service.viability("2025-01-01", TODAY) == 0.0


def test_viability_ignores_future_dates(starter_service: StarterService) -> None:
    assert starter_service.viability("2026-06-01", TODAY) == 1.0


def test_viability_is_monotonic(starter_service: StarterService) -> None:
    dates = ["2026-02-28", "2026-02-01", "2025-12-01", "2025-10-01"]
    values = [starter_service.viability(d, TODAY) for d in dates]

    assert values == sorted(values, reverse=True)


def test_cells_available_by_package(starter_service: StarterService) -> None:
    assert starter_service.cells_available("dry", 2) == 132
    assert starter_service.cells_available("dry", 1.7) == 66
    assert starter_service.cells_available("liquid-100", 1, today=TODAY) == 100
    assert starter_service.cells_available(
        "liquid-200", 1, "2026-01-30", today=TODAY
    ) == pytest.approx(158)
    assert starter_service.cells_available(
        "slurry", 1, slurry_liters=0.2, slurry_billion_per_ml=1.0
    ) == pytest.approx(200)


def test_cells_available_rejects_unknown_type(starter_service: StarterService) -> None:
    with pytest.raises(ValueError):
        starter_service.cells_available("frozen", 1)  # type: ignore[arg-type]


def test_required_cells(starter_service: StarterService) -> None:
    required = starter_service.required_cells(20, 1.050)

    assert required == pytest.approx(0.75 * 20 * sg_to_plato(1.050))
    assert starter_service.required_cells(20, 1.050, pitch_rate=1.5) == pytest.approx(
        2 * required
    )


def test_dme_grams_for_gravity(starter_service: StarterService) -> None:
    grams = starter_service.dme_grams_for_gravity(1, 1.040)

    assert grams == pytest.approx(106.5, abs=0.1)
    assert starter_service.dme_grams_for_gravity(1, 0.995) == 0


def test_white_growth(starter_service: StarterService) -> None:
    end = starter_service.white_growth(100, 1, WhiteGrowth())

    assert end == pytest.approx(151.3, abs=0.2)


def test_white_growth_shaking_is_capped_at_saturation(
    starter_service: StarterService,
) -> None:
    end = starter_service.white_growth(100, 1, WhiteGrowth(aeration="shaking"))

    assert end == pytest.approx(200)


def test_white_growth_never_loses_cells(starter_service: StarterService) -> None:
    assert starter_service.white_growth(500, 1, WhiteGrowth()) == 500
    assert starter_service.white_growth(0, 1, WhiteGrowth()) == 0


def test_braukaiser_growth(starter_service: StarterService) -> None:
    end = starter_service.braukaiser_growth(100, 1, 1.040)

    assert end == pytest.approx(100 + 106.51 * 1.4, abs=0.2)


def test_step_dispatches_on_model(starter_service: StarterService) -> None:
    white = starter_service.step(100, StarterStep(1, 1.040, WhiteGrowth()))
    braukaiser = starter_service.step(100, StarterStep(1, 1.040, BraukaiserGrowth()))

    assert white.dme_grams == braukaiser.dme_grams
    assert white.end_billion != braukaiser.end_billion


def test_step_rejects_unknown_model(starter_service: StarterService) -> None:
    with pytest.raises(ValueError):
        starter_service.step(
            100, StarterStep(1, 1.040, object())  # type: ignore[arg-type]
        )


def test_plan_runs_steps_in_order(starter_service: StarterService) -> None:
    starter = StarterInfo(
        yeast_type="liquid-100",
        packs=1,
        steps=(
            StarterStep(1, 1.037, WhiteGrowth(aeration="shaking")),
            StarterStep(2, 1.037, BraukaiserGrowth()),
        ),
    )

    plan = starter_service.plan(20, 1.060, starter, today=TODAY)

    ends = [result.end_billion for result in plan.step_results]
    assert plan.cells_available_b == 100
    assert len(ends) == 2
    assert ends == sorted(ends)
    assert ends[0] >= plan.cells_available_b
    assert plan.final_end_b == ends[-1]
    assert plan.total_starter_l == 3
    assert plan.total_dme_g == pytest.approx(
        sum(result.dme_grams for result in plan.step_results)
    )
    assert plan.pitch_ok == (plan.final_end_b >= plan.required_cells_b)


def test_plan_without_steps_pitches_package(starter_service: StarterService) -> None:
    plan = starter_service.plan(10, 1.040, StarterInfo(yeast_type="dry", packs=2))

    assert plan.step_results == ()
    assert plan.final_end_b == 132
    assert plan.total_dme_g == 0
    assert plan.pitch_ok


def test_starter_rejects_more_than_three_steps() -> None:
    with pytest.raises(ValueError):
        StarterInfo(
            yeast_type="dry",
            steps=tuple(StarterStep(1, 1.040) for _ in range(4)),
        )


def test_plan_for_recipe_uses_first_yeast_with_starter(
    starter_service: StarterService,
) -> None:
    starter = StarterInfo(yeast_type="liquid-100", steps=(StarterStep(2, 1.040),))
    recipe = pale_ale(
        yeasts=(
            Yeast(name="No starter", attenuation=0.75),
            Yeast(name="WLP001", attenuation=0.77, starter=starter),
        )
    )

    plan = starter_service.plan_for_recipe(recipe, 1.050, today=TODAY)

    assert plan is not None
    assert len(plan.step_results) == 1
    assert starter_service.plan_for_recipe(pale_ale(), 1.050) is None
