"""Tests for markdown brew sheet rendering."""

from dataclasses import replace
from datetime import date

import pytest

from brew_planner.domain.calculations import MashPhAdjustment
from brew_planner.domain.recipe import (
    BraukaiserGrowth,
    Hop,
    StarterInfo,
    StarterStep,
    WaterChemistry,
    Yeast,
)
from brew_planner.domain.water import SaltAdditions, WaterProfile
from brew_planner.services.recipe_calculator import RecipeCalculator
from brew_planner.services.report import ReportService
from brew_planner.services.starter import StarterService
from brew_planner.services.volumes import VolumeService
from brew_planner.services.water_chemistry import WaterChemistryService
from tests.conftest import pale_ale


@pytest.fixture
def report_service(
    calculator: RecipeCalculator,
    volume_service: VolumeService,
    water_chemistry: WaterChemistryService,
    starter_service: StarterService,
) -> ReportService:
    return ReportService(
        calculator=calculator,
        volume_service=volume_service,
        water_chemistry=water_chemistry,
        starter_service=starter_service,
    )


def test_render_vital_statistics(report_service: ReportService) -> None:
    markdown = report_service.render(pale_ale(style="American Pale Ale"))

    assert markdown.startswith("# Test Pale Ale\n")
    assert "**American Pale Ale**" in markdown
    assert "## Vital Statistics" in markdown
    assert "| **OG** | 1.058 |" in markdown
    assert "| **IBU** | 30 |" in markdown
    assert "| **Est. Mash pH** | 5.6" in markdown
    assert "**BU:GU**" in markdown
    assert "**Pre-Boil Gravity**" in markdown


def test_render_water_volumes(report_service: ReportService) -> None:
    markdown = report_service.render(pale_ale())

    assert "| **Strike Temp** | 72°C (162°F) |" in markdown
    assert "| **Mash Water** | 17.0 L (4.49 gal) |" in markdown
    assert "| **Post-Boil Volume** | 22.9 L" in markdown


def test_render_grain_bill_and_hops(report_service: ReportService) -> None:
    recipe = pale_ale(
        hops=(
            Hop("Citra", 12, 50, type="dry hop", dry_hop_start_day=4),
            Hop(name="Magnum", alpha_acid=12, grams=20, time_minutes=60),
            Hop("Mosaic", 11, 30, type="whirlpool", time_minutes=15),
        )
    )

    markdown = report_service.render(recipe)

    assert "| Pale Malt | 5.00 kg (11.02 lb) | 100.0% | 3 °L | 37 |" in markdown
    hops_section = markdown.split("## Hops")[1]
    assert hops_section.index("Magnum") < hops_section.index("Mosaic")
    assert hops_section.index("Mosaic") < hops_section.index("Citra")
    assert "day 4" in hops_section


def test_render_water_chemistry(report_service: ReportService) -> None:
    recipe = pale_ale(
        water_chemistry=WaterChemistry(
            source_profile=WaterProfile(ca=20, cl=10, so4=20, hco3=50),
            salt_additions=SaltAdditions(gypsum_g=5, cacl2_g=3),
            source_profile_name="Tap",
            target_style_name="Pale Ale",
        )
    )

    markdown = report_service.render(recipe)

    assert "### Water Chemistry" in markdown
    assert "Source: **Tap**" in markdown
    assert "| Gypsum |" in markdown
    assert "| Epsom |" not in markdown
    assert "Cl:SO4 ratio:" in markdown


def test_render_starter_plan(report_service: ReportService) -> None:
    starter = StarterInfo(
        yeast_type="liquid-100",
        mfg_date="2026-01-01",
        steps=(StarterStep(1.5, 1.037), StarterStep(2, 1.037, BraukaiserGrowth())),
    )
    recipe = pale_ale(
        yeasts=(Yeast("WLP001", 0.77, laboratory="White Labs", starter=starter),)
    )

    markdown = report_service.render(recipe, today=date(2026, 2, 1))

    assert "- **WLP001** (White Labs): 77% attenuation" in markdown
    assert "Cells needed:" in markdown
    assert "1. 1.50 L @ 1.037 (White / none)" in markdown
    assert "2. 2.00 L @ 1.037 (Braukaiser)" in markdown
    assert "Pitch:" in markdown


def test_render_ph_advice(report_service: ReportService) -> None:
    markdown = report_service.render(pale_ale())

    assert "## Mash pH" in markdown
    assert "lactic acid (88%)" in markdown


def test_render_skips_ph_correction_that_rounds_to_nothing(
    report_service: ReportService, calculator: RecipeCalculator
) -> None:
    recipe = pale_ale()
    calculations = replace(
        calculator.calculate(recipe),
        estimated_mash_ph=5.421,
        mash_ph_adjustment=MashPhAdjustment(
            target_ph=5.40, lactic_acid_88_ml=0.0, baking_soda_g=0.0
        ),
    )

    markdown = report_service.render(recipe, calculations=calculations)

    assert "Estimated 5.42" in markdown
    assert "baking soda" not in markdown
    assert "To reach" not in markdown


def test_render_recommends_baking_soda_below_target(
    report_service: ReportService, calculator: RecipeCalculator
) -> None:
    recipe = pale_ale()
    calculations = replace(
        calculator.calculate(recipe),
        estimated_mash_ph=5.10,
        mash_ph_adjustment=MashPhAdjustment(
            target_ph=5.40, lactic_acid_88_ml=0.0, baking_soda_g=2.5
        ),
    )

    markdown = report_service.render(recipe, calculations=calculations)

    assert "To reach 5.40, add 2.5 g baking soda." in markdown
    assert "lactic acid" not in markdown


def test_render_empty_recipe(report_service: ReportService) -> None:
    markdown = report_service.render(
        pale_ale(fermentables=(), hops=(), yeasts=(), mash_steps=())
    )

    assert "_No fermentables_" in markdown
    assert "_No hops_" in markdown
    assert "_No yeast_" in markdown
    assert "_No mash steps_" in markdown
    assert "Strike Temp" not in markdown
    assert "## Mash pH" not in markdown
    assert "| **BU:GU** | 0.00 |" in markdown


def test_render_uses_given_calculations(
    report_service: ReportService, calculator: RecipeCalculator
) -> None:
    recipe = pale_ale()
    calculations = calculator.calculate(recipe)

    assert report_service.render(recipe, calculations) == report_service.render(recipe)


def test_bu_gu_and_pre_boil_gravity(
    report_service: ReportService, calculator: RecipeCalculator
) -> None:
    recipe = pale_ale()
    calc = calculator.calculate(recipe)

    assert report_service.bu_gu(calc) == pytest.approx(calc.ibu / 58)
    pre_boil = report_service.pre_boil_gravity(recipe, calc)
    assert 1.0 < pre_boil < calc.og
