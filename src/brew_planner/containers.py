"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from brew_planner.adapters.json_recipe_repository import JsonFileRecipeRepository
from brew_planner.config import Settings
from brew_planner.services.mash_ph import MashPhService
from brew_planner.services.recipe_calculator import RecipeCalculator
from brew_planner.services.recipes import RecipeService
from brew_planner.services.report import ReportService
from brew_planner.services.starter import StarterService
from brew_planner.services.volumes import VolumeService
from brew_planner.services.water_chemistry import WaterChemistryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    volume_service: VolumeService
    water_chemistry_service: WaterChemistryService
    mash_ph_service: MashPhService
    starter_service: StarterService
    recipe_calculator: RecipeCalculator
    report_service: ReportService
    recipe_service: RecipeService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    volume_service = VolumeService(grain_temp_c=resolved_settings.grain_temp_c)
    water_chemistry_service = WaterChemistryService()
    mash_ph_service = MashPhService(water_chemistry=water_chemistry_service)
    starter_service = StarterService(pitch_rate=resolved_settings.pitch_rate)
    recipe_calculator = RecipeCalculator(
        volume_service=volume_service,
        mash_ph_service=mash_ph_service,
        target_mash_ph=resolved_settings.target_mash_ph,
        default_attenuation=resolved_settings.default_attenuation,
        debug=resolved_settings.debug,
    )
    report_service = ReportService(
        calculator=recipe_calculator,
        volume_service=volume_service,
        water_chemistry=water_chemistry_service,
        starter_service=starter_service,
    )
    recipe_repository = JsonFileRecipeRepository(Path(resolved_settings.recipes_path))
    recipe_service = RecipeService(
        repository=recipe_repository,
        calculator=recipe_calculator,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        volume_service=volume_service,
        water_chemistry_service=water_chemistry_service,
        mash_ph_service=mash_ph_service,
        starter_service=starter_service,
        recipe_calculator=recipe_calculator,
        report_service=report_service,
        recipe_service=recipe_service,
    )
