"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from pathlib import Path

import pytest

from brew_planner.adapters.recipe_payload import parse_recipe
from brew_planner.config import Settings
from brew_planner.containers import AppContainer, build_container
from brew_planner.domain.recipe import (
    Equipment,
    Fermentable,
    FermentationStep,
    Hop,
    MashStep,
    Recipe,
    StoredRecipe,
    Yeast,
)
from brew_planner.services.mash_ph import MashPhService
from brew_planner.services.recipe_calculator import RecipeCalculator
from brew_planner.services.recipes import RecipeRepository, RecipeService
from brew_planner.services.starter import StarterService
from brew_planner.services.volumes import VolumeService
from brew_planner.services.water_chemistry import WaterChemistryService


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[str, StoredRecipe] = field(default_factory=dict)

    def list_recipes(self) -> list[StoredRecipe]:
        return list(self.recipes.values())

    def get_recipe(self, recipe_id: str) -> StoredRecipe | None:
        return self.recipes.get(recipe_id)

    def save_recipe(self, document: dict[str, object]) -> StoredRecipe:
        payload = parse_recipe(document)
        recipe_id = payload.id or f"recipe-{len(self.recipes) + 1}"
        stored = StoredRecipe(
            id=recipe_id,
            current_version=payload.current_version,
            created_at=payload.created_at,
            updated_at=payload.updated_at,
            recipe=replace(payload.to_domain(), id=recipe_id),
        )
        self.recipes[recipe_id] = stored
        return stored

    def delete_recipe(self, recipe_id: str) -> bool:
        return self.recipes.pop(recipe_id, None) is not None


def pale_ale(**overrides) -> Recipe:
    """A 20 L all-grain pale ale with one bittering hop."""
    values = {
        "name": "Test Pale Ale",
        "batch_volume_l": 20.0,
        "equipment": Equipment(),
        "fermentables": (
            Fermentable(name="Pale Malt", weight_kg=5.0, color_lovibond=3, ppg=37),
        ),
        "hops": (
            Hop(
                name="Cascade",
                alpha_acid=10.0,
                grams=28.0,
                type="boil",
                time_minutes=60,
            ),
        ),
        "yeasts": (Yeast(name="US-05", attenuation=0.75),),
        "mash_steps": (
            MashStep(
                name="Saccharification",
                type="infusion",
                temperature_c=66,
                duration_minutes=60,
            ),
        ),
        "fermentation_steps": (
            FermentationStep(
                name="Primary", type="primary", duration_days=10, temperature_c=20
            ),
        ),
    }
    values.update(overrides)
    return Recipe(**values)


def pale_ale_document(**overrides) -> dict:
    """The stored camelCase form of a small pale ale."""
    document = {
        "id": "pale-ale",
        "name": "Pale Ale",
        "style": "American Pale Ale",
        "currentVersion": 1,
        "batchVolumeL": 20,
        "equipment": {"boilTimeMin": 60, "mashEfficiencyPercent": 75},
        "fermentables": [
            {"name": "Pale Malt", "weightKg": 5, "colorLovibond": 3, "ppg": 37}
        ],
        "hops": [
            {
                "name": "Cascade",
                "alphaAcid": 10,
                "grams": 28,
                "type": "boil",
                "timeMinutes": 60,
            }
        ],
        "yeasts": [{"name": "US-05", "attenuation": 0.75}],
        "otherIngredients": [],
        "mashSteps": [
            {
                "name": "Saccharification",
                "type": "infusion",
                "temperatureC": 66,
                "durationMinutes": 60,
            }
        ],
        "fermentationSteps": [],
    }
    document.update(overrides)
    return document


@pytest.fixture
def volume_service() -> VolumeService:
    return VolumeService()


@pytest.fixture
def water_chemistry() -> WaterChemistryService:
    return WaterChemistryService()


@pytest.fixture
def mash_ph_service(water_chemistry: WaterChemistryService) -> MashPhService:
    return MashPhService(water_chemistry=water_chemistry)


@pytest.fixture
def starter_service() -> StarterService:
    return StarterService()


@pytest.fixture
def calculator(
    volume_service: VolumeService, mash_ph_service: MashPhService
) -> RecipeCalculator:
    return RecipeCalculator(
        volume_service=volume_service, mash_ph_service=mash_ph_service
    )


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def recipe_service(
    recipe_repository: InMemoryRecipeRepository, calculator: RecipeCalculator
) -> RecipeService:
    return RecipeService(repository=recipe_repository, calculator=calculator)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(recipes_path=str(tmp_path / "recipes.json"))


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)
