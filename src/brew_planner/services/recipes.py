"""Services for stored recipes."""

import logging
from dataclasses import dataclass
from typing import Protocol

from brew_planner.domain.calculations import RecipeCalculations
from brew_planner.domain.recipe import StoredRecipe
from brew_planner.services.recipe_calculator import RecipeCalculator

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def list_recipes(self) -> list[StoredRecipe]:
        """Return every stored recipe."""

    def get_recipe(self, recipe_id: str) -> StoredRecipe | None:
        """Return a recipe by id, if present."""

    def save_recipe(self, document: dict[str, object]) -> StoredRecipe:
        """Create or replace a recipe from its stored document."""

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe; return False when it did not exist."""


@dataclass
class RecipeService:
    """Application service for stored recipes."""

    repository: RecipeRepository
    calculator: RecipeCalculator
    debug: bool = False

    def list_recipes(self) -> list[StoredRecipe]:
        """Return stored recipes sorted by name."""
        return sorted(
            self.repository.list_recipes(), key=lambda stored: stored.name.lower()
        )

    def get_recipe(self, recipe_id: str) -> StoredRecipe | None:
        """Return a stored recipe by id."""
        return self.repository.get_recipe(recipe_id)

    def save_recipe(self, document: dict[str, object]) -> StoredRecipe:
        """Store a recipe document."""
        saved = self.repository.save_recipe(document)
        if self.debug:
            _logger.info("Saved recipe: id=%s name=%s", saved.id, saved.name)
        return saved

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe by id."""
        deleted = self.repository.delete_recipe(recipe_id)
        if self.debug:
            _logger.info("Delete recipe: id=%s deleted=%s", recipe_id, deleted)
        return deleted

    def calculate(self, recipe_id: str) -> RecipeCalculations | None:
        """Calculate a stored recipe, or None when it does not exist."""
        stored = self.repository.get_recipe(recipe_id)
        if stored is None:
            return None
        return self.calculator.calculate(stored.recipe)
