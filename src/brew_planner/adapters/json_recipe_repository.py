"""JSON file implementation of the recipe repository."""

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from brew_planner.adapters.recipe_payload import (
    RecipePayload,
    migrate_recipe_payload,
    parse_recipe,
)
from brew_planner.domain.recipe import StoredRecipe
from brew_planner.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileRecipeRepository(RecipeRepository):
    """Stores every recipe as one JSON array in a single file."""

    path: Path

    def list_recipes(self) -> list[StoredRecipe]:
        """Return every stored recipe."""
        return [_parse_stored(payload) for payload in self._load()]

    def get_recipe(self, recipe_id: str) -> StoredRecipe | None:
        """Return a recipe by id, if present."""
        for payload in self._load():
            if payload.id == recipe_id:
                return _parse_stored(payload)
        return None

    def save_recipe(self, document: dict[str, object]) -> StoredRecipe:
        """Create or replace a recipe and return the stored copy."""
        recipe = parse_recipe(document)
        payloads = self._load()
        existing = {payload.id: payload for payload in payloads}
        now = datetime.now(tz=UTC).isoformat()
        recipe_id = recipe.id or str(uuid4())
        previous = existing.get(recipe_id)
        created_at = previous.created_at if previous is not None else None
        stored = recipe.model_copy(
            update={
                "id": recipe_id,
                "created_at": created_at or recipe.created_at or now,
                "updated_at": now,
            }
        )
        remaining = [payload for payload in payloads if payload.id != recipe_id]
        self._write([*remaining, stored])
        return _parse_stored(stored)

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe; return False when it did not exist."""
        recipes = self._load()
        remaining = [item for item in recipes if item.id != recipe_id]
        if len(remaining) == len(recipes):
            return False
        self._write(remaining)
        return True

    def _load(self) -> list[RecipePayload]:
        raw_documents = self._read_documents()
        migrated = [migrate_recipe_payload(raw) for raw in raw_documents]
        try:
            recipes = [RecipePayload.model_validate(raw) for raw in migrated]
        except ValidationError as exc:
            raise RuntimeError(f"Invalid recipe data in {self.path}") from exc
        if migrated != raw_documents:
            _logger.info("Migrated recipe store: %s", self.path)
            self._write(recipes)
        return recipes

    def _read_documents(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            documents = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Recipe store is corrupted: {self.path}") from exc
        if not isinstance(documents, list) or not all(
            isinstance(item, dict) for item in documents
        ):
            raise RuntimeError(f"Recipe store is corrupted: {self.path}")
        return documents

    def _write(self, recipes: list[RecipePayload]) -> None:
        documents = [recipe.to_document() for recipe in recipes]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(documents, indent=2), encoding="utf-8")


def _parse_stored(payload: RecipePayload) -> StoredRecipe:
    if payload.id is None:
        raise RuntimeError(f"Stored recipe has no id: {payload.name}")
    return StoredRecipe(
        id=payload.id,
        current_version=payload.current_version,
        created_at=payload.created_at,
        updated_at=payload.updated_at,
        recipe=payload.to_domain(),
    )
