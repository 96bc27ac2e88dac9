from __future__ import annotations

import logging

from .data_store import RecipeStore, get_store
from .exceptions import RecipeNotFound
from .models import RecipeCreate, RecipeOut, RecipeUpdate, recipe_from_input

logger = logging.getLogger(__name__)


def create_recipe(data: RecipeCreate, store: RecipeStore | None = None) -> RecipeOut:
    store = store or get_store()
    saved = store.save(recipe_from_input(data))
    logger.info("Created recipe %d", saved.id)
    return RecipeOut.from_recipe(saved)


def create_recipes(items: list[RecipeCreate], store: RecipeStore | None = None) -> list[RecipeOut]:
    """Create all recipes as one batch; a failure leaves none of them stored."""
    store = store or get_store()
    saved = store.save_all([recipe_from_input(item) for item in items])
    logger.info("Created %d recipes in bulk", len(saved))
    return [RecipeOut.from_recipe(r) for r in saved]


def update_recipe(
    recipe_id: int,
    data: RecipeUpdate,
    store: RecipeStore | None = None,
) -> RecipeOut:
    """Replace every mutable field of an existing recipe."""
    store = store or get_store()
    existing = store.find_by_id(recipe_id)
    if existing is None:
        raise RecipeNotFound(recipe_id)

    existing.title = data.title
    existing.description = data.description
    existing.ingredients = list(data.ingredients)
    existing.instructions = data.instructions
    existing.vegetarian = data.vegetarian
    existing.servings = data.servings

    updated = store.save(existing)
    logger.info("Updated recipe %d", recipe_id)
    return RecipeOut.from_recipe(updated)


def delete_recipe(recipe_id: int, store: RecipeStore | None = None) -> None:
    store = store or get_store()
    # Checked up front: deleting a missing id is a silent no-op in the store
    if not store.exists_by_id(recipe_id):
        raise RecipeNotFound(recipe_id)
    store.delete_by_id(recipe_id)
    logger.info("Deleted recipe %d", recipe_id)
