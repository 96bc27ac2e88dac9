from __future__ import annotations


class RecipeApiError(Exception):
    """Base class for errors raised by the recipe services and store."""


class RecipeNotFound(RecipeApiError):
    def __init__(self, recipe_id: int) -> None:
        super().__init__(f"Recipe not found with id: {recipe_id}")
        self.recipe_id = recipe_id


class StoreFailure(RecipeApiError):
    """The recipe store could not complete a read or write."""
