from __future__ import annotations

import logging
import math

from .data_store import RecipeStore, get_store
from .exceptions import RecipeNotFound
from .filters import active_filters, build_filter
from .models import PageRequest, RecipeFilters, RecipeOut, RecipePage

logger = logging.getLogger(__name__)


def search_recipes(
    filters: RecipeFilters | None = None,
    page_request: PageRequest | None = None,
    store: RecipeStore | None = None,
) -> RecipePage:
    """
    Run a filtered, paginated search.

    Absent criteria do not narrow the result; an empty match set gives an
    empty page rather than an error.
    """
    filters = filters or RecipeFilters()
    page_request = page_request or PageRequest()
    store = store or get_store()

    result = store.find_page(build_filter(filters), page_request)
    total_pages = math.ceil(result.total_elements / page_request.size)

    logger.debug(
        "Recipe search with %d active filters matched %d recipes (page %d of %d)",
        len(active_filters(filters)),
        result.total_elements,
        page_request.page,
        total_pages,
    )

    return RecipePage(
        content=[RecipeOut.from_recipe(r) for r in result.recipes],
        page=page_request.page,
        size=page_request.size,
        total_elements=result.total_elements,
        total_pages=total_pages,
    )


def list_recipes(
    filters: RecipeFilters | None = None,
    store: RecipeStore | None = None,
) -> list[RecipeOut]:
    """Return every matching recipe, ordered by id, without paging."""
    store = store or get_store()
    return [RecipeOut.from_recipe(r) for r in store.find_all(build_filter(filters))]


def get_recipe(recipe_id: int, store: RecipeStore | None = None) -> RecipeOut:
    store = store or get_store()
    recipe = store.find_by_id(recipe_id)
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return RecipeOut.from_recipe(recipe)
