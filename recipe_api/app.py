from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import DEFAULT_CONFIG
from .recipes.exceptions import RecipeNotFound, StoreFailure
from .recipes.models import (
    PageRequest,
    RecipeCreate,
    RecipeFilters,
    RecipeOut,
    RecipePage,
    RecipeUpdate,
    SortOrder,
)
from .recipes.mutations import create_recipe, create_recipes, delete_recipe, update_recipe
from .recipes.queries import get_recipe, search_recipes

logging.basicConfig(level=DEFAULT_CONFIG.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe API", version="1.0.0")


@app.exception_handler(RecipeNotFound)
def recipe_not_found_handler(request: Request, exc: RecipeNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(StoreFailure)
def store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def _split_tokens(values: list[str] | None) -> list[str] | None:
    """Accept both repeated params and comma-separated values."""
    if values is None:
        return None
    return [t.strip() for v in values for t in v.split(",") if t.strip()]


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Recipe endpoints ─────────────────────────────────────────────────────


@app.post("/api/recipes", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
def create(body: RecipeCreate, request: Request, response: Response) -> RecipeOut:
    created = create_recipe(body)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{created.id}"
    return created


@app.post(
    "/api/recipes/bulk",
    response_model=list[RecipeOut],
    status_code=status.HTTP_201_CREATED,
)
def create_bulk(body: list[RecipeCreate]) -> list[RecipeOut]:
    return create_recipes(body)


@app.get("/api/recipes", response_model=RecipePage)
def search(
    vegetarian: bool | None = None,
    servings: int | None = None,
    include_ingredients: list[str] | None = Query(default=None, alias="includeIngredients"),
    exclude_ingredients: list[str] | None = Query(default=None, alias="excludeIngredients"),
    instruction: str | None = None,
    page: int = 0,
    size: int = DEFAULT_CONFIG.default_page_size,
    sort: str = "id,asc",
) -> RecipePage:
    filters = RecipeFilters(
        vegetarian=vegetarian,
        servings=servings,
        include_ingredients=_split_tokens(include_ingredients),
        exclude_ingredients=_split_tokens(exclude_ingredients),
        instruction=instruction,
    )
    try:
        page_request = PageRequest(page=page, size=size, sort=SortOrder.parse(sort))
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    return search_recipes(filters, page_request)


@app.get("/api/recipes/{recipe_id}", response_model=RecipeOut)
def read(recipe_id: int) -> RecipeOut:
    return get_recipe(recipe_id)


@app.put("/api/recipes/{recipe_id}", response_model=RecipeOut)
def update(recipe_id: int, body: RecipeUpdate) -> RecipeOut:
    return update_recipe(recipe_id, body)


@app.delete("/api/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(recipe_id: int) -> Response:
    delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
