from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..config import DEFAULT_CONFIG


@dataclass
class Recipe:
    """Stored recipe record. ``id`` stays ``None`` until the store assigns one."""

    title: str
    description: str | None = None
    ingredients: list[str] = field(default_factory=list)
    instructions: str | None = None
    vegetarian: bool = False
    servings: int | None = None
    id: int | None = None


class RecipeIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: str | None = None
    ingredients: list[str] = Field(default_factory=list)
    instructions: str | None = None
    vegetarian: bool = False
    servings: int | None = Field(default=None, ge=1)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class RecipeCreate(RecipeIn):
    pass


class RecipeUpdate(RecipeIn):
    """Full replacement of every mutable field; omitted fields are cleared."""


class RecipeOut(BaseModel):
    id: int
    title: str
    description: str | None
    ingredients: list[str]
    instructions: str | None
    vegetarian: bool
    servings: int | None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> RecipeOut:
        return cls(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            ingredients=list(recipe.ingredients),
            instructions=recipe.instructions,
            vegetarian=recipe.vegetarian,
            servings=recipe.servings,
        )


class RecipeFilters(BaseModel):
    vegetarian: bool | None = None
    servings: int | None = None
    include_ingredients: list[str] | None = None
    exclude_ingredients: list[str] | None = None
    instruction: str | None = None


class SortOrder(BaseModel):
    field: Literal["id", "title", "servings", "vegetarian"] = "id"
    direction: Literal["asc", "desc"] = "asc"

    @classmethod
    def parse(cls, raw: str | None) -> SortOrder:
        """Parse ``"field"`` or ``"field,direction"``, e.g. ``"title,desc"``."""
        if not raw or not raw.strip():
            return cls()
        name, _, direction = raw.partition(",")
        return cls(
            field=name.strip(),
            direction=direction.strip().lower() or "asc",
        )

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"


class PageRequest(BaseModel):
    page: int = Field(default=0, ge=0)
    size: int = Field(
        default=DEFAULT_CONFIG.default_page_size,
        ge=1,
        le=DEFAULT_CONFIG.max_page_size,
    )
    sort: SortOrder = Field(default_factory=SortOrder)


class RecipePage(BaseModel):
    content: list[RecipeOut]
    page: int
    size: int
    total_elements: int
    total_pages: int


def recipe_from_input(data: RecipeIn) -> Recipe:
    """Build an unsaved ``Recipe`` from validated create/update input."""
    return Recipe(
        title=data.title,
        description=data.description,
        ingredients=list(data.ingredients),
        instructions=data.instructions,
        vegetarian=data.vegetarian,
        servings=data.servings,
    )
