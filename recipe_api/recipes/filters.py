"""
Search criteria to store filter.

Every criterion is a small function returning a ``RecipeFilter``: a callable
that takes the store's DataFrame and returns a boolean mask aligned with its
index. ``build_filter`` ANDs the active ones onto ``match_all``. Criteria that
are ``None``, an empty list or a blank string are left out, so they never
narrow the result.
"""
from __future__ import annotations

from typing import Callable

import pandas as pd

from .models import RecipeFilters

RecipeFilter = Callable[[pd.DataFrame], pd.Series]


def match_all(df: pd.DataFrame) -> pd.Series:
    return pd.Series(True, index=df.index, dtype=bool)


def has_vegetarian(vegetarian: bool) -> RecipeFilter:
    def _filter(df: pd.DataFrame) -> pd.Series:
        return df["vegetarian"].astype(bool) == vegetarian

    return _filter


def has_servings(servings: int) -> RecipeFilter:
    def _filter(df: pd.DataFrame) -> pd.Series:
        # Null servings never equal a requested count
        return df["servings"].apply(lambda s: s is not None and s == servings).astype(bool)

    return _filter


def includes_ingredients(ingredients: list[str]) -> RecipeFilter:
    required = list(ingredients)

    def _filter(df: pd.DataFrame) -> pd.Series:
        return df["ingredients"].apply(
            lambda items: all(token in (items or ()) for token in required)
        ).astype(bool)

    return _filter


def excludes_ingredients(ingredients: list[str]) -> RecipeFilter:
    banned = list(ingredients)

    def _filter(df: pd.DataFrame) -> pd.Series:
        return df["ingredients"].apply(
            lambda items: not any(token in (items or ()) for token in banned)
        ).astype(bool)

    return _filter


def instruction_contains(text: str) -> RecipeFilter:
    needle = text.lower()

    def _filter(df: pd.DataFrame) -> pd.Series:
        instructions = df["instructions"].astype(object)
        return instructions.apply(
            lambda s: isinstance(s, str) and needle in s.lower()
        ).astype(bool)

    return _filter


def active_filters(filters: RecipeFilters) -> list[RecipeFilter]:
    """Return the filters for every supplied criterion, in a fixed order."""
    active: list[RecipeFilter] = []

    if filters.vegetarian is not None:
        active.append(has_vegetarian(filters.vegetarian))

    if filters.servings is not None:
        active.append(has_servings(filters.servings))

    if filters.include_ingredients:
        active.append(includes_ingredients(filters.include_ingredients))

    if filters.exclude_ingredients:
        active.append(excludes_ingredients(filters.exclude_ingredients))

    if filters.instruction is not None and filters.instruction.strip():
        active.append(instruction_contains(filters.instruction))

    return active


def build_filter(filters: RecipeFilters | None = None) -> RecipeFilter:
    """Compose every active criterion into one filter, ``match_all`` if none."""
    steps = active_filters(filters) if filters is not None else []

    def _combined(df: pd.DataFrame) -> pd.Series:
        mask = match_all(df)
        for step in steps:
            mask = mask & step(df)
        return mask

    return _combined
