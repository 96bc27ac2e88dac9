from __future__ import annotations

import logging
import math
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from ..config import DEFAULT_CONFIG
from .exceptions import StoreFailure
from .filters import RecipeFilter, match_all
from .models import PageRequest, Recipe

logger = logging.getLogger(__name__)

_DTYPES: dict[str, Any] = {
    "id": "int64",
    "title": object,
    "description": object,
    "ingredients": object,
    "instructions": object,
    "vegetarian": bool,
    "servings": object,
}
COLUMNS = list(_DTYPES)


@dataclass(frozen=True)
class StorePage:
    recipes: list[Recipe]
    total_elements: int


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _to_row(recipe: Recipe, recipe_id: int) -> dict[str, Any]:
    ingredients = recipe.ingredients if recipe.ingredients is not None else []
    if not isinstance(ingredients, (list, tuple)) or not all(isinstance(i, str) for i in ingredients):
        raise StoreFailure(f"Ingredients of recipe {recipe.title!r} must be a list of strings")
    servings = recipe.servings
    if servings is not None and (isinstance(servings, bool) or not isinstance(servings, int)):
        raise StoreFailure(f"Servings of recipe {recipe.title!r} must be an integer")

    row = asdict(recipe)
    row.update(
        id=recipe_id,
        ingredients=list(ingredients),
        vegetarian=bool(recipe.vegetarian),
    )
    return row


def _to_recipe(row: dict[str, Any]) -> Recipe:
    servings = row.get("servings")
    ingredients = row.get("ingredients")
    if isinstance(ingredients, (list, tuple)):
        ingredients = list(ingredients)
    elif _is_missing(ingredients):
        ingredients = []
    return Recipe(
        id=int(row["id"]),
        title=row["title"],
        description=None if _is_missing(row.get("description")) else row["description"],
        ingredients=ingredients,
        instructions=None if _is_missing(row.get("instructions")) else row["instructions"],
        vegetarian=bool(row.get("vegetarian") or False),
        servings=None if _is_missing(servings) else int(servings),
    )


def _frame(rows: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            col: pd.Series([row[col] for row in rows], dtype=dtype)
            for col, dtype in _DTYPES.items()
        }
    )


class RecipeStore:
    """
    In-memory recipe store on a pandas DataFrame.

    Ids come from a counter that only moves forward, so a deleted id is never
    issued again. With ``path`` set, the frame is loaded from JSON lines on
    start and the file is rewritten on every write; the in-memory frame only
    changes once that write has succeeded.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._df = self._load()
        self._next_id = int(self._df["id"].max()) + 1 if not self._df.empty else 1

    # ── Persistence ─────────────────────────────────────────────────────

    def _load(self) -> pd.DataFrame:
        if self.path is None or not self.path.exists() or self.path.stat().st_size == 0:
            return _frame([])
        try:
            raw = pd.read_json(self.path, orient="records", lines=True, dtype=False)
            rows = [_to_row(_to_recipe(r), int(r["id"])) for r in raw.to_dict(orient="records")]
        except (KeyError, TypeError, ValueError, OSError) as exc:
            raise StoreFailure(f"Could not read recipes from {self.path}") from exc
        logger.info("Loaded %d recipes from %s", len(rows), self.path)
        return _frame(rows).sort_values("id", kind="mergesort").reset_index(drop=True)

    def _commit(self, df: pd.DataFrame) -> None:
        if self.path is not None:
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                df.to_json(tmp_path, orient="records", lines=True)
                tmp_path.replace(self.path)
            except (OSError, ValueError) as exc:
                tmp_path.unlink(missing_ok=True)
                logger.warning("Writing recipes to %s failed", self.path, exc_info=True)
                raise StoreFailure(f"Could not write recipes to {self.path}") from exc
        self._df = df

    # ── Writes ──────────────────────────────────────────────────────────

    def save(self, recipe: Recipe) -> Recipe:
        return self.save_all([recipe])[0]

    def save_all(self, recipes: Iterable[Recipe]) -> list[Recipe]:
        """
        Insert recipes without an id and replace those with one.

        The batch is applied as a whole: if any recipe is rejected nothing is
        written and no ids are consumed.
        """
        recipes = list(recipes)
        with self._lock:
            known = set(self._df["id"].tolist())
            next_id = self._next_id
            rows: list[dict[str, Any]] = []
            for recipe in recipes:
                if recipe.id is None:
                    recipe_id = next_id
                    next_id += 1
                elif recipe.id in known:
                    recipe_id = recipe.id
                else:
                    raise StoreFailure(f"Cannot save recipe with unknown id: {recipe.id}")
                rows.append(_to_row(recipe, recipe_id))

            if not rows:
                return []

            saved_ids = [row["id"] for row in rows]
            kept = self._df[~self._df["id"].isin(saved_ids)]
            incoming = _frame(rows).drop_duplicates("id", keep="last")
            merged = incoming if kept.empty else pd.concat([kept, incoming], ignore_index=True)
            self._commit(merged.sort_values("id", kind="mergesort").reset_index(drop=True))
            self._next_id = next_id

        return [_to_recipe(row) for row in rows]

    def delete_by_id(self, recipe_id: int) -> None:
        with self._lock:
            self._commit(self._df[self._df["id"] != recipe_id].reset_index(drop=True))

    # ── Reads ───────────────────────────────────────────────────────────

    def find_by_id(self, recipe_id: int) -> Recipe | None:
        with self._lock:
            match = self._df[self._df["id"] == recipe_id]
        if match.empty:
            return None
        return _to_recipe(match.iloc[0].to_dict())

    def exists_by_id(self, recipe_id: int) -> bool:
        with self._lock:
            return bool((self._df["id"] == recipe_id).any())

    def count(self) -> int:
        with self._lock:
            return len(self._df)

    def find_all(self, predicate: RecipeFilter | None = None) -> list[Recipe]:
        """Return every recipe matching ``predicate``, ordered by id."""
        with self._lock:
            df = self._df
        mask = (predicate or match_all)(df)
        return [_to_recipe(r) for r in df.loc[mask].to_dict(orient="records")]

    def find_page(self, predicate: RecipeFilter | None, page_request: PageRequest) -> StorePage:
        with self._lock:
            df = self._df
        matched = df.loc[(predicate or match_all)(df)]

        sort = page_request.sort
        if sort.field == "id":
            ordered = matched.sort_values("id", ascending=sort.ascending, kind="mergesort")
        else:
            ordered = matched.sort_values(
                [sort.field, "id"],
                ascending=[sort.ascending, True],
                kind="mergesort",
                na_position="last",
            )

        start = page_request.page * page_request.size
        window = ordered.iloc[start:start + page_request.size]
        return StorePage(
            recipes=[_to_recipe(r) for r in window.to_dict(orient="records")],
            total_elements=len(matched),
        )


_store: RecipeStore | None = None


def get_store() -> RecipeStore:
    """Return the process-wide recipe store, creating it on first call."""
    global _store
    if _store is None:
        _store = RecipeStore(DEFAULT_CONFIG.store_path)
    return _store


def reset_store(store: RecipeStore | None = None) -> RecipeStore:
    """Replace the process-wide store, with a fresh in-memory one by default."""
    global _store
    _store = store if store is not None else RecipeStore()
    return _store
