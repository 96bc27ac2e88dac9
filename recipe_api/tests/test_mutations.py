from __future__ import annotations

from unittest.mock import patch

import pytest

from recipe_api.recipes.data_store import RecipeStore
from recipe_api.recipes.exceptions import RecipeNotFound, StoreFailure
from recipe_api.recipes.models import RecipeCreate, RecipeUpdate
from recipe_api.recipes.mutations import create_recipe, create_recipes, delete_recipe, update_recipe
from recipe_api.recipes.queries import get_recipe


def test_create_assigns_id():
    store = RecipeStore()
    created = create_recipe(RecipeCreate(title="Omelette", ingredients=["Egg"]), store=store)
    assert created.id is not None
    assert created.title == "Omelette"
    assert created.vegetarian is False
    assert created.servings is None


def test_create_many_keeps_order_and_assigns_distinct_ids():
    store = RecipeStore()
    created = create_recipes(
        [RecipeCreate(title="Pancakes"), RecipeCreate(title="Waffles")],
        store=store,
    )
    assert [r.title for r in created] == ["Pancakes", "Waffles"]
    ids = [r.id for r in created]
    assert None not in ids
    assert len(set(ids)) == 2


def test_create_many_failure_stores_nothing():
    store = RecipeStore()
    with patch.object(store, "_commit", side_effect=StoreFailure("write failed")):
        with pytest.raises(StoreFailure):
            create_recipes([RecipeCreate(title="A"), RecipeCreate(title="B")], store=store)
    assert store.count() == 0


def test_update_replaces_every_field():
    store = RecipeStore()
    created = create_recipe(
        RecipeCreate(
            title="Stew",
            description="Hearty",
            ingredients=["Beef", "Carrot"],
            instructions="Simmer for hours.",
            vegetarian=False,
            servings=6,
        ),
        store=store,
    )
    update_recipe(
        created.id,
        RecipeUpdate(title="Veggie Stew", ingredients=["Carrot", "Bean"], vegetarian=True),
        store=store,
    )

    got = get_recipe(created.id, store=store)
    assert got.id == created.id
    assert got.title == "Veggie Stew"
    assert got.ingredients == ["Carrot", "Bean"]
    assert got.vegetarian is True
    # Fields left out of the update are cleared, not kept
    assert got.description is None
    assert got.instructions is None
    assert got.servings is None


def test_update_unknown_id_raises_and_does_not_save():
    store = RecipeStore()
    with patch.object(store, "save") as mock_save:
        with pytest.raises(RecipeNotFound):
            update_recipe(7, RecipeUpdate(title="Nope"), store=store)
    mock_save.assert_not_called()


def test_delete_removes_recipe():
    store = RecipeStore()
    created = create_recipe(RecipeCreate(title="Salad"), store=store)
    delete_recipe(created.id, store=store)
    with pytest.raises(RecipeNotFound):
        get_recipe(created.id, store=store)


def test_delete_unknown_id_raises_without_removal_call():
    store = RecipeStore()
    with patch.object(store, "delete_by_id") as mock_delete:
        with pytest.raises(RecipeNotFound):
            delete_recipe(42, store=store)
    mock_delete.assert_not_called()


def test_delete_twice_raises_second_time():
    store = RecipeStore()
    created = create_recipe(RecipeCreate(title="Soup"), store=store)
    delete_recipe(created.id, store=store)
    with pytest.raises(RecipeNotFound):
        delete_recipe(created.id, store=store)


def test_store_failure_propagates_unchanged():
    store = RecipeStore()
    failure = StoreFailure("boom")
    with patch.object(store, "save", side_effect=failure):
        with pytest.raises(StoreFailure) as excinfo:
            create_recipe(RecipeCreate(title="Soup"), store=store)
    assert excinfo.value is failure


def test_blank_title_is_rejected_by_input_model():
    with pytest.raises(ValueError):
        RecipeCreate(title="   ")
    with pytest.raises(ValueError):
        RecipeUpdate(title="Soup", servings=0)
