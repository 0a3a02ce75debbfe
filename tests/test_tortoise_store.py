"""
Tests for TortoiseMenuStore against an in-memory SQLite database.
"""

import asyncio

import pytest

from menu_memorizer.models.menu import Ingredient, MenuItem, MenuItemIngredient
from menu_memorizer.schemas.menu import DraftDish
from menu_memorizer.services.ingredient_service import IngredientDeduplicator
from menu_memorizer.services.menu_service import MenuService
from menu_memorizer.exceptions.menu_exceptions import DuplicateIngredientError, StoreError


class TestIngredients:

    async def test_create_and_find(self, tortoise_store):
        ingredient_id = await tortoise_store.create_ingredient("garlic")
        assert await tortoise_store.find_ingredient_by_name("garlic") == ingredient_id
        assert await tortoise_store.find_ingredient_by_name("Garlic") is None

    async def test_duplicate_name_raises(self, tortoise_store):
        await tortoise_store.create_ingredient("garlic")
        with pytest.raises(DuplicateIngredientError):
            await tortoise_store.create_ingredient("garlic")

    async def test_concurrent_upserts_yield_one_row(self, tortoise_store):
        deduplicator = IngredientDeduplicator(tortoise_store)
        first, second = await asyncio.gather(
            deduplicator.upsert("garlic"),
            deduplicator.upsert("garlic")
        )

        assert first == second
        assert await Ingredient.filter(name="garlic").count() == 1

    async def test_get_ingredient(self, tortoise_store):
        ingredient_id = await tortoise_store.create_ingredient("basil")
        ingredient = await tortoise_store.get_ingredient(ingredient_id)
        assert ingredient.name == "basil"
        assert await tortoise_store.get_ingredient(ingredient_id + 100) is None


class TestDishes:

    async def test_dish_with_ingredients_round_trip(self, tortoise_store):
        service = MenuService(tortoise_store)
        dish = await service.create_dish(DraftDish(
            name="Carbonara",
            description="Creamy pasta",
            category="Mains",
            price=13.49,
            ingredients=["spaghetti", "egg"]
        ))

        assert dish.ingredients == ["spaghetti", "egg"]
        assert dish.price == 13.49
        assert await MenuItemIngredient.all().count() == 2

    async def test_defaults(self, tortoise_store):
        dish = await MenuService(tortoise_store).create_dish(DraftDish(name="Fries"))
        assert dish.category == "Uncategorized"
        assert dish.price == 0
        assert dish.ingredients == []

    async def test_list_preserves_insertion_order(self, tortoise_store):
        service = MenuService(tortoise_store)
        for name in ["Zucchini Fritters", "Apple Pie", "Minestrone"]:
            await service.create_dish(DraftDish(name=name, ingredients=["salt"]))

        dishes = await tortoise_store.list_dishes_with_ingredients()
        assert [dish.name for dish in dishes] == ["Zucchini Fritters", "Apple Pie", "Minestrone"]
        assert all(dish.ingredients == ["salt"] for dish in dishes)
        assert await Ingredient.all().count() == 1

    async def test_failed_link_rolls_back_dish(self, tortoise_store):
        ingredient_id = await tortoise_store.create_ingredient("egg")

        with pytest.raises(StoreError):
            await tortoise_store.create_dish_with_ingredients(
                DraftDish(name="Broken"), [ingredient_id, ingredient_id]
            )
        assert await MenuItem.all().count() == 0

    async def test_unstorable_price_is_store_error(self, tortoise_store):
        draft = DraftDish.model_construct(
            name="Caviar", description="", category="Mains",
            price=float("inf"), ingredients=[]
        )

        with pytest.raises(StoreError):
            await tortoise_store.create_dish_with_ingredients(draft, [])
        assert await MenuItem.all().count() == 0

    async def test_batch_with_infinite_price_reports_per_item(self, tortoise_store):
        result = await MenuService(tortoise_store).ingest_batch([
            {"name": "ok"},
            {"name": "X", "price": float("inf")},
        ])

        assert [r.status.value for r in result.results] == ["succeeded", "failed"]
        assert await MenuItem.all().count() == 1

    async def test_link_ingredient_is_idempotent(self, tortoise_store):
        dish_id = await tortoise_store.create_dish(DraftDish(name="Toast"))
        ingredient_id = await tortoise_store.create_ingredient("butter")

        await tortoise_store.link_ingredient(dish_id, ingredient_id)
        await tortoise_store.link_ingredient(dish_id, ingredient_id)

        dish = await tortoise_store.get_dish(dish_id)
        assert dish.ingredients == ["butter"]

    async def test_distinct_categories(self, tortoise_store):
        for name, category in [("A", "Mains"), ("B", "Desserts"), ("C", "Mains")]:
            await tortoise_store.create_dish(DraftDish(name=name, category=category))

        assert await tortoise_store.list_distinct_categories() == ["Desserts", "Mains"]

    async def test_missing_dish(self, tortoise_store):
        assert await tortoise_store.get_dish(12345) is None
