"""
Shared fixtures. Environment variables are set before the application
package is imported, since settings are read at import time.
"""

import asyncio
import os
import random
import tempfile
from typing import Dict, List, Optional, Tuple

_credentials = tempfile.NamedTemporaryFile(
    prefix="ocr-credentials-", suffix=".json", delete=False
)
_credentials.write(b"{}")
_credentials.close()

os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("GOOGLE_APPLICATION_CREDENTIALS", _credentials.name)

import pytest
import pytest_asyncio
from tortoise import Tortoise

from menu_memorizer.schemas.menu import Dish, DraftDish, Ingredient
from menu_memorizer.services.menu_store import MenuStore, TortoiseMenuStore
from menu_memorizer.exceptions.menu_exceptions import DuplicateIngredientError


class InMemoryMenuStore(MenuStore):
    """
    MenuStore fake. Every call yields to the event loop first, so
    concurrent upserts interleave between lookup and create the same way
    separate database round-trips would.
    """

    def __init__(self):
        self.drafts: Dict[int, DraftDish] = {}
        self.ingredients: Dict[int, str] = {}
        self.links: List[Tuple[int, int]] = []
        self.duplicate_conflicts = 0

    async def create_dish(self, draft: DraftDish) -> int:
        await asyncio.sleep(0)
        dish_id = len(self.drafts) + 1
        self.drafts[dish_id] = draft
        return dish_id

    async def link_ingredient(self, dish_id: int, ingredient_id: int) -> None:
        await asyncio.sleep(0)
        if (dish_id, ingredient_id) not in self.links:
            self.links.append((dish_id, ingredient_id))

    async def find_ingredient_by_name(self, name: str) -> Optional[int]:
        await asyncio.sleep(0)
        for ingredient_id, existing in self.ingredients.items():
            if existing == name:
                return ingredient_id
        return None

    async def create_ingredient(self, name: str) -> int:
        await asyncio.sleep(0)
        if name in self.ingredients.values():
            self.duplicate_conflicts += 1
            raise DuplicateIngredientError(name)
        ingredient_id = len(self.ingredients) + 1
        self.ingredients[ingredient_id] = name
        return ingredient_id

    async def get_dish(self, dish_id: int) -> Optional[Dish]:
        draft = self.drafts.get(dish_id)
        if draft is None:
            return None
        return Dish(
            id=dish_id,
            name=draft.name,
            description=draft.description,
            category=draft.category,
            price=draft.price,
            ingredients=[
                self.ingredients[ingredient_id]
                for linked_dish, ingredient_id in self.links
                if linked_dish == dish_id
            ]
        )

    async def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        name = self.ingredients.get(ingredient_id)
        return Ingredient(id=ingredient_id, name=name) if name is not None else None

    async def list_dishes_with_ingredients(self) -> List[Dish]:
        return [await self.get_dish(dish_id) for dish_id in sorted(self.drafts)]

    async def list_distinct_categories(self) -> List[str]:
        return sorted({draft.category for draft in self.drafts.values()})

    def names(self) -> List[str]:
        return list(self.ingredients.values())


class FirstPickRandom(random.Random):
    """Random source that always takes the first candidates and never shuffles."""

    def sample(self, population, k, *, counts=None):
        return list(population)[:k]

    def shuffle(self, x):
        pass


@pytest.fixture
def store():
    return InMemoryMenuStore()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def first_pick():
    return FirstPickRandom()


@pytest.fixture
def sample_dishes():
    return [
        Dish(id=1, name="Carbonara", description="Creamy pasta", category="Mains",
             price=13.49, ingredients=["spaghetti", "egg", "guanciale"]),
        Dish(id=2, name="Omelette", description="Folded eggs", category="Breakfast",
             price=7.5, ingredients=["egg", "butter"]),
        Dish(id=3, name="Caesar Salad", description="Romaine with dressing", category="Salads",
             price=9.0, ingredients=["romaine", "parmesan", "anchovy", "egg"]),
        Dish(id=4, name="Fries", description="", category="Sides",
             price=3.0, ingredients=[]),
    ]


@pytest_asyncio.fixture
async def tortoise_store():
    """TortoiseMenuStore on a fresh in-memory SQLite database."""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["menu_memorizer.models.menu"]}
    )
    await Tortoise.generate_schemas()
    yield TortoiseMenuStore()
    await Tortoise.close_connections()
