# menu_memorizer/services/menu_store.py
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Iterator, List, Optional, Sequence

from tortoise.exceptions import BaseORMException, IntegrityError
from tortoise.transactions import in_transaction

from menu_memorizer.models.menu import Ingredient as IngredientModel
from menu_memorizer.models.menu import MenuItem, MenuItemIngredient
from menu_memorizer.schemas.menu import Dish, DraftDish, Ingredient
from menu_memorizer.exceptions.menu_exceptions import (
    DuplicateIngredientError,
    StoreError
)

logger = logging.getLogger(__name__)


class MenuStore(ABC):
    """
    Persistence boundary for dishes and the shared ingredient corpus.

    Implementations must keep ingredient names unique and raise
    DuplicateIngredientError from create_ingredient when a name is taken.
    Failures outside the pipeline's control are reported as StoreError.
    """

    @abstractmethod
    async def create_dish(self, draft: DraftDish) -> int:
        """Create a dish without ingredients and return its id."""

    @abstractmethod
    async def link_ingredient(self, dish_id: int, ingredient_id: int) -> None:
        """Link an ingredient to a dish. Linking twice is a no-op."""

    @abstractmethod
    async def find_ingredient_by_name(self, name: str) -> Optional[int]:
        """Return the id of the ingredient with exactly this name, if any."""

    @abstractmethod
    async def create_ingredient(self, name: str) -> int:
        """Create an ingredient and return its id."""

    @abstractmethod
    async def get_dish(self, dish_id: int) -> Optional[Dish]:
        pass

    @abstractmethod
    async def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        pass

    @abstractmethod
    async def list_dishes_with_ingredients(self) -> List[Dish]:
        """All dishes in storage order, ingredients resolved to names."""

    @abstractmethod
    async def list_distinct_categories(self) -> List[str]:
        pass

    async def create_dish_with_ingredients(
            self,
            draft: DraftDish,
            ingredient_ids: Sequence[int]
    ) -> Dish:
        """
        Persist a dish together with its ingredient links.

        This fallback writes sequentially, so a failure after the dish row
        exists is reported as a partial write. Stores with transactions
        should override it.

        Raises:
            StoreError: If any write fails
        """
        dish_id = await self.create_dish(draft)
        try:
            for ingredient_id in ingredient_ids:
                await self.link_ingredient(dish_id, ingredient_id)
        except StoreError as e:
            raise StoreError(
                f"Partial write: dish {dish_id} was created without all ingredients ({e})"
            ) from e

        dish = await self.get_dish(dish_id)
        if dish is None:
            raise StoreError(f"Dish {dish_id} disappeared after creation")
        return dish


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate ORM failures into StoreError."""
    try:
        yield
    except (BaseORMException, InvalidOperation) as e:
        logger.error(f"Store failure while trying to {action}: {e}")
        raise StoreError(f"Failed to {action}: {e}") from e


def _to_dish(item: MenuItem) -> Dish:
    return Dish(
        id=item.id,
        name=item.name,
        description=item.description,
        category=item.category,
        price=float(item.price),
        ingredients=[link.ingredient.name for link in item.ingredient_links]
    )


class TortoiseMenuStore(MenuStore):
    """MenuStore backed by the Tortoise ORM models."""

    async def create_dish(self, draft: DraftDish) -> int:
        with _store_errors("create dish"):
            item = await MenuItem.create(
                name=draft.name,
                description=draft.description,
                category=draft.category,
                price=Decimal(str(draft.price))
            )
        return item.id

    async def link_ingredient(self, dish_id: int, ingredient_id: int) -> None:
        with _store_errors("link ingredient"):
            await MenuItemIngredient.get_or_create(
                menu_item_id=dish_id,
                ingredient_id=ingredient_id
            )

    async def find_ingredient_by_name(self, name: str) -> Optional[int]:
        with _store_errors("look up ingredient"):
            ingredient = await IngredientModel.get_or_none(name=name)
        return ingredient.id if ingredient else None

    async def create_ingredient(self, name: str) -> int:
        try:
            ingredient = await IngredientModel.create(name=name)
        except IntegrityError as e:
            raise DuplicateIngredientError(name) from e
        except BaseORMException as e:
            logger.error(f"Store failure while trying to create ingredient: {e}")
            raise StoreError(f"Failed to create ingredient: {e}") from e
        return ingredient.id

    async def get_dish(self, dish_id: int) -> Optional[Dish]:
        with _store_errors("load dish"):
            item = await MenuItem.get_or_none(id=dish_id).prefetch_related(
                "ingredient_links__ingredient"
            )
        return _to_dish(item) if item else None

    async def get_ingredient(self, ingredient_id: int) -> Optional[Ingredient]:
        with _store_errors("load ingredient"):
            ingredient = await IngredientModel.get_or_none(id=ingredient_id)
        if not ingredient:
            return None
        return Ingredient(id=ingredient.id, name=ingredient.name)

    async def list_dishes_with_ingredients(self) -> List[Dish]:
        with _store_errors("list dishes"):
            items = await MenuItem.all().prefetch_related("ingredient_links__ingredient")
        return [_to_dish(item) for item in items]

    async def list_distinct_categories(self) -> List[str]:
        with _store_errors("list categories"):
            categories = await (
                MenuItem.all()
                .order_by("category")
                .distinct()
                .values_list("category", flat=True)
            )
        return list(categories)

    async def create_dish_with_ingredients(
            self,
            draft: DraftDish,
            ingredient_ids: Sequence[int]
    ) -> Dish:
        """Persist the dish and all of its links in one transaction."""
        with _store_errors("create dish"):
            async with in_transaction():
                item = await MenuItem.create(
                    name=draft.name,
                    description=draft.description,
                    category=draft.category,
                    price=Decimal(str(draft.price))
                )
                for ingredient_id in ingredient_ids:
                    await MenuItemIngredient.create(
                        menu_item_id=item.id,
                        ingredient_id=ingredient_id
                    )

        dish = await self.get_dish(item.id)
        if dish is None:
            raise StoreError(f"Dish {item.id} disappeared after creation")
        return dish
