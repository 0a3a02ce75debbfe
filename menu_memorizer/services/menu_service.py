# menu_memorizer/services/menu_service.py
import asyncio
import logging
from typing import Any, List, Sequence

from pydantic import ValidationError

from menu_memorizer.schemas.menu import (
    Dish,
    DraftDish,
    Ingredient,
    ItemStatus,
    MenuUploadResultSchema,
    UploadItemResultSchema
)
from menu_memorizer.services.ingredient_service import IngredientDeduplicator
from menu_memorizer.services.menu_store import MenuStore
from menu_memorizer.exceptions.menu_exceptions import (
    DishNotFoundError,
    DraftValidationError,
    IngredientNotFoundError,
    MenuException
)

logger = logging.getLogger(__name__)


class MenuService:
    """Service for ingesting dishes and reading the menu corpus."""

    def __init__(self, store: MenuStore):
        self.store = store
        self.ingredients = IngredientDeduplicator(store)

    @staticmethod
    def validate_draft(raw_item: Any, index: int = 0) -> DraftDish:
        """
        Validate one raw batch item.

        Raises:
            DraftValidationError: If the item is not a valid dish
        """
        if isinstance(raw_item, DraftDish):
            return raw_item
        if not isinstance(raw_item, dict):
            raise DraftValidationError(
                [{"loc": (), "msg": "Item must be an object"}], index=index
            )
        try:
            return DraftDish.model_validate(raw_item)
        except ValidationError as e:
            raise DraftValidationError(e.errors(), index=index) from e

    async def create_dish(self, draft: DraftDish) -> Dish:
        """
        Persist one dish, reusing existing ingredients by name.

        Raises:
            StoreError: If the store fails
        """
        ids_by_name = await self.ingredients.resolve(draft.ingredients)
        ingredient_ids = list(dict.fromkeys(ids_by_name.values()))
        return await self.store.create_dish_with_ingredients(draft, ingredient_ids)

    async def _ingest_item(self, index: int, raw_item: Any) -> UploadItemResultSchema:
        name = raw_item.get("name") if isinstance(raw_item, dict) else None
        try:
            draft = self.validate_draft(raw_item, index)
            dish = await self.create_dish(draft)
        except MenuException as e:
            logger.warning(f"Failed to ingest item {index} ({name!r}): {e}")
            return UploadItemResultSchema(
                index=index,
                name=name if isinstance(name, str) else None,
                status=ItemStatus.FAILED,
                error=str(e)
            )
        return UploadItemResultSchema(
            index=index,
            name=dish.name,
            status=ItemStatus.SUCCEEDED,
            dish=dish
        )

    async def ingest_batch(self, raw_items: Sequence[Any]) -> MenuUploadResultSchema:
        """
        Ingest a batch of draft dishes, each independently.

        A failing item is reported in the result list and does not stop
        the others, so callers can resubmit only the failed subset.
        """
        results = await asyncio.gather(
            *(self._ingest_item(index, raw_item) for index, raw_item in enumerate(raw_items))
        )
        created = [result.dish for result in results if result.dish is not None]
        failed = len(results) - len(created)
        logger.info(f"Ingested batch: {len(created)} succeeded, {failed} failed")

        return MenuUploadResultSchema(
            success=failed == 0,
            items=created,
            results=list(results)
        )

    async def create_ingredient(self, name: str) -> Ingredient:
        """Return the ingredient with this name, creating it if missing."""
        ingredient_id = await self.ingredients.upsert(name)
        return Ingredient(id=ingredient_id, name=name)

    async def link_ingredients(self, dish_id: int, ingredient_ids: Sequence[int]) -> Dish:
        """
        Link existing ingredients to a dish.

        Raises:
            DishNotFoundError: If dish doesn't exist
            IngredientNotFoundError: If any ingredient doesn't exist
        """
        if await self.store.get_dish(dish_id) is None:
            raise DishNotFoundError(dish_id)

        unique_ids = list(dict.fromkeys(ingredient_ids))
        for ingredient_id in unique_ids:
            if await self.store.get_ingredient(ingredient_id) is None:
                raise IngredientNotFoundError(ingredient_id)

        for ingredient_id in unique_ids:
            await self.store.link_ingredient(dish_id, ingredient_id)

        dish = await self.store.get_dish(dish_id)
        if dish is None:
            raise DishNotFoundError(dish_id)
        return dish

    async def list_menu(self) -> List[Dish]:
        return await self.store.list_dishes_with_ingredients()

    async def list_categories(self) -> List[str]:
        return await self.store.list_distinct_categories()
