# menu_memorizer/services/ingredient_service.py
import asyncio
import logging
from typing import Dict, Iterable, List

from menu_memorizer.schemas.menu import normalize_name
from menu_memorizer.services.menu_store import MenuStore
from menu_memorizer.exceptions.menu_exceptions import (
    DuplicateIngredientError,
    StoreError
)

logger = logging.getLogger(__name__)


class IngredientDeduplicator:
    """
    Resolves ingredient names to corpus ids, creating entries on demand.

    Names in a batch are deduplicated before any write, and distinct names
    are upserted concurrently. When another writer creates the same name
    first, the store's uniqueness constraint rejects our insert and the
    existing entry is re-fetched instead.
    """

    def __init__(self, store: MenuStore):
        self.store = store

    async def upsert(self, name: str) -> int:
        """
        Return the id of the ingredient called `name`, creating it if needed.

        Raises:
            StoreError: If the store fails or the entry cannot be re-fetched
        """
        existing_id = await self.store.find_ingredient_by_name(name)
        if existing_id is not None:
            return existing_id

        try:
            return await self.store.create_ingredient(name)
        except DuplicateIngredientError:
            logger.debug(f"Ingredient '{name}' created concurrently, re-fetching")

        existing_id = await self.store.find_ingredient_by_name(name)
        if existing_id is None:
            raise StoreError(f"Ingredient '{name}' conflicted on create but could not be found")
        return existing_id

    async def resolve(self, names: Iterable[str]) -> Dict[str, int]:
        """
        Map every submitted name to an ingredient id.

        Names are compared after whitespace normalization, so " garlic"
        and "garlic" share one entry. Blank names are ignored.
        Every upsert finishes before the first failure is raised.
        """
        normalized = {}
        for name in names:
            clean = normalize_name(name)
            if clean:
                normalized[name] = clean

        unique_names: List[str] = list(dict.fromkeys(normalized.values()))
        results = await asyncio.gather(
            *(self.upsert(name) for name in unique_names),
            return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        ids: List[int] = list(results)
        ids_by_name = dict(zip(unique_names, ids))

        return {name: ids_by_name[clean] for name, clean in normalized.items()}
