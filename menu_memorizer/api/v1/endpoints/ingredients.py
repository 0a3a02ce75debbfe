# menu_memorizer/api/v1/endpoints/ingredients.py
from fastapi import APIRouter, Depends, HTTPException, status

from menu_memorizer.api.v1.dependencies.services import get_menu_service
from menu_memorizer.schemas.menu import Ingredient, IngredientCreateSchema
from menu_memorizer.services.menu_service import MenuService
from menu_memorizer.exceptions.menu_exceptions import StoreError

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.post("", response_model=Ingredient)
async def create_ingredient(
        ingredient_data: IngredientCreateSchema,
        service: MenuService = Depends(get_menu_service)
) -> Ingredient:
    """
    Create an ingredient, or return the existing one with the same name.
    """
    try:
        return await service.create_ingredient(ingredient_data.name)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
