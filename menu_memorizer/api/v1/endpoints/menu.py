# menu_memorizer/api/v1/endpoints/menu.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from menu_memorizer.api.v1.dependencies.services import (
    get_extraction_client,
    get_menu_service
)
from menu_memorizer.schemas.menu import (
    Dish,
    DraftDish,
    ExtractionResultSchema,
    IngredientLinkSchema,
    MenuTextSchema,
    MenuUploadResultSchema,
    MenuUploadSchema
)
from menu_memorizer.services.extraction import AIExtractionClient
from menu_memorizer.services.menu_service import MenuService
from menu_memorizer.exceptions.menu_exceptions import (
    AIServiceError,
    DishNotFoundError,
    ExtractionError,
    IngredientNotFoundError,
    StoreError
)

router = APIRouter(tags=["menu"])


def _store_failure(e: StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e)
    )


@router.get("/menu", response_model=List[Dish])
async def get_menu(service: MenuService = Depends(get_menu_service)) -> List[Dish]:
    """
    Retrieve all dishes with ingredient names.
    """
    try:
        return await service.list_menu()
    except StoreError as e:
        raise _store_failure(e)


@router.post("/menu", response_model=Dish, status_code=status.HTTP_201_CREATED)
async def create_dish(
        dish_data: DraftDish,
        service: MenuService = Depends(get_menu_service)
) -> Dish:
    """
    Create a single dish entered by hand.

    Raises:
        HTTPException: 500 if the store fails
    """
    try:
        return await service.create_dish(dish_data)
    except StoreError as e:
        raise _store_failure(e)


@router.post("/menu/parse-ai", response_model=ExtractionResultSchema)
async def parse_menu_text(
        body: MenuTextSchema,
        client: AIExtractionClient = Depends(get_extraction_client)
):
    """
    Extract draft dishes from OCR text with the AI service.

    Returns:
        Draft dishes, or {error, details} with 422 if the AI output
        holds no usable JSON array
    """
    try:
        return await client.extract_dishes(body.text)
    except ExtractionError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": e.message, "details": e.details}
        )
    except AIServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )


@router.post("/menu/upload", response_model=MenuUploadResultSchema)
async def upload_menu(
        body: MenuUploadSchema,
        service: MenuService = Depends(get_menu_service)
) -> MenuUploadResultSchema:
    """
    Ingest a batch of draft dishes. Each item succeeds or fails on its own.
    """
    return await service.ingest_batch(body.items)


@router.post("/menu/{dish_id}/ingredients", response_model=Dish)
async def link_dish_ingredients(
        dish_id: int,
        body: IngredientLinkSchema,
        service: MenuService = Depends(get_menu_service)
) -> Dish:
    """
    Link existing ingredients to a dish.

    Raises:
        HTTPException: 404 if the dish or an ingredient is not found
    """
    try:
        return await service.link_ingredients(dish_id, body.ingredient_ids)
    except (DishNotFoundError, IngredientNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StoreError as e:
        raise _store_failure(e)


@router.get("/categories", response_model=List[str])
async def get_categories(service: MenuService = Depends(get_menu_service)) -> List[str]:
    """
    Retrieve distinct dish categories.
    """
    try:
        return await service.list_categories()
    except StoreError as e:
        raise _store_failure(e)
