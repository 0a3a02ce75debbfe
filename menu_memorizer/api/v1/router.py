# menu_memorizer/api/v1/router.py
from fastapi import APIRouter
from menu_memorizer.api.v1.endpoints import ingredients, menu, ocr, quiz


api_router = APIRouter()

api_router.include_router(ocr.router)
api_router.include_router(menu.router)
api_router.include_router(ingredients.router)
api_router.include_router(quiz.router)
