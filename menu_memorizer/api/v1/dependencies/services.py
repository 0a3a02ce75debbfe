# menu_memorizer/api/v1/dependencies/services.py
from fastapi import Depends

from menu_memorizer.core.config import settings
from menu_memorizer.services.extraction import AIExtractionClient
from menu_memorizer.services.menu_service import MenuService
from menu_memorizer.services.menu_store import MenuStore, TortoiseMenuStore
from menu_memorizer.services.ocr_service import OCRClient
from menu_memorizer.services.quiz_service import QuizService

_ocr_client: OCRClient | None = None


def get_menu_store() -> MenuStore:
    """Store handle for the current request."""
    return TortoiseMenuStore()


def get_menu_service(store: MenuStore = Depends(get_menu_store)) -> MenuService:
    return MenuService(store)


def get_quiz_service(store: MenuStore = Depends(get_menu_store)) -> QuizService:
    return QuizService(
        store,
        multi_select_k=settings.QUIZ_MULTI_SELECT_DISTRACTORS,
        single_select_k=settings.QUIZ_SINGLE_SELECT_DISTRACTORS
    )


def get_extraction_client() -> AIExtractionClient:
    return AIExtractionClient.from_settings()


def get_ocr_client() -> OCRClient:
    """Shared OCR client; the underlying Vision client is created once."""
    global _ocr_client

    if _ocr_client is None:
        _ocr_client = OCRClient.from_settings()

    return _ocr_client
