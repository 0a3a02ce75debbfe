# menu_memorizer/exceptions/menu_exceptions.py
from typing import Any, Dict, List, Optional


class MenuException(Exception):
    """Base exception for menu-related errors."""
    pass


class ExtractionError(MenuException):
    """Raised when AI output contains no parseable dish array."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class AIServiceError(MenuException):
    """Raised when the AI extraction call itself fails."""

    def __init__(self, message: str = "AI extraction service failed"):
        super().__init__(message)


class DraftValidationError(MenuException):
    """Raised when a draft dish is missing required fields or has invalid values."""

    def __init__(self, errors: List[Dict[str, Any]], index: Optional[int] = None):
        self.errors = errors
        self.index = index
        fields_text = ", ".join(
            ".".join(str(part) for part in error.get("loc", ())) or "item"
            for error in errors
        )
        super().__init__(f"Invalid dish data: {fields_text}")


class DuplicateIngredientError(MenuException):
    """Raised by a store when an ingredient name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Ingredient '{name}' already exists")


class StoreError(MenuException):
    """Raised when the menu store fails for reasons outside the pipeline."""

    def __init__(self, message: str = "Menu store operation failed"):
        super().__init__(message)


class DishNotFoundError(MenuException):
    """Raised when dish is not found in database."""

    def __init__(self, dish_id: int):
        self.dish_id = dish_id
        super().__init__(f"Dish with id {dish_id} not found")


class IngredientNotFoundError(MenuException):
    """Raised when ingredient is not found in database."""

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(f"Ingredient with id {ingredient_id} not found")
