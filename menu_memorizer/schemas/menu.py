# menu_memorizer/schemas/menu.py
import logging
import re
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY = "Uncategorized"

logger = logging.getLogger(__name__)

_PRICE_NOISE = re.compile(r"[^\d.,\-]")
_DECIMAL_COMMA = re.compile(r"^\d+,\d{2}$")

# Upper bound of the Decimal(10, 2) price column
MAX_PRICE = 99999999.99


def normalize_name(value: str) -> str:
    """Trim a name and collapse inner whitespace."""
    return " ".join(value.split())


class DraftDish(BaseModel):
    """
    Unvalidated dish record produced by AI extraction or entered by hand.
    Missing optional fields are replaced with their defaults.
    """

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    price: float = Field(0, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    category: str = Field(DEFAULT_CATEGORY, max_length=100)

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, value: Any) -> Any:
        """Normalize whitespace in the dish name."""
        if isinstance(value, str):
            return normalize_name(value)
        return value

    @field_validator('description', mode='before')
    @classmethod
    def validate_description(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, value: Any) -> Any:
        """Fall back to the default category when absent or blank."""
        if value is None:
            return DEFAULT_CATEGORY
        if isinstance(value, str):
            return normalize_name(value) or DEFAULT_CATEGORY
        return value

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, value: Any) -> Any:
        """
        Accept numbers and price strings such as "$12.50", "1,200" or "12,50".
        A missing or unreadable price becomes 0.
        """
        if isinstance(value, bool):
            raise ValueError('Price must be a number')
        if value is None:
            return 0
        if isinstance(value, str):
            cleaned = _PRICE_NOISE.sub("", value)
            if _DECIMAL_COMMA.match(cleaned):
                cleaned = cleaned.replace(",", ".")
            else:
                cleaned = cleaned.replace(",", "")
            if not cleaned:
                return 0
            try:
                return float(cleaned)
            except ValueError:
                logger.warning(f"Unreadable price {value!r}, using 0")
                return 0
        return value

    @field_validator('ingredients', mode='before')
    @classmethod
    def validate_ingredients(cls, value: Any) -> Any:
        """Normalize ingredient names, dropping blanks and repeats."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list):
            return value

        names = []
        for item in value:
            if isinstance(item, (int, float)) and not isinstance(item, bool):
                item = str(item)
            if not isinstance(item, str):
                raise ValueError('Ingredient names must be strings')
            name = normalize_name(item)
            if name and name not in names:
                names.append(name)
        return names


class Dish(BaseModel):
    """Persisted dish with ingredient names resolved."""

    id: int
    name: str
    description: str
    category: str
    price: float
    ingredients: List[str] = Field(default_factory=list)


class Ingredient(BaseModel):
    """Persisted ingredient."""

    id: int
    name: str


class IngredientCreateSchema(BaseModel):
    """Schema for creating an ingredient."""

    name: str = Field(..., min_length=1, max_length=200)

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_name(value)
        return value


class IngredientLinkSchema(BaseModel):
    """Schema for linking existing ingredients to a dish."""

    model_config = ConfigDict(populate_by_name=True)

    ingredient_ids: List[int] = Field(..., alias="ingredientIds")


class MenuTextSchema(BaseModel):
    """Raw menu text to run through AI extraction."""

    text: str = Field(..., min_length=1)


class SkippedItemSchema(BaseModel):
    """Element of the AI output that could not be used as a dish."""

    index: int
    reason: str


class ExtractionResultSchema(BaseModel):
    """Draft dishes extracted from AI output."""

    items: List[DraftDish]
    skipped: List[SkippedItemSchema] = Field(default_factory=list)


class MenuUploadSchema(BaseModel):
    """
    Batch of draft dishes to ingest. Items are validated one by one
    so a bad item does not reject the whole request.
    """

    items: List[Any]


class ItemStatus(str, Enum):
    """Outcome of ingesting one batch item."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadItemResultSchema(BaseModel):
    index: int
    name: Optional[str] = None
    status: ItemStatus
    error: Optional[str] = None
    dish: Optional[Dish] = None


class MenuUploadResultSchema(BaseModel):
    """Per-item ingestion report."""

    success: bool
    items: List[Dish]
    results: List[UploadItemResultSchema]
