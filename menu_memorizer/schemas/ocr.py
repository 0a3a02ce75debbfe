# menu_memorizer/schemas/ocr.py
from pydantic import BaseModel, ConfigDict, Field


class OCRRequestSchema(BaseModel):
    """Menu photo as base64 (raw or data URL)."""

    model_config = ConfigDict(populate_by_name=True)

    base64_image: str = Field(..., alias="base64Image", min_length=1)


class OCRResponseSchema(BaseModel):
    text: str
