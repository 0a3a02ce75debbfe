# menu_memorizer/services/extraction.py
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from menu_memorizer.core.config import settings
from menu_memorizer.schemas.menu import (
    DraftDish,
    ExtractionResultSchema,
    SkippedItemSchema
)
from menu_memorizer.exceptions.menu_exceptions import AIServiceError, ExtractionError

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You turn OCR text of a restaurant menu into structured data.
Return ONLY a JSON array. Each element is an object with the keys:
  "name" (string, required),
  "description" (string),
  "ingredients" (array of strings, main ingredients only),
  "price" (number, without currency symbol),
  "category" (string, the menu section the dish is listed under).
Leave out keys you cannot determine. Do not invent dishes.

Menu text:
"""


def parse_draft_dishes(raw_text: str) -> ExtractionResultSchema:
    """
    Extract draft dishes from AI output.

    The output is expected to hold a JSON array, possibly wrapped in prose or
    markdown fences. Everything between the first '[' and the last ']' is
    parsed; text outside that span is ignored. Elements that are not objects
    or that fail validation are skipped and reported.

    Args:
        raw_text: Text returned by the AI extraction call

    Returns:
        Extracted drafts and skipped elements

    Raises:
        ExtractionError: If no array is found or it is not valid JSON
    """
    start = raw_text.find("[")
    end = raw_text.rfind("]")
    if start == -1 or end == -1 or end < start:
        raise ExtractionError("no array found", details=raw_text.strip()[:500] or None)

    candidate = raw_text[start:end + 1]
    try:
        elements = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"AI output is not valid JSON: {e}")
        raise ExtractionError("malformed JSON", details=candidate)

    items: List[DraftDish] = []
    skipped: List[SkippedItemSchema] = []
    for index, element in enumerate(elements):
        if not isinstance(element, dict):
            skipped.append(SkippedItemSchema(index=index, reason="not an object"))
            continue
        try:
            items.append(DraftDish.model_validate(element))
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            skipped.append(SkippedItemSchema(index=index, reason=reason))

    for item in skipped:
        logger.warning(f"Skipped extracted element {item.index}: {item.reason}")

    return ExtractionResultSchema(items=items, skipped=skipped)


class AIExtractionClient:
    """Client for the OpenAI-compatible chat completions API."""

    def __init__(
            self,
            api_key: str,
            base_url: str,
            model: str,
            timeout: int = 60
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "AIExtractionClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            timeout=settings.AI_REQUEST_TIMEOUT
        )

    def _build_payload(self, menu_text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "temperature": 0,
            "messages": [
                {"role": "system", "content": "You extract restaurant menu data as JSON."},
                {"role": "user", "content": EXTRACTION_PROMPT + menu_text},
            ],
        }

    async def complete(self, menu_text: str) -> str:
        """
        Send menu text to the model and return the raw answer text.

        Raises:
            AIServiceError: If the request fails or returns a non-2xx status
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    json=self._build_payload(menu_text),
                    headers=headers
                ) as resp:
                    if resp.status >= 400:
                        error_text = await resp.text()
                        logger.error(f"AI extraction error: {resp.status} - {error_text[:200]}")
                        raise AIServiceError(f"AI extraction service returned {resp.status}")
                    data = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"AI extraction request failed: {e}")
            raise AIServiceError(f"AI extraction request failed: {e}") from e

        try:
            content: Optional[str] = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError("AI extraction service returned an unexpected payload") from e
        return content or ""

    async def extract_dishes(self, menu_text: str) -> ExtractionResultSchema:
        """Run AI extraction on menu text and normalize the result."""
        raw_text = await self.complete(menu_text)
        result = parse_draft_dishes(raw_text)
        logger.info(
            f"Extracted {len(result.items)} dishes ({len(result.skipped)} skipped)"
        )
        return result
