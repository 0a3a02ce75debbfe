# menu_memorizer/services/ocr_service.py
import base64
import binascii
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import vision

from menu_memorizer.core.config import settings
from menu_memorizer.exceptions.ocr_exceptions import InvalidImageError, OCRError

logger = logging.getLogger(__name__)


def decode_base64_image(base64_string: str, max_size: int) -> bytes:
    """
    Decode a base64 image, with or without a data URL prefix.

    Args:
        base64_string: Base64 encoded image
        max_size: Maximum allowed size of the decoded image in bytes

    Returns:
        Raw image bytes

    Raises:
        InvalidImageError: If the payload is not a readable image
    """
    encoded = base64_string.strip()
    if encoded.startswith("data:"):
        header, _, encoded = encoded.partition(",")
        if not header.startswith("data:image/"):
            raise InvalidImageError("Data URL must contain an image")

    try:
        image_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Failed to decode image: {e}")

    if not image_bytes:
        raise InvalidImageError("Image is empty")

    if len(image_bytes) > max_size:
        raise InvalidImageError(
            f"Image size exceeds maximum allowed size of {max_size} bytes"
        )

    try:
        Image.open(io.BytesIO(image_bytes)).verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Unreadable image: {e}")

    return image_bytes


class OCRClient:
    """Text detection through Google Cloud Vision."""

    def __init__(self, credentials_file: str, max_upload_size: int):
        self.credentials_file = credentials_file
        self.max_upload_size = max_upload_size
        self._client: Optional[vision.ImageAnnotatorAsyncClient] = None

    @classmethod
    def from_settings(cls) -> "OCRClient":
        return cls(
            credentials_file=settings.GOOGLE_APPLICATION_CREDENTIALS,
            max_upload_size=settings.MAX_UPLOAD_SIZE
        )

    def _get_client(self) -> vision.ImageAnnotatorAsyncClient:
        if self._client is None:
            self._client = vision.ImageAnnotatorAsyncClient.from_service_account_file(
                self.credentials_file
            )
        return self._client

    async def detect_text(self, base64_image: str) -> str:
        """
        Return the text found in an image, or "" when there is none.

        Raises:
            InvalidImageError: If the payload is not a readable image
            OCRError: If the OCR call fails
        """
        image_bytes = decode_base64_image(base64_image, self.max_upload_size)
        request = vision.AnnotateImageRequest(
            image=vision.Image(content=image_bytes),
            features=[vision.Feature(type_=vision.Feature.Type.TEXT_DETECTION)]
        )

        try:
            response = await self._get_client().batch_annotate_images(requests=[request])
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            logger.error(f"OCR request failed: {e}")
            raise OCRError(f"OCR request failed: {e}") from e

        result = response.responses[0]
        if result.error.message:
            logger.error(f"OCR error: {result.error.code} - {result.error.message}")
            raise OCRError(f"OCR failed: {result.error.message}")

        if not result.text_annotations:
            logger.info("OCR found no text")
            return ""
        return result.text_annotations[0].description
