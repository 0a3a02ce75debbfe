# menu_memorizer/api/v1/endpoints/ocr.py
from fastapi import APIRouter, Depends, HTTPException, status

from menu_memorizer.api.v1.dependencies.services import get_ocr_client
from menu_memorizer.schemas.ocr import OCRRequestSchema, OCRResponseSchema
from menu_memorizer.services.ocr_service import OCRClient
from menu_memorizer.exceptions.ocr_exceptions import InvalidImageError, OCRError

router = APIRouter(prefix="/menu", tags=["ocr"])


@router.post("/ocr-google", response_model=OCRResponseSchema)
async def recognize_menu_text(
        body: OCRRequestSchema,
        client: OCRClient = Depends(get_ocr_client)
) -> OCRResponseSchema:
    """
    Detect text on a menu photo.

    Raises:
        HTTPException: 400 if the image is invalid, 502 if OCR fails
    """
    try:
        text = await client.detect_text(body.base64_image)
    except InvalidImageError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except OCRError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )
    return OCRResponseSchema(text=text)
