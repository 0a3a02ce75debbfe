# menu_memorizer/exceptions/ocr_exceptions.py
class OCRException(Exception):
    """Base exception for OCR-related errors."""
    pass


class OCRError(OCRException):
    """Raised when the OCR service call fails."""

    def __init__(self, message: str = "OCR service failed"):
        super().__init__(message)


class InvalidImageError(OCRException):
    """Raised when image data is invalid."""

    def __init__(self, message: str = "Invalid image data"):
        super().__init__(message)
