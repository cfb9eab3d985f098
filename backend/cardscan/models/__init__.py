"""ORM models package exports."""

from cardscan.models.contact import Contact
from cardscan.models.ocr_response import OcrResponse

__all__ = [
    "Contact",
    "OcrResponse",
]
