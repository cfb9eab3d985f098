"""SQLAlchemy metadata registry import for table creation."""

from cardscan.models import Contact, OcrResponse
from cardscan.models.base import Base

__all__ = ["Base", "Contact", "OcrResponse"]
