"""Extractor interface for pluggable image-to-text implementations."""

from abc import ABC, abstractmethod


class TextExtractorInterface(ABC):
    """Abstract image text extractor."""

    model_name: str = "unknown"

    @abstractmethod
    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        """Return the plain text found in an image, preserving line breaks."""
