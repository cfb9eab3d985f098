"""Image upload to extracted-text orchestration."""

from __future__ import annotations

import logging
from time import perf_counter

from fastapi import Depends
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity
from cardscan.config import Settings, get_settings
from cardscan.errors import ConfigurationError, InputValidationError
from cardscan.extraction.extractor_interface import TextExtractorInterface
from cardscan.extraction.gemini_extractor import GeminiVisionClient
from cardscan.models.ocr_response import OcrResponse
from cardscan.schemas.ocr_response import OcrResponseCreate
from cardscan.services.ocr_responses import create_ocr_response

logger = logging.getLogger(__name__)


def get_text_extractor(settings: Settings = Depends(get_settings)) -> TextExtractorInterface:
    """Build the configured vision client for one request."""

    if not settings.gemini_api_key:
        raise ConfigurationError(
            "GEMINI_API_KEY is not configured. Set it in backend/.env before running extraction."
        )
    return GeminiVisionClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout_seconds=settings.gemini_timeout_seconds,
    )


def validate_image_payload(image_bytes: bytes, mime_type: str | None, *, max_bytes: int) -> str:
    """Reject empty, oversized or non-image uploads. Returns the normalized MIME type."""

    if not image_bytes:
        raise InputValidationError("No image file uploaded.")
    if len(image_bytes) > max_bytes:
        raise InputValidationError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB upload limit.")
    normalized = (mime_type or "").split(";", 1)[0].strip().lower()
    if not normalized.startswith("image/"):
        raise InputValidationError("Uploaded file must be an image.")
    return normalized


def run_text_extraction(
    db: Session,
    extractor: TextExtractorInterface,
    *,
    image_bytes: bytes,
    mime_type: str | None,
    caller: CallerIdentity | None,
    original_name: str | None = None,
    is_demo: bool = False,
    max_bytes: int = 4 * 1024 * 1024,
) -> OcrResponse:
    """Extract text from an image and persist it. Nothing is stored when extraction fails."""

    normalized_mime_type = validate_image_payload(image_bytes, mime_type, max_bytes=max_bytes)
    user_id = caller.user_id if caller is not None else None

    started = perf_counter()
    try:
        extracted_text = extractor.extract_text(image_bytes, normalized_mime_type)
    except Exception:
        logger.exception(
            "ocr.extraction_failed user_id=%s mime_type=%s image_size=%d elapsed_ms=%.2f",
            user_id,
            normalized_mime_type,
            len(image_bytes),
            (perf_counter() - started) * 1000.0,
        )
        raise
    processing_ms = int(round((perf_counter() - started) * 1000.0))

    record = create_ocr_response(
        db,
        OcrResponseCreate(
            extracted_text=extracted_text or "",
            original_name=original_name,
            image_size=len(image_bytes),
            mime_type=normalized_mime_type,
            processing_time=processing_ms,
            is_demo=is_demo,
        ),
        caller,
    )
    logger.info(
        (
            "ocr.extraction_timing response_id=%s user_id=%s model=%s mime_type=%s "
            "image_size=%d processing_ms=%d text_length=%d is_demo=%s"
        ),
        record.id,
        user_id,
        getattr(extractor, "model_name", "unknown"),
        normalized_mime_type,
        len(image_bytes),
        processing_ms,
        len(record.extracted_text),
        is_demo,
    )
    return record
