"""Image upload and text extraction routes."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity, get_caller_identity
from cardscan.config import Settings, get_settings
from cardscan.db.dependencies import get_db
from cardscan.extraction.extractor_interface import TextExtractorInterface
from cardscan.schemas.ocr_response import OcrExtractionResult
from cardscan.services.extraction import get_text_extractor, run_text_extraction

router = APIRouter()


@router.post("/ocr", response_model=OcrExtractionResult)
def extract_image_text(
    image: UploadFile | None = File(default=None),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
    extractor: TextExtractorInterface = Depends(get_text_extractor),
    settings: Settings = Depends(get_settings),
) -> OcrExtractionResult:
    """Extract text from an uploaded image and store it for the caller."""

    return _extract_and_store(image, caller, db, extractor, settings, is_demo=False)


@router.post("/ocr-demo", response_model=OcrExtractionResult)
def extract_demo_image_text(
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    extractor: TextExtractorInterface = Depends(get_text_extractor),
    settings: Settings = Depends(get_settings),
) -> OcrExtractionResult:
    """Extract text without a session; the record is stored unowned and flagged as demo."""

    return _extract_and_store(image, None, db, extractor, settings, is_demo=True)


def _extract_and_store(
    image: UploadFile | None,
    caller: CallerIdentity | None,
    db: Session,
    extractor: TextExtractorInterface,
    settings: Settings,
    *,
    is_demo: bool,
) -> OcrExtractionResult:
    # One byte past the cap is enough to reject oversize uploads.
    image_bytes = image.file.read(settings.max_upload_bytes + 1) if image is not None else b""
    record = run_text_extraction(
        db,
        extractor,
        image_bytes=image_bytes,
        mime_type=image.content_type if image is not None else None,
        caller=caller,
        original_name=image.filename if image is not None else None,
        is_demo=is_demo,
        max_bytes=settings.max_upload_bytes,
    )
    return OcrExtractionResult(
        extracted_text=record.extracted_text,
        response_id=record.id,
        processing_time=record.processing_time or 0,
    )
