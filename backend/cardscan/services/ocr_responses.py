"""Owner-scoped persistence and queries for extraction records."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from cardscan.auth.identity import CallerIdentity
from cardscan.db.filters import LIKE_ESCAPE_CHAR, contains_pattern
from cardscan.errors import InputValidationError, NotFoundError, StoreError
from cardscan.models.contact import Contact
from cardscan.models.ocr_response import OcrResponse
from cardscan.schemas.common import Page, page_offset
from cardscan.schemas.ocr_response import OcrResponseCreate, OcrResponseListItem, OcrStats

logger = logging.getLogger(__name__)


def create_ocr_response(
    db: Session,
    payload: OcrResponseCreate,
    caller: CallerIdentity | None,
) -> OcrResponse:
    """Persist one extraction record. Anonymous callers produce unowned records."""

    record = OcrResponse(
        user_id=caller.user_id if caller is not None else None,
        extracted_text=payload.extracted_text,
        original_name=payload.original_name,
        image_size=payload.image_size,
        mime_type=payload.mime_type,
        processing_time=payload.processing_time,
        is_demo=payload.is_demo,
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("ocr_responses.create_failed user_id=%s", record.user_id)
        raise StoreError("Failed to save OCR response to database") from exc
    db.refresh(record)
    return record


def list_ocr_responses(
    db: Session,
    caller: CallerIdentity,
    *,
    page: int = 1,
    limit: int = 10,
) -> Page[OcrResponseListItem]:
    """Return one page of the caller's records, newest first."""

    return _paginate(db, _owned_by(caller), page=page, limit=limit)


def search_ocr_responses(
    db: Session,
    caller: CallerIdentity,
    search_term: str,
    *,
    page: int = 1,
    limit: int = 10,
) -> Page[OcrResponseListItem]:
    """Return the caller's records whose text contains the term, ignoring case."""

    term = (search_term or "").strip()
    if not term:
        raise InputValidationError("Search term is required")
    stmt = _owned_by(caller).where(OcrResponse.extracted_text.ilike(contains_pattern(term), escape=LIKE_ESCAPE_CHAR))
    return _paginate(db, stmt, page=page, limit=limit)


def get_ocr_response(db: Session, response_id: int, caller: CallerIdentity) -> OcrResponse:
    """Return one record owned by the caller."""

    record = db.scalar(_owned_by(caller).where(OcrResponse.id == response_id))
    if record is None:
        raise NotFoundError("OCR response not found")
    return record


def delete_ocr_response(db: Session, response_id: int, caller: CallerIdentity) -> bool:
    """Delete one record if the caller owns it. Linked contacts lose the link."""

    record = db.scalar(_owned_by(caller).where(OcrResponse.id == response_id))
    if record is None:
        return False
    try:
        db.execute(
            update(Contact)
            .where(Contact.ocr_response_id == response_id, Contact.user_id == caller.user_id)
            .values(ocr_response_id=None)
        )
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("ocr_responses.delete_failed id=%s user_id=%s", response_id, caller.user_id)
        raise StoreError("Failed to delete OCR response") from exc
    logger.info("ocr_responses.deleted id=%s user_id=%s", response_id, caller.user_id)
    return True


def get_ocr_stats(db: Session, caller: CallerIdentity) -> OcrStats:
    """Aggregate counts, text length, processing time and the dominant MIME type."""

    total = int(
        db.scalar(select(func.count(OcrResponse.id)).where(OcrResponse.user_id == caller.user_id)) or 0
    )
    average_processing_time = db.scalar(
        select(func.avg(OcrResponse.processing_time)).where(OcrResponse.user_id == caller.user_id)
    )

    rows = db.execute(
        select(OcrResponse.extracted_text, OcrResponse.mime_type)
        .where(OcrResponse.user_id == caller.user_id)
        .order_by(OcrResponse.id.asc())
    ).all()
    total_text_length = sum(len(row.extracted_text or "") for row in rows)

    return OcrStats(
        total_responses=total,
        total_text_length=total_text_length,
        average_processing_time=float(average_processing_time) if average_processing_time is not None else None,
        most_common_mime_type=most_common_mime_type(row.mime_type for row in rows),
    )


def most_common_mime_type(mime_types: Iterable[str | None]) -> str | None:
    """Most frequent non-empty value; ties go to the one seen first."""

    counts: dict[str, int] = {}
    for mime_type in mime_types:
        if mime_type:
            counts[mime_type] = counts.get(mime_type, 0) + 1

    best: str | None = None
    best_count = 0
    for mime_type, count in counts.items():
        if count > best_count:
            best, best_count = mime_type, count
    return best


def _owned_by(caller: CallerIdentity) -> Select[tuple[OcrResponse]]:
    return select(OcrResponse).where(OcrResponse.user_id == caller.user_id)


def _paginate(
    db: Session,
    stmt: Select[tuple[OcrResponse]],
    *,
    page: int,
    limit: int,
) -> Page[OcrResponseListItem]:
    offset = page_offset(page, limit)
    total = int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
    records = db.scalars(
        stmt.order_by(OcrResponse.created_at.desc(), OcrResponse.id.desc())
        .limit(limit)
        .offset(offset)
    ).all()
    return Page[OcrResponseListItem].build(
        [OcrResponseListItem.model_validate(record) for record in records],
        total=total,
        page=page,
        limit=limit,
    )
