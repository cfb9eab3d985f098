"""Business card views derived from stored extraction records."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity
from cardscan.models.ocr_response import OcrResponse
from cardscan.parsing.card_parser import build_avatar, format_time_ago, parse_card_text
from cardscan.schemas.card import BusinessCardRead
from cardscan.schemas.common import Page, page_offset

UNKNOWN_CONTACT_NAME = "Unknown Contact"


def to_business_card(record: OcrResponse, *, now: datetime | None = None) -> BusinessCardRead:
    """Parse one record into a card. Recomputed on every read."""

    fields = parse_card_text(record.extracted_text)
    return BusinessCardRead(
        id=record.id,
        name=fields.name or UNKNOWN_CONTACT_NAME,
        title=fields.title,
        company=fields.company,
        email=fields.email,
        phone=fields.phone,
        avatar=build_avatar(fields.name),
        extracted_text=record.extracted_text,
        original_name=record.original_name,
        mime_type=record.mime_type,
        image_size=record.image_size,
        processing_time=record.processing_time,
        is_demo=record.is_demo,
        created_at=record.created_at,
        last_contact=format_time_ago(record.created_at, now=now),
    )


def list_business_cards(
    db: Session,
    caller: CallerIdentity,
    *,
    page: int = 1,
    limit: int = 10,
    now: datetime | None = None,
) -> Page[BusinessCardRead]:
    """Return one page of the caller's records parsed as business cards, newest first."""

    offset = page_offset(page, limit)
    owned = OcrResponse.user_id == caller.user_id
    total = int(db.scalar(select(func.count(OcrResponse.id)).where(owned)) or 0)
    records = db.scalars(
        select(OcrResponse)
        .where(owned)
        .order_by(OcrResponse.created_at.desc(), OcrResponse.id.desc())
        .limit(limit)
        .offset(offset)
    ).all()
    return Page[BusinessCardRead].build(
        [to_business_card(record, now=now) for record in records],
        total=total,
        page=page,
        limit=limit,
    )
