"""Parsed business card schemas."""

from datetime import datetime

from cardscan.schemas.common import CamelModel


class BusinessCardRead(CamelModel):
    """Business card view derived from one extraction record."""

    id: int
    name: str
    title: str
    company: str
    email: str
    phone: str
    avatar: str
    extracted_text: str
    original_name: str | None
    mime_type: str | None
    image_size: int | None
    processing_time: int | None
    is_demo: bool
    created_at: datetime
    last_contact: str
    status: str = "new"
