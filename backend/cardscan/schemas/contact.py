"""Contact request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from cardscan.models.contact import DEFAULT_CONTACT_STATUS
from cardscan.schemas.common import CamelModel


class ContactWrite(CamelModel):
    """Every mutable contact field. Used for create and whole-record update."""

    name: str = Field(min_length=1, max_length=255)
    title: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    notes: str | None = None
    status: str = Field(default=DEFAULT_CONTACT_STATUS, min_length=1, max_length=32)
    tags: list[str] = Field(default_factory=list)
    last_contact: datetime | None = None
    ocr_response_id: int | None = Field(default=None, ge=1)

    @field_validator("name", "status")
    @classmethod
    def strip_required(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned

    @field_validator("title", "company", "email", "phone", "address", "website", "notes")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: list[str]) -> list[str]:
        return [tag.strip() for tag in value if tag.strip()]


class ContactRead(CamelModel):
    """Serialized contact."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: str
    title: str | None
    company: str | None
    email: str | None
    phone: str | None
    address: str | None
    website: str | None
    notes: str | None
    status: str
    tags: list[str]
    last_contact: datetime | None
    ocr_response_id: int | None
    created_at: datetime
    updated_at: datetime
    avatar: str = ""
    last_contact_label: str = ""
