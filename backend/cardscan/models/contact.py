"""User-curated contact ORM model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardscan.models.base import Base, CreatedAtMixin, IdMixin, UpdatedAtMixin

DEFAULT_CONTACT_STATUS = "new"


class Contact(Base, IdMixin, CreatedAtMixin, UpdatedAtMixin):
    """Contact saved by a user, optionally promoted from a scanned card."""

    __tablename__ = "contacts"

    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=DEFAULT_CONTACT_STATUS, index=True, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    last_contact: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ocr_response_id: Mapped[int | None] = mapped_column(
        ForeignKey("ocr_responses.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
