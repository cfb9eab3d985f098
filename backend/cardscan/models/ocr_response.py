"""Extraction record ORM model."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardscan.models.base import Base, CreatedAtMixin, IdMixin


class OcrResponse(Base, IdMixin, CreatedAtMixin):
    """Raw text extracted from one uploaded image. Never updated in place."""

    __tablename__ = "ocr_responses"

    user_id: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    extracted_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    original_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    image_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    processing_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_demo: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
