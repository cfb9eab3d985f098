"""Extraction record request/response schemas."""

from datetime import datetime

from pydantic import ConfigDict, Field, computed_field

from cardscan.schemas.common import CamelModel

TEXT_PREVIEW_LENGTH = 100


class OcrResponseCreate(CamelModel):
    """Fields captured when an extraction completes."""

    extracted_text: str = ""
    original_name: str | None = None
    image_size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None
    processing_time: int | None = Field(default=None, ge=0)
    is_demo: bool = False


class OcrResponseRead(CamelModel):
    """Serialized extraction record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str | None
    extracted_text: str
    original_name: str | None
    image_size: int | None
    mime_type: str | None
    processing_time: int | None
    is_demo: bool
    created_at: datetime


class OcrResponseListItem(OcrResponseRead):
    """Record row with display helpers for list views."""

    @computed_field(alias="formattedDate")
    @property
    def formatted_date(self) -> str:
        return self.created_at.strftime("%b %d, %Y, %I:%M %p")

    @computed_field(alias="textPreview")
    @property
    def text_preview(self) -> str:
        if len(self.extracted_text) > TEXT_PREVIEW_LENGTH:
            return self.extracted_text[:TEXT_PREVIEW_LENGTH] + "..."
        return self.extracted_text


class OcrStats(CamelModel):
    """Aggregate statistics over one user's records."""

    total_responses: int
    total_text_length: int
    average_processing_time: float | None
    most_common_mime_type: str | None


class OcrExtractionResult(CamelModel):
    """Response of an upload-and-extract call."""

    extracted_text: str
    response_id: int
    processing_time: int
