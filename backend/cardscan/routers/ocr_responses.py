"""Stored extraction record routes."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity, get_caller_identity
from cardscan.db.dependencies import get_db
from cardscan.errors import NotFoundError
from cardscan.routers.pagination import LimitParam, PageParam
from cardscan.schemas.common import DeleteResult, Page
from cardscan.schemas.ocr_response import OcrResponseListItem, OcrResponseRead, OcrStats
from cardscan.services.ocr_responses import (
    delete_ocr_response,
    get_ocr_response,
    get_ocr_stats,
    list_ocr_responses,
    search_ocr_responses,
)

router = APIRouter(prefix="/ocr-responses")


@router.get("", response_model=Page[OcrResponseListItem])
def get_ocr_responses(
    page: int = PageParam,
    limit: int = LimitParam,
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> Page[OcrResponseListItem]:
    """List the caller's records, newest first."""

    return list_ocr_responses(db, caller, page=page, limit=limit)


@router.get("/search", response_model=Page[OcrResponseListItem])
def search_responses(
    q: str = Query(default=""),
    page: int = PageParam,
    limit: int = LimitParam,
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> Page[OcrResponseListItem]:
    """Case-insensitive substring search over extracted text."""

    return search_ocr_responses(db, caller, q, page=page, limit=limit)


@router.get("/stats", response_model=OcrStats)
def get_stats(
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> OcrStats:
    return get_ocr_stats(db, caller)


@router.get("/{response_id}", response_model=OcrResponseRead)
def get_response(
    response_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> OcrResponseRead:
    return OcrResponseRead.model_validate(get_ocr_response(db, response_id, caller))


@router.delete("/{response_id}", response_model=DeleteResult)
def remove_response(
    response_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> DeleteResult:
    """Delete one of the caller's records."""

    if not delete_ocr_response(db, response_id, caller):
        raise NotFoundError("OCR response not found or could not be deleted")
    return DeleteResult(id=response_id, deleted=True)
