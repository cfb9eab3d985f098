"""Dashboard metric and parsed-card routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity, get_caller_identity
from cardscan.db.dependencies import get_db
from cardscan.routers.pagination import LimitParam, PageParam
from cardscan.schemas.card import BusinessCardRead
from cardscan.schemas.common import Page
from cardscan.schemas.metrics import DashboardMetricsResponse
from cardscan.services.cards import list_business_cards
from cardscan.services.metrics import get_dashboard_metrics

router = APIRouter(prefix="/dashboard")


@router.get("/metrics", response_model=DashboardMetricsResponse)
def get_metrics(
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> DashboardMetricsResponse:
    """Return the four dashboard tiles for the caller."""

    return DashboardMetricsResponse(metrics=get_dashboard_metrics(db, caller))


@router.get("/cards", response_model=Page[BusinessCardRead])
def get_cards(
    page: int = PageParam,
    limit: int = LimitParam,
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> Page[BusinessCardRead]:
    """Return the caller's records parsed into business cards."""

    return list_business_cards(db, caller, page=page, limit=limit)
