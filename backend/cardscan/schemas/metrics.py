"""Dashboard metric schemas."""

from typing import Literal

from pydantic import BaseModel

from cardscan.schemas.common import CamelModel

ChangeType = Literal["positive", "negative"]


class ChangeValue(BaseModel):
    """Unsigned percentage change and its direction."""

    value: float
    type: ChangeType


class DashboardMetric(CamelModel):
    """One dashboard tile."""

    title: str
    value: str
    change: str
    change_type: ChangeType


class DashboardMetricsResponse(CamelModel):
    metrics: list[DashboardMetric]
