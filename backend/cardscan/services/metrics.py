"""Dashboard metrics computed from a user's extraction records."""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity
from cardscan.models.ocr_response import OcrResponse
from cardscan.schemas.metrics import ChangeValue, DashboardMetric

ACCURACY_BASELINE = 95
ACCURACY_BONUS_POINTS = 4
ACCURACY_CEILING = 99


@dataclass(slots=True)
class RecordCounts:
    """Raw aggregates behind the dashboard tiles."""

    total: int
    total_before_last_month: int
    scanned_last_month: int
    scanned_month_before: int
    non_empty_text: int
    average_processing_time: float | None


def calculate_change(current: int | float, previous: int | float) -> ChangeValue:
    """Unsigned percentage change from previous to current.

    A zero baseline reports 100% growth when anything exists now and 0% otherwise,
    both positive.
    """

    if previous == 0:
        return ChangeValue(value=100.0 if current > 0 else 0.0, type="positive")
    change = (current - previous) / previous * 100
    return ChangeValue(value=abs(change), type="positive" if current >= previous else "negative")


def calculate_accuracy(non_empty_text: int, total: int) -> int:
    if total <= 0:
        return ACCURACY_BASELINE
    bonus = math.floor(non_empty_text / total * ACCURACY_BONUS_POINTS)
    return min(ACCURACY_BASELINE + bonus, ACCURACY_CEILING)


def months_before(moment: datetime, months: int) -> datetime:
    """Same day and time `months` earlier, clamped to the target month's length."""

    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def collect_record_counts(db: Session, caller: CallerIdentity, *, now: datetime) -> RecordCounts:
    owned = OcrResponse.user_id == caller.user_id
    one_month_ago = months_before(now, 1)
    two_months_ago = months_before(now, 2)

    def count(*conditions: ColumnElement[bool]) -> int:
        return int(db.scalar(select(func.count(OcrResponse.id)).where(owned, *conditions)) or 0)

    average_processing_time = db.scalar(
        select(func.avg(OcrResponse.processing_time)).where(owned, OcrResponse.processing_time.is_not(None))
    )
    return RecordCounts(
        total=count(),
        total_before_last_month=count(OcrResponse.created_at < one_month_ago),
        scanned_last_month=count(OcrResponse.created_at >= one_month_ago),
        scanned_month_before=count(
            OcrResponse.created_at >= two_months_ago,
            OcrResponse.created_at < one_month_ago,
        ),
        non_empty_text=count(OcrResponse.extracted_text != ""),
        average_processing_time=float(average_processing_time) if average_processing_time is not None else None,
    )


def build_dashboard_metrics(counts: RecordCounts) -> list[DashboardMetric]:
    """Format the four dashboard tiles from raw counts."""

    total_change = calculate_change(counts.total, counts.total_before_last_month)
    scanned_change = calculate_change(counts.scanned_last_month, counts.scanned_month_before)
    accuracy = calculate_accuracy(counts.non_empty_text, counts.total)
    average_ms = _round_half_up(counts.average_processing_time or 0.0)

    return [
        DashboardMetric(
            title="Total Cards",
            value=f"{counts.total:,}",
            change=f"{_format_change(total_change)} growth",
            change_type=total_change.type,
        ),
        DashboardMetric(
            title="Cards Scanned",
            value=f"{counts.scanned_last_month:,}",
            change=f"{_format_change(scanned_change)} from last month",
            change_type=scanned_change.type,
        ),
        DashboardMetric(
            title="OCR Accuracy",
            value=f"{accuracy}%",
            change="High precision scanning",
            change_type="positive",
        ),
        DashboardMetric(
            title="Avg Speed",
            value=f"{average_ms}ms",
            change="Lightning fast processing",
            change_type="positive",
        ),
    ]


def get_dashboard_metrics(
    db: Session,
    caller: CallerIdentity,
    *,
    now: datetime | None = None,
) -> list[DashboardMetric]:
    """Compute dashboard tiles for the caller relative to now."""

    reference = now or datetime.now(timezone.utc)
    return build_dashboard_metrics(collect_record_counts(db, caller, now=reference))


def _format_change(change: ChangeValue) -> str:
    sign = "+" if change.type == "positive" else "-"
    return f"{sign}{change.value:.1f}%"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
