"""Heuristic business-card field parser over OCR text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone

PHONE_SHAPE_PATTERN = re.compile(r"[0-9+\-()\s]{10,}")
AVATAR_MAX_LENGTH = 2


@dataclass(frozen=True, slots=True)
class CardFields:
    """Contact fields recovered from one block of extracted text."""

    name: str = ""
    title: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""

    @property
    def avatar(self) -> str:
        return build_avatar(self.name)


def looks_like_phone(line: str) -> bool:
    """Return True when a line contains a phone-shaped run of characters."""

    return PHONE_SHAPE_PATTERN.search(line) is not None


def parse_card_text(text: str | None) -> CardFields:
    """Assign name/title/company/email/phone from non-blank lines.

    Branches are tested in a fixed order (email, phone, name, title, company)
    and at most one fires per line. Lines are split on "\n" only; position
    refers to the index among non-blank lines. Unresolved fields are empty strings.
    """

    name = title = company = email = phone = ""
    lines = [line.strip() for line in (text or "").split("\n") if line.strip()]

    for position, line in enumerate(lines):
        if "@" in line and not email:
            email = line
        elif looks_like_phone(line) and ("+" in line or "(" in line or len(line) > 10) and not phone:
            phone = line
        elif position == 0 and not name:
            name = line
        elif position == 1 and not title:
            title = line
        elif position == 2 and not company and "@" not in line and not looks_like_phone(line):
            company = line

    return CardFields(name=name, title=title, company=company, email=email, phone=phone)


def build_avatar(name: str | None) -> str:
    """Uppercase initials of each whitespace-separated token, at most two."""

    initials = "".join(token[0] for token in (name or "").split())
    return initials.upper()[:AVATAR_MAX_LENGTH]


def format_time_ago(moment: datetime, *, now: datetime | None = None) -> str:
    """Render a timestamp relative to now the way the dashboard shows it."""

    current = now or datetime.now(timezone.utc)
    moment = _as_utc(moment)
    current = _as_utc(current)
    elapsed_seconds = max((current - moment).total_seconds(), 0.0)

    minutes = int(elapsed_seconds // 60)
    hours = int(elapsed_seconds // 3600)
    days = int(elapsed_seconds // 86400)
    if minutes < 60:
        return f"{minutes} {'minute' if minutes == 1 else 'minutes'} ago"
    if hours < 24:
        return f"{hours} {'hour' if hours == 1 else 'hours'} ago"
    if days < 30:
        return f"{days} {'day' if days == 1 else 'days'} ago"
    return f"{moment.month}/{moment.day}/{moment.year}"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
