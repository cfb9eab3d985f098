"""Contact CRUD and filtered listing.

Every query is filtered by the caller's user id. The caller identity is
expected to come from the authenticated session resolved at the HTTP boundary;
this layer does not re-authenticate it.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity
from cardscan.db.filters import LIKE_ESCAPE_CHAR, contains_pattern
from cardscan.errors import InputValidationError, NotFoundError, StoreError
from cardscan.models.contact import Contact
from cardscan.models.ocr_response import OcrResponse
from cardscan.parsing.card_parser import build_avatar, format_time_ago
from cardscan.schemas.common import Page, page_offset
from cardscan.schemas.contact import ContactRead, ContactWrite

logger = logging.getLogger(__name__)

_SEARCHABLE_COLUMNS = (Contact.name, Contact.company, Contact.email, Contact.title)


def create_contact(db: Session, caller: CallerIdentity, payload: ContactWrite) -> Contact:
    """Create a contact owned by the caller."""

    name = payload.name.strip()
    if not name:
        raise InputValidationError("Name is required")
    _ensure_linked_response_owned(db, caller, payload.ocr_response_id)

    contact = Contact(user_id=caller.user_id)
    _apply_fields(contact, payload, name=name)
    try:
        db.add(contact)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("contacts.create_failed user_id=%s", caller.user_id)
        raise StoreError("Failed to create contact") from exc
    db.refresh(contact)
    logger.info("contacts.created id=%s user_id=%s", contact.id, caller.user_id)
    return contact


def list_contacts(
    db: Session,
    caller: CallerIdentity,
    *,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    status: str | None = None,
) -> Page[ContactRead]:
    """Return one page of the caller's contacts, newest first.

    `search` matches any of name, company, email or title case-insensitively.
    `status` must match exactly.
    """

    offset = page_offset(page, limit)
    stmt = select(Contact).where(Contact.user_id == caller.user_id)
    term = (search or "").strip()
    if term:
        pattern = contains_pattern(term)
        stmt = stmt.where(or_(*(column.ilike(pattern, escape=LIKE_ESCAPE_CHAR) for column in _SEARCHABLE_COLUMNS)))
    status_filter = (status or "").strip()
    if status_filter:
        stmt = stmt.where(Contact.status == status_filter)

    total = int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
    contacts = db.scalars(
        stmt.order_by(Contact.created_at.desc(), Contact.id.desc())
        .limit(limit)
        .offset(offset)
    ).all()
    return Page[ContactRead].build(
        [to_contact_read(contact) for contact in contacts],
        total=total,
        page=page,
        limit=limit,
    )


def get_contact(db: Session, contact_id: int, caller: CallerIdentity) -> Contact:
    contact = db.scalar(select(Contact).where(Contact.id == contact_id, Contact.user_id == caller.user_id))
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def update_contact(db: Session, contact_id: int, caller: CallerIdentity, payload: ContactWrite) -> Contact:
    """Overwrite every mutable field of one contact. The owner never changes."""

    contact = get_contact(db, contact_id, caller)
    name = payload.name.strip()
    if not name:
        raise InputValidationError("Name is required")
    _ensure_linked_response_owned(db, caller, payload.ocr_response_id)

    _apply_fields(contact, payload, name=name)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("contacts.update_failed id=%s user_id=%s", contact_id, caller.user_id)
        raise StoreError("Failed to update contact") from exc
    db.refresh(contact)
    logger.info("contacts.updated id=%s user_id=%s", contact_id, caller.user_id)
    return contact


def delete_contact(db: Session, contact_id: int, caller: CallerIdentity) -> bool:
    contact = db.scalar(select(Contact).where(Contact.id == contact_id, Contact.user_id == caller.user_id))
    if contact is None:
        return False
    try:
        db.delete(contact)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("contacts.delete_failed id=%s user_id=%s", contact_id, caller.user_id)
        raise StoreError("Failed to delete contact") from exc
    logger.info("contacts.deleted id=%s user_id=%s", contact_id, caller.user_id)
    return True


def to_contact_read(contact: Contact, *, now: datetime | None = None) -> ContactRead:
    """Serialize a contact with its avatar and last-contact label."""

    base = ContactRead.model_validate(contact)
    return base.model_copy(
        update={
            "avatar": build_avatar(contact.name),
            "last_contact_label": format_time_ago(contact.last_contact or contact.created_at, now=now),
        }
    )


def _apply_fields(contact: Contact, payload: ContactWrite, *, name: str) -> None:
    contact.name = name
    contact.title = payload.title
    contact.company = payload.company
    contact.email = payload.email
    contact.phone = payload.phone
    contact.address = payload.address
    contact.website = payload.website
    contact.notes = payload.notes
    contact.status = payload.status
    contact.tags = list(payload.tags)
    contact.last_contact = payload.last_contact
    contact.ocr_response_id = payload.ocr_response_id


def _ensure_linked_response_owned(db: Session, caller: CallerIdentity, response_id: int | None) -> None:
    if response_id is None:
        return
    owned = db.scalar(
        select(OcrResponse.id).where(OcrResponse.id == response_id, OcrResponse.user_id == caller.user_id)
    )
    if owned is None:
        raise NotFoundError("OCR response not found")
