"""Contact management routes."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from cardscan.auth.identity import CallerIdentity, get_caller_identity
from cardscan.db.dependencies import get_db
from cardscan.errors import NotFoundError
from cardscan.routers.pagination import LimitParam, PageParam
from cardscan.schemas.common import DeleteResult, Page
from cardscan.schemas.contact import ContactRead, ContactWrite
from cardscan.services.contacts import (
    create_contact,
    delete_contact,
    get_contact,
    list_contacts,
    to_contact_read,
    update_contact,
)

router = APIRouter(prefix="/contacts")


@router.get("", response_model=Page[ContactRead])
def get_contacts(
    page: int = PageParam,
    limit: int = LimitParam,
    search: str | None = Query(default=None),
    status: str | None = Query(default=None),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> Page[ContactRead]:
    """List contacts with optional text search and status filter."""

    return list_contacts(db, caller, page=page, limit=limit, search=search, status=status)


@router.post("", response_model=ContactRead, status_code=201)
def post_contact(
    payload: ContactWrite,
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> ContactRead:
    return to_contact_read(create_contact(db, caller, payload))


@router.get("/{contact_id}", response_model=ContactRead)
def get_one_contact(
    contact_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> ContactRead:
    return to_contact_read(get_contact(db, contact_id, caller))


@router.put("/{contact_id}", response_model=ContactRead)
def put_contact(
    payload: ContactWrite,
    contact_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> ContactRead:
    """Replace every mutable field of one contact."""

    return to_contact_read(update_contact(db, contact_id, caller, payload))


@router.delete("/{contact_id}", response_model=DeleteResult)
def remove_contact(
    contact_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> DeleteResult:
    if not delete_contact(db, contact_id, caller):
        raise NotFoundError("Contact not found")
    return DeleteResult(id=contact_id, deleted=True)
