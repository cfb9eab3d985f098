"""Shared pagination query parameters."""

from fastapi import Query

from cardscan.schemas.common import MAX_ROW_OFFSET

MAX_PAGE_SIZE = 100
MAX_PAGE = MAX_ROW_OFFSET // MAX_PAGE_SIZE + 1

PageParam = Query(default=1, ge=1, le=MAX_PAGE)
LimitParam = Query(default=10, ge=1, le=MAX_PAGE_SIZE)
