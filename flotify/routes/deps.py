"""
Flotify - Shared Route Dependencies
"""

from typing import Generator, Optional

from fastapi import Query, Request
from sqlmodel import Session as DBSession

from flotify.database import session_scope
from flotify.repositories.filter import Filter


def get_db(request: Request) -> Generator[DBSession, None, None]:
    """Per-request database session from app state."""
    yield from session_scope(request.app.state.db_session_factory)


def get_filter(
    name: Optional[str] = Query(None, description="Name to search for"),
    sort: Optional[str] = Query(None, description="Comma separated fields, '-' prefix for descending"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Filter:
    sort_by = [s.strip() for s in sort.split(",") if s.strip()] if sort else []
    return Filter(name=name, page=page, limit=limit, sort_by=sort_by)
