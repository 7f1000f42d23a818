"""
Flotify - Track Routes

- POST   /tracks        - Create a track
- GET    /tracks        - Search tracks (name, sort, page, limit)
- PUT    /tracks        - Update a track
- GET    /tracks/{id}   - Get a track with its artist IDs
- DELETE /tracks/{id}   - Delete a track
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session as DBSession

from flotify.models import Track
from flotify.repositories import Filter, TrackRepository
from flotify.routes.deps import get_db, get_filter
from flotify.schemas import (
    ErrorResponse,
    MessageResponse,
    TrackCreate,
    TrackListResponse,
    TrackResponse,
    TrackUpdate,
)


router = APIRouter(prefix="/tracks", tags=["tracks"])


def _to_response(track: Track, artist_ids: List[UUID]) -> TrackResponse:
    return TrackResponse(id=track.id, name=track.name, length=track.length, artist_ids=artist_ids)


@router.post(
    "",
    response_model=TrackResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Create a track",
)
def create_track(body: TrackCreate, db: DBSession = Depends(get_db)):
    return _to_response(*TrackRepository(db).create(body.name, body.length, body.artist_ids))


@router.get("", response_model=TrackListResponse, summary="Search tracks")
def search_tracks(
    filter: Filter = Depends(get_filter),
    db: DBSession = Depends(get_db),
):
    return TrackListResponse(tracks=[_to_response(*row) for row in TrackRepository(db).search(filter)])


@router.put(
    "",
    response_model=TrackResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={404: {"model": ErrorResponse}},
    summary="Update a track",
)
def update_track(body: TrackUpdate, db: DBSession = Depends(get_db)):
    return _to_response(*TrackRepository(db).update(body.id, body.name, body.length, body.artist_ids))


@router.get(
    "/{id}",
    response_model=TrackResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a track",
)
def get_track(id: UUID, db: DBSession = Depends(get_db)):
    return _to_response(*TrackRepository(db).get_with_artists(id))


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a track",
)
def delete_track(id: UUID, db: DBSession = Depends(get_db)):
    TrackRepository(db).delete(id)
    return MessageResponse(message=f"delete track with id {id} successfully")
