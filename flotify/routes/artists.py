"""
Flotify - Artist Routes

- POST   /artists              - Create an artist
- GET    /artists              - Search artists (name, sort, page, limit)
- PUT    /artists              - Update an artist
- GET    /artists/{id}         - Get an artist
- GET    /artists/{id}/tracks  - Tracks of an artist
- DELETE /artists/{id}         - Delete an artist
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session as DBSession

from flotify.repositories import ArtistRepository, Filter, TrackRepository
from flotify.routes.deps import get_db, get_filter
from flotify.schemas import (
    ArtistCreate,
    ArtistListResponse,
    ArtistResponse,
    ArtistUpdate,
    ErrorResponse,
    MessageResponse,
    TrackListResponse,
    TrackResponse,
)


router = APIRouter(prefix="/artists", tags=["artists"])


@router.post("", response_model=ArtistResponse, summary="Create an artist")
def create_artist(body: ArtistCreate, db: DBSession = Depends(get_db)):
    artist = ArtistRepository(db).create(body.name, body.description)
    return ArtistResponse.model_validate(artist)


@router.get("", response_model=ArtistListResponse, summary="Search artists")
def search_artists(
    filter: Filter = Depends(get_filter),
    db: DBSession = Depends(get_db),
):
    artists = ArtistRepository(db).search(filter)
    return ArtistListResponse(artists=[ArtistResponse.model_validate(a) for a in artists])


@router.put(
    "",
    response_model=ArtistResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={404: {"model": ErrorResponse}},
    summary="Update an artist",
)
def update_artist(body: ArtistUpdate, db: DBSession = Depends(get_db)):
    artist = ArtistRepository(db).update(body.id, body.name, body.description)
    return ArtistResponse.model_validate(artist)


@router.get(
    "/{id}",
    response_model=ArtistResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get an artist",
)
def get_artist(id: UUID, db: DBSession = Depends(get_db)):
    return ArtistResponse.model_validate(ArtistRepository(db).get(id))


@router.get(
    "/{id}/tracks",
    response_model=TrackListResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get tracks of an artist",
)
def get_artist_tracks(id: UUID, db: DBSession = Depends(get_db)):
    tracks = ArtistRepository(db).tracks_of(id)
    artist_ids = TrackRepository(db).artist_ids_of([t.id for t in tracks])
    return TrackListResponse(tracks=[
        TrackResponse(id=t.id, name=t.name, length=t.length, artist_ids=artist_ids[t.id])
        for t in tracks
    ])


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete an artist",
)
def delete_artist(id: UUID, db: DBSession = Depends(get_db)):
    ArtistRepository(db).delete(id)
    return MessageResponse(message=f"delete artist with id {id} successfully")
