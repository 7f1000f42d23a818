"""
Flotify - Track Repository

Tracks and their artist links. A track's artists are returned as a
list of artist IDs alongside the track row.
"""

from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from sqlmodel import Session as DBSession, select

from flotify.errors import NonExistArtistError, NonExistTrackError
from flotify.models import Artist, PlaylistTrackLink, Track, TrackArtistLink
from flotify.repositories.filter import Filter


SORTABLE_FIELDS = ("name", "length")


class TrackRepository:
    def __init__(self, db: DBSession):
        self.db = db
    
    def _check_artists(self, artist_ids: Sequence[UUID]) -> None:
        unique_ids = set(artist_ids)
        if not unique_ids:
            return
        found = self.db.exec(select(Artist.id).where(Artist.id.in_(unique_ids))).all()
        if len(set(found)) != len(unique_ids):
            raise NonExistArtistError()
    
    def _set_artists(self, track_id: UUID, artist_ids: Sequence[UUID]) -> None:
        existing = self.db.exec(
            select(TrackArtistLink).where(TrackArtistLink.track_id == track_id)
        ).all()
        for link in existing:
            self.db.delete(link)
        self.db.flush()
        for artist_id in dict.fromkeys(artist_ids):
            self.db.add(TrackArtistLink(track_id=track_id, artist_id=artist_id))
    
    def artist_ids_of(self, track_ids: Sequence[UUID]) -> Dict[UUID, List[UUID]]:
        result: Dict[UUID, List[UUID]] = {track_id: [] for track_id in track_ids}
        if not result:
            return result
        links = self.db.exec(
            select(TrackArtistLink).where(TrackArtistLink.track_id.in_(list(result)))
        ).all()
        for link in links:
            result[link.track_id].append(link.artist_id)
        return result
    
    def create(self, name: str, length: int, artist_ids: Sequence[UUID]) -> Tuple[Track, List[UUID]]:
        """
        Create a track credited to the given artists.
        
        Raises:
            NonExistArtistError: Any artist ID is unknown
        """
        self._check_artists(artist_ids)
        
        track = Track(name=name, length=length)
        self.db.add(track)
        self.db.flush()
        self._set_artists(track.id, artist_ids)
        self.db.commit()
        self.db.refresh(track)
        return track, list(dict.fromkeys(artist_ids))
    
    def get(self, track_id: UUID) -> Track:
        track = self.db.get(Track, track_id)
        if track is None:
            raise NonExistTrackError()
        return track
    
    def get_with_artists(self, track_id: UUID) -> Tuple[Track, List[UUID]]:
        track = self.get(track_id)
        return track, self.artist_ids_of([track_id])[track_id]
    
    def search(self, filter: Filter) -> List[Tuple[Track, List[UUID]]]:
        statement = filter.apply(select(Track), Track, SORTABLE_FIELDS)
        tracks = list(self.db.exec(statement).all())
        artists = self.artist_ids_of([t.id for t in tracks])
        return [(t, artists[t.id]) for t in tracks]
    
    def update(
        self,
        track_id: UUID,
        name: str,
        length: int,
        artist_ids: Sequence[UUID] = None,
    ) -> Tuple[Track, List[UUID]]:
        track = self.get(track_id)
        if artist_ids is not None:
            self._check_artists(artist_ids)
            self._set_artists(track_id, artist_ids)
        
        track.name = name
        track.length = length
        self.db.add(track)
        self.db.commit()
        self.db.refresh(track)
        return track, self.artist_ids_of([track_id])[track_id]
    
    def delete(self, track_id: UUID) -> None:
        track = self.get(track_id)
        for link_model in (TrackArtistLink, PlaylistTrackLink):
            links = self.db.exec(select(link_model).where(link_model.track_id == track_id))
            for link in links.all():
                self.db.delete(link)
        self.db.delete(track)
        self.db.commit()
