"""
Flotify - Artist Repository
"""

from typing import List
from uuid import UUID

from sqlmodel import Session as DBSession, select

from flotify.errors import NonExistArtistError
from flotify.models import Artist, Track, TrackArtistLink, UserArtistLink
from flotify.repositories.filter import Filter


SORTABLE_FIELDS = ("name", "description")


class ArtistRepository:
    def __init__(self, db: DBSession):
        self.db = db
    
    def create(self, name: str, description: str = "") -> Artist:
        artist = Artist(name=name, description=description)
        self.db.add(artist)
        self.db.commit()
        self.db.refresh(artist)
        return artist
    
    def get(self, artist_id: UUID) -> Artist:
        artist = self.db.get(Artist, artist_id)
        if artist is None:
            raise NonExistArtistError()
        return artist
    
    def search(self, filter: Filter) -> List[Artist]:
        statement = filter.apply(select(Artist), Artist, SORTABLE_FIELDS)
        return list(self.db.exec(statement).all())
    
    def update(self, artist_id: UUID, name: str, description: str) -> Artist:
        artist = self.get(artist_id)
        artist.name = name
        artist.description = description
        self.db.add(artist)
        self.db.commit()
        self.db.refresh(artist)
        return artist
    
    def delete(self, artist_id: UUID) -> None:
        artist = self.get(artist_id)
        
        # SQLite does not enforce ON DELETE CASCADE without a pragma
        for link_model in (TrackArtistLink, UserArtistLink):
            links = self.db.exec(select(link_model).where(link_model.artist_id == artist_id))
            for link in links.all():
                self.db.delete(link)
        
        self.db.delete(artist)
        self.db.commit()
    
    def tracks_of(self, artist_id: UUID) -> List[Track]:
        """Tracks the artist appears on, ordered by name."""
        self.get(artist_id)
        statement = (
            select(Track)
            .join(TrackArtistLink, TrackArtistLink.track_id == Track.id)
            .where(TrackArtistLink.artist_id == artist_id)
            .order_by(Track.name)
        )
        return list(self.db.exec(statement).all())
