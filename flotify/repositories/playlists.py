"""
Flotify - Playlist Repository

Playlists are always addressed through their owner, so a user can only
read or change their own playlists.
"""

from typing import List, Sequence, Tuple
from uuid import UUID

from sqlmodel import Session as DBSession, select

from flotify.errors import NonExistPlaylistError, NonExistTrackError
from flotify.models import Playlist, PlaylistTrackLink, Track


class PlaylistRepository:
    def __init__(self, db: DBSession):
        self.db = db
    
    def _track_ids(self, playlist_id: UUID) -> List[UUID]:
        statement = select(PlaylistTrackLink.track_id).where(
            PlaylistTrackLink.playlist_id == playlist_id
        )
        return list(self.db.exec(statement).all())
    
    def create(self, user_id: UUID, name: str) -> Playlist:
        playlist = Playlist(name=name, user_id=user_id)
        self.db.add(playlist)
        self.db.commit()
        self.db.refresh(playlist)
        return playlist
    
    def get(self, user_id: UUID, playlist_id: UUID) -> Tuple[Playlist, List[UUID]]:
        playlist = self.db.get(Playlist, playlist_id)
        if playlist is None or playlist.user_id != user_id:
            raise NonExistPlaylistError()
        return playlist, self._track_ids(playlist_id)
    
    def list_for_user(self, user_id: UUID) -> List[Tuple[Playlist, List[UUID]]]:
        statement = select(Playlist).where(Playlist.user_id == user_id).order_by(Playlist.name)
        return [(p, self._track_ids(p.id)) for p in self.db.exec(statement).all()]
    
    def add_tracks(
        self, user_id: UUID, playlist_id: UUID, track_ids: Sequence[UUID]
    ) -> Tuple[Playlist, List[UUID]]:
        """
        Add tracks to a playlist; tracks already present are skipped.
        
        Raises:
            NonExistPlaylistError: Unknown playlist or owned by someone else
            NonExistTrackError: Any track ID is unknown
        """
        playlist, current = self.get(user_id, playlist_id)
        
        wanted = [t for t in dict.fromkeys(track_ids) if t not in current]
        if wanted:
            found = self.db.exec(select(Track.id).where(Track.id.in_(wanted))).all()
            if len(set(found)) != len(wanted):
                raise NonExistTrackError()
            for track_id in wanted:
                self.db.add(PlaylistTrackLink(playlist_id=playlist_id, track_id=track_id))
            self.db.commit()
        
        return self.get(user_id, playlist_id)
    
    def remove_tracks(
        self, user_id: UUID, playlist_id: UUID, track_ids: Sequence[UUID]
    ) -> Tuple[Playlist, List[UUID]]:
        self.get(user_id, playlist_id)
        
        links = self.db.exec(
            select(PlaylistTrackLink).where(
                PlaylistTrackLink.playlist_id == playlist_id,
                PlaylistTrackLink.track_id.in_(list(track_ids)),
            )
        ).all()
        for link in links:
            self.db.delete(link)
        self.db.commit()
        
        return self.get(user_id, playlist_id)
    
    def delete(self, user_id: UUID, playlist_id: UUID) -> None:
        playlist, _ = self.get(user_id, playlist_id)
        for link in self.db.exec(
            select(PlaylistTrackLink).where(PlaylistTrackLink.playlist_id == playlist_id)
        ).all():
            self.db.delete(link)
        self.db.flush()
        self.db.delete(playlist)
        self.db.commit()
