from flotify.repositories.artists import ArtistRepository
from flotify.repositories.filter import Filter
from flotify.repositories.playlists import PlaylistRepository
from flotify.repositories.tracks import TrackRepository
from flotify.repositories.users import UserRepository

__all__ = [
    "ArtistRepository",
    "Filter",
    "PlaylistRepository",
    "TrackRepository",
    "UserRepository",
]
