"""
Flotify - Music catalog REST API (artists, tracks, users, playlists)
with JWT session authentication.
"""

__version__ = "0.1.0"
