from flotify.routes.artists import router as artists_router
from flotify.routes.tracks import router as tracks_router
from flotify.routes.users import router as users_router

__all__ = ["artists_router", "tracks_router", "users_router"]
