"""
Flotify - User Routes

Public:
- POST   /users/register                 - Create an account
- POST   /users/login                    - Exchange credentials for tokens
- POST   /users/{id}/refresh             - Exchange refresh token for access token

Protected (access token issued to {id}):
- GET    /users/{id}                     - View user information
- PUT    /users/{id}                     - Change username
- PUT    /users/{id}/password            - Change password
- DELETE /users/{id}                     - Delete account
- GET    /users/{id}/artists             - Followed artists
- POST   /users/{id}/artists             - Follow an artist
- GET    /users/{id}/playlists           - List playlists
- POST   /users/{id}/playlists           - Create a playlist
- GET    /users/{id}/playlists/{pid}     - Get a playlist
- DELETE /users/{id}/playlists/{pid}     - Delete a playlist
- POST   /users/{id}/playlists/{pid}/tracks   - Add tracks
- DELETE /users/{id}/playlists/{pid}/tracks   - Remove tracks
"""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, status
from sqlmodel import Session as DBSession

from flotify.auth.dependencies import AuthenticatedUser, authorize_owner, get_auth_manager
from flotify.auth.manager import AuthManager
from flotify.auth.password import password_length_ok
from flotify.errors import PasswordLengthError
from flotify.models import Playlist
from flotify.repositories import PlaylistRepository, UserRepository
from flotify.routes.deps import get_db
from flotify.schemas import (
    ArtistListResponse,
    ArtistResponse,
    ChangePasswordRequest,
    ErrorResponse,
    FollowArtistRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PlaylistCreate,
    PlaylistListResponse,
    PlaylistResponse,
    PlaylistTracksRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UpdateUserRequest,
    UserResponse,
)


router = APIRouter(prefix="/users", tags=["users"])

AUTH_RESPONSES = {401: {"model": ErrorResponse}}


def _user_repository(request: Request, db: DBSession) -> UserRepository:
    auth_manager: AuthManager = request.app.state.auth_manager
    return UserRepository(db, work_factor=auth_manager.config.bcrypt_work_factor)


def _playlist_response(playlist: Playlist, track_ids) -> PlaylistResponse:
    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        user_id=playlist.user_id,
        track_ids=track_ids,
    )


# =============================================================================
# PUBLIC
# =============================================================================

@router.post(
    "/register",
    response_model=UserResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Register a user",
)
def register(request: Request, body: RegisterRequest, db: DBSession = Depends(get_db)):
    if not password_length_ok(body.password):
        raise PasswordLengthError()
    
    user = _user_repository(request, db).create(body.username, body.email, body.password)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Login with email and password",
)
def login(
    credentials: LoginRequest,
    auth_manager: AuthManager = Depends(get_auth_manager),
):
    """
    Authenticate user with email and password.
    
    Returns:
        Access token (15 minutes) and refresh token (7 days)
        
    Raises:
        400: Malformed body or password length outside [8, 64]
        401: Email or password does not match
        500: Credential store failure
    """
    if not password_length_ok(credentials.password):
        raise PasswordLengthError()
    
    tokens = auth_manager.login(credentials.email, credentials.password)
    return LoginResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post(
    "/{id}/refresh",
    response_model=RefreshResponse,
    responses=AUTH_RESPONSES,
    summary="Get a new access token with the refresh token",
)
def refresh(
    id: UUID,
    body: RefreshRequest,
    auth_manager: AuthManager = Depends(get_auth_manager),
):
    """
    Only the refresh token from the user's most recent login is accepted.
    """
    access_token = auth_manager.refresh(id, body.refresh_token)
    return RefreshResponse(access_token=access_token)


# =============================================================================
# PROTECTED
# =============================================================================

@router.get(
    "/{id}",
    response_model=UserResponse,
    responses=AUTH_RESPONSES,
    summary="View user information",
)
def view_user(
    request: Request,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    return UserResponse.model_validate(_user_repository(request, db).get(user.user_id))


@router.put(
    "/{id}",
    response_model=UserResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={**AUTH_RESPONSES, 400: {"model": ErrorResponse}},
    summary="Modify user information",
)
def modify_user(
    request: Request,
    body: UpdateUserRequest,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    updated = _user_repository(request, db).update_username(user.user_id, body.username)
    return UserResponse.model_validate(updated)


@router.put(
    "/{id}/password",
    response_model=MessageResponse,
    responses={**AUTH_RESPONSES, 400: {"model": ErrorResponse}},
    summary="Change password",
)
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
    auth_manager: AuthManager = Depends(get_auth_manager),
):
    """
    Replace the password. The stored refresh token is dropped, so the
    next refresh requires a new login.
    """
    if not password_length_ok(body.new_password):
        raise PasswordLengthError()
    
    _user_repository(request, db).update_password(
        user.user_id, body.old_password, body.new_password
    )
    auth_manager.revoke_refresh_token(user.user_id)
    return MessageResponse(message="change password successfully")


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses=AUTH_RESPONSES,
    summary="Delete user",
)
def delete_user(
    request: Request,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    _user_repository(request, db).delete(user.user_id)
    return MessageResponse(message="delete successfully")


@router.get(
    "/{id}/artists",
    response_model=ArtistListResponse,
    responses=AUTH_RESPONSES,
    summary="Get followed artists",
)
def get_followed_artists(
    request: Request,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    artists = _user_repository(request, db).followed_artists(user.user_id)
    return ArtistListResponse(artists=[ArtistResponse.model_validate(a) for a in artists])


@router.post(
    "/{id}/artists",
    response_model=MessageResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Follow an artist",
)
def follow_artist(
    request: Request,
    body: FollowArtistRequest,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    _user_repository(request, db).follow_artist(user.user_id, body.id)
    return MessageResponse(message="follow artist successfully")


@router.get(
    "/{id}/playlists",
    response_model=PlaylistListResponse,
    responses=AUTH_RESPONSES,
    summary="List playlists",
)
def list_playlists(
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    rows = PlaylistRepository(db).list_for_user(user.user_id)
    return PlaylistListResponse(playlists=[_playlist_response(*row) for row in rows])


@router.post(
    "/{id}/playlists",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_RESPONSES,
    summary="Create a playlist",
)
def create_playlist(
    body: PlaylistCreate,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    playlist = PlaylistRepository(db).create(user.user_id, body.name)
    return _playlist_response(playlist, [])


@router.get(
    "/{id}/playlists/{playlist_id}",
    response_model=PlaylistResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Get a playlist",
)
def get_playlist(
    playlist_id: UUID,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    return _playlist_response(*PlaylistRepository(db).get(user.user_id, playlist_id))


@router.delete(
    "/{id}/playlists/{playlist_id}",
    response_model=MessageResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Delete a playlist",
)
def delete_playlist(
    playlist_id: UUID,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    PlaylistRepository(db).delete(user.user_id, playlist_id)
    return MessageResponse(message=f"delete playlist with id {playlist_id} successfully")


@router.post(
    "/{id}/playlists/{playlist_id}/tracks",
    response_model=PlaylistResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Add tracks to a playlist",
)
def add_playlist_tracks(
    playlist_id: UUID,
    body: PlaylistTracksRequest,
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    return _playlist_response(
        *PlaylistRepository(db).add_tracks(user.user_id, playlist_id, body.track_ids)
    )


@router.delete(
    "/{id}/playlists/{playlist_id}/tracks",
    response_model=PlaylistResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Remove tracks from a playlist",
)
def remove_playlist_tracks(
    playlist_id: UUID,
    body: PlaylistTracksRequest = Body(...),
    user: AuthenticatedUser = Depends(authorize_owner),
    db: DBSession = Depends(get_db),
):
    return _playlist_response(
        *PlaylistRepository(db).remove_tracks(user.user_id, playlist_id, body.track_ids)
    )
