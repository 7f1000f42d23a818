"""
Flotify - User Route Tests

Tests for:
- Registration
- Profile view and changes
- Password change
- Account deletion
- Followed artists
- Playlists

Run with: pytest tests/test_users.py -v
"""

from uuid import UUID, uuid4

import pytest
from sqlmodel import Session

from flotify.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidTokenError,
    NonExistArtistError,
    NonExistPlaylistError,
    NonExistTrackError,
    OldPasswordMismatchError,
    PasswordLengthError,
)
from flotify.models import Artist, RefreshToken, Track, User
from tests.conftest import auth_headers, login_user


@pytest.fixture
def user_headers(client, test_user) -> dict:
    tokens = login_user(client, "x@x.com", "correctpass")
    return auth_headers(tokens["access token"])


@pytest.fixture
def artist(db_session) -> Artist:
    artist = Artist(name="Daft Punk", description="French duo")
    db_session.add(artist)
    db_session.commit()
    db_session.refresh(artist)
    return artist


@pytest.fixture
def tracks(db_session):
    rows = [Track(name="One More Time", length=320), Track(name="Aerodynamic", length=212)]
    db_session.add_all(rows)
    db_session.commit()
    for row in rows:
        db_session.refresh(row)
    return rows


# =============================================================================
# REGISTRATION TESTS
# =============================================================================

class TestRegister:
    """Tests for POST /users/register."""
    
    def test_register_success(self, client):
        response = client.post(
            "/users/register",
            json={"username": "newbie", "email": "New@Example.com", "password": "newbiepass"},
        )
        
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "newbie"
        assert data["email"] == "new@example.com"
        assert "password" not in data and "password_hash" not in data
    
    def test_registered_user_can_login(self, client):
        client.post(
            "/users/register",
            json={"username": "newbie", "email": "new@example.com", "password": "newbiepass"},
        )
        
        assert login_user(client, "new@example.com", "newbiepass") is not None
    
    def test_register_stores_bcrypt_hash(self, client, test_engine):
        response = client.post(
            "/users/register",
            json={"username": "newbie", "email": "new@example.com", "password": "newbiepass"},
        )
        
        with Session(test_engine) as db:
            user = db.get(User, UUID(response.json()["id"]))
            assert user.password_hash.startswith("$2b$08$")
    
    def test_register_duplicate_username(self, client, test_user):
        response = client.post(
            "/users/register",
            json={"username": "xuser", "email": "other@x.com", "password": "password123"},
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == DuplicateUsernameError.message
    
    def test_register_duplicate_email(self, client, test_user):
        response = client.post(
            "/users/register",
            json={"username": "another", "email": "X@x.com", "password": "password123"},
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == DuplicateEmailError.message
    
    def test_register_short_password(self, client):
        response = client.post(
            "/users/register",
            json={"username": "newbie", "email": "new@example.com", "password": "short"},
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == PasswordLengthError.message
    
    def test_register_invalid_email(self, client):
        response = client.post(
            "/users/register",
            json={"username": "newbie", "email": "not-an-email", "password": "password123"},
        )
        
        assert response.status_code == 400


# =============================================================================
# PROFILE TESTS
# =============================================================================

class TestProfile:
    """Tests for viewing and modifying a user."""
    
    def test_view_user(self, client, test_user, user_headers):
        response = client.get(f"/users/{test_user.id}", headers=user_headers)
        
        assert response.status_code == 200
        assert response.json()["email"] == "x@x.com"
    
    def test_modify_username(self, client, test_user, user_headers):
        response = client.put(
            f"/users/{test_user.id}",
            json={"username": "renamed"},
            headers=user_headers,
        )
        
        assert response.status_code == 202
        assert response.json()["username"] == "renamed"
    
    def test_modify_username_taken(self, client, test_user, other_user, user_headers):
        response = client.put(
            f"/users/{test_user.id}",
            json={"username": "yuser"},
            headers=user_headers,
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == DuplicateUsernameError.message
    
    def test_modify_other_user_forbidden(self, client, test_user, other_user, user_headers):
        response = client.put(
            f"/users/{other_user.id}",
            json={"username": "hijacked"},
            headers=user_headers,
        )
        
        assert response.status_code == 401


# =============================================================================
# PASSWORD CHANGE TESTS
# =============================================================================

class TestChangePassword:
    """Tests for PUT /users/{id}/password."""
    
    def test_change_password(self, client, test_user, user_headers):
        response = client.put(
            f"/users/{test_user.id}/password",
            json={"old_password": "correctpass", "new_password": "brandnewpass"},
            headers=user_headers,
        )
        
        assert response.status_code == 200
        assert login_user(client, "x@x.com", "correctpass") is None
        assert login_user(client, "x@x.com", "brandnewpass") is not None
    
    def test_change_password_wrong_old(self, client, test_user, user_headers):
        response = client.put(
            f"/users/{test_user.id}/password",
            json={"old_password": "wrongpass", "new_password": "brandnewpass"},
            headers=user_headers,
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == OldPasswordMismatchError.message
    
    def test_change_password_new_too_short(self, client, test_user, user_headers):
        response = client.put(
            f"/users/{test_user.id}/password",
            json={"old_password": "correctpass", "new_password": "short"},
            headers=user_headers,
        )
        
        assert response.status_code == 400
        assert response.json()["message"] == PasswordLengthError.message
    
    def test_change_password_revokes_refresh_token(self, client, test_user):
        tokens = login_user(client, "x@x.com", "correctpass")
        
        client.put(
            f"/users/{test_user.id}/password",
            json={"old_password": "correctpass", "new_password": "brandnewpass"},
            headers=auth_headers(tokens["access token"]),
        )
        response = client.post(
            f"/users/{test_user.id}/refresh",
            json={"refresh_token": tokens["refresh token"]},
        )
        
        assert response.status_code == 401
        assert response.json()["message"] == InvalidTokenError.message


# =============================================================================
# DELETE TESTS
# =============================================================================

class TestDeleteUser:
    """Tests for DELETE /users/{id}."""
    
    def test_delete_user(self, client, test_user, user_headers, test_engine):
        user_id = test_user.id
        
        response = client.delete(f"/users/{user_id}", headers=user_headers)
        
        assert response.status_code == 200
        with Session(test_engine) as db:
            assert db.get(User, user_id) is None
            assert db.get(RefreshToken, user_id) is None
    
    def test_deleted_user_cannot_login(self, client, test_user, user_headers):
        client.delete(f"/users/{test_user.id}", headers=user_headers)
        
        assert login_user(client, "x@x.com", "correctpass") is None
    
    def test_delete_requires_token(self, client, test_user):
        response = client.delete(f"/users/{test_user.id}")
        
        assert response.status_code == 401


# =============================================================================
# FOLLOWED ARTIST TESTS
# =============================================================================

class TestFollowArtists:
    """Tests for /users/{id}/artists."""
    
    def test_follow_and_list(self, client, test_user, user_headers, artist):
        response = client.post(
            f"/users/{test_user.id}/artists",
            json={"id": str(artist.id)},
            headers=user_headers,
        )
        assert response.status_code == 200
        
        response = client.get(f"/users/{test_user.id}/artists", headers=user_headers)
        
        assert response.status_code == 200
        assert [a["name"] for a in response.json()["artists"]] == ["Daft Punk"]
    
    def test_follow_twice_is_noop(self, client, test_user, user_headers, artist):
        for _ in range(2):
            client.post(
                f"/users/{test_user.id}/artists",
                json={"id": str(artist.id)},
                headers=user_headers,
            )
        
        response = client.get(f"/users/{test_user.id}/artists", headers=user_headers)
        
        assert len(response.json()["artists"]) == 1
    
    def test_follow_unknown_artist(self, client, test_user, user_headers):
        response = client.post(
            f"/users/{test_user.id}/artists",
            json={"id": str(uuid4())},
            headers=user_headers,
        )
        
        assert response.status_code == 404
        assert response.json()["message"] == NonExistArtistError.message


# =============================================================================
# PLAYLIST TESTS
# =============================================================================

class TestPlaylists:
    """Tests for /users/{id}/playlists."""
    
    def _create(self, client, user, headers, name="Road Trip") -> dict:
        response = client.post(
            f"/users/{user.id}/playlists",
            json={"name": name},
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()
    
    def test_create_and_get(self, client, test_user, user_headers):
        playlist = self._create(client, test_user, user_headers)
        
        response = client.get(
            f"/users/{test_user.id}/playlists/{playlist['id']}",
            headers=user_headers,
        )
        
        assert response.status_code == 200
        assert response.json()["name"] == "Road Trip"
        assert response.json()["track_ids"] == []
    
    def test_list_playlists(self, client, test_user, user_headers):
        self._create(client, test_user, user_headers, "B side")
        self._create(client, test_user, user_headers, "A side")
        
        response = client.get(f"/users/{test_user.id}/playlists", headers=user_headers)
        
        assert [p["name"] for p in response.json()["playlists"]] == ["A side", "B side"]
    
    def test_add_and_remove_tracks(self, client, test_user, user_headers, tracks):
        playlist = self._create(client, test_user, user_headers)
        url = f"/users/{test_user.id}/playlists/{playlist['id']}/tracks"
        track_ids = [str(t.id) for t in tracks]
        
        added = client.post(url, json={"track_ids": track_ids}, headers=user_headers)
        assert added.status_code == 200
        assert sorted(added.json()["track_ids"]) == sorted(track_ids)
        
        removed = client.request(
            "DELETE", url, json={"track_ids": track_ids[:1]}, headers=user_headers
        )
        assert removed.status_code == 200
        assert removed.json()["track_ids"] == track_ids[1:]
    
    def test_add_unknown_track(self, client, test_user, user_headers):
        playlist = self._create(client, test_user, user_headers)
        
        response = client.post(
            f"/users/{test_user.id}/playlists/{playlist['id']}/tracks",
            json={"track_ids": [str(uuid4())]},
            headers=user_headers,
        )
        
        assert response.status_code == 404
        assert response.json()["message"] == NonExistTrackError.message
    
    def test_delete_playlist(self, client, test_user, user_headers):
        playlist = self._create(client, test_user, user_headers)
        url = f"/users/{test_user.id}/playlists/{playlist['id']}"
        
        assert client.delete(url, headers=user_headers).status_code == 200
        assert client.get(url, headers=user_headers).status_code == 404
    
    def test_other_users_playlist_not_visible(self, client, test_user, other_user, user_headers):
        playlist = self._create(client, test_user, user_headers)
        other_tokens = login_user(client, "y@y.com", "otherpass123")
        
        response = client.get(
            f"/users/{other_user.id}/playlists/{playlist['id']}",
            headers=auth_headers(other_tokens["access token"]),
        )
        
        assert response.status_code == 404
        assert response.json()["message"] == NonExistPlaylistError.message
