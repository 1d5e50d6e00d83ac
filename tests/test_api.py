"""
End-to-end tests through the HTTP API.
"""

import asyncio
from datetime import timedelta
from pathlib import Path

import pytest

from vidshare.auth.jwt import IdentityClaim, TokenCodec
from vidshare.core.models import Video
from vidshare.errors import PersistenceError
from vidshare.storage import Collections


def register(client, first_name="Ana", username="ana", email="ana@x.com", password="password123"):
    return client.post(
        "/api/account/register",
        json={"first_name": first_name, "username": username, "email": email, "password": password},
    )


def login(client, who="ana", password="password123"):
    return client.post("/api/account/login", json={"emailOrUsername": who, "password": password})


@pytest.fixture
def ana(client):
    """Registered and logged in on `client`."""
    account_id = register(client).json()["data"]["id"]
    login(client)
    return account_id


@pytest.fixture
def bob(other_client):
    """Registered and logged in on `other_client`."""
    account_id = register(other_client, "Bob", "bobby", "bob@x.com").json()["data"]["id"]
    login(other_client, "bobby")
    return account_id


@pytest.fixture
def video(ana, metadata):
    """A video owned by Ana, saved straight into the store."""
    v = Video(owner_id=ana, title="Cats", description="Many cats", img_url="i", video_url="v")
    asyncio.run(metadata.save(Collections.VIDEOS, v.id, v.model_dump(mode="json")))
    return v


# =============================================================================
# Register / Login
# =============================================================================


class TestRegisterAndLogin:
    def test_register(self, client):
        response = register(client)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["username"] == "ana"
        assert body["data"]["role"] == "user"
        assert "password_hash" not in body["data"]
        assert "password" not in body["data"]

    def test_register_short_password(self, client):
        response = register(client, password="short")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_duplicate(self, client):
        register(client)
        response = register(client, first_name="Other", email="ana@x.com", username="other")
        assert response.status_code == 400
        assert response.json()["message"] == "Duplicate Key Found: Check Your Input"

    def test_login_success(self, client):
        account_id = register(client).json()["data"]["id"]
        response = login(client, "ana@x.com")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["access_token"]
        assert body["data"] == {"id": account_id, "first_name": "Ana"}

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"access_token={body['access_token']}")
        assert "HttpOnly" in cookie
        assert "Secure" not in cookie

    def test_login_with_mixed_case_email(self, client):
        register(client, email="Ana@Example.COM")
        response = login(client, "Ana@Example.COM")
        assert response.status_code == 200
        assert response.json()["data"]["first_name"] == "Ana"

    def test_login_secure_cookie_outside_development(self, client, settings):
        settings.environment = "production"
        register(client)
        cookie = login(client).headers["set-cookie"]
        assert "Secure" in cookie

    def test_login_wrong_password(self, client):
        register(client)
        response = login(client, password="wrong-password")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Your password is not correct."}
        assert "set-cookie" not in response.headers

    def test_login_unknown_user(self, client):
        response = login(client, "nobody")
        assert response.status_code == 404

    def test_login_missing_fields(self, client):
        response = client.post("/api/account/login", json={"password": "x"})
        assert response.json()["message"] == "Please provide a value."
        response = client.post("/api/account/login", json={"emailOrUsername": "ana"})
        assert response.json()["message"] == "Please provide a password."


# =============================================================================
# Access guard over HTTP
# =============================================================================


class TestGuard:
    def test_missing_cookie(self, client):
        response = client.put("/api/account/sub/acc_x")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_invalid_token(self, client):
        client.cookies.set("access_token", "aaa.bbb.ccc")
        response = client.put("/api/account/sub/acc_x")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_expired_token(self, client, settings):
        stale = TokenCodec(secret_key=settings.jwt_secret_key, ttl=timedelta(seconds=-10))
        client.cookies.set(
            "access_token", stale.issue(IdentityClaim(subject_id="acc_1", display_name="Ana"))
        )
        response = client.put("/api/account/sub/acc_x")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_logout_clears_cookie(self, client, ana):
        response = client.post("/api/account/logout")
        assert response.status_code == 200
        assert 'access_token=""' in response.headers["set-cookie"]


# =============================================================================
# Account self-service
# =============================================================================


class TestAccountUpdate:
    def test_update_own_account(self, client, ana):
        response = client.put(f"/api/account/{ana}", json={"last_name": "Silva"})
        assert response.status_code == 200
        assert response.json()["data"]["last_name"] == "Silva"

    def test_update_other_account_refused(self, client, other_client, ana, bob):
        response = other_client.put(f"/api/account/{ana}", json={"last_name": "Hacked"})

        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "You cannot update this channel."}
        assert client.get(f"/api/account/find/{ana}").json()["data"]["last_name"] == " "

    def test_update_cannot_touch_password_or_role(self, client, ana):
        client.put(f"/api/account/{ana}", json={"role": "admin", "password_hash": "x"})
        data = client.get(f"/api/account/find/{ana}").json()["data"]
        assert data["role"] == "user"
        assert login(client).status_code == 200

    def test_update_missing_account(self, client, ana):
        response = client.put("/api/account/acc_missing", json={"last_name": "X"})
        assert response.status_code == 404

    def test_delete_own_account(self, client, other_client, ana, bob):
        other_client.put(f"/api/account/sub/{ana}")

        response = client.delete(f"/api/account/{ana}")
        assert response.status_code == 200
        assert client.get(f"/api/account/find/{ana}").status_code == 404
        assert other_client.get(f"/api/account/find/{bob}").json()["data"]["subscribed_to"] == []

    def test_delete_other_account_refused(self, other_client, ana, bob):
        response = other_client.delete(f"/api/account/{ana}")
        assert response.status_code == 403


# =============================================================================
# Subscriptions
# =============================================================================


class TestSubscriptions:
    def test_subscribe_and_unsubscribe(self, client, ana, bob):
        response = client.put(f"/api/account/sub/{bob}")
        assert response.json() == {"success": True, "message": f"You have been subscribed to {bob}."}

        assert client.get(f"/api/account/find/{ana}").json()["data"]["subscribed_to"] == [bob]
        assert client.get(f"/api/account/find/{bob}").json()["data"]["subscribers"] == [ana]

        response = client.put(f"/api/account/unsub/{bob}")
        assert response.json() == {"success": True, "message": f"You have been unsubscribed from {bob}."}
        assert client.get(f"/api/account/find/{bob}").json()["data"]["subscribers"] == []

    def test_self_subscription(self, client, ana):
        response = client.put(f"/api/account/sub/{ana}")
        assert response.status_code == 400
        assert response.json()["success"] is False


# =============================================================================
# Videos and comments
# =============================================================================


class TestVideos:
    def test_upload(self, client, ana):
        response = client.post(
            "/api/video",
            data={"title": "Cats", "description": "Many cats"},
            files={
                "image": ("thumb.png", b"\x89PNG", "image/png"),
                "file": ("clip.mp4", b"\x00\x00", "video/mp4"),
            },
        )
        assert response.status_code == 201
        video = response.json()["video"]
        assert video["owner_id"] == ana
        assert video["img_url"].startswith("http://testserver/images/")
        assert video["img_url"].endswith(".png")

        path = video["video_url"].removeprefix("http://testserver")
        assert client.get(path).content == b"\x00\x00"

    def test_upload_requires_auth(self, other_client):
        response = other_client.post(
            "/api/video",
            data={"title": "x", "description": "y"},
            files={
                "image": ("thumb.png", b"\x89PNG", "image/png"),
                "file": ("clip.mp4", b"\x00\x00", "video/mp4"),
            },
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_failed_upload_removes_stored_files(self, client, ana, metadata, settings, monkeypatch):
        save = metadata.save

        async def failing_save(collection, id, data):
            if collection == Collections.VIDEOS:
                raise PersistenceError()
            await save(collection, id, data)

        monkeypatch.setattr(metadata, "save", failing_save)
        response = client.post(
            "/api/video",
            data={"title": "Cats", "description": "Many cats"},
            files={
                "image": ("thumb.png", b"\x89PNG", "image/png"),
                "file": ("clip.mp4", b"\x00\x00", "video/mp4"),
            },
        )

        assert response.status_code == 500
        assert response.json()["success"] is False
        data_dir = Path(settings.data_dir)
        assert list((data_dir / "images").iterdir()) == []
        assert list((data_dir / "videos").iterdir()) == []

    def test_owner_updates(self, client, video):
        response = client.put(f"/api/video/{video.id}", json={"title": "Dogs"})
        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Dogs"

    def test_non_owner_update_refused_and_video_unchanged(self, client, other_client, video, bob):
        response = other_client.put(f"/api/video/{video.id}", json={"title": "Mine now"})

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert client.get(f"/api/video/{video.id}").json()["data"]["title"] == "Cats"

    def test_non_owner_delete_refused(self, client, other_client, video, bob):
        assert other_client.delete(f"/api/video/{video.id}").status_code == 403
        assert client.get(f"/api/video/{video.id}").status_code == 200

    def test_missing_video_before_ownership(self, other_client, bob):
        response = other_client.put("/api/video/vid_missing", json={"title": "x"})
        assert response.status_code == 404

    def test_delete_removes_comments(self, client, video, metadata):
        client.post(f"/api/video/{video.id}/comments", json={"description": "first"})
        assert client.delete(f"/api/video/{video.id}").status_code == 200
        assert client.get(f"/api/video/{video.id}/comments").json()["data"] == []

    def test_views_and_listing(self, client, video, ana):
        client.put(f"/api/video/view/{video.id}")
        assert client.get(f"/api/video/{video.id}").json()["data"]["views"] == 1

        owned = client.get(f"/api/video/find/{ana}").json()["data"]
        assert [v["id"] for v in owned] == [video.id]
        assert len(client.get("/api/video/find/random").json()["data"]) == 1


class TestComments:
    def test_add_and_list(self, client, video):
        response = client.post(f"/api/video/{video.id}/comments", json={"description": "Nice"})
        assert response.status_code == 200
        comment = response.json()["comment"]
        assert comment["edited"] is False

        comments = client.get(f"/api/video/{video.id}/comments").json()["data"]
        assert [c["id"] for c in comments] == [comment["id"]]

    def test_comments_closed(self, client, video):
        client.put(f"/api/video/{video.id}", json={"comments_closed": True})

        response = client.post(f"/api/video/{video.id}/comments", json={"description": "Nice"})
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert client.get(f"/api/video/{video.id}/comments").json()["data"] == []

    def test_description_required(self, client, video):
        response = client.post(f"/api/video/{video.id}/comments", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a description"

    def test_non_owner_cannot_delete(self, client, other_client, video, bob):
        comment_id = client.post(
            f"/api/video/{video.id}/comments", json={"description": "Nice"}
        ).json()["comment"]["id"]

        response = other_client.delete(f"/api/video/{video.id}/comments/{comment_id}")
        assert response.status_code == 403
        assert len(client.get(f"/api/video/{video.id}/comments").json()["data"]) == 1

        assert client.delete(f"/api/video/{video.id}/comments/{comment_id}").status_code == 200

    def test_delete_missing_comment(self, client, video):
        response = client.delete(f"/api/video/{video.id}/comments/cmt_missing")
        assert response.status_code == 404
