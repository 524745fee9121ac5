import io
import uuid

import pytest

from api import create_app
from models import storage


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        },
    )
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    # Cookies are passed explicitly so each request authenticates as exactly one user
    return app.test_client(use_cookies=False)


def image(name="a.png", payload=b"\x89PNG fake image"):
    return (io.BytesIO(payload), name)


def register(client, username="alice", email=None, password="secret123", full_name="Alice Liddell", cover=False):
    data = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        "fullName": full_name,
        "avatar": image(),
    }
    if cover:
        data["coverImage"] = image("cover.jpg")
    return client.post("/api/v1/users/register", data=data, content_type="multipart/form-data")


def login(client, username="alice", password="secret123"):
    return client.post("/api/v1/users/login", json={"username": username, "password": password})


def auth_headers(access_token):
    return {"Authorization": f"Bearer {access_token}"}


def cookie_header(**cookies):
    return {"Cookie": "; ".join(f"{k}={v}" for k, v in cookies.items())}


@pytest.fixture
def make_user(client):
    """Register and log in a user; returns (user dict, bearer headers, login data)."""
    def _make(username="alice", password="secret123"):
        resp = register(client, username=username, password=password)
        assert resp.status_code == 201, resp.get_json()
        resp = login(client, username=username, password=password)
        assert resp.status_code == 200, resp.get_json()
        data = resp.get_json()["data"]
        return data["user"], auth_headers(data["accessToken"]), data
    return _make


@pytest.fixture
def make_video(client):
    def _make(headers, title="My first video", description="desc", duration="12.5"):
        resp = client.post(
            "/api/v1/videos/",
            data={
                "title": title,
                "description": description,
                "duration": duration,
                "videoFile": image("clip.mp4", b"fake mp4 bytes"),
                "thumbnail": image("thumb.png"),
            },
            headers=headers,
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]
    return _make


def random_id():
    return str(uuid.uuid4())
