import os

# Pin settings before anything under app/ is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["COOKIE_SECURE"] = "false"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret"

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base.metadata
from app.auth.passwords import hash_password
from app.auth.token import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.video import Video
from app.services.media import MediaUpload, get_media_store

TEST_DATABASE_URL = "sqlite:///:memory:"

# StaticPool: every session (test code and request handlers) shares one in-memory DB
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeMediaStore:
    def __init__(self):
        self.fail = False
        self.stored = []

    def store(self, file, folder) -> Optional[MediaUpload]:
        if self.fail:
            return None
        self.stored.append((folder, file.filename))
        return MediaUpload(url=f"https://media.test/{folder}/{file.filename}")


@pytest.fixture(name="session")
def session_fixture():
    Base.metadata.create_all(test_engine)
    with TestingSessionLocal() as session:
        yield session
    Base.metadata.drop_all(test_engine)


@pytest.fixture(name="media")
def media_fixture():
    return FakeMediaStore()


@pytest.fixture(name="client")
def client_fixture(session, media):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make(username: Optional[str] = None, password: str = "secret123", **fields) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = User(
            username=username.lower(),
            email=fields.pop("email", f"{username.lower()}@example.com"),
            full_name=fields.pop("full_name", username.title()),
            password_hash=hash_password(password),
            avatar=fields.pop("avatar", f"https://media.test/avatars/{username}.png"),
            **fields,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_video(session):
    def _make(owner: User, title: str = "A video", **fields) -> Video:
        video = Video(
            owner_id=owner.id,
            title=title,
            description=fields.pop("description", ""),
            video_file=fields.pop("video_file", f"https://media.test/videos/{title}.mp4"),
            thumbnail=fields.pop("thumbnail", f"https://media.test/thumbnails/{title}.png"),
            duration=fields.pop("duration", 12.5),
            **fields,
        )
        session.add(video)
        session.commit()
        session.refresh(video)
        return video

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
