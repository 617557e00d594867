import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENFORCE_DELETE_OWNERSHIP"] = "false"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from placehub.database.database import Base, SessionLocal, engine
from placehub.database.models import User
from placehub.main import app
from placehub.utils.auth_helpers import create_access_token, hash_password
from placehub.utils.media import get_media_host


class FakeMediaHost:
    def __init__(self):
        self.destroyed = []
        self.fail_on = set()

    def destroy(self, public_id):
        if public_id in self.fail_on:
            raise RuntimeError(f"media host is down for {public_id}")
        self.destroyed.append(public_id)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def media():
    return FakeMediaHost()


@pytest.fixture
def client(media):
    app.dependency_overrides[get_media_host] = lambda: media
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, username, password="secret", name=None):
    user = User(username=username, name=name, hashed_password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(user.username, user.id, timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(db):
    return make_user(db, "alice", name="Alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob", name="Bob")


def place_payload(**overrides):
    payload = {
        "title": "Cabin",
        "address": "123 Pine Rd",
        "description": "A quiet cabin in the woods",
        "addedPhotos": [f"https://res.cloudinary.com/demo/image/upload/v1/cabin{i}.jpg" for i in range(5)],
        "perks": ["wifi", "parking"],
        "extraInfo": "No pets",
        "maxGuests": 4,
        "price": 100,
        "category": "houses",
        "rental": True,
        "selling": False,
        "religion": "others",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_place(client):
    def _create(user, **overrides):
        response = client.post("/places/add-places", json=place_payload(**overrides), headers=auth_headers(user))
        assert response.status_code == 200, response.text
        return response.json()["place"]
    return _create
