"""Shared fixtures for the shop service tests."""
import mongomock
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.image_storage import LocalImageStorage

ALLOWED_ORIGIN = "http://shop.example"


@pytest.fixture
def db():
    return mongomock.MongoClient()["shop_test"]


@pytest.fixture
def image_storage(tmp_path):
    return LocalImageStorage(str(tmp_path / "images"))


@pytest.fixture
def app(db, image_storage):
    return create_app(db=db, image_storage=image_storage, allowed_origins=[ALLOWED_ORIGIN])


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup(client):
    """Sign up a user and return the token."""
    def _signup(email="a@x.com", name="A", password="p"):
        response = client.post("/signup", json={"name": name, "email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]
    return _signup


def product_payload(name="Green tea", category="tea", new_price=5.0, old_price=7.5):
    return {
        "name": name,
        "image": f"http://testserver/images/{name.replace(' ', '_')}.png",
        "category": category,
        "new_price": new_price,
        "old_price": old_price,
    }
