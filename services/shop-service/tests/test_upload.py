"""Tests for image upload."""
import asyncio
import os

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.image_storage import HostedImageStorage, stored_filename


def test_stored_filename_uses_field_timestamp_and_extension():
    assert stored_filename("product", "cup.png", now=1700000000.123) == "product_1700000000123.png"
    assert stored_filename("product", None, now=1.0) == "product_1000"


def test_local_upload_is_saved_and_served(client, image_storage):
    response = client.post("/upload", files={"product": ("cup.png", b"fake-bytes", "image/png")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] == 1
    assert body["image_url"].startswith("http://testserver/images/product_")
    assert body["image_url"].endswith(".png")

    filename = body["image_url"].rsplit("/", 1)[1]
    assert os.path.exists(os.path.join(image_storage.upload_dir, filename))
    assert client.get(f"/images/{filename}").content == b"fake-bytes"


def test_upload_requires_product_field(client):
    response = client.post("/upload", files={"image": ("cup.png", b"x", "image/png")})
    assert response.status_code == 422


@pytest.fixture
def hosted_app(db):
    """Build an app whose image host is served by ``handler``."""
    clients = []

    def _hosted_app(handler):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        storage = HostedImageStorage(
            http_client,
            upload_url="https://images.example/upload",
            api_key="key",
            upload_preset="shop",
            url_field="secure_url"
        )
        return create_app(db=db, image_storage=storage)

    yield _hosted_app

    for http_client in clients:
        asyncio.run(http_client.aclose())


def test_hosted_upload_returns_provider_url(hosted_app):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, json={"secure_url": "https://cdn.example/abc.png"})

    with TestClient(hosted_app(handler)) as client:
        response = client.post("/upload", files={"product": ("cup.png", b"fake-bytes", "image/png")})

    assert response.json() == {"success": 1, "image_url": "https://cdn.example/abc.png"}
    assert seen["url"] == "https://images.example/upload"
    assert b"fake-bytes" in seen["body"]
    assert b"shop" in seen["body"]


@pytest.mark.parametrize("provider_response", [
    httpx.Response(500, json={"error": "boom"}),
    httpx.Response(200, json={"unexpected": "shape"}),
    httpx.Response(200, json=["https://cdn.example/abc.png"]),
    httpx.Response(200, json="https://cdn.example/abc.png"),
    httpx.Response(200, text="<html>ok</html>"),
])
def test_hosted_upload_failure_is_bad_gateway(hosted_app, provider_response):
    with TestClient(hosted_app(lambda request: provider_response)) as client:
        response = client.post("/upload", files={"product": ("cup.png", b"x", "image/png")})

    assert response.status_code == 502
    assert response.json() == {"detail": "Image upload failed"}


def test_hosted_backend_is_built_at_startup(db):
    app = create_app(db=db, storage_backend="hosted")

    with TestClient(app):
        assert isinstance(app.state.image_storage, HostedImageStorage)
        assert app.state.image_storage.http_client is app.state.http_client

    assert not any(getattr(route, "path", None) == "/images" for route in app.routes)


def test_unknown_storage_backend_is_rejected(db):
    with pytest.raises(ValueError, match="IMAGE_STORAGE"):
        create_app(db=db, storage_backend="s3")
