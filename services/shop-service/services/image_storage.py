"""Product image storage backends."""
import logging
import os
import shutil
import time
from typing import Optional
import httpx
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from config import (
    UPLOAD_DIR,
    IMAGE_HOST_UPLOAD_URL,
    IMAGE_HOST_API_KEY,
    IMAGE_HOST_UPLOAD_PRESET,
    IMAGE_HOST_URL_FIELD
)
from monitoring import image_uploads_counter

logger = logging.getLogger(__name__)

IMAGES_PATH = "/images"


class ImageHostError(Exception):
    """Raised when the image host answers without a usable URL."""


def stored_filename(field_name: str, original_name: Optional[str], now: Optional[float] = None) -> str:
    """Build ``<field>_<epoch ms><ext>`` for an uploaded file."""
    if now is None:
        now = time.time()
    extension = os.path.splitext(original_name or "")[1]
    return f"{field_name}_{int(now * 1000)}{extension}"


class LocalImageStorage:
    """Stores uploads on disk and serves them from ``/images``."""

    backend = "local"

    def __init__(self, upload_dir: str = UPLOAD_DIR):
        self.upload_dir = upload_dir
        os.makedirs(self.upload_dir, exist_ok=True)

    def _write(self, upload: UploadFile, destination: str) -> None:
        with open(destination, "wb") as target:
            shutil.copyfileobj(upload.file, target)

    async def save(self, upload: UploadFile, field_name: str, base_url: str) -> str:
        """
        Write the upload into the upload directory.

        Args:
            upload: Uploaded file
            field_name: Multipart field the file arrived in
            base_url: Public base URL of this service

        Returns:
            URL the image is served from
        """
        filename = stored_filename(field_name, upload.filename)
        destination = os.path.join(self.upload_dir, filename)
        await run_in_threadpool(self._write, upload, destination)

        image_uploads_counter.add(1, {"backend": self.backend})
        logger.info("Stored uploaded image", extra={"stored_as": filename})
        return f"{base_url.rstrip('/')}{IMAGES_PATH}/{filename}"


class HostedImageStorage:
    """Forwards uploads to an external image host."""

    backend = "hosted"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        upload_url: str = IMAGE_HOST_UPLOAD_URL,
        api_key: str = IMAGE_HOST_API_KEY,
        upload_preset: str = IMAGE_HOST_UPLOAD_PRESET,
        url_field: str = IMAGE_HOST_URL_FIELD
    ):
        """
        Initialize hosted image storage.

        Args:
            http_client: Async HTTP client
            upload_url: Provider upload endpoint
            api_key: Provider API key
            upload_preset: Provider upload preset
            url_field: Response field holding the hosted image URL
        """
        self.http_client = http_client
        self.upload_url = upload_url
        self.api_key = api_key
        self.upload_preset = upload_preset
        self.url_field = url_field

    async def save(self, upload: UploadFile, field_name: str, base_url: str) -> str:
        """
        Upload the file to the provider.

        Returns:
            URL assigned by the provider

        Raises:
            httpx.HTTPError: If the provider is unreachable or rejects the upload
            ImageHostError: If the provider response has no image URL
        """
        content = await upload.read()
        data = {}
        if self.api_key:
            data["api_key"] = self.api_key
        if self.upload_preset:
            data["upload_preset"] = self.upload_preset

        # HTTPXClientInstrumentor already creates spans for HTTP calls
        response = await self.http_client.post(
            self.upload_url,
            data=data,
            files={"file": (upload.filename or field_name, content, upload.content_type)}
        )
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError:
            body = None
        image_url = body.get(self.url_field) if isinstance(body, dict) else None
        if not image_url:
            logger.error("Image host response missing URL", extra={
                "url_field": self.url_field,
                "status_code": response.status_code
            })
            raise ImageHostError(f"Image host response has no '{self.url_field}'")

        image_uploads_counter.add(1, {"backend": self.backend})
        logger.info("Uploaded image to host", extra={"image_url": image_url})
        return image_url
