"""
church_api.storage.blob

Blob store boundary for event images.

Responsibilities:
- Define the `BlobStore` interface (`upload -> public URL`).
- Provide a Cloudinary-backed implementation and an "unconfigured" stand-in
  that fails loudly when uploads are attempted without credentials.
- Validate image type/size before anything leaves the process.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from starlette.concurrency import run_in_threadpool

from church_api.errors import BlobStoreUnavailable, ValidationFailed
from church_api.observability.logging import get_logger
from church_api.settings import Settings

log = get_logger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png"})


class BlobStore(Protocol):
    async def upload(self, *, filename: str, content: bytes, content_type: str) -> str: ...


def validate_image(*, content: bytes, content_type: str, max_bytes: int) -> None:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationFailed("Invalid file format: only JPEG and PNG images are accepted")
    if len(content) > max_bytes:
        raise ValidationFailed(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit")


@dataclass(frozen=True, slots=True)
class CloudinaryConfig:
    cloud_name: str
    api_key: str
    api_secret: str
    folder: str = "events"


class CloudinaryBlobStore:
    def __init__(self, cfg: CloudinaryConfig) -> None:
        self._cfg = cfg
        cloudinary.config(
            cloud_name=cfg.cloud_name,
            api_key=cfg.api_key,
            api_secret=cfg.api_secret,
            secure=True,  # Always use HTTPS URLs
        )

    async def upload(self, *, filename: str, content: bytes, content_type: str) -> str:
        # The SDK is synchronous; keep the network call off the event loop.
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(content),
                resource_type="image",
                folder=self._cfg.folder,
                filename=filename,
                use_filename=True,
                unique_filename=True,
                overwrite=False,
            )
        except CloudinaryError as e:
            log.error("blob_upload_failed", filename=filename, error=str(e))
            raise BlobStoreUnavailable("Error uploading image") from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            log.error("blob_upload_missing_url", filename=filename)
            raise BlobStoreUnavailable("Error uploading image")
        log.info("blob_uploaded", filename=filename, url=url)
        return str(url)


class UnconfiguredBlobStore:
    async def upload(self, *, filename: str, content: bytes, content_type: str) -> str:
        log.error("blob_store_not_configured", filename=filename)
        raise BlobStoreUnavailable("Image uploads are not configured")


def build_blob_store(settings: Settings) -> BlobStore:
    if not settings.cloudinary_configured:
        return UnconfiguredBlobStore()
    return CloudinaryBlobStore(
        CloudinaryConfig(
            cloud_name=settings.cloudinary_cloud_name or "",
            api_key=settings.cloudinary_api_key or "",
            api_secret=settings.cloudinary_api_secret or "",
            folder=settings.cloudinary_folder,
        )
    )


# --- Module Notes -----------------------------------------------------------
# Tests swap the store on `app.state.blob_store` for an in-memory fake.
