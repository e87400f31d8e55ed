"""Event image validation and upload storage.

Images reach an event in one of two ways:

- as a string on the JSON endpoints: either an http(s) URL that is already
  stored somewhere, or a ``data:image/...;base64,...`` URI that is stored
  inline after validation;
- as a multipart upload, which is handed to the configured ``ImageStore``
  and replaced by the stored file's reference.
"""
import logging
import math
import os
import re
import uuid
from typing import Optional, Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile

from eventrsvp.config import settings
from eventrsvp.errors import InvalidInput, Internal

logger = logging.getLogger(__name__)

BASE64_IMAGE_RE = re.compile(r"^data:image/(png|jpeg|jpg);base64,[A-Za-z0-9+/=]+$")

# Ratio applied to 4 * ceil(len / 3) to estimate decoded bytes; kept as-is so
# size limits agree with existing clients.
BASE64_SIZE_RATIO = 0.5624896334383812

ALLOWED_UPLOAD_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}


def is_valid_base64_image(value: str) -> bool:
    return bool(BASE64_IMAGE_RE.match(value))


def base64_size_kb(value: str) -> float:
    """Estimated decoded size of a base64 string in KB."""
    size_in_bytes = 4 * math.ceil(len(value) / 3) * BASE64_SIZE_RATIO
    return size_in_bytes / 1024


def validate_image(image: str) -> str:
    """Return ``image`` if acceptable for storage on an event, else raise InvalidInput."""
    if image.startswith(("http://", "https://")):
        return image
    if not is_valid_base64_image(image):
        raise InvalidInput("Invalid image format. Must be a PNG or JPEG base64 data URI.")
    if base64_size_kb(image) > settings.MAX_IMAGE_KB:
        raise InvalidInput(f"Image too large. Maximum size is {settings.MAX_IMAGE_KB}KB.")
    return image


class ImageStore(Protocol):
    def save(self, upload: UploadFile) -> str:
        """Persist ``upload`` and return a reference to store on the event."""
        ...


def _extension_for(upload: UploadFile) -> str:
    ext = ALLOWED_UPLOAD_TYPES.get((upload.content_type or "").lower())
    if ext is None:
        raise InvalidInput("Unsupported image type. Only JPEG and PNG are allowed.")
    return ext


class LocalImageStore:
    """Writes uploads to a directory on disk."""

    def __init__(self, root: str) -> None:
        self.root = root

    def save(self, upload: UploadFile) -> str:
        ext = _extension_for(upload)
        os.makedirs(self.root, exist_ok=True)
        filename = f"{uuid.uuid4().hex}.{ext}"
        path = os.path.join(self.root, filename)
        with open(path, "wb") as fh:
            fh.write(upload.file.read())
        logger.info("Stored upload %s as %s", upload.filename, path)
        return path


class CloudinaryImageStore:
    """Uploads to the ``event-images`` folder of a Cloudinary account."""

    folder = "event-images"

    def __init__(self, cloud_name: str, api_key: str, api_secret: str) -> None:
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def save(self, upload: UploadFile) -> str:
        _extension_for(upload)
        stem = os.path.splitext(upload.filename or "")[0]
        public_id = f"{stem}-{uuid.uuid4().hex}" if stem else uuid.uuid4().hex
        try:
            result = cloudinary.uploader.upload(
                upload.file,
                folder=self.folder,
                public_id=public_id,
                allowed_formats=["jpg", "jpeg", "png"],
                resource_type="image",
            )
        except CloudinaryError as e:
            logger.error("Cloudinary upload failed for %s: %s", upload.filename, e)
            raise Internal("Image upload failed")
        return result["secure_url"]


def cloudinary_configured() -> bool:
    return all([
        settings.CLOUDINARY_CLOUD_NAME,
        settings.CLOUDINARY_API_KEY,
        settings.CLOUDINARY_API_SECRET,
    ])


_store: Optional[ImageStore] = None


def get_image_store() -> ImageStore:
    """FastAPI dependency: Cloudinary when configured, local disk otherwise."""
    global _store
    if _store is None:
        if cloudinary_configured():
            _store = CloudinaryImageStore(
                settings.CLOUDINARY_CLOUD_NAME,
                settings.CLOUDINARY_API_KEY,
                settings.CLOUDINARY_API_SECRET,
            )
        else:
            _store = LocalImageStore(settings.UPLOAD_DIR)
    return _store
