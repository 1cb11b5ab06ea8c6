"""
Cloudinary Image Store Adapter
==============================

Concrete implementation of ImageStoreInterface on top of the cloudinary SDK.
The SDK signs every call with the configured API secret; each call is bounded
by settings.IMAGE_STORE_TIMEOUT.
"""

import logging
import re
from typing import BinaryIO, Optional
from urllib.parse import unquote, urlparse

import cloudinary
import cloudinary.uploader
from django.conf import settings

from .interface import ImageStoreException, ImageStoreInterface, StoredImage

logger = logging.getLogger(__name__)

STORE_HOST_SUFFIX = "cloudinary.com"

_VERSION_SEGMENT = re.compile(r"^v\d+/")


def public_id_from_url(url: str) -> Optional[str]:
    """
    Extract the public id from a delivery URL.

    ``https://res.cloudinary.com/<cloud>/image/upload/v1712/folder/lamp.jpg``
    yields ``folder/lamp``. Returns None for URLs not served by the store.
    """
    if not url:
        return None

    parsed = urlparse(url)
    if not parsed.netloc.endswith(STORE_HOST_SUFFIX):
        return None

    _, marker, after_upload = parsed.path.partition("/upload/")
    if not marker or not after_upload:
        return None

    path = _VERSION_SEGMENT.sub("", unquote(after_upload))
    stem, dot, _ = path.rpartition(".")
    public_id = stem if dot and stem else path
    return public_id or None


class CloudinaryImageStore(ImageStoreInterface):
    """
    Cloudinary implementation using the SDK uploader.

    Configuration (in settings.py):
        CLOUDINARY_CLOUD_NAME: Cloud name
        CLOUDINARY_API_KEY: API key sent with each request
        CLOUDINARY_API_SECRET: Secret used to sign requests (never sent)
        CLOUDINARY_UPLOAD_FOLDER: Folder prefix for uploaded images
        IMAGE_STORE_TIMEOUT: Per-request timeout in seconds
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.cloud_name = cloud_name or getattr(settings, "CLOUDINARY_CLOUD_NAME", "")
        self.api_key = api_key or getattr(settings, "CLOUDINARY_API_KEY", "")
        self.folder = getattr(settings, "CLOUDINARY_UPLOAD_FOLDER", "")
        self.timeout = timeout or getattr(settings, "IMAGE_STORE_TIMEOUT", 10)
        api_secret = api_secret or getattr(settings, "CLOUDINARY_API_SECRET", "")

        cloudinary.config(cloud_name=self.cloud_name, api_key=self.api_key, api_secret=api_secret, secure=True)

        if not (self.cloud_name and self.api_key and api_secret):
            logger.warning("Cloudinary credentials are incomplete; image store calls will fail")

    def upload(self, file: BinaryIO, filename: str, content_type: str) -> StoredImage:
        """
        Upload an image to the configured folder.

        Raises:
            ImageStoreException: On transport errors or rejected uploads
        """
        options = {"resource_type": "image", "filename": filename, "timeout": self.timeout}
        if self.folder:
            options["folder"] = self.folder

        try:
            body = cloudinary.uploader.upload(file, **options)
        except Exception as e:
            logger.error(f"Failed to upload image {filename} to store: {str(e)}")
            raise ImageStoreException(f"Image store upload failed: {str(e)}") from e

        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise ImageStoreException("Image store upload response is missing url/public_id")

        logger.info(f"Uploaded image to store: {public_id}")

        return StoredImage(url=url, public_id=public_id, size=body.get("bytes", 0), content_type=content_type)

    def delete(self, public_id: str) -> bool:
        """
        Destroy an image and invalidate cached copies.

        Returns:
            True when the store reports ``ok``, False for ``not found``

        Raises:
            ImageStoreException: On transport errors or any other result
        """
        try:
            body = cloudinary.uploader.destroy(public_id, invalidate=True, timeout=self.timeout)
        except Exception as e:
            logger.error(f"Failed to delete image {public_id} from store: {str(e)}")
            raise ImageStoreException(f"Image store deletion failed: {str(e)}") from e

        result = body.get("result")
        if result == "ok":
            logger.info(f"Deleted image from store: {public_id}")
            return True
        if result == "not found":
            logger.warning(f"Image not found in store, nothing to delete: {public_id}")
            return False

        raise ImageStoreException(f"Image store refused to delete {public_id}: {result}")

    def public_id_from_url(self, url: str) -> Optional[str]:
        return public_id_from_url(url)
