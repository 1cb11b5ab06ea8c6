"""
In-Memory Image Store
=====================

Dictionary-backed implementation of ImageStoreInterface for testing and
local development. Can be switched into a failing mode to simulate an outage.
"""

import logging
import uuid
from typing import BinaryIO, Dict, List, Optional

from .interface import ImageStoreException, ImageStoreInterface, StoredImage

logger = logging.getLogger(__name__)

MEMORY_URL_PREFIX = "memory://images/"


class InMemoryImageStore(ImageStoreInterface):
    """
    Image store kept in process memory.

    Instead of talking to a remote service, this store:
        - Keeps uploaded bytes keyed by public id
        - Records every deletion request for verification
        - Raises ImageStoreException when ``failing`` is set
    """

    def __init__(self):
        self.images: Dict[str, bytes] = {}
        self.delete_requests: List[str] = []
        self.failing = False

    def _check_available(self):
        if self.failing:
            raise ImageStoreException("In-memory image store is configured to fail")

    def upload(self, file: BinaryIO, filename: str, content_type: str) -> StoredImage:
        self._check_available()

        content = file.read()
        public_id = f"{uuid.uuid4().hex}-{filename.rsplit('.', 1)[0]}"
        self.images[public_id] = content

        logger.info(f"[MEMORY IMAGE STORE] Uploaded {filename} as {public_id}")

        return StoredImage(
            url=f"{MEMORY_URL_PREFIX}{public_id}",
            public_id=public_id,
            size=len(content),
            content_type=content_type,
        )

    def delete(self, public_id: str) -> bool:
        self.delete_requests.append(public_id)
        self._check_available()

        removed = self.images.pop(public_id, None) is not None
        logger.info(f"[MEMORY IMAGE STORE] Delete {public_id}: {'ok' if removed else 'not found'}")
        return removed

    def public_id_from_url(self, url: str) -> Optional[str]:
        if url and url.startswith(MEMORY_URL_PREFIX):
            return url[len(MEMORY_URL_PREFIX) :] or None
        return None
