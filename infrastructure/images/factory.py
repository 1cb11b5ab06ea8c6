"""
Image Store Factory
===================

Factory pattern for creating image store instances based on configuration.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from .cloudinary_adapter import CloudinaryImageStore
from .interface import ImageStoreInterface
from .memory_adapter import InMemoryImageStore

logger = logging.getLogger(__name__)

ImageStoreBackend = Literal["cloudinary", "memory"]


class ImageStoreFactory:
    """
    Factory for creating image store instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"IMAGE_STORE_BACKEND": "cloudinary"}  # or 'memory'

        # In your code
        image_store = ImageStoreFactory.create()
    """

    @staticmethod
    def create(backend: Optional[ImageStoreBackend] = None) -> ImageStoreInterface:
        """
        Create an image store instance.

        Args:
            backend: 'cloudinary' or 'memory'. If None, reads
                     settings.INFRASTRUCTURE["IMAGE_STORE_BACKEND"]

        Raises:
            ValueError: If backend type is invalid
        """
        is_testing = getattr(settings, "TESTING", False)
        default_backend = "memory" if is_testing else "cloudinary"
        configured = getattr(settings, "INFRASTRUCTURE", {}).get("IMAGE_STORE_BACKEND")

        backend_type = backend or configured or default_backend

        logger.info(f"Creating image store backend: {backend_type}")

        if backend_type == "cloudinary":
            return CloudinaryImageStore()
        elif backend_type == "memory":
            return InMemoryImageStore()
        else:
            raise ValueError(f"Invalid image store backend: {backend_type}. Must be 'cloudinary' or 'memory'")
