"""
Image Store Abstraction Layer
=============================

Provides a unified interface for the remote media store holding product images.
"""

from .cloudinary_adapter import CloudinaryImageStore
from .factory import ImageStoreFactory
from .interface import ImageStoreException, ImageStoreInterface, StoredImage
from .memory_adapter import InMemoryImageStore

__all__ = [
    "ImageStoreInterface",
    "StoredImage",
    "ImageStoreException",
    "CloudinaryImageStore",
    "InMemoryImageStore",
    "ImageStoreFactory",
]
