"""
Image Store Interface
=====================

Abstract base class defining the contract for the remote image store.
Only the catalog (upload) and the cascade manager (delete) talk to it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class StoredImage:
    """
    Represents an image held by the remote store.

    Attributes:
        url: Public URL saved on the product
        public_id: Store-side identifier used for deletion
        size: File size in bytes (0 when the store does not report it)
        content_type: MIME type of the uploaded file
    """

    url: str
    public_id: str
    size: int = 0
    content_type: str = ""


class ImageStoreInterface(ABC):
    """
    Abstract interface for image store operations.

    Concrete implementations:
        - CloudinaryImageStore: Cloudinary through the cloudinary SDK
        - InMemoryImageStore: dictionary-backed store for tests and local runs
    """

    @abstractmethod
    def upload(self, file: BinaryIO, filename: str, content_type: str) -> StoredImage:
        """
        Upload an image.

        Args:
            file: Binary file object to upload
            filename: Original filename (used for logging and extension)
            content_type: MIME type of the file

        Returns:
            StoredImage describing the stored object

        Raises:
            ImageStoreException: If the store is unreachable or rejects the upload
        """
        pass

    @abstractmethod
    def delete(self, public_id: str) -> bool:
        """
        Delete an image by its public identifier.

        Args:
            public_id: Identifier derived from the image URL

        Returns:
            True if the image was deleted, False if the store did not know it

        Raises:
            ImageStoreException: If the store is unreachable or rejects the request
        """
        pass

    @abstractmethod
    def public_id_from_url(self, url: str) -> Optional[str]:
        """
        Derive the public identifier of an image from its URL.

        Returns:
            The public id, or None when the URL does not belong to this store
        """
        pass


class ImageStoreException(Exception):
    """Raised when the image store cannot complete a request."""

    pass
