"""
Base class for object stores.
The API layer only talks to this interface, so tests can swap in a fake.
"""
from abc import ABC, abstractmethod
from typing import List, Optional


class StorageError(Exception):
    """Raised when an object store call fails."""

    def __init__(self, operation: str, key: Optional[str] = None, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        message = f"Storage operation '{operation}' failed"
        if key:
            message += f" for key '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ObjectStore(ABC):
    """
    Abstract base class for S3-compatible object stores.

    The bucket is bound when the store is constructed, so every method
    works on object keys only.

    All implementations must raise StorageError on failure.
    """

    @abstractmethod
    def put_object(self, key: str, data: bytes, content_type: str) -> None:
        """
        Store bytes under the given key.

        Args:
            key: Object key (path in bucket)
            data: File contents
            content_type: MIME type stored with the object
        """
        pass

    @abstractmethod
    def list_objects(self) -> List[str]:
        """
        List all object keys in the bucket.

        Returns:
            Keys in the order the store enumerates them (empty if none)
        """
        pass

    @abstractmethod
    def delete_object(self, key: str) -> None:
        """
        Delete an object. Deleting a missing key is not an error.

        Args:
            key: Object key to delete
        """
        pass

    @abstractmethod
    def generate_presigned_url(self, key: str, expires_in: int) -> str:
        """
        Generate a signed GET URL for an object.

        Args:
            key: Object key
            expires_in: URL validity in seconds

        Returns:
            Presigned URL string
        """
        pass

    @abstractmethod
    def object_url(self, key: str) -> str:
        """Return the unsigned, store-addressable URL of an object."""
        pass

    @abstractmethod
    def check_connection(self) -> None:
        """Verify the bucket is reachable. Raises StorageError if not."""
        pass
