"""Abstract contract for the remote object store."""

from abc import ABC, abstractmethod

from media_assets.models.asset import FileInfo


class ObjectStore(ABC):
    """Contract for storing, removing and inspecting objects by key.

    Implementations could be S3, R2, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    Every call is a remote round trip; implementations keep no cache.
    """

    @abstractmethod
    async def put(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str,
        cache_control: str,
    ) -> None:
        """Store an object under `key`.

        Args:
            key: Storage key
            data: Object body
            content_type: Content-Type header to persist
            cache_control: Cache-Control header to persist

        Raises:
            StoreError: If the write fails or times out
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete an object. A missing key is not an error.

        Raises:
            StoreError: If the delete fails or times out
        """

    @abstractmethod
    async def head(self, key: str) -> FileInfo:
        """Fetch object metadata without the body.

        Returns:
            FileInfo for the stored object

        Raises:
            NotFoundError: If no object exists under `key`
            StoreError: If the request fails or times out
        """
