"""Abstract contract shared by every resource manager backend."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from resource_manager.models.options import ReadOptions, SaveOptions
from resource_manager.models.resource import UploadedFile

SaveOptionsLike = SaveOptions | Mapping[str, Any] | None
ReadOptionsLike = ReadOptions | Mapping[str, Any] | None


class ResourceManager(ABC):
    """Contract for storing and retrieving named binary resources.

    Implementations could be a local directory, S3, etc.
    Callers depend on this interface, not the implementation, so the
    backend can be swapped through configuration alone.

    Expected domain conditions (absent resource, refused overwrite) are
    reported through return values. Backend failures raise subclasses of
    ``StorageError``.
    """

    @abstractmethod
    def save(
        self,
        file: UploadedFile,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Persist an uploaded file.

        Args:
            file: Uploaded-file handle; its ``temp_name`` is the source
            name: Resource name; derived from ``file.name`` when empty
            options: Backend save options

        Returns:
            True when the resource was written
        """

    @abstractmethod
    def save_file(
        self,
        path: str,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Copy an existing local file into the store.

        Args:
            path: Local path of the source file
            name: Resource name
            options: Backend save options

        Returns:
            True when the resource was written
        """

    @abstractmethod
    def save_contents(
        self,
        body: bytes | str,
        name: str,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Write in-memory content under ``name``.

        Returns:
            True when the resource was written
        """

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Remove a resource.

        Returns:
            True if the resource existed and was removed, False if it was
            not there to begin with
        """

    @abstractmethod
    def file_exists(self, name: str) -> bool:
        """Return whether a resource exists."""

    @abstractmethod
    def get_url(
        self,
        name: str,
        expires: int | timedelta | datetime | None = None,
    ) -> str:
        """Return a URL giving direct access to the resource.

        Args:
            name: Resource name
            expires: Optional lifetime (seconds or timedelta) or expiry time,
                for backends that sign URLs
        """

    @abstractmethod
    def get_file_contents(
        self,
        name: str,
        options: ReadOptionsLike = None,
    ) -> bytes | None:
        """Read a resource.

        Returns:
            The resource bytes, or None when the resource does not exist
        """
