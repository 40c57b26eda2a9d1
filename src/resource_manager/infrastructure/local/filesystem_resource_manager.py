"""Local filesystem implementation of ResourceManager."""

from datetime import datetime, timedelta
from pathlib import Path
import shutil

from aws_lambda_powertools import Logger

from resource_manager.models.errors import (
    ResourceDeletionFailedError,
    ResourceDownloadFailedError,
    ResourceUploadFailedError,
    ValidationError,
)
from resource_manager.models.options import ReadOptions, SaveOptions
from resource_manager.models.resource import UploadedFile
from resource_manager.repositories.resource_repository import (
    ReadOptionsLike,
    ResourceManager,
    SaveOptionsLike,
)
from resource_manager.settings import FileSystemSettings
from resource_manager.utils.constants import DIRECTORY_MODE, URL_SEPARATOR
from resource_manager.utils.paths import join_folder, normalize_name

logger = Logger(UTC=True)


class FileSystemResourceManager(ResourceManager):
    """Resource manager storing files under a base directory.

    Every name is resolved relative to ``base_path``; links are built by
    appending the name to ``base_url``. Names cannot climb out of the base
    directory: leading separators are stripped and ``..`` segments dropped.

    Save options:
    - ``folder``: subfolder, under the base path, to save the file in
    - ``override``: whether an existing file may be replaced (default True)
    """

    def __init__(self, settings: FileSystemSettings) -> None:
        self._settings = settings
        self._base_path = Path(settings.base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def save(
        self,
        file: UploadedFile,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Copy an uploaded file; the name defaults to the original filename.

        The temporary upload is copied, not moved: it still belongs to the
        caller afterwards.
        """
        return self._copy(file.temp_name, name or file.name, options)

    def save_file(
        self,
        path: str,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Copy a local file; the name defaults to the file's basename."""
        return self._copy(path, name or Path(path).name, options)

    def save_contents(
        self,
        body: bytes | str,
        name: str,
        options: SaveOptionsLike = None,
    ) -> bool:
        target = self._prepare_target(name, options)
        if target is None:
            return False

        data = body.encode("utf-8") if isinstance(body, str) else body
        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.error("Writing resource failed", extra={"path": str(target)})
            raise ResourceUploadFailedError(
                message="Unable to save resource at this time",
                details={"name": name},
            ) from exc

        logger.info("Resource saved successfully", extra={"path": str(target), "size": len(data)})
        return True

    def delete(self, name: str) -> bool:
        path = self._resource_path(name)
        if path is None or not path.is_file():
            logger.info("Resource to delete does not exist", extra={"name": name})
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Deleting resource failed", extra={"path": str(path)})
            raise ResourceDeletionFailedError(
                message="Unable to delete resource at this time",
                details={"name": name},
            ) from exc

        logger.info("Resource deleted successfully", extra={"path": str(path)})
        return True

    def file_exists(self, name: str) -> bool:
        """Return True only for regular files; directories are not resources."""
        path = self._resource_path(name)
        return path is not None and path.is_file()

    def get_url(
        self,
        name: str,
        expires: int | timedelta | datetime | None = None,
    ) -> str:
        """Return ``base_url + "/" + name``. Local links never expire."""
        return f"{self.base_url}{URL_SEPARATOR}{name}"

    def get_file_contents(
        self,
        name: str,
        options: ReadOptionsLike = None,
    ) -> bytes | None:
        opts = ReadOptions.coerce(options)
        path = self._resolve(join_folder(opts.folder, name))

        try:
            contents = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            logger.info("Resource not found", extra={"path": str(path)})
            return None
        except OSError as exc:
            logger.error("Reading resource failed", extra={"path": str(path)})
            raise ResourceDownloadFailedError(
                message="Unable to read resource at this time",
                details={"name": name},
            ) from exc

        return contents

    def get_full_path(self, name: str, options: SaveOptionsLike = None) -> Path | None:
        """Resolve the absolute path a resource would be written to.

        Args:
            name: Resource name, relative to the base path
            options: ``folder`` is prepended to the name; with ``override``
                set to False an existing target yields None

        Returns:
            The target path, or None when the write must not happen
        """
        opts = SaveOptions.coerce(options)
        relative = join_folder(opts.folder, name)
        path = self._resolve(relative)

        if not opts.override and path.exists():
            logger.warning(
                "Refusing to override existing resource",
                extra={"path": str(path)},
            )
            return None

        return path

    def _resource_path(self, name: str) -> Path | None:
        """Resolve a name without folder option, or None when it names nothing."""
        relative = normalize_name(name)
        if not relative:
            return None
        return self._resolve(relative)

    def _resolve(self, relative: str) -> Path:
        if not relative:
            return self._base_path
        return self._base_path.joinpath(*relative.split(URL_SEPARATOR))

    def _prepare_target(self, name: str, options: SaveOptionsLike) -> Path | None:
        """Resolve the write target and create its parent directories."""
        if not normalize_name(name or ""):
            raise ValidationError(
                message="A resource name is required",
                details={"field": "name"},
            )

        target = self.get_full_path(name, options)
        if target is None:
            return None

        try:
            target.parent.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Creating resource directory failed", extra={"path": str(target.parent)})
            raise ResourceUploadFailedError(
                message="Unable to save resource at this time",
                details={"name": name},
            ) from exc

        return target

    def _copy(self, source: str, name: str, options: SaveOptionsLike) -> bool:
        target = self._prepare_target(name, options)
        if target is None:
            return False

        logger.debug("Copying file into storage", extra={"source": source, "path": str(target)})
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            logger.error("Copying file failed", extra={"source": source, "path": str(target)})
            raise ResourceUploadFailedError(
                message="Unable to save resource at this time",
                details={"name": name, "source": source},
            ) from exc

        logger.info("Resource saved successfully", extra={"path": str(target)})
        return True
