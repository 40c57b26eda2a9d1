"""S3-backed implementation of ResourceManager."""

from datetime import datetime, timedelta, timezone
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError
import requests

from resource_manager.infrastructure.adapters.http_adapter import (
    HttpAdapter,
    HttpAdapterProtocol,
)
from resource_manager.infrastructure.adapters.s3_adapter import (
    S3Adapter,
    S3AdapterProtocol,
)
from resource_manager.models.errors import (
    ResourceDeletionFailedError,
    ResourceDownloadFailedError,
    ResourceListingFailedError,
    ResourceUploadFailedError,
    StorageError,
    ValidationError,
)
from resource_manager.models.options import ReadOptions, SaveOptions
from resource_manager.models.resource import ExistenceStatus, ListingEntry, UploadedFile
from resource_manager.repositories.resource_repository import (
    ReadOptionsLike,
    ResourceManager,
    SaveOptionsLike,
)
from resource_manager.settings import S3Settings
from resource_manager.utils.constants import (
    DELETE_OBJECTS_BATCH_SIZE,
    ERROR_CODE_EMPTY_PREFIX,
    ERROR_CODE_PRESIGNED_URL_FAILED,
    FORBIDDEN_STATUS_CODES,
    NOT_FOUND_ERROR_CODES,
    URL_SEPARATOR,
)
from resource_manager.utils.paths import key_basename

logger = Logger(UTC=True)


def _is_not_found(exc: ClientError) -> bool:
    error = exc.response.get("Error", {})
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return error.get("Code") in NOT_FOUND_ERROR_CODES or status == 404


class S3ResourceManager(ResourceManager):
    """Resource manager backed by an S3 bucket.

    Objects are written with a public-read ACL unless the save options say
    otherwise, which is what makes ``get_url`` links and ``file_exists``
    checks work without credentials.
    """

    def __init__(
        self,
        settings: S3Settings,
        *,
        adapter: S3AdapterProtocol | None = None,
        http: HttpAdapterProtocol | None = None,
    ) -> None:
        """Create the manager; the S3 client itself is built on first use."""
        self._settings = settings
        self._s3 = adapter or S3Adapter(settings)
        self._http = http or HttpAdapter(timeout=settings.http_timeout)

    @property
    def bucket(self) -> str:
        return self._settings.bucket

    def get_client(self) -> Any:
        """Return the underlying boto3 S3 client."""
        return self._s3.client

    def save(
        self,
        file: UploadedFile,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Upload the file at ``file.temp_name``; name defaults to ``file.name``."""
        return self.save_file(file.temp_name, name or file.name, options)

    def save_file(
        self,
        path: str,
        name: str | None = None,
        options: SaveOptionsLike = None,
    ) -> bool:
        """Upload a local file. The object key must be given explicitly."""
        key = self._require_name(name)
        opts = SaveOptions.coerce(options)

        try:
            with open(path, "rb") as source:
                return self._put(key=key, body=source, options=opts)
        except OSError as exc:
            logger.error("Unable to read source file", extra={"path": path, "key": key})
            raise ResourceUploadFailedError(
                message="Unable to read the file to upload",
                details={"path": path, "key": key},
            ) from exc

    def save_contents(
        self,
        body: bytes | str,
        name: str,
        options: SaveOptionsLike = None,
    ) -> bool:
        key = self._require_name(name)
        data = body.encode("utf-8") if isinstance(body, str) else body
        return self._put(key=key, body=data, options=SaveOptions.coerce(options))

    def delete(self, name: str) -> bool:
        """Delete an object.

        The object is looked up first so the result is True only when
        something was actually removed. Versioned buckets report a deletion
        marker even for missing keys, so that flag is only logged.
        """
        logger.debug("Deleting resource", extra={"key": name})

        try:
            self._s3.head_object(key=name)
        except ClientError as exc:
            if _is_not_found(exc):
                logger.info("Resource to delete does not exist", extra={"key": name})
                return False
            logger.error("S3 lookup before deletion failed", extra={"key": name})
            raise ResourceDeletionFailedError(
                message="Unable to delete resource at this time",
                details={"key": name},
            ) from exc
        except BotoCoreError as exc:
            logger.error("S3 lookup before deletion failed", extra={"key": name})
            raise ResourceDeletionFailedError(
                message="Unable to delete resource at this time",
                details={"key": name},
            ) from exc

        try:
            response = self._s3.delete_object(key=name)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"key": name})
            raise ResourceDeletionFailedError(
                message="Unable to delete resource at this time",
                details={"key": name},
            ) from exc

        logger.info(
            "Resource deleted successfully",
            extra={"key": name, "delete_marker": bool(response.get("DeleteMarker", False))},
        )
        return True

    def check_existence(self, name: str) -> ExistenceStatus:
        """Probe the public URL of ``name`` without credentials.

        Returns:
            EXISTS for a successful read, FORBIDDEN when the backend refuses
            the anonymous read (the object may still exist), MISSING otherwise

        Raises:
            StorageError: On transport failures and server-side errors
        """
        url = self.get_url(name)

        try:
            status = self._http.head_status(url)
        except requests.RequestException as exc:
            logger.error("Public existence check failed", extra={"key": name})
            raise StorageError(
                message="Unable to check whether the resource exists",
                details={"key": name},
            ) from exc

        if 200 <= status < 300:
            return ExistenceStatus.EXISTS
        if status in FORBIDDEN_STATUS_CODES:
            return ExistenceStatus.FORBIDDEN
        if status < 500:
            return ExistenceStatus.MISSING

        logger.error(
            "Public existence check returned a server error",
            extra={"key": name, "status": status},
        )
        raise StorageError(
            message="Unable to check whether the resource exists",
            details={"key": name, "status": status},
        )

    def file_exists(self, name: str) -> bool:
        """Return True only for publicly readable objects.

        A private object answers the anonymous check with 403 and is reported
        as missing. Use ``check_existence`` to tell the two cases apart.
        """
        status = self.check_existence(name)
        if status is ExistenceStatus.FORBIDDEN:
            logger.warning(
                "Resource is not publicly readable, reporting it as missing",
                extra={"key": name},
            )
        return status is ExistenceStatus.EXISTS

    def get_url(
        self,
        name: str,
        expires: int | timedelta | datetime | None = None,
    ) -> str:
        """Return the static-site URL, the plain object URL or a signed URL.

        Args:
            name: Object key
            expires: Lifetime in seconds, a timedelta, or an absolute
                expiry time. When given the URL is pre-signed.
        """
        if expires is None:
            if self._settings.static_site_base_url:
                return f"{self._settings.static_site_base_url}{URL_SEPARATOR}{name}"
            return self._s3.object_url(key=name)

        expires_in = self._expires_in_seconds(expires)
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": name, "expires_in": expires_in},
        )

        try:
            url: str = self._s3.generate_presigned_url(
                method="get_object",
                params={"Key": name},
                expires_in=expires_in,
            )
            return url
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to generate pre-signed URL", extra={"key": name})
            raise StorageError(
                message="Unable to generate resource access URL",
                error_code=ERROR_CODE_PRESIGNED_URL_FAILED,
                details={"key": name},
            ) from exc

    def get_file_contents(
        self,
        name: str,
        options: ReadOptionsLike = None,
    ) -> bytes | None:
        opts = ReadOptions.coerce(options)
        logger.debug("Downloading resource", extra={"key": name})

        try:
            response = self._s3.get_object(key=name, extra_params=opts.extra_params)
            body: bytes = response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                logger.info("Resource not found", extra={"key": name})
                return None

            logger.error("S3 download failed", extra={"key": name})
            raise ResourceDownloadFailedError(
                message="Unable to download resource at this time",
                details={"key": name},
            ) from exc
        except BotoCoreError as exc:
            logger.error("S3 download failed", extra={"key": name})
            raise ResourceDownloadFailedError(
                message="Unable to download resource at this time",
                details={"key": name},
            ) from exc

        logger.info("Resource downloaded successfully", extra={"key": name, "size": len(body)})
        return body

    def delete_matching_objects(self, prefix: str) -> int:
        """Delete every object whose key starts with ``prefix``.

        Args:
            prefix: Key prefix; must not be empty

        Returns:
            Number of deleted keys

        Raises:
            ValidationError: If the prefix is empty (no request is sent)
            ResourceDeletionFailedError: If listing or deleting fails
        """
        if not prefix:
            raise ValidationError(
                message="A key prefix is required to delete matching objects",
                error_code=ERROR_CODE_EMPTY_PREFIX,
            )

        logger.debug("Deleting objects by prefix", extra={"prefix": prefix})
        deleted = 0
        batch: list[str] = []

        try:
            for obj in self._s3.iter_objects(prefix=prefix):
                batch.append(obj["Key"])
                if len(batch) == DELETE_OBJECTS_BATCH_SIZE:
                    deleted += self._delete_batch(batch, prefix)
                    batch = []
            if batch:
                deleted += self._delete_batch(batch, prefix)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 bulk deletion failed", extra={"prefix": prefix, "count": deleted})
            raise ResourceDeletionFailedError(
                message="Unable to delete resources at this time",
                details={"prefix": prefix, "deleted": deleted},
            ) from exc

        logger.info("Objects deleted by prefix", extra={"prefix": prefix, "count": deleted})
        return deleted

    def list_files(self, directory: str) -> list[ListingEntry]:
        """List the objects under ``directory``, skipping folder placeholders."""
        logger.debug("Listing resources", extra={"prefix": directory})
        files: list[ListingEntry] = []

        try:
            for obj in self._s3.iter_objects(prefix=directory):
                key: str = obj["Key"]
                if key.endswith(URL_SEPARATOR):
                    continue
                files.append(
                    ListingEntry(
                        path=key,
                        name=key_basename(key),
                        type=obj.get("StorageClass", "STANDARD"),
                        size=int(obj.get("Size", 0)),
                    )
                )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed", extra={"prefix": directory})
            raise ResourceListingFailedError(
                message="Unable to list resources at this time",
                details={"prefix": directory},
            ) from exc

        logger.info("Resources listed", extra={"prefix": directory, "count": len(files)})
        return files

    def _put(self, *, key: str, body: Any, options: SaveOptions) -> bool:
        logger.debug("Uploading resource", extra={"key": key, "acl": options.acl})

        try:
            self._s3.put_object(
                key=key,
                body=body,
                acl=options.acl,
                extra_params=options.extra_params,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise ResourceUploadFailedError(
                message="Unable to upload resource at this time",
                details={"key": key},
            ) from exc

        logger.info("Resource uploaded successfully", extra={"key": key})
        return True

    def _delete_batch(self, keys: list[str], prefix: str) -> int:
        response = self._s3.delete_objects(keys=keys)
        errors = response.get("Errors", [])
        if errors:
            logger.error(
                "Some objects could not be deleted",
                extra={"prefix": prefix, "errors": len(errors)},
            )
            raise ResourceDeletionFailedError(
                message="Unable to delete all matching resources",
                details={"prefix": prefix, "failed_keys": [e.get("Key") for e in errors]},
            )
        return len(response.get("Deleted", []))

    @staticmethod
    def _require_name(name: str | None) -> str:
        if not name:
            raise ValidationError(
                message="An object key is required",
                details={"field": "name"},
            )
        return name

    @staticmethod
    def _expires_in_seconds(expires: int | timedelta | datetime) -> int:
        """Convert the accepted expiry forms into a positive number of seconds."""
        if isinstance(expires, datetime):
            moment = expires if expires.tzinfo else expires.replace(tzinfo=timezone.utc)
            seconds = int((moment - datetime.now(timezone.utc)).total_seconds())
        elif isinstance(expires, timedelta):
            seconds = int(expires.total_seconds())
        else:
            seconds = int(expires)

        if seconds <= 0:
            raise ValidationError(
                message="URL expiry must be in the future",
                details={"expires": str(expires)},
            )
        return seconds
