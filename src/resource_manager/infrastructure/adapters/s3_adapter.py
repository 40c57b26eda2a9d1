"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Iterator, Mapping
import threading
from typing import Any, Protocol
from urllib.parse import quote

import boto3

from resource_manager.settings import S3Settings


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def get_object(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def head_object(self, *, Bucket: str, Key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, Bucket: str, Key: str) -> Mapping[str, Any]: ...

    def delete_objects(
        self,
        *,
        Bucket: str,
        Delete: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...

    def get_paginator(self, operation_name: str) -> Any: ...

    def generate_presigned_url(
        self,
        ClientMethod: str,
        Params: Mapping[str, Any],
        ExpiresIn: int,
    ) -> str: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (manager-facing)."""

    @property
    def bucket(self) -> str: ...

    @property
    def client(self) -> Any: ...

    def put_object(
        self,
        *,
        key: str,
        body: Any,
        acl: str,
        extra_params: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...

    def get_object(
        self,
        *,
        key: str,
        extra_params: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_objects(self, *, keys: list[str]) -> Mapping[str, Any]: ...

    def iter_objects(self, *, prefix: str) -> Iterator[Mapping[str, Any]]: ...

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str: ...

    def object_url(self, *, key: str) -> str: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client, created on first use and reused afterwards
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: S3Settings, client: Any | None = None) -> None:
        """Keep settings; the boto3 client is built lazily unless one is given."""
        self._settings = settings
        self._bucket = settings.bucket
        self._client: _Boto3S3Client | None = client
        self._client_lock = threading.Lock()

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> _Boto3S3Client:
        """Return the boto3 client, creating it exactly once."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = boto3.client(
                        "s3",
                        aws_access_key_id=self._settings.key,
                        aws_secret_access_key=self._settings.secret,
                        region_name=self._settings.region,
                        endpoint_url=self._settings.endpoint_url,
                    )
        return self._client

    def put_object(
        self,
        *,
        key: str,
        body: Any,
        acl: str,
        extra_params: Mapping[str, Any],
    ) -> Mapping[str, Any]:
        """Store object in S3; ``extra_params`` win over the defaults.
        Raises boto3 exceptions - caught by domain implementation.
        """
        params: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ACL": acl,
        }
        params.update(extra_params)
        return self.client.put_object(**params)

    def get_object(
        self,
        *,
        key: str,
        extra_params: Mapping[str, Any],
    ) -> Mapping[str, Any]:
        """Fetch object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key}
        params.update(extra_params)
        return self.client.get_object(**params)

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata (authenticated)."""
        return self.client.head_object(Bucket=self._bucket, Key=key)

    def delete_object(self, *, key: str) -> Mapping[str, Any]:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.client.delete_object(Bucket=self._bucket, Key=key)

    def delete_objects(self, *, keys: list[str]) -> Mapping[str, Any]:
        """Delete up to 1000 objects in a single request."""
        return self.client.delete_objects(
            Bucket=self._bucket,
            Delete={"Objects": [{"Key": key} for key in keys], "Quiet": False},
        )

    def iter_objects(self, *, prefix: str) -> Iterator[Mapping[str, Any]]:
        """Yield every object under ``prefix``, one page at a time."""
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            yield from page.get("Contents", [])

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str:
        """Generate a pre-signed S3 URL."""
        return self.client.generate_presigned_url(
            ClientMethod=method,
            Params={**params, "Bucket": self._bucket},
            ExpiresIn=expires_in,
        )

    def object_url(self, *, key: str) -> str:
        """Return the unsigned URL of an object.

        Path-style when a custom endpoint is configured, virtual-hosted
        otherwise.
        """
        quoted = quote(key, safe="/~")
        endpoint = self._settings.endpoint_url
        if endpoint:
            return f"{endpoint}/{self._bucket}/{quoted}"
        return f"https://{self._bucket}.s3.{self._settings.region}.amazonaws.com/{quoted}"
