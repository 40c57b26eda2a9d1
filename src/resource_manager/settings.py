"""Typed settings for the resource manager backends.

Settings are plain pydantic models so callers can build them in code; the
``from_env`` constructors read the environment variables named in
``resource_manager.utils.constants``.
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator
from pydantic import ValidationError as PydanticValidationError

from resource_manager.models.errors import ConfigurationError
from resource_manager.utils.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_HTTP_TIMEOUT,
    ENV_AWS_ACCESS_KEY_ID,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_AWS_SECRET_ACCESS_KEY,
    ENV_RESOURCE_BASE_PATH,
    ENV_RESOURCE_BASE_URL,
    ENV_RESOURCE_HTTP_TIMEOUT,
    ENV_RESOURCE_S3_BUCKET_NAME,
    ENV_RESOURCE_S3_STATIC_SITE_URL,
)


def _build(model: type[BaseModel], data: dict[str, Any]) -> Any:
    """Validate settings, raising ConfigurationError for missing or bad values."""
    try:
        return model(**data)
    except PydanticValidationError as exc:
        fields = sorted(".".join(str(x) for x in err.get("loc", [])) for err in exc.errors())
        raise ConfigurationError(
            message=f"{model.__name__} has missing or invalid settings: {', '.join(fields)}",
            details={"fields": fields},
        ) from exc


def _env(name: str) -> str | None:
    return os.getenv(name) or None


class FileSystemSettings(BaseModel):
    """Settings for the filesystem backend."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    base_path: str = Field(..., min_length=1, description="Upload directory")
    base_url: str = Field("", description="Public URL pointing at base_path")

    @field_validator("base_path")
    @classmethod
    def strip_trailing_separator(cls, value: str) -> str:
        stripped = value.rstrip("/" + os.sep)
        return stripped or value

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def create(cls, **data: Any) -> "FileSystemSettings":
        settings: FileSystemSettings = _build(cls, data)
        return settings

    @classmethod
    def from_env(cls) -> "FileSystemSettings":
        data: dict[str, Any] = {"base_path": _env(ENV_RESOURCE_BASE_PATH)}
        base_url = _env(ENV_RESOURCE_BASE_URL)
        if base_url is not None:
            data["base_url"] = base_url
        return cls.create(**data)


class S3Settings(BaseModel):
    """Settings for the object-storage backend."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    key: str = Field(..., min_length=1, description="Access key id")
    secret: str = Field(..., min_length=1, description="Secret access key")
    bucket: str = Field(..., min_length=1, description="Bucket holding the resources")
    region: str = Field(DEFAULT_AWS_REGION, min_length=1, description="Bucket region")
    static_site_base_url: str | None = Field(
        None, description="Base URL of the bucket's static website, if any"
    )
    endpoint_url: str | None = Field(
        None, description="Custom endpoint for S3-compatible services"
    )
    http_timeout: PositiveFloat = Field(
        DEFAULT_HTTP_TIMEOUT, description="Seconds allowed for public existence checks"
    )

    @field_validator("static_site_base_url")
    @classmethod
    def trim_static_site_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip("/") or None

    @field_validator("endpoint_url")
    @classmethod
    def trim_endpoint_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None

    @classmethod
    def create(cls, **data: Any) -> "S3Settings":
        settings: S3Settings = _build(cls, data)
        return settings

    @classmethod
    def from_env(cls) -> "S3Settings":
        data: dict[str, Any] = {
            "key": _env(ENV_AWS_ACCESS_KEY_ID),
            "secret": _env(ENV_AWS_SECRET_ACCESS_KEY),
            "bucket": _env(ENV_RESOURCE_S3_BUCKET_NAME),
            "static_site_base_url": _env(ENV_RESOURCE_S3_STATIC_SITE_URL),
            "endpoint_url": _env(ENV_AWS_ENDPOINT_URL),
        }
        region = _env(ENV_AWS_REGION)
        if region is not None:
            data["region"] = region
        timeout = _env(ENV_RESOURCE_HTTP_TIMEOUT)
        if timeout is not None:
            data["http_timeout"] = timeout
        return cls.create(**data)
