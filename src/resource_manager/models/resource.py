"""Shared resource models."""

from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, NonNegativeInt, StrictStr


@runtime_checkable
class UploadedFile(Protocol):
    """Handle produced by an upstream request layer for an uploaded file.

    Only the temporary source path and the original filename are read; the
    handle's lifecycle (including removing the temporary file) stays with
    the caller.
    """

    @property
    def temp_name(self) -> str: ...

    @property
    def name(self) -> str: ...


class UploadedFileHandle(BaseModel):
    """Concrete uploaded-file handle."""

    temp_name: StrictStr = Field(..., description="Temporary path holding the upload")
    name: StrictStr = Field(..., description="Original filename sent by the client")


class ListingEntry(BaseModel):
    """One object returned by an object-storage listing."""

    path: StrictStr = Field(..., description="Full object key")
    name: StrictStr = Field(..., description="Last path segment of the key")
    type: StrictStr = Field(..., description="Storage class reported by the backend")
    size: NonNegativeInt = Field(..., description="Object size in bytes")


class ExistenceStatus(str, Enum):
    """Outcome of a public existence check.

    ``FORBIDDEN`` means the backend refused the anonymous read: the resource
    may exist but is not publicly readable.
    """

    EXISTS = "exists"
    MISSING = "missing"
    FORBIDDEN = "forbidden"
