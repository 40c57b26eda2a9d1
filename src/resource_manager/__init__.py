"""Resource Manager Package.

Store, read, list and delete named binary resources on a local directory or
an S3 bucket through one interface.
"""

from resource_manager.factory import create_resource_manager, get_resource_manager
from resource_manager.infrastructure.aws.s3_resource_manager import S3ResourceManager
from resource_manager.infrastructure.local.filesystem_resource_manager import (
    FileSystemResourceManager,
)
from resource_manager.models.options import ReadOptions, SaveOptions
from resource_manager.models.resource import (
    ExistenceStatus,
    ListingEntry,
    UploadedFile,
    UploadedFileHandle,
)
from resource_manager.repositories.resource_repository import ResourceManager
from resource_manager.settings import FileSystemSettings, S3Settings

__version__ = "1.0.0"
__description__ = (
    "Uniform storage of named binary resources on the local filesystem or Amazon S3"
)

__all__ = [
    "ExistenceStatus",
    "FileSystemResourceManager",
    "FileSystemSettings",
    "ListingEntry",
    "ReadOptions",
    "ResourceManager",
    "S3ResourceManager",
    "S3Settings",
    "SaveOptions",
    "UploadedFile",
    "UploadedFileHandle",
    "create_resource_manager",
    "get_resource_manager",
]
