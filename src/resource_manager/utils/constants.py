"""Global constants used throughout the resource manager.

Error codes, environment variable names and backend defaults live here so
both storage variants and the factory agree on them.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Configuration / Validation Errors
ERROR_CODE_CONFIGURATION = "CONFIGURATION_ERROR"
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_EMPTY_PREFIX = "EMPTY_PREFIX"

# Not Found Errors

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_RESOURCE_UPLOAD_FAILED = "RESOURCE_UPLOAD_FAILED"
ERROR_CODE_RESOURCE_DOWNLOAD_FAILED = "RESOURCE_DOWNLOAD_FAILED"
ERROR_CODE_RESOURCE_DELETION_FAILED = "RESOURCE_DELETION_FAILED"
ERROR_CODE_RESOURCE_LISTING_FAILED = "RESOURCE_LISTING_FAILED"
ERROR_CODE_PRESIGNED_URL_FAILED = "PRESIGNED_URL_FAILED"


# ============================================================================
# Backends
# ============================================================================

BACKEND_FILESYSTEM: Final = "filesystem"
BACKEND_S3: Final = "s3"
SUPPORTED_BACKENDS: Final[frozenset[str]] = frozenset({BACKEND_FILESYSTEM, BACKEND_S3})


# ============================================================================
# Object Storage Defaults
# ============================================================================

DEFAULT_AWS_REGION = "us-east-1"
CANNED_ACL_PUBLIC_READ = "public-read"
DEFAULT_CANNED_ACL = CANNED_ACL_PUBLIC_READ

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_OBJECTS_BATCH_SIZE = 1000

NOT_FOUND_ERROR_CODES: Final[frozenset[str]] = frozenset({"NoSuchKey", "404", "NotFound"})
FORBIDDEN_STATUS_CODES: Final[frozenset[int]] = frozenset({401, 403})

DEFAULT_HTTP_TIMEOUT = 10.0


# ============================================================================
# Filesystem Defaults
# ============================================================================

DIRECTORY_MODE = 0o777
URL_SEPARATOR = "/"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_RESOURCE_MANAGER_BACKEND = "RESOURCE_MANAGER_BACKEND"
ENV_RESOURCE_BASE_PATH = "RESOURCE_BASE_PATH"
ENV_RESOURCE_BASE_URL = "RESOURCE_BASE_URL"
ENV_AWS_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_AWS_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_AWS_REGION = "AWS_REGION"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_RESOURCE_S3_BUCKET_NAME = "RESOURCE_S3_BUCKET_NAME"
ENV_RESOURCE_S3_STATIC_SITE_URL = "RESOURCE_S3_STATIC_SITE_URL"
ENV_RESOURCE_HTTP_TIMEOUT = "RESOURCE_HTTP_TIMEOUT"
