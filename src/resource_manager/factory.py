"""Build the resource manager selected by configuration."""

import os

from aws_lambda_powertools import Logger

from resource_manager.infrastructure.aws.s3_resource_manager import S3ResourceManager
from resource_manager.infrastructure.local.filesystem_resource_manager import (
    FileSystemResourceManager,
)
from resource_manager.models.errors import ConfigurationError
from resource_manager.repositories.resource_repository import ResourceManager
from resource_manager.settings import FileSystemSettings, S3Settings
from resource_manager.utils.constants import (
    BACKEND_FILESYSTEM,
    BACKEND_S3,
    ENV_RESOURCE_MANAGER_BACKEND,
    SUPPORTED_BACKENDS,
)

logger = Logger(UTC=True)

_MANAGER: ResourceManager | None = None


def create_resource_manager(backend: str | None = None) -> ResourceManager:
    """Return a new manager for ``backend`` (or the configured one).

    Settings for the chosen backend are read from the environment.

    Raises:
        ConfigurationError: Unknown backend or missing settings
    """
    configured = backend or os.getenv(ENV_RESOURCE_MANAGER_BACKEND) or BACKEND_FILESYSTEM
    name = configured.strip().lower()

    if name not in SUPPORTED_BACKENDS:
        raise ConfigurationError(
            message=f"Unsupported resource manager backend '{name}'",
            details={"backend": name, "supported": sorted(SUPPORTED_BACKENDS)},
        )

    logger.debug("Creating resource manager", extra={"backend": name})

    if name == BACKEND_S3:
        return S3ResourceManager(S3Settings.from_env())
    return FileSystemResourceManager(FileSystemSettings.from_env())


def get_resource_manager() -> ResourceManager:
    """Return the configured manager, created once per process."""
    global _MANAGER
    if _MANAGER is None:
        _MANAGER = create_resource_manager()
    return _MANAGER


def reset_resource_manager() -> None:
    """Forget the cached manager so the next call re-reads configuration."""
    global _MANAGER
    _MANAGER = None
