"""
Unit tests for resource_manager.models.errors
"""

from typing import cast

from resource_manager.models.errors import (
    ConfigurationError,
    ResourceDeletionFailedError,
    ResourceDownloadFailedError,
    ResourceListingFailedError,
    ResourceManagerError,
    ResourceUploadFailedError,
    StorageError,
    ValidationError,
)


class TestResourceManagerError:
    def test_base_error(self) -> None:
        err = ResourceManagerError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert isinstance(err, Exception)
        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"


class TestConfigurationError:
    def test_configuration_error_defaults(self) -> None:
        err = ConfigurationError(message="bucket cannot be empty")

        assert err.error_code == "CONFIGURATION_ERROR"
        assert err.details == {}
        assert isinstance(err, ResourceManagerError)


class TestValidationError:
    def test_validation_error_defaults(self) -> None:
        err = ValidationError(message="Invalid input")

        assert err.error_code == "VALIDATION_FAILED"
        assert err.details == {}

    def test_validation_error_custom_code(self) -> None:
        err = ValidationError(message="Prefix required", error_code="EMPTY_PREFIX")

        assert err.error_code == "EMPTY_PREFIX"


class TestStorageErrors:
    def test_storage_error(self) -> None:
        err = StorageError(message="Backend failed", details={"operation": "head"})

        assert err.error_code == "STORAGE_ERROR"
        assert err.details == {"operation": "head"}

    def test_resource_upload_failed_error(self) -> None:
        err = ResourceUploadFailedError(message="Upload failed")
        typed = cast(StorageError, err)

        assert typed.error_code == "RESOURCE_UPLOAD_FAILED"

    def test_resource_download_failed_error(self) -> None:
        err = ResourceDownloadFailedError(message="Download failed")

        assert err.error_code == "RESOURCE_DOWNLOAD_FAILED"
        assert isinstance(err, StorageError)

    def test_resource_deletion_failed_error(self) -> None:
        err = ResourceDeletionFailedError(message="Delete failed")

        assert err.error_code == "RESOURCE_DELETION_FAILED"
        assert isinstance(err, StorageError)

    def test_resource_listing_failed_error(self) -> None:
        err = ResourceListingFailedError(message="List failed")

        assert err.error_code == "RESOURCE_LISTING_FAILED"
        assert isinstance(err, StorageError)
