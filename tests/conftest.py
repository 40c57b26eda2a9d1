"""
Pytest configuration and fixtures for resource manager tests.
Provides AWS mocking, S3 bucket fixtures and filesystem managers.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from resource_manager.factory import reset_resource_manager
from resource_manager.infrastructure.aws.s3_resource_manager import S3ResourceManager
from resource_manager.infrastructure.local.filesystem_resource_manager import (
    FileSystemResourceManager,
)
from resource_manager.models.resource import UploadedFileHandle
from resource_manager.settings import FileSystemSettings, S3Settings

TEST_BUCKET = "test-resource-bucket"
TEST_REGION = "us-east-1"
TEST_BASE_URL = "https://cdn.example.com/uploads"

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", TEST_REGION)
os.environ.setdefault("AWS_DEFAULT_REGION", TEST_REGION)
os.environ.setdefault("RESOURCE_S3_BUCKET_NAME", TEST_BUCKET)


@pytest.fixture(autouse=True)
def _reset_cached_manager() -> Iterator[None]:
    reset_resource_manager()
    yield
    reset_resource_manager()


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=TEST_REGION)


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=TEST_BUCKET)

    yield s3_client

    _cleanup_s3_objects(s3_client, TEST_BUCKET)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[[str, bytes], dict[str, Any]]:
    """
    Helper to upload an object to S3 directly.

    Usage:
        s3_put_object("docs/a.txt", b"hello")
    """

    def _put(key: str, body: bytes) -> dict[str, Any]:
        response: dict[str, Any] = s3_client.put_object(Bucket=TEST_BUCKET, Key=key, Body=body)
        return response

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to read an object from S3 directly.

    Usage:
        content = s3_get_object("docs/a.txt")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_client.get_object(Bucket=TEST_BUCKET, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_settings() -> S3Settings:
    return S3Settings(key="testing", secret="testing", bucket=TEST_BUCKET, region=TEST_REGION)


@pytest.fixture
def s3_manager(s3_bucket, s3_settings) -> S3ResourceManager:
    """S3 manager using a real adapter against the moto bucket."""
    return S3ResourceManager(s3_settings)


@pytest.fixture
def fs_settings(tmp_path: Path) -> FileSystemSettings:
    return FileSystemSettings(base_path=str(tmp_path / "uploads"), base_url=TEST_BASE_URL)


@pytest.fixture
def fs_manager(fs_settings) -> FileSystemResourceManager:
    return FileSystemResourceManager(fs_settings)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Local file used as a copy source."""
    path = tmp_path / "incoming" / "report.pdf"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"%PDF-1.4 sample")
    return path


@pytest.fixture
def uploaded_file(tmp_path: Path) -> UploadedFileHandle:
    """Uploaded-file handle whose temporary file holds a tiny PNG header."""
    temp = tmp_path / "tmp" / "upload-1234"
    temp.parent.mkdir(parents=True)
    temp.write_bytes(b"\x89PNG\r\n\x1a\n")
    return UploadedFileHandle(temp_name=str(temp), name="avatar.png")
