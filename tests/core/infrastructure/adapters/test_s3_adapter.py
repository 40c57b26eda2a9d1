import pytest
from botocore.exceptions import ClientError

from resource_manager.infrastructure.adapters.s3_adapter import S3Adapter
from resource_manager.settings import S3Settings

BUCKET = "test-resource-bucket"


class TestS3Adapter:
    def test_client_is_created_lazily_and_once(self, s3_settings, aws_mock):
        adapter = S3Adapter(s3_settings)

        assert adapter._client is None

        client = adapter.client

        assert client is adapter.client

    def test_injected_client_is_used(self, s3_settings):
        sentinel = object()

        adapter = S3Adapter(s3_settings, client=sentinel)

        assert adapter.client is sentinel

    def test_put_and_get_object_success(self, s3_settings, s3_bucket, s3_get_object):
        adapter = S3Adapter(s3_settings)

        adapter.put_object(
            key="docs/a.txt",
            body=b"hello",
            acl="public-read",
            extra_params={"ContentType": "text/plain"},
        )

        assert s3_get_object("docs/a.txt") == b"hello"
        response = adapter.get_object(key="docs/a.txt", extra_params={})
        assert response["ContentType"] == "text/plain"

    def test_extra_params_override_defaults(self, s3_settings, s3_bucket):
        adapter = S3Adapter(s3_settings)

        adapter.put_object(
            key="private.txt",
            body=b"x",
            acl="public-read",
            extra_params={"ACL": "private"},
        )

        acl = s3_bucket.get_object_acl(Bucket=BUCKET, Key="private.txt")
        uris = [grant["Grantee"].get("URI", "") for grant in acl["Grants"]]
        assert not any(uri.endswith("AllUsers") for uri in uris)

    def test_get_object_missing_key_raises_client_error(self, s3_settings, s3_bucket):
        adapter = S3Adapter(s3_settings)

        with pytest.raises(ClientError) as exc:
            adapter.get_object(key="missing.txt", extra_params={})

        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_head_object_missing_key_raises_client_error(self, s3_settings, s3_bucket):
        adapter = S3Adapter(s3_settings)

        with pytest.raises(ClientError) as exc:
            adapter.head_object(key="missing.txt")

        assert exc.value.response["ResponseMetadata"]["HTTPStatusCode"] == 404

    def test_delete_object_success(self, s3_settings, s3_bucket, s3_put_object, s3_get_object):
        adapter = S3Adapter(s3_settings)
        s3_put_object("docs/delete.txt", b"data")

        adapter.delete_object(key="docs/delete.txt")

        with pytest.raises(ClientError) as exc:
            s3_get_object("docs/delete.txt")

        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_iter_objects_and_delete_objects(self, s3_settings, s3_bucket, s3_put_object):
        adapter = S3Adapter(s3_settings)
        for key in ("a/1.txt", "a/2.txt", "b/3.txt"):
            s3_put_object(key, b"x")

        keys = sorted(obj["Key"] for obj in adapter.iter_objects(prefix="a/"))
        assert keys == ["a/1.txt", "a/2.txt"]

        response = adapter.delete_objects(keys=keys)
        assert len(response["Deleted"]) == 2
        assert list(adapter.iter_objects(prefix="a/")) == []

    def test_put_object_bubbles_client_error(self, monkeypatch, s3_settings, s3_bucket):
        adapter = S3Adapter(s3_settings)

        def raise_error(**_):
            raise ClientError({"Error": {"Code": "InternalError"}}, "PutObject")

        monkeypatch.setattr(adapter.client, "put_object", raise_error)

        with pytest.raises(ClientError):
            adapter.put_object(key="x.txt", body=b"data", acl="public-read", extra_params={})

    def test_generate_presigned_url(self, s3_settings, aws_mock):
        adapter = S3Adapter(s3_settings)

        url = adapter.generate_presigned_url(
            method="get_object",
            params={"Key": "docs/a.txt"},
            expires_in=60,
        )

        assert BUCKET in url
        assert "docs/a.txt" in url
        assert "Expires=" in url or "X-Amz-Expires=60" in url


class TestObjectUrl:
    def test_virtual_hosted_url(self):
        adapter = S3Adapter(S3Settings(key="k", secret="s", bucket="assets", region="eu-west-1"))

        assert (
            adapter.object_url(key="docs/my file.txt")
            == "https://assets.s3.eu-west-1.amazonaws.com/docs/my%20file.txt"
        )

    def test_path_style_url_with_custom_endpoint(self):
        adapter = S3Adapter(
            S3Settings(key="k", secret="s", bucket="assets", endpoint_url="http://localhost:4566")
        )

        assert adapter.object_url(key="a.txt") == "http://localhost:4566/assets/a.txt"
