"""Shared fixtures for storage client tests.

The backing store is replaced by FakeS3, an in-memory stand-in for the
boto3 S3 client that raises real botocore ClientErrors.
"""

import io
from typing import Any, Callable, Dict, Iterator, List

import pytest
from botocore.exceptions import ClientError

from s3library.storage.storage_client import StorageClient

TEST_BUCKET = "merlot-storage-test"
TEST_ROOT_DIRECTORY = "merlot"


def _client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakePaginator:
    """Pages through FakeS3 objects like the list_objects_v2 paginator."""

    def __init__(self, s3: "FakeS3") -> None:
        self._s3 = s3

    def paginate(self, Bucket: str, Prefix: str = "") -> Iterator[Dict[str, Any]]:
        self._s3.list_calls += 1
        self._s3.check_bucket(Bucket, "ListObjectsV2")
        keys = sorted(k for k in self._s3.objects if k.startswith(Prefix))
        page_size = self._s3.page_size

        if not keys:
            yield {"KeyCount": 0, "IsTruncated": False}
            return

        for start in range(0, len(keys), page_size):
            page_keys = keys[start:start + page_size]
            self._s3.pages_served += 1
            yield {
                "KeyCount": len(page_keys),
                "IsTruncated": start + page_size < len(keys),
                "Contents": [
                    {"Key": k, "Size": len(self._s3.objects[k])} for k in page_keys
                ],
            }


class FakeS3:
    """In-memory S3 client exposing the methods StorageClient uses.

    Attributes:
        bucket: The only bucket requests may address
        objects: Stored objects keyed by full object key
        page_size: Number of keys per listing page
        list_calls: Number of listings started
        pages_served: Number of non-empty listing pages returned
    """

    def __init__(self, bucket: str = TEST_BUCKET, page_size: int = 1000) -> None:
        self.bucket = bucket
        self.objects: Dict[str, bytes] = {}
        self.page_size = page_size
        self.list_calls = 0
        self.pages_served = 0

    def check_bucket(self, bucket: str, operation: str) -> None:
        if bucket != self.bucket:
            if operation == "HeadObject":
                # HEAD responses carry no body, only the status code
                raise _client_error("403", "Forbidden", operation)
            raise _client_error("AccessDenied", "Access Denied", operation)

    def get_paginator(self, operation_name: str) -> FakePaginator:
        assert operation_name == "list_objects_v2"
        return FakePaginator(self)

    def put_object(self, Bucket: str, Key: str, Body: bytes) -> Dict[str, Any]:
        self.check_bucket(Bucket, "PutObject")
        self.objects[Key] = bytes(Body)
        return {"ETag": '"fake"'}

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self.check_bucket(Bucket, "GetObject")
        if Key not in self.objects:
            raise _client_error("NoSuchKey", "The specified key does not exist.", "GetObject")
        data = self.objects[Key]
        return {"Body": io.BytesIO(data), "ContentLength": len(data)}

    def head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self.check_bucket(Bucket, "HeadObject")
        if Key not in self.objects:
            raise _client_error("404", "Not Found", "HeadObject")
        return {"ContentLength": len(self.objects[Key])}

    def delete_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self.check_bucket(Bucket, "DeleteObject")
        self.objects.pop(Key, None)
        return {}

    def keys(self) -> List[str]:
        return sorted(self.objects)


def make_client(bucket: str = TEST_BUCKET, root_directory: str = TEST_ROOT_DIRECTORY) -> StorageClient:
    """Create a StorageClient with dummy credentials for a local endpoint."""
    return StorageClient(
        access_key="DUMMY_ACCESS_KEY",
        secret="DUMMY_SECRET",
        service_endpoint="http://localhost:9000",
        signing_region="de",
        signer_type="S3SignerType",
        bucket=bucket,
        root_directory=root_directory,
    )


@pytest.fixture
def fake_s3_factory() -> Callable[..., FakeS3]:
    """Factory for backing stores, e.g. with a small page_size."""
    return FakeS3


@pytest.fixture
def client_factory() -> Callable[..., StorageClient]:
    """Factory for StorageClients with dummy credentials (bucket, root_directory)."""
    return make_client


@pytest.fixture
def fake_s3() -> FakeS3:
    """In-memory backing store holding the test bucket."""
    return FakeS3()


@pytest.fixture
def storage_client(fake_s3: FakeS3) -> StorageClient:
    """StorageClient wired to the in-memory backing store."""
    client = make_client()
    client._s3 = fake_s3
    return client


@pytest.fixture
def test_data() -> bytes:
    return "This is test data.".encode()
