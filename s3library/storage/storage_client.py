"""Reference-scoped client for S3-compatible object storage.

This module provides a StorageClient that stores binary items under a
caller-supplied reference id. Every item is addressed by
``(reference_id, key)`` and kept at ``<root>/<reference_id>/<key>`` in a
single bucket. It works with any S3-compatible service including MinIO,
AWS S3, and others.

Key features:
- Namespacing of items by reference id
- Lazy, paginated listing of a reference id's items
- Classification of SDK errors into ItemNotFoundError / StorageAccessError
- Tagged delete result instead of an exception for missing items
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from s3library.storage.exceptions import (
    ClientCreationError,
    ItemNotFoundError,
    StorageAccessError,
)
from s3library.storage.keys import compose_key, scope_prefix, strip_prefix

if TYPE_CHECKING:
    from s3library.core.config import StorageSettings

# Signer names from older client configurations mapped to botocore signature versions
LEGACY_SIGNER_TYPES = {
    "S3SignerType": "s3",
    "AWSS3V4SignerType": "s3v4",
    "AWS4SignerType": "v4",
}

# Signature versions that sign ordinary header-authenticated requests
REQUEST_SIGNERS = frozenset({"s3", "s3v4", "v4"})

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def resolve_signature_version(signer_type: str) -> str:
    """Map a signer type to a botocore signature version.

    Args:
        signer_type: Request signature version (s3, s3v4, v4) or legacy signer name

    Returns:
        botocore signature version name

    Raises:
        ClientCreationError: If the signer type is not recognized
    """
    signature_version = LEGACY_SIGNER_TYPES.get(signer_type, signer_type)
    if signature_version not in REQUEST_SIGNERS:
        raise ClientCreationError(f"Unknown signer type: {signer_type}")
    return signature_version


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _is_not_found(error: ClientError) -> bool:
    return _error_code(error) in NOT_FOUND_CODES


class DeleteResult(Enum):
    """Outcome of StorageClient.delete_item.

    Truthy only for DELETED so the result can be used as a boolean.
    """

    DELETED = "deleted"
    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return self is DeleteResult.DELETED


class ItemListing:
    """Lazy, restartable listing of the items of one reference id.

    Each iteration pages through the backing store from the start and
    yields keys relative to the reference id.

    Attributes:
        reference_id: Reference id being listed
        prefix: Object key prefix shared by the reference id's items
    """

    def __init__(self, s3: Any, bucket: str, reference_id: str, prefix: str) -> None:
        self._s3 = s3
        self._bucket = bucket
        self.reference_id = reference_id
        self.prefix = prefix

    def __iter__(self) -> Iterator[str]:
        logger.debug(f"Listing items under {self.prefix}")
        paginator = self._s3.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket, Prefix=self.prefix):
                for obj in page.get("Contents", []):
                    yield strip_prefix(obj["Key"], self.prefix)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Listing {self.prefix} failed: {e}")
            raise StorageAccessError(str(e)) from e

    def __repr__(self) -> str:
        return f"ItemListing(reference_id={self.reference_id!r}, prefix={self.prefix!r})"


class StorageClient:
    """S3-compatible storage client scoped by reference id.

    The client holds a single boto3 S3 client, which is immutable after
    construction, so one StorageClient can be shared between threads.
    No retries are done here; retry behavior is whatever botocore is
    configured with.

    Attributes:
        bucket: Name of the bucket holding all items
        root_directory: Directory prepended to every object key (may be empty)
        _s3: Boto3 S3 client instance
    """

    def __init__(
        self,
        access_key: str,
        secret: str,
        service_endpoint: str,
        signing_region: str,
        signer_type: str,
        bucket: str,
        root_directory: str = "",
    ) -> None:
        """Initialize StorageClient.

        Building the boto3 client does not contact the service, so bad
        credentials or an unreachable endpoint only show up on first use.

        Args:
            access_key: Access key ID
            secret: Secret access key
            service_endpoint: Service endpoint URL (e.g. http://localhost:9000)
            signing_region: Region used to sign requests
            signer_type: botocore signature version or legacy signer name
            bucket: Name of bucket to use for storage
            root_directory: Optional directory prepended to every object key

        Raises:
            ClientCreationError: If the signer type is unknown or the
                client configuration is malformed
        """
        signature_version = resolve_signature_version(signer_type)

        try:
            self._s3 = boto3.client(
                "s3",
                endpoint_url=service_endpoint,
                region_name=signing_region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret,
                config=boto3.session.Config(signature_version=signature_version),
            )
        except (ValueError, BotoCoreError) as e:
            raise ClientCreationError(str(e)) from e

        self.bucket = bucket
        self.root_directory = root_directory

        logger.info(
            f"Initialized StorageClient for bucket {bucket} at {service_endpoint} "
            f"(root directory: {root_directory or '<none>'})"
        )

    @classmethod
    def from_settings(cls, settings: "StorageSettings") -> "StorageClient":
        """Create a StorageClient from loaded settings.

        Args:
            settings: Storage settings

        Returns:
            Configured StorageClient
        """
        return cls(
            access_key=settings.access_key,
            secret=settings.secret,
            service_endpoint=settings.service_endpoint,
            signing_region=settings.signing_region,
            signer_type=settings.signer_type,
            bucket=settings.bucket,
            root_directory=settings.root_directory,
        )

    def list_items(self, reference_id: str) -> ItemListing:
        """List the items stored under a reference id.

        The listing is lazy: nothing is requested until it is iterated,
        and every iteration starts a fresh paginated listing. An unknown
        reference id yields no items.

        Args:
            reference_id: Scope of the items

        Returns:
            Iterable of keys relative to the reference id

        Example:
            >>> keys = list(client.list_items("test:01"))
        """
        prefix = scope_prefix(self.root_directory, reference_id)
        return ItemListing(self._s3, self.bucket, reference_id, prefix)

    def push_item(self, reference_id: str, key: str, data: bytes) -> str:
        """Store an item, overwriting any existing item with the same key.

        Args:
            reference_id: Scope to push the item to
            key: Name of the item
            data: Item content

        Returns:
            Object key the item was stored under

        Raises:
            StorageAccessError: If the upload fails
        """
        composed_key = compose_key(self.root_directory, reference_id, key)
        logger.debug(f"Pushing {len(data)} bytes to {composed_key}")

        try:
            self._s3.put_object(Bucket=self.bucket, Key=composed_key, Body=data)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Push to {composed_key} failed: {e}")
            raise StorageAccessError(str(e)) from e

        return composed_key

    def get_item(self, reference_id: str, key: str) -> bytes:
        """Fetch the full content of an item.

        Args:
            reference_id: Scope from where to get the item
            key: Name of the item

        Returns:
            Item content

        Raises:
            ItemNotFoundError: If the item does not exist
            StorageAccessError: If the download fails for any other reason
        """
        composed_key = compose_key(self.root_directory, reference_id, key)
        logger.debug(f"Getting {composed_key}")

        try:
            response = self._s3.get_object(Bucket=self.bucket, Key=composed_key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except ClientError as e:
            if _is_not_found(e):
                raise ItemNotFoundError(str(e), reference_id=reference_id, key=key) from e
            logger.warning(f"Get of {composed_key} failed: {e}")
            raise StorageAccessError(str(e)) from e
        except BotoCoreError as e:
            logger.warning(f"Get of {composed_key} failed: {e}")
            raise StorageAccessError(str(e)) from e

    def delete_item(self, reference_id: str, key: str) -> DeleteResult:
        """Delete an item if it exists.

        Args:
            reference_id: Scope from where to delete the item
            key: Name of the item

        Returns:
            DeleteResult.DELETED, or DeleteResult.NOT_FOUND if there was
            no such item

        Raises:
            StorageAccessError: If the existence check or delete fails
        """
        composed_key = compose_key(self.root_directory, reference_id, key)

        try:
            if not self._exists(composed_key):
                logger.debug(f"Nothing to delete at {composed_key}")
                return DeleteResult.NOT_FOUND
            self._s3.delete_object(Bucket=self.bucket, Key=composed_key)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Delete of {composed_key} failed: {e}")
            raise StorageAccessError(str(e)) from e

        logger.debug(f"Deleted {composed_key}")
        return DeleteResult.DELETED

    def _exists(self, composed_key: str) -> bool:
        """Check if an object exists.

        Args:
            composed_key: Full object key

        Returns:
            True if the object exists, False otherwise
        """
        try:
            self._s3.head_object(Bucket=self.bucket, Key=composed_key)
            return True
        except ClientError as e:
            if _is_not_found(e):
                return False
            # Other errors should be raised
            raise

    def __repr__(self) -> str:
        return f"StorageClient(bucket={self.bucket!r}, root_directory={self.root_directory!r})"
