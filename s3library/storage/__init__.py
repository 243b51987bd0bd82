"""Storage package for S3-compatible object storage.

This package provides a client that scopes items by reference id and
classifies SDK failures into a small set of exceptions.
"""

from s3library.storage.exceptions import (
    ClientCreationError,
    ItemNotFoundError,
    StorageAccessError,
    StorageClientError,
)
from s3library.storage.storage_client import DeleteResult, ItemListing, StorageClient

__all__ = [
    "ClientCreationError",
    "DeleteResult",
    "ItemListing",
    "ItemNotFoundError",
    "StorageAccessError",
    "StorageClient",
    "StorageClientError",
]
