"""Exceptions raised by the scoped storage client.

All errors coming out of the underlying S3 SDK are rewrapped into this
small taxonomy so callers never have to import botocore to handle them.
"""

from typing import Optional


class StorageClientError(Exception):
    """Base class for all storage client errors."""


class ClientCreationError(StorageClientError):
    """Raised when the storage client cannot be constructed.

    Covers unrecognized signer types and malformed client configuration
    (e.g. an invalid endpoint URL). Nothing has been sent over the network
    when this is raised.
    """


class StorageAccessError(StorageClientError):
    """Raised when the backing store rejects or fails a request.

    The message is the one reported by the underlying SDK.
    """


class ItemNotFoundError(StorageAccessError):
    """Raised when the addressed item does not exist in the backing store."""

    def __init__(
        self,
        message: str,
        reference_id: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.reference_id = reference_id
        self.key = key
