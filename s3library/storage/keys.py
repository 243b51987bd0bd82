"""Object key composition for reference-scoped items.

Items live under ``<root_directory>/<reference_id>/<key>``. When no root
directory is configured the leading segment is omitted.
"""


def scope_prefix(root_directory: str, reference_id: str) -> str:
    """Return the prefix shared by every item of a reference id.

    Args:
        root_directory: Configured root directory (may be empty)
        reference_id: Caller-chosen namespace

    Returns:
        Prefix ending in ``/``

    Example:
        >>> scope_prefix("merlot", "test:01")
        'merlot/test:01/'
    """
    if root_directory:
        return f"{root_directory}/{reference_id}/"
    return f"{reference_id}/"


def compose_key(root_directory: str, reference_id: str, key: str) -> str:
    """Return the full object key of an item."""
    return scope_prefix(root_directory, reference_id) + key


def strip_prefix(object_key: str, prefix: str) -> str:
    """Make an object key relative to ``prefix``.

    Keys that do not start with the prefix are returned unchanged.
    """
    if object_key.startswith(prefix):
        return object_key[len(prefix):]
    return object_key
