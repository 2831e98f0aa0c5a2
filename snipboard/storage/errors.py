"""Error types raised by the snippet storage engine."""


class StorageError(Exception):
    """Base class for all storage engine failures."""


class StorageUnavailable(StorageError):
    """The backing store could not be opened or is not open."""


class SchemaVersionMismatch(StorageUnavailable):
    """The database on disk was written by an incompatible schema version."""


class QueryFailed(StorageError):
    """A read operation failed in the underlying store."""


class WriteFailed(StorageError):
    """An insert or update failed; the transaction was rolled back."""


class LinkInsertionFailed(WriteFailed):
    """A snippet-to-tag link could not be inserted during save."""

    def __init__(self, snippet_name: str, tag_id: int):
        self.snippet_name = snippet_name
        self.tag_id = tag_id
        super().__init__(
            f"Failed to link snippet '{snippet_name}' to tag {tag_id}; "
            f"snippet was not saved."
        )


class ValidationError(StorageError):
    """Input rejected before any write was attempted."""
