class StorageError(Exception):
    """Raised when the persistence backend cannot read or write a value."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Storage failure for '{key}': {message}")


class StaleWriteError(StorageError):
    """Raised when a versioned write targets a value someone else replaced."""

    def __init__(self, key: str, expected_version: int, actual_version: int):
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            key,
            f"expected version {expected_version}, found {actual_version}",
        )


class CorruptCollectionError(StorageError):
    """Raised instead of rewriting a stored collection that failed to load."""
