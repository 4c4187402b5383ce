class StorageError(Exception):
    """Raised when a source file cannot be fetched from storage."""
