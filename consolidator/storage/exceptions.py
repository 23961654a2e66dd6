class StorageInitError(Exception):
    """Raised when the storage root cannot be scanned at startup."""
