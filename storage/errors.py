class StorageError(Exception):
    """Base class for data-access failures."""


class IntegrityViolation(StorageError):
    """A write would break a uniqueness or reference rule."""
