"""
Storage errors
"""


class StorageError(Exception):
    """Base class for every failure raised by the local store"""


class StorageUnavailable(StorageError):
    """The store could not be opened, or was used after close(). Not retried."""


class StorageIOError(StorageError):
    """A single read or write against the store failed"""
