# src/sister_sync/tasks/errors.py

from __future__ import annotations


class SisterSyncError(Exception):
    """Base class for every error raised by the task core."""


class StorageWriteError(SisterSyncError):
    """The durable slot refused a write (quota exceeded, storage disabled, I/O error)."""


class StorageReadCorruption(SisterSyncError):
    """The persisted value could not be read or parsed."""


class SyncError(SisterSyncError):
    """A sync code or import payload was rejected; the store is left untouched."""


class DecodeFailure(SyncError):
    """The sync code is not valid base64, percent-escaping or JSON."""


class NotACollection(SyncError):
    """The decoded payload is not a list of task records."""


class AIUnavailable(SisterSyncError):
    """The language model could not be reached or returned nothing usable."""
