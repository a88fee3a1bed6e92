from __future__ import annotations


class StoreError(RuntimeError):
    """A query or delete against the live store failed."""


class StoreConnectionError(RuntimeError):
    """The initial connection to the store could not be established.

    Deliberately not a StoreError: callers that tolerate query failures
    must not swallow this one.
    """


class ArchiveWriteError(RuntimeError):
    """The archive artifact could not be created or written."""
