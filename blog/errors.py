"""
Store error taxonomy.

A missing row is never an exception: reads return ``None`` (or an empty list)
and callers decide what absence means for them.
"""


class StoreError(Exception):
    """Base class for failures talking to the data store."""


class FetchError(StoreError):
    """The store is unreachable or the query was malformed."""


class ConstraintError(StoreError):
    """The store rejected a write (duplicate unique key, empty required field, ...)."""


class UnknownTableError(StoreError, KeyError):
    """The caller named a table the store does not expose."""

    def __str__(self) -> str:
        return f"unknown table: {self.args[0]!r}" if self.args else "unknown table"
