"""Exception types shared across mongotui."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mongotui.core.context import QueryField


class MongoTUIError(Exception):
    """Base class for errors raised by mongotui itself."""


class StoreError(MongoTUIError):
    """A remote-store operation (list, find, count, sample) failed."""


class ConnectionFailedError(StoreError):
    """The store could not be reached, or the URI was rejected."""


class NotConnectedError(StoreError):
    """An operation needed a live client but none was connected."""

    def __init__(self) -> None:
        super().__init__("Not connected to a server")


class QueryValidationError(MongoTUIError):
    """A query-builder buffer could not be parsed.

    Attributes:
        field: The buffer that failed.
        message: Human readable reason, shown next to the field.
    """

    def __init__(self, field: QueryField, message: str) -> None:
        super().__init__(f"{field.label}: {message}")
        self.field = field
        self.message = message


def describe_error(error: BaseException) -> str:
    """Build the message shown in the error popup for an exception."""
    message = str(error).strip()
    if isinstance(error, MongoTUIError):
        return message or error.__class__.__name__
    if not message:
        return error.__class__.__name__
    return f"{error.__class__.__name__}: {message}"
