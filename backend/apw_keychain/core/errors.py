"""Error taxonomy for keychain lookups."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apw_keychain.models.entities import Account, Query

ERROR_PREFIX = "keychain error: "


class ErrorKind(str, Enum):
    """Closed set of failure kinds; match on these, not on message text."""

    DEFAULT = "unknown"
    INVALID_DOMAIN = "invalid domain"
    INVALID_ACCOUNT = "invalid account"
    EMPTY_PASSWORD = "empty password"
    PASSWORD_NOT_INCLUDED = "password not included"


class KeychainError(Exception):
    """Classified keychain failure.

    ``account`` is set when a matching account was found but its password
    state is unusable, so callers can still inspect the entry.
    """

    def __init__(self, kind: ErrorKind = ErrorKind.DEFAULT, account: "Account | None" = None) -> None:
        self.kind = kind
        self.account = account
        # args mirror the constructor so copy and pickle rebuild the error
        super().__init__(kind, account)

    def __str__(self) -> str:
        return ERROR_PREFIX + self.kind.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"


class QueryError(KeychainError):
    """Failure reported by apw itself in its response envelope."""

    def __init__(self, status: int, message: str, query: "Query | None" = None) -> None:
        self.kind = ErrorKind.DEFAULT
        self.account = None
        self.status = status
        self.message = message
        self.query = query
        Exception.__init__(self, status, message, query)

    def __str__(self) -> str:
        if self.status == 0 and not self.message:
            return ERROR_PREFIX + ErrorKind.DEFAULT.value
        return f"keychain (error {self.status}): {self.message}"

    def __repr__(self) -> str:
        return f"QueryError(status={self.status!r}, message={self.message!r})"


__all__ = ["ERROR_PREFIX", "ErrorKind", "KeychainError", "QueryError"]
