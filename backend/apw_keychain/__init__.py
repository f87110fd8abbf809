"""Client for the apw credential helper."""

from .client import APWClient, retrieve, retrieve_account
from .core.errors import ErrorKind, KeychainError, QueryError
from .models.entities import PASSWORD_NOT_INCLUDED, Account, AccountMap, Query, Result

__all__ = [
    "APWClient",
    "retrieve",
    "retrieve_account",
    "ErrorKind",
    "KeychainError",
    "QueryError",
    "PASSWORD_NOT_INCLUDED",
    "Account",
    "AccountMap",
    "Query",
    "Result",
]
