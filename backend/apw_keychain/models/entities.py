"""Typed records mirroring the JSON emitted by ``apw``."""

from __future__ import annotations

from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from apw_keychain.core.errors import ERROR_PREFIX, ErrorKind, KeychainError, QueryError

PASSWORD_NOT_INCLUDED = "Not Included"


class Account(BaseModel):
    """A stored username/password pair."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = ""
    # apw reports PASSWORD_NOT_INCLUDED when it withholds the secret
    password: str = Field(default="", repr=False)

    def get_password(self) -> str:
        """Return the password, raising if it is empty or withheld."""
        if not self.password:
            raise KeychainError(ErrorKind.EMPTY_PASSWORD, account=self)
        if self.password == PASSWORD_NOT_INCLUDED:
            raise KeychainError(ErrorKind.PASSWORD_NOT_INCLUDED, account=self)
        return self.password


class Result(Account):
    """One credential row as reported by apw."""

    domain: str = ""

    @property
    def account(self) -> Account:
        return Account(username=self.username, password=self.password)


class AccountMap(dict[str, list[Account]]):
    """Accounts grouped by domain, in the order apw returned them."""

    def lookup(self, domain: str, username: str) -> Account:
        accounts = self.get(domain)
        if accounts is None:
            raise KeychainError(ErrorKind.INVALID_DOMAIN)

        match = next((acct for acct in accounts if acct.username == username), None)
        if match is None:
            raise KeychainError(ErrorKind.INVALID_ACCOUNT)

        match.get_password()
        return match


class Query(BaseModel):
    """Full response envelope of a single apw invocation."""

    model_config = ConfigDict(extra="ignore")

    results: list[Result] = Field(default_factory=list)
    status: StrictInt = 0
    error: str = ""

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("error", mode="before")
    @classmethod
    def _null_error(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_json(cls, payload: bytes | str) -> "Query | None":
        """Decode raw apw output; a JSON ``null`` decodes to None.

        JSON and schema errors propagate as raised.
        """
        data = orjson.loads(payload)
        if data is None:
            return None
        return cls.model_validate(data)

    def to_json(self) -> bytes:
        data = self.model_dump()
        if not self.error:
            data.pop("error")
        return orjson.dumps(data)

    @property
    def failed(self) -> bool:
        # apw signals failure through status, message, or both
        return self.status != 0 or bool(self.error)

    def error_message(self) -> str:
        if self.status == 0 and not self.error:
            return ERROR_PREFIX + ErrorKind.DEFAULT.value
        return f"keychain (error {self.status}): {self.error}"

    def raise_for_status(self) -> None:
        if self.failed:
            raise QueryError(self.status, self.error, query=self)

    def to_map(self) -> AccountMap:
        """Group results by domain, preserving encounter order and duplicates."""
        self.raise_for_status()
        mapping = AccountMap()
        for result in self.results:
            mapping.setdefault(result.domain, []).append(result.account)
        return mapping


__all__ = ["PASSWORD_NOT_INCLUDED", "Account", "Result", "Query", "AccountMap"]
