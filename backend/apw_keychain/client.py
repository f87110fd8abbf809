"""Invocation of the external ``apw`` executable."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from apw_keychain.core.config import Settings, get_settings
from apw_keychain.core.errors import ErrorKind, KeychainError
from apw_keychain.models.entities import Account, Query

logger = logging.getLogger(__name__)


class APWClient:
    """Runs apw subcommands and decodes their responses.

    Each call spawns one process and blocks until it exits. There is no
    timeout or retry; call duration is whatever apw takes.
    """

    def __init__(self, apw_path: Path | str) -> None:
        self.apw_path = Path(apw_path).expanduser()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "APWClient":
        settings = settings or get_settings()
        return cls(settings.apw_path)

    def call(self, *args: str) -> Query | None:
        """Run apw with ``args`` and decode its combined stdout/stderr.

        Returns None when apw answers with a JSON ``null``. Launch failures,
        non-zero exits without output and malformed payloads propagate as
        raised. A response that reports its own failure raises QueryError with
        the decoded query attached.
        """
        cmd = [str(self.apw_path), *args]
        logger.debug("Invoking apw", extra={"ctx_args": list(args)})
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
        output = proc.stdout
        if proc.returncode != 0 and not output:
            # nothing to decode, surface the exit status itself
            raise subprocess.CalledProcessError(proc.returncode, cmd, output=output)
        if proc.returncode != 0:
            logger.debug("apw exited with %s, decoding its output", proc.returncode)

        query = Query.from_json(output)
        if query is None:
            return None
        if query.failed:
            logger.info(
                "apw reported failure",
                extra={"ctx_status": query.status, "ctx_error": query.error},
            )
        query.raise_for_status()
        return query

    def retrieve(self, domain: str) -> Query:
        """Fetch every stored credential apw knows for ``domain``."""
        query = self.call("pw", "get", domain)
        if query is None:
            raise KeychainError(ErrorKind.DEFAULT)
        logger.debug("Retrieved credentials", extra={"ctx_domain": domain, "ctx_count": len(query.results)})
        return query

    def retrieve_account(self, domain: str, username: str) -> Account:
        """Resolve a single account with a usable password."""
        return self.retrieve(domain).to_map().lookup(domain, username)


def retrieve(domain: str) -> Query:
    return APWClient.from_settings().retrieve(domain)


def retrieve_account(domain: str, username: str) -> Account:
    return APWClient.from_settings().retrieve_account(domain, username)


__all__ = ["APWClient", "retrieve", "retrieve_account"]
