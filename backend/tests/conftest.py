"""Test fixtures for apw-keychain."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Callable

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset cached settings and environment between tests."""
    from apw_keychain.core.config import get_settings

    for key in list(os.environ):
        if key.startswith("APWK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("APWK_CONFIG", str(tmp_path / "missing.yaml"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_apw(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable that prints canned output and records its argv."""

    def _make(output: str, exit_code: int = 0, stream: str = "stdout") -> Path:
        script = tmp_path / "apw"
        argv_file = tmp_path / "argv.json"
        script.write_text(
            f"#!{sys.executable}\n"
            "import json, sys\n"
            f"with open({str(argv_file)!r}, 'w') as fh:\n"
            "    json.dump(sys.argv[1:], fh)\n"
            f"sys.{stream}.write({output!r})\n"
            f"sys.{stream}.flush()\n"
            f"sys.exit({exit_code})\n",
            encoding="utf-8",
        )
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def recorded_argv(tmp_path: Path) -> Callable[[], list[str]]:
    def _read() -> list[str]:
        return json.loads((tmp_path / "argv.json").read_text(encoding="utf-8"))

    return _read


@pytest.fixture(scope="session")
def sample_payload() -> dict:
    return {
        "results": [
            {"username": "bob", "password": "secret", "domain": "example.com"},
            {"username": "alice", "password": "Not Included", "domain": "example.com"},
            {"username": "carol", "password": "", "domain": "example.com"},
            {"username": "bob", "password": "other", "domain": "example.com"},
            {"username": "dave", "password": "hunter2", "domain": "example.org"},
        ],
        "status": 0,
    }
