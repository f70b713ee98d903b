"""Shared pytest fixtures and test helpers for commandwire tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from commandwire.config.settings import WireSettings
from commandwire.domain.command import Command, RequestOptions


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep COMMANDWIRE_* variables from the host environment out of tests."""
    for name in (
        "COMMANDWIRE_CONFIG",
        "COMMANDWIRE_HOST",
        "COMMANDWIRE_VERBOSE",
        "COMMANDWIRE_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> WireSettings:
    """Default settings with config discovery rooted in an empty temp dir."""
    return WireSettings.load(start=tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_command(
    path: str = "/1/indexes/products",
    method: str = "GET",
    *,
    body: bytes | None = None,
    headers: dict[str, str] | None = None,
    url_parameters: dict[str, str] | None = None,
    options_body: dict[str, Any] | None = None,
) -> Command:
    """Build a Command, attaching RequestOptions only when an option is given."""
    request_options = None
    if headers is not None or url_parameters is not None or options_body is not None:
        request_options = RequestOptions(
            headers=headers or {},
            url_parameters=url_parameters,
            body=options_body,
        )
    return Command(path=path, method=method, body=body, request_options=request_options)
