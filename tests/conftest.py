"""Shared fixtures for the Reddit bridge function tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import azure.functions as func
import pytest

from tests.helpers import BRIDGE_URL

ENV_VARS = ("REDDIT_BRIDGE_URL", "REDDIT_BRIDGE_BYPASS_SECRET", "MCP_WRAPPER_KEY", "DEBUG_REQUEST_LOG")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from an unconfigured function app."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def bridge_env(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("REDDIT_BRIDGE_URL", BRIDGE_URL)
    return BRIDGE_URL


@pytest.fixture
def make_request() -> Callable[..., func.HttpRequest]:
    def _make(
        body: Any = None,
        method: str = "POST",
        headers: dict[str, str] | None = None,
        raw: bytes | None = None,
    ) -> func.HttpRequest:
        if raw is None:
            raw = json.dumps(body).encode("utf-8") if body is not None else b""
        return func.HttpRequest(
            method=method,
            url="https://func-reddit.azurewebsites.net/api/reddit-mcp",
            headers=headers or {"content-type": "application/json"},
            body=raw,
        )

    return _make

