"""Shared fixtures: settings isolation, offline tokenizer and mocked HTTP."""
from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest
import tiktoken

from app.config import get_settings

TEST_SECRET = "test-secret"

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("GPTSEARCH_AUTH_SECRET", TEST_SECRET)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def byte_encoding() -> tiktoken.Encoding:
    """Byte-level encoding (one token per byte) that needs no download."""

    return tiktoken.Encoding(
        name="test-bytes",
        pat_str=r"\S+|\s+",
        mergeable_ranks={bytes([idx]): idx for idx in range(256)},
        special_tokens={},
    )


@pytest.fixture
def mock_http(monkeypatch: pytest.MonkeyPatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], None]:
    """Route every `httpx.AsyncClient` created by the code under test to `handler`."""

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        class _MockedAsyncClient(_RealAsyncClient):
            def __init__(self, *args, **kwargs) -> None:
                kwargs["transport"] = httpx.MockTransport(handler)
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", _MockedAsyncClient)

    return install
