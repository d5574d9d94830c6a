"""Tests for the gptsearch CLI."""
from __future__ import annotations

import httpx

from gptsearch import cli as cli_module


class DummyResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            request = httpx.Request("GET", "http://localhost:8181/search")
            response = httpx.Response(self.status_code, request=request, text="Unauthorized")
            raise httpx.HTTPStatusError("request failed", request=request, response=response)
        return None

    def json(self):
        return self._payload


class DummyClient:
    instances: list["DummyClient"] = []
    status_code = 200

    def __init__(self, *args, **kwargs):
        self.calls = []
        self.kwargs = kwargs
        DummyClient.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def get(self, url, params=None, headers=None):
        self.calls.append({"method": "GET", "url": url, "params": params, "headers": headers})
        return DummyResponse(
            {"results": ["answer"], "links": ["https://a.test", ""], "date": "Sat 09 Mar 2024 14:05:07"},
            status_code=self.status_code,
        )

    def post(self, url, json=None, headers=None):
        self.calls.append({"method": "POST", "url": url, "json": json, "headers": headers})
        return DummyResponse(["paragraph"], status_code=self.status_code)


def _reset(monkeypatch, status_code=200):
    DummyClient.instances = []
    DummyClient.status_code = status_code
    monkeypatch.setattr(cli_module.httpx, "Client", DummyClient)


def test_cli_search_sends_bearer_token(monkeypatch, capsys):
    _reset(monkeypatch)

    exit_code = cli_module.main(
        ["search", "alan turing", "--api", "http://api.test/", "--token", "s3cret"]
    )

    assert exit_code == 0
    call = DummyClient.instances[0].calls[0]
    assert call["url"] == "http://api.test/search"
    assert call["params"] == {"q": "alan turing"}
    assert call["headers"] == {"Authorization": "Bearer s3cret"}
    out = capsys.readouterr().out
    assert "1. answer" in out
    assert "- https://a.test" in out


def test_cli_browse_posts_url_and_topic(monkeypatch, capsys):
    _reset(monkeypatch)
    monkeypatch.setenv("GPTSEARCH_AUTH_SECRET", "from-env")

    exit_code = cli_module.main(["browse", "https://page.test", "--topic", "history"])

    assert exit_code == 0
    call = DummyClient.instances[0].calls[0]
    assert call["url"] == "http://localhost:8181/browse"
    assert call["json"] == {"url": "https://page.test", "topic": "history"}
    assert call["headers"] == {"Authorization": "Bearer from-env"}
    assert "1. paragraph" in capsys.readouterr().out


def test_cli_reports_http_errors(monkeypatch, capsys):
    _reset(monkeypatch, status_code=401)

    exit_code = cli_module.main(["search", "q", "--token", "wrong"])

    assert exit_code == 1
    assert "Request failed" in capsys.readouterr().out
