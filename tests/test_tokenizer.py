"""Tests for token-length budgeting."""
from __future__ import annotations

import pytest

from app.services import tokenizer
from app.services.tokenizer import TokenBudgeter, truncate


def test_truncate_returns_text_unchanged_within_limit(byte_encoding):
    text = "short paragraph"

    assert truncate(text, len(text), byte_encoding) == text
    assert truncate(text, 100, byte_encoding) == text


def test_truncate_keeps_exactly_the_first_tokens(byte_encoding):
    text = "The quick brown fox jumps over the lazy dog"

    result = truncate(text, 9, byte_encoding)

    assert result == "The quick"
    assert len(byte_encoding.encode(result)) == 9


@pytest.mark.parametrize("limit", [1, 5, 12, 40])
def test_truncate_is_bounded_and_idempotent(byte_encoding, limit):
    text = "lorem ipsum dolor sit amet " * 3

    once = truncate(text, limit, byte_encoding)

    assert len(byte_encoding.encode(once)) <= limit
    assert truncate(once, limit, byte_encoding) == once


def test_token_budgeter_uses_model_encoding(monkeypatch, byte_encoding):
    requested = []

    def fake_get_encoding(model_name):
        requested.append(model_name)
        return byte_encoding

    monkeypatch.setattr(tokenizer, "get_encoding", fake_get_encoding)

    budgeter = TokenBudgeter("gpt-3.5-turbo-16k", 4)

    assert requested == ["gpt-3.5-turbo-16k"]
    assert budgeter.truncate("abcdefgh") == "abcd"


def test_token_budgeter_rejects_non_positive_limit(monkeypatch, byte_encoding):
    monkeypatch.setattr(tokenizer, "get_encoding", lambda _name: byte_encoding)

    with pytest.raises(ValueError):
        TokenBudgeter("gpt-3.5-turbo-16k", 0)


def test_truncate_drops_partial_multibyte_character(byte_encoding):
    # "é" is two bytes; a limit of 4 cuts between them.
    result = truncate("café au lait", 4, byte_encoding)

    assert result == "caf"
    assert "�" not in result
    assert len(byte_encoding.encode(result)) <= 4
    assert truncate(result, 4, byte_encoding) == result


@pytest.mark.parametrize("limit", [1, 2, 3, 5, 7, 10])
def test_truncate_bound_holds_for_non_ascii_text(byte_encoding, limit):
    text = "naïve résumé über 東京"

    result = truncate(text, limit, byte_encoding)

    assert len(byte_encoding.encode(result)) <= limit
    assert text.startswith(result)
