"""Token-length budgeting for text sent to the embedding service."""
from __future__ import annotations

import logging
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


@lru_cache(maxsize=8)
def get_encoding(model_name: str) -> tiktoken.Encoding:
    """Resolve the tokenizer used by `model_name`."""

    try:
        return tiktoken.encoding_for_model(model_name)
    except KeyError:
        logger.warning(
            "Unknown tokenizer model %r, falling back to %s", model_name, DEFAULT_ENCODING
        )
        return tiktoken.get_encoding(DEFAULT_ENCODING)


def truncate(text: str, max_tokens: int, encoding: tiktoken.Encoding) -> str:
    """Return `text` cut to its first `max_tokens` tokens.

    Text already within the limit is returned unchanged.
    """

    tokens = encoding.encode(text, disallowed_special=())
    if len(tokens) <= max_tokens:
        return text
    # A cut inside a multi-byte character leaves a partial sequence; drop it.
    return encoding.decode_bytes(tokens[:max_tokens]).decode("utf-8", errors="ignore")


class TokenBudgeter:
    """Truncates text to the embedding model's input ceiling."""

    def __init__(self, model_name: str, max_tokens: int) -> None:
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.encoding = get_encoding(model_name)

    def truncate(self, text: str) -> str:
        return truncate(text, self.max_tokens, self.encoding)
