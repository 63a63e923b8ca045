"""
Token estimation for chat_retention.

This module provides the cheap character-based token estimate used by the
pruning engine, and an optional liteLLM-backed counter for hosts that want
model-accurate counts.
"""

import logging
import math
from typing import Callable, Iterable

from ..models import Message

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str], int]

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """
    Estimate the token cost of a piece of text.

    Roughly one token per four characters of English text. Empty text
    costs nothing.

    Args:
        text: Text to estimate

    Returns:
        ceil(len(text) / 4)
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_messages_tokens(
    messages: Iterable[Message], token_counter: TokenCounter = estimate_tokens
) -> int:
    """Sum the token cost of each message's content."""
    return sum(token_counter(message.content) for message in messages)


def create_litellm_token_counter(model_name: str) -> TokenCounter:
    """
    Create a token counter backed by liteLLM's model-aware tokenizer.

    Counting failures (unknown model, tokenizer download errors) fall back
    to the character estimate so that pruning never fails on a count.

    Args:
        model_name: Model name understood by liteLLM (e.g. "gpt-4o-mini")

    Returns:
        Callable mapping text to a token count
    """
    import litellm

    def count_tokens(text: str) -> int:
        if not text:
            return 0
        try:
            return litellm.token_counter(model=model_name, text=text)
        except Exception as e:
            logger.warning(f"liteLLM token counting failed: {e}, using fallback")
            return estimate_tokens(text)

    return count_tokens
