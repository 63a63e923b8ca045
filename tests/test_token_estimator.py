"""
Tests for token estimation.
"""

from unittest.mock import patch

from chat_retention.models import Message, MessageRole
from chat_retention.pruning.token_estimator import (
    create_litellm_token_counter,
    estimate_messages_tokens,
    estimate_tokens,
)


class TestEstimateTokens:
    """Test the character-based estimate."""

    def test_empty_text(self) -> None:
        """Empty text costs nothing."""
        assert estimate_tokens("") == 0

    def test_rounds_up(self) -> None:
        """Partial groups of four characters count as a full token."""
        assert estimate_tokens("a") == 1
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_long_text(self) -> None:
        """2000 characters estimate to 500 tokens."""
        assert estimate_tokens("x" * 2000) == 500

    def test_estimate_messages_tokens(self) -> None:
        """Token counts are summed per message, not over joined text."""
        messages = [
            Message(role=MessageRole.USER, content="a"),
            Message(role=MessageRole.ASSISTANT, content="b"),
        ]
        assert estimate_messages_tokens(messages) == 2

    def test_estimate_messages_tokens_custom_counter(self) -> None:
        """A custom counter is applied to each message."""
        messages = [Message(role=MessageRole.USER, content="hello")] * 3
        assert estimate_messages_tokens(messages, lambda text: 7) == 21


class TestLiteLLMTokenCounter:
    """Test the liteLLM-backed counter."""

    @patch("litellm.token_counter")
    def test_counts_with_litellm(self, mock_token_counter) -> None:
        """Counts come from liteLLM with the configured model."""
        mock_token_counter.return_value = 25

        counter = create_litellm_token_counter("gpt-4o-mini")
        count = counter("This is a test sentence.")

        assert count == 25
        mock_token_counter.assert_called_once_with(
            model="gpt-4o-mini", text="This is a test sentence."
        )

    @patch("litellm.token_counter")
    def test_empty_text_skips_litellm(self, mock_token_counter) -> None:
        """Empty text is not sent to the tokenizer."""
        counter = create_litellm_token_counter("gpt-4o-mini")

        assert counter("") == 0
        mock_token_counter.assert_not_called()

    @patch("litellm.token_counter")
    def test_falls_back_on_error(self, mock_token_counter) -> None:
        """A tokenizer failure falls back to the character estimate."""
        mock_token_counter.side_effect = Exception("unknown model")

        counter = create_litellm_token_counter("not-a-model")

        assert counter("Test text") == estimate_tokens("Test text")
