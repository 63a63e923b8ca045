"""
Tests for conversation statistics and the pruning trigger.
"""

from datetime import datetime, timedelta, timezone

from chat_retention.models import Message, MessageRole, PruningConfig
from chat_retention.policy.stats_reporter import (
    conversation_age_hours,
    conversation_stats,
    needs_pruning,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_message(content: str = "hi", hours_ago: float = None) -> Message:
    timestamp = NOW - timedelta(hours=hours_ago) if hours_ago is not None else None
    return Message(role=MessageRole.USER, content=content, timestamp=timestamp)


class TestConversationStats:
    """Test aggregate statistics."""

    def test_empty(self):
        stats = conversation_stats([])

        assert stats.total_messages == 0
        assert stats.total_characters == 0
        assert stats.avg_message_length == 0
        assert stats.estimated_tokens == 0
        assert stats.conversation_age_hours == 0
        assert stats.needs_pruning is False

    def test_basic_counts(self):
        stats = conversation_stats([make_message("abcd"), make_message("abcdef")])

        assert stats.total_messages == 2
        assert stats.total_characters == 10
        assert stats.avg_message_length == 5
        # ceil(10 / 4) over the whole transcript
        assert stats.estimated_tokens == 3

    def test_average_rounds_half_up(self):
        stats = conversation_stats([make_message("a"), make_message("ab")])
        assert stats.avg_message_length == 2

    def test_to_dict(self):
        data = conversation_stats([make_message("abcd")]).to_dict()

        assert data == {
            "total_messages": 1,
            "total_characters": 4,
            "avg_message_length": 4,
            "estimated_tokens": 1,
            "conversation_age_hours": 0,
            "needs_pruning": False,
        }


class TestConversationAge:
    """Test the timestamp span."""

    def test_needs_two_timestamps(self):
        assert conversation_age_hours([make_message(hours_ago=30)]) == 0
        assert conversation_age_hours([make_message(), make_message(hours_ago=30)]) == 0

    def test_span_between_oldest_and_newest(self):
        """Untimestamped and out-of-order messages do not matter."""
        messages = [
            make_message(hours_ago=10),
            make_message(),
            make_message(hours_ago=40),
            make_message(hours_ago=2),
            make_message(),
        ]
        assert conversation_age_hours(messages) == 38

    def test_rounds_to_whole_hours(self):
        messages = [make_message(hours_ago=0), make_message(hours_ago=24.4)]
        assert conversation_age_hours(messages) == 24


class TestNeedsPruning:
    """Test the fixed pruning trigger."""

    def test_short_conversation(self):
        assert needs_pruning([make_message() for _ in range(50)]) is False

    def test_message_count(self):
        assert needs_pruning([make_message() for _ in range(51)]) is True

    def test_token_estimate(self):
        assert needs_pruning([make_message("x" * 40000)]) is False
        assert needs_pruning([make_message("x" * 40001)]) is True

    def test_conversation_age(self):
        assert needs_pruning([make_message(hours_ago=24), make_message(hours_ago=0)]) is False
        assert needs_pruning([make_message(hours_ago=25), make_message(hours_ago=0)]) is True

    def test_custom_trigger(self):
        trigger = PruningConfig(max_messages=2, max_tokens=10000, max_age_hours=24)

        assert needs_pruning([make_message() for _ in range(3)], trigger) is True
        assert conversation_stats([make_message()], trigger).needs_pruning is False
