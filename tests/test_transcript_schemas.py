"""
Tests for host transcript schemas.
"""

from datetime import datetime, timezone

import pytest

from chat_retention.exceptions import TranscriptError, ValidationError
from chat_retention.models import Message, MessageRole, PruningResult
from chat_retention.transcript.schemas import (
    MessageSchema,
    dump_pruning_result,
    dump_transcript,
    parse_transcript,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestParseTranscript:
    """Test payload parsing."""

    def test_parse_basic(self):
        messages = parse_transcript(
            [
                {"role": "user", "content": "Create a contact for Ada"},
                {
                    "role": "assistant",
                    "content": "Contact created",
                    "action": "contact_created",
                    "timestamp": "2026-01-01T12:00:00Z",
                },
            ]
        )

        assert len(messages) == 2
        assert messages[0].role == MessageRole.USER
        assert messages[0].timestamp is None
        assert messages[1].action == "contact_created"
        assert messages[1].timestamp == NOW

    def test_epoch_milliseconds(self):
        """Numeric timestamps are JavaScript epoch milliseconds."""
        millis = int(NOW.timestamp() * 1000)

        messages = parse_transcript([{"role": "user", "content": "hi", "timestamp": millis}])

        assert messages[0].timestamp == NOW

    def test_extra_fields_become_metadata(self):
        messages = parse_transcript(
            [{"role": "assistant", "content": "ok", "contactId": "c-1", "objectType": "contact"}]
        )

        assert messages[0].metadata == {"contactId": "c-1", "objectType": "contact"}

    def test_unknown_role_kept_as_text(self):
        messages = parse_transcript([{"role": "narrator", "content": "..."}])

        assert messages[0].role == "narrator"
        assert messages[0].role_name == "narrator"

    def test_wrapped_object(self):
        messages = parse_transcript({"messages": [{"role": "user", "content": "hi"}]})
        assert messages == [Message(role=MessageRole.USER, content="hi")]

    def test_missing_content(self):
        with pytest.raises(TranscriptError) as exc_info:
            parse_transcript(
                [{"role": "user", "content": "fine"}, {"role": "assistant"}]
            )

        assert exc_info.value.index == 1
        assert exc_info.value.field == "content"
        assert "Message index: 1" in str(exc_info.value)

    def test_bad_timestamp(self):
        with pytest.raises(TranscriptError) as exc_info:
            parse_transcript([{"role": "user", "content": "x", "timestamp": "yesterday"}])

        assert exc_info.value.field == "timestamp"

    def test_not_a_list(self):
        with pytest.raises(TranscriptError):
            parse_transcript("hello")

    def test_object_without_messages(self):
        with pytest.raises(TranscriptError) as exc_info:
            parse_transcript({"turns": []})

        assert exc_info.value.field == "messages"

    def test_transcript_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            parse_transcript([{"content": "no role"}])


class TestDumpTranscript:
    """Test serialization back to the host."""

    def test_omits_empty_fields(self):
        data = dump_transcript([Message(role=MessageRole.USER, content="hi")])
        assert data == [{"role": "user", "content": "hi"}]

    def test_round_trips_metadata_and_timestamp(self):
        message = Message(
            role=MessageRole.ASSISTANT,
            content="Deal updated",
            timestamp=NOW,
            action="deal_updated",
            metadata={"dealId": "d-9"},
        )

        data = dump_transcript([message])[0]

        assert data["dealId"] == "d-9"
        assert data["action"] == "deal_updated"
        assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")) == NOW
        assert parse_transcript([data]) == [message]
        assert parse_transcript([data])[0].metadata == {"dealId": "d-9"}

    def test_from_message_ignores_colliding_metadata(self):
        message = Message(role=MessageRole.USER, content="hi", metadata={"content": "other"})

        assert MessageSchema.from_message(message).content == "hi"


class TestDumpPruningResult:
    def test_camel_case_keys(self):
        kept = Message(role=MessageRole.USER, content="keep")
        dropped = Message(role=MessageRole.USER, content="drop")
        result = PruningResult(
            messages=[kept],
            pruned_messages=[dropped],
            reason="Pruned 1 messages to stay within limit of 1",
            original_count=2,
            remaining_count=1,
            pruned_count=1,
            original_tokens=2,
            remaining_tokens=1,
            strategy_steps=["count"],
        )

        data = dump_pruning_result(result)

        assert data["originalCount"] == 2
        assert data["remainingCount"] == 1
        assert data["prunedCount"] == 1
        assert data["prunedMessages"] == [{"role": "user", "content": "drop"}]
        assert data["messages"] == [{"role": "user", "content": "keep"}]
        assert data["strategySteps"] == ["count"]
        assert data["reason"].startswith("Pruned 1")
