"""
Conversation statistics and the pruning trigger.
"""

import math
from typing import Sequence

from ..models import DEFAULT_PRUNING_CONFIG, ConversationStats, Message, PruningConfig
from ..pruning.token_estimator import CHARS_PER_TOKEN


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def conversation_age_hours(messages: Sequence[Message]) -> int:
    """
    Hours between the oldest and newest timestamped messages.

    Messages without a timestamp are ignored. Fewer than two timestamped
    messages give 0.
    """
    timestamps = [
        timestamp
        for timestamp in (message.timestamp_utc() for message in messages)
        if timestamp is not None
    ]
    if len(timestamps) < 2:
        return 0
    span = max(timestamps) - min(timestamps)
    return _round_half_up(span.total_seconds() / 3600)


def _exceeds_trigger(
    total_messages: int, estimated_tokens: int, age_hours: int, trigger: PruningConfig
) -> bool:
    return (
        total_messages > trigger.max_messages
        or estimated_tokens > trigger.max_tokens
        or age_hours > trigger.max_age_hours
    )


def conversation_stats(
    messages: Sequence[Message], trigger: PruningConfig = DEFAULT_PRUNING_CONFIG
) -> ConversationStats:
    """
    Summarize a transcript.

    Args:
        messages: Transcript to summarize
        trigger: Configuration whose numeric thresholds decide needs_pruning

    Returns:
        ConversationStats for the transcript
    """
    total_messages = len(messages)
    total_characters = sum(len(message.content) for message in messages)
    avg_message_length = total_characters / total_messages if total_messages else 0
    estimated_tokens = math.ceil(total_characters / CHARS_PER_TOKEN)
    age_hours = conversation_age_hours(messages)

    return ConversationStats(
        total_messages=total_messages,
        total_characters=total_characters,
        avg_message_length=_round_half_up(avg_message_length),
        estimated_tokens=estimated_tokens,
        conversation_age_hours=age_hours,
        needs_pruning=_exceeds_trigger(
            total_messages, estimated_tokens, age_hours, trigger
        ),
    )


def needs_pruning(
    messages: Sequence[Message], trigger: PruningConfig = DEFAULT_PRUNING_CONFIG
) -> bool:
    """
    Check whether a transcript crosses the fixed pruning trigger.

    Only the trigger's max_messages, max_tokens and max_age_hours are
    consulted; the adaptive configuration plays no part here.
    """
    return conversation_stats(messages, trigger).needs_pruning
