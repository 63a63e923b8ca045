"""
Adaptive selection of pruning configurations.

Two decision tables derive a PruningConfig from the shape of a transcript.
select_config() feeds the pruning path; recommended_config() answers callers
that only want a suggestion and ignores message length. The two are kept
separate on purpose.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..models import (
    DEFAULT_PRUNING_CONFIG,
    Message,
    PruningConfig,
    PruningResult,
    SelectionStrategy,
)
from ..pruning.pruning_engine import ConversationPruner

logger = logging.getLogger(__name__)

VERY_LONG_CONVERSATION = 100
LONG_CONVERSATION = 50
LONG_MESSAGE_CHARS = 500

# Very long conversation: aggressive pruning
VERY_LONG_CONVERSATION_CONFIG = PruningConfig(
    max_messages=30,
    max_tokens=8000,
    max_age_hours=12,
    preserve_important=True,
    preserve_last_n=15,
)

# Long conversation: moderate pruning
LONG_CONVERSATION_CONFIG = PruningConfig(
    max_messages=40,
    max_tokens=9000,
    max_age_hours=18,
    preserve_important=True,
    preserve_last_n=12,
)

# Long messages: keep a shorter tail
LONG_MESSAGES_CONFIG = PruningConfig(
    max_messages=35,
    max_tokens=8000,
    max_age_hours=24,
    preserve_important=True,
    preserve_last_n=8,
)


def average_message_length(messages: Sequence[Message]) -> float:
    """Mean content length in characters; 0.0 for an empty transcript."""
    if not messages:
        return 0.0
    return sum(len(message.content) for message in messages) / len(messages)


def select_config(messages: Sequence[Message]) -> PruningConfig:
    """
    Choose pruning parameters from message count and average length.

    Rows are checked in order and the first match wins; longer or
    chattier histories are pruned harder.

    Args:
        messages: Transcript to inspect

    Returns:
        PruningConfig for the matching row
    """
    message_count = len(messages)

    if message_count > VERY_LONG_CONVERSATION:
        config = VERY_LONG_CONVERSATION_CONFIG
    elif message_count > LONG_CONVERSATION:
        config = LONG_CONVERSATION_CONFIG
    elif average_message_length(messages) > LONG_MESSAGE_CHARS:
        config = LONG_MESSAGES_CONFIG
    else:
        config = DEFAULT_PRUNING_CONFIG

    logger.debug(f"Selected pruning config for {message_count} messages: {config}")
    return config


def recommended_config(messages: Sequence[Message]) -> PruningConfig:
    """Suggest a configuration from message count alone."""
    message_count = len(messages)

    if message_count > VERY_LONG_CONVERSATION:
        return VERY_LONG_CONVERSATION_CONFIG
    elif message_count > LONG_CONVERSATION:
        return LONG_CONVERSATION_CONFIG
    else:
        return DEFAULT_PRUNING_CONFIG


def config_for_strategy(
    messages: Sequence[Message],
    strategy: SelectionStrategy = SelectionStrategy.ADAPTIVE,
) -> PruningConfig:
    if strategy == SelectionStrategy.RECOMMENDED:
        return recommended_config(messages)
    return select_config(messages)


def smart_prune(
    messages: Sequence[Message],
    pruner: Optional[ConversationPruner] = None,
    now: Optional[datetime] = None,
) -> PruningResult:
    """
    Prune a transcript with the adaptively selected configuration.

    Args:
        messages: Transcript to prune
        pruner: Engine to use (a default ConversationPruner if omitted)
        now: Reference time for the age filter

    Returns:
        Pruning result
    """
    pruner = pruner or ConversationPruner()
    return pruner.prune(messages, select_config(messages), now=now)
