"""
Token estimation and multi-strategy pruning for chat_retention.

This module provides the character-based token estimate and the pruning
engine that applies age, count and token-budget filters to a transcript.
"""

from .pruning_engine import (
    ConversationPruner,
    create_conversation_pruner,
    prune_conversation,
)
from .token_estimator import (
    TokenCounter,
    create_litellm_token_counter,
    estimate_messages_tokens,
    estimate_tokens,
)

__all__ = [
    # Token estimation
    "TokenCounter",
    "estimate_tokens",
    "estimate_messages_tokens",
    "create_litellm_token_counter",
    # Pruning engine
    "ConversationPruner",
    "create_conversation_pruner",
    "prune_conversation",
]
