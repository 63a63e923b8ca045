"""
Policy selection and conversation statistics for chat_retention.

This module decides whether a transcript needs pruning and which pruning
configuration fits its shape.
"""

from .policy_selector import (
    config_for_strategy,
    recommended_config,
    select_config,
    smart_prune,
)
from .stats_reporter import conversation_stats, needs_pruning

__all__ = [
    # Policy selection
    "select_config",
    "recommended_config",
    "config_for_strategy",
    "smart_prune",
    # Statistics
    "conversation_stats",
    "needs_pruning",
]
