"""
chat_retention - decide which chat messages to keep before a model call.
"""

from .classification import ImportanceClassifier, ImportanceRules, is_important
from .config import RetentionConfig
from .core import RetentionManager, create_retention_manager
from .exceptions import (
    ConfigurationError,
    RetentionError,
    TranscriptError,
    ValidationError,
)
from .models import (
    DEFAULT_PRUNING_CONFIG,
    ConversationStats,
    Message,
    MessageRole,
    PruningConfig,
    PruningResult,
    SelectionStrategy,
    TokenFilterOrder,
)
from .policy import (
    conversation_stats,
    needs_pruning,
    recommended_config,
    select_config,
    smart_prune,
)
from .pruning import ConversationPruner, estimate_tokens, prune_conversation
from .transcript import dump_transcript, parse_transcript

__version__ = "0.1.0"
__all__ = [
    "RetentionManager",
    "create_retention_manager",
    "RetentionConfig",
    "Message",
    "MessageRole",
    "PruningConfig",
    "PruningResult",
    "ConversationStats",
    "SelectionStrategy",
    "TokenFilterOrder",
    "DEFAULT_PRUNING_CONFIG",
    "ConversationPruner",
    "prune_conversation",
    "estimate_tokens",
    "ImportanceClassifier",
    "ImportanceRules",
    "is_important",
    "select_config",
    "recommended_config",
    "smart_prune",
    "conversation_stats",
    "needs_pruning",
    "parse_transcript",
    "dump_transcript",
    "RetentionError",
    "ConfigurationError",
    "ValidationError",
    "TranscriptError",
]
