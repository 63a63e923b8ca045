"""
Importance classification for chat_retention.
"""

from .importance_classifier import (
    DEFAULT_IMPORTANCE_RULES,
    DEFAULT_IMPORTANT_ACTIONS,
    DEFAULT_IMPORTANT_KEYWORDS,
    ImportanceClassifier,
    ImportanceRules,
    is_important,
)

__all__ = [
    "ImportanceClassifier",
    "ImportanceRules",
    "is_important",
    "DEFAULT_IMPORTANCE_RULES",
    "DEFAULT_IMPORTANT_ACTIONS",
    "DEFAULT_IMPORTANT_KEYWORDS",
]
