"""
Importance classification for transcript messages.

A message is important when it documents a completed state change on a
business record (an action tag) or its text signals consequence or urgency
(a keyword). Important messages survive the token-budget filter. The
heuristic is deliberately over-inclusive.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from ..models import Message

logger = logging.getLogger(__name__)

TRACKED_ENTITIES = ("contact", "account", "deal", "activity")
TRACKED_OPERATIONS = ("created", "updated", "deleted")

DEFAULT_IMPORTANT_ACTIONS: FrozenSet[str] = frozenset(
    f"{entity}_{operation}"
    for entity in TRACKED_ENTITIES
    for operation in TRACKED_OPERATIONS
)

DEFAULT_IMPORTANT_KEYWORDS: Tuple[str, ...] = (
    "created",
    "updated",
    "deleted",
    "confirmed",
    "successful",
    "error",
    "failed",
    "important",
    "urgent",
    "critical",
)


@dataclass(frozen=True)
class ImportanceRules:
    """Action tags and content keywords that mark a message as important."""

    actions: FrozenSet[str] = DEFAULT_IMPORTANT_ACTIONS
    keywords: Tuple[str, ...] = DEFAULT_IMPORTANT_KEYWORDS

    def extended(
        self, actions: Iterable[str] = (), keywords: Iterable[str] = ()
    ) -> "ImportanceRules":
        """Return a new rule set with extra actions and keywords added."""
        extra_keywords = tuple(k.lower() for k in keywords if k.lower() not in self.keywords)
        return ImportanceRules(
            actions=self.actions | frozenset(actions),
            keywords=self.keywords + extra_keywords,
        )


DEFAULT_IMPORTANCE_RULES = ImportanceRules()


def is_important(
    message: Message,
    preserve_important: bool,
    rules: ImportanceRules = DEFAULT_IMPORTANCE_RULES,
) -> bool:
    """
    Decide whether a message must survive token-budget pruning.

    Args:
        message: Message to classify
        preserve_important: Global switch; when False nothing is important
        rules: Action tags and keywords to match

    Returns:
        True if the message carries an important action tag or keyword
    """
    if not preserve_important:
        return False

    if message.action and message.action in rules.actions:
        return True

    content = message.content.lower()
    return any(keyword in content for keyword in rules.keywords)


class ImportanceClassifier:
    """
    Classifier applying one ImportanceRules set to transcript messages.

    Features:
    - Single-message classification honoring the preserve switch
    - Order-preserving partition into important and regular messages
    - Match explanations for logging and debugging
    """

    def __init__(self, rules: ImportanceRules = DEFAULT_IMPORTANCE_RULES):
        self.rules = rules

    def is_important(self, message: Message, preserve_important: bool = True) -> bool:
        return is_important(message, preserve_important, self.rules)

    def partition(
        self, messages: Sequence[Message], preserve_important: bool = True
    ) -> Tuple[List[int], List[int]]:
        """
        Split message positions into important and regular groups.

        Args:
            messages: Messages to classify
            preserve_important: Global switch passed to each classification

        Returns:
            Tuple of (important_indices, regular_indices), each ascending
        """
        important: List[int] = []
        regular: List[int] = []
        for index, message in enumerate(messages):
            if self.is_important(message, preserve_important):
                important.append(index)
            else:
                regular.append(index)
        return important, regular

    def matched_reasons(self, message: Message) -> List[str]:
        """List which action tag and keywords made a message important."""
        reasons = []
        if message.action and message.action in self.rules.actions:
            reasons.append(f"action:{message.action}")
        content = message.content.lower()
        reasons.extend(
            f"keyword:{keyword}" for keyword in self.rules.keywords if keyword in content
        )
        return reasons
