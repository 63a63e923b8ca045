"""
Data models and type definitions for chat_retention.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class MessageRole(Enum):
    """Transcript turn roles. The engine never branches on role."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class TokenFilterOrder(Enum):
    """Ordering of the survivors of the token-budget filter."""

    # Remaining regular messages first, then every important message.
    REFERENCE = "reference"
    # Survivors re-sorted by their position in the original transcript.
    CHRONOLOGICAL = "chronological"


class SelectionStrategy(Enum):
    """Decision tables available for deriving a pruning configuration."""

    ADAPTIVE = "adaptive"
    RECOMMENDED = "recommended"


@dataclass(frozen=True)
class Message:
    """One immutable transcript turn."""

    role: Union[MessageRole, str]
    content: str
    timestamp: Optional[datetime] = None
    action: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def role_name(self) -> str:
        """Role as a plain string, whether or not it is a known MessageRole."""
        if isinstance(self.role, MessageRole):
            return self.role.value
        return str(self.role)

    def timestamp_utc(self) -> Optional[datetime]:
        """Timestamp as an aware UTC datetime; naive values are taken as UTC."""
        if self.timestamp is None:
            return None
        if self.timestamp.tzinfo is None:
            return self.timestamp.replace(tzinfo=timezone.utc)
        return self.timestamp.astimezone(timezone.utc)


@dataclass(frozen=True)
class PruningConfig:
    """
    Parameters fully determining one pruning run.

    Values are trusted as given. Float infinity is accepted for the numeric
    limits and disables the corresponding filter.
    """

    max_messages: Union[int, float]
    max_tokens: Union[int, float]
    max_age_hours: float
    preserve_important: bool = True
    preserve_last_n: int = 0

    def merged(self, **overrides: Any) -> "PruningConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "max_messages": self.max_messages,
            "max_tokens": self.max_tokens,
            "max_age_hours": self.max_age_hours,
            "preserve_important": self.preserve_important,
            "preserve_last_n": self.preserve_last_n,
        }


DEFAULT_PRUNING_CONFIG = PruningConfig(
    max_messages=50,
    max_tokens=10000,
    max_age_hours=24,
    preserve_important=True,
    preserve_last_n=10,
)

NO_PRUNING_NEEDED = "No pruning needed"


@dataclass
class PruningResult:
    """Result of a pruning run."""

    # Results
    messages: List[Message]
    pruned_messages: List[Message]
    reason: str

    # Metrics
    original_count: int
    remaining_count: int
    pruned_count: int

    # Token information
    original_tokens: int = 0
    remaining_tokens: int = 0

    # Filters that actually removed messages, in the order they ran
    strategy_steps: List[str] = field(default_factory=list)
    config: Optional[PruningConfig] = None

    @property
    def was_pruned(self) -> bool:
        return self.pruned_count > 0

    @property
    def pruning_ratio(self) -> float:
        """Calculate the ratio of messages that were pruned."""
        if self.original_count == 0:
            return 0.0
        return self.pruned_count / self.original_count

    @property
    def token_reduction_ratio(self) -> float:
        """Calculate the ratio of estimated tokens that were removed."""
        if self.original_tokens == 0:
            return 0.0
        return (self.original_tokens - self.remaining_tokens) / self.original_tokens


@dataclass(frozen=True)
class ConversationStats:
    """Aggregate, read-only summary of a transcript."""

    total_messages: int
    total_characters: int
    avg_message_length: int
    estimated_tokens: int
    conversation_age_hours: int
    needs_pruning: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_messages": self.total_messages,
            "total_characters": self.total_characters,
            "avg_message_length": self.avg_message_length,
            "estimated_tokens": self.estimated_tokens,
            "conversation_age_hours": self.conversation_age_hours,
            "needs_pruning": self.needs_pruning,
        }
