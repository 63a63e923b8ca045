"""
Pruning engine for chat_retention.

This module applies the age, count and token-budget filters to a
transcript, keeping the newest messages and important messages intact.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..classification.importance_classifier import ImportanceClassifier
from ..models import (
    DEFAULT_PRUNING_CONFIG,
    NO_PRUNING_NEEDED,
    Message,
    PruningConfig,
    PruningResult,
    TokenFilterOrder,
)
from .token_estimator import TokenCounter, estimate_tokens

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_limit(value: Any) -> str:
    """Render a limit for reason strings; 24.0 prints as 24."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class _FilterPass:
    """Positions surviving each filter of one pruning pass."""

    evaluated: List[int]
    preserved: List[int]
    age_removed: int = 0
    count_removed: int = 0
    token_removed: int = 0
    important_count: int = 0
    total_tokens_before_token_filter: int = 0
    survivors: List[int] = field(default_factory=list)
    reason: str = ""
    steps: List[str] = field(default_factory=list)

    @property
    def kept(self) -> List[int]:
        return self.survivors + self.preserved


class ConversationPruner:
    """
    Engine for pruning chat transcripts before they reach a model.

    Features:
    - Preserved tail of the newest messages, exempt from every filter
    - Age, count and token-budget filters applied in that order
    - Importance-aware token trimming (oldest regular messages go first)
    - Index-based bookkeeping, so duplicate messages stay distinguishable
    - Dry-run impact analysis
    """

    def __init__(
        self,
        token_counter: Optional[TokenCounter] = None,
        importance_classifier: Optional[ImportanceClassifier] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize pruning engine.

        Args:
            token_counter: Function to count tokens in text
            importance_classifier: Classifier deciding which messages survive
                the token-budget filter
            clock: Returns the current time; used for the age filter
        """
        self.token_counter = token_counter or estimate_tokens
        self.importance_classifier = importance_classifier or ImportanceClassifier()
        self.clock = clock or utc_now

    def prune(
        self,
        messages: Sequence[Message],
        config: Optional[PruningConfig] = None,
        now: Optional[datetime] = None,
        order: TokenFilterOrder = TokenFilterOrder.REFERENCE,
    ) -> PruningResult:
        """
        Prune a transcript according to a configuration.

        The input sequence is never modified. With the reference order the
        token-budget filter returns the remaining regular messages followed
        by all important messages, which can differ from the original
        chronology; pass TokenFilterOrder.CHRONOLOGICAL to restore it.

        Args:
            messages: Ordered transcript, oldest first
            config: Pruning parameters (defaults to DEFAULT_PRUNING_CONFIG)
            now: Reference time for the age filter (defaults to the clock)
            order: Ordering of the token-budget filter survivors

        Returns:
            Pruning result with the retained transcript and a reason
        """
        config = config or DEFAULT_PRUNING_CONFIG
        token_counts = [self.token_counter(message.content) for message in messages]

        trace = self._run_filters(messages, config, token_counts, now, order)

        kept = trace.kept
        kept_set = set(kept)
        retained = [messages[i] for i in kept]
        pruned = [message for i, message in enumerate(messages) if i not in kept_set]

        result = PruningResult(
            messages=retained,
            pruned_messages=pruned,
            reason=trace.reason or NO_PRUNING_NEEDED,
            original_count=len(messages),
            remaining_count=len(retained),
            pruned_count=len(messages) - len(retained),
            original_tokens=sum(token_counts),
            remaining_tokens=sum(token_counts[i] for i in kept),
            strategy_steps=trace.steps,
            config=config,
        )

        if result.was_pruned:
            logger.info(
                f"{result.reason} ({result.original_count} -> {result.remaining_count} messages)"
            )
        return result

    def prune_chronological(
        self,
        messages: Sequence[Message],
        config: Optional[PruningConfig] = None,
        now: Optional[datetime] = None,
    ) -> PruningResult:
        """Prune like prune(), keeping the retained transcript in original order."""
        return self.prune(messages, config, now=now, order=TokenFilterOrder.CHRONOLOGICAL)

    def analyze_pruning_impact(
        self,
        messages: Sequence[Message],
        config: Optional[PruningConfig] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Analyze the impact of pruning without producing a new transcript.

        Args:
            messages: Transcript to analyze
            config: Pruning parameters to simulate
            now: Reference time for the age filter

        Returns:
            Dictionary with per-filter removal counts and token totals
        """
        config = config or DEFAULT_PRUNING_CONFIG
        token_counts = [self.token_counter(message.content) for message in messages]
        trace = self._run_filters(
            messages, config, token_counts, now, TokenFilterOrder.REFERENCE
        )

        kept = trace.kept
        total_tokens = sum(token_counts)
        kept_tokens = sum(token_counts[i] for i in kept)
        removed = len(messages) - len(kept)

        return {
            "total_messages": len(messages),
            "evaluated_messages": len(trace.evaluated),
            "preserved_messages": len(trace.preserved),
            "removed_by_age": trace.age_removed,
            "removed_by_count": trace.count_removed,
            "removed_by_tokens": trace.token_removed,
            "important_messages": trace.important_count,
            "estimated_remaining_messages": len(kept),
            "total_tokens": total_tokens,
            "tokens_before_token_filter": trace.total_tokens_before_token_filter,
            "estimated_remaining_tokens": kept_tokens,
            "estimated_pruning_ratio": removed / len(messages) if messages else 0.0,
            "reason": trace.reason or NO_PRUNING_NEEDED,
            "config": config.to_dict(),
        }

    def _run_filters(
        self,
        messages: Sequence[Message],
        config: PruningConfig,
        token_counts: List[int],
        now: Optional[datetime],
        order: TokenFilterOrder,
    ) -> _FilterPass:
        split = min(max(len(messages) - config.preserve_last_n, 0), len(messages))
        trace = _FilterPass(
            evaluated=list(range(split)),
            preserved=list(range(split, len(messages))),
        )

        now = self._normalize_now(now)
        age_filtered = self._filter_by_age(messages, trace, config, now)
        count_filtered = self._filter_by_count(age_filtered, trace, config)
        trace.survivors = self._filter_by_tokens(
            messages, count_filtered, trace, config, token_counts, order
        )
        return trace

    def _normalize_now(self, now: Optional[datetime]) -> datetime:
        now = now or self.clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

    def _filter_by_age(
        self,
        messages: Sequence[Message],
        trace: _FilterPass,
        config: PruningConfig,
        now: datetime,
    ) -> List[int]:
        """Drop evaluated messages whose age reaches max_age_hours."""
        kept = []
        for index in trace.evaluated:
            timestamp = messages[index].timestamp_utc() or now
            age_hours = (now - timestamp).total_seconds() / 3600
            if age_hours < config.max_age_hours:
                kept.append(index)

        trace.age_removed = len(trace.evaluated) - len(kept)
        if trace.age_removed:
            trace.reason = (
                f"Pruned {trace.age_removed} messages older than "
                f"{_format_limit(config.max_age_hours)} hours"
            )
            trace.steps.append("age")
        logger.debug(f"Age filter removed {trace.age_removed} messages")
        return kept

    def _filter_by_count(
        self, age_filtered: List[int], trace: _FilterPass, config: PruningConfig
    ) -> List[int]:
        """Drop the oldest evaluated messages beyond max_messages."""
        retained_total = len(age_filtered) + len(trace.preserved)
        if retained_total <= config.max_messages:
            return age_filtered

        excess = retained_total - config.max_messages
        # NaN and -inf limits compare false here and drop every evaluated message
        if excess < len(age_filtered):
            kept = age_filtered[int(excess):]
        else:
            kept = []
        # The preserved tail alone can exceed the limit; only evaluated
        # messages are ever removed.
        trace.count_removed = len(age_filtered) - len(kept)
        if trace.count_removed:
            trace.reason = (
                f"Pruned {trace.count_removed} messages to stay within limit of "
                f"{_format_limit(config.max_messages)}"
            )
            trace.steps.append("count")
        logger.debug(f"Count filter removed {trace.count_removed} messages")
        return kept

    def _filter_by_tokens(
        self,
        messages: Sequence[Message],
        count_filtered: List[int],
        trace: _FilterPass,
        config: PruningConfig,
        token_counts: List[int],
        order: TokenFilterOrder,
    ) -> List[int]:
        """Drop the oldest regular messages until the token budget holds."""
        total_tokens = sum(token_counts[i] for i in count_filtered) + sum(
            token_counts[i] for i in trace.preserved
        )
        trace.total_tokens_before_token_filter = total_tokens
        if total_tokens <= config.max_tokens:
            return count_filtered

        important: List[int] = []
        regular: List[int] = []
        for index in count_filtered:
            if self.importance_classifier.is_important(
                messages[index], config.preserve_important
            ):
                important.append(index)
            else:
                regular.append(index)
        trace.important_count = len(important)

        tokens_to_remove = total_tokens - config.max_tokens
        removed_tokens = 0
        removed_count = 0
        for index in regular:
            if removed_tokens >= tokens_to_remove:
                break
            removed_tokens += token_counts[index]
            removed_count += 1

        survivors = regular[removed_count:] + important
        if order == TokenFilterOrder.CHRONOLOGICAL:
            survivors.sort()

        trace.token_removed = removed_count
        if removed_count:
            trace.reason = (
                f"Pruned {removed_count} messages to stay within "
                f"{_format_limit(config.max_tokens)} token limit"
            )
            trace.steps.append("token")
        logger.debug(
            f"Token filter removed {removed_count} messages "
            f"({removed_tokens} tokens, {len(important)} important kept)"
        )
        return survivors


# Utility functions
def create_conversation_pruner(
    token_counter: Optional[TokenCounter] = None,
    importance_classifier: Optional[ImportanceClassifier] = None,
    clock: Optional[Clock] = None,
) -> ConversationPruner:
    """
    Create a conversation pruner with default configuration.

    Args:
        token_counter: Function to count tokens
        importance_classifier: Classifier for important messages
        clock: Source of the current time

    Returns:
        Configured ConversationPruner
    """
    return ConversationPruner(
        token_counter=token_counter,
        importance_classifier=importance_classifier,
        clock=clock,
    )


def prune_conversation(
    messages: Sequence[Message],
    config: Optional[PruningConfig] = None,
    **overrides: Any,
) -> PruningResult:
    """
    Prune a transcript with the default engine.

    Args:
        messages: Transcript to prune
        config: Base configuration (defaults to DEFAULT_PRUNING_CONFIG)
        **overrides: PruningConfig fields replacing those of the base config

    Returns:
        Pruning result
    """
    config = (config or DEFAULT_PRUNING_CONFIG).merged(**overrides)
    return create_conversation_pruner().prune(messages, config)
