"""
Core RetentionManager class providing the main public API.

This module wires the stats reporter, policy selector and pruning engine
together in the order a chat service uses them before each model call.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .classification.importance_classifier import ImportanceClassifier
from .config import RetentionConfig
from .models import (
    NO_PRUNING_NEEDED,
    ConversationStats,
    Message,
    PruningConfig,
    PruningResult,
)
from .policy.policy_selector import config_for_strategy
from .policy.stats_reporter import conversation_stats
from .pruning.pruning_engine import Clock, ConversationPruner
from .pruning.token_estimator import (
    create_litellm_token_counter,
    estimate_messages_tokens,
)
from .transcript.schemas import dump_pruning_result, parse_transcript

logger = logging.getLogger(__name__)


class RetentionManager:
    """
    Main entry point deciding what part of a transcript is sent downstream.

    Features:
    - Fixed pruning trigger checked before any pruning work
    - Adaptive or recommended configuration selection
    - Importance-aware multi-strategy pruning
    - JSON payload round trip for host services
    """

    def __init__(
        self,
        config: Optional[RetentionConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize the manager.

        Args:
            config: Engine settings (defaults to RetentionConfig())
            clock: Source of the current time for the age filter
        """
        self.config = config or RetentionConfig()

        token_counter = None
        if self.config.tokenizer_model:
            token_counter = create_litellm_token_counter(self.config.tokenizer_model)

        self.pruner = ConversationPruner(
            token_counter=token_counter,
            importance_classifier=ImportanceClassifier(self.config.importance_rules),
            clock=clock,
        )

        logger.debug(
            f"RetentionManager ready (strategy={self.config.selection_strategy.value}, "
            f"order={self.config.token_filter_order.value})"
        )

    def stats(self, messages: Sequence[Message]) -> ConversationStats:
        return conversation_stats(messages, self.config.trigger)

    def needs_pruning(self, messages: Sequence[Message]) -> bool:
        return self.stats(messages).needs_pruning

    def select_config(self, messages: Sequence[Message]) -> PruningConfig:
        return config_for_strategy(messages, self.config.selection_strategy)

    def prune(
        self,
        messages: Sequence[Message],
        pruning_config: Optional[PruningConfig] = None,
        now: Optional[datetime] = None,
    ) -> PruningResult:
        """
        Prune unconditionally with the given or selected configuration.

        Args:
            messages: Transcript to prune
            pruning_config: Explicit configuration; selected from the
                transcript when omitted
            now: Reference time for the age filter

        Returns:
            Pruning result
        """
        pruning_config = pruning_config or self.select_config(messages)
        return self.pruner.prune(
            messages, pruning_config, now=now, order=self.config.token_filter_order
        )

    def retain(
        self, messages: Sequence[Message], now: Optional[datetime] = None
    ) -> PruningResult:
        """
        Return the transcript to forward downstream.

        Transcripts under the trigger come back untouched; others are pruned
        with a configuration selected from their shape.

        Args:
            messages: Full transcript
            now: Reference time for the age filter

        Returns:
            Pruning result whose messages replace the original transcript
        """
        if not self.needs_pruning(messages):
            tokens = estimate_messages_tokens(messages, self.pruner.token_counter)
            return PruningResult(
                messages=list(messages),
                pruned_messages=[],
                reason=NO_PRUNING_NEEDED,
                original_count=len(messages),
                remaining_count=len(messages),
                pruned_count=0,
                original_tokens=tokens,
                remaining_tokens=tokens,
            )

        result = self.prune(messages, now=now)
        logger.debug(f"Conversation retention: {result.reason}")
        return result

    def retain_payload(
        self,
        payload: Union[Sequence[Mapping[str, Any]], Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Parse a host JSON transcript, retain it and serialize the result.

        Raises:
            TranscriptError: If the payload is malformed
        """
        messages: List[Message] = parse_transcript(payload)
        return dump_pruning_result(self.retain(messages, now=now))


# Utility functions
def create_retention_manager(
    clock: Optional[Clock] = None, **kwargs: Any
) -> RetentionManager:
    """
    Create a retention manager from RetentionConfig keyword arguments.

    Args:
        clock: Source of the current time
        **kwargs: RetentionConfig fields

    Returns:
        Configured RetentionManager
    """
    return RetentionManager(config=RetentionConfig(**kwargs), clock=clock)
