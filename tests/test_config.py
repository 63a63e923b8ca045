"""
Tests for configuration management and validation.
"""

import math

import pytest

from chat_retention.classification.importance_classifier import ImportanceRules
from chat_retention.config import RetentionConfig
from chat_retention.exceptions import ConfigurationError
from chat_retention.models import (
    DEFAULT_PRUNING_CONFIG,
    PruningConfig,
    SelectionStrategy,
    TokenFilterOrder,
)


class TestRetentionConfig:
    """Test configuration validation."""

    def test_defaults(self) -> None:
        config = RetentionConfig()

        assert config.trigger == DEFAULT_PRUNING_CONFIG
        assert config.selection_strategy == SelectionStrategy.ADAPTIVE
        assert config.token_filter_order == TokenFilterOrder.REFERENCE
        assert config.tokenizer_model is None

    def test_infinite_trigger_allowed(self) -> None:
        trigger = PruningConfig(max_messages=math.inf, max_tokens=math.inf, max_age_hours=math.inf)
        assert RetentionConfig(trigger=trigger).trigger.max_tokens == math.inf

    def test_negative_trigger(self) -> None:
        trigger = DEFAULT_PRUNING_CONFIG.merged(max_tokens=-5)

        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(trigger=trigger)

        assert "trigger.max_tokens" in str(exc_info.value)
        assert exc_info.value.parameter == "trigger.max_tokens"

    def test_non_numeric_trigger(self) -> None:
        trigger = DEFAULT_PRUNING_CONFIG.merged(max_messages="50")

        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(trigger=trigger)

        assert "must be a number" in str(exc_info.value)

    def test_trigger_type(self) -> None:
        with pytest.raises(ConfigurationError):
            RetentionConfig(trigger={"max_messages": 50})

    def test_empty_importance_rules(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(importance_rules=ImportanceRules(actions=frozenset(), keywords=()))

        assert "importance_rules" in str(exc_info.value)

    def test_upper_case_keyword(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(importance_rules=ImportanceRules(keywords=("Refund",)))

        assert exc_info.value.suggested_fix == "Use 'refund'"

    def test_blank_action(self) -> None:
        with pytest.raises(ConfigurationError):
            RetentionConfig(importance_rules=ImportanceRules(actions=frozenset({""})))

    def test_strategy_must_be_enum(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(selection_strategy="adaptive")

        assert "selection_strategy" in str(exc_info.value)

    def test_order_must_be_enum(self) -> None:
        with pytest.raises(ConfigurationError):
            RetentionConfig(token_filter_order="chronological")

    def test_blank_tokenizer_model(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RetentionConfig(tokenizer_model="  ")

        assert "tokenizer_model" in str(exc_info.value)
