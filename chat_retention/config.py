"""Configuration management and validation for chat_retention."""

import math
from dataclasses import dataclass
from typing import Optional

from .classification.importance_classifier import (
    DEFAULT_IMPORTANCE_RULES,
    ImportanceRules,
)
from .exceptions import ConfigurationError
from .models import (
    DEFAULT_PRUNING_CONFIG,
    PruningConfig,
    SelectionStrategy,
    TokenFilterOrder,
)


@dataclass
class RetentionConfig:
    """
    Engine settings for a RetentionManager, validated on construction.

    PruningConfig values handed to the pruner are trusted as given; only
    these host-level settings are checked.
    """

    # Thresholds deciding whether a transcript needs pruning at all
    trigger: PruningConfig = DEFAULT_PRUNING_CONFIG

    # Importance classification
    importance_rules: ImportanceRules = DEFAULT_IMPORTANCE_RULES

    # Pruning behaviour
    selection_strategy: SelectionStrategy = SelectionStrategy.ADAPTIVE
    token_filter_order: TokenFilterOrder = TokenFilterOrder.REFERENCE

    # Model name for liteLLM token counting; None uses the character estimate
    tokenizer_model: Optional[str] = None

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        self._validate_all_parameters()

    def _validate_all_parameters(self):
        """Run all validation checks."""
        self._validate_trigger()
        self._validate_importance_rules()
        self._validate_strategies()
        self._validate_tokenizer_model()

    def _validate_trigger(self):
        """Validate the pruning trigger thresholds."""
        if not isinstance(self.trigger, PruningConfig):
            raise ConfigurationError(
                f"trigger must be a PruningConfig, got {type(self.trigger).__name__}",
                parameter="trigger",
                suggested_fix="Pass a PruningConfig such as DEFAULT_PRUNING_CONFIG",
            )

        for name in ("max_messages", "max_tokens", "max_age_hours"):
            value = getattr(self.trigger, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"trigger.{name} ({value!r}) must be a number",
                    parameter=f"trigger.{name}",
                    suggested_fix="Use an int, a float, or math.inf to disable",
                )
            if math.isnan(value) or value < 0:
                raise ConfigurationError(
                    f"trigger.{name} ({value}) must be non-negative",
                    parameter=f"trigger.{name}",
                    suggested_fix=f"Set trigger.{name} to 0 or more",
                )

    def _validate_importance_rules(self):
        """Validate importance action tags and keywords."""
        rules = self.importance_rules
        if not isinstance(rules, ImportanceRules):
            raise ConfigurationError(
                "importance_rules must be an ImportanceRules instance",
                parameter="importance_rules",
                suggested_fix="Use ImportanceRules(actions=..., keywords=...)",
            )

        if not rules.actions and not rules.keywords:
            raise ConfigurationError(
                "importance_rules has no actions and no keywords",
                parameter="importance_rules",
                suggested_fix="Disable importance per run with preserve_important=False instead",
            )

        for action in rules.actions:
            if not isinstance(action, str) or not action:
                raise ConfigurationError(
                    f"Importance action ({action!r}) must be a non-empty string",
                    parameter="importance_rules.actions",
                )

        for keyword in rules.keywords:
            if not isinstance(keyword, str) or not keyword:
                raise ConfigurationError(
                    f"Importance keyword ({keyword!r}) must be a non-empty string",
                    parameter="importance_rules.keywords",
                )
            # Content is lower-cased before matching
            if keyword != keyword.lower():
                raise ConfigurationError(
                    f"Importance keyword ({keyword}) must be lower case",
                    parameter="importance_rules.keywords",
                    suggested_fix=f"Use '{keyword.lower()}'",
                )

    def _validate_strategies(self):
        """Validate enum-valued settings."""
        if not isinstance(self.selection_strategy, SelectionStrategy):
            raise ConfigurationError(
                f"selection_strategy ({self.selection_strategy!r}) is not a SelectionStrategy",
                parameter="selection_strategy",
                suggested_fix="Use SelectionStrategy.ADAPTIVE or SelectionStrategy.RECOMMENDED",
            )

        if not isinstance(self.token_filter_order, TokenFilterOrder):
            raise ConfigurationError(
                f"token_filter_order ({self.token_filter_order!r}) is not a TokenFilterOrder",
                parameter="token_filter_order",
                suggested_fix="Use TokenFilterOrder.REFERENCE or TokenFilterOrder.CHRONOLOGICAL",
            )

    def _validate_tokenizer_model(self):
        """Validate the liteLLM model name, when one is set."""
        if self.tokenizer_model is not None and not self.tokenizer_model.strip():
            raise ConfigurationError(
                "tokenizer_model cannot be empty",
                parameter="tokenizer_model",
                suggested_fix="Specify a model name (e.g., 'gpt-4o-mini') or leave it as None",
            )
