"""
Custom exceptions for the chat_retention library.
"""

from typing import Any


class RetentionError(Exception):
    """Base exception for all chat_retention errors."""

    pass


class ConfigurationError(RetentionError):
    """Raised when RetentionConfig settings are invalid."""

    def __init__(self, message: str, parameter: str = None, suggested_fix: str = None):
        self.parameter = parameter
        self.suggested_fix = suggested_fix

        parts = [f"Invalid retention setting: {message}"]
        if parameter:
            parts.append(f"[setting: {parameter}]")
        if suggested_fix:
            parts.append(f"Hint: {suggested_fix}")

        super().__init__(" ".join(parts))


class ValidationError(RetentionError):
    """Raised when input handed to the engine is malformed."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.field = field
        self.value = value

        details = []
        if field:
            details.append(f"field={field}")
        if value is not None:
            details.append(f"value={value!r}")

        full_message = f"Invalid input: {message}"
        if details:
            full_message += f" ({', '.join(details)})"

        super().__init__(full_message)


class TranscriptError(ValidationError):
    """Raised when a host transcript payload cannot be parsed into messages."""

    def __init__(
        self, message: str, index: int = None, field: str = None, value: Any = None
    ):
        self.index = index
        if index is not None:
            message = f"{message} (Message index: {index})"
        super().__init__(message, field=field, value=value)
