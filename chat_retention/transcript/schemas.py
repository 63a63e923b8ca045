"""
Pydantic schemas for transcripts exchanged with the host chat service.

The host sends transcripts as JSON: camelCase keys, timestamps as ISO-8601
strings or epoch milliseconds, and arbitrary extra fields per message
(objectType, contactId, ...). These schemas convert between that payload and
the engine's immutable Message records.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import TranscriptError
from ..models import Message, MessageRole, PruningResult

logger = logging.getLogger(__name__)

_KNOWN_ROLES = {role.value: role for role in MessageRole}


class MessageSchema(BaseModel):
    """Schema for one transcript message as sent by the host."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    role: str = Field(description="Author of the turn", min_length=1)
    content: str = Field(description="Text payload of the turn")
    timestamp: Optional[datetime] = Field(
        description="When the turn happened; epoch milliseconds or ISO-8601",
        default=None,
    )
    action: Optional[str] = Field(
        description="Side effect the turn represents, e.g. contact_created",
        default=None,
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_epoch_millis(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value

    def to_message(self) -> Message:
        """Convert to an engine Message, carrying extra fields as metadata."""
        return Message(
            role=_KNOWN_ROLES.get(self.role, self.role),
            content=self.content,
            timestamp=self.timestamp,
            action=self.action,
            metadata=dict(self.model_extra or {}),
        )

    @classmethod
    def from_message(cls, message: Message) -> "MessageSchema":
        return cls(
            role=message.role_name,
            content=message.content,
            timestamp=message.timestamp,
            action=message.action,
            **{
                key: value
                for key, value in message.metadata.items()
                if key not in cls.model_fields
            },
        )


class TranscriptSchema(BaseModel):
    """Schema for a transcript wrapped in an object."""

    messages: List[MessageSchema] = Field(description="Ordered turns, oldest first")


class PruningResultSchema(BaseModel):
    """Schema for reporting a pruning result back to the host."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_count: int = Field(ge=0)
    remaining_count: int = Field(ge=0)
    pruned_count: int = Field(ge=0)
    reason: str
    messages: List[MessageSchema]
    pruned_messages: List[MessageSchema]
    original_tokens: int = 0
    remaining_tokens: int = 0
    strategy_steps: List[str] = Field(default_factory=list)


def parse_transcript(
    payload: Union[Sequence[Mapping[str, Any]], Mapping[str, Any]],
) -> List[Message]:
    """
    Parse a host transcript payload into Messages.

    Args:
        payload: List of message objects, or an object with a "messages" list

    Returns:
        Messages in payload order

    Raises:
        TranscriptError: If the payload or any message is malformed
    """
    if isinstance(payload, Mapping):
        if "messages" not in payload:
            raise TranscriptError(
                "Transcript object has no 'messages' list", field="messages"
            )
        payload = payload["messages"]

    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        raise TranscriptError(
            "Transcript must be a list of message objects",
            value=type(payload).__name__,
        )

    messages = []
    for index, raw in enumerate(payload):
        try:
            schema = MessageSchema.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise TranscriptError(
                first["msg"], index=index, field=field, value=first.get("input")
            ) from e
        messages.append(schema.to_message())

    logger.debug(f"Parsed transcript with {len(messages)} messages")
    return messages


def dump_transcript(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Serialize Messages to JSON-ready dicts, omitting empty optional fields."""
    return [
        MessageSchema.from_message(message).model_dump(mode="json", exclude_none=True)
        for message in messages
    ]


def dump_pruning_result(result: PruningResult) -> Dict[str, Any]:
    """Serialize a PruningResult to a JSON-ready dict with camelCase keys."""
    schema = PruningResultSchema(
        original_count=result.original_count,
        remaining_count=result.remaining_count,
        pruned_count=result.pruned_count,
        reason=result.reason,
        messages=[MessageSchema.from_message(m) for m in result.messages],
        pruned_messages=[MessageSchema.from_message(m) for m in result.pruned_messages],
        original_tokens=result.original_tokens,
        remaining_tokens=result.remaining_tokens,
        strategy_steps=list(result.strategy_steps),
    )
    return schema.model_dump(mode="json", by_alias=True, exclude_none=True)
