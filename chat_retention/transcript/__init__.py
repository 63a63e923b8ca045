"""
Host transcript schemas for chat_retention.
"""

from .schemas import (
    MessageSchema,
    PruningResultSchema,
    TranscriptSchema,
    dump_pruning_result,
    dump_transcript,
    parse_transcript,
)

__all__ = [
    "MessageSchema",
    "TranscriptSchema",
    "PruningResultSchema",
    "parse_transcript",
    "dump_transcript",
    "dump_pruning_result",
]
