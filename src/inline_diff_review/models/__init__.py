"""Data models and enums for the inline diff review engine."""

from .enums import (
    ChunkKind,
    ChunkStatus,
    CommitOutcome,
    EditOperation,
    ReviewCommandType,
)
from .chunk import Decision, DiffChunk, EditOp, ReviewCommand, TextRange
from .session import FinalResult, ReviewSession

__all__ = [
    # Enums
    "ChunkKind",
    "ChunkStatus",
    "CommitOutcome",
    "EditOperation",
    "ReviewCommandType",
    # Chunk models
    "Decision",
    "DiffChunk",
    "EditOp",
    "ReviewCommand",
    "TextRange",
    # Session models
    "FinalResult",
    "ReviewSession",
]
