"""Diff and chunk data models for the inline diff review engine."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .enums import ChunkKind, ChunkStatus, EditOperation, ReviewCommandType


@dataclass(frozen=True)
class EditOp:
    """A single elementary edit operation with the text it spans."""
    operation: EditOperation
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class TextRange:
    """Half-open ``[start, end)`` range of offsets into a string."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "TextRange") -> bool:
        """Check if two ranges share at least one offset."""
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class DiffChunk:
    """
    A contiguous, independently reviewable unit of change.

    Ranges are measured against the original (``old_range``) and target
    (``new_range``) content. The kind of a chunk is never stored: it is
    derived from which of the two texts is non-empty.
    """
    id: str
    old_range: TextRange
    new_range: TextRange
    old_text: str
    new_text: str
    status: ChunkStatus = ChunkStatus.PENDING

    @property
    def kind(self) -> ChunkKind:
        if self.old_text and self.new_text:
            return ChunkKind.CHANGE
        if self.new_text:
            return ChunkKind.INSERT
        return ChunkKind.DELETE

    @property
    def is_pending(self) -> bool:
        return self.status == ChunkStatus.PENDING

    def with_status(self, status: ChunkStatus) -> "DiffChunk":
        """Return a copy of this chunk with a new status."""
        return replace(self, status=status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "old_range": self.old_range.to_dict(),
            "new_range": self.new_range.to_dict(),
            "old_text": self.old_text,
            "new_text": self.new_text,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class Decision:
    """A reviewer's explicit accept/reject choice for one chunk."""
    chunk_id: str
    accepted: bool


@dataclass(frozen=True)
class ReviewCommand:
    """A decision command fed to the chunk store reducer."""
    command_type: ReviewCommandType
    chunk_id: Optional[str] = None

    @classmethod
    def accept(cls, chunk_id: str) -> "ReviewCommand":
        return cls(ReviewCommandType.ACCEPT_CHUNK, chunk_id)

    @classmethod
    def reject(cls, chunk_id: str) -> "ReviewCommand":
        return cls(ReviewCommandType.REJECT_CHUNK, chunk_id)

    @classmethod
    def accept_all(cls) -> "ReviewCommand":
        return cls(ReviewCommandType.ACCEPT_ALL_PENDING)

    @classmethod
    def reject_all(cls) -> "ReviewCommand":
        return cls(ReviewCommandType.REJECT_ALL_PENDING)
