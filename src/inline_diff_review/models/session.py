"""Review session models for the inline diff review engine."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from .chunk import DiffChunk
from .enums import ChunkStatus, CommitOutcome


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ReviewSession:
    """
    Review session for a proposed edit to one document.

    Sessions are immutable: applying a decision yields a new session
    that shares the id, document and contents of the previous one.
    """
    id: str
    document_path: str
    original_content: str
    target_content: str
    chunks: Tuple[DiffChunk, ...] = field(default_factory=tuple)
    min_gap_size: int = 50
    created_at: str = field(default_factory=_utc_timestamp)

    @property
    def total_count(self) -> int:
        return len(self.chunks)

    @property
    def pending_count(self) -> int:
        return sum(1 for chunk in self.chunks if chunk.status == ChunkStatus.PENDING)

    @property
    def completed_count(self) -> int:
        return self.total_count - self.pending_count

    def with_chunks(self, chunks: Sequence[DiffChunk]) -> "ReviewSession":
        """
        Return a session holding ``chunks``.

        The same session object is returned when ``chunks`` is the
        session's own chunk tuple, so callers can detect no-op decisions
        by identity.
        """
        if chunks is self.chunks:
            return self
        return replace(self, chunks=tuple(chunks))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "document_path": self.document_path,
            "min_gap_size": self.min_gap_size,
            "created_at": self.created_at,
            "total_count": self.total_count,
            "pending_count": self.pending_count,
            "completed_count": self.completed_count,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
        }


@dataclass(frozen=True)
class FinalResult:
    """Result of committing a review session."""
    outcome: CommitOutcome
    content: Optional[str] = None
    error: Optional[str] = None
    accepted_count: int = 0

    @classmethod
    def written(cls, content: str, accepted_count: int) -> "FinalResult":
        return cls(CommitOutcome.WRITTEN, content=content, accepted_count=accepted_count)

    @classmethod
    def discarded(cls) -> "FinalResult":
        return cls(CommitOutcome.DISCARDED)

    @classmethod
    def integrity_error(cls, error: str) -> "FinalResult":
        return cls(CommitOutcome.INTEGRITY_ERROR, error=error)

    @property
    def is_written(self) -> bool:
        return self.outcome == CommitOutcome.WRITTEN
