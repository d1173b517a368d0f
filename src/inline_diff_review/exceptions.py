"""Custom exceptions for the inline diff review engine."""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class ReviewError(Exception):
    """
    Base exception for review engine errors.

    Carries the document the error relates to and structured details
    so hosts can report failures without parsing messages.

    Attributes:
        message: Human-readable error description.
        document_path: Path of the document under review, if known.
        details: Additional error details.
    """
    message: str
    document_path: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.document_path:
            parts.append(f"Document: {self.document_path}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "document_path": self.document_path,
            "details": self.details,
        }


@dataclass
class InputError(ReviewError):
    """Raised when content or parameters passed to the engine are malformed."""


@dataclass
class IntegrityError(ReviewError):
    """
    Raised when accepted chunks no longer match the content they are applied to.

    This happens when a chunk was computed against content that has since
    changed underneath it. Reconstruction is aborted as a whole.
    """
    chunk_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.chunk_ids is None:
            self.chunk_ids = []
        super().__post_init__()


@dataclass
class UnknownChunkError(ReviewError):
    """Raised when a chunk id is not part of the review session."""
    chunk_id: Optional[str] = None


@dataclass
class WriteError(ReviewError):
    """Raised when the document store fails to persist content."""


@dataclass
class PendingChunksError(ReviewError):
    """Raised when reconstruction is requested while chunks are still pending."""
    pending_count: int = 0


@dataclass
class SessionClosedError(ReviewError):
    """Raised when acting on a session that was committed or replaced."""
    session_id: Optional[str] = None
