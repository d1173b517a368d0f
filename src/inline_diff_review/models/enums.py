"""Enumerations for the inline diff review engine."""

from enum import Enum


class EditOperation(Enum):
    """Elementary edit operations produced by the diff computer."""
    EQUAL = "equal"
    DELETE = "delete"
    INSERT = "insert"


class ChunkKind(Enum):
    """Kinds of reviewable chunks, derived from the chunk texts."""
    CHANGE = "change"
    INSERT = "insert"
    DELETE = "delete"


class ChunkStatus(Enum):
    """Review status of a chunk. ACCEPTED and REJECTED are terminal."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ReviewCommandType(Enum):
    """Decision commands understood by the chunk store reducer."""
    ACCEPT_CHUNK = "accept_chunk"
    REJECT_CHUNK = "reject_chunk"
    ACCEPT_ALL_PENDING = "accept_all_pending"
    REJECT_ALL_PENDING = "reject_all_pending"


class CommitOutcome(Enum):
    """Outcomes of committing a review session."""
    WRITTEN = "written"
    DISCARDED = "discarded"
    INTEGRITY_ERROR = "integrity_error"
