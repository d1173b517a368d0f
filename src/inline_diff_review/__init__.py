"""
Inline Diff Review

Chunk-based review of proposed text edits: diff, group into chunks,
accept or reject each chunk, and write the reconstructed document.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
    ChunkKind,
    ChunkStatus,
    CommitOutcome,
    EditOperation,
    ReviewCommandType,
)
from .models.chunk import Decision, DiffChunk, EditOp, ReviewCommand, TextRange
from .models.session import FinalResult, ReviewSession
from .diffing import DEFAULT_MIN_GAP_SIZE, ChunkGrouper, DiffComputer
from .review import ContentReconstructor, ReviewManager, chunk_store
from .interfaces import IDocumentStore, IReviewInterface
from .storage import DatabaseManager, FileDocumentStore, SqlDocumentStore
from .config import (
    ConfigurationManager,
    ConfigurationError,
    ReviewConfiguration,
    StorageBackend,
    ValidationResult,
)
from .exceptions import (
    InputError,
    IntegrityError,
    PendingChunksError,
    ReviewError,
    SessionClosedError,
    UnknownChunkError,
    WriteError,
)

__all__ = [
    "ChunkKind",
    "ChunkStatus",
    "CommitOutcome",
    "EditOperation",
    "ReviewCommandType",
    "Decision",
    "DiffChunk",
    "EditOp",
    "ReviewCommand",
    "TextRange",
    "FinalResult",
    "ReviewSession",
    "DEFAULT_MIN_GAP_SIZE",
    "ChunkGrouper",
    "DiffComputer",
    "ContentReconstructor",
    "ReviewManager",
    "chunk_store",
    "IDocumentStore",
    "IReviewInterface",
    "DatabaseManager",
    "FileDocumentStore",
    "SqlDocumentStore",
    "ConfigurationManager",
    "ConfigurationError",
    "ReviewConfiguration",
    "StorageBackend",
    "ValidationResult",
    "InputError",
    "IntegrityError",
    "PendingChunksError",
    "ReviewError",
    "SessionClosedError",
    "UnknownChunkError",
    "WriteError",
]
