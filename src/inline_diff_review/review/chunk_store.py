"""Pure decision state machine over a review session's chunks.

Every transition takes the current chunk sequence and returns the next
one. A transition that changes nothing returns its input object, so
callers can detect no-ops with ``is``.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from ..exceptions import UnknownChunkError
from ..models.chunk import Decision, DiffChunk, ReviewCommand
from ..models.enums import ChunkStatus, ReviewCommandType

logger = logging.getLogger(__name__)

ChunkState = Sequence[DiffChunk]


def _decide_one(state: ChunkState, chunk_id: str, status: ChunkStatus) -> ChunkState:
    for index, chunk in enumerate(state):
        if chunk.id != chunk_id:
            continue
        if not chunk.is_pending:
            logger.debug(f"Chunk {chunk_id} already {chunk.status.value}; ignoring {status.value}")
            return state
        updated = list(state)
        updated[index] = chunk.with_status(status)
        return tuple(updated)

    logger.debug(f"Unknown chunk {chunk_id}; ignoring {status.value}")
    return state


def _decide_pending(state: ChunkState, status: ChunkStatus) -> ChunkState:
    if not any(chunk.is_pending for chunk in state):
        return state
    return tuple(
        chunk.with_status(status) if chunk.is_pending else chunk
        for chunk in state
    )


def accept_chunk(state: ChunkState, chunk_id: str) -> ChunkState:
    """Accept a pending chunk. Unknown or already decided chunks are left alone."""
    return _decide_one(state, chunk_id, ChunkStatus.ACCEPTED)


def reject_chunk(state: ChunkState, chunk_id: str) -> ChunkState:
    """Reject a pending chunk. Unknown or already decided chunks are left alone."""
    return _decide_one(state, chunk_id, ChunkStatus.REJECTED)


def accept_all_pending(state: ChunkState) -> ChunkState:
    """Accept every pending chunk; decided chunks keep their status."""
    return _decide_pending(state, ChunkStatus.ACCEPTED)


def reject_all_pending(state: ChunkState) -> ChunkState:
    """Reject every pending chunk; decided chunks keep their status."""
    return _decide_pending(state, ChunkStatus.REJECTED)


def apply_command(state: ChunkState, command: ReviewCommand) -> ChunkState:
    """
    Reduce a decision command into the chunk state.

    Args:
        state: Current chunks.
        command: Decision command to apply.

    Returns:
        The next chunk state.
    """
    command_type = command.command_type
    if command_type == ReviewCommandType.ACCEPT_CHUNK:
        return accept_chunk(state, command.chunk_id)
    if command_type == ReviewCommandType.REJECT_CHUNK:
        return reject_chunk(state, command.chunk_id)
    if command_type == ReviewCommandType.ACCEPT_ALL_PENDING:
        return accept_all_pending(state)
    if command_type == ReviewCommandType.REJECT_ALL_PENDING:
        return reject_all_pending(state)
    raise ValueError(f"Unsupported review command: {command_type}")


def pending_count(state: ChunkState) -> int:
    return sum(1 for chunk in state if chunk.status == ChunkStatus.PENDING)


def is_fully_processed(state: ChunkState) -> bool:
    """True when no chunk is pending. An empty state is fully processed."""
    return pending_count(state) == 0


def accepted_chunks(state: ChunkState) -> List[DiffChunk]:
    """Accepted chunks in their original order."""
    return [chunk for chunk in state if chunk.status == ChunkStatus.ACCEPTED]


def rejected_chunks(state: ChunkState) -> List[DiffChunk]:
    return [chunk for chunk in state if chunk.status == ChunkStatus.REJECTED]


def get_chunk(state: ChunkState, chunk_id: str) -> DiffChunk:
    """
    Look up a chunk by id.

    Raises:
        UnknownChunkError: If no chunk has that id.
    """
    for chunk in state:
        if chunk.id == chunk_id:
            return chunk
    raise UnknownChunkError(f"Chunk {chunk_id} not found", chunk_id=chunk_id)


def decisions_from_chunks(state: ChunkState) -> Tuple[Decision, ...]:
    """Decisions for every decided chunk; pending chunks are omitted."""
    return tuple(
        Decision(chunk_id=chunk.id, accepted=chunk.status == ChunkStatus.ACCEPTED)
        for chunk in state
        if not chunk.is_pending
    )


def review_statistics(state: ChunkState) -> Dict[str, Any]:
    """
    Get statistics about review progress.

    Returns:
        Dictionary with total, pending, accepted, rejected and completed
        counts plus the completion rate.
    """
    total = len(state)
    pending = pending_count(state)
    accepted = len(accepted_chunks(state))
    rejected = len(rejected_chunks(state))

    return {
        'total': total,
        'pending': pending,
        'accepted': accepted,
        'rejected': rejected,
        'completed': accepted + rejected,
        'completion_rate': (accepted + rejected) / total if total > 0 else 1.0,
    }
