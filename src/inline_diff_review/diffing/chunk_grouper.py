"""Grouping of elementary edits into reviewable chunks."""

import itertools
import logging
from typing import Iterator, List, Optional, Sequence

from ..exceptions import InputError
from ..models.chunk import DiffChunk, EditOp, TextRange
from ..models.enums import EditOperation

logger = logging.getLogger(__name__)

DEFAULT_MIN_GAP_SIZE = 50


class ChunkIdGenerator:
    """Monotonic chunk id source; ids are unique for the lifetime of one generator."""

    def __init__(self, prefix: str = "chunk"):
        self.prefix = prefix
        self._counter: Iterator[int] = itertools.count(1)

    def next_id(self) -> str:
        return f"{self.prefix}_{next(self._counter)}"


class _ChunkBuilder:
    """Accumulates the edits of the chunk currently open."""

    def __init__(self, chunk_id: str, old_start: int, new_start: int):
        self.chunk_id = chunk_id
        self.old_start = old_start
        self.new_start = new_start
        self.old_parts: List[str] = []
        self.new_parts: List[str] = []
        self.gap_parts: List[str] = []

    def add_gap(self, text: str) -> None:
        self.gap_parts.append(text)

    def add(self, op: EditOp) -> None:
        # An unchanged run shorter than the gap threshold sits between two
        # edits of this chunk; it is covered on both sides.
        if self.gap_parts:
            gap = "".join(self.gap_parts)
            self.old_parts.append(gap)
            self.new_parts.append(gap)
            self.gap_parts = []

        if op.operation == EditOperation.DELETE:
            self.old_parts.append(op.text)
        else:
            self.new_parts.append(op.text)

    def build(self) -> DiffChunk:
        old_text = "".join(self.old_parts)
        new_text = "".join(self.new_parts)
        return DiffChunk(
            id=self.chunk_id,
            old_range=TextRange(self.old_start, self.old_start + len(old_text)),
            new_range=TextRange(self.new_start, self.new_start + len(new_text)),
            old_text=old_text,
            new_text=new_text,
        )


class ChunkGrouper:
    """
    Groups an edit script into non-overlapping review chunks.

    Edits separated by fewer than ``min_gap_size`` contiguous unchanged
    characters end up in the same chunk; a longer unchanged run closes
    the open chunk and is left out of every chunk.
    """

    def __init__(self, min_gap_size: int = DEFAULT_MIN_GAP_SIZE, id_prefix: str = "chunk"):
        """
        Initialize the chunk grouper.

        Args:
            min_gap_size: Default gap threshold, in unchanged characters.
            id_prefix: Prefix for generated chunk ids.
        """
        self._validate_gap(min_gap_size)
        self.min_gap_size = min_gap_size
        self.id_prefix = id_prefix

    def group(
        self,
        ops: Sequence[EditOp],
        min_gap_size: Optional[int] = None,
    ) -> List[DiffChunk]:
        """
        Group edit operations into chunks.

        Each call numbers its chunks from 1, so ids are unique within the
        review session built from the returned list.

        Args:
            ops: Edit script produced by the diff computer.
            min_gap_size: Optional override of the gap threshold.

        Returns:
            Chunks sorted by position in the original content.

        Raises:
            InputError: If the gap threshold is invalid.
        """
        gap_size = self.min_gap_size if min_gap_size is None else min_gap_size
        self._validate_gap(gap_size)

        ids = ChunkIdGenerator(self.id_prefix)
        chunks: List[DiffChunk] = []
        builder: Optional[_ChunkBuilder] = None
        old_pos = 0
        new_pos = 0
        unchanged = 0

        for op in ops:
            length = op.length
            if op.operation == EditOperation.EQUAL:
                unchanged += length
                if builder is not None:
                    if unchanged >= gap_size:
                        chunks.append(builder.build())
                        builder = None
                        unchanged = 0
                    else:
                        builder.add_gap(op.text)
                old_pos += length
                new_pos += length
                continue

            if builder is None:
                builder = _ChunkBuilder(ids.next_id(), old_pos, new_pos)
            unchanged = 0
            builder.add(op)

            if op.operation == EditOperation.DELETE:
                old_pos += length
            else:
                new_pos += length

        if builder is not None:
            chunks.append(builder.build())

        logger.debug(f"Grouped {len(ops)} edit ops into {len(chunks)} chunks (gap {gap_size})")
        return chunks

    @staticmethod
    def _validate_gap(min_gap_size: int) -> None:
        if isinstance(min_gap_size, bool) or not isinstance(min_gap_size, int) or min_gap_size < 0:
            raise InputError(
                "min_gap_size must be a non-negative integer",
                details={"min_gap_size": min_gap_size},
            )
