"""Reconstruction of final content from reviewed chunks."""

import logging
from typing import Dict, List, Sequence

from ..exceptions import IntegrityError, PendingChunksError
from ..models.chunk import Decision, DiffChunk
from . import chunk_store

logger = logging.getLogger(__name__)


class ContentReconstructor:
    """
    Applies accepted chunks to the original content.

    Chunks are applied from the highest original offset to the lowest so
    that every replacement uses offsets measured against the unmodified
    original content.
    """

    def apply(
        self,
        original: str,
        chunks: Sequence[DiffChunk],
        decisions: Sequence[Decision],
    ) -> str:
        """
        Build the final content from explicit decisions.

        Args:
            original: Content the chunks were computed against.
            chunks: All chunks of the review.
            decisions: Reviewer decisions. Chunks without an accepting
                       decision keep their original text.

        Returns:
            The reconstructed content.

        Raises:
            IntegrityError: If any accepted chunk does not fit ``original``.
                            Nothing is applied in that case.
        """
        accepted_ids = {decision.chunk_id for decision in decisions if decision.accepted}
        selected = [chunk for chunk in chunks if chunk.id in accepted_ids]

        self._verify(original, selected)

        result = original
        for chunk in sorted(selected, key=lambda c: c.old_range.start, reverse=True):
            result = result[:chunk.old_range.start] + chunk.new_text + result[chunk.old_range.end:]

        logger.debug(f"Applied {len(selected)} of {len(chunks)} chunks")
        return result

    def reconstruct(self, original: str, chunks: Sequence[DiffChunk]) -> str:
        """
        Build the final content from the chunks' own statuses.

        Args:
            original: Content the chunks were computed against.
            chunks: Chunks of a fully processed review.

        Returns:
            The reconstructed content.

        Raises:
            PendingChunksError: If any chunk is still pending.
            IntegrityError: If any accepted chunk does not fit ``original``.
        """
        pending = chunk_store.pending_count(chunks)
        if pending:
            raise PendingChunksError(
                f"Cannot reconstruct while {pending} chunks are pending",
                pending_count=pending,
            )
        return self.apply(original, chunks, chunk_store.decisions_from_chunks(chunks))

    def _verify(self, original: str, selected: Sequence[DiffChunk]) -> None:
        """Check every selected chunk against ``original`` before touching it."""
        problems: Dict[str, str] = {}
        length = len(original)

        for chunk in selected:
            start, end = chunk.old_range.start, chunk.old_range.end
            if start < 0 or end < start or end > length:
                problems[chunk.id] = (
                    f"range [{start}, {end}) outside content of length {length}"
                )
            elif original[start:end] != chunk.old_text:
                problems[chunk.id] = f"content at [{start}, {end}) no longer matches"

        ordered: List[DiffChunk] = sorted(
            (c for c in selected if c.id not in problems),
            key=lambda c: (c.old_range.start, c.old_range.end),
        )
        for previous, current in zip(ordered, ordered[1:]):
            if previous.old_range.overlaps(current.old_range):
                problems[current.id] = f"overlaps chunk {previous.id}"

        if problems:
            raise IntegrityError(
                f"{len(problems)} accepted chunks do not match the original content",
                details={"problems": problems},
                chunk_ids=list(problems),
            )
