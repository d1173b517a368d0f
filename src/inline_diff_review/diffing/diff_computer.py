"""Character-level diff computation for proposed edits."""

import logging
from typing import Iterable, List, Tuple

from diff_match_patch import diff_match_patch

from ..exceptions import InputError
from ..models.chunk import EditOp
from ..models.enums import EditOperation

logger = logging.getLogger(__name__)

_OPERATIONS = {
    diff_match_patch.DIFF_EQUAL: EditOperation.EQUAL,
    diff_match_patch.DIFF_DELETE: EditOperation.DELETE,
    diff_match_patch.DIFF_INSERT: EditOperation.INSERT,
}


class DiffComputer:
    """
    Computes an ordered sequence of elementary edits between two strings.

    Uses the Myers shortest-edit-script implementation from
    ``diff-match-patch`` at character granularity, followed by its
    semantic cleanup pass so that tiny coincidental matches between
    edits are folded into the surrounding edit.
    """

    def __init__(
        self,
        timeout: float = 0.0,
        semantic_cleanup: bool = True,
        line_mode: bool = False,
    ):
        """
        Initialize the diff computer.

        Args:
            timeout: Seconds the diff may run before falling back to a
                     non-minimal script. 0 means unbounded, which keeps
                     the output deterministic.
            semantic_cleanup: Whether to run the semantic cleanup pass.
            line_mode: Whether to use the line-level speedup for long texts.
        """
        self._dmp = diff_match_patch()
        self._dmp.Diff_Timeout = timeout
        self.semantic_cleanup = semantic_cleanup
        self.line_mode = line_mode

    def diff(self, old: str, new: str) -> List[EditOp]:
        """
        Compute the edit script turning ``old`` into ``new``.

        Args:
            old: Original content.
            new: Proposed content.

        Returns:
            List of EditOp. Empty when both strings are equal. Every run of
            changes between two EQUAL ops is one DELETE followed by one
            INSERT (either may be absent).

        Raises:
            InputError: If either argument is not a string.
        """
        if not isinstance(old, str) or not isinstance(new, str):
            raise InputError(
                "Diff inputs must be strings",
                details={
                    "old_type": type(old).__name__,
                    "new_type": type(new).__name__,
                },
            )

        if old == new:
            return []

        diffs = self._dmp.diff_main(old, new, self.line_mode)
        if self.semantic_cleanup:
            self._dmp.diff_cleanupSemantic(diffs)

        ops = self._coalesce(diffs)
        logger.debug(
            f"Computed {len(ops)} edit ops for {len(old)} -> {len(new)} characters"
        )
        return ops

    def _coalesce(self, diffs: Iterable[Tuple[int, str]]) -> List[EditOp]:
        """Merge adjacent ops so each change run is one DELETE then one INSERT."""
        ops: List[EditOp] = []
        deleted: List[str] = []
        inserted: List[str] = []
        equal: List[str] = []

        def flush_changes() -> None:
            if deleted:
                ops.append(EditOp(EditOperation.DELETE, "".join(deleted)))
                deleted.clear()
            if inserted:
                ops.append(EditOp(EditOperation.INSERT, "".join(inserted)))
                inserted.clear()

        def flush_equal() -> None:
            if equal:
                ops.append(EditOp(EditOperation.EQUAL, "".join(equal)))
                equal.clear()

        for op, text in diffs:
            if not text:
                continue
            operation = _OPERATIONS[op]
            if operation == EditOperation.EQUAL:
                flush_changes()
                equal.append(text)
            else:
                flush_equal()
                if operation == EditOperation.DELETE:
                    deleted.append(text)
                else:
                    inserted.append(text)

        flush_changes()
        flush_equal()
        return ops
