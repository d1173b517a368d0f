"""Unit tests for the content reconstructor."""

import pytest

from inline_diff_review.diffing.chunk_grouper import ChunkGrouper
from inline_diff_review.diffing.diff_computer import DiffComputer
from inline_diff_review.exceptions import IntegrityError, PendingChunksError
from inline_diff_review.models.chunk import Decision, DiffChunk, TextRange
from inline_diff_review.review import chunk_store
from inline_diff_review.review.reconstructor import ContentReconstructor


def chunks_for(old, new, min_gap_size=50):
    return ChunkGrouper().group(DiffComputer().diff(old, new), min_gap_size=min_gap_size)


def accept_all(chunks):
    return [Decision(chunk.id, True) for chunk in chunks]


class TestApply:
    """Tests for applying decisions to original content."""

    def test_partial_multi_chunk_acceptance(self):
        """Test accepting the first of two chunks and rejecting the second."""
        old = "Hello world. Goodbye world."
        new = "Hello universe. Goodbye universe."
        chunks = chunks_for(old, new, min_gap_size=5)
        assert len(chunks) == 2

        decisions = [Decision(chunks[0].id, True), Decision(chunks[1].id, False)]

        assert ContentReconstructor().apply(old, chunks, decisions) == "Hello universe. Goodbye world."

    def test_accepting_only_later_chunk(self):
        """Test that a later chunk applies correctly when earlier ones are rejected."""
        old = "Hello world. Goodbye world."
        new = "Hello universe. Goodbye universe."
        chunks = chunks_for(old, new, min_gap_size=5)

        result = ContentReconstructor().apply(old, chunks, [Decision(chunks[1].id, True)])

        assert result == "Hello world. Goodbye universe."

    def test_accept_all_reaches_target(self):
        """Test that accepting every chunk yields the target content."""
        old = "alpha beta gamma delta\nepsilon zeta\n"
        new = "alpha BETA gamma\nepsilon zeta eta\ntheta\n"
        chunks = chunks_for(old, new, min_gap_size=3)

        assert ContentReconstructor().apply(old, chunks, accept_all(chunks)) == new

    def test_no_decisions_keeps_original(self):
        """Test that chunks without decisions are left untouched."""
        old = "keep me as I am"
        chunks = chunks_for(old, "change me entirely")

        assert ContentReconstructor().apply(old, chunks, []) == old

    def test_rejected_decisions_keep_original(self):
        """Test that explicit rejections leave the original text."""
        old = "keep me as I am"
        chunks = chunks_for(old, "change me entirely")
        decisions = [Decision(chunk.id, False) for chunk in chunks]

        assert ContentReconstructor().apply(old, chunks, decisions) == old

    def test_decisions_for_unknown_ids_ignored(self):
        """Test that decisions naming other chunks have no effect."""
        old = "some text"
        chunks = chunks_for(old, "some other text")

        assert ContentReconstructor().apply(old, chunks, [Decision("elsewhere", True)]) == old

    def test_length_changes_do_not_shift_later_chunks(self):
        """Test descending application with growing and shrinking replacements."""
        old = "a" + "-" * 10 + "bb" + "-" * 10 + "ccc"
        new = "AAAAAA" + "-" * 10 + "" + "-" * 10 + "C"
        chunks = chunks_for(old, new, min_gap_size=5)

        assert ContentReconstructor().apply(old, chunks, accept_all(chunks)) == new


class TestIntegrity:
    """Tests for integrity checks during reconstruction."""

    def test_range_outside_content(self):
        """Test that a chunk beyond the end of the content aborts reconstruction."""
        chunk = DiffChunk("chunk_1", TextRange(20, 25), TextRange(20, 21), "hello", "x")

        with pytest.raises(IntegrityError) as exc_info:
            ContentReconstructor().apply("short", [chunk], [Decision("chunk_1", True)])

        assert exc_info.value.chunk_ids == ["chunk_1"]

    def test_stale_content_detected(self):
        """Test that chunks computed against other content are refused."""
        chunks = chunks_for("Hello world", "Hello there")

        with pytest.raises(IntegrityError):
            ContentReconstructor().apply("Hello earth", chunks, accept_all(chunks))

    def test_no_partial_application(self):
        """Test that one invalid chunk prevents applying the valid ones."""
        valid = DiffChunk("chunk_1", TextRange(0, 1), TextRange(0, 1), "a", "A")
        invalid = DiffChunk("chunk_2", TextRange(50, 51), TextRange(50, 51), "z", "Z")

        with pytest.raises(IntegrityError) as exc_info:
            ContentReconstructor().apply("abc", [valid, invalid], accept_all([valid, invalid]))

        assert exc_info.value.chunk_ids == ["chunk_2"]

    def test_overlapping_chunks_rejected(self):
        """Test that overlapping accepted chunks are refused."""
        first = DiffChunk("chunk_1", TextRange(0, 3), TextRange(0, 1), "abc", "X")
        second = DiffChunk("chunk_2", TextRange(2, 4), TextRange(1, 2), "cd", "Y")

        with pytest.raises(IntegrityError):
            ContentReconstructor().apply("abcdef", [first, second], accept_all([first, second]))

    def test_invalid_rejected_chunk_is_ignored(self):
        """Test that only accepted chunks are checked."""
        stale = DiffChunk("chunk_1", TextRange(50, 51), TextRange(50, 51), "z", "Z")

        assert ContentReconstructor().apply("abc", [stale], [Decision("chunk_1", False)]) == "abc"


class TestReconstruct:
    """Tests for status-driven reconstruction."""

    def test_refuses_pending_chunks(self):
        """Test that reconstruction requires every chunk to be decided."""
        chunks = chunks_for("Hello world", "Hello there")

        with pytest.raises(PendingChunksError) as exc_info:
            ContentReconstructor().reconstruct("Hello world", chunks)

        assert exc_info.value.pending_count == 1

    def test_uses_chunk_statuses(self):
        """Test that accepted statuses drive reconstruction."""
        old = "Hello world. Goodbye world."
        chunks = chunks_for(old, "Hello universe. Goodbye universe.", min_gap_size=5)
        state = chunk_store.reject_chunk(chunks, chunks[0].id)
        state = chunk_store.accept_all_pending(state)

        assert ContentReconstructor().reconstruct(old, state) == "Hello world. Goodbye universe."

    def test_empty_review(self):
        """Test that a review without chunks reconstructs the original."""
        assert ContentReconstructor().reconstruct("same", ()) == "same"
