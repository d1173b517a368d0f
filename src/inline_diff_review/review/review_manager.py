"""Review session management implementation."""

import logging
import threading
import uuid
from typing import Dict, List, Optional

from ..config.models import ReviewConfiguration
from ..diffing.chunk_grouper import ChunkGrouper
from ..diffing.diff_computer import DiffComputer
from ..exceptions import (
    InputError,
    IntegrityError,
    PendingChunksError,
    SessionClosedError,
)
from ..interfaces.review import IReviewInterface
from ..interfaces.store import IDocumentStore
from ..models.chunk import ReviewCommand
from ..models.session import FinalResult, ReviewSession
from ..storage.document_store import normalize_document_path
from . import chunk_store
from .reconstructor import ContentReconstructor

logger = logging.getLogger(__name__)


class ReviewManager(IReviewInterface):
    """
    Implementation of review session management.

    Keeps at most one live session per document path, applies decision
    commands through the chunk store reducer and commits each session
    at most once.
    """

    def __init__(
        self,
        document_store: IDocumentStore,
        diff_computer: Optional[DiffComputer] = None,
        chunk_grouper: Optional[ChunkGrouper] = None,
        reconstructor: Optional[ContentReconstructor] = None,
    ):
        """
        Initialize the review manager.

        Args:
            document_store: Store the committed content is written to.
            diff_computer: Optional diff computer. Defaults to a deterministic one.
            chunk_grouper: Optional chunk grouper with the default gap threshold.
            reconstructor: Optional content reconstructor.
        """
        self._store = document_store
        self._diff_computer = diff_computer or DiffComputer()
        self._chunk_grouper = chunk_grouper or ChunkGrouper()
        self._reconstructor = reconstructor or ContentReconstructor()
        self._live: Dict[str, ReviewSession] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_configuration(
        cls,
        config: ReviewConfiguration,
        document_store: IDocumentStore,
    ) -> "ReviewManager":
        """Build a manager whose diff and chunking follow ``config``."""
        return cls(
            document_store=document_store,
            diff_computer=DiffComputer(
                timeout=config.diff_timeout,
                semantic_cleanup=config.semantic_cleanup,
                line_mode=config.line_mode,
            ),
            chunk_grouper=ChunkGrouper(min_gap_size=config.min_gap_size),
        )

    @property
    def document_store(self) -> IDocumentStore:
        return self._store

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def open_review(
        self,
        path: str,
        original_content: str,
        target_content: str,
        min_gap_size: Optional[int] = None,
    ) -> ReviewSession:
        """
        Open a review session for a proposed edit.

        Any uncommitted session for the same document is discarded
        without being written.

        Args:
            path: Path of the document being edited.
            original_content: Current content of the document.
            target_content: Content proposed by the agent.
            min_gap_size: Optional override of the chunk gap threshold.

        Returns:
            ReviewSession with one pending chunk per reviewable change.

        Raises:
            InputError: If the path or contents are malformed.
        """
        document_path = normalize_document_path(path)
        if not isinstance(original_content, str) or not isinstance(target_content, str):
            raise InputError("Review contents must be strings", document_path=document_path)

        gap_size = self._chunk_grouper.min_gap_size if min_gap_size is None else min_gap_size
        ops = self._diff_computer.diff(original_content, target_content)
        chunks = self._chunk_grouper.group(ops, min_gap_size=gap_size)

        session = ReviewSession(
            id=uuid.uuid4().hex,
            document_path=document_path,
            original_content=original_content,
            target_content=target_content,
            chunks=tuple(chunks),
            min_gap_size=gap_size,
        )

        with self._lock:
            previous = self._live.get(document_path)
            if previous is not None:
                logger.warning(
                    f"Discarding uncommitted review {previous.id} for {document_path}"
                )
            self._live[document_path] = session

        logger.info(f"Opened review {session.id} for {document_path} with {len(chunks)} chunks")
        return session

    def get_session(self, path: str) -> Optional[ReviewSession]:
        """Get the live session for a document, if any."""
        with self._lock:
            return self._live.get(normalize_document_path(path))

    def get_session_by_id(self, session_id: str) -> Optional[ReviewSession]:
        """Get a live session by its id, if any."""
        with self._lock:
            for session in self._live.values():
                if session.id == session_id:
                    return session
        return None

    def list_sessions(self) -> List[ReviewSession]:
        """Get all live sessions."""
        with self._lock:
            return list(self._live.values())

    def discard(self, session: ReviewSession) -> bool:
        """
        Drop a live session without writing anything.

        Returns:
            True if the session was live and has been discarded.
        """
        with self._lock:
            if self._is_live(session):
                del self._live[session.document_path]
                logger.info(f"Discarded review {session.id} for {session.document_path}")
                return True
        return False

    def discard_all(self) -> int:
        """
        Drop every live session without writing anything.

        Returns:
            Number of sessions discarded.
        """
        with self._lock:
            count = len(self._live)
            self._live.clear()
        logger.info(f"Discarded {count} open reviews")
        return count

    # =========================================================================
    # Decisions
    # =========================================================================

    def decide(self, session: ReviewSession, chunk_id: str, accepted: bool) -> ReviewSession:
        command = ReviewCommand.accept(chunk_id) if accepted else ReviewCommand.reject(chunk_id)
        return self.dispatch(session, command)

    def decide_all(self, session: ReviewSession, accepted: bool) -> ReviewSession:
        command = ReviewCommand.accept_all() if accepted else ReviewCommand.reject_all()
        return self.dispatch(session, command)

    def dispatch(self, session: ReviewSession, command: ReviewCommand) -> ReviewSession:
        """
        Apply a decision command to a live session.

        Decisions are applied to the latest state of the session, so a
        caller holding an older copy still cannot reopen a decided chunk.

        Args:
            session: The session to act on.
            command: Decision command.

        Returns:
            The resulting session; the same object when nothing changed.

        Raises:
            SessionClosedError: If the session was committed or replaced.
        """
        with self._lock:
            current = self._require_live(session)
            updated = current.with_chunks(chunk_store.apply_command(current.chunks, command))
            if updated is not current:
                self._live[current.document_path] = updated
            return updated

    def is_done(self, session: ReviewSession) -> bool:
        """
        Check whether every chunk of the session has been decided.

        A live session is answered from its latest state; a closed one
        from the copy passed in.
        """
        with self._lock:
            current = self._live[session.document_path] if self._is_live(session) else session
        return chunk_store.is_fully_processed(current.chunks)

    def statistics(self, session: ReviewSession) -> dict:
        """Review progress statistics for a session."""
        return chunk_store.review_statistics(session.chunks)

    # =========================================================================
    # Commit
    # =========================================================================

    def commit(self, session: ReviewSession) -> FinalResult:
        """
        Reconstruct the final content and write it to the document store.

        The content is rebuilt from the document as currently stored, so a
        document changed since the review opened is reported as an
        integrity error rather than overwritten.

        Args:
            session: A fully processed session.

        Returns:
            FinalResult: WRITTEN with the final content, DISCARDED when no
            chunk was accepted, or INTEGRITY_ERROR when the chunks no longer
            fit the stored document. The session stays open on integrity
            errors.

        Raises:
            SessionClosedError: If the session was already committed or replaced.
            PendingChunksError: If any chunk is still pending.
            WriteError: If the store fails; the session stays open.
        """
        with self._lock:
            current = self._require_live(session)
            path = current.document_path

            pending = chunk_store.pending_count(current.chunks)
            if pending:
                raise PendingChunksError(
                    f"Cannot commit while {pending} chunks are pending",
                    document_path=path,
                    pending_count=pending,
                )

            accepted = chunk_store.accepted_chunks(current.chunks)
            if not accepted:
                self._close(current)
                logger.info(f"Review {current.id} for {path} discarded: no changes accepted")
                return FinalResult.discarded()

            original = self._store.read(path) if self._store.exists(path) else ""
            try:
                final_content = self._reconstructor.reconstruct(original, current.chunks)
            except IntegrityError as e:
                e.document_path = path
                logger.warning(f"Review {current.id} for {path} no longer applies: {e.details}")
                return FinalResult.integrity_error(str(e))

            self._store.write(path, final_content)
            self._close(current)

        logger.info(f"Committed review {current.id} for {path}: {len(accepted)} chunks applied")
        return FinalResult.written(final_content, accepted_count=len(accepted))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_live(self, session: ReviewSession) -> bool:
        live = self._live.get(session.document_path)
        return live is not None and live.id == session.id

    def _require_live(self, session: ReviewSession) -> ReviewSession:
        if not self._is_live(session):
            raise SessionClosedError(
                "Review session is no longer open",
                document_path=session.document_path,
                session_id=session.id,
            )
        return self._live[session.document_path]

    def _close(self, session: ReviewSession) -> None:
        del self._live[session.document_path]
