"""Review interface for the inline diff review engine."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.session import FinalResult, ReviewSession


class IReviewInterface(ABC):
    """
    Abstract interface exposed to the host presentation layer.

    Implementations open review sessions for proposed edits, apply the
    reviewer's decisions and commit the reconstructed document.
    """

    @abstractmethod
    def open_review(
        self,
        path: str,
        original_content: str,
        target_content: str,
        min_gap_size: Optional[int] = None,
    ) -> ReviewSession:
        """
        Open a review session for a proposed edit.

        Args:
            path: Path of the document being edited.
            original_content: Current content of the document.
            target_content: Content proposed by the agent.
            min_gap_size: Optional override of the chunk gap threshold.

        Returns:
            ReviewSession with one pending chunk per reviewable change.
        """
        pass

    @abstractmethod
    def decide(self, session: ReviewSession, chunk_id: str, accepted: bool) -> ReviewSession:
        """
        Accept or reject a single chunk.

        Args:
            session: The session to act on.
            chunk_id: Id of the chunk being decided.
            accepted: True to accept, False to reject.

        Returns:
            The resulting session.
        """
        pass

    @abstractmethod
    def decide_all(self, session: ReviewSession, accepted: bool) -> ReviewSession:
        """
        Accept or reject every pending chunk.

        Args:
            session: The session to act on.
            accepted: True to accept, False to reject.

        Returns:
            The resulting session.
        """
        pass

    @abstractmethod
    def is_done(self, session: ReviewSession) -> bool:
        """Check whether every chunk of the session has been decided."""
        pass

    @abstractmethod
    def commit(self, session: ReviewSession) -> FinalResult:
        """
        Reconstruct the final content and write it to the document store.

        Args:
            session: A fully processed session.

        Returns:
            FinalResult describing what happened.
        """
        pass
