"""Document store interface for the inline diff review engine."""

from abc import ABC, abstractmethod


class IDocumentStore(ABC):
    """
    Abstract interface for the host document store.

    The review engine only reads the current content of a document,
    checks that it exists, and writes the reconstructed content back.
    """

    @abstractmethod
    def read(self, path: str) -> str:
        """
        Read the full content of a document.

        Args:
            path: Document path.

        Returns:
            The document content.
        """
        pass

    @abstractmethod
    def write(self, path: str, content: str) -> None:
        """
        Replace the content of a document, creating it if needed.

        Args:
            path: Document path.
            content: New document content.

        Raises:
            WriteError: If the content could not be persisted.
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """
        Check whether a document exists.

        Args:
            path: Document path.

        Returns:
            True if the document exists.
        """
        pass
