"""Document store implementations backing review commits."""

import logging
from pathlib import Path
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from ..config.models import ReviewConfiguration, StorageBackend
from ..exceptions import InputError, WriteError
from ..interfaces.store import IDocumentStore
from .database import DatabaseManager
from .models import DocumentModel

logger = logging.getLogger(__name__)


def normalize_document_path(path: str) -> str:
    """
    Normalize a document path received from a host or agent.

    Leading slashes are stripped so that absolute-looking paths address
    documents relative to the store root.

    Raises:
        InputError: If the path is empty.
    """
    if not isinstance(path, str) or not path.strip():
        raise InputError("Document path must be a non-empty string", details={"path": path})
    normalized = path.strip().lstrip("/")
    if not normalized:
        raise InputError("Document path must name a document", document_path=path)
    return normalized


class FileDocumentStore(IDocumentStore):
    """
    Document store over a directory of text files.

    Files are read and written without newline translation so that
    offsets computed on the content stay valid on disk.
    """

    def __init__(self, root: Union[str, Path] = ".", encoding: str = "utf-8"):
        """
        Initialize the file store.

        Args:
            root: Directory that document paths are resolved against.
            encoding: Text encoding of the documents.
        """
        self.root = Path(root).resolve()
        self.encoding = encoding

    def _resolve(self, path: str) -> Path:
        target = (self.root / normalize_document_path(path)).resolve()
        if target != self.root and self.root not in target.parents:
            raise InputError("Document path escapes the store root", document_path=path)
        return target

    def read(self, path: str) -> str:
        target = self._resolve(path)
        if not target.is_file():
            raise InputError("Document not found", document_path=path)
        with open(target, "r", encoding=self.encoding, newline="") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to write {target}: {e}")
            raise WriteError(
                f"Failed to write document: {e}",
                document_path=path,
                details={"file": str(target)},
            ) from e
        logger.info(f"Wrote {len(content)} characters to {target}")

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()


class SqlDocumentStore(IDocumentStore):
    """Document store persisting documents in a SQL ``documents`` table."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        """
        Initialize the SQL store.

        Args:
            db_manager: Optional database manager. If not provided,
                       a new one will be created.
        """
        self._db_manager = db_manager or DatabaseManager()

    def read(self, path: str) -> str:
        key = normalize_document_path(path)
        with self._db_manager.get_session() as db:
            document = db.get(DocumentModel, key)
            if document is None:
                raise InputError("Document not found", document_path=path)
            return document.content

    def write(self, path: str, content: str) -> None:
        key = normalize_document_path(path)
        try:
            with self._db_manager.get_session() as db:
                document = db.get(DocumentModel, key)
                if document is None:
                    db.add(DocumentModel(path=key, content=content, revision=1))
                else:
                    document.content = content
                    document.revision = (document.revision or 0) + 1
        except SQLAlchemyError as e:
            logger.error(f"Failed to write document {key}: {e}")
            raise WriteError(f"Failed to write document: {e}", document_path=path) from e
        logger.info(f"Stored {len(content)} characters for {key}")

    def exists(self, path: str) -> bool:
        key = normalize_document_path(path)
        with self._db_manager.get_session() as db:
            return db.get(DocumentModel, key) is not None


def create_document_store(config: ReviewConfiguration) -> IDocumentStore:
    """
    Build the document store selected by the configuration.

    Args:
        config: Review configuration.

    Returns:
        A FileDocumentStore or an initialized SqlDocumentStore.
    """
    if config.storage_backend == StorageBackend.SQL:
        db_manager = DatabaseManager(database_url=config.database_url)
        db_manager.init_database()
        return SqlDocumentStore(db_manager)
    return FileDocumentStore(root=config.document_root, encoding=config.encoding)
