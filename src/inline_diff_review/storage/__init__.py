"""Document storage for the inline diff review engine."""

from .database import DatabaseManager, get_database_url
from .document_store import (
    FileDocumentStore,
    SqlDocumentStore,
    create_document_store,
    normalize_document_path,
)

__all__ = [
    "DatabaseManager",
    "FileDocumentStore",
    "SqlDocumentStore",
    "create_document_store",
    "get_database_url",
    "normalize_document_path",
]
