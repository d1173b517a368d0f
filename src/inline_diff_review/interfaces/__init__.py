"""Abstract interfaces for the inline diff review engine."""

from .store import IDocumentStore
from .review import IReviewInterface

__all__ = [
    "IDocumentStore",
    "IReviewInterface",
]
