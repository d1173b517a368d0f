"""Review module for the inline diff review engine."""

from . import chunk_store
from .reconstructor import ContentReconstructor
from .review_manager import ReviewManager

__all__ = [
    "chunk_store",
    "ContentReconstructor",
    "ReviewManager",
]
