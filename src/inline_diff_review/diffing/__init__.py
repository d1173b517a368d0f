"""Diff computation and chunk grouping for the inline diff review engine."""

from .diff_computer import DiffComputer
from .chunk_grouper import DEFAULT_MIN_GAP_SIZE, ChunkGrouper, ChunkIdGenerator

__all__ = [
    "DEFAULT_MIN_GAP_SIZE",
    "ChunkGrouper",
    "ChunkIdGenerator",
    "DiffComputer",
]
