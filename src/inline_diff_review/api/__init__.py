"""HTTP surface for the inline diff review engine."""

from .app import create_app

__all__ = ["create_app"]
