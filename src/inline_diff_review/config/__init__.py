"""Configuration management for the inline diff review engine."""

from .config_manager import ConfigurationManager
from .models import (
    ConfigurationError,
    ReviewConfiguration,
    StorageBackend,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "ConfigurationError",
    "ReviewConfiguration",
    "StorageBackend",
    "ValidationResult",
]
