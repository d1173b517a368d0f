"""Data models for configuration management."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class StorageBackend(Enum):
    """Document store backends supported by the review engine."""
    FILE = "file"
    SQL = "sql"


@dataclass
class ReviewConfiguration:
    """
    Complete review engine configuration.

    Groups the diff, chunking, storage and logging settings.
    """
    min_gap_size: int = 50
    diff_timeout: float = 0.0  # seconds, 0 = unbounded
    semantic_cleanup: bool = True
    line_mode: bool = False
    storage_backend: StorageBackend = StorageBackend.FILE
    document_root: str = "."
    database_url: Optional[str] = None
    encoding: str = "utf-8"
    log_level: str = "INFO"


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
