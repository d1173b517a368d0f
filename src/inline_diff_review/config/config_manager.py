"""Configuration Manager implementation for the inline diff review engine.

This module provides functionality to load, validate, and manage the
diff, chunking, storage and logging configuration.
"""

import codecs
import json
import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .models import (
    ConfigurationError,
    ReviewConfiguration,
    StorageBackend,
    ValidationResult,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "INLINE_DIFF_REVIEW_"

_TRUTHY = {"1", "true", "yes", "y"}
_FALSY = {"0", "false", "no", "n"}
_LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class ConfigurationManager:
    """
    Manager for review engine configuration.

    Handles loading configuration from JSON files, dictionaries and
    environment variables, validating it, and saving it back.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path of the JSON configuration file.
        """
        self._config_path = Path(config_path) if config_path else None
        self._configuration = ReviewConfiguration()
        self._is_loaded = False

    @property
    def configuration(self) -> ReviewConfiguration:
        """Get the current review configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Loading
    # =========================================================================

    def load_configuration(
        self,
        source: Union[str, Path, Dict[str, Any]],
    ) -> ValidationResult:
        """
        Load and validate a configuration.

        Keys missing from the source keep their current values.

        Args:
            source: JSON file path or dictionary.

        Returns:
            ValidationResult with any warnings.

        Raises:
            ConfigurationError: If the source is missing or invalid.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        merged = self.to_dict()
        merged.update(raw_data)

        result, config = self._validate(merged)
        if not result.is_valid:
            raise ConfigurationError(
                "Review configuration validation failed",
                validation_result=result,
            )

        for warning in result.warnings:
            logger.warning(warning)

        self._configuration = config
        self._is_loaded = True
        if isinstance(source, (str, Path)):
            self._config_path = Path(source)
        return result

    def load_from_env(self, environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Apply ``INLINE_DIFF_REVIEW_*`` environment overrides.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.

        Returns:
            ValidationResult for the overridden configuration.

        Raises:
            ConfigurationError: If an override cannot be parsed or is invalid.
        """
        environ = os.environ if environ is None else environ
        result = ValidationResult(is_valid=True)
        overrides: Dict[str, Any] = {}

        for config_field in fields(ReviewConfiguration):
            env_name = ENV_PREFIX + config_field.name.upper()
            if env_name not in environ:
                continue
            value, error = self._convert_env_value(config_field.name, environ[env_name])
            if error:
                result.add_error(f"{env_name}: {error}")
            else:
                overrides[config_field.name] = value

        if not result.is_valid:
            raise ConfigurationError(
                "Environment configuration is invalid",
                validation_result=result,
            )

        if not overrides:
            return result
        return result.merge(self.load_configuration(overrides))

    def _convert_env_value(self, name: str, raw: str) -> Tuple[Any, Optional[str]]:
        """Convert an environment string to the type of a configuration field."""
        raw = raw.strip()
        if name == "min_gap_size":
            try:
                return int(raw), None
            except ValueError:
                return None, f"expected an integer, got '{raw}'"
        if name == "diff_timeout":
            try:
                return float(raw), None
            except ValueError:
                return None, f"expected a number, got '{raw}'"
        if name in ("semantic_cleanup", "line_mode"):
            lowered = raw.lower()
            if lowered in _TRUTHY:
                return True, None
            if lowered in _FALSY:
                return False, None
            return None, f"expected a boolean, got '{raw}'"
        if name == "database_url":
            return raw or None, None
        return raw, None

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_configuration(self, data: Dict[str, Any]) -> ValidationResult:
        """
        Validate a configuration dictionary without applying it.

        Args:
            data: Configuration values keyed by field name.

        Returns:
            ValidationResult with all errors and warnings.
        """
        merged = ConfigurationManager().to_dict()
        merged.update(data)
        result, _ = self._validate(merged)
        return result

    def _validate(self, data: Dict[str, Any]) -> Tuple[ValidationResult, Optional[ReviewConfiguration]]:
        """Validate a complete configuration dictionary."""
        result = ValidationResult(is_valid=True)
        known = {f.name for f in fields(ReviewConfiguration)}

        for key in data:
            if key not in known:
                result.add_warning(f"Unknown configuration key '{key}' ignored")

        min_gap_size = data["min_gap_size"]
        if isinstance(min_gap_size, bool) or not isinstance(min_gap_size, int) or min_gap_size < 0:
            result.add_error("'min_gap_size' must be a non-negative integer")

        diff_timeout = data["diff_timeout"]
        if isinstance(diff_timeout, bool) or not isinstance(diff_timeout, (int, float)) or diff_timeout < 0:
            result.add_error("'diff_timeout' must be a non-negative number")
        elif diff_timeout > 0:
            result.add_warning(
                "'diff_timeout' is set; large diffs may become non-minimal and vary between runs"
            )

        for flag in ("semantic_cleanup", "line_mode"):
            if not isinstance(data[flag], bool):
                result.add_error(f"'{flag}' must be a boolean")

        backend = data["storage_backend"]
        if isinstance(backend, StorageBackend):
            backend = backend.value
        valid_backends = [b.value for b in StorageBackend]
        if backend not in valid_backends:
            result.add_error(f"'storage_backend' must be one of {valid_backends}")

        document_root = data["document_root"]
        if not isinstance(document_root, str) or not document_root.strip():
            result.add_error("'document_root' must be a non-empty string")

        database_url = data["database_url"]
        if database_url is not None and (not isinstance(database_url, str) or not database_url.strip()):
            result.add_error("'database_url' must be a non-empty string or null")
        elif backend == StorageBackend.SQL.value and database_url is None:
            result.add_warning("'database_url' not set; the default SQLite database will be used")

        encoding = data["encoding"]
        try:
            codecs.lookup(encoding)
        except (LookupError, TypeError):
            result.add_error(f"'encoding' is not a known text encoding: {encoding!r}")

        log_level = data["log_level"]
        if not isinstance(log_level, str) or log_level.upper() not in _LOG_LEVELS:
            result.add_error(f"'log_level' must be one of {_LOG_LEVELS}")

        if not result.is_valid:
            return result, None

        config = ReviewConfiguration(
            min_gap_size=min_gap_size,
            diff_timeout=float(diff_timeout),
            semantic_cleanup=data["semantic_cleanup"],
            line_mode=data["line_mode"],
            storage_backend=StorageBackend(backend),
            document_root=document_root.strip(),
            database_url=database_url.strip() if database_url else None,
            encoding=encoding,
            log_level=log_level.upper(),
        )
        return result, config

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any]],
    ) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return source

    def save_configuration(self, config_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save current configuration as JSON.

        Args:
            config_path: File to save to. Uses the loaded path if None.

        Returns:
            The path written.
        """
        config_path = Path(config_path) if config_path else self._config_path
        if not config_path:
            raise ConfigurationError("No configuration path specified")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        self._config_path = config_path
        return config_path

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = ReviewConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        config = self._configuration
        return {
            "min_gap_size": config.min_gap_size,
            "diff_timeout": config.diff_timeout,
            "semantic_cleanup": config.semantic_cleanup,
            "line_mode": config.line_mode,
            "storage_backend": config.storage_backend.value,
            "document_root": config.document_root,
            "database_url": config.database_url,
            "encoding": config.encoding,
            "log_level": config.log_level,
        }
