"""Core module exports."""

from umlseed.core.errors import (
    ArchiveError,
    ConfigError,
    ErrorCode,
    GenerationError,
    InternalError,
    ModelReferenceError,
    UmlSeedError,
    VocabularyError,
)
from umlseed.core.logging import configure_logging, get_log_file_path, get_logger, run_context
from umlseed.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ArchiveError",
    "ConfigError",
    "ErrorCode",
    "GenerationError",
    "InternalError",
    "ModelReferenceError",
    "UmlSeedError",
    "VocabularyError",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
    "run_context",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
