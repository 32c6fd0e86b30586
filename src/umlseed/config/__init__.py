"""Config module exports."""

from umlseed.config.loader import load_config
from umlseed.config.models import (
    GenerationConfig,
    LoggingConfig,
    LogOutputConfig,
    StoreConfig,
    UmlSeedConfig,
)

__all__ = [
    "load_config",
    "GenerationConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "StoreConfig",
    "UmlSeedConfig",
]
