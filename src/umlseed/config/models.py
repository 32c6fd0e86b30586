"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (UMLSEED__SECTION__KEY)
3. Explicit YAML file (umlseed --config PATH)
4. Global YAML (~/.config/umlseed/config.yaml)
5. Built-in defaults (this file)

Examples:
    UMLSEED__LOGGING__LEVEL=DEBUG
    UMLSEED__GENERATION__ROWS_PER_TABLE=50
    UMLSEED__GENERATION__SEED=1234
    UMLSEED__STORE__PATH=/tmp/umlseed.json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_ROWS_PER_TABLE = 20
DEFAULT_STORE_PATH = "~/.local/state/umlseed/store.json"


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        UMLSEED__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG traces every parsed document.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GenerationConfig(BaseModel):
    """Fake entry generation.

    Env vars:
        UMLSEED__GENERATION__ROWS_PER_TABLE: Rows generated for every table
        UMLSEED__GENERATION__SEED: Seed for reproducible output
    """

    rows_per_table: int = Field(
        default=DEFAULT_ROWS_PER_TABLE,
        description="Number of rows generated for each table.",
    )
    seed: int | None = Field(
        default=None,
        description="Random seed. Unset means a fresh random source per run.",
    )

    @field_validator("rows_per_table")
    @classmethod
    def validate_rows_per_table(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"rows_per_table must be >= 0, got {v}")
        return v


class StoreConfig(BaseModel):
    """Location of the persisted current collection.

    Env vars:
        UMLSEED__STORE__PATH: JSON file holding the last parsed schema
    """

    path: str = Field(
        default=DEFAULT_STORE_PATH,
        description="JSON key-value file for the last parsed table collection.",
    )

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        return str(Path(v).expanduser())


class UmlSeedConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
