"""Per-column value generation strategies.

Each column gets one strategy ("guess"), derived from its type, key flags,
name keywords and check constraint, and optionally replaced by a user
override. The strategy variant always matches the column's SQL type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from umlseed.core.errors import ConfigError, GenerationError
from umlseed.project.models import OneOf, SQLColumn, SQLTable, SQLTableCollection, SQLTypeName


class TimeGuess(str, Enum):
    NOW = "now"
    FUTURE = "future"
    PAST = "past"


class BoolGuess(str, Enum):
    TRUE = "true"
    FALSE = "false"
    RANDOM = "random"


class StringGuess(str, Enum):
    LOREM_IPSUM = "lorem_ipsum"
    EMPTY = "empty"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    FULL_NAME = "full_name"
    PHONE_NUMBER = "phone_number"
    CITY_NAME = "city_name"
    ADDRESS = "address"
    EMAIL = "email"
    URL = "url"
    RANDOM_ENUM = "random_enum"


@dataclass(frozen=True, slots=True)
class IntRange:
    min: int = 0
    max: int = 100


@dataclass(frozen=True, slots=True)
class AutoIncrement:
    pass


@dataclass(frozen=True, slots=True)
class IntValueGuess:
    strategy: IntRange | AutoIncrement


@dataclass(frozen=True, slots=True)
class FloatValueGuess:
    min: float = 0.0
    max: float = 100.0


@dataclass(frozen=True, slots=True)
class TimeValueGuess:
    type_name: SQLTypeName  # DATE, TIME or DATETIME
    when: TimeGuess = TimeGuess.NOW


@dataclass(frozen=True, slots=True)
class BoolValueGuess:
    mode: BoolGuess = BoolGuess.RANDOM


@dataclass(frozen=True, slots=True)
class StringValueGuess:
    max_length: int
    kind: StringGuess = StringGuess.LOREM_IPSUM
    options: tuple[str, ...] = ()  # RANDOM_ENUM only


SQLValueGuess = IntValueGuess | FloatValueGuess | TimeValueGuess | BoolValueGuess | StringValueGuess

# Ordered: first matching rule wins
_NAME_RULES: tuple[tuple[tuple[tuple[str, ...], ...], StringGuess], ...] = (
    ((("first", "name"),), StringGuess.FIRST_NAME),
    ((("last", "name"), ("surname",)), StringGuess.LAST_NAME),
    ((("phone", "number"),), StringGuess.PHONE_NUMBER),
    ((("city",),), StringGuess.CITY_NAME),
    ((("address",),), StringGuess.ADDRESS),
    ((("email",),), StringGuess.EMAIL),
    ((("homepage",), ("website",), ("url",)), StringGuess.URL),
)


def _string_guess_for(column: SQLColumn) -> tuple[StringGuess, tuple[str, ...]]:
    check = column.check_constraint
    if check is not None:
        # Any check wins over name keywords
        if isinstance(check, OneOf):
            return StringGuess.RANDOM_ENUM, tuple(check.options)
        return StringGuess.LOREM_IPSUM, ()

    name = column.name.lower()
    for alternatives, guess in _NAME_RULES:
        if any(all(word in name for word in words) for words in alternatives):
            return guess, ()
    return StringGuess.LOREM_IPSUM, ()


def generate_guess(column: SQLColumn) -> SQLValueGuess:
    """Derive the default generation strategy for a column."""
    type_name = column.sql_type.name

    if type_name is SQLTypeName.INT:
        if column.primary_key:
            return IntValueGuess(AutoIncrement())
        return IntValueGuess(IntRange(0, 100))

    if type_name in (SQLTypeName.FLOAT, SQLTypeName.DECIMAL):
        return FloatValueGuess(0.0, 100.0)

    if type_name.is_temporal:
        name = column.name.lower()
        when = TimeGuess.PAST if "create" in name or "update" in name else TimeGuess.NOW
        return TimeValueGuess(type_name, when)

    if type_name is SQLTypeName.BOOL:
        return BoolValueGuess(BoolGuess.RANDOM)

    kind, options = _string_guess_for(column)
    return StringValueGuess(column.sql_type.size or 0, kind, options)


def generate_table_guesses(table: SQLTable) -> list[SQLValueGuess]:
    return [generate_guess(column) for column in table.columns]


def parse_guess_override(column: SQLColumn, data: Mapping[str, Any]) -> SQLValueGuess:
    """Build a strategy for ``column`` from plain override data.

    Examples (YAML)::

        id: {strategy: auto_increment}
        age: {strategy: range, min: 18, max: 99}
        created_at: {strategy: past}
        role: {strategy: random_enum, options: [admin, user]}

    Raises:
        GenerationError: If the strategy does not fit the column type.
    """
    if not isinstance(data, Mapping):
        raise GenerationError.invalid_guess(
            column.name, f"expected a mapping with a 'strategy' key, got {data!r}"
        )
    strategy = str(data.get("strategy", "")).lower()
    type_name = column.sql_type.name

    def invalid(reason: str) -> GenerationError:
        return GenerationError.invalid_guess(column.name, reason)

    try:
        if type_name is SQLTypeName.INT:
            if strategy == "auto_increment":
                return IntValueGuess(AutoIncrement())
            if strategy == "range":
                low, high = int(data.get("min", 0)), int(data.get("max", 100))
                if low > high:
                    raise invalid(f"min {low} is greater than max {high}")
                return IntValueGuess(IntRange(low, high))
            raise invalid(f"'{strategy}' is not an INT strategy (range, auto_increment)")

        if type_name in (SQLTypeName.FLOAT, SQLTypeName.DECIMAL):
            if strategy != "range":
                raise invalid(f"'{strategy}' is not a {type_name.value.upper()} strategy (range)")
            low, high = float(data.get("min", 0.0)), float(data.get("max", 100.0))
            if low > high:
                raise invalid(f"min {low} is greater than max {high}")
            return FloatValueGuess(low, high)

        if type_name.is_temporal:
            return TimeValueGuess(type_name, TimeGuess(strategy))

        if type_name is SQLTypeName.BOOL:
            return BoolValueGuess(BoolGuess(strategy))

        kind = StringGuess(strategy)
    except (TypeError, ValueError) as e:
        raise invalid(str(e)) from e

    options: tuple[str, ...] = ()
    if kind is StringGuess.RANDOM_ENUM:
        options = tuple(str(option) for option in data.get("options") or ())
        if not options:
            raise invalid("random_enum needs at least one option")
    return StringValueGuess(column.sql_type.size or 0, kind, options)


def load_overrides(path: Path) -> dict[str, dict[str, dict[str, Any]]]:
    """Read ``{table: {column: {strategy: ...}}}`` overrides from YAML."""
    if not path.exists():
        raise ConfigError.file_not_found(str(path))
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ConfigError.parse_error(
            str(path), "expected a mapping of table -> column -> strategy"
        )
    for table, columns in data.items():
        for column, override in columns.items():
            if not isinstance(override, dict):
                raise ConfigError.parse_error(
                    str(path),
                    f"override for {table}.{column} must be a mapping with a 'strategy' key",
                )
    return data


def table_guesses(
    collection: SQLTableCollection,
    overrides: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None,
) -> list[list[SQLValueGuess]]:
    """Default strategies for every column, with per-column overrides applied."""
    overrides = overrides or {}
    guesses = []
    for table in collection.tables:
        table_overrides = overrides.get(table.name, {})
        row = []
        for column in table.columns:
            override = table_overrides.get(column.name)
            if override is not None:
                row.append(parse_guess_override(column, override))
            else:
                row.append(generate_guess(column))
        guesses.append(row)
    return guesses
