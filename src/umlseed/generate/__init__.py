"""Fake INSERT data for a resolved table collection.

Usage:
    from umlseed.generate import generate_sql, table_guesses

    sql = generate_sql(collection, table_guesses(collection), rows_per_table=20)
"""

from umlseed.generate.entries import EntryGenerator, generate_fake_entries
from umlseed.generate.guesses import (
    AutoIncrement,
    BoolGuess,
    BoolValueGuess,
    FloatValueGuess,
    IntRange,
    IntValueGuess,
    SQLValueGuess,
    StringGuess,
    StringValueGuess,
    TimeGuess,
    TimeValueGuess,
    generate_guess,
    generate_table_guesses,
    load_overrides,
    parse_guess_override,
    table_guesses,
)
from umlseed.generate.render import generate_sql, render_inserts, render_table
from umlseed.generate.values import ValueGenerator, quote, unquote

__all__ = [
    # Strategies
    "AutoIncrement",
    "BoolGuess",
    "BoolValueGuess",
    "FloatValueGuess",
    "IntRange",
    "IntValueGuess",
    "SQLValueGuess",
    "StringGuess",
    "StringValueGuess",
    "TimeGuess",
    "TimeValueGuess",
    "generate_guess",
    "generate_table_guesses",
    "load_overrides",
    "parse_guess_override",
    "table_guesses",
    # Generation
    "EntryGenerator",
    "ValueGenerator",
    "generate_fake_entries",
    "quote",
    "unquote",
    # Rendering
    "generate_sql",
    "render_inserts",
    "render_table",
]
