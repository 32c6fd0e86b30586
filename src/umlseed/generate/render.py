"""INSERT statement rendering."""

from __future__ import annotations

import random
from collections.abc import Sequence

from umlseed.generate.entries import Row, generate_fake_entries
from umlseed.generate.guesses import SQLValueGuess
from umlseed.project.models import SQLTable, SQLTableCollection

INDENT = "  "


def render_table(table: SQLTable, rows: Sequence[Row]) -> str:
    """One INSERT block, or an empty string when there are no rows."""
    if not rows:
        return ""
    columns = ", ".join(column.name for column in table.columns)
    values = ",\n".join(f"{INDENT}({', '.join(row)})" for row in rows)
    return f"INSERT INTO {table.name}\n{INDENT}({columns})\nVALUES\n{values};"


def render_inserts(collection: SQLTableCollection, rows: Sequence[Sequence[Row]]) -> str:
    """Render every table's rows, blocks separated by a blank line."""
    blocks = (
        render_table(table, table_rows)
        for table, table_rows in zip(collection.tables, rows, strict=True)
    )
    return "\n\n".join(block for block in blocks if block)


def generate_sql(
    collection: SQLTableCollection,
    guesses: Sequence[Sequence[SQLValueGuess]],
    rows_per_table: int,
    rng: random.Random | None = None,
) -> str:
    rows = generate_fake_entries(collection, guesses, rows_per_table, rng=rng)
    return render_inserts(collection, rows)
