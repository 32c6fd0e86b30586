"""Fake row generation with foreign-key resolution.

Non-foreign-key cells are generated independently per column. Foreign-key
cells start blank and are filled by a fixed-point loop: each pass samples a
value for every pending row from its target column. When the target column
is itself a foreign key, only rows that were already resolved before the
pass are eligible, so a blank value is never copied. A row leaves the
pending set once all its foreign keys were assigned in the same pass.

The loop fails when a pass resolves nothing. That covers foreign-key cycles
as well as targets without eligible rows; the two are not distinguished.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from umlseed.core.errors import GenerationError
from umlseed.core.logging import get_logger
from umlseed.generate.guesses import SQLValueGuess
from umlseed.generate.values import ValueGenerator
from umlseed.project.models import SQLTableCollection

log = get_logger("generate.entries")

Row = list[str]
Coordinate = tuple[int, int]  # (table index, row index)


@dataclass(frozen=True, slots=True)
class ForeignColumn:
    """A foreign-key column and the column it points at."""

    column: int
    target_table: int
    target_column: int


@dataclass(slots=True)
class EntryMatrix:
    """rows[table][row][column] plus the rows still missing foreign-key values."""

    rows: list[list[Row]]
    pending: set[Coordinate] = field(default_factory=set)


def foreign_columns(collection: SQLTableCollection) -> list[list[ForeignColumn]]:
    """Resolve every foreign key to (table index, column index) pairs.

    Raises:
        GenerationError: If a foreign key names a table or column outside the collection.
    """
    result = []
    for table in collection.tables:
        columns = []
        for idx, column in enumerate(table.columns):
            if column.foreign_key is None:
                continue
            table_name, column_name = column.foreign_key
            target_table = collection.table_index(table_name)
            if target_table is None:
                raise GenerationError.unknown_foreign_target(table_name, column_name)
            target_column = collection.tables[target_table].column_index(column_name)
            if target_column is None:
                raise GenerationError.unknown_foreign_target(table_name, column_name)
            columns.append(ForeignColumn(idx, target_table, target_column))
        result.append(columns)
    return result


class EntryGenerator:
    """Generates an entry matrix for a table collection."""

    def __init__(
        self,
        collection: SQLTableCollection,
        guesses: Sequence[Sequence[SQLValueGuess]],
        *,
        rng: random.Random | None = None,
    ) -> None:
        if len(guesses) != len(collection.tables) or any(
            len(table_guesses) != len(table.columns)
            for table_guesses, table in zip(guesses, collection.tables, strict=False)
        ):
            raise GenerationError.invalid_guess("*", "one strategy per column is required")
        self._collection = collection
        self._guesses = guesses
        self._rng = rng or random.Random()
        self._foreign = foreign_columns(collection)
        self._foreign_ids = [{fc.column for fc in table} for table in self._foreign]

    def fill(self, rows_per_table: int) -> EntryMatrix:
        """Generate every non-foreign-key cell; foreign-key cells are left blank."""
        values = ValueGenerator(self._rng)
        matrix = EntryMatrix(rows=[])

        for table_idx, table in enumerate(self._collection.tables):
            columns = []
            for column_idx, guess in enumerate(self._guesses[table_idx]):
                if column_idx in self._foreign_ids[table_idx]:
                    columns.append([""] * rows_per_table)
                else:
                    columns.append(values.column_values(guess, rows_per_table))

            matrix.rows.append(
                [[column[row] for column in columns] for row in range(rows_per_table)]
            )
            if self._foreign[table_idx]:
                matrix.pending.update((table_idx, row) for row in range(rows_per_table))

        return matrix

    def resolve(self, matrix: EntryMatrix) -> int:
        """Fill foreign-key cells in passes until nothing is pending.

        Returns:
            Number of passes taken.

        Raises:
            GenerationError: If a pass makes no progress.
        """
        passes = 0
        while matrix.pending:
            passes += 1
            snapshot = frozenset(matrix.pending)
            resolved = {
                coordinate
                for coordinate in sorted(snapshot)
                if self._assign_row(matrix, coordinate, snapshot)
            }
            if not resolved:
                log.warning("foreign_keys_stalled", passes=passes, pending=len(snapshot))
                raise GenerationError.fixed_point_stalled(len(snapshot))
            matrix.pending -= resolved
            log.debug("foreign_key_pass", index=passes, resolved=len(resolved))
        return passes

    def _assign_row(
        self,
        matrix: EntryMatrix,
        coordinate: Coordinate,
        snapshot: frozenset[Coordinate],
    ) -> bool:
        table_idx, row_idx = coordinate
        for fc in self._foreign[table_idx]:
            pool = self._pool(matrix, fc, snapshot)
            if not pool:
                return False
            matrix.rows[table_idx][row_idx][fc.column] = self._rng.choice(pool)
        return True

    def _pool(
        self,
        matrix: EntryMatrix,
        fc: ForeignColumn,
        snapshot: frozenset[Coordinate],
    ) -> list[str]:
        target_rows = matrix.rows[fc.target_table]
        if fc.target_column in self._foreign_ids[fc.target_table]:
            return [
                row[fc.target_column]
                for row_idx, row in enumerate(target_rows)
                if (fc.target_table, row_idx) not in snapshot
            ]
        return [row[fc.target_column] for row in target_rows]

    def generate(self, rows_per_table: int) -> list[list[Row]]:
        matrix = self.fill(rows_per_table)
        passes = self.resolve(matrix)
        log.info(
            "entries_generated",
            tables=len(matrix.rows),
            rows_per_table=rows_per_table,
            foreign_key_passes=passes,
        )
        return matrix.rows


def generate_fake_entries(
    collection: SQLTableCollection,
    guesses: Sequence[Sequence[SQLValueGuess]],
    rows_per_table: int,
    *,
    rng: random.Random | None = None,
) -> list[list[Row]]:
    """Generate ``rows_per_table`` rows for every table.

    Returns:
        rows[table][row][column] as SQL literals.

    Raises:
        GenerationError: On unresolvable foreign keys or mismatched strategies.
    """
    if rows_per_table < 0:
        raise GenerationError.invalid_guess(
            "*", f"rows_per_table must be >= 0, got {rows_per_table}"
        )
    return EntryGenerator(collection, guesses, rng=rng).generate(rows_per_table)
