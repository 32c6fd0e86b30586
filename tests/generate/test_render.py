"""Tests for generate/render.py module."""

from __future__ import annotations

import random

from umlseed.generate.guesses import table_guesses
from umlseed.generate.render import generate_sql, render_inserts, render_table
from umlseed.project.models import SQLColumn, SQLTable, SQLTableCollection, SQLType, SQLTypeName

INT = SQLType(name=SQLTypeName.INT)

USERS = SQLTable(
    name="users",
    columns=[
        SQLColumn(name="id", sql_type=INT, primary_key=True),
        SQLColumn(name="name", sql_type=SQLType.varchar(20)),
    ],
)
TAGS = SQLTable(name="tags", columns=[SQLColumn(name="id", sql_type=INT, primary_key=True)])


class TestRenderTable:
    """INSERT block layout."""

    def test_block_layout(self) -> None:
        result = render_table(USERS, [["0", "'Ann'"], ["1", "'O''Brien'"]])

        assert result == (
            "INSERT INTO users\n"
            "  (id, name)\n"
            "VALUES\n"
            "  (0, 'Ann'),\n"
            "  (1, 'O''Brien');"
        )

    def test_single_row(self) -> None:
        assert render_table(TAGS, [["7"]]) == "INSERT INTO tags\n  (id)\nVALUES\n  (7);"

    def test_no_rows_renders_nothing(self) -> None:
        assert render_table(USERS, []) == ""


class TestRenderInserts:
    """Multi-table output."""

    def test_blocks_separated_by_blank_line(self) -> None:
        collection = SQLTableCollection(tables=[USERS, TAGS])

        result = render_inserts(collection, [[["0", "'a'"]], [["0"]]])

        first, second = result.split("\n\n")
        assert first.startswith("INSERT INTO users")
        assert second == "INSERT INTO tags\n  (id)\nVALUES\n  (0);"

    def test_empty_tables_are_skipped(self) -> None:
        collection = SQLTableCollection(tables=[USERS, TAGS])
        assert render_inserts(collection, [[], [["3"]]]) == "INSERT INTO tags\n  (id)\nVALUES\n  (3);"

    def test_empty_collection(self) -> None:
        assert render_inserts(SQLTableCollection(), []) == ""


class TestGenerateSql:
    """End-to-end generation to text."""

    def test_given_collection_when_generated_then_one_block_per_table(self) -> None:
        # Given
        collection = SQLTableCollection(tables=[USERS, TAGS])

        # When
        sql = generate_sql(collection, table_guesses(collection), 3, rng=random.Random(11))

        # Then
        assert sql.count("INSERT INTO") == 2
        assert "  (0, '" in sql
        assert sql.endswith("  (2);")

    def test_zero_rows_gives_empty_output(self) -> None:
        collection = SQLTableCollection(tables=[USERS])
        assert generate_sql(collection, table_guesses(collection), 0) == ""
