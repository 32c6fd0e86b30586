"""Tests for the parse command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from mdzip_builder import ProjectBuilder

from umlseed.cli.main import cli
from umlseed.project.archive import UML_MODEL_ENTRY
from umlseed.store import CollectionStore


class TestParseCommand:
    """umlseed parse ARCHIVE."""

    def test_given_archive_when_parsed_then_tables_stored(
        self, cli_runner: CliRunner, shop_archive: Path, store_path: Path
    ) -> None:
        """The extracted collection is printed and persisted."""
        # Given
        args = ["parse", str(shop_archive)]

        # When
        result = cli_runner.invoke(cli, args)

        # Then
        assert result.exit_code == 0, result.output
        assert "users" in result.output
        assert "orders" in result.output
        assert "Stored 2 tables from shop.mdzip" in result.output
        stored = CollectionStore(store_path).load()
        assert stored is not None
        assert [t.name for t in stored.tables] == ["users", "orders"]

    def test_json_output(self, cli_runner: CliRunner, shop_archive: Path) -> None:
        result = cli_runner.invoke(cli, ["parse", str(shop_archive), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [t["name"] for t in data["tables"]] == ["users", "orders"]
        assert data["tables"][1]["columns"][1]["foreign_key"] == ["users", "id"]

    def test_rejects_other_extensions(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        archive = tmp_path / "shop.zip"
        archive.write_bytes(b"PK")

        result = cli_runner.invoke(cli, ["parse", str(archive)])

        assert result.exit_code == 1
        assert "ARCHIVE_UNSUPPORTED_FILE" in result.output
        assert "shop.zip" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["parse", str(tmp_path / "missing.mdzip")])
        assert result.exit_code == 2

    def test_incomplete_archive(self, cli_runner: CliRunner, tmp_path: Path, shop_project: ProjectBuilder) -> None:
        archive = tmp_path / "broken.mdzip"
        archive.write_bytes(shop_project.build(skip=(UML_MODEL_ENTRY,)))

        result = cli_runner.invoke(cli, ["parse", str(archive)])

        assert result.exit_code == 1
        assert "ARCHIVE_ENTRY_MISSING" in result.output

    def test_not_a_zip(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        archive = tmp_path / "text.mdzip"
        archive.write_text("hello")

        result = cli_runner.invoke(cli, ["parse", str(archive)])

        assert result.exit_code == 1
        assert "ARCHIVE_NOT_AN_ARCHIVE" in result.output

    def test_script_out_of_range(self, cli_runner: CliRunner, shop_archive: Path, store_path: Path) -> None:
        result = cli_runner.invoke(cli, ["parse", str(shop_archive), "--script", "3"])

        assert result.exit_code == 1
        assert "ARCHIVE_SCRIPT_NOT_FOUND" in result.output
        assert not store_path.exists()
