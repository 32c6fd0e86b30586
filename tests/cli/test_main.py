"""Tests for the umlseed command group."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from umlseed.cli.main import cli


class TestCliGroup:
    """Global options."""

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "umlseed, version 0.1.0" in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("parse", "show", "generate", "clear"):
            assert command in result.output

    def test_missing_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "show"])
        assert result.exit_code == 1
        assert "CONFIG_FILE_NOT_FOUND" in result.output

    def test_invalid_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("generation: [unclosed\n")

        result = cli_runner.invoke(cli, ["--config", str(config), "show"])

        assert result.exit_code == 1
        assert "CONFIG_PARSE_ERROR" in result.output

    def test_config_file_sets_store(self, cli_runner: CliRunner, tmp_path: Path, shop_archive: Path) -> None:
        """A store path from --config is used when the env var is not set."""
        store = tmp_path / "elsewhere.json"
        config = tmp_path / "config.yaml"
        config.write_text(f"store:\n  path: {store}\n")

        result = cli_runner.invoke(
            cli,
            ["--config", str(config), "parse", str(shop_archive)],
            env={"UMLSEED__STORE__PATH": None},
        )

        assert result.exit_code == 0, result.output
        assert store.exists()
