"""Tests for bevyrly query command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bevyrly.cli.main import cli
from bevyrly.index._internal.parsing import rust as rust_module

runner = CliRunner()


class TestQueryCommand:
    """bevyrly query command tests."""

    def test_given_project_when_short_query_then_prints_links(self, bevy_project: Path) -> None:
        """Short mode prints one name/link line per system."""
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", "&Transform", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "move_ships  ships.rs:1" in result.output
        assert "hide_ships" not in result.output

    def test_given_project_when_long_query_then_prints_declaration(
        self, bevy_project: Path
    ) -> None:
        """A leading ':' prints the header and full declaration."""
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", ":*Velocity", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "/* ships.rs:1-3 */" in result.output
        assert "q.iter();" in result.output

    def test_given_signatures_flag_when_long_query_then_body_elided(
        self, bevy_project: Path
    ) -> None:
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", "--signatures", ":*Velocity", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "{ /* ... */ }" in result.output
        assert "q.iter();" not in result.output

    def test_given_dash_query_when_after_separator_then_without_filter(
        self, bevy_project: Path
    ) -> None:
        """Queries starting with '-' are passed after '--'."""
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", "--", "-Player", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "hide_ships  ships.rs:5" in result.output
        assert "move_ships" not in result.output

    def test_given_no_match_when_query_then_reports_and_succeeds(
        self, bevy_project: Path
    ) -> None:
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", ":&Missing", str(project)])

        # Then
        assert result.exit_code == 0
        assert "No matching systems" in result.output

    def test_given_json_flag_when_query_then_structured_output(self, bevy_project: Path) -> None:
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", "--json", ":Player", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["mode"] == "long"
        assert [s["name"] for s in data["systems"]] == ["move_ships", "hide_ships"]
        assert data["systems"][1]["path"] == "ships.rs"
        assert data["systems"][1]["start_line"] == 5
        assert data["systems"][1]["declaration"].startswith("fn hide_ships(")

    def test_given_invalid_config_when_query_then_fails_with_code(
        self, bevy_project: Path
    ) -> None:
        # Given
        (bevy_project / ".bevyrly").mkdir()
        (bevy_project / ".bevyrly" / "config.yaml").write_text("max_file_size_mb: 0\n")

        # When
        result = runner.invoke(cli, ["query", "Player", str(bevy_project)])

        # Then
        assert result.exit_code != 0
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_given_subdirectory_when_query_then_project_root_found(
        self, bevy_project: Path
    ) -> None:
        """The Cargo.toml directory is used as root when PATH is inside it."""
        # Given
        subdir = bevy_project / "src"

        # When
        result = runner.invoke(cli, ["query", "+Player", str(subdir)])

        # Then
        assert result.exit_code == 0, result.output
        assert "move_ships  ships.rs:1" in result.output

    def test_given_plain_flag_when_long_query_then_unhighlighted_blocks(
        self, bevy_project: Path
    ) -> None:
        """--plain prints header and declaration as consecutive plain lines."""
        # Given
        project = bevy_project

        # When
        result = runner.invoke(cli, ["query", "--plain", ":*Velocity", str(project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "/* ships.rs:1-3 */\nfn move_ships(" in result.output

    def test_given_unrecognized_type_when_query_then_no_log_lines_in_output(
        self, bevy_project: Path
    ) -> None:
        """Info and debug events stay below the default WARNING level."""
        # Given
        (bevy_project / "src" / "world.rs").write_text("fn exclusive(world: &mut World) {}\n")

        # When
        result = runner.invoke(cli, ["query", "&Transform", str(bevy_project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "move_ships  ships.rs:1" in result.output
        assert "rebuild_started" not in result.output
        assert "rebuild_complete" not in result.output
        assert "unrecognized_type" not in result.output

    def test_given_unrecognized_type_when_json_query_then_output_is_only_json(
        self, bevy_project: Path
    ) -> None:
        # Given
        (bevy_project / "src" / "world.rs").write_text("fn exclusive(world: &mut World) {}\n")

        # When
        result = runner.invoke(cli, ["query", "--json", "&Transform", str(bevy_project)])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [s["name"] for s in data["systems"]] == ["move_ships"]

    def test_given_missing_grammar_when_query_then_click_error_with_code(
        self, bevy_project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A missing Rust grammar is reported as a CLI error, not a traceback."""
        # Given
        monkeypatch.setattr(rust_module, "GRAMMAR_MODULE", "tree_sitter_does_not_exist")

        # When
        result = runner.invoke(cli, ["query", "&Transform", str(bevy_project)])

        # Then
        assert result.exit_code == 1
        assert not isinstance(result.exception, TypeError)
        assert "PARSE_GRAMMAR_UNAVAILABLE" in result.output
