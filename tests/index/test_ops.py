"""Tests for IndexCoordinator rebuilds and lookups."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from bevyrly.config.models import IndexConfig
from bevyrly.core.errors import ErrorCode, ParseError
from bevyrly.index._internal.parsing import RustParser
from bevyrly.index._internal.parsing import rust as rust_module
from bevyrly.index.models import ParsedFile, QueryMode, QueryResult
from bevyrly.index.ops import IndexCoordinator
from bevyrly.index.query import QUERY_HELP


class ExplodingParser(RustParser):
    """Parser that fails on files named bad.rs."""

    def parse(self, path: Path, content: bytes | None = None) -> ParsedFile:
        if path.name == "bad.rs":
            raise RuntimeError("boom")
        return super().parse(path, content)


class TestRebuild:
    """Full rebuild behavior."""

    @pytest.mark.asyncio
    async def test_given_project_when_rebuild_then_systems_indexed(
        self, bevy_project: Path
    ) -> None:
        # Given
        coordinator = IndexCoordinator()
        assert not coordinator.initialized

        # When
        stats = await coordinator.rebuild([bevy_project])

        # Then
        assert coordinator.initialized
        assert stats.generation == 1
        assert stats.files_parsed == 2
        assert stats.systems == 5
        assert list(coordinator.index.systems) == [
            "fire",
            "take_damage",
            "think",
            "move_ships",
            "spawn_ships",
        ]
        assert coordinator.last_stats is stats

    @pytest.mark.asyncio
    async def test_given_project_when_rebuild_then_scenario_queries_hold(
        self, bevy_project: Path
    ) -> None:
        # Given
        coordinator = IndexCoordinator()
        await coordinator.rebuild([bevy_project])

        # When / Then
        assert coordinator.query("*Velocity") == QueryResult(["move_ships"], QueryMode.SHORT)
        assert coordinator.query("+Player").systems == ["fire", "move_ships"]
        assert coordinator.query("-Player").systems == ["think"]
        assert coordinator.query(">Hit").systems == ["fire"]
        assert coordinator.query("<Hit").systems == ["take_damage"]
        assert coordinator.query("$Rng").systems == ["think"]
        assert coordinator.query("#Config").systems == ["fire"]
        assert coordinator.query(":&Transform +Player") == QueryResult(
            ["fire", "move_ships"], QueryMode.LONG
        )
        assert coordinator.query("Ignored").systems == []

    @pytest.mark.asyncio
    async def test_given_second_rebuild_when_complete_then_not_duplicated(
        self, bevy_project: Path
    ) -> None:
        # Given
        coordinator = IndexCoordinator()
        await coordinator.rebuild([bevy_project])
        (bevy_project / "src" / "ships.rs").write_text("fn only(q: Query<&Only>) {}\n")

        # When
        stats = await coordinator.rebuild([bevy_project])

        # Then
        assert stats.generation == 2
        assert coordinator.generation == 2
        assert coordinator.query("Velocity").systems == []
        assert coordinator.query("&Only").systems == ["only"]
        assert not any(d.code is ErrorCode.INDEX_DUPLICATE_SYSTEM for d in stats.diagnostics)

    @pytest.mark.asyncio
    async def test_given_concurrent_rebuilds_when_awaited_then_serialized(
        self, bevy_project: Path
    ) -> None:
        """Two overlapping rebuilds never interleave clear() with inserts."""
        # Given
        coordinator = IndexCoordinator()

        # When
        first, second = await asyncio.gather(
            coordinator.rebuild([bevy_project]), coordinator.rebuild([bevy_project])
        )

        # Then
        assert {first.generation, second.generation} == {1, 2}
        assert first.systems == second.systems == len(coordinator.index) == 5
        assert first.diagnostics == second.diagnostics == []

    @pytest.mark.asyncio
    async def test_given_duplicate_across_files_when_rebuild_then_first_file_wins(
        self, bevy_project: Path
    ) -> None:
        # Given
        (bevy_project / "src" / "zz.rs").write_text("fn fire(r: Res<Other>) {}\n")
        coordinator = IndexCoordinator()

        # When
        stats = await coordinator.rebuild([bevy_project])

        # Then
        codes = [d.code for d in stats.diagnostics]
        assert codes == [ErrorCode.INDEX_DUPLICATE_SYSTEM]
        assert coordinator.link_of("fire") == "combat/mod.rs:3"
        assert coordinator.query("#Other").systems == []

    @pytest.mark.asyncio
    async def test_given_failing_file_when_rebuild_then_skipped_with_diagnostic(
        self, bevy_project: Path
    ) -> None:
        # Given
        (bevy_project / "src" / "bad.rs").write_text("fn bad() {}\n")
        coordinator = IndexCoordinator(parser=ExplodingParser())

        # When
        stats = await coordinator.rebuild([bevy_project])

        # Then
        assert stats.files_seen == 3
        assert stats.files_parsed == 2
        assert stats.files_skipped == 1
        assert [d.code for d in stats.diagnostics] == [ErrorCode.PARSE_FAILED]
        assert stats.systems == 5

    @pytest.mark.asyncio
    async def test_given_oversized_file_when_rebuild_then_counted_as_skipped(
        self, bevy_project: Path
    ) -> None:
        # Given
        (bevy_project / "src" / "huge.rs").write_text("//" + "x" * (1024 * 1024 + 1))
        coordinator = IndexCoordinator(IndexConfig(max_file_size_mb=1))

        # When
        stats = await coordinator.rebuild([bevy_project])

        # Then
        assert stats.files_skipped == 1
        assert stats.files_seen == 3
        assert stats.files_parsed == 2

    @pytest.mark.asyncio
    async def test_given_missing_source_folder_when_rebuild_then_empty_but_initialized(
        self, temp_dir: Path
    ) -> None:
        # Given
        coordinator = IndexCoordinator()

        # When
        stats = await coordinator.rebuild([temp_dir])

        # Then
        assert coordinator.initialized
        assert stats.systems == 0
        assert coordinator.query("Transform") == QueryResult([], QueryMode.SHORT)

    @pytest.mark.asyncio
    async def test_given_missing_grammar_when_rebuild_then_index_untouched(
        self, bevy_project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        monkeypatch.setattr(rust_module, "GRAMMAR_MODULE", "tree_sitter_does_not_exist")
        coordinator = IndexCoordinator()

        # When / Then
        with pytest.raises(ParseError):
            await coordinator.rebuild([bevy_project])
        assert not coordinator.initialized
        assert len(coordinator.index) == 0


class TestLookups:
    """Location and text lookups."""

    @pytest.mark.asyncio
    async def test_given_indexed_system_when_lookup_then_location_and_text(
        self, bevy_project: Path
    ) -> None:
        # Given
        coordinator = IndexCoordinator()
        await coordinator.rebuild([bevy_project])

        # When
        span = coordinator.location_of("move_ships")
        text = coordinator.declaration_text_of("move_ships")

        # Then
        assert span is not None
        assert span.path == bevy_project / "src" / "ships.rs"
        assert (span.start_line, span.end_line) == (1, 3)
        assert text.startswith("fn move_ships(")
        assert coordinator.link_of("think") == "combat/mod.rs:13"

    def test_given_unknown_system_when_lookup_then_absent(self) -> None:
        # Given
        coordinator = IndexCoordinator()

        # When / Then
        assert coordinator.location_of("ghost") is None
        assert coordinator.declaration_text_of("ghost") == ""
        assert coordinator.link_of("ghost") is None

    def test_given_coordinator_when_documentation_hint_then_query_help(self) -> None:
        assert IndexCoordinator.documentation_hint == QUERY_HELP
