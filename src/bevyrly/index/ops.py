"""Index orchestration: full rebuilds, queries and lookups.

``IndexCoordinator`` owns one ``SystemIndex`` and is the only writer to it.
Every consumer (CLI commands, renderers, tests) receives the coordinator
explicitly.

SERIALIZATION:
- _rebuild_lock: Only ONE rebuild at a time. A rebuild requested while
  another is suspended on file I/O waits for it to finish.
- Each rebuild takes the next generation number, bound into the log context.

Queries take no lock. A query issued mid-rebuild sees a partially populated
index.

Usage::

    coordinator = IndexCoordinator(config.index)
    stats = await coordinator.rebuild([repo_root])

    result = coordinator.query("&Transform *Velocity")
    for name in result.systems:
        print(coordinator.link_of(name))
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from pathlib import Path

import structlog

from bevyrly.config.models import IndexConfig
from bevyrly.core.errors import ErrorCode
from bevyrly.index._internal.discovery import discover_sources, source_folder
from bevyrly.index._internal.parsing import RustParser
from bevyrly.index.models import Diagnostic, IndexStats, ParsedFile, QueryResult, SourceSpan
from bevyrly.index.query import QUERY_HELP
from bevyrly.index.store import SystemIndex

log = structlog.get_logger()


class IndexCoordinator:
    """High-level orchestration of the system index."""

    documentation_hint = QUERY_HELP

    def __init__(
        self, config: IndexConfig | None = None, *, parser: RustParser | None = None
    ) -> None:
        self.config = config or IndexConfig()
        self.index = SystemIndex()
        self.last_stats: IndexStats | None = None

        self._parser = parser
        self._rebuild_lock = asyncio.Lock()
        self._generation = 0
        self._roots: list[Path] = []

    @property
    def initialized(self) -> bool:
        """True once the first full rebuild has completed."""
        return self.index.initialized

    @property
    def generation(self) -> int:
        return self._generation

    def _get_parser(self) -> RustParser:
        if self._parser is None:
            self._parser = RustParser()
        return self._parser

    # =========================================================================
    # Rebuild
    # =========================================================================

    async def rebuild(self, roots: Sequence[Path]) -> IndexStats:
        """Clear the index and repopulate it from every source file under ``roots``.

        SERIALIZED: Acquires _rebuild_lock.

        Raises:
            ParseError: When the Rust grammar is not installed. The index is
                left untouched in that case.
        """
        async with self._rebuild_lock:
            self._generation += 1
            with structlog.contextvars.bound_contextvars(generation=self._generation):
                return await self._rebuild(list(roots), self._generation)

    async def _rebuild(self, roots: list[Path], generation: int) -> IndexStats:
        start = time.monotonic()
        stats = IndexStats(generation=generation)
        parser = self._get_parser()
        parser.ensure_grammar()

        log.info("rebuild_started", roots=[str(r) for r in roots])
        self._roots = roots
        self.index.clear()

        discovery = await asyncio.to_thread(discover_sources, roots, self.config)
        for folder in discovery.missing_roots:
            log.warning("source_folder_missing", path=str(folder))
        for path in discovery.oversized:
            stats.files_seen += 1
            stats.files_skipped += 1
            log.info("file_skipped", path=str(path), reason="too_large")

        for path in discovery.files:
            stats.files_seen += 1
            parsed = await self._parse_file(parser, path, stats)
            if parsed is None:
                stats.files_skipped += 1
                continue

            stats.files_parsed += 1
            stats.diagnostics.extend(parsed.diagnostics)
            for decl in parsed.declarations:
                stats.diagnostics.extend(self.index.add_function_declaration(decl))

        self.index.initialized = True
        stats.systems = len(self.index)
        stats.identifiers = self.index.identifier_counts()
        stats.duration_seconds = time.monotonic() - start
        self.last_stats = stats

        log.info(
            "rebuild_complete",
            files=stats.files_parsed,
            skipped=stats.files_skipped,
            systems=stats.systems,
            diagnostics=len(stats.diagnostics),
            duration_sec=round(stats.duration_seconds, 3),
        )
        return stats

    async def _parse_file(
        self, parser: RustParser, path: Path, stats: IndexStats
    ) -> ParsedFile | None:
        """Read and parse one file. Returns None when the file is skipped."""
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            log.warning("file_skipped", path=str(path), reason=str(e))
            stats.diagnostics.append(
                Diagnostic(
                    code=ErrorCode.PARSE_READ_FAILED,
                    message=f"Could not read file: {e}",
                    path=path,
                )
            )
            return None

        try:
            parsed = parser.parse(path, content)
        except Exception as e:
            log.warning("file_skipped", path=str(path), reason=str(e))
            stats.diagnostics.append(
                Diagnostic(code=ErrorCode.PARSE_FAILED, message=f"Parse failed: {e}", path=path)
            )
            return None

        if parsed.error_count:
            log.info("file_has_syntax_errors", path=str(path), errors=parsed.error_count)
        return parsed

    # =========================================================================
    # Queries and lookups
    # =========================================================================

    def query(self, text: str) -> QueryResult:
        return self.index.query(text)

    def location_of(self, system: str) -> SourceSpan | None:
        return self.index.location(system)

    def declaration_text_of(self, system: str) -> str:
        return self.index.declaration_text(system)

    def relative_path(self, path: Path) -> str:
        """Path relative to the source folder of the root that contains it."""
        for root in self._roots:
            try:
                return path.relative_to(source_folder(root, self.config)).as_posix()
            except ValueError:
                continue
        return path.as_posix()

    def link_of(self, system: str) -> str | None:
        """``"<relative path>:<line>"`` for a system, or None when unknown."""
        span = self.location_of(system)
        if span is None:
            return None
        return f"{self.relative_path(span.path)}:{span.start_line}"
