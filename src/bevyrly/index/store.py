"""In-memory inverted index of systems by access category.

For every ``Category`` the index keeps ``identifier -> systems``. Two
bookkeeping maps sit beside them:

- ``systems``: system name -> identifiers it references (drives removal)
- ``locs``: system name -> declaration span

Every fact recorded under a specific category is mirrored into ``ANY`` and
``systems``, so a sigil-less query token sees all of them.

Usage::

    index = SystemIndex()
    index.add_function_declaration(decl)

    systems, mode = index.query(":&Transform +Player")
"""

from __future__ import annotations

import structlog

from bevyrly.core.errors import ErrorCode
from bevyrly.index._internal.classifier import classify_parameters
from bevyrly.index.models import (
    Category,
    Diagnostic,
    FunctionDecl,
    QueryMode,
    QueryResult,
    SourceSpan,
)
from bevyrly.index.query import parse_query

log = structlog.get_logger()

# Insertion-ordered set of system names
_Systems = dict[str, None]


class SystemIndex:
    """Category -> identifier -> systems maps with system lifecycle and queries."""

    def __init__(self) -> None:
        self._maps: dict[Category, dict[str, _Systems]] = {c: {} for c in Category}
        self.systems: dict[str, _Systems] = {}
        self.locs: dict[str, SourceSpan] = {}
        self.initialized = False

    def __len__(self) -> int:
        return len(self.systems)

    def __contains__(self, system: object) -> bool:
        return system in self.systems

    def __repr__(self) -> str:
        sizes = ", ".join(f"{c.value}={len(m)}" for c, m in self._maps.items())
        return f"SystemIndex(systems={len(self.systems)}, {sizes})"

    # =========================================================================
    # Insertion
    # =========================================================================

    def register_system(self, system: str, span: SourceSpan) -> None:
        """Make a system known, with no facts yet."""
        self.systems.setdefault(system, {})
        self.locs[system] = span

    def add(self, system: str, category: Category, identifier: str) -> None:
        """Record that ``system`` references ``identifier`` under ``category``.

        Also records the pair under ``ANY`` and in the ``systems`` map.
        """
        self._maps[category].setdefault(identifier, {})[system] = None
        self.systems.setdefault(system, {})[identifier] = None
        if category is not Category.ANY:
            self._maps[Category.ANY].setdefault(identifier, {})[system] = None

    def add_function_declaration(self, decl: FunctionDecl) -> list[Diagnostic]:
        """Register a system declaration and classify each of its parameters.

        A name that is already registered is rejected; the first declaration
        keeps its facts and location.

        Returns:
            Diagnostics raised while classifying, possibly empty.
        """
        if decl.name in self.systems:
            existing = self.locs.get(decl.name)
            log.warning(
                "duplicate_system_rejected",
                system=decl.name,
                path=str(decl.span.path),
                line=decl.span.start_line,
                first_path=str(existing.path) if existing else None,
            )
            return [
                Diagnostic(
                    code=ErrorCode.INDEX_DUPLICATE_SYSTEM,
                    message=f"System '{decl.name}' is already declared"
                    + (f" at {existing.path}:{existing.start_line}" if existing else ""),
                    path=decl.span.path,
                    system=decl.name,
                )
            ]

        self.register_system(decl.name, decl.span)
        return classify_parameters(self, decl)

    # =========================================================================
    # Removal
    # =========================================================================

    def remove_system(self, system: str) -> None:
        """Forget a system. Unknown names are ignored.

        Touches only the identifiers the system itself references. Identifier
        keys left without systems are dropped.
        """
        identifiers = self.systems.pop(system, None)
        self.locs.pop(system, None)
        if identifiers is None:
            return

        for identifier in identifiers:
            for mapping in self._maps.values():
                holders = mapping.get(identifier)
                if holders is None:
                    continue
                holders.pop(system, None)
                if not holders:
                    del mapping[identifier]

    def clear(self) -> None:
        """Remove every system through ``remove_system``."""
        for system in list(self.systems):
            self.remove_system(system)

    # =========================================================================
    # Lookup
    # =========================================================================

    def location(self, system: str) -> SourceSpan | None:
        return self.locs.get(system)

    def category_map(self, category: Category) -> dict[str, list[str]]:
        """Snapshot of one category map as identifier -> system names."""
        return {ident: list(systems) for ident, systems in self._maps[category].items()}

    def identifier_counts(self) -> dict[str, int]:
        """Number of distinct identifiers per category."""
        return {c.value: len(m) for c, m in self._maps.items()}

    def declaration_text(self, system: str) -> str:
        """Original source text of a system's declaration, or ``""``."""
        span = self.locs.get(system)
        if span is None:
            return ""
        return span.text()

    # =========================================================================
    # Query
    # =========================================================================

    def candidates(self, category: Category, pattern: str) -> set[str]:
        """Union of systems under every identifier containing ``pattern``."""
        found: set[str] = set()
        for identifier, systems in self._maps[category].items():
            if pattern in identifier:
                found.update(systems)
        return found

    def query(self, text: str) -> QueryResult:
        """Evaluate a query string.

        Tokens are intersected left to right starting from every known
        system. A query that runs empty stops early and is always reported
        in short mode.
        """
        parsed = parse_query(text)
        matches = list(self.systems)

        for token in parsed.tokens:
            layer = self.candidates(token.category, token.pattern)
            matches = [system for system in matches if system in layer]
            if not matches:
                return QueryResult([], QueryMode.SHORT)

        return QueryResult(matches, parsed.mode)
