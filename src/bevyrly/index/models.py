"""Data model for the system index.

Three groups of types live here:

- the parsed declaration model handed over by the parser
  (``FunctionDecl``, ``Param``, the ``TypeExpr`` union, ``SourceSpan``);
- the index vocabulary (``Category``, ``Diagnostic``);
- query and rebuild results (``QueryMode``, ``QueryResult``, ``IndexStats``).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from bevyrly.core.errors import ErrorCode

# ============================================================================
# ENUMS
# ============================================================================


class Category(str, Enum):
    """Access category a system references an identifier under.

    ``ANY`` aggregates every other category and backs sigil-less query tokens.
    """

    ANY = "any"
    DIRECT = "direct"
    QUERY = "query"
    MUT_QUERY = "mut_query"
    EVENT_READ = "event_read"
    EVENT_WRITE = "event_write"
    RES = "res"
    MUT_RES = "mut_res"
    WITH = "with"
    WITHOUT = "without"


class QueryMode(str, Enum):
    """Display directive returned alongside query results."""

    SHORT = "short"
    LONG = "long"


# ============================================================================
# SOURCE LOCATIONS
# ============================================================================


@dataclass(frozen=True, slots=True, eq=False)
class SourceText:
    """Raw content of one source file, shared by every span in it."""

    path: Path
    content: bytes


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Declaration location: byte offsets plus 1-based inclusive line numbers."""

    source: SourceText
    start_byte: int
    end_byte: int
    start_line: int
    end_line: int

    @property
    def path(self) -> Path:
        return self.source.path

    def text(self) -> str:
        """Slice the original source text back out for this span."""
        return self.source.content[self.start_byte : self.end_byte].decode(
            "utf-8", errors="replace"
        )


# ============================================================================
# TYPE EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TypeName:
    """Bare type name: ``Transform``, ``usize``."""

    name: str


@dataclass(frozen=True, slots=True)
class TypeApplication:
    """Generic application: ``Query<&A, With<B>>``."""

    name: str
    args: tuple[TypeExpr, ...] = ()


@dataclass(frozen=True, slots=True)
class TypeTuple:
    """Tuple of types: ``(&A, &mut B)``. The unit type is an empty tuple."""

    items: tuple[TypeExpr, ...] = ()


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference type: ``&A`` or ``&mut A``."""

    inner: TypeExpr
    mutable: bool = False


@dataclass(frozen=True, slots=True)
class UnknownType:
    """Any type construct the parser does not model (arrays, pointers, ...)."""

    kind: str
    text: str


TypeExpr = TypeName | TypeApplication | TypeTuple | TypeRef | UnknownType


# ============================================================================
# DECLARATIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Param:
    """Function parameter with its type annotation."""

    name: str
    type: TypeExpr


@dataclass(frozen=True, slots=True)
class FunctionDecl:
    """A function declaration as delivered by the parser."""

    name: str
    span: SourceSpan
    params: tuple[Param, ...] = ()
    generics: frozenset[str] = frozenset()


@dataclass(slots=True)
class Diagnostic:
    """Non-fatal problem found while indexing."""

    code: ErrorCode
    message: str
    path: Path | None = None
    system: str | None = None

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "code": self.code.value,
            "error": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path is not None else None,
            "system": self.system,
        }


@dataclass(slots=True)
class ParsedFile:
    """Declarations extracted from one source file."""

    path: Path
    declarations: list[FunctionDecl] = field(default_factory=list)
    error_count: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)


# ============================================================================
# RESULTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Systems matching a query, in index insertion order."""

    systems: list[str]
    mode: QueryMode = QueryMode.SHORT

    def __iter__(self) -> Iterator[list[str] | QueryMode]:
        # Allows ``systems, mode = index.query(text)``
        yield self.systems
        yield self.mode


@dataclass(slots=True)
class IndexStats:
    """Statistics from one full rebuild."""

    generation: int = 0
    files_seen: int = 0
    files_parsed: int = 0
    files_skipped: int = 0
    systems: int = 0
    identifiers: dict[str, int] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "generation": self.generation,
            "files_seen": self.files_seen,
            "files_parsed": self.files_parsed,
            "files_skipped": self.files_skipped,
            "systems": self.systems,
            "identifiers": dict(self.identifiers),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "duration_seconds": round(self.duration_seconds, 4),
        }
