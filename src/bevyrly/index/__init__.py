"""Index module - inverted index of ECS systems by parameter access.

This module provides:
- Rust parsing into a typed declaration model (tree-sitter)
- Classification of parameter types into access categories
- Category -> identifier -> systems maps with a sigil query language

Public API is in `bevyrly.index.ops`:
- IndexCoordinator: rebuilds, queries, lookups

Internal implementations are in `bevyrly.index._internal/`.
"""

from bevyrly.index.models import (
    Category,
    Diagnostic,
    FunctionDecl,
    IndexStats,
    Param,
    ParsedFile,
    QueryMode,
    QueryResult,
    SourceSpan,
    SourceText,
    TypeApplication,
    TypeExpr,
    TypeName,
    TypeRef,
    TypeTuple,
    UnknownType,
)
from bevyrly.index.ops import IndexCoordinator
from bevyrly.index.query import QUERY_HELP, SIGILS, parse_query
from bevyrly.index.store import SystemIndex

__all__ = [
    # Orchestration
    "IndexCoordinator",
    "SystemIndex",
    # Query language
    "QUERY_HELP",
    "SIGILS",
    "parse_query",
    # Models
    "Category",
    "Diagnostic",
    "FunctionDecl",
    "IndexStats",
    "Param",
    "ParsedFile",
    "QueryMode",
    "QueryResult",
    "SourceSpan",
    "SourceText",
    "TypeApplication",
    "TypeExpr",
    "TypeName",
    "TypeRef",
    "TypeTuple",
    "UnknownType",
]
