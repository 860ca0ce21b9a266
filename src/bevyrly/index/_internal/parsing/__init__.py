"""Tree-sitter parsing for Rust declarations."""

from bevyrly.index._internal.parsing.rust import RustParser, type_expr

__all__ = [
    "RustParser",
    "type_expr",
]
