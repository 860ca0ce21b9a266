"""Tree-sitter Rust parsing into the declaration model.

Only the parts of a Rust file the index needs are modeled: function items,
their generic parameters and their parameter types. Function items are
collected at file level and one level inside ``mod`` and ``impl`` blocks;
deeper nesting is not searched.

Type nodes are converted as follows:

- ``type_identifier`` / ``primitive_type`` -> ``TypeName``
- ``scoped_type_identifier`` -> ``TypeName`` of the last path segment
- ``generic_type`` -> ``TypeApplication`` (lifetime arguments dropped)
- ``tuple_type`` / ``unit_type`` -> ``TypeTuple``
- ``reference_type`` -> ``TypeRef``
- anything else -> ``UnknownType``
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from bevyrly.core.errors import ErrorCode, ParseError
from bevyrly.index.models import (
    Diagnostic,
    FunctionDecl,
    Param,
    ParsedFile,
    SourceSpan,
    SourceText,
    TypeApplication,
    TypeExpr,
    TypeName,
    TypeRef,
    TypeTuple,
    UnknownType,
)

GRAMMAR_MODULE = "tree_sitter_rust"

# Blocks whose direct function items are also systems
_CONTAINER_TYPES = frozenset({"mod_item", "impl_item"})

# Type argument nodes that carry no type
_SKIPPED_ARGUMENT_TYPES = frozenset({"lifetime", "line_comment", "block_comment"})


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def _count_errors(root: Any) -> int:
    count = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        stack.extend(node.children)
    return count


@dataclass
class RustParser:
    """
    Tree-sitter parser producing ``FunctionDecl`` values from Rust source.

    Usage::

        parser = RustParser()
        parsed = parser.parse(Path("src/main.rs"), content)
        for decl in parsed.declarations:
            index.add_function_declaration(decl)
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()

    def _get_language(self) -> Any:
        if self._language is not None:
            return self._language
        try:
            module = importlib.import_module(GRAMMAR_MODULE)
            self._language = tree_sitter.Language(module.language())
        except (ImportError, AttributeError) as err:
            raise ParseError.grammar_unavailable("rust") from err
        return self._language

    def ensure_grammar(self) -> None:
        """Load the Rust grammar now so a missing grammar fails before any work."""
        self._get_language()

    def parse(self, path: Path, content: bytes | None = None) -> ParsedFile:
        """
        Parse a Rust file and extract its function declarations.

        Args:
            path: Path to the file, recorded in every span.
            content: File content as bytes. If None, reads from path.

        Raises:
            ParseError: When the Rust grammar is not installed.
        """
        if content is None:
            content = path.read_bytes()

        self._parser.language = self._get_language()
        tree = self._parser.parse(content)
        root = tree.root_node

        source = SourceText(path=path, content=content)
        parsed = ParsedFile(path=path, error_count=_count_errors(root))

        for node, inherited in _function_nodes(root):
            name_node = node.child_by_field_name("name")
            name = _text(name_node) if name_node is not None else "<anonymous>"
            if node.has_error or name_node is None:
                parsed.diagnostics.append(
                    Diagnostic(
                        code=ErrorCode.PARSE_INVALID_DECLARATION,
                        message=f"Declaration '{name}' at line {node.start_point[0] + 1} "
                        "contains syntax errors",
                        path=path,
                        system=name,
                    )
                )
                continue
            parsed.declarations.append(_function_decl(node, name, source, inherited))

        return parsed


def _function_nodes(root: Any) -> Iterator[tuple[Any, frozenset[str]]]:
    """Yield function items with the generic names of their enclosing impl."""
    for child in root.named_children:
        if child.type == "function_item":
            yield child, frozenset()
        elif child.type in _CONTAINER_TYPES:
            body = child.child_by_field_name("body")
            if body is None:
                continue
            inherited = _generic_names(child.child_by_field_name("type_parameters"))
            for sub in body.named_children:
                if sub.type == "function_item":
                    yield sub, inherited


def _function_decl(
    node: Any, name: str, source: SourceText, inherited: frozenset[str]
) -> FunctionDecl:
    params: list[Param] = []
    parameters = node.child_by_field_name("parameters")
    if parameters is not None:
        for par in parameters.named_children:
            # self_parameter, variadic_parameter and attributes carry no system data
            if par.type != "parameter":
                continue
            pattern = par.child_by_field_name("pattern")
            type_node = par.child_by_field_name("type")
            if type_node is None:
                continue
            params.append(
                Param(
                    name=_text(pattern) if pattern is not None else "_",
                    type=type_expr(type_node),
                )
            )

    return FunctionDecl(
        name=name,
        span=SourceSpan(
            source=source,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        ),
        params=tuple(params),
        generics=inherited | _generic_names(node.child_by_field_name("type_parameters")),
    )


def _generic_names(type_parameters: Any) -> frozenset[str]:
    """Names of type placeholders. Lifetimes and const generics are not included."""
    if type_parameters is None:
        return frozenset()

    names: set[str] = set()
    for child in type_parameters.named_children:
        if child.type == "type_identifier":
            names.add(_text(child))
            continue
        if child.type == "constrained_type_parameter":
            name_node = child.child_by_field_name("left")
        elif child.type in ("type_parameter", "optional_type_parameter"):
            name_node = child.child_by_field_name("name")
        else:
            continue
        if name_node is not None and name_node.type == "type_identifier":
            names.add(_text(name_node))
    return frozenset(names)


def _type_name(node: Any) -> str:
    if node.type == "scoped_type_identifier":
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            return _text(name_node)
        return _text(node).rsplit("::", 1)[-1]
    return _text(node)


def type_expr(node: Any) -> TypeExpr:
    """Convert a tree-sitter type node into a ``TypeExpr``."""
    match node.type:
        case "type_identifier" | "primitive_type" | "scoped_type_identifier":
            return TypeName(_type_name(node))
        case "generic_type":
            callee = node.child_by_field_name("type")
            arguments = node.child_by_field_name("type_arguments")
            args: tuple[TypeExpr, ...] = ()
            if arguments is not None:
                args = tuple(
                    type_expr(arg)
                    for arg in arguments.named_children
                    if arg.type not in _SKIPPED_ARGUMENT_TYPES
                )
            name = _type_name(callee) if callee is not None else _text(node)
            return TypeApplication(name, args)
        case "tuple_type":
            return TypeTuple(
                tuple(
                    type_expr(item)
                    for item in node.named_children
                    if item.type not in _SKIPPED_ARGUMENT_TYPES
                )
            )
        case "unit_type":
            return TypeTuple(())
        case "reference_type":
            inner = node.child_by_field_name("type")
            if inner is None:
                return UnknownType(node.type, _text(node))
            mutable = any(child.type == "mutable_specifier" for child in node.children)
            return TypeRef(type_expr(inner), mutable=mutable)
        case _:
            return UnknownType(node.type, _text(node))
