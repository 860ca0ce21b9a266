"""Classification of system parameter types into access categories.

Walks each parameter's ``TypeExpr`` and records (system, category,
identifier) facts through ``SystemIndex.add``:

- ``Query<..>`` / ``Local<..>``: ``&T`` -> QUERY, ``&mut T`` -> MUT_QUERY,
  bare ``T`` -> DIRECT, ``With<T>`` / ``Without<T>`` -> WITH / WITHOUT.
  Tuples and ``Option`` are looked through.
- ``Res<T>`` -> RES, ``ResMut<T>`` / ``NonSendMut<T>`` -> MUT_RES,
  ``EventReader<T>`` -> EVENT_READ, ``EventWriter<T>`` -> EVENT_WRITE,
  ``With<T>`` / ``Without<T>`` -> WITH / WITHOUT.
- ``Option<T>`` is unwrapped one level.
- Any other ``Outer<T..>`` is DIRECT for ``Outer`` and each argument is
  classified again, so ``Handle<Mesh>`` records both names.
- A bare ``T`` is DIRECT.

Names declared as generic parameters of the function (or of its ``impl``)
are never recorded. Shapes outside these rules, such as a top-level
``&mut World``, are skipped with a diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from bevyrly.core.errors import ErrorCode
from bevyrly.index.models import (
    Category,
    Diagnostic,
    FunctionDecl,
    TypeApplication,
    TypeExpr,
    TypeName,
    TypeRef,
    TypeTuple,
    UnknownType,
)

if TYPE_CHECKING:
    from bevyrly.index.store import SystemIndex

log = structlog.get_logger()

QUERY_WRAPPERS = frozenset({"Query", "Local"})

# Wrappers whose arguments take the wrapper's category
HOLDER_CATEGORIES: dict[str, Category] = {
    "Res": Category.RES,
    "ResMut": Category.MUT_RES,
    "NonSendMut": Category.MUT_RES,
    "EventReader": Category.EVENT_READ,
    "EventWriter": Category.EVENT_WRITE,
    "With": Category.WITH,
    "Without": Category.WITHOUT,
}

# Never recorded as identifiers themselves
WRAPPER_NAMES = frozenset({*QUERY_WRAPPERS, *HOLDER_CATEGORIES, "Option"})


def format_type(expr: TypeExpr) -> str:
    """Render a type expression back to Rust-like text."""
    match expr:
        case TypeName(name):
            return name
        case TypeApplication(name, args):
            return f"{name}<{', '.join(format_type(a) for a in args)}>"
        case TypeTuple(items):
            return f"({', '.join(format_type(i) for i in items)})"
        case TypeRef(inner, mutable):
            return f"&{'mut ' if mutable else ''}{format_type(inner)}"
        case UnknownType(_, text):
            return text


@dataclass
class _Classifier:
    index: SystemIndex
    system: str
    generics: frozenset[str]
    path: Path | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def emit(self, category: Category, name: str) -> None:
        if name in self.generics:
            return
        self.index.add(self.system, category, name)

    def unrecognized(self, expr: TypeExpr) -> None:
        text = format_type(expr)
        log.debug("unrecognized_type", system=self.system, type=text)
        self.diagnostics.append(
            Diagnostic(
                code=ErrorCode.INDEX_UNRECOGNIZED_TYPE,
                message=f"Unrecognized parameter type '{text}'",
                path=self.path,
                system=self.system,
            )
        )

    def parameter(self, expr: TypeExpr) -> None:
        match expr:
            case TypeName(name):
                self.emit(Category.DIRECT, name)
            case TypeApplication():
                self.application(expr)
            case TypeTuple(items):
                for item in items:
                    self.parameter(item)
            case _:
                self.unrecognized(expr)

    def application(self, app: TypeApplication) -> None:
        if app.name in QUERY_WRAPPERS:
            for arg in app.args:
                self.query_item(arg)
        elif app.name in HOLDER_CATEGORIES:
            category = HOLDER_CATEGORIES[app.name]
            for arg in app.args:
                self.target(category, arg)
        elif app.name == "Option":
            for arg in app.args:
                self.parameter(arg)
        else:
            self.target(Category.DIRECT, app)

    def target(self, category: Category, expr: TypeExpr) -> None:
        """Record ``expr`` as the identifier a wrapper of ``category`` acts on."""
        match expr:
            case TypeName(name):
                self.emit(category, name)
            case TypeApplication(name=name) if name in WRAPPER_NAMES:
                self.application(expr)
            case TypeApplication(name=name, args=args):
                self.emit(category, name)
                for arg in args:
                    self.parameter(arg)
            case TypeTuple(items):
                for item in items:
                    self.target(category, item)
            case _:
                self.unrecognized(expr)

    def query_item(self, expr: TypeExpr) -> None:
        """One element of a ``Query`` data or filter argument."""
        match expr:
            case TypeName(name):
                self.emit(Category.DIRECT, name)
            case TypeRef(inner, mutable):
                self.target(Category.MUT_QUERY if mutable else Category.QUERY, inner)
            case TypeTuple(items):
                for item in items:
                    self.query_item(item)
            case TypeApplication(name="Option", args=args):
                for arg in args:
                    self.query_item(arg)
            case TypeApplication():
                self.application(expr)
            case _:
                self.unrecognized(expr)


def classify(
    index: SystemIndex,
    system: str,
    generics: frozenset[str] | set[str],
    parameter_type: TypeExpr,
    *,
    path: Path | None = None,
) -> list[Diagnostic]:
    """Classify one parameter type of ``system`` into ``index``.

    Returns:
        Diagnostics for skipped type shapes.
    """
    classifier = _Classifier(index, system, frozenset(generics), path)
    classifier.parameter(parameter_type)
    return classifier.diagnostics


def classify_parameters(index: SystemIndex, decl: FunctionDecl) -> list[Diagnostic]:
    """Classify every parameter of a declaration."""
    classifier = _Classifier(index, decl.name, decl.generics, decl.span.path)
    for param in decl.params:
        classifier.parameter(param.type)
    return classifier.diagnostics
