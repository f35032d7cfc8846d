"""Module verifier: report define/require dependencies the indexer cannot find."""

from __future__ import annotations

from dataclasses import dataclass

from .frontend.ast_compat import ASTNode, identifier_name, is_type
from .frontend.parse import parse
from .frontend.walker import visit
from .model import Indexer

ASYNC_LOADERS: set[str] = {"define", "require"}


@dataclass
class Diagnostic:
    """A problem at a 1-based line, with columns as editors count them."""

    description: str
    line: int
    start: int
    end: int
    severity: str = "error"

    def to_dict(self) -> dict[str, object]:
        return {
            "description": self.description,
            "line": self.line,
            "start": self.start,
            "end": self.end,
            "severity": self.severity,
        }


def _module_names(call: ASTNode) -> list[ASTNode]:
    """Dependency literals of a loader call: its array argument, else a lone string."""
    elements: list[ASTNode] | None = None
    constant: ASTNode | None = None
    for arg in (call.get("arguments") or [])[:2]:
        if is_type(arg, ["ArrayExpression"]):
            elements = arg.get("elements") or []
        elif is_type(arg, ["Literal"]):
            constant = arg
    if elements is None:
        return [constant] if constant is not None else []
    return elements


def _diagnostic(literal: ASTNode, name: str) -> Diagnostic:
    loc = literal.get("loc") or {}
    start = loc.get("start") or {}
    end = loc.get("end") or {}
    return Diagnostic(
        "Cannot find module '" + name + "'",
        start.get("line", 0),
        start.get("column", 0) + 2,
        end.get("column", 0),
    )


def check_modules(source: str, indexer: Indexer) -> list[Diagnostic]:
    """Diagnostics for every string dependency the indexer does not know, in source order."""
    root = parse(source)
    diagnostics: list[Diagnostic] = []

    def check(node: ASTNode, context: object, entering: bool) -> bool:
        if is_type(node, ["CallExpression"]) and identifier_name(node.get("callee")) in ASYNC_LOADERS:
            for literal in _module_names(node):
                if not is_type(literal, ["Literal"]):
                    continue
                name = literal.get("value")
                if isinstance(name, str) and not indexer.has_dependency(name):
                    diagnostics.append(_diagnostic(literal, name))
        return True

    visit(root, None, check)
    return diagnostics
