"""Compatibility layer for dict-based ESTree AST."""

from __future__ import annotations

ASTNode = dict[str, object]

# Keys holding source positions or parser bookkeeping, never child nodes.
SKIP_KEYS: set[str] = {"range", "loc", "comments", "errors", "tokens"}

FUNCTION_TYPES: list[str] = [
    "FunctionDeclaration",
    "FunctionExpression",
    "ArrowFunctionExpression",
]
FUNCTION_EXPRESSIONS: list[str] = ["FunctionExpression", "ArrowFunctionExpression"]


def node_type(node: object) -> str:
    """Get node type string."""
    if not isinstance(node, dict):
        return ""
    return node.get("type", "")


def is_type(node: object, type_names: list[str]) -> bool:
    """Check if node is one of the given AST types."""
    if not isinstance(node, dict):
        return False
    return node.get("type") in type_names


def node_range(node: object) -> tuple[int, int] | None:
    """Start and end-exclusive source offsets of a node."""
    if not isinstance(node, dict):
        return None
    r = node.get("range")
    if r is None:
        return None
    return (r[0], r[1])


def identifier_name(node: object) -> str | None:
    if is_type(node, ["Identifier"]):
        return node.get("name")
    return None


def children(node: ASTNode) -> list[ASTNode]:
    """Direct child nodes, ordered by source start offset.

    Nodes without a range sort after ranged ones, keeping their field order.
    """
    result: list[ASTNode] = []
    for key, value in node.items():
        if key in SKIP_KEYS:
            continue
        if isinstance(value, dict):
            if "type" in value:
                result.append(value)
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, dict) and "type" in item:
                    result.append(item)
    result.sort(key=_start_key)
    return result


def _start_key(node: ASTNode) -> tuple[int, int]:
    r = node.get("range")
    if r is None:
        return (1, 0)
    return (0, r[0])


# --- Offset predicates; an offset of None means "no cursor" ---


def in_range(offset: int | None, r: tuple[int, int] | None) -> bool:
    if offset is None or r is None:
        return False
    return r[0] <= offset <= r[1]


def is_before(offset: int | None, r: tuple[int, int] | None) -> bool:
    if offset is None:
        return False
    if r is None:
        return True
    return offset < r[0]


def is_after(offset: int | None, r: tuple[int, int] | None) -> bool:
    if offset is None or r is None:
        return True
    return offset > r[1]
