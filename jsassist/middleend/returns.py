"""Return pattern analysis: find_return, the lexically last return of a function body."""

from __future__ import annotations

from ..frontend.ast_compat import ASTNode, node_type


def find_return(node: object) -> ASTNode | None:
    """Last ReturnStatement in terminal position of a statement, or None.

    Only terminal statements are inspected, scanning from the end. Nested
    functions are never entered.
    """
    if not isinstance(node, dict):
        return None
    kind = node_type(node)
    if kind == "ReturnStatement":
        return node
    if kind == "BlockStatement":
        return _last_of(node.get("body"))
    if kind in ("WhileStatement", "DoWhileStatement", "ForStatement", "ForInStatement", "ForOfStatement", "CatchClause"):
        return find_return(node.get("body"))
    if kind == "IfStatement":
        maybe = find_return(node.get("alternate"))
        if maybe is None:
            maybe = find_return(node.get("consequent"))
        return maybe
    if kind == "TryStatement":
        maybe = find_return(node.get("finalizer"))
        if maybe is None:
            for handler in reversed(_handlers(node)):
                maybe = find_return(handler)
                if maybe is not None:
                    break
        if maybe is None:
            maybe = find_return(node.get("block"))
        return maybe
    if kind == "SwitchStatement":
        for case in reversed(node.get("cases") or []):
            maybe = find_return(case)
            if maybe is not None:
                return maybe
        return None
    if kind == "SwitchCase":
        return _last_of(node.get("consequent"))
    return None


def _last_of(stmts: object) -> ASTNode | None:
    if not isinstance(stmts, list) or len(stmts) == 0:
        return None
    return find_return(stmts[-1])


def _handlers(node: ASTNode) -> list[ASTNode]:
    """Catch clauses of a try statement, in either ESTree or legacy shape."""
    handler = node.get("handler")
    if isinstance(handler, dict):
        return [handler]
    handlers = node.get("handlers")
    if isinstance(handlers, list):
        return handlers
    return []
