"""Generic AST walker: source-ordered pre/post traversal with early exit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .ast_compat import ASTNode, children


@dataclass
class Found:
    """Returned by an operation to stop the traversal; carries the answer."""

    value: object = None


# op(node, context, entering) -> bool | Found | None
Operation = Callable[[ASTNode, object, bool], object]


def visit(node: ASTNode, context: object, pre: Operation, post: Operation | None = None) -> Found | None:
    """Depth-first walk. pre may skip a subtree by returning a falsy value.

    The first Found returned by pre or post unwinds the whole walk.
    """
    entered = pre(node, context, True)
    if isinstance(entered, Found):
        return entered
    if not entered:
        return None
    for child in children(node):
        result = visit(child, context, pre, post)
        if result is not None:
            return result
    if post is not None:
        done = post(node, context, False)
        if isinstance(done, Found):
            return done
    return None
