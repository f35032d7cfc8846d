"""Offset classification: what kind of completion, if any, the cursor asks for."""

from __future__ import annotations

from .ast_compat import (
    FUNCTION_TYPES,
    ASTNode,
    in_range,
    is_before,
    node_range,
    node_type,
)
from .walker import Found, visit

TOP = "top"
MEMBER = "member"


def after_dot(offset: int | None, member: ASTNode, source: str) -> bool:
    """True when offset sits after the '.' of member and before its property."""
    obj_range = node_range(member.get("object"))
    member_range = node_range(member)
    if obj_range is None or member_range is None:
        return False
    prop_range = node_range(member.get("property"))
    if prop_range is not None:
        end = prop_range[0]
    else:
        end = member_range[1] + 1
    if not in_range(offset, member_range) or in_range(offset, obj_range) or offset > end:
        return False
    dot = obj_range[1]
    while dot < end and source[dot : dot + 1] != ".":
        dot += 1
    if source[dot : dot + 1] != ".":
        return False
    return dot < offset


def in_comment(root: ASTNode, offset: int) -> bool:
    for comment in root.get("comments") or []:
        r = node_range(comment)
        if r is None:
            continue
        if comment.get("type") == "Line":
            if r[0] < offset <= r[1]:
                return True
        elif r[0] < offset < r[1]:
            return True
    return False


def _in_literal(node: ASTNode, offset: int, r: tuple[int, int]) -> bool:
    """Offset strictly inside the quotes of a string or the slashes of a regex."""
    if not isinstance(node.get("value"), str) and node.get("regex") is None:
        return False
    return r[0] < offset < r[1]


def classify(root: ASTNode, offset: int, prefix: str, source: str) -> str | bool:
    """Return "top", "member", or False when no completion applies here."""
    if in_comment(root, offset):
        return False
    parents: list[ASTNode] = []

    def find_parents(node: ASTNode, stack: list[ASTNode], entering: bool) -> object:
        kind = node_type(node)
        r = node_range(node)
        if not entering:
            if kind == "Program" or (kind == "BlockStatement" and in_range(offset, r)):
                return Found(True)
            stack.pop()
            return None
        if kind != "Program" and not in_range(offset, r):
            return False
        if kind == "Identifier":
            return Found(True)
        if kind == "Literal" and _in_literal(node, offset, r):
            return Found(False)
        stack.append(node)
        if kind in FUNCTION_TYPES:
            body = node.get("body")
            if isinstance(body, dict) and is_before(offset, node_range(body)):
                return Found(True)
        if kind == "MemberExpression" and node.get("property") is None and after_dot(offset, node, source):
            return Found(True)
        return True

    found = visit(root, parents, find_parents, find_parents)
    if found is not None and found.value is False:
        return False
    if len(parents) == 0:
        return TOP
    parent = parents[-1]
    kind = node_type(parent)
    if kind == "MemberExpression":
        if in_range(offset, node_range(parent.get("property"))):
            return MEMBER
        if after_dot(offset, parent, source):
            return MEMBER
    elif kind == "VariableDeclarator":
        init = parent.get("init")
        if init is None or is_before(offset, node_range(init)):
            return False
    elif kind in FUNCTION_TYPES:
        body = parent.get("body")
        if isinstance(body, dict) and is_before(offset, node_range(body)):
            return False
    return TOP


def find_hover_target(root: ASTNode, offset: int) -> ASTNode | None:
    """Identifier whose range holds offset, or None once the walk passes it."""

    def find_identifier(node: ASTNode, context: object, entering: bool) -> object:
        r = node_range(node)
        if node_type(node) == "Identifier" and in_range(offset, r):
            return Found(node)
        if r is not None and r[0] > offset:
            return Found(None)
        return True

    found = visit(root, None, find_identifier)
    if found is None or not isinstance(found.value, dict):
        return None
    return found.value
