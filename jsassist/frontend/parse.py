"""Parse JavaScript source to a dict-based ESTree AST with esprima.

Editor buffers are usually mid-edit, so a failed parse is retried after
closing unbalanced brackets and, failing that, after filling a dangling
member access (``foo.``) with a placeholder property that is removed from
the resulting tree. Ranges in the returned tree always refer to the
caller's buffer.
"""

from __future__ import annotations

import logging

import esprima

from .ast_compat import ASTNode

logger = logging.getLogger(__name__)

PARSE_OPTIONS: dict[str, object] = {
    "range": True,
    "loc": True,
    "comment": True,
    "tolerant": True,
}
TOKENIZE_OPTIONS: dict[str, object] = {"range": True, "loc": True, "tolerant": True}

OPENERS: dict[str, str] = {"{": "}", "(": ")", "[": "]"}
CLOSERS: dict[str, str] = {"}": "{", ")": "(", "]": "["}

PLACEHOLDER = "__jsassist_hole__"


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, lineno: int, col: int, index: int = -1):
        self.msg: str = msg
        self.lineno: int = lineno
        self.col: int = col
        self.index: int = index
        super().__init__(msg)


def parse(source: str) -> ASTNode:
    """Parse a buffer, recovering from a trailing incomplete edit if possible."""
    try:
        return _parse_script(source)
    except esprima.Error as ex:
        failure = ex
    logger.debug("parse failed: %s; attempting recovery", failure)
    root = _recover(source, failure)
    if root is not None:
        return root
    raise _to_parse_error(failure) from failure


def _parse_script(text: str) -> ASTNode:
    ast = esprima.parseScript(text, dict(PARSE_OPTIONS))
    return esprima.toDict(ast)


def _to_parse_error(ex: Exception) -> ParseError:
    description = getattr(ex, "description", None) or str(ex)
    lineno = getattr(ex, "lineNumber", None) or 0
    col = getattr(ex, "column", None) or 0
    index = getattr(ex, "index", None)
    return ParseError(description, lineno, col, index if index is not None else -1)


def _token_field(token: object, name: str) -> object:
    if isinstance(token, dict):
        return token.get(name)
    return getattr(token, name, None)


def _tokenize(source: str) -> list[object]:
    try:
        return list(esprima.tokenize(source, dict(TOKENIZE_OPTIONS)))
    except esprima.Error as ex:
        logger.debug("tokenizer stopped: %s", ex)
        return []


def _missing_closers(tokens: list[object]) -> str:
    """Closing brackets needed to balance the token stream."""
    stack: list[str] = []
    for token in tokens:
        if _token_field(token, "type") != "Punctuator":
            continue
        value = _token_field(token, "value")
        if value in OPENERS:
            stack.append(value)
        elif value in CLOSERS and len(stack) > 0 and stack[-1] == CLOSERS[value]:
            stack.pop()
    return "".join(OPENERS[opener] for opener in reversed(stack))


def _dangling_dot(tokens: list[object], limit: int) -> object | None:
    """Last '.' punctuator ending at or before the error offset."""
    found = None
    for token in tokens:
        rng = _token_field(token, "range")
        if rng is None or rng[1] > limit:
            break
        if _token_field(token, "type") == "Punctuator" and _token_field(token, "value") == ".":
            found = token
    return found


def _recover(source: str, failure: Exception) -> ASTNode | None:
    tokens = _tokenize(source)
    suffix = _missing_closers(tokens)
    if suffix != "":
        try:
            root = _parse_script(source + suffix)
            logger.debug("recovered by appending %r", suffix)
            return root
        except esprima.Error as ex:
            logger.debug("closing brackets did not help: %s", ex)
    index = getattr(failure, "index", None)
    if index is None or index < 0:
        index = len(source)
    dot = _dangling_dot(tokens, index)
    if dot is None:
        return None
    at = _token_field(dot, "range")[1]
    patched = source[:at] + PLACEHOLDER + source[at:] + suffix
    try:
        root = _parse_script(patched)
    except esprima.Error as ex:
        logger.debug("placeholder property did not help: %s", ex)
        return None
    _remove_placeholder(root, at)
    loc = _token_field(dot, "loc")
    end = _token_field(loc, "end") if loc is not None else None
    line = _token_field(end, "line") if end is not None else None
    column = _token_field(end, "column") if end is not None else None
    _shift(root, at, len(PLACEHOLDER), line, column)
    logger.debug("recovered dangling member access at offset %d", at)
    return root


def _remove_placeholder(node: object, at: int) -> bool:
    """Null out the property of the member expression holding the placeholder."""
    if isinstance(node, list):
        for item in node:
            if _remove_placeholder(item, at):
                return True
        return False
    if not isinstance(node, dict):
        return False
    if node.get("type") == "MemberExpression":
        prop = node.get("property")
        if (
            isinstance(prop, dict)
            and prop.get("name") == PLACEHOLDER
            and prop.get("range") is not None
            and prop["range"][0] == at
        ):
            node["property"] = None
            return True
    for key, value in node.items():
        if key == "range" or key == "loc":
            continue
        if isinstance(value, (dict, list)) and _remove_placeholder(value, at):
            return True
    return False


def _shift_offset(value: int, at: int, length: int) -> int:
    if value >= at + length:
        return value - length
    if value > at:
        return at
    return value


def _shift_position(pos: dict[str, object], line: object, column: object, length: int) -> None:
    if line is None or column is None or pos.get("line") != line:
        return
    col = pos.get("column")
    if not isinstance(col, int):
        return
    pos["column"] = _shift_offset(col, column, length)


def _shift(node: object, at: int, length: int, line: object, column: object) -> None:
    """Map every range (and same-line column) back onto the unpatched buffer."""
    if isinstance(node, list):
        for item in node:
            _shift(item, at, length, line, column)
        return
    if not isinstance(node, dict):
        return
    rng = node.get("range")
    if isinstance(rng, list) and len(rng) == 2:
        node["range"] = [_shift_offset(rng[0], at, length), _shift_offset(rng[1], at, length)]
    loc = node.get("loc")
    if isinstance(loc, dict):
        for key in ("start", "end"):
            pos = loc.get(key)
            if isinstance(pos, dict):
                _shift_position(pos, line, column, length)
    for key, value in node.items():
        if key == "range" or key == "loc":
            continue
        if isinstance(value, (dict, list)):
            _shift(value, at, length, line, column)
