"""JSON rendering of summaries, proposals and diagnostics."""

from __future__ import annotations


def _json_escape(s: str) -> str:
    """Escape a string for JSON output."""
    result: list[str] = []
    i = 0
    while i < len(s):
        c = s[i]
        if c == "\\":
            result.append("\\\\")
        elif c == '"':
            result.append('\\"')
        elif c == "\n":
            result.append("\\n")
        elif c == "\r":
            result.append("\\r")
        elif c == "\t":
            result.append("\\t")
        elif ord(c) < 0x20:
            result.append("\\u" + format(ord(c), "04x"))
        else:
            result.append(c)
        i += 1
    return "".join(result)


def _join(parts: list[str], opener: str, closer: str, indent: int, level: int) -> str:
    if indent == 0:
        return opener + ",".join(parts) + closer
    pad = " " * (indent * (level + 1))
    pad_close = " " * (indent * level)
    return opener + "\n" + ",\n".join(pad + p for p in parts) + "\n" + pad_close + closer


def _to_json(obj: object, indent: int, level: int) -> str:
    """Recursively serialize an object to JSON string. indent 0 is compact."""
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        if obj:
            return "true"
        return "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, float):
        return str(obj)
    if isinstance(obj, str):
        return '"' + _json_escape(obj) + '"'
    if isinstance(obj, (list, tuple)):
        if len(obj) == 0:
            return "[]"
        parts: list[str] = []
        i = 0
        while i < len(obj):
            parts.append(_to_json(obj[i], indent, level + 1))
            i += 1
        return _join(parts, "[", "]", indent, level)
    if isinstance(obj, dict):
        if len(obj) == 0:
            return "{}"
        parts = []
        sep = ":" if indent == 0 else ": "
        keys = list(obj.keys())
        i = 0
        while i < len(keys):
            k = keys[i]
            key_str = '"' + _json_escape(str(k)) + '"'
            parts.append(key_str + sep + _to_json(obj[k], indent, level + 1))
            i += 1
        return _join(parts, "{", "}", indent, level)
    to_dict = getattr(obj, "to_dict", None)
    if to_dict is not None:
        return _to_json(to_dict(), indent, level)
    raise TypeError("cannot serialize " + type(obj).__name__)


def to_json(obj: object, indent: int = 2) -> str:
    """Serialize to pretty-printed JSON, or compact JSON with indent=0."""
    return _to_json(obj, indent, 0)
