"""Human-readable rendering of types for proposal descriptions and hovers."""

from __future__ import annotations

from ..frontend.environment import Environment
from ..model import FuncType, Type, is_generated


def readable_type(t: Type, env: Environment, use_signature: bool = False, depth: int = 0) -> str:
    """Render a type. Generated records show their members one level deep.

    With use_signature, function types render as ``(a,b) -> Ret``; otherwise
    a function renders as its return type.
    """
    if isinstance(t, FuncType):
        if use_signature:
            return "(" + ",".join(t.params) + ") -> " + readable_type(t.ret, env, True, 1)
        return readable_type(t.ret, env, False, 0)
    name = str(t)
    if not is_generated(name):
        return name
    record = env.find_type(name)
    parts: list[str] = []
    if record is not None:
        for member, definition in record.members.items():
            if depth == 0:
                parts.append(member + " : " + readable_type(definition.type, env, False, 1))
            else:
                parts.append(member + " : {...}")
    return "{ " + ", ".join(parts) + " }"
