"""Reachability pruning of a type table before it is exported in a summary."""

from __future__ import annotations

from .. import builtins
from ..model import PROTO_SUFFIX, FuncType, Record, Type, ctor_key


def _mark_type(t: Type, types: dict[str, Record], seen: set[str]) -> None:
    # Function types keep their constructor and prototype records alive.
    while isinstance(t, FuncType):
        key = ctor_key(t)
        _mark_name(key, types, seen)
        _mark_name(key + PROTO_SUFFIX, types, seen)
        t = t.ret
    _mark_name(str(t), types, seen)


def _mark_name(name: str, types: dict[str, Record], seen: set[str]) -> None:
    if name in seen:
        return
    seen.add(name)
    record = types.get(name)
    if record is not None:
        _mark_members(record, types, seen)


def _mark_members(record: Record, types: dict[str, Record], seen: set[str]) -> None:
    for definition in record.members.values():
        _mark_type(definition.type, types, seen)
    if record.proto is not None:
        _mark_type(record.proto.type, types, seen)


def filter_types(types: dict[str, Record], kind: str, module_type: Type) -> dict[str, Record]:
    """Records reachable from the module type; builtins and Global are dropped."""
    if kind == "global":
        builtins.clear_builtin_globals(types)
    else:
        types.pop("Global", None)
    seen: set[str] = set()
    if isinstance(module_type, FuncType):
        _mark_type(module_type, types, seen)
    else:
        record = types.get(str(module_type))
        if record is not None:
            _mark_members(record, types, seen)
    result: dict[str, Record] = {}
    for name, record in types.items():
        if name in seen and not record.builtin:
            result[name] = record
    return result
