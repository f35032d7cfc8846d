"""Type environment: the scope stack and the type table.

Scopes are records too: each scope's prototype is its enclosing scope, so
name lookup is a walk up the prototype chain that ends in Global and then
Object. Generated record names look like ``gen~<uid>~<n>`` and number up
from zero in allocation order, which keeps summaries stable across runs.
"""

from __future__ import annotations

import logging
from typing import Iterator

from .. import builtins
from ..model import (
    GENERATED_PREFIX,
    OBJECT,
    PROTO_SUFFIX,
    Definition,
    FuncType,
    NamedType,
    Record,
    Summary,
    Type,
    ctor_key,
)

logger = logging.getLogger(__name__)


class Environment:
    """Mutable scope and type store for one analysis run."""

    def __init__(self, uid: str = "local") -> None:
        self.uid: str = uid
        self.types: dict[str, Record] = builtins.instantiate()
        self.scopes: list[str] = ["Global"]
        self.count: int = 0

    def new_name(self) -> str:
        name = GENERATED_PREFIX + self.uid + "~" + str(self.count)
        self.count += 1
        return name

    def scope(self, target: Type | None = None) -> str:
        """Current scope name, or the record name standing for a target's type."""
        if target is None:
            return self.scopes[-1]
        if isinstance(target, FuncType):
            key = ctor_key(target)
            if key in self.types:
                return key
            return "Function"
        return target.name

    def new_scope(self, range: tuple[int, int] | None = None) -> str:
        name = self.new_name()
        self.types[name] = Record(proto=Definition(NamedType(self.scope()), range))
        self.scopes.append(name)
        return name

    def new_object(self, name: str | None = None, range: tuple[int, int] | None = None) -> str:
        """Push a scope whose `this` is a fresh object record; returns the object name."""
        self.new_scope(range)
        if name is None or self._reserved(name):
            name = self.new_name()
        self.types[name] = Record(proto=Definition(OBJECT, range))
        self.add_variable("this", None, NamedType(name), range)
        return name

    def new_fleeting_object(self, name: str | None = None, range: tuple[int, int] | None = None) -> str:
        """Fresh object record that is not pushed as a scope."""
        if name is None or self._reserved(name):
            name = self.new_name()
        self.types[name] = Record(proto=Definition(OBJECT, range))
        return name

    def _reserved(self, name: str) -> bool:
        """Builtin records and live scopes must not be replaced by a named object."""
        record = self.types.get(name)
        return (record is not None and record.builtin) or name in self.scopes

    def pop_scope(self) -> str:
        if len(self.scopes) == 1:
            raise RuntimeError("cannot pop the global scope")
        self.remove_variable("this")
        return self.scopes.pop()

    def find_type(self, t: Type | str | None) -> Record | None:
        if t is None:
            return None
        if isinstance(t, FuncType):
            return self.types.get(ctor_key(t))
        if isinstance(t, NamedType):
            t = t.name
        return self.types.get(t)

    def chain(self, name: str) -> Iterator[Record]:
        """Records along the prototype chain starting at name."""
        seen: set[int] = set()
        record = self.types.get(name)
        while record is not None and id(record) not in seen:
            seen.add(id(record))
            yield record
            if record.proto is None:
                return
            record = self.find_type(record.proto.type)

    def add_variable(
        self,
        name: str,
        target: Type | None = None,
        type: Type | None = None,
        range: tuple[int, int] | None = None,
    ) -> None:
        """Bind name in the target's record. Builtin records are never changed."""
        record = self.types.get(self.scope(target))
        if record is None or record.builtin:
            return
        if type is None:
            type = OBJECT
        record.members[name] = Definition(type, range)

    def remove_variable(self, name: str, target: Type | None = None) -> None:
        record = self.types.get(self.scope(target))
        if record is None or record.builtin:
            return
        record.members.pop(name, None)

    def add_or_set_variable(
        self,
        name: str,
        target: Type | None = None,
        type: Type | None = None,
        range: tuple[int, int] | None = None,
    ) -> Type:
        """Overwrite the nearest existing binding along the chain, else add one.

        A missing type becomes a fresh object record. Returns the type bound.
        """
        target_name = self.scope(target)
        if type is None:
            type = NamedType(self.new_fleeting_object(None, range))
        if name == "prototype":
            return self._set_prototype(target_name, type, range)
        for record in self.chain(target_name):
            definition = record.members.get(name)
            if definition is None:
                continue
            if record.builtin:
                break
            definition.type = type
            return type
        record = self.types.get(target_name)
        if record is not None and not record.builtin:
            record.members[name] = Definition(type, range)
        return type

    def _set_prototype(self, target_name: str, type: Type, range: tuple[int, int] | None) -> Type:
        for record in self.chain(target_name):
            if record.proto is not None:
                if not record.builtin:
                    record.proto = Definition(type, range)
                return type
        record = self.types.get(target_name)
        if record is not None and not record.builtin:
            record.proto = Definition(type, range)
        return type

    def lookup_name(
        self, name: str, target: Type | None = None, include_definition: bool = False
    ) -> Type | Definition | None:
        """Resolve name along the prototype chain of the target (or current scope)."""
        start = self.scope(target)
        for record in self.chain(start):
            if name == "prototype":
                definition = record.proto
            else:
                definition = record.members.get(name)
            if definition is not None:
                if include_definition:
                    return definition
                return definition.type
        return None

    def merge_summary(self, summary: Summary, target_name: str) -> None:
        """Import a dependency's records, and its provided members into target_name."""
        for name, record in summary.types.items():
            if name not in self.types:
                self.types[name] = record.copy()
        if not isinstance(summary.provided, Record):
            return
        target = self.types.get(target_name)
        if target is None or target.builtin:
            logger.debug("cannot merge summary into %s", target_name)
            return
        if summary.provided.proto is not None:
            target.proto = summary.provided.proto.copy()
        for name, definition in summary.provided.members.items():
            target.members[name] = definition.copy()

    def create_constructor(self, fn_type: FuncType, instance_name: str) -> None:
        """Records for a constructor function and its prototype object."""
        key = ctor_key(fn_type)
        self.new_fleeting_object(key)
        proto_name = self.new_fleeting_object(key + PROTO_SUFFIX)
        self.types[key].proto = Definition(NamedType(proto_name))
        instance = self.types.get(instance_name)
        if instance is not None:
            instance.proto = Definition(NamedType(key))
