"""Type model: type references, definitions, structural records and summaries.

A type is either a name (a builtin such as ``Number``, a constructor instance
such as ``Fun``, or a generated record name such as ``gen~local~3``) or a
function type carrying a return type and formal parameter names. Records are
the structural types: a member table plus an optional prototype link.

On the wire both shapes are encoded as strings. Function types take the form
``?<return>:<param>,<param>``; everything else is the plain name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

PROTO_SUFFIX = "~proto"
PROTO_KEY = "$$proto"
ESCAPE_PREFIX = "$_$"
GENERATED_PREFIX = "gen~"


@dataclass(frozen=True)
class Type:
    """Base for all type references."""


@dataclass(frozen=True)
class NamedType(Type):
    """Reference to a record in the type table, or a bare builtin name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FuncType(Type):
    """Callable type: return type plus formal parameter names."""

    ret: Type
    params: tuple[str, ...] = ()

    def __str__(self) -> str:
        return format_type(self)


OBJECT = NamedType("Object")
GLOBAL = NamedType("Global")
NUMBER = NamedType("Number")
STRING = NamedType("String")
BOOLEAN = NamedType("Boolean")
ARRAY = NamedType("Array")
REGEXP = NamedType("RegExp")
ERROR = NamedType("Error")
ARGUMENTS = NamedType("Arguments")


def format_type(t: Type) -> str:
    """Encode a type as its wire string."""
    if isinstance(t, FuncType):
        return "?" + format_type(t.ret) + ":" + ",".join(t.params)
    if isinstance(t, NamedType):
        return t.name
    raise TypeError("not a type: " + repr(t))


def parse_type(text: str) -> Type:
    """Decode a wire string. The return type ends at the last colon."""
    if not text.startswith("?") or PROTO_SUFFIX in text:
        return NamedType(text)
    colon = text.rfind(":")
    if colon <= 0:
        return FuncType(parse_type(text[1:]), ())
    args = text[colon + 1 :]
    params: tuple[str, ...] = ()
    if args != "":
        params = tuple(args.split(","))
    return FuncType(parse_type(text[1:colon]), params)


def return_type(t: Type) -> Type:
    """Strip one level of function type."""
    if isinstance(t, FuncType):
        return t.ret
    return t


def with_return(t: Type, ret: Type) -> Type:
    """Replace the return type of a function type; other types become ret."""
    if isinstance(t, FuncType):
        return FuncType(ret, t.params)
    return ret


def ctor_key(fn: FuncType) -> str:
    """Type table key of the constructor record for a function type."""
    return format_type(FuncType(fn.ret, ()))


def is_generated(name: str) -> bool:
    return name.startswith(GENERATED_PREFIX)


def escape_member(name: str) -> str:
    """Member name as written in a summary; never collides with the prototype key."""
    if name == PROTO_KEY or name.startswith(ESCAPE_PREFIX):
        return ESCAPE_PREFIX + name
    return name


def unescape_member(key: str) -> str:
    if key.startswith(ESCAPE_PREFIX):
        return key[len(ESCAPE_PREFIX) :]
    return key


@dataclass
class Definition:
    """A binding: its type, where it was declared, and in which file."""

    type: Type
    range: tuple[int, int] | None = None
    path: str | None = None

    def copy(self) -> Definition:
        return Definition(self.type, self.range, self.path)

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {"typeName": format_type(self.type)}
        if self.range is not None:
            d["range"] = [self.range[0], self.range[1]]
        if self.path is not None:
            d["path"] = self.path
        return d

    @staticmethod
    def from_dict(data: object) -> Definition:
        """Accept the full object form or a bare type string."""
        if isinstance(data, str):
            return Definition(parse_type(data))
        if not isinstance(data, dict) or not isinstance(data.get("typeName"), str):
            raise ValueError("malformed definition: " + repr(data))
        rng = data.get("range")
        definition = Definition(parse_type(data["typeName"]))
        if isinstance(rng, (list, tuple)) and len(rng) == 2:
            definition.range = (int(rng[0]), int(rng[1]))
        path = data.get("path")
        if isinstance(path, str):
            definition.path = path
        return definition


@dataclass
class Record:
    """Structural type: member definitions plus an optional prototype link."""

    members: dict[str, Definition] = field(default_factory=dict)
    proto: Definition | None = None
    builtin: bool = False

    def copy(self) -> Record:
        members = {name: d.copy() for name, d in self.members.items()}
        proto = self.proto.copy() if self.proto is not None else None
        return Record(members, proto, self.builtin)

    def attach_path(self, path: str) -> None:
        """Stamp a file path on every definition that has none."""
        for definition in self.members.values():
            if definition.path is None:
                definition.path = path
        if self.proto is not None and self.proto.path is None:
            self.proto.path = path

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {}
        if self.proto is not None:
            d[PROTO_KEY] = format_type(self.proto.type)
        for name, definition in self.members.items():
            d[escape_member(name)] = definition.to_dict()
        return d

    @staticmethod
    def from_dict(data: object) -> Record:
        if not isinstance(data, dict):
            raise ValueError("malformed record: " + repr(data))
        record = Record()
        for name, value in data.items():
            if name == PROTO_KEY:
                if not isinstance(value, str):
                    raise ValueError("malformed prototype: " + repr(value))
                record.proto = Definition(parse_type(value))
            else:
                record.members[unescape_member(name)] = Definition.from_dict(value)
        return record


@dataclass
class Summary:
    """What one file exports: its provided type, supporting records, and kind."""

    provided: Type | Record
    types: dict[str, Record] = field(default_factory=dict)
    kind: str = "global"

    def copy(self) -> Summary:
        provided = self.provided
        if isinstance(provided, Record):
            provided = provided.copy()
        types = {name: r.copy() for name, r in self.types.items()}
        return Summary(provided, types, self.kind)

    def to_dict(self) -> dict[str, object]:
        if isinstance(self.provided, Record):
            provided: object = self.provided.to_dict()
        else:
            provided = format_type(self.provided)
        types = {name: r.to_dict() for name, r in self.types.items()}
        return {"provided": provided, "types": types, "kind": self.kind}

    @staticmethod
    def from_dict(data: object) -> Summary:
        if not isinstance(data, dict) or "provided" not in data:
            raise ValueError("malformed summary")
        raw = data["provided"]
        if isinstance(raw, str):
            provided: Type | Record = parse_type(raw)
        else:
            provided = Record.from_dict(raw)
        types: dict[str, Record] = {}
        raw_types = data.get("types") or {}
        if not isinstance(raw_types, dict):
            raise ValueError("malformed summary types")
        for name, value in raw_types.items():
            types[name] = Record.from_dict(value)
        kind = data.get("kind")
        return Summary(provided, types, kind if isinstance(kind, str) else "global")


@dataclass
class DefinitionResult:
    """Answer to a definition request: where a name was bound, plus hover text."""

    type: Type
    range: tuple[int, int] | None
    path: str | None
    hover: str

    def to_dict(self) -> dict[str, object]:
        return {
            "typeName": format_type(self.type),
            "range": list(self.range) if self.range is not None else None,
            "path": self.path,
            "hover": self.hover,
        }


class Indexer(Protocol):
    """Supplies summaries of other files to an analysis run."""

    def retrieve_global_summaries(self) -> list[Summary]: ...

    def retrieve_summary(self, name: str) -> Summary | None: ...

    def has_dependency(self, name: str) -> bool: ...
