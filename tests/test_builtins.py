"""Tests for the builtin type catalog."""

from jsassist import builtins
from jsassist.model import NUMBER, OBJECT, Definition, FuncType, NamedType


def test_instantiate_returns_fresh_tables():
    first = builtins.instantiate()
    second = builtins.instantiate()
    first["String"].members["bogus"] = Definition(NUMBER)
    first["Global"].members.clear()
    assert "bogus" not in second["String"].members
    assert "Math" in second["Global"].members


def test_prototype_links():
    types = builtins.instantiate()
    assert types["Object"].proto is None
    assert types["String"].proto == Definition(OBJECT)
    assert types["Global"].proto == Definition(OBJECT)


def test_builtin_flags():
    types = builtins.instantiate()
    assert not types["Global"].builtin
    for name in builtins.BUILTIN_RECORDS:
        assert types[name].builtin


def test_member_types_are_decoded():
    types = builtins.instantiate()
    assert types["Global"].members["parseInt"].type == FuncType(NUMBER, ("str", "[radix]"))
    assert types["Global"].members["this"].type == NamedType("Global")
    assert types["Math"].members["PI"].type == NUMBER


def test_clear_builtin_globals_keeps_user_members():
    types = builtins.instantiate()
    types["Global"].members["mine"] = Definition(NUMBER)
    builtins.clear_builtin_globals(types)
    assert list(types["Global"].members) == ["mine"]
    assert types["Global"].proto is None
