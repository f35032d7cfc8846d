"""Tests for the scope stack and type table."""

import pytest

from jsassist.frontend.environment import Environment
from jsassist.model import NUMBER, OBJECT, STRING, Definition, FuncType, NamedType, Record, Summary


def test_generated_names_count_up():
    env = Environment("a")
    assert env.new_scope() == "gen~a~0"
    assert env.new_fleeting_object() == "gen~a~1"
    assert env.scopes == ["Global", "gen~a~0"]


def test_inner_scope_sees_globals():
    env = Environment()
    env.add_variable("x", None, NUMBER)
    env.new_scope()
    assert env.lookup_name("x") == NUMBER
    assert env.lookup_name("parseInt") == FuncType(NUMBER, ("str", "[radix]"))
    assert env.lookup_name("hasOwnProperty") is not None
    assert env.lookup_name("nothing") is None


def test_new_object_binds_this_until_popped():
    env = Environment()
    obj = env.new_object()
    scope = env.scopes[-1]
    assert env.lookup_name("this") == NamedType(obj)
    assert env.types[obj].proto == Definition(OBJECT)
    env.pop_scope()
    assert "this" not in env.types[scope].members
    assert env.lookup_name("this") == NamedType("Global")


def test_pop_global_scope_raises():
    with pytest.raises(RuntimeError):
        Environment().pop_scope()


def test_builtin_records_are_never_changed():
    env = Environment()
    env.add_variable("foo", NamedType("String"), NUMBER)
    env.add_or_set_variable("charAt", NamedType("String"), NUMBER)
    assert "foo" not in env.types["String"].members
    assert env.types["String"].members["charAt"].type == FuncType(STRING, ("index",))


def test_add_or_set_overwrites_outer_binding():
    env = Environment()
    env.add_variable("x", None, NUMBER)
    inner = env.new_scope()
    assert env.add_or_set_variable("x", None, STRING) == STRING
    assert env.types["Global"].members["x"].type == STRING
    assert "x" not in env.types[inner].members


def test_add_or_set_shadows_builtin_member_on_target():
    env = Environment()
    obj = env.new_fleeting_object()
    env.add_or_set_variable("toString", NamedType(obj), NUMBER)
    assert env.types[obj].members["toString"].type == NUMBER
    assert env.types["Object"].members["toString"].type == FuncType(STRING, ())


def test_add_or_set_without_type_makes_object():
    env = Environment("a")
    t = env.add_or_set_variable("y", None, None)
    assert t == NamedType("gen~a~0")
    assert env.types["gen~a~0"].proto == Definition(OBJECT)
    assert env.types["Global"].members["y"].type == t


def test_prototype_assignment_sets_proto_link():
    env = Environment()
    obj = env.new_fleeting_object()
    env.add_or_set_variable("prototype", NamedType(obj), NamedType("Foo"))
    assert env.types[obj].proto.type == NamedType("Foo")
    assert env.lookup_name("prototype", NamedType(obj)) == NamedType("Foo")


def test_scope_of_function_type():
    env = Environment()
    fn = FuncType(NamedType("Fun"), ("a",))
    assert env.scope(fn) == "Function"
    env.types["Fun"] = Record(proto=Definition(OBJECT))
    env.create_constructor(fn, "Fun")
    assert env.scope(fn) == "?Fun:"
    assert env.types["?Fun:"].proto.type == NamedType("?Fun:~proto")
    assert env.types["Fun"].proto.type == NamedType("?Fun:")


def test_instance_sees_prototype_members():
    env = Environment()
    fn = FuncType(NamedType("Fun"), ())
    env.types["Fun"] = Record(proto=Definition(OBJECT))
    env.create_constructor(fn, "Fun")
    env.add_or_set_variable("bar", NamedType("?Fun:~proto"), NUMBER)
    assert env.lookup_name("bar", NamedType("Fun")) == NUMBER


def test_find_type():
    env = Environment()
    assert env.find_type(NamedType("Math")) is env.types["Math"]
    assert env.find_type("Math") is env.types["Math"]
    assert env.find_type(FuncType(NUMBER, ())) is None
    assert env.find_type(None) is None


def test_chain_stops_on_cycle():
    env = Environment()
    a = env.new_fleeting_object()
    b = env.new_fleeting_object()
    env.types[a].proto = Definition(NamedType(b))
    env.types[b].proto = Definition(NamedType(a))
    assert len(list(env.chain(a))) == 2


def test_merge_summary_copies_records():
    env = Environment()
    provided = Record({"val": Definition(NUMBER, (1, 4), "dep.js")}, Definition(OBJECT))
    summary = Summary(provided, {"gen~dep.js~1": Record({"g": Definition(STRING)}, Definition(OBJECT))})
    target = env.new_fleeting_object()
    env.merge_summary(summary, target)
    assert env.lookup_name("val", NamedType(target), True) == Definition(NUMBER, (1, 4), "dep.js")
    env.types[target].members["val"].type = STRING
    env.types["gen~dep.js~1"].members.clear()
    assert provided.members["val"].type == NUMBER
    assert "g" in summary.types["gen~dep.js~1"].members


def test_merge_summary_keeps_existing_records():
    env = Environment()
    env.types["gen~x~1"] = Record({"mine": Definition(NUMBER)})
    env.merge_summary(Summary(NUMBER, {"gen~x~1": Record({"theirs": Definition(STRING)})}), "Global")
    assert list(env.types["gen~x~1"].members) == ["mine"]
