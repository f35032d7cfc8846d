"""Tests for the type model and its wire encoding."""

import pytest

from jsassist.model import (
    NUMBER,
    OBJECT,
    STRING,
    Definition,
    FuncType,
    NamedType,
    Record,
    Summary,
    ctor_key,
    format_type,
    parse_type,
    return_type,
    with_return,
)


def test_parse_named():
    assert parse_type("Number") == NUMBER
    assert parse_type("gen~local~3") == NamedType("gen~local~3")


def test_parse_function():
    assert parse_type("?Number:a,b") == FuncType(NUMBER, ("a", "b"))


def test_parse_function_without_params():
    assert parse_type("?String:") == FuncType(STRING, ())


def test_parse_function_returning_function():
    t = parse_type("??Exported:a,b:c,d")
    assert t == FuncType(FuncType(NamedType("Exported"), ("a", "b")), ("c", "d"))


def test_parse_proto_name_stays_named():
    assert parse_type("?Fun:~proto") == NamedType("?Fun:~proto")


def test_format_matches_wire_strings():
    for text in ["Object", "?Number:str,[radix]", "??Number:a:a,b,c", "?Fun:"]:
        assert format_type(parse_type(text)) == text


def test_ctor_key_drops_params():
    assert ctor_key(FuncType(NamedType("Fun"), ("a", "b"))) == "?Fun:"


def test_return_type_and_with_return():
    fn = FuncType(OBJECT, ("a",))
    assert return_type(fn) == OBJECT
    assert return_type(NUMBER) == NUMBER
    assert with_return(fn, NUMBER) == FuncType(NUMBER, ("a",))
    assert with_return(STRING, NUMBER) == NUMBER


def test_definition_from_dict_full_form():
    d = Definition.from_dict({"typeName": "?Number:a", "range": [3, 7], "path": "lib.js"})
    assert d.type == FuncType(NUMBER, ("a",))
    assert d.range == (3, 7)
    assert d.path == "lib.js"


def test_definition_from_dict_compact_form():
    assert Definition.from_dict("String") == Definition(STRING)


def test_definition_from_dict_rejects_garbage():
    with pytest.raises(ValueError):
        Definition.from_dict({"range": [1, 2]})


def test_record_to_dict_puts_proto_first():
    record = Record({"a": Definition(NUMBER, (1, 2))}, Definition(OBJECT))
    assert record.to_dict() == {"$$proto": "Object", "a": {"typeName": "Number", "range": [1, 2]}}


def test_summary_from_dict_legacy_members():
    summary = Summary.from_dict(
        {
            "provided": {"$$proto": "Object", "foo": "Number"},
            "types": {"gen~a~1": {"$$proto": "Object", "g": "String"}},
            "kind": "commonjs",
        }
    )
    assert isinstance(summary.provided, Record)
    assert summary.provided.proto == Definition(OBJECT)
    assert summary.provided.members["foo"].type == NUMBER
    assert summary.types["gen~a~1"].members["g"].type == STRING
    assert summary.kind == "commonjs"


def test_summary_from_dict_string_provided():
    summary = Summary.from_dict({"provided": "?Number:a,b", "types": {}, "kind": "AMD"})
    assert summary.provided == FuncType(NUMBER, ("a", "b"))


def test_summary_copy_is_deep():
    summary = Summary(Record({"x": Definition(NUMBER)}), {"T": Record({"y": Definition(STRING)})})
    copied = summary.copy()
    copied.provided.members["x"].type = STRING
    copied.types["T"].members.clear()
    assert summary.provided.members["x"].type == NUMBER
    assert "y" in summary.types["T"].members


def test_attach_path_keeps_existing_paths():
    record = Record({"a": Definition(NUMBER), "b": Definition(STRING, None, "other.js")})
    record.attach_path("this.js")
    assert record.members["a"].path == "this.js"
    assert record.members["b"].path == "other.js"


def test_record_escapes_reserved_member_names():
    record = Record(
        {"$$proto": Definition(NUMBER), "$_$x": Definition(STRING), "plain": Definition(NUMBER)},
        Definition(OBJECT),
    )
    data = record.to_dict()
    assert list(data) == ["$$proto", "$_$$$proto", "$_$$_$x", "plain"]
    assert data["$$proto"] == "Object"
    assert Record.from_dict(data) == record
