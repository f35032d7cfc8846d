"""Tests for parsing and recovery of incomplete buffers."""

import pytest

from jsassist.frontend.parse import ParseError, parse


def test_parse_complete_source():
    root = parse("var x = 1;")
    assert root["type"] == "Program"
    decl = root["body"][0]
    assert decl["type"] == "VariableDeclaration"
    assert decl["range"] == [0, 10]
    assert decl["declarations"][0]["id"]["name"] == "x"


def test_comments_are_collected():
    root = parse("/*global a b*/\nvar x;")
    comment = root["comments"][0]
    assert comment["type"] == "Block"
    assert comment["value"] == "global a b"
    assert comment["range"] == [0, 14]


def test_recovers_dangling_member_access():
    source = "var x = 9;\nx."
    root = parse(source)
    stmt = root["body"][1]
    member = stmt["expression"]
    assert member["type"] == "MemberExpression"
    assert member["property"] is None
    assert member["object"]["range"] == [11, 12]
    assert member["range"] == [11, 13]
    assert stmt["range"] == [11, 13]


def test_recovered_ranges_fit_the_buffer():
    source = "var x = 9;\nx."
    root = parse(source)
    assert root["range"][1] <= len(source)


def test_recovers_unclosed_block():
    root = parse("function f() {\n  var y = 1;\n")
    fn = root["body"][0]
    assert fn["type"] == "FunctionDeclaration"
    assert fn["body"]["body"][0]["type"] == "VariableDeclaration"


def test_recovers_dangling_dot_inside_call():
    root = parse("foo(a.")
    call = root["body"][0]["expression"]
    assert call["type"] == "CallExpression"
    assert call["arguments"][0]["property"] is None
    assert call["arguments"][0]["object"]["name"] == "a"


def test_unrecoverable_source_raises():
    with pytest.raises(ParseError) as info:
        parse("var = ;")
    assert info.value.lineno == 1
    assert info.value.msg != ""


def test_parse_error_reports_line():
    with pytest.raises(ParseError) as info:
        parse("var a = 1;\nvar b = = 2;")
    assert info.value.lineno == 2
