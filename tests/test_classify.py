"""Tests for offset classification and hover target lookup."""

from jsassist.frontend.classify import MEMBER, TOP, classify, find_hover_target
from jsassist.frontend.parse import parse


def _classify(source: str, offset: int | None = None) -> str | bool:
    if offset is None:
        offset = len(source)
    return classify(parse(source), offset, "", source)


def test_empty_buffer_is_top():
    assert _classify("") == TOP


def test_after_statement_is_top():
    assert _classify("var x = 1;\n") == TOP


def test_identifier_is_top():
    assert _classify("var x = 1;\nx") == TOP


def test_in_line_comment():
    assert _classify("// hello", 5) is False


def test_in_block_comment():
    source = "/* hello */\nvar x;"
    assert _classify(source, 4) is False
    assert _classify(source, len(source)) == TOP


def test_inside_string_literal():
    assert _classify('var s = "abc";', 10) is False


def test_declared_name_without_initializer():
    assert _classify("var abc", 7) is False


def test_declared_name_before_initializer():
    source = "var abc = 4;"
    assert _classify(source, 7) is False
    assert _classify(source, 11) == TOP


def test_function_parameter_list():
    assert _classify("function fff(a) {}", 13) is False


def test_inside_function_body():
    source = "function fff(a) {\n  \n}"
    assert _classify(source, source.index("\n  \n") + 3) == TOP


def test_member_property():
    assert _classify("x.fo", 4) == MEMBER


def test_dangling_member():
    assert _classify("x.") == MEMBER


def test_dangling_member_across_newline():
    source = "var aaa = 9;\nfunction f(aaa) {\n  aaa.\n}"
    assert _classify(source, source.index("aaa.\n") + 4) == MEMBER


def test_hover_target():
    root = parse("var aaa = 9;\naaa")
    target = find_hover_target(root, 16)
    assert target["name"] == "aaa"
    assert target["range"] == [13, 16]


def test_hover_target_at_buffer_start():
    target = find_hover_target(parse("abc;"), 0)
    assert target["name"] == "abc"


def test_no_hover_target():
    assert find_hover_target(parse("var x = 1;"), 8) is None
