"""Tests for the unresolved-module verifier."""

import pytest

from jsassist.frontend.parse import ParseError
from jsassist.indexer import MemoryIndexer
from jsassist.verify import Diagnostic, check_modules


def test_reports_unknown_define_dependency():
    indexer = MemoryIndexer(module_sources={"a": "var x;"})
    diagnostics = check_modules("define(['a', 'b'], function(a, b) {});", indexer)
    assert diagnostics == [Diagnostic("Cannot find module 'b'", 1, 15, 16)]


def test_reports_lone_require_string():
    diagnostics = check_modules("require('c');", MemoryIndexer())
    assert [d.to_dict() for d in diagnostics] == [
        {"description": "Cannot find module 'c'", "line": 1, "start": 10, "end": 11, "severity": "error"}
    ]


def test_reports_in_source_order():
    source = "var x = 1;\nrequire(['zz'], function(z) {});\ndefine(['yy'], function(y) {});"
    diagnostics = check_modules(source, MemoryIndexer())
    assert [(d.description, d.line, d.start, d.end) for d in diagnostics] == [
        ("Cannot find module 'zz'", 2, 11, 13),
        ("Cannot find module 'yy'", 3, 10, 12),
    ]


def test_known_modules_are_quiet():
    indexer = MemoryIndexer(module_sources={"a": "var x;", "b": "var y;"})
    assert check_modules("define(['a', 'b'], function(a, b) {});", indexer) == []


def test_other_calls_are_ignored():
    assert check_modules("load('nothing'); define.amd;", MemoryIndexer()) == []


def test_parse_error_propagates():
    with pytest.raises(ParseError):
        check_modules("define([ = ]);", MemoryIndexer())
