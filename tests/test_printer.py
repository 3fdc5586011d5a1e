import pytest

from sinos.sinos_ast import Block, Float, Integer, Module, Name, String, Unary
from sinos.sinos_parser import parse
from sinos.sinos_printer import dump, format_float, quote_string, unparse
from sinos.sinos_source import SourceFile, Span


def test_dump_indents_nested_nodes() -> None:
    assert dump(parse("-(a);")) == (
        "module<0,5>\n"
        "  exprStmt<0,5>\n"
        "    unary<0,4> -\n"
        "      group<1,3>\n"
        "        name<2,1> a"
    )


def test_dump_string_uses_json_quoting() -> None:
    assert dump(parse('"tab\\there \\"q\\"";')).endswith('string<0,17> "tab\\there \\"q\\""')


def test_dump_keeps_non_ascii_text() -> None:
    assert dump(parse('"héllo";')).endswith('"héllo"')


def test_dump_empty_block_has_no_children() -> None:
    src = SourceFile("<test>", "{}")
    assert dump(Block((), None, Span(src, 0, 2))) == "block<0,2>"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("plain", '"plain"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("a\\b", '"a\\\\b"'),
        ("line\nbreak\ttab\r\0", '"line\\nbreak\\ttab\\r\\0"'),
        ("", '""'),
    ],
)  # type: ignore[misc]
def test_quote_string(value: str, expected: str) -> None:
    assert quote_string(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (1.5, "1.5"),
        (2.0, "2.0"),
        (1e-10, "0.0000000001"),
        (1e19, "10000000000000000000.0"),
        (0.1, "0.1"),
    ],
)  # type: ignore[misc]
def test_format_float_is_positional(value: float, expected: str) -> None:
    assert format_float(value) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("", ""),
        ("1;2;", "1;\n2;"),
        ("let  x:Int=1+2 ;", "let x: Int = 1 + 2;"),
        ("{ let a = 1; a }", "{ let a = 1; a };"),
        ("{}", "{};"),
        ("{ {1} {2} }", "{ { 1 }; { 2 } };"),
        ("!-(1 ~ 2) ;", "!-(1 ~ 2);"),
        ("true;false;", "true;\nfalse;"),
        ('"x\\ny";', '"x\\ny";'),
        ("3.250;", "3.25;"),
    ],
)  # type: ignore[misc]
def test_unparse(source: str, expected: str) -> None:
    assert unparse(parse(source)) == expected


def test_unparse_builds_from_hand_made_nodes() -> None:
    src = SourceFile("<test>", "x")
    span = Span(src, 0, 1)
    module = Module((), span)
    assert unparse(module) == ""
    assert unparse(Integer(7, span)) == "7"
    assert unparse(Float(1e-7, span)) == "0.0000001"
    assert unparse(String('"', span)) == '"\\""'


def test_printers_handle_very_tall_trees() -> None:
    src = SourceFile("<test>", "x")
    span = Span(src, 0, 1)
    node: Unary | Name = Name("x", span)
    for _ in range(5000):
        node = Unary("!", node, span)

    lines = dump(node).split("\n")
    assert len(lines) == 5001
    assert lines[-1] == "  " * 5000 + "name<0,1> x"
    assert unparse(node) == "!" * 5000 + "x"
