import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sinos.sinos_errors import ErrorKind, SinosError
from sinos.sinos_lexer import CharacterStream, Lexer, Token, tokenize
from sinos.sinos_source import SourceFile, Span


def lexer_for(source: str) -> Lexer:
    return Lexer(CharacterStream(SourceFile("<test>", source)))


def types_of(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def lex_error(source: str) -> SinosError:
    with pytest.raises(SinosError) as excinfo:
        tokenize(source, "<test>")
    return excinfo.value


def test_single_char_tokens() -> None:
    code = "( ) { } , : ; = < > ! + - * / % ~"
    expected = [
        "LPAREN",
        "RPAREN",
        "LBRACE",
        "RBRACE",
        "COMMA",
        "COLON",
        "SEMI",
        "ASSIGN",
        "LT",
        "GT",
        "NOT",
        "PLUS",
        "SUB",
        "MULT",
        "DIV",
        "MOD",
        "CAT",
        "EOF",
    ]
    assert types_of(code) == expected


def test_two_char_operators_use_longest_match() -> None:
    assert types_of("== != <= >=") == ["EQ", "NE", "LE", "GE", "EOF"]
    assert types_of("=== !") == ["EQ", "ASSIGN", "NOT", "EOF"]
    assert types_of("<=>") == ["LE", "GT", "EOF"]


def test_string_token_decodes_escapes() -> None:
    tok = lexer_for(r'"a\nb\t\"c\"\\\0\r"').next_token()
    assert tok.type == "STRING"
    assert tok.value == 'a\nb\t"c"\\\0\r'
    assert tok.span.index == 0
    assert tok.span.length == 19


def test_string_token_allows_raw_newline() -> None:
    tok = lexer_for('"two\nlines"').next_token()
    assert tok.value == "two\nlines"


def test_number_token() -> None:
    tok = lexer_for("123").next_token()
    assert tok.type == "INT"
    assert tok.value == "123"


def test_float_token() -> None:
    tok = lexer_for("123.456").next_token()
    assert tok.type == "FLOAT"
    assert tok.value == "123.456"


def test_identifier_token() -> None:
    tok = lexer_for("my_Var2").next_token()
    assert tok.type == "IDENT"
    assert tok.value == "my_Var2"


@pytest.mark.parametrize(
    "source,type_",
    [("let", "LET"), ("true", "BOOL"), ("false", "BOOL")],
)  # type: ignore[misc]
def test_keyword_tokens(source: str, type_: str) -> None:
    tok = lexer_for(source).next_token()
    assert tok.type == type_
    assert tok.value == source


def test_keyword_prefix_is_identifier() -> None:
    assert types_of("letter trueish False") == ["IDENT", "IDENT", "IDENT", "EOF"]


def test_token_spans_exclude_whitespace() -> None:
    tokens = tokenize("  let   x\t=\n 10 ;")
    assert [(t.span.index, t.span.length) for t in tokens] == [
        (2, 3),
        (8, 1),
        (10, 1),
        (13, 2),
        (16, 1),
        (17, 0),
    ]


def test_skip_whitespace_and_comments() -> None:
    tokens = tokenize("   \n  // a comment\n123 // trailing")
    assert tokens[0].type == "INT"
    assert tokens[0].value == "123"
    assert tokens[1].type == "EOF"


def test_single_slash_is_division() -> None:
    assert types_of("4 / 2") == ["INT", "DIV", "INT", "EOF"]


def test_eof_repeats_forever() -> None:
    lexer = lexer_for("x ")
    lexer.next_token()
    first = lexer.next_token()
    second = lexer.next_token()
    assert first.type == "EOF"
    assert first == second
    assert first.span == Span(SourceFile("<test>", "x "), 2, 0)


def test_iteration_stops_after_eof() -> None:
    tokens = list(lexer_for("a b"))
    assert [t.type for t in tokens] == ["IDENT", "IDENT", "EOF"]


def test_token_eof_on_empty_input() -> None:
    tok = lexer_for("").next_token()
    assert tok.type == "EOF"
    assert tok.value == ""
    assert (tok.span.index, tok.span.length) == (0, 0)


def test_token_repr_and_eq() -> None:
    src = SourceFile("<test>", "42 x")
    t1 = Token("INT", "42", Span(src, 0, 2))
    t2 = Token("INT", "42", Span(src, 0, 2))
    t3 = Token("IDENT", "x", Span(src, 3, 1))

    assert repr(t1) == "Token(INT, 42)"
    assert t1 == t2
    assert t1 != t3

    token_set = {t1, t2, t3}
    assert t1 in token_set
    assert len(token_set) == 2


def test_character_stream_methods() -> None:
    stream = CharacterStream(SourceFile("<test>", "abc"))
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.peek() == "b"
    assert stream.startswith("bc")
    assert not stream.end_of_file()
    stream.next()
    stream.next()
    assert stream.end_of_file()
    assert stream.peek() == ""
    assert stream.peek(5) == ""


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream(SourceFile("<test>", ""))
    with pytest.raises(
        Exception, match="CharacterStreamError: Attempted to read past end of source"
    ):
        stream.next()


def test_unexpected_character() -> None:
    err = lex_error("1 @ 2")
    assert err.kind == ErrorKind.UNEXPECTED_CHAR
    assert (err.span.index, err.span.length) == (2, 1)


def test_non_ascii_digit_is_unexpected() -> None:
    assert lex_error("²").kind == ErrorKind.UNEXPECTED_CHAR


def test_unterminated_string() -> None:
    err = lex_error('x "abc')
    assert err.kind == ErrorKind.UNTERMINATED_STRING
    assert (err.span.index, err.span.length) == (2, 4)


def test_unterminated_string_with_trailing_escape() -> None:
    err = lex_error('"abc\\')
    assert err.kind == ErrorKind.UNTERMINATED_STRING
    assert (err.span.index, err.span.length) == (0, 5)


def test_bad_escape() -> None:
    err = lex_error('"ab\\qc"')
    assert err.kind == ErrorKind.BAD_ESCAPE
    assert err.span.text == "\\q"


@pytest.mark.parametrize(
    "source,text",
    [
        ("1.", "1."),
        ("1.x", "1."),
        ("1.2.3", "1.2.3"),
        ("123..456", "123."),
        ("9" * 400 + ".0", "9" * 400 + ".0"),
        ("1" * 5000, "1" * 5000),
    ],
)  # type: ignore[misc]
def test_malformed_numbers(source: str, text: str) -> None:
    err = lex_error(source)
    assert err.kind == ErrorKind.BAD_NUMBER
    assert err.span.index == 0
    assert err.span.text == text


@given(st.text(alphabet=st.characters(blacklist_categories=["Cs"]), max_size=100))  # type: ignore[misc]
def test_lexer_terminates_with_token_or_diagnostic(text: str) -> None:
    try:
        tokens = tokenize(text)
    except SinosError as e:
        assert 0 <= e.span.index <= e.span.end <= len(text)
        return
    assert tokens[-1].type == "EOF"
    assert tokens[-1].span.index == len(text)
    ends = [t.span.index for t in tokens]
    assert ends == sorted(ends)
    for tok in tokens:
        assert tok.span.end <= len(text)


def test_long_integer_within_conversion_limit() -> None:
    tok = lexer_for("7" * 4000).next_token()
    assert tok.type == "INT"
    assert len(tok.value) == 4000


def test_tokens_are_immutable() -> None:
    tok = lexer_for("x").next_token()
    with pytest.raises(dataclasses.FrozenInstanceError):
        tok.value = "y"  # type: ignore[misc]
