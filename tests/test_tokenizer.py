"""Unit tests for the JS/TS tokenizer."""

from __future__ import annotations

import pytest

from mongoose_ts.codegen.core.tokenizer import (
    TokenizeError,
    TokenKind,
    parse_number,
    tokenize,
)


def kinds(source: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(source)]


def test_drops_whitespace_and_comments() -> None:
    tokens = tokenize("name /* the name */ : // trailing\n  'x'")

    assert [t.kind for t in tokens] == [
        TokenKind.IDENT,
        TokenKind.COLON,
        TokenKind.STRING,
        TokenKind.EOF,
    ]
    assert tokens[0].value == "name"
    assert tokens[2].value == "x"


def test_string_escapes_are_decoded() -> None:
    token = tokenize(r"'it\'s A\x42 \u{1F600}'")[0]

    assert token.kind == TokenKind.STRING
    assert token.value == "it's AB \U0001F600"


def test_token_spans_cover_source() -> None:
    source = "type: Date.now()"
    tokens = tokenize(source)

    assert [source[t.pos : t.end] for t in tokens[:-1]] == [
        "type", ":", "Date", ".", "now", "(", ")",
    ]


def test_regex_literal_after_colon() -> None:
    assert kinds("match: /^a+[/]b$/gi,") == [
        TokenKind.IDENT,
        TokenKind.COLON,
        TokenKind.REGEX,
        TokenKind.COMMA,
        TokenKind.EOF,
    ]


def test_slash_after_identifier_is_division() -> None:
    assert kinds("a / b") == [
        TokenKind.IDENT,
        TokenKind.OPERATOR,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]


def test_template_literal_with_nested_braces() -> None:
    tokens = tokenize("`a${ {b: 1} }c`, d")

    assert tokens[0].kind == TokenKind.TEMPLATE
    assert tokens[1].kind == TokenKind.COMMA
    assert tokens[2].value == "d"


def test_longest_operator_wins() -> None:
    tokens = tokenize("a === b => ...c")

    assert [t.value for t in tokens if t.kind == TokenKind.OPERATOR] == ["===", "=>", "..."]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", 42),
        ("1_000", 1000),
        ("0x1F", 31),
        ("0b101", 5),
        ("0o17", 15),
        ("1.5", 1.5),
        ("2e3", 2000.0),
        ("10n", 10),
    ],
    ids=["int", "separator", "hex", "binary", "octal", "float", "exponent", "bigint"],
)
def test_parse_number(text: str, expected: float) -> None:
    assert parse_number(text) == expected


@pytest.mark.parametrize(
    "source",
    ["'open", '"line\nbreak"', "/* never closed", "`tmpl"],
    ids=["string", "newline-in-string", "block-comment", "template"],
)
def test_unterminated_input_raises(source: str) -> None:
    with pytest.raises(TokenizeError) as exc_info:
        tokenize(source)

    assert exc_info.value.pos == 0
