"""
Tokenizer for JavaScript/TypeScript schema source.

Produces just enough token structure to walk object literals, array
literals and the surrounding constructor call of a schema declaration.
It is deliberately lenient: unknown punctuation becomes an OPERATOR token,
so expressions we never interpret (arrow functions, regex literals, calls)
can still be skipped as balanced token runs.
"""

import re
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union


class TokenKind(Enum):
    """Token categories."""

    IDENT = "ident"
    STRING = "string"
    TEMPLATE = "template"
    NUMBER = "number"
    REGEX = "regex"

    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    COLON = ":"
    SEMICOLON = ";"
    DOT = "."

    # Everything else: = => < > ! && || ? + - * etc.
    OPERATOR = "operator"

    EOF = "eof"


OPENERS = {
    TokenKind.LBRACE: TokenKind.RBRACE,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LPAREN: TokenKind.RPAREN,
}
CLOSERS = set(OPENERS.values())


class Token:
    """A single token with its source span."""

    __slots__ = ("kind", "value", "pos", "end")

    def __init__(self, kind: TokenKind, value: str, pos: int, end: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos
        self.end = end

    def is_op(self, value: str) -> bool:
        return self.kind == TokenKind.OPERATOR and self.value == value

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.value!r}, pos={self.pos})"


class TokenizeError(ValueError):
    """Raised when source text cannot be split into tokens."""

    def __init__(self, message: str, pos: int) -> None:
        super().__init__(message)
        self.pos = pos


_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?n?"
)

_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
}

# Longest first so that "===" wins over "==" and "=".
_OPERATORS = sorted(
    [
        "...", "===", "!==", "**=", "<<=", ">>=", ">>>",
        "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.",
        "++", "--", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "**",
        "<<", ">>",
    ],
    key=len,
    reverse=True,
)

# After these tokens a "/" starts a regex literal rather than a division.
_REGEX_PRECEDERS = {
    TokenKind.LBRACE,
    TokenKind.LBRACKET,
    TokenKind.LPAREN,
    TokenKind.COMMA,
    TokenKind.COLON,
    TokenKind.SEMICOLON,
    TokenKind.OPERATOR,
}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def tokenize(source: str) -> List[Token]:
    """
    Split source text into tokens.

    Whitespace and comments are dropped. The returned list always ends
    with an EOF token.

    Args:
        source: JavaScript/TypeScript text

    Returns:
        List of tokens

    Raises:
        TokenizeError: On unterminated strings, comments or regex literals
    """
    return list(iter_tokens(source))


def iter_tokens(source: str, start: int = 0) -> Iterator[Token]:
    """Lazily tokenize ``source`` from offset ``start``, ending with EOF."""
    last: Optional[Token] = None
    i = start
    n = len(source)

    while i < n:
        c = source[i]

        if c.isspace():
            i += 1
            continue

        # Comments
        if source.startswith("//", i):
            newline = source.find("\n", i)
            i = n if newline == -1 else newline + 1
            continue
        if source.startswith("/*", i):
            close = source.find("*/", i + 2)
            if close == -1:
                raise TokenizeError("Unterminated block comment", i)
            i = close + 2
            continue

        if c in ('"', "'"):
            value, end = _read_string(source, i)
            last = Token(TokenKind.STRING, value, i, end)
            yield last
            i = end
            continue

        if c == "`":
            value, end = _read_template(source, i)
            last = Token(TokenKind.TEMPLATE, value, i, end)
            yield last
            i = end
            continue

        if c == "/" and _regex_allowed(last):
            end = _read_regex(source, i)
            last = Token(TokenKind.REGEX, source[i:end], i, end)
            yield last
            i = end
            continue

        if c.isdigit() or (c == "." and i + 1 < n and source[i + 1].isdigit()):
            m = _NUMBER_RE.match(source, i)
            if m:
                last = Token(TokenKind.NUMBER, m.group(0), i, m.end())
                yield last
                i = m.end()
                continue

        m = _IDENT_RE.match(source, i)
        if m:
            last = Token(TokenKind.IDENT, m.group(0), i, m.end())
            yield last
            i = m.end()
            continue

        if c in _PUNCTUATION:
            last = Token(_PUNCTUATION[c], c, i, i + 1)
            yield last
            i += 1
            continue

        op = next((o for o in _OPERATORS if source.startswith(o, i)), None)
        if op is not None:
            last = Token(TokenKind.OPERATOR, op, i, i + len(op))
            yield last
            i += len(op)
            continue

        if c == ".":
            last = Token(TokenKind.DOT, c, i, i + 1)
            yield last
        else:
            last = Token(TokenKind.OPERATOR, c, i, i + 1)
            yield last
        i += 1

    yield Token(TokenKind.EOF, "", n, n)


def _regex_allowed(last: Optional[Token]) -> bool:
    if last is None:
        return True
    if last.kind == TokenKind.OPERATOR:
        # `a++ / b` and `a-- / b` are divisions
        return last.value not in ("++", "--")
    return last.kind in _REGEX_PRECEDERS


def _read_string(source: str, start: int) -> Tuple[str, int]:
    quote = source[start]
    i = start + 1
    n = len(source)
    chars: List[str] = []

    while i < n:
        c = source[i]
        if c == quote:
            return "".join(chars), i + 1
        if c == "\n":
            break
        if c == "\\":
            if i + 1 >= n:
                break
            esc = source[i + 1]
            if esc == "u" and source.startswith("{", i + 2):
                close = source.find("}", i + 3)
                if close == -1:
                    break
                chars.append(_hex_char(source[i + 3 : close], i))
                i = close + 1
                continue
            if esc == "u" and i + 6 <= n:
                chars.append(_hex_char(source[i + 2 : i + 6], i))
                i += 6
                continue
            if esc == "x" and i + 4 <= n:
                chars.append(_hex_char(source[i + 2 : i + 4], i))
                i += 4
                continue
            if esc == "\n":
                # Line continuation
                i += 2
                continue
            chars.append(_ESCAPES.get(esc, esc))
            i += 2
            continue
        chars.append(c)
        i += 1

    raise TokenizeError("Unterminated string literal", start)


def _hex_char(digits: str, pos: int) -> str:
    try:
        return chr(int(digits, 16))
    except ValueError:
        raise TokenizeError(f"Invalid escape sequence: {digits!r}", pos) from None


def _read_template(source: str, start: int) -> Tuple[str, int]:
    # Template literals are kept raw; `${...}` may nest braces and strings.
    i = start + 1
    n = len(source)
    while i < n:
        c = source[i]
        if c == "\\":
            i += 2
            continue
        if c == "`":
            return source[start + 1 : i], i + 1
        if source.startswith("${", i):
            i = _skip_balanced_braces(source, i + 1)
            continue
        i += 1
    raise TokenizeError("Unterminated template literal", start)


def _skip_balanced_braces(source: str, start: int) -> int:
    depth = 0
    i = start
    n = len(source)
    while i < n:
        c = source[i]
        if c in ('"', "'"):
            _, i = _read_string(source, i)
            continue
        if c == "`":
            _, i = _read_template(source, i)
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise TokenizeError("Unterminated template expression", start)


def _read_regex(source: str, start: int) -> int:
    i = start + 1
    n = len(source)
    in_class = False
    while i < n:
        c = source[i]
        if c == "\n":
            break
        if c == "\\":
            i += 2
            continue
        if c == "[":
            in_class = True
        elif c == "]":
            in_class = False
        elif c == "/" and not in_class:
            i += 1
            while i < n and (source[i].isalnum() or source[i] == "_"):
                i += 1
            return i
        i += 1
    raise TokenizeError("Unterminated regular expression literal", start)


def parse_number(text: str) -> Union[int, float]:
    """Convert a NUMBER token's text to a Python int or float."""
    text = text.replace("_", "").rstrip("n")
    prefix = text[:2].lower()
    if prefix == "0x":
        return int(text[2:], 16)
    if prefix == "0b":
        return int(text[2:], 2)
    if prefix == "0o":
        return int(text[2:], 8)
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)
