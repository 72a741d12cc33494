"""
Normalization of schema declarations into plain object-literal text.

The declaration text is tokenized and read by a small recursive-descent
reader instead of being rewritten with regular expressions. Reading applies
these steps in order:

1. the ``x = new Schema<...>(`` header is dropped,
2. generic annotations on the constructor are skipped,
3. a second constructor argument (the schema options) is discarded,
4. only the first argument's object literal is emitted,
5. type tokens in value position are quoted: ``Date.now()`` stays an opaque
   string, builtin types become tags (``Number`` -> ``"number"``,
   ``[Date]`` -> ``["Date"]``), ``""`` and ``String`` become ``"string"``
   and any other capitalized identifier becomes a quoted name.

Nothing is evaluated: expressions that are not literals (functions, calls,
regex literals, variables) are kept as opaque strings holding their source
text. The output is accepted by ``materializer.parse_literal`` and
normalizing it again yields the same text.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .errors import NormalizationError
from .schema import is_options_object
from .tokenizer import (
    Token,
    TokenizeError,
    TokenKind,
    OPENERS,
    CLOSERS,
    parse_number,
    tokenize,
)

logger = get_logger(__name__)


# Builtin type names (last segment of a dotted path) -> normalized tag
TYPE_TOKENS = {
    "String": "string",
    "Number": "number",
    "Boolean": "boolean",
    "Date": "Date",
    "ObjectId": "ObjectId",
    "Decimal128": "Decimal128",
    "Mixed": "Mixed",
}

# Keys of a field-options object whose value is itself a type
TYPE_OPTION_KEYS = {"type", "of"}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

_LITERAL_IDENTS = {"true": True, "false": False, "null": None, "undefined": None}

# Value terminators at nesting depth zero
_DELIMITERS = {TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.EOF} | CLOSERS


@dataclass(frozen=True)
class _Bare:
    """A bare identifier path read in value position, not yet quoted."""

    path: str

    @property
    def last_segment(self) -> str:
        return self.path.rsplit(".", 1)[-1]


class _Reader:
    """Recursive-descent reader over a token list."""

    def __init__(self, source: str, tokens: List[Token]):
        self.source = source
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self.error(f"Expected '{kind.value}', got {tok.value or tok.kind.value!r}")
        return self.advance()

    def error(self, message: str, token: Optional[Token] = None) -> NormalizationError:
        token = token or self.current
        return NormalizationError(message, text=self.source, pos=token.pos)

    # -- Declaration header --

    def find_schema_object(self) -> None:
        """Position the reader on the first argument of the Schema call."""
        if self.current.kind == TokenKind.LBRACE:
            return

        while self.current.kind != TokenKind.EOF:
            if self.current.kind == TokenKind.IDENT and self.current.value == "Schema":
                self.advance()
                self.skip_generic_arguments()
                if self.current.kind == TokenKind.LPAREN:
                    self.advance()
                    if self.current.kind == TokenKind.LBRACE:
                        return
                continue
            self.advance()

        raise self.error("No Schema({...}) object literal found")

    def skip_generic_arguments(self) -> None:
        if not self.current.is_op("<"):
            return
        depth = 0
        while self.current.kind != TokenKind.EOF:
            tok = self.advance()
            if tok.kind != TokenKind.OPERATOR:
                continue
            # `>>` and `>>>` close several nested generics at once
            depth += tok.value.count("<") - tok.value.count(">")
            if depth <= 0:
                return
        raise self.error("Unterminated generic argument list")

    # -- Values --

    def read_value(self) -> Any:
        start = self.pos
        tok = self.current

        if tok.kind == TokenKind.LBRACE:
            value = self.read_object()
        elif tok.kind == TokenKind.LBRACKET:
            value = self.read_array()
        elif tok.kind == TokenKind.STRING:
            self.advance()
            value = tok.value
        elif tok.kind == TokenKind.NUMBER:
            self.advance()
            value = parse_number(tok.value)
        elif tok.is_op("-") and self.peek().kind == TokenKind.NUMBER:
            self.advance()
            value = -parse_number(self.advance().value)
        elif tok.kind == TokenKind.IDENT and tok.value == "new" and self._at_nested_schema():
            value = self.read_nested_schema()
        elif tok.kind == TokenKind.IDENT:
            return self.read_identifier_value()
        else:
            return self.read_opaque(start)

        return self.finish_value(start, value)

    def finish_value(self, start: int, value: Any) -> Any:
        """Accept TS assertions after a literal; anything else makes it opaque."""
        if self.current.kind in _DELIMITERS:
            return value
        if self.current.kind == TokenKind.IDENT and self.current.value in ("as", "satisfies"):
            self.skip_to_delimiter()
            return value
        if self.current.is_op("!") and self.peek().kind in _DELIMITERS:
            self.advance()
            return value
        return self.read_opaque(start)

    def read_identifier_value(self) -> Any:
        start = self.pos
        parts = [self.advance().value]
        while self.current.kind == TokenKind.DOT and self.peek().kind == TokenKind.IDENT:
            self.advance()
            parts.append(self.advance().value)

        if self.current.kind not in _DELIMITERS:
            # Calls, arrow functions, `Date.now()`, binary expressions...
            return self.read_opaque(start)

        path = ".".join(parts)
        if path in _LITERAL_IDENTS:
            return _LITERAL_IDENTS[path]
        return _Bare(path)

    def read_opaque(self, start: int) -> str:
        """Consume an uninterpreted expression and return its source text."""
        self.pos = start
        first = self.current
        end = self.skip_to_delimiter()
        if end is None:
            raise self.error("Expected a value", first)
        return self.source[first.pos : end.end]

    def skip_to_delimiter(self) -> Optional[Token]:
        """Skip balanced tokens up to a depth-zero delimiter; return the last one."""
        last = None
        depth = 0
        while True:
            tok = self.current
            if tok.kind == TokenKind.EOF:
                if depth:
                    raise self.error("Unbalanced brackets in expression", tok)
                return last
            if depth == 0 and tok.kind in _DELIMITERS:
                return last
            if tok.kind in OPENERS:
                depth += 1
            elif tok.kind in CLOSERS:
                depth -= 1
            last = self.advance()

    def read_object(self) -> Dict[str, Any]:
        self.expect(TokenKind.LBRACE)
        result: Dict[str, Any] = {}

        while self.current.kind != TokenKind.RBRACE:
            tok = self.current

            if tok.is_op("..."):
                self.advance()
                spread = self.read_opaque(self.pos)
                logger.warning("Ignoring object spread '...%s' in schema declaration", spread)
            elif tok.kind == TokenKind.LBRACKET:
                # Computed keys cannot be resolved without evaluation
                end = self._find_closer()
                self.pos = end + 1
                self.expect(TokenKind.COLON)
                self.read_value()
                logger.warning("Ignoring computed key %s", self.source[tok.pos : self.tokens[end].end])
            elif tok.kind in (TokenKind.IDENT, TokenKind.STRING, TokenKind.NUMBER):
                key = tok.value
                self.advance()
                if self.current.kind == TokenKind.COLON:
                    self.advance()
                    result.pop(key, None)
                    result[key] = self.read_value()
                elif self.current.kind == TokenKind.LPAREN:
                    # Method shorthand: `get(v) { ... }`
                    self.pos = self._find_closer() + 1
                    if self.current.kind == TokenKind.LBRACE:
                        self.pos = self._find_closer() + 1
                    logger.debug("Skipping method '%s' in schema declaration", key)
                elif tok.kind == TokenKind.IDENT and self.current.kind in _DELIMITERS:
                    # Shorthand property: `{ name }`
                    result.pop(key, None)
                    result[key] = _Bare(key)
                else:
                    raise self.error(f"Expected ':' after key '{key}'")
            else:
                raise self.error(f"Unexpected token {tok.value or tok.kind.value!r} in object literal")

            if self.current.kind == TokenKind.COMMA:
                self.advance()
            elif self.current.kind != TokenKind.RBRACE:
                raise self.error("Expected ',' or '}' in object literal")

        self.expect(TokenKind.RBRACE)
        return result

    def read_array(self) -> List[Any]:
        self.expect(TokenKind.LBRACKET)
        items: List[Any] = []

        while self.current.kind != TokenKind.RBRACKET:
            if self.current.kind == TokenKind.COMMA:
                # Elision: `[, a]`
                self.advance()
                continue
            items.append(self.read_value())
            if self.current.kind == TokenKind.COMMA:
                self.advance()
            elif self.current.kind != TokenKind.RBRACKET:
                raise self.error("Expected ',' or ']' in array literal")

        self.expect(TokenKind.RBRACKET)
        return items

    def _at_nested_schema(self) -> bool:
        """True for `new Schema(` / `new mongoose.Schema<T>(` in value position."""
        i = self.pos + 1
        last_ident = None
        while self.tokens[i].kind == TokenKind.IDENT:
            last_ident = self.tokens[i].value
            if self.tokens[i + 1].kind != TokenKind.DOT:
                break
            i += 2
        return last_ident == "Schema"

    def read_nested_schema(self) -> Any:
        start = self.current
        self.find_schema_object()
        value = self.read_object()
        # Discard the nested schema's options and the closing parenthesis
        if self.current.kind == TokenKind.COMMA:
            self.advance()
            self.skip_to_delimiter()
        if self.current.kind != TokenKind.RPAREN:
            raise self.error("Expected ')' after nested Schema({...})", start)
        self.advance()
        return value

    def _find_closer(self) -> int:
        depth = 0
        for i in range(self.pos, len(self.tokens)):
            kind = self.tokens[i].kind
            if kind in OPENERS:
                depth += 1
            elif kind in CLOSERS:
                depth -= 1
                if depth == 0:
                    return i
        raise self.error("Unbalanced brackets")


def read_declaration(text: str) -> Dict[str, Any]:
    """
    Read a schema declaration into a plain value with type tokens quoted.

    Args:
        text: Extracted declaration, or an already normalized object literal

    Returns:
        Dict of field name to normalized value

    Raises:
        NormalizationError: If the text holds no readable object literal
    """
    try:
        tokens = tokenize(text)
    except TokenizeError as e:
        raise NormalizationError(str(e), text=text, pos=e.pos) from e

    reader = _Reader(text, tokens)
    reader.find_schema_object()
    raw = reader.read_object()

    # A second argument (schema options) and the closing `)` are ignored
    if reader.current.kind == TokenKind.COMMA:
        logger.debug("Discarding schema options argument")

    return _quote_fields(raw)


def normalize_declaration(text: str) -> str:
    """
    Normalize a schema declaration into canonical object-literal text.

    Args:
        text: Extracted declaration text

    Returns:
        Object literal text with unquoted identifier keys and quoted types

    Raises:
        NormalizationError: If the text holds no readable object literal
    """
    return render_literal(read_declaration(text))


# -- Quoting --


def _quote_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Quote every value of a field tree object (all values are types)."""
    return {key: _quote_type(value) for key, value in fields.items()}


def _quote_type(value: Any) -> Any:
    """Quote a value that sits in a type position."""
    if isinstance(value, _Bare):
        tag = TYPE_TOKENS.get(value.last_segment)
        return tag if tag is not None else value.path
    if isinstance(value, str):
        if value == "":
            return "string"
        return TYPE_TOKENS.get(value, value)
    if isinstance(value, list):
        return [_quote_type(item) for item in value]
    if isinstance(value, dict):
        if is_options_object(value):
            return {
                key: _quote_type(item) if key in TYPE_OPTION_KEYS else _quote_option(item)
                for key, item in value.items()
            }
        return _quote_fields(value)
    return value


def _quote_option(value: Any) -> Any:
    """Quote a value that is a schema-type option (default, enum, ref, ...)."""
    if isinstance(value, _Bare):
        return value.path
    if isinstance(value, list):
        return [_quote_option(item) for item in value]
    if isinstance(value, dict):
        return {key: _quote_option(item) for key, item in value.items()}
    return value


# -- Rendering --


def render_literal(value: Any) -> str:
    """Render a plain value as canonical object-literal text."""
    if isinstance(value, dict):
        if not value:
            return "{}"
        entries = ", ".join(f"{_render_key(k)}: {render_literal(v)}" for k, v in value.items())
        return "{ " + entries + " }"
    if isinstance(value, list):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(str(value), ensure_ascii=False)


def _render_key(key: str) -> str:
    if _IDENTIFIER_RE.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)
