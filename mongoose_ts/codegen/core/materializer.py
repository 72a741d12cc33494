"""
Structural materialization of normalized declarations.

Parses normalized object-literal text with a closed grammar (objects,
arrays, strings, numbers, true/false/null) and turns the result into a
FieldTree. The text is never executed.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .errors import LiteralParseError
from .schema import FieldTree, build_field_tree
from .tokenizer import Token, TokenizeError, TokenKind, parse_number, tokenize

logger = get_logger(__name__)


_KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}


class _LiteralParser:
    """Recursive-descent parser for literal values."""

    def __init__(self, text: str, tokens: List[Token]):
        self.text = text
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind) -> Token:
        if self.current.kind != kind:
            raise self.error(f"Expected '{kind.value}'")
        return self.advance()

    def error(self, message: str) -> LiteralParseError:
        tok = self.current
        found = "end of input" if tok.kind == TokenKind.EOF else repr(tok.value)
        return LiteralParseError(f"{message}, found {found}", text=self.text, pos=tok.pos)

    def parse(self) -> Any:
        value = self.parse_value()
        if self.current.kind == TokenKind.SEMICOLON:
            self.advance()
        if self.current.kind != TokenKind.EOF:
            raise self.error("Unexpected trailing content")
        return value

    def parse_value(self) -> Any:
        tok = self.current

        if tok.kind == TokenKind.LBRACE:
            return self.parse_object()
        if tok.kind == TokenKind.LBRACKET:
            return self.parse_array()
        if tok.kind == TokenKind.STRING:
            return self.advance().value
        if tok.kind == TokenKind.NUMBER:
            return parse_number(self.advance().value)
        if tok.is_op("-"):
            self.advance()
            if self.current.kind != TokenKind.NUMBER:
                raise self.error("Expected a number after '-'")
            return -parse_number(self.advance().value)
        if tok.kind == TokenKind.IDENT and tok.value in _KEYWORDS:
            self.advance()
            return _KEYWORDS[tok.value]

        raise self.error("Expected a literal value")

    def parse_object(self) -> Dict[str, Any]:
        self.expect(TokenKind.LBRACE)
        result: Dict[str, Any] = {}

        while self.current.kind != TokenKind.RBRACE:
            tok = self.current
            if tok.kind not in (TokenKind.IDENT, TokenKind.STRING, TokenKind.NUMBER):
                raise self.error("Expected a property name")
            self.advance()
            self.expect(TokenKind.COLON)
            # Last declaration of a key wins, in its own position
            result.pop(tok.value, None)
            result[tok.value] = self.parse_value()

            if self.current.kind == TokenKind.COMMA:
                self.advance()
            elif self.current.kind != TokenKind.RBRACE:
                raise self.error("Expected ',' or '}'")

        self.expect(TokenKind.RBRACE)
        return result

    def parse_array(self) -> List[Any]:
        self.expect(TokenKind.LBRACKET)
        items: List[Any] = []

        while self.current.kind != TokenKind.RBRACKET:
            items.append(self.parse_value())
            if self.current.kind == TokenKind.COMMA:
                self.advance()
            elif self.current.kind != TokenKind.RBRACKET:
                raise self.error("Expected ',' or ']'")

        self.expect(TokenKind.RBRACKET)
        return items


def parse_literal(text: str) -> Any:
    """
    Parse literal text into plain Python values.

    Accepts JSON plus unquoted identifier keys, single-quoted strings,
    trailing commas, comments and ``undefined``.

    Args:
        text: Literal text

    Returns:
        dict, list, str, int, float, bool or None

    Raises:
        LiteralParseError: If the text is not a literal value
    """
    try:
        tokens = tokenize(text)
    except TokenizeError as e:
        raise LiteralParseError(str(e), text=text, pos=e.pos) from e
    return _LiteralParser(text, tokens).parse()


def materialize(text: str, path: Optional[Union[str, Path]] = None) -> FieldTree:
    """
    Materialize normalized declaration text into a FieldTree.

    Args:
        text: Output of ``normalize_declaration``
        path: Source file, used in error messages

    Returns:
        FieldTree of the declaration

    Raises:
        LiteralParseError: If the text is not an object literal
    """
    try:
        value = parse_literal(text)
    except LiteralParseError as e:
        if path is None:
            raise
        raise e.with_path(path) from e

    if not isinstance(value, dict):
        raise LiteralParseError(
            "Schema definition is not an object literal", path=path, text=text, pos=0
        )

    tree = build_field_tree(value)
    logger.debug("Materialized %d field(s) from %s", len(tree), path or "<source>")
    return tree
