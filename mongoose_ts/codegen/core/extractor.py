"""
Schema declaration extraction.

Locates the first ``const x = new Schema({...});`` statement in a model
file and returns its source span, from the declaring keyword to the
closing parenthesis of the constructor call.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ...logging_config import get_logger
from .tokenizer import OPENERS, CLOSERS, TokenizeError, TokenKind, iter_tokens

logger = get_logger(__name__)


# `export const userSchema: Schema<IUser> = new mongoose.Schema<IUser>(`
# The generic arguments are matched separately because they may nest.
_HEADER_RE = re.compile(
    r"(?:\bexport\s+)?\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)"
    r"(?:\s*:[^=;]+?)?"
    r"\s*=\s*(?:new\s+)?(?:[A-Za-z_$][\w$]*\s*\.\s*)*Schema\b\s*"
)


@dataclass(frozen=True)
class ExtractedDeclaration:
    """Source span of one schema declaration."""

    variable_name: str
    text: str
    start: int
    end: int


def extract_declaration(source: str) -> Optional[ExtractedDeclaration]:
    """
    Find the first schema declaration in a source file.

    Args:
        source: Full text of a model file

    Returns:
        ExtractedDeclaration, or None when the file declares no schema
    """
    for match in _HEADER_RE.finditer(source):
        open_paren = _skip_generic_arguments(source, match.end())
        if open_paren is None or source[open_paren] != "(":
            continue

        end = _find_call_end(source, open_paren)
        if end is None:
            logger.debug(
                "Unbalanced Schema(...) call for '%s' at offset %d",
                match.group("name"),
                match.start(),
            )
            continue

        return ExtractedDeclaration(
            variable_name=match.group("name"),
            text=source[match.start() : end],
            start=match.start(),
            end=end,
        )

    return None


def _skip_generic_arguments(source: str, index: int) -> Optional[int]:
    """Return the index of the first character after `<...>`, if any."""
    if index >= len(source):
        return None
    if source[index] != "<":
        return index

    depth = 0
    for i in range(index, len(source)):
        c = source[i]
        if c == "<":
            depth += 1
        elif c == ">":
            depth -= 1
            if depth == 0:
                rest = i + 1
                while rest < len(source) and source[rest].isspace():
                    rest += 1
                return rest if rest < len(source) else None
        elif c in ";{}":
            return None
    return None


def _find_call_end(source: str, open_paren: int) -> Optional[int]:
    """
    Walk the constructor call from its opening parenthesis.

    The first argument must be an object literal. Returns the offset just
    past the closing ``)`` (and a directly following ``;``), or None when
    the call is unbalanced or does not start with ``{``.
    """
    stack = []
    first = True
    try:
        for token in iter_tokens(source, open_paren):
            if token.kind == TokenKind.EOF:
                return None
            if len(stack) == 1 and first:
                if token.kind != TokenKind.LBRACE:
                    return None
                first = False

            if token.kind in OPENERS:
                stack.append(OPENERS[token.kind])
            elif token.kind in CLOSERS:
                if not stack or stack.pop() != token.kind:
                    return None
                if not stack:
                    return _include_semicolon(source, token.end)
    except TokenizeError as e:
        logger.debug("Tokenizer stopped at offset %d: %s", e.pos, e)
        return None
    return None


def _include_semicolon(source: str, end: int) -> int:
    i = end
    while i < len(source) and source[i] in " \t":
        i += 1
    if i < len(source) and source[i] == ";":
        return i + 1
    return end
