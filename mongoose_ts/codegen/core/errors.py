"""
Error types for schema extraction, normalization and code generation.
"""

from pathlib import Path
from typing import Optional, Union


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class MalformedDeclarationError(GeneratorError):
    """
    Raised when a schema declaration cannot be read as a literal value.

    Carries the offending file and the text that failed, so the failing
    rewrite can be diagnosed by hand.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        text: Optional[str] = None,
        pos: Optional[int] = None,
    ):
        self.message = message
        self.path = str(path) if path is not None else None
        self.text = text
        self.pos = pos
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.path or "<source>"
        if self.pos is not None and self.text is not None:
            line = self.text.count("\n", 0, self.pos) + 1
            col = self.pos - self.text.rfind("\n", 0, self.pos)
            location = f"{location}:{line}:{col}"
        return f"{location}: {self.message}"

    def with_path(self, path: Union[str, Path]) -> "MalformedDeclarationError":
        """Return a copy of this error attributed to ``path``."""
        return type(self)(self.message, path=path, text=self.text, pos=self.pos)


class NormalizationError(MalformedDeclarationError):
    """Raised when declaration text cannot be rewritten into a literal."""

    pass


class LiteralParseError(MalformedDeclarationError):
    """Raised when normalized text is not a valid literal value."""

    pass
