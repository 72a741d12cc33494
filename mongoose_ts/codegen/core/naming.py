"""
Naming utilities for safe code generation.

Handles case conversion of schema file names into type names.
"""

import re
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # blog_post
    CAMEL_CASE = "camel"      # blogPost
    PASCAL_CASE = "pascal"    # BlogPost
    KEBAB_CASE = "kebab"      # blog-post


class NameSanitizer:
    """Handles name cleanup and case conversion."""

    def convert_case(self, name: str, target_case: NamingCase) -> str:
        """Clean a name and convert it to a case style."""
        cleaned = self._clean_basic(name)
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(cleaned)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(cleaned)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(cleaned)
        elif target_case == NamingCase.KEBAB_CASE:
            return self._to_snake_case(cleaned).replace('_', '-')
        return cleaned

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        # Dots, spaces and other punctuation separate words
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
        cleaned = cleaned.strip('_-')

        if not cleaned:
            cleaned = "schema"

        return cleaned

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        name = name.replace('-', '_')

        # Insert underscore before uppercase letters
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)

        name = name.lower()
        name = re.sub(r'_+', '_', name)

        return name.strip('_')

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split('_')
        return parts[0] + ''.join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        parts = self._to_snake_case(name).split('_')
        pascal = ''.join(part.capitalize() for part in parts if part)
        # Type names cannot start with a digit
        if pascal[:1].isdigit():
            pascal = f"_{pascal}"
        return pascal
