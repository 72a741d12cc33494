"""
TypeScript code generator module.

Generates TypeScript interfaces from materialized Mongoose schema declarations.
"""

from typing import Any, Dict, Optional

from ...core.config import load_config
from .generator import TypeScriptGenerator
from .naming import format_property_name
from .types import (
    RefStyle,
    TSField,
    TSInterface,
    TSKind,
    TSType,
    TSTypeConfig,
    TSTypeMapper,
)

__all__ = [
    "TypeScriptGenerator",
    "TSType",
    "TSField",
    "TSInterface",
    "TSKind",
    "TSTypeConfig",
    "TSTypeMapper",
    "RefStyle",
    "format_property_name",
    "create_typescript_generator",
]


def create_typescript_generator(config: Optional[Dict[str, Any]] = None) -> TypeScriptGenerator:
    """
    Create a TypeScript generator from default configuration.

    Args:
        config: Overrides merged over the TypeScript defaults

    Returns:
        Configured TypeScriptGenerator instance
    """
    return TypeScriptGenerator(load_config("typescript", custom_config=config))
