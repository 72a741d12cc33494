"""
Core code generation components.

Provides the schema extraction stages, the field tree model and the base
classes and utilities used by all language generators.
"""

from .errors import (
    GeneratorError,
    MalformedDeclarationError,
    NormalizationError,
    LiteralParseError,
)
from .extractor import ExtractedDeclaration, extract_declaration
from .normalizer import normalize_declaration, read_declaration, render_literal
from .materializer import materialize, parse_literal
from .schema import (
    FieldKind,
    FieldNode,
    FieldTree,
    PrimitiveTag,
    SchemaDeclaration,
    SchemaNameRegistry,
    build_field_tree,
)
from .generator import CodeGenerator, GenerationResult, generate_code
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Errors
    "GeneratorError",
    "MalformedDeclarationError",
    "NormalizationError",
    "LiteralParseError",
    # Extraction stages
    "ExtractedDeclaration",
    "extract_declaration",
    "normalize_declaration",
    "read_declaration",
    "render_literal",
    "materialize",
    "parse_literal",
    # Schema system - core data structures
    "FieldKind",
    "FieldNode",
    "FieldTree",
    "PrimitiveTag",
    "SchemaDeclaration",
    "SchemaNameRegistry",
    "build_field_tree",
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
