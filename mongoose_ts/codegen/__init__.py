"""
Mongoose schema code generation module.

Converts Mongoose schema declarations into TypeScript interfaces.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .registry import GeneratorRegistry, get_generator, list_supported_languages
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.schema import FieldTree, SchemaNameRegistry
from .core.config import GeneratorConfig, ConfigManager, load_config
from .pipeline import (
    BatchResult,
    ConversionResult,
    ConversionStatus,
    ErrorPolicy,
    build_name_registry,
    convert_declaration,
    run_batch,
)


# Convenience functions
def convert_source(
    source: str,
    path: Union[str, Path] = "schema.js",
    registry: Optional[SchemaNameRegistry] = None,
    config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None,
) -> ConversionResult:
    """
    Convert the schema declaration of a single source text.

    Args:
        source: Model file text
        path: File name the schema is named after
        registry: Known schema names; defaults to just this file's schema
        config: Generator configuration or overrides

    Returns:
        ConversionResult with the rendered interface
    """
    generator = get_generator("typescript", config)
    if registry is None:
        registry = build_name_registry([path], generator)
    return convert_declaration(source, path, registry, generator)


def convert_files(
    files: Iterable[Union[str, Path]],
    config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None,
) -> BatchResult:
    """
    Convert model files into one combined declaration file.

    Args:
        files: Model file paths
        config: Generator configuration or overrides

    Returns:
        BatchResult with per-file results and the combined code
    """
    return run_batch(files, generator=get_generator("typescript", config))


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "CodeGenerator",
    "GenerationResult",
    "FieldTree",
    "SchemaNameRegistry",
    "GeneratorConfig",
    "ConfigManager",
    "BatchResult",
    "ConversionResult",
    "ConversionStatus",
    "ErrorPolicy",
    "build_name_registry",
    "convert_declaration",
    "run_batch",
    "convert_source",
    "convert_files",
    "generate_code",
    "get_generator",
    "list_supported_languages",
    "load_config",
]
