"""
Conversion pipeline for Mongoose model files.

Each file goes through extract -> normalize -> materialize -> convert ->
render. Reference resolution depends on the names of every schema in the
run, so a batch is done in two passes: the first builds a read-only
SchemaNameRegistry from the file names, the second converts the files.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..logging_config import get_logger
from ..utils import SourceLoadError, load_source_file
from .core.config import GeneratorConfig
from .core.errors import MalformedDeclarationError
from .core.extractor import extract_declaration
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.materializer import materialize
from .core.naming import NameSanitizer, NamingCase
from .core.normalizer import normalize_declaration
from .core.schema import FieldTree, SchemaDeclaration, SchemaNameRegistry, schema_base_name
from .registry import get_generator

logger = get_logger(__name__)

PathLike = Union[str, Path]


class ConversionStatus(Enum):
    """Outcome of converting one file."""

    CONVERTED = "converted"
    NO_DECLARATION = "no_declaration"  # Skipped with a warning
    EMPTY = "empty"  # Declaration without convertible fields
    MALFORMED = "malformed"
    UNREADABLE = "unreadable"


# Outcomes the error policy applies to
FAILED_STATUSES = {ConversionStatus.MALFORMED, ConversionStatus.UNREADABLE}


class ErrorPolicy(Enum):
    """What a batch does after a file fails."""

    SKIP = "skip"
    ABORT = "abort"


@dataclass
class ConversionResult:
    """Result of converting one model file."""

    path: str
    status: ConversionStatus
    interface_name: Optional[str] = None
    code: str = ""
    declaration: Optional[SchemaDeclaration] = None
    type_model: Any = None
    warnings: List[str] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def converted(self) -> bool:
        return self.status == ConversionStatus.CONVERTED

    @property
    def failed(self) -> bool:
        return self.status in FAILED_STATUSES

    @property
    def field_tree(self) -> Optional[FieldTree]:
        return self.declaration.field_tree if self.declaration else None

    @property
    def normalized_text(self) -> Optional[str]:
        return self.declaration.normalized_text if self.declaration else None


@dataclass
class BatchResult:
    """Results of a batch run, in processing order."""

    results: List[ConversionResult]
    registry: SchemaNameRegistry
    generation: Optional[GenerationResult] = None
    aborted: bool = False

    @property
    def code(self) -> str:
        """Combined declaration file, empty when aborted or generation failed."""
        if self.generation is None or not self.generation.success:
            return ""
        return self.generation.code

    @property
    def converted(self) -> List[ConversionResult]:
        return [r for r in self.results if r.converted]

    @property
    def failed(self) -> List[ConversionResult]:
        return [r for r in self.results if r.failed]

    @property
    def success(self) -> bool:
        return (
            not self.aborted
            and self.generation is not None
            and self.generation.success
        )

    def counts(self) -> Dict[str, int]:
        """Number of files per status."""
        counts = {status.value: 0 for status in ConversionStatus}
        for result in self.results:
            counts[result.status.value] += 1
        return counts


_base_name_sanitizer = NameSanitizer()


def base_name_for(path: PathLike) -> str:
    """Schema base name of a model file: `blog-post.model.ts` -> `BlogPost`."""
    return _base_name_sanitizer.convert_case(schema_base_name(path), NamingCase.PASCAL_CASE)


def build_name_registry(
    paths: Iterable[PathLike], generator: CodeGenerator
) -> SchemaNameRegistry:
    """
    Collect the schema names of a run (first pass).

    Args:
        paths: Every model file of the run
        generator: Generator that names the output types

    Returns:
        Read-only registry of base name -> interface name
    """
    names: Dict[str, str] = {}
    for path in paths:
        base = base_name_for(path)
        if base in names:
            logger.warning("Schema name '%s' of %s is already taken, ignoring", base, path)
            continue
        names[base] = generator.interface_name(base)

    logger.debug("Registered %d schema name(s)", len(names))
    return SchemaNameRegistry(names)


def convert_declaration(
    source: str,
    path: PathLike,
    registry: SchemaNameRegistry,
    generator: CodeGenerator,
) -> ConversionResult:
    """
    Convert the schema declaration of one model file (second pass).

    Never raises for problems in the input; the outcome is in the result's
    status.

    Args:
        source: Full text of the model file
        path: File path, used for naming and messages
        registry: Completed registry of the run
        generator: Target language generator

    Returns:
        ConversionResult
    """
    path = str(path)

    extracted = extract_declaration(source)
    if extracted is None:
        message = f"Schema definition not found in `{path}`"
        logger.warning("%s", message)
        return ConversionResult(
            path=path, status=ConversionStatus.NO_DECLARATION, warnings=[message]
        )

    declaration = SchemaDeclaration(path=path, source_text=extracted.text)

    try:
        declaration.normalized_text = normalize_declaration(extracted.text)
        declaration.field_tree = materialize(declaration.normalized_text, path)
    except MalformedDeclarationError as e:
        error = e if e.path else e.with_path(path)
        failed_text = declaration.normalized_text or extracted.text
        logger.error("Malformed schema declaration: %s\n%s", error, failed_text)
        return ConversionResult(
            path=path,
            status=ConversionStatus.MALFORMED,
            declaration=declaration,
            error_message=str(error),
        )

    base_name = base_name_for(path)
    interface_name = registry.resolve(base_name) or generator.interface_name(base_name)

    if not len(declaration.field_tree):
        logger.info("Schema in %s has no convertible fields, skipping", path)
        return ConversionResult(
            path=path,
            status=ConversionStatus.EMPTY,
            interface_name=interface_name,
            declaration=declaration,
            warnings=generator.validate_field_tree(interface_name, declaration.field_tree),
        )

    type_model = generator.build_type_model(interface_name, declaration.field_tree, registry)
    warnings = generator.validate_field_tree(interface_name, declaration.field_tree)
    warnings.extend(generator.validate_type_model(type_model))
    for warning in warnings:
        logger.warning("%s: %s", path, warning)

    return ConversionResult(
        path=path,
        status=ConversionStatus.CONVERTED,
        interface_name=interface_name,
        code=generator.generate_single_schema(type_model),
        declaration=declaration,
        type_model=type_model,
        warnings=warnings,
    )


def run_batch(
    files: Iterable[PathLike],
    config: Optional[GeneratorConfig] = None,
    generator: Optional[CodeGenerator] = None,
) -> BatchResult:
    """
    Convert a batch of model files into one combined declaration file.

    Files are processed sequentially in the given order. With the `skip`
    error policy a failed file is reported and the batch continues; with
    `abort` the batch stops at the first failed file and produces no
    combined output.

    Args:
        files: Model files in discovery order
        config: Generator configuration (defaults to TypeScript defaults)
        generator: Generator to use instead of one built from ``config``

    Returns:
        BatchResult
    """
    if generator is None:
        generator = get_generator("typescript", config)
    config = generator.config
    policy = ErrorPolicy(config.on_error)

    paths = [Path(f) for f in files]
    registry = build_name_registry(paths, generator)

    results: List[ConversionResult] = []
    for path in paths:
        try:
            source = load_source_file(path)
        except SourceLoadError as e:
            result = ConversionResult(
                path=str(path), status=ConversionStatus.UNREADABLE, error_message=str(e)
            )
        else:
            result = convert_declaration(source, path, registry, generator)
        results.append(result)

        if result.failed and policy == ErrorPolicy.ABORT:
            logger.error("Aborting batch at %s", path)
            return BatchResult(results=results, registry=registry, aborted=True)

    type_models = [r.type_model for r in results if r.converted]
    generation = generate_code(generator, type_models)

    return BatchResult(results=results, registry=registry, generation=generation)
