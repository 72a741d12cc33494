"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from pathlib import Path

from ...logging_config import get_logger
from .config import GeneratorConfig
from .errors import GeneratorError
from .schema import FieldKind, FieldTree, SchemaNameRegistry
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

__all__ = [
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
]


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        self._template_engine = create_template_engine(template_dir)

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.d.ts')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses may override this to provide their template directory.
        Return None to use the built-in in-memory templates.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def interface_name(self, base_name: str) -> str:
        """
        Name of the type generated for a schema.

        Args:
            base_name: Schema base name derived from its file

        Returns:
            Generated type name
        """
        pass

    @abstractmethod
    def build_type_model(
        self, name: str, tree: FieldTree, registry: SchemaNameRegistry
    ) -> Any:
        """
        Convert a field tree into this language's type model.

        Args:
            name: Generated type name
            tree: Materialized field tree
            registry: Known schema names for reference resolution

        Returns:
            Language-specific type model
        """
        pass

    @abstractmethod
    def generate_single_schema(self, type_model: Any) -> str:
        """
        Generate code for a single type model.

        Args:
            type_model: Model returned by ``build_type_model``

        Returns:
            Generated code for this schema only
        """
        pass

    @abstractmethod
    def generate(self, type_models: List[Any]) -> str:
        """
        Generate a complete file for several type models.

        Args:
            type_models: Models in output order

        Returns:
            Generated code as a string
        """
        pass

    def get_import_statements(self, type_models: List[Any]) -> List[str]:
        """
        Get any required import statements for the generated code.

        Args:
            type_models: All type models being generated

        Returns:
            List of import statements (can be empty)
        """
        return []

    def validate_field_tree(self, name: str, tree: FieldTree) -> List[str]:
        """
        Validate a field tree for basic structural issues.

        Language generators may override this to add language-specific validation.

        Args:
            name: Generated type name
            tree: Field tree to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not len(tree):
            warnings.append(f"Schema '{name}' has no fields")

        for node in tree:
            if node.kind == FieldKind.NESTED and not len(node.child):
                warnings.append(f"Nested field {name}.{node.name} has no fields")

        return warnings

    def validate_type_model(self, type_model: Any) -> List[str]:
        """
        Warnings raised while building a type model.

        Returns:
            List of warning messages (empty if no issues)
        """
        return []

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove trailing whitespace and excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, type_models: List[Any]) -> GenerationResult:
    """
    Generate a combined file using the specified generator with error handling.

    Args:
        generator: Code generator instance
        type_models: Type models to render, in output order

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        code = generator.generate(type_models)

        if generator.config.format_output:
            code = generator.format_code(code)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "schema_count": len(type_models),
            "formatted": generator.config.format_output,
        }

        return GenerationResult(code, metadata=metadata)

    except (GeneratorError, TemplateError) as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
