"""
TypeScript code generator implementation.

Renders schema type models as `export interface` declarations with the
bson import preamble shared by every generated declaration file.
"""

import json
import re
from typing import Dict, List, Optional, Any

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.errors import GeneratorError
from ...core.generator import CodeGenerator
from ...core.naming import NameSanitizer, NamingCase
from ...core.schema import FieldTree, PrimitiveTag, SchemaNameRegistry
from .naming import format_property_name, validate_interface_name
from .types import RefStyle, TSField, TSInterface, TSKind, TSType, TSTypeConfig, TSTypeMapper

logger = get_logger(__name__)


SIGNATURE = "Automatically generated by mongoose-ts\n\nDo not edit by hand, re-run mongoose-ts instead."

_STRING_LITERAL_RE = re.compile(r'"(?:[^"\\]|\\.)*"')


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript interfaces."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize TypeScript generator with configuration."""
        super().__init__(config)

        # Initialize naming
        self.sanitizer = NameSanitizer()

        # Initialize type system
        self.type_config = self._build_type_config()
        self.type_mapper = TSTypeMapper(self.type_config)

    def _build_type_config(self) -> TSTypeConfig:
        """Build TSTypeConfig from generator config."""
        custom = self.config.custom

        try:
            ref_style = RefStyle(self.config.ref_style)
            type_overrides = {
                PrimitiveTag(tag): name
                for tag, name in custom.get("type_overrides", {}).items()
            }
        except ValueError as e:
            raise GeneratorError(f"Invalid TypeScript type configuration: {e}") from e

        return TSTypeConfig(
            string_type=custom.get("string_type", "string"),
            number_type=custom.get("number_type", "number"),
            boolean_type=custom.get("boolean_type", "boolean"),
            date_type=custom.get("date_type", "Date"),
            mixed_type=custom.get("mixed_type", "any"),
            unresolved_type=self.config.unresolved_type,
            ref_style=ref_style,
            type_overrides=type_overrides,
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "typescript"

    @property
    def file_extension(self) -> str:
        """Return TypeScript declaration file extension."""
        return ".d.ts"

    def interface_name(self, base_name: str) -> str:
        """`user` -> `IUser`, `blog-post` -> `IBlogPost`."""
        name = self.config.interface_prefix + self.sanitizer.convert_case(
            base_name, NamingCase.PASCAL_CASE
        )
        for problem in validate_interface_name(name):
            logger.warning("Interface name for '%s': %s", base_name, problem)
        return name

    def build_type_model(
        self, name: str, tree: FieldTree, registry: SchemaNameRegistry
    ) -> TSInterface:
        """Convert a field tree into an interface type model."""
        return self.type_mapper.map_interface(name, tree, registry)

    # -- Rendering --

    def render_type(self, ts_type: TSType) -> str:
        """Render a type expression."""
        kind = ts_type.kind

        if kind in (TSKind.PRIMITIVE, TSKind.NAMED):
            return ts_type.name

        if kind == TSKind.UNRESOLVED:
            name = _comment_text(ts_type.name)
            return f"{self.type_config.unresolved_type} /* unresolved: {name} */"

        if kind == TSKind.ENUM:
            return " | ".join(_render_literal_type(value) for value in ts_type.literals)

        if kind == TSKind.UNION:
            return " | ".join(self.render_type(member) for member in ts_type.members)

        if kind == TSKind.ARRAY:
            element = self.render_type(ts_type.element)
            if _is_union(ts_type.element):
                element = f"({element})"
            return f"{element}[]"

        if kind == TSKind.OBJECT:
            if not ts_type.fields:
                return "{}"
            members = " ".join(self._render_property(f) for f in ts_type.fields)
            return f"{{ {members} }}"

        raise GeneratorError(f"Cannot render type of kind {kind}")

    def _render_property(self, ts_field: TSField) -> str:
        data = self._generate_field_data(ts_field)
        return f"{data['name']}{'?' if data['optional'] else ''}: {data['type']};"

    def _generate_field_data(self, ts_field: TSField) -> Dict[str, Any]:
        """Generate field data for the interface template."""
        return {
            "name": format_property_name(ts_field.name),
            "type": self.render_type(ts_field.type),
            "optional": ts_field.optional,
        }

    def generate_single_schema(self, type_model: TSInterface) -> str:
        """Render one `export interface` declaration."""
        context = {
            "interface_name": type_model.name,
            "fields": [self._generate_field_data(f) for f in type_model.fields],
            "indent": self.config.indent,
        }
        return self.render_template("ts_interface", context)

    def generate(self, type_models: List[TSInterface]) -> str:
        """Render a declaration file: one preamble, then every interface."""
        context = {
            "comments": self.get_header_comments(),
            "imports": self.get_import_statements(type_models),
            "module": self.config.bson_module,
            "interfaces": [self.generate_single_schema(model) for model in type_models],
        }
        return self.render_template("ts_file", context)

    def get_header_comments(self) -> List[str]:
        """Signature and formatting-info comments of the preamble."""
        if not self.config.add_comments:
            return []

        if self.config.format_output:
            options = {"indent": self.config.indent_size, "use_tabs": self.config.use_tabs}
            formatting = f"@mongoose-ts: formatted with options {json.dumps(options)}"
        else:
            formatting = "@mongoose-ts: generated with --no-format flag"

        return [SIGNATURE, formatting]

    def get_import_statements(self, type_models: List[TSInterface]) -> List[str]:
        """
        Names imported from the bson module.

        The preamble always imports both special types, so that every
        generated file has the same header.
        """
        return [
            self.type_mapper.primitive_type(tag).name
            for tag in (PrimitiveTag.OBJECT_ID, PrimitiveTag.DECIMAL128)
        ]

    def validate_type_model(self, type_model: TSInterface) -> List[str]:
        """Warnings raised while mapping a type model."""
        return list(type_model.validation_hints)

    def format_code(self, code: str) -> str:
        """
        Apply TypeScript formatting.

        Re-indents lines by brace depth with the configured indent, strips
        trailing whitespace, keeps at most one blank line in a row and ends
        the file with a newline.
        """
        indent = self.config.indent
        lines = []
        depth = 0

        for line in super().format_code(code).split("\n"):
            stripped = line.strip()
            if not stripped:
                lines.append("")
                continue

            bare = _STRING_LITERAL_RE.sub('""', stripped)
            opens = bare.count("{")
            closes = bare.count("}")

            line_depth = depth - 1 if bare.startswith("}") else depth
            prefix = indent * max(line_depth, 0)
            # JSDoc continuation lines keep their one-space alignment
            if stripped.startswith("*"):
                prefix += " "
            lines.append(prefix + stripped)

            depth = max(depth + opens - closes, 0)

        return "\n".join(lines).strip("\n") + "\n"


def _is_union(ts_type: TSType) -> bool:
    if ts_type.kind == TSKind.ENUM:
        return len(ts_type.literals) > 1
    if ts_type.kind == TSKind.UNION:
        return len(ts_type.members) > 1
    # `unknown /* unresolved: X */` reads better as a whole before `[]`
    return ts_type.kind == TSKind.UNRESOLVED


def _render_literal_type(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return repr(value)


def _comment_text(text: str) -> str:
    """Make source text safe inside a one-line block comment."""
    return " ".join(text.split()).replace("*/", "*\\/")
