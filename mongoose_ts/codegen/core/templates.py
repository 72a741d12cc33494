"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, StrictUndefined


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._memory_loader = DictLoader({})
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            # Files in the directory take precedence over in-memory templates
            loader = ChoiceLoader(
                [FileSystemLoader(str(self.template_dir)), self._memory_loader]
            )
        else:
            loader = self._memory_loader

        self._env = Environment(
            loader=loader,
            # Generated TypeScript, never markup
            autoescape=False,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        # Add custom filters for code generation
        self._env.filters["comment"] = self._comment_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {str(e)}") from e

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        self._memory_loader.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return template_name in self._env.list_templates()

    # Template filters for code generation

    def _comment_filter(self, value: str) -> str:
        """Wrap text in a block comment, one line or JSDoc style."""
        lines = str(value).split("\n")
        if len(lines) == 1:
            return f"/** {lines[0]} */"
        body = "\n".join(f" * {line}".rstrip() for line in lines)
        return f"/**\n{body}\n */"


# Built-in templates for TypeScript output
TS_INTERFACE_TEMPLATE = """\
export interface {{ interface_name }} {
{%- for field in fields %}
{{ indent }}{{ field.name }}{% if field.optional %}?{% endif %}: {{ field.type }};
{%- endfor %}
}"""

# Header comments, the import line, then each interface after a blank line
TS_FILE_TEMPLATE = (
    "{% for comment in comments %}{{ comment | comment }}\n\n{% endfor %}"
    '{% if imports %}import { {{ imports | join(", ") }} } from "{{ module }}";\n{% endif %}'
    "{% for interface in interfaces %}\n{{ interface }}\n{% endfor %}"
)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """
    Create a template engine with the built-in templates registered.

    Args:
        template_dir: Optional directory of template files

    Returns:
        TemplateEngine instance
    """
    engine = TemplateEngine(template_dir)
    engine.add_template("ts_interface", TS_INTERFACE_TEMPLATE)
    engine.add_template("ts_file", TS_FILE_TEMPLATE)
    return engine
