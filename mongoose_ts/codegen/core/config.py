"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


REF_STYLES = ("interface", "union", "id")
ERROR_POLICIES = ("skip", "abort")
LINE_ENDINGS = ("\n", "\r\n")


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_file: Optional[str] = None

    # Code style settings
    indent_size: int = 2
    use_tabs: bool = False
    line_ending: str = "\n"
    format_output: bool = True

    # Header comments (signature and formatting info)
    add_comments: bool = True

    # Naming settings
    interface_prefix: str = "I"

    # Type handling
    bson_module: str = "bson"
    ref_style: str = "interface"  # interface, union, id
    unresolved_type: str = "unknown"

    # Batch behavior
    on_error: str = "skip"  # skip, abort

    # Diagnostic artifacts
    debug: bool = False
    debug_dir: str = ".mongoose-ts"

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["typescript"] = {
            "indent_size": 2,
            "use_tabs": False,
            "format_output": True,
            "add_comments": True,
            "interface_prefix": "I",
            "bson_module": "bson",
            "ref_style": "interface",
            "unresolved_type": "unknown",
            "on_error": "skip",
            "custom": {},
        }

    def get_config(self, language: str = "typescript",
                   custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        base_config = dict(self._configs.get(language, {}))
        base_config["custom"] = dict(base_config.get("custom", {}))

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        # Extract known fields
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Add custom fields to the custom dict
        if custom_args:
            existing_custom = dict(config_args.get('custom') or {})
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom", {})
        config_dict.update(custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def list_languages(self) -> List[str]:
        """Get list of supported languages."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str = "typescript") -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.ref_style not in REF_STYLES:
            warnings.append(f"Invalid ref_style: {config.ref_style}")

        if config.on_error not in ERROR_POLICIES:
            warnings.append(f"Invalid on_error: {config.on_error}")

        if config.line_ending not in LINE_ENDINGS:
            warnings.append(f"Invalid line_ending: {config.line_ending!r}")

        if not isinstance(config.indent_size, int) or config.indent_size < 0:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if language == "typescript":
            if config.interface_prefix and not config.interface_prefix.isidentifier():
                warnings.append(f"Invalid interface_prefix: {config.interface_prefix}")
            if not config.unresolved_type:
                warnings.append("unresolved_type must not be empty")
            if not config.bson_module:
                warnings.append("bson_module must not be empty")

        return warnings


# Global configuration manager instance
_config_manager = None

def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: str = "typescript",
                custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language

    Raises:
        ConfigError: If the file cannot be read or a value is invalid
    """
    manager = get_config_manager()
    config = manager.get_config(language, custom_config, config_file)

    problems = manager.validate_config(config, language)
    if problems:
        raise ConfigError("; ".join(problems))

    return config


# Example configuration file for reference
EXAMPLE_TYPESCRIPT_CONFIG = {
    "indent_size": 4,
    "interface_prefix": "I",
    "bson_module": "mongodb",
    "ref_style": "union",
    "unresolved_type": "unknown",
    "on_error": "abort",
}
