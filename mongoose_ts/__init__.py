"""Convert Mongoose schema declarations into TypeScript interfaces."""

from .codegen import convert_files, convert_source

__version__ = "0.1.0"

__all__ = ["__version__", "convert_files", "convert_source"]
