"""Utility functions for finding, loading and writing model files.

This module provides model file discovery, source loading with proper
error handling, and the output and debug artifact locations used by the CLI.
"""

import json
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)

MODEL_EXTENSIONS = (".js", ".ts", ".mjs", ".cjs")

# Directories never searched for model files
SKIPPED_DIRECTORIES = {"node_modules"}

DEFAULT_OUTPUT_NAME = "index.d.ts"

DEBUG_SUBDIRECTORIES = ("json-raw", "json-clean", "typedefs")


class SourceLoadError(Exception):
    """Custom exception for model file loading errors."""

    pass


def is_model_file(path: Path) -> bool:
    """Whether a path looks like a JS/TS model source file."""
    name = path.name.lower()
    if name.endswith(".d.ts"):
        return False
    return path.suffix.lower() in MODEL_EXTENSIONS


def collect_model_files(source: str | Path) -> list[Path]:
    """Collect model files from a file or a directory tree.

    Directories are searched recursively; ``node_modules``, hidden
    directories and ``.d.ts`` declaration files are skipped. The result is
    sorted so that runs are deterministic.

    Args:
        source: Model file or directory.

    Returns:
        List of model file paths.

    Raises:
        FileNotFoundError: If source doesn't exist.
    """
    source = Path(source)
    logger.debug("Collecting model files from %s", source)

    if not source.exists():
        logger.error("Source not found: %s", source)
        raise FileNotFoundError(f"Source not found: {source}")

    if source.is_file():
        if not is_model_file(source):
            logger.warning("File does not look like a JS/TS model: %s", source)
        return [source]

    files = []
    for path in source.rglob("*"):
        relative_parts = path.relative_to(source).parts
        if any(
            part in SKIPPED_DIRECTORIES or part.startswith(".")
            for part in relative_parts[:-1]
        ):
            continue
        if path.is_file() and is_model_file(path):
            files.append(path)

    files.sort(key=lambda p: p.as_posix())
    logger.info("Found %d model file(s) in %s", len(files), source)
    return files


def load_source_file(file_path: str | Path) -> str:
    """Load the text of a model file.

    Args:
        file_path: Path to the model file.

    Returns:
        File content.

    Raises:
        SourceLoadError: If the file cannot be read or is not UTF-8 text.
    """
    file_path = Path(file_path)
    logger.debug("Reading model file: %s", file_path)

    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.error("File is not UTF-8 text: %s", file_path)
        raise SourceLoadError(f"File is not UTF-8 text: {file_path}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise SourceLoadError(f"Error reading file {file_path}: {e}") from e


def default_output_path(source: str | Path) -> Path:
    """Combined declaration file written next to the models.

    Args:
        source: Model file or directory given on the command line.

    Returns:
        ``<directory>/index.d.ts``
    """
    source = Path(source)
    directory = source.parent if source.is_file() else source
    return directory / DEFAULT_OUTPUT_NAME


def write_text_file(path: str | Path, text: str, line_ending: str = "\n") -> Path:
    """Write generated text, creating parent directories.

    Args:
        path: Destination file.
        text: Content with ``\\n`` line breaks.
        line_ending: Line ending written to disk.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline=line_ending) as f:
        f.write(text)
    logger.debug("Wrote %s", path)
    return path


def write_json_file(path: str | Path, data: Any) -> Path:
    """Write a JSON diagnostic artifact."""
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return write_text_file(path, text)


def prepare_debug_dirs(base_dir: str | Path) -> dict[str, Path]:
    """Create the debug artifact directories.

    Args:
        base_dir: Root debug directory, e.g. ``.mongoose-ts``.

    Returns:
        Mapping of subdirectory name to path.
    """
    base_dir = Path(base_dir)
    dirs = {}
    for name in DEBUG_SUBDIRECTORIES:
        directory = base_dir / name
        directory.mkdir(parents=True, exist_ok=True)
        dirs[name] = directory
    return dirs


def artifact_stem(path: str | Path) -> str:
    """``models/user.model.js`` -> ``user.model``."""
    return Path(path).name.rsplit(".", 1)[0]


def to_clickable_path(path: str | Path) -> str:
    """Absolute ``file://`` URI of a path, for terminal links."""
    return Path(path).resolve().as_uri()
