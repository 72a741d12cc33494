"""Console entry point for mongoose-ts."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from rich.console import Console

from . import __version__
from .cli import CLIHandler
from .codegen.core.config import ERROR_POLICIES, ConfigError, GeneratorConfig, load_config
from .codegen.registry import RegistryError
from .logging_config import get_logger, setup_logging
from .utils import collect_model_files

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mongoose-ts",
        description="Generate TypeScript interfaces from Mongoose schema declarations",
    )

    parser.add_argument(
        "source",
        nargs="?",
        help="Model file or directory containing model files",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    io_group = parser.add_argument_group("input and output")
    io_group.add_argument(
        "-s",
        "--src",
        "--source",
        dest="source_option",
        metavar="PATH",
        help="Model file or directory (alternative to the positional argument)",
    )
    io_group.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: <source directory>/index.d.ts)",
    )
    io_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file"
    )

    gen_group = parser.add_argument_group("generation options")
    gen_group.add_argument(
        "-n",
        "--no-format",
        "--noFormat",
        dest="no_format",
        action="store_true",
        help="Skip the built-in formatting pass",
    )
    gen_group.add_argument(
        "--on-error",
        choices=ERROR_POLICIES,
        help="Skip files that fail to convert, or abort the whole run (default: skip)",
    )
    gen_group.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Write intermediate artifacts to the debug directory",
    )

    log_group = parser.add_argument_group("logging")
    log_group.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Console log level (default: WARNING)",
    )
    log_group.add_argument(
        "--log-file", metavar="FILE", help="Also write full logs to this file"
    )

    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    overrides: dict[str, Any] = {}

    if args.output:
        overrides["output_file"] = args.output

    if args.no_format:
        overrides["format_output"] = False

    if args.debug:
        overrides["debug"] = True

    if args.on_error:
        overrides["on_error"] = args.on_error

    try:
        return load_config(custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def main(argv: list[str] | None = None) -> int:
    """Run the command-line tool.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv[1:]``).

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console()

    setup_logging(args.log_level, args.log_file)

    source = args.source_option or args.source
    if not source:
        parser.print_usage(sys.stderr)
        console.print("[red]✗ Error:[/red] no source given, pass a model file or directory")
        return 1

    try:
        config = _build_config(args)
        files = collect_model_files(source)
        if not files:
            raise CLIError(f"No model files found in {source}")

        handler = CLIHandler(config, console=console)
        return handler.run(files, source)

    except FileNotFoundError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (CLIError, RegistryError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Interrupted[/yellow]")
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
