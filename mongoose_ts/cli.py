from __future__ import annotations

from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .codegen.core.config import GeneratorConfig
from .codegen.core.generator import CodeGenerator
from .codegen.pipeline import BatchResult, ConversionResult, ConversionStatus, run_batch
from .codegen.registry import get_generator
from .logging_config import get_logger
from .utils import (
    artifact_stem,
    default_output_path,
    prepare_debug_dirs,
    to_clickable_path,
    write_json_file,
    write_text_file,
)

logger = get_logger(__name__)

_STATUS_STYLES = {
    ConversionStatus.CONVERTED: "green",
    ConversionStatus.NO_DECLARATION: "yellow",
    ConversionStatus.EMPTY: "yellow",
    ConversionStatus.MALFORMED: "red",
    ConversionStatus.UNREADABLE: "red",
}


class CLIHandler:
    """Handle command-line operations for converting model files."""

    def __init__(self, config: GeneratorConfig, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            config: Merged generator configuration.
            console: Console for reports (stdout by default).
        """
        self.config = config
        self.console = console or Console()
        self.generator: CodeGenerator = get_generator("typescript", config)
        logger.debug("CLIHandler initialized")

    def run(self, files: list[Path], source: str | Path) -> int:
        """Convert model files and write the combined declaration file.

        Args:
            files: Model files in discovery order.
            source: File or directory given on the command line.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        self.console.print(f"📄 Converting {len(files)} model file(s) from {escape(str(source))}")
        logger.info("Starting batch of %d file(s)", len(files))

        batch = run_batch(files, generator=self.generator)

        for result in batch.results:
            self._report_result(result)

        if self.config.debug:
            self._write_debug_artifacts(batch)

        self._print_summary(batch)

        if batch.aborted:
            failed = batch.failed[-1]
            self.console.print(
                f"[red]✗ Aborted:[/red] {escape(failed.path)} could not be converted, "
                "no output written"
            )
            return 1

        if not batch.success:
            message = batch.generation.error_message if batch.generation else "unknown error"
            self.console.print(f"[red]✗ Code generation failed:[/red] {escape(str(message))}")
            return 1

        output_path = Path(self.config.output_file or default_output_path(source))
        try:
            write_text_file(output_path, batch.code, self.config.line_ending)
        except OSError as e:
            self.console.print(
                f"[red]✗ Failed to write to {escape(str(output_path))}:[/red] {escape(str(e))}"
            )
            return 1

        link = to_clickable_path(output_path)
        self.console.print(
            f"[green]✓[/green] Type definitions written to "
            f"[link={link}][cyan]{escape(str(output_path))}[/cyan][/link]"
        )

        return 1 if batch.failed else 0

    def _report_result(self, result: ConversionResult) -> None:
        """Print warnings and errors for one file."""
        if result.status == ConversionStatus.MALFORMED:
            self.console.print(f"[red]✗ Error:[/red] {escape(result.error_message or '')}")
            failed_text = result.normalized_text or (
                result.declaration.source_text if result.declaration else ""
            )
            if failed_text:
                self.console.print(
                    Panel(
                        Syntax(failed_text, "javascript", theme="monokai", word_wrap=True),
                        title="Failed declaration",
                        border_style="red",
                    )
                )
            return

        if result.status == ConversionStatus.UNREADABLE:
            self.console.print(f"[red]✗ Error:[/red] {escape(result.error_message or '')}")
            return

        for warning in result.warnings:
            self.console.print(f"[yellow]⚠️  {escape(warning)}[/yellow]")

    def _print_summary(self, batch: BatchResult) -> None:
        table = Table(
            title="📊 Conversion Summary",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("File", style="bold")
        table.add_column("Status")
        table.add_column("Interface", style="green")

        for result in batch.results:
            style = _STATUS_STYLES[result.status]
            table.add_row(
                escape(result.path),
                f"[{style}]{result.status.value}[/{style}]",
                result.interface_name or "-",
            )

        self.console.print()
        self.console.print(table)

        counts = batch.counts()
        self.console.print(
            f"Converted {counts['converted']} of {len(batch.results)} file(s), "
            f"{len(batch.failed)} failed"
        )

    def _write_debug_artifacts(self, batch: BatchResult) -> None:
        """Write per-file diagnostic artifacts into the debug directory."""
        dirs = prepare_debug_dirs(self.config.debug_dir)

        for result in batch.results:
            stem = artifact_stem(result.path)

            if result.field_tree is not None:
                write_json_file(
                    dirs["json-raw"] / f"{stem}.raw.json", result.field_tree.to_dict()
                )

            if not result.converted:
                continue

            write_json_file(
                dirs["json-clean"] / f"{stem}.clean.json", result.type_model.to_dict()
            )

            code = self.generator.generate([result.type_model])
            if self.config.format_output:
                code = self.generator.format_code(code)
            write_text_file(
                dirs["typedefs"] / f"{stem}{self.generator.file_extension}",
                code,
                self.config.line_ending,
            )

        logger.info("Debug artifacts written to %s", self.config.debug_dir)
        self.console.print(f"[dim]Debug artifacts written to {escape(self.config.debug_dir)}[/dim]")
