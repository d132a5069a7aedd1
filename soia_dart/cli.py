"""
Command-line interface for the soia Dart code generator.

Reads the resolved schema document produced by the soia compiler and
writes one Dart file per module.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen import (
    GeneratorConfig,
    GeneratorError,
    convert_generator_input,
    generate_code,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
    load_config,
)
from .codegen.core.config import ConfigError, get_config_manager
from .codegen.core.generator import GenerationResult
from .codegen.core.schema import SchemaError
from .codegen.registry import RegistryError, is_language_supported
from .logging_config import get_logger, setup_logging
from .utils import InputLoaderError, load_input, load_input_from_stream

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the soia-dart command."""
    parser = argparse.ArgumentParser(
        prog="soia-dart",
        description="Generate Dart code from a resolved soia schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  soia-dart schema.json --output-dir lib/soiagen
  soia-dart https://example.com/schema.json --stdout
  soiac --emit-json | soia-dart --stdin -o lib/soiagen
  soia-dart --list-languages
        """.strip(),
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument(
        "source", nargs="?", help="Input document: JSON file path or URL"
    )
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the input document from standard input"
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output-dir", "-o", metavar="DIR", help="Directory receiving the generated files"
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated files instead of writing them",
    )

    generation_group = parser.add_argument_group("code generation")
    generation_group.add_argument(
        "--language",
        "-l",
        default="dart",
        help="Target language (default: dart)",
    )
    generation_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )
    generation_group.add_argument(
        "--indent-size", type=int, metavar="N", help="Spaces per indentation level"
    )
    generation_group.add_argument(
        "--use-tabs", action="store_true", help="Indent with tabs instead of spaces"
    )
    generation_group.add_argument(
        "--no-banner", action="store_true", help="Omit the 'Do not edit' banner"
    )
    generation_group.add_argument(
        "--no-constants", action="store_true", help="Do not generate constants"
    )
    generation_group.add_argument(
        "--client-package",
        metavar="NAME",
        help="Dart package of the soia runtime (default: soia)",
    )
    generation_group.add_argument(
        "--save-config",
        metavar="FILE",
        help="Write the effective configuration to a JSON file",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed information about a language and exit",
    )
    info_group.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata"
    )
    info_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    info_group.add_argument(
        "--log-file", metavar="FILE", help="Also write log records to this file"
    )
    info_group.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the soia-dart command."""
    args = create_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    return handle_command(args)


def handle_command(args: argparse.Namespace) -> int:
    """
    Handle code generation command from CLI arguments.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not (args.source or args.stdin):
            raise CLIError("Input source required (file, URL, or --stdin)")

        if not _validate_language(args.language):
            return 1

        document = _get_input_document(args)
        config = _build_config(args)
        return _generate_and_output(document, config, args)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        logger.error("%s", e)
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {lang_name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language):
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green")
    )

    generator = get_generator(language)
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")
    config_table.add_row("Indent Size", str(generator.config.indent_size))
    config_table.add_row("Use Tabs", str(generator.config.use_tabs))
    config_table.add_row("Add Banner", str(generator.config.add_banner))
    config_table.add_row("Emit Constants", str(generator.config.emit_constants))
    config_table.add_row("Client Package", generator.config.client_package)

    console.print()
    console.print(config_table)
    return 0


def _validate_language(language: str) -> bool:
    """Validate that a language is supported."""
    if not is_language_supported(language):
        supported = list_supported_languages()
        console.print(f"[red]✗ Unsupported language '{language}'[/red]")
        console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def _get_input_document(args: argparse.Namespace) -> Any:
    """Get the input document from a file, URL or standard input."""
    try:
        if args.stdin:
            return load_input_from_stream(sys.stdin)[1]
        return load_input(args.source)[1]
    except (InputLoaderError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load input: {e}") from e


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.indent_size is not None:
        overrides["indent_size"] = args.indent_size
    if args.use_tabs:
        overrides["use_tabs"] = True
    if args.no_banner:
        overrides["add_banner"] = False
    if args.no_constants:
        overrides["emit_constants"] = False
    if args.client_package:
        overrides["client_package"] = args.client_package
    if args.output_dir:
        overrides["output_dir"] = args.output_dir

    try:
        config = load_config(
            args.language.lower(), custom_config=overrides, config_file=args.config
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    manager = get_config_manager()
    for warning in manager.validate_config(config):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    if args.save_config:
        try:
            manager.save_config(config, args.save_config)
        except ConfigError as e:
            raise CLIError(str(e)) from e
        console.print(f"[green]✓[/green] Saved configuration to [cyan]{args.save_config}[/cyan]")

    return config


def _generate_and_output(
    document: Any, config: GeneratorConfig, args: argparse.Namespace
) -> int:
    """Generate code and handle output with rich formatting."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            load_task = progress.add_task("[cyan]Reading schema...", total=None)
            generator_input = convert_generator_input(document)
            progress.remove_task(load_task)

            gen_task = progress.add_task(
                f"[green]Generating {args.language} code...", total=None
            )
            generator = get_generator(args.language, config)
            result = generate_code(generator, generator_input)
            progress.remove_task(gen_task)
    except (SchemaError, RegistryError, GeneratorError) as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if args.stdout:
        _print_files(result, args.language)
    else:
        try:
            _write_files(result, Path(config.output_dir or "."))
        except OSError as e:
            console.print(f"[red]✗ Failed to write output:[/red] {e}")
            return 1

    if args.verbose and result.metadata:
        _print_metadata(result)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


def _write_files(result: GenerationResult, output_dir: Path) -> None:
    """Write all files, or none of them if any write fails."""
    staged: List[Tuple[Path, Path]] = []
    try:
        for output_file in result.files:
            output_path = output_dir / output_file.path
            temp_path = output_path.with_name(output_path.name + ".tmp")
            output_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(output_file.code, encoding="utf-8")
            staged.append((temp_path, output_path))
    except OSError:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
        raise

    for temp_path, output_path in staged:
        temp_path.replace(output_path)
        logger.info("Wrote %s", output_path)
        console.print(f"[green]✓[/green] Generated [cyan]{output_path}[/cyan]")


def _print_files(result: GenerationResult, language: str) -> None:
    for output_file in result.files:
        border = "═" * 20
        console.print(f"[green]{border} 📄 {output_file.path} {border}[/green]\n")
        console.print(Syntax(output_file.code, language, theme="monokai"))


def _print_metadata(result: GenerationResult) -> None:
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


if __name__ == "__main__":
    sys.exit(main())
