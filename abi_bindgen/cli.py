"""
Command-line interface for abi-bindgen.

Subcommands:
    build      Generate bindings for every configured target
    sanitize   Print or write the sanitized form of one ABI document
    languages  List the available binding generators
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen import (
    BuildError,
    BuildPipeline,
    ConfigError,
    RegistryError,
    get_registry,
    list_all_language_info,
    load_build_config,
)
from .codegen.core.config import DEFAULT_CONFIG_FILE, get_config_manager
from .codegen.core.normalizer import (
    PatternError,
    count_rewrites,
    read_interface_document,
    sanitize_abi_text,
)
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)

console = Console()
error_console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="abi-bindgen",
        description="Generate typed contract bindings from ABI documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  abi-bindgen build
  abi-bindgen build --config build/abigen.json --verbose
  abi-bindgen sanitize abi/contract.abi.json -o /tmp/contract.abi.json
  abi-bindgen languages
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show detailed progress"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Generate bindings for all targets")
    build.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_FILE,
        help=f"Build configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    build.add_argument("--language", "-l", help="Override the target language")
    build.add_argument(
        "--keep-staging",
        action="store_true",
        help="Keep sanitized staging files after generation",
    )
    build.add_argument("--staging-dir", help="Directory for staging files")
    build.set_defaults(func=_handle_build)

    sanitize = subparsers.add_parser(
        "sanitize", help="Sanitize one ABI document without generating bindings"
    )
    sanitize.add_argument("file", help="ABI document")
    sanitize.add_argument("--output", "-o", help="Output file (default: stdout)")
    sanitize.add_argument(
        "--marker", default="u_", help="Replacement for leading underscores"
    )
    sanitize.set_defaults(func=_handle_sanitize)

    languages = subparsers.add_parser("languages", help="List available generators")
    languages.set_defaults(func=_handle_languages)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the ``abi-bindgen`` command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    setup_logging(level, error_console)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    return args.func(args)


def _handle_build(args: argparse.Namespace) -> int:
    """Run the build pipeline for the configured targets."""
    overrides = {}
    if args.language:
        overrides["language"] = args.language
    if args.keep_staging:
        overrides["keep_staging"] = True
    if args.staging_dir:
        overrides["staging_dir"] = str(Path(args.staging_dir).resolve())

    try:
        language = overrides.get("language")
        extension = ".py"
        if language:
            extension = get_registry().get_language_info(language)["file_extension"]
        config = load_build_config(args.config, overrides, extension=extension)
        get_registry().resolve(config.generator.language)
    except (ConfigError, RegistryError) as e:
        error_console.print(f"[red]✗ Configuration error:[/red] {e}")
        return 1

    for problem in get_config_manager().validate_config(config.generator):
        logger.warning(problem)

    if not config.targets:
        console.print("[yellow]⚠️  No targets configured[/yellow]")
        return 0

    try:
        report = BuildPipeline(config).run()
    except BuildError as e:
        error_console.print(
            Panel(
                f"[bold]Target:[/bold] {e.target.name}\n"
                f"[bold]Input:[/bold] {e.target.abi_path}\n"
                f"[bold]Output:[/bold] {e.target.output_path}\n"
                f"[bold]Stage:[/bold] {e.stage.value}\n"
                f"[bold]Error:[/bold] {e.cause}",
                title="✗ Binding generation failed",
                border_style="red",
            )
        )
        return 1

    table = Table(title="📦 Generated Bindings", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Name", style="bold green")
    table.add_column("ABI", style="dim")
    table.add_column("Output", style="cyan")
    for result in report.results:
        table.add_row(
            result.target.name, str(result.target.abi_path), str(result.target.output_path)
        )
    console.print(table)

    if report.warnings:
        console.print("[yellow]⚠️  Warnings:[/yellow]")
        for warning in report.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    return 0


def _handle_sanitize(args: argparse.Namespace) -> int:
    """Print or write a sanitized ABI document."""
    try:
        contents = read_interface_document(args.file)
        sanitized = sanitize_abi_text(contents, args.marker)
    except OSError as e:
        error_console.print(f"[red]✗ Failed to read {args.file}:[/red] {e}")
        return 1
    except PatternError as e:
        error_console.print(f"[red]✗[/red] {e}")
        return 1

    rewrites = count_rewrites(contents)
    logger.info("%d name(s) rewritten in %s", rewrites, args.file)

    if args.output:
        try:
            Path(args.output).write_text(sanitized, encoding="utf-8")
        except OSError as e:
            error_console.print(f"[red]✗ Failed to write {args.output}:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Sanitized {rewrites} name(s), saved to [cyan]{args.output}[/cyan]"
        )
    else:
        sys.stdout.write(sanitized)

    return 0


def _handle_languages(args: argparse.Namespace) -> int:
    """List registered generators."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️  No binding generators available[/yellow]")
        return 0

    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(lang_name, info["file_extension"], info["class"], aliases)

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
