"""CLI entry point for capsule-forge.

This module acts as the central entry point for the project's CLI tools.
It parses arguments, builds the built-in registry and delegates to the
exporter. Only the CLI touches the filesystem.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from capsule_forge.capsules import create_default_registry
from capsule_forge.config import (
    EnvVar,
    get_environment,
    list_environment_variables,
)
from capsule_forge.core import get_logger, setup_logging
from capsule_forge.errors import OrchestratorPrecondition
from capsule_forge.export import (
    CancellationToken,
    CompilationResult,
    ExportOrchestrator,
    ProgressEvent,
)
from capsule_forge.mid import ProjectComposition
from capsule_forge.mid import export_json_schema as composition_json_schema
from capsule_forge.output import format_catalog, format_result, format_summary
from capsule_forge.platform import Platform, parse_platform
from capsule_forge.registry import CapsuleFilter
from capsule_forge.schema import CapsuleCategory
from capsule_forge.schema import export_json_schema as capsule_json_schema

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Capsules Command
# =============================================================================


def cmd_capsules(args: argparse.Namespace) -> int:
    """Handle the capsules command."""
    platform = None
    if args.platform:
        platform = parse_platform(args.platform)
        if platform is None:
            logger.error(f"Unknown platform: {args.platform}")
            return 1

    registry = create_default_registry()
    capsule_filter = CapsuleFilter(
        category=CapsuleCategory(args.category) if args.category else None,
        platform=platform,
        query=args.query,
    )
    definitions = registry.list(capsule_filter)

    if args.json:
        print(
            json.dumps(
                [d.model_dump(mode="json") for d in definitions],
                indent=2,
            )
        )
    else:
        print(format_catalog(definitions))
    return 0


def handle_capsules_command(argv: list[str]) -> int:
    """Handle catalog listing."""
    parser = argparse.ArgumentParser(
        prog="python . capsules",
        description="List the built-in capsule catalog",
    )
    parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=[c.value for c in CapsuleCategory],
        help="Only capsules of this category",
    )
    parser.add_argument(
        "--platform",
        "-p",
        type=str,
        default=None,
        help="Only capsules that render on this platform",
    )
    parser.add_argument(
        "--query",
        "-q",
        type=str,
        default=None,
        help="Free-text search over id, name, description and tags",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print full definitions as JSON",
    )
    return cmd_capsules(parser.parse_args(argv))


# =============================================================================
# Export Command
# =============================================================================


def _write_results(results: list[CompilationResult], output_dir: Path) -> int:
    """Write each target's files under output_dir/<platform>/."""
    written = 0
    for result in results:
        base = output_dir / result.platform.value
        for generated in result.files:
            target = base / generated.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(generated.content, encoding="utf-8")
            written += 1
    return written


def cmd_export(args: argparse.Namespace) -> int:
    """Handle the export command."""
    try:
        composition = ProjectComposition.model_validate_json(
            args.composition.read_text(encoding="utf-8")
        )
    except FileNotFoundError:
        logger.error(f"Composition file not found: {args.composition}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid composition {args.composition}:\n{e}")
        return 1

    orchestrator = ExportOrchestrator(
        create_default_registry(),
        max_workers=args.workers,
    )
    cancel = CancellationToken()

    def on_progress(event: ProgressEvent) -> None:
        logger.debug(
            f"[{event.platform.value}] {event.emitted}/{event.total} "
            f"component files ({event.percent}%)"
        )

    try:
        results = orchestrator.export_project(
            composition,
            targets=args.target or None,
            cancel=cancel,
            on_progress=on_progress,
        )
    except OrchestratorPrecondition as e:
        logger.error(f"Export refused: {e}")
        for diagnostic in e.problems:
            logger.error(f"  {diagnostic}")
        return 2
    except KeyboardInterrupt:
        cancel.cancel()
        logger.warning("Export interrupted")
        return 130

    if args.format == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2))
    elif args.format == "tree":
        print("\n\n".join(format_result(r) for r in results))
    else:
        print(format_summary(results))

    if args.output:
        count = _write_results(results, args.output)
        logger.info(f"Wrote {count} files to {args.output}")

    return 0 if all(r.success and not r.has_errors for r in results) else 1


def handle_export_command(argv: list[str]) -> int:
    """Handle export of a composition file."""
    parser = argparse.ArgumentParser(
        prog="python . export",
        description="Export a composition JSON file to platform source trees",
    )
    parser.add_argument(
        "composition",
        type=Path,
        help="Path to a ProjectComposition JSON file",
    )
    parser.add_argument(
        "--target",
        "-t",
        type=str,
        action="append",
        default=None,
        help=(
            "Target platform, repeatable "
            f"({', '.join(p.value for p in Platform)}; default: composition targets)"
        ),
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Directory to write generated files into (one subdirectory per platform)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="summary",
        choices=["summary", "tree", "json"],
        help="Report format (default: summary)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Parallel target tasks (default: CAPSULE_FORGE_MAX_WORKERS)",
    )
    return cmd_export(parser.parse_args(argv))


# =============================================================================
# Schema Command
# =============================================================================


def handle_schema_command(argv: list[str]) -> int:
    """Print JSON schemas of the input models."""
    parser = argparse.ArgumentParser(
        prog="python . schema",
        description="Print the JSON schema of compositions or capsule definitions",
    )
    parser.add_argument(
        "kind",
        nargs="?",
        default="composition",
        choices=["composition", "capsule"],
        help="Schema to print (default: composition)",
    )
    args = parser.parse_args(argv)
    schema = (
        composition_json_schema() if args.kind == "composition" else capsule_json_schema()
    )
    print(json.dumps(schema, indent=2))
    return 0


# =============================================================================
# Env Command
# =============================================================================


def handle_env_command(argv: list[str]) -> int:
    """Show configuration variables and their resolved values."""
    parser = argparse.ArgumentParser(
        prog="python . env",
        description="Show capsule-forge environment configuration",
    )
    parser.add_argument(
        "--category",
        type=str,
        default=None,
        choices=["logging", "export", "output"],
        help="Only variables of this category",
    )
    args = parser.parse_args(argv)

    for var in list_environment_variables(args.category):
        config = var.value
        print(f"{config.name} = {get_environment(var)!r}")
        print(f"    {config.description} (default: {config.default!r})")
    return 0


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Catalog ===")
    print("  capsules   List built-in capsules")
    print("  schema     Print composition or capsule JSON schema")
    print("\n=== Export ===")
    print("  export     Export a composition to web, iOS, Android and desktop")
    print("\n=== Configuration ===")
    print("  env        Show environment variables")
    print("\nExamples:")
    print("  python . capsules --platform ios")
    print("  python . export app.json -t web -t ios -o build/")
    print("  python . export app.json --format json")
    print("  python . schema capsule")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "capsules": lambda: handle_capsules_command(rest_args),
        "export": lambda: handle_export_command(rest_args),
        "schema": lambda: handle_schema_command(rest_args),
        "env": lambda: handle_env_command(rest_args),
    }

    if command in commands:
        setup_logging(get_environment(EnvVar.LOG_LEVEL))
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
