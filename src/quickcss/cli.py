"""Command-line interface: print the CSS selector at a position in an HTML file."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path

from quickcss.config import Settings, configure_logging, load_config, resolve_settings
from quickcss.errors import ConfigError
from quickcss.fileindex import DirectoryFileIndex
from quickcss.selector import selector_at
from quickcss.tokens import Position


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    position: Position
    project_dir: Path
    settings: Settings
    list_stylesheets: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="quickcss",
        description="Resolve the CSS selector at a position in an HTML file",
    )
    p.add_argument("input", help="Input HTML file")
    p.add_argument("--line", type=int, required=True, help="Line number (1-based)")
    p.add_argument("--col", type=int, required=True, help="Column number (1-based)")
    p.add_argument(
        "--project",
        metavar="DIR",
        help="Project directory (default: directory of the input file)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover quickcss.toml in the project)",
    )
    p.add_argument(
        "--stylesheets",
        action="store_true",
        help="Also list the project's stylesheets",
    )
    p.add_argument(
        "--log-level",
        default=None,
        metavar="LEVEL",
        help="Logging level (default: from config, else WARNING)",
    )
    return p


def parse_position(line: int, col: int) -> Position:
    """Convert a 1-based line/column pair to an editor position."""
    if line < 1 or col < 1:
        raise argparse.ArgumentTypeError(f"line and column must be >= 1: {line}:{col}")
    return Position(line - 1, col - 1)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    if args.project:
        project_dir = Path(args.project)
    else:
        project_dir = input_file.parent
        if not project_dir.parts:
            project_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, project_dir)

    # Log level: config < CLI
    if args.log_level is not None:
        cfg_logging = config.get("logging")
        merged = dict(cfg_logging) if isinstance(cfg_logging, dict) else {}
        merged["level"] = args.log_level
        config = {**config, "logging": merged}
    settings = resolve_settings(config, config_path)

    return CliOptions(
        input_file=input_file,
        position=parse_position(args.line, args.col),
        project_dir=project_dir,
        settings=settings,
        list_stylesheets=args.stylesheets,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit().

    Exit code 1 means the position has no selector context.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    configure_logging(options.settings.log_level)

    try:
        source = options.input_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    selector = selector_at(source, options.position)
    if selector:
        sys.stdout.write(selector + "\n")

    if options.list_stylesheets:
        index = DirectoryFileIndex(options.project_dir, options.settings.exclude)
        infos = asyncio.run(index.get_file_info_list(options.settings.stylesheet_extension))
        for info in infos:
            sys.stdout.write(f"{info.display_name}\t{info.full_path}\n")

    return 0 if selector else 1
