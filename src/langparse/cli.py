"""Command-line interface for langparse."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from langparse.parser import DEFAULT_MAX_DEPTH, ParseResult

COLOR_CHOICES = ("auto", "always", "never")


class ConfigError(Exception):
    """Raised when a config file value has the wrong type or range."""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    color: str
    source_context: bool
    max_depth: int
    check: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="langparse",
        description="Parse a source file and report syntax diagnostics",
    )
    p.add_argument("input", help="Input source file")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover langparse.toml)",
    )
    p.add_argument(
        "--color",
        choices=COLOR_CHOICES,
        default=None,
        help="Colorize diagnostics (default: auto)",
    )
    p.add_argument(
        "--context",
        action="store_true",
        default=None,
        help="Show the offending source line under each diagnostic",
    )
    p.add_argument(
        "--max-depth",
        type=positive_int,
        default=None,
        metavar="N",
        help=f"Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH})",
    )
    p.add_argument("--check", action="store_true", help="Only report diagnostics, no AST output")
    p.add_argument("--debug", action="store_true", help="Dump compact expressions to stderr")
    return p


def positive_int(s: str) -> int:
    """Parse a strictly positive integer argument."""
    try:
        value = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {s}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {s}")
    return value


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "langparse.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    # Diagnostics: config < CLI
    color = "auto"
    source_context = False
    cfg_diag = config.get("diagnostics")
    if isinstance(cfg_diag, dict):
        cfg_color = cfg_diag.get("color")
        if cfg_color is not None:
            if cfg_color not in COLOR_CHOICES:
                raise ConfigError(f"diagnostics.color must be one of {', '.join(COLOR_CHOICES)}")
            color = cfg_color
        cfg_context = cfg_diag.get("context")
        if isinstance(cfg_context, bool):
            source_context = cfg_context
    if args.color is not None:
        color = args.color
    if args.context is not None:
        source_context = args.context

    # Parser limits: config < CLI
    max_depth = DEFAULT_MAX_DEPTH
    cfg_parser = config.get("parser")
    if isinstance(cfg_parser, dict):
        cfg_depth = cfg_parser.get("max_depth")
        if cfg_depth is not None:
            if isinstance(cfg_depth, bool) or not isinstance(cfg_depth, int) or cfg_depth <= 0:
                raise ConfigError("parser.max_depth must be a positive integer")
            max_depth = cfg_depth
    if args.max_depth is not None:
        max_depth = args.max_depth

    return CliOptions(
        input_file=input_file,
        color=color,
        source_context=source_context,
        max_depth=max_depth,
        check=args.check,
        debug=args.debug,
    )


def _use_color(mode: str, stream: TextIO) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    return stream.isatty()


def parse_file(options: CliOptions, *, stderr: TextIO | None = None) -> ParseResult:
    """Read and parse a source file, streaming diagnostics to *stderr*."""
    from langparse.diagnostics import StreamSink
    from langparse.parser import parse

    err = stderr if stderr is not None else sys.stderr
    source = options.input_file.read_text(encoding="utf-8")
    sink = StreamSink(
        err,
        color=_use_color(options.color, err),
        source_context=options.source_context,
    )
    return parse(source, str(options.input_file), sink=sink, max_depth=options.max_depth)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from langparse.debug import dump_ast, format_expr

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (tomllib.TOMLDecodeError, ConfigError) as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    try:
        result = parse_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
        return 2

    if options.debug:
        for expr in result.exprs:
            print(format_expr(expr), file=sys.stderr)

    if not options.check:
        dump_ast(result.exprs, file=sys.stdout)

    return 1 if result.has_error else 0
