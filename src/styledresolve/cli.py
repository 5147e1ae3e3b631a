"""Command-line interface for styledresolve."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from styledresolve.errors import LoadError
from styledresolve.resolver import ResolveContext, components_from_settings
from styledresolve.values import format_value, value_kind, value_to_json

CONFIG_FILENAME = "styledresolve.toml"
FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    components: dict[str, str]
    output_format: str
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="styledresolve",
        description="Resolve styled-component definitions in an ESTree JSON file",
    )
    p.add_argument("input", help="Input ESTree .json file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-c",
        "--component",
        action="append",
        default=[],
        metavar="NAME=TAG",
        help="Custom component rendering as TAG (repeatable)",
    )
    p.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-resolve")
    p.add_argument("--debug", action="store_true", help="Debug logging and tree dump to stderr")
    return p


def parse_component_arg(s: str) -> tuple[str, str]:
    """Parse a NAME=TAG string into (name, tag)."""
    name, sep, tag = s.partition("=")
    if not sep or not name or not tag:
        raise argparse.ArgumentTypeError(f"invalid component format (expected NAME=TAG): {s}")
    return name, tag


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def components_from_config(config: dict[str, Any]) -> dict[str, str]:
    """Component name -> tag from the config, skipping non-string tags.

    ESLint-style `[settings."jsx-a11y".components]` is read first; the
    `[components]` table overrides it.
    """
    components = components_from_settings(config.get("settings"))
    table = config.get("components")
    if isinstance(table, dict):
        components.update(
            {str(k): v for k, v in table.items() if isinstance(v, str) and v}
        )
    return components


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

    # Custom components: config < CLI
    components = components_from_config(config)
    for raw in args.component:
        name, tag = parse_component_arg(raw)
        components[name] = tag

    # Output format: default < config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and cfg_output.get("format") in FORMATS:
        output_format = cfg_output["format"]
    if args.format is not None:
        output_format = args.format

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        components=components,
        output_format=output_format,
        watch=args.watch,
        debug=args.debug,
    )


def resolve_file(options: CliOptions) -> ResolveContext:
    """Read, load, and resolve one ESTree JSON file."""
    from styledresolve.debug import dump_tree
    from styledresolve.loader import load_program
    from styledresolve.walker import resolve_program

    source = options.input_file.read_text(encoding="utf-8")
    filename = str(options.input_file)
    program = load_program(source, filename)

    if options.debug:
        dump_tree(program)

    return resolve_program(program, filename, options.components)


def format_text(ctx: ResolveContext) -> str:
    lines = []
    for definition in ctx.registry:
        parts = [f"{definition.name} <{definition.tag}>"]
        parts.extend(f"{a.key}={format_value(a.value)}" for a in definition.attrs)
        lines.append(" ".join(parts))
    return "".join(line + "\n" for line in lines)


def format_json(ctx: ResolveContext) -> str:
    payload = {
        "components": [
            {
                "name": d.name,
                "tag": d.tag,
                "attrs": [
                    {"key": a.key, "kind": value_kind(a.value), "value": value_to_json(a.value)}
                    for a in d.attrs
                ],
            }
            for d in ctx.registry
        ],
        "diagnostics": [
            {
                "message": diag.message,
                "line": diag.span.start.line if diag.span else None,
                "column": diag.span.start.column if diag.span else None,
            }
            for diag in ctx.diagnostics
        ],
    }
    return json.dumps(payload, indent=2) + "\n"


def render_report(ctx: ResolveContext, output_format: str) -> str:
    if output_format == "json":
        return format_json(ctx)
    return format_text(ctx)


def _emit(options: CliOptions, ctx: ResolveContext) -> None:
    report = render_report(ctx, options.output_format)
    for diag in ctx.diagnostics:
        print(diag.format(str(options.input_file)), file=sys.stderr)
    if options.output_file:
        options.output_file.write_text(report, encoding="utf-8")
    else:
        sys.stdout.write(report)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-resolve on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _emit(options, resolve_file(options))
                    print(f"Resolved {options.input_file}", file=sys.stderr)
                except LoadError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _configure_logging(options.debug)

    if options.watch:
        watch_loop(options)
        return 0

    try:
        ctx = resolve_file(options)
    except LoadError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _emit(options, ctx)
    return 2 if ctx.diagnostics else 0
