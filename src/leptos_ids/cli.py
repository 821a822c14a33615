from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .config import Config
from .config import load_config
from .diagnostics import LintLevel
from .diagnostics import Severity
from .diagnostics import simple_error
from .driver import lint_paths
from .errors import ConfigError
from .errors import RegistryInputError
from .errors import TokenizeError
from .lints.registry import LINTS
from .lints.registry import LINTS_BY_NAME
from .lints.registry import build_rules
from .logging import LogConfig
from .logging import configure_logging
from .logging import verbosity_to_level
from .registry.generator import expand_registry
from .registry.generator import find_registry_declarations
from .rendering import render_diagnostic
from .rendering import render_human
from .rendering import render_json
from .token_syntax.tokenization import tokenize_source

logger = logging.getLogger(__name__)


def _lint_name(value: str) -> str:
    if value not in LINTS_BY_NAME:
        choices = ", ".join(LINTS_BY_NAME)
        raise argparse.ArgumentTypeError(
            f"unknown lint '{value}' (choose from {choices})"
        )
    return value


def _lint_level_flag(level: LintLevel):
    def parse(value: str) -> tuple[str, LintLevel]:
        return _lint_name(value), level

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leptos-ids",
        description=(
            "Keep Leptos `view!` id attributes on the generated `Ids` registry."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Configuration file (defaults to leptos-ids.toml, Cargo.toml or "
            "pyproject.toml in the working directory)."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser(
        "check", help="Lint id attribute values in `view!` macro calls."
    )
    check.add_argument(
        "paths",
        nargs="*",
        type=Path,
        default=[Path(".")],
        help="Rust files or directories to lint (default: current directory).",
    )
    check.add_argument(
        "--format",
        choices=("human", "json"),
        default="human",
        help="Output format.",
    )
    # Level flags share one list so that the last one given wins.
    for short, long, level, text in (
        ("-A", "--allow", LintLevel.ALLOW, "Disable a lint."),
        ("-W", "--warn", LintLevel.WARN, "Report a lint as a warning."),
        ("-D", "--deny", LintLevel.DENY, "Report a lint as an error."),
    ):
        check.add_argument(
            short,
            long,
            dest="levels",
            action="append",
            type=_lint_level_flag(level),
            default=[],
            metavar="LINT",
            help=text,
        )
    check.add_argument(
        "--deny-warnings",
        action="store_true",
        help="Report every enabled lint as an error.",
    )

    expand = subparsers.add_parser(
        "expand-ids",
        help="Print the code generated for `#[leptos_unique_ids(...)]` declarations.",
    )
    expand.add_argument("file", type=Path, help="Rust file holding the declaration.")
    expand.add_argument(
        "--no-into-str",
        action="store_false",
        dest="into_str",
        default=None,
        help="Do not emit the `Into<&'static str>` implementation.",
    )
    expand.add_argument(
        "--no-into-attribute-value",
        action="store_false",
        dest="into_attribute_value",
        default=None,
        help="Do not emit the Leptos `IntoAttributeValue` implementation.",
    )

    subparsers.add_parser("rules", help="List available lints.")
    return parser


def _lint_levels(args: argparse.Namespace, config: Config) -> dict[str, LintLevel]:
    levels = dict(config.lints)
    for name, level in args.levels:
        levels[name] = level
    if args.deny_warnings:
        for lint in LINTS:
            if levels.get(lint.name, lint.default) is LintLevel.WARN:
                levels[lint.name] = LintLevel.DENY
    return levels


def run_check(args: argparse.Namespace, config: Config) -> int:
    rules = build_rules(_lint_levels(args, config))
    logger.debug("Enabled lints: %s", rules)

    missing = [path for path in args.paths if not path.exists()]
    for path in missing:
        print(f"error: {path}: no such file or directory", file=sys.stderr)
    reports = lint_paths(
        [path for path in args.paths if path.exists()], rules, config.exclude
    )

    if args.format == "json":
        sys.stdout.write(render_json(reports))
    else:
        output = render_human(reports)
        if output:
            sys.stderr.write(output)

    failed = any(report.count(Severity.ERROR) for report in reports)
    return 1 if failed or missing else 0


def run_expand_ids(args: argparse.Namespace, config: Config) -> int:
    path: Path = args.file
    try:
        source = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        print(f"error: {path}: {e.strerror or e}", file=sys.stderr)
        return 1

    into_str = config.ids.into_str if args.into_str is None else args.into_str
    into_attribute_value = (
        config.ids.into_attribute_value
        if args.into_attribute_value is None
        else args.into_attribute_value
    )
    lines = [line.rstrip("\r") for line in source.split("\n")]

    try:
        declarations = list(find_registry_declarations(tokenize_source(source)))
    except TokenizeError as e:
        error = simple_error(e.span, e.message)
        sys.stderr.write(render_diagnostic(str(path), lines, error))
        return 1

    if not declarations:
        print(
            f"error: no `#[leptos_unique_ids(...)]` declaration found in {path}",
            file=sys.stderr,
        )
        return 1

    status = 0
    outputs: list[str] = []
    for declaration in declarations:
        try:
            outputs.append(
                expand_registry(
                    declaration,
                    into_str=into_str,
                    into_attribute_value=into_attribute_value,
                )
            )
        except RegistryInputError as e:
            error = simple_error(e.span, e.message)
            sys.stderr.write(render_diagnostic(str(path), lines, error))
            status = 1
    sys.stdout.write("\n".join(outputs))
    return status


def run_rules() -> int:
    width = max(len(lint.name) for lint in LINTS)
    for lint in LINTS:
        print(f"{lint.name:<{width}}  {lint.default.value:<5}  {lint.summary}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = verbosity_to_level(args.verbose)
    configure_logging(
        LogConfig(log_file=args.log_file, log_level=level, console_level=level)
    )

    if args.command == "rules":
        return run_rules()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.command == "check":
        return run_check(args, config)
    return run_expand_ids(args, config)
