"""
Lint driver: source files in, diagnostics out.

For each file the driver tokenizes the source, discovers macro calls and hands
every call to each enabled rule together with a sink owned by the file's
report. Files are independent; a file that cannot be tokenized is reported
with a single error and the run continues.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .diagnostics import Diagnostic
from .diagnostics import DiagnosticSink
from .diagnostics import Severity
from .diagnostics import simple_error
from .errors import TokenizeError
from .lints.base import LintRule
from .lints.recognizer import is_view_macro_call
from .token_syntax.invocations import discover_macro_invocations
from .token_syntax.tokenization import tokenize_source

logger = logging.getLogger(__name__)

RUST_SUFFIX = ".rs"


@dataclass
class FileReport:
    """Diagnostics for one source file, in emission order."""

    path: str
    source: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity is severity)


def lint_source(source: str, rules: Sequence[LintRule], sink: DiagnosticSink) -> None:
    """
    Run `rules` over every macro call in `source`.

    Raises:
        TokenizeError: when `source` is not valid Rust at the token level.
    """
    trees = tokenize_source(source)
    for invocation in discover_macro_invocations(trees):
        if not is_view_macro_call(invocation):
            logger.debug(
                "Skipping `%s!` at line %d", invocation.name, invocation.span.line
            )
            continue
        logger.debug("Checking `%s!` at line %d", invocation.name, invocation.span.line)
        for rule in rules:
            rule.check_mac(invocation, sink)


def lint_text(
    source: str, rules: Sequence[LintRule], path: str = "<stdin>"
) -> FileReport:
    sink = DiagnosticSink()
    try:
        lint_source(source, rules, sink)
    except TokenizeError as e:
        logger.warning("Could not tokenize %s: %s", path, e)
        sink.emit(simple_error(e.span, e.message))
    return FileReport(path=path, source=source, diagnostics=sink.diagnostics)


def lint_file(path: Path, rules: Sequence[LintRule]) -> FileReport:
    logger.info("Linting %s", path)
    try:
        source = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read %s: %s", path, e)
        return FileReport(
            path=str(path),
            source="",
            diagnostics=[simple_error(None, f"could not read file: {e}")],
        )
    return lint_text(source, rules, path=str(path))


def _excluded(relative: str, exclude: Sequence[str]) -> bool:
    parts = relative.split("/")
    tails = ["/".join(parts[i:]) for i in range(len(parts))]
    return any(
        fnmatch.fnmatch(tail, pattern) for pattern in exclude for tail in tails
    )


def iter_rust_files(
    paths: Iterable[Path], exclude: Sequence[str] = ()
) -> Iterator[Path]:
    """
    Expand `paths` into Rust source files.

    Files are yielded as given; directories are walked recursively in sorted
    order, skipping paths (relative to the directory) whose path, or any trailing
    part of it, matches `exclude`.
    """
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob(f"*{RUST_SUFFIX}")):
                if not candidate.is_file():
                    continue
                relative = candidate.relative_to(path).as_posix()
                if _excluded(relative, exclude):
                    logger.debug("Excluded %s", candidate)
                    continue
                yield candidate
        else:
            yield path


def lint_paths(
    paths: Iterable[Path],
    rules: Sequence[LintRule],
    exclude: Sequence[str] = (),
) -> list[FileReport]:
    return [lint_file(path, rules) for path in iter_rust_files(paths, exclude)]
