"""
Diagnostics and the sink rules report into.

The sink is owned by the driver and threaded through every rule call; rules
never keep diagnostics of their own.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .types import Span

if TYPE_CHECKING:
    from .lints.base import LintRule


class LintLevel(Enum):
    """Per-rule level, as in `#[allow]` / `#[warn]` / `#[deny]`."""

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    span: Span
    message: str
    lint: str | None = None
    help: str | None = None
    help_span: Span | None = None
    # Set when the lint level was not configured explicitly, so the renderer
    # can add rustc's "on by default" note.
    default_level: bool = False


class DiagnosticSink:
    """Collects diagnostics in emission order."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self._diagnostics if d.severity is severity)

    @property
    def has_errors(self) -> bool:
        return self.count(Severity.ERROR) > 0

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


def span_lint_and_help(
    sink: DiagnosticSink,
    lint: LintRule,
    span: Span,
    message: str,
    help_span: Span | None,
    help: str,
) -> None:
    """Emit `message` at `span` for `lint`, with a help note."""
    if lint.level is LintLevel.ALLOW:
        return
    severity = Severity.ERROR if lint.level is LintLevel.DENY else Severity.WARNING
    sink.emit(
        Diagnostic(
            severity=severity,
            span=span,
            message=message,
            lint=lint.name,
            help=help,
            help_span=help_span,
            default_level=lint.default_level,
        )
    )


def simple_error(span: Span | None, message: str) -> Diagnostic:
    """
    Error diagnostic that is not tied to a lint (tokenizer and registry input
    errors). Without a span it points at the start of the file.
    """
    return Diagnostic(
        severity=Severity.ERROR,
        span=span or Span(start=0, end=0, line=1, column=1, end_line=1, end_column=1),
        message=message,
    )
