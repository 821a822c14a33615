"""
Diagnostic output.

`render_human()` prints diagnostics the way rustc does (source snippet with a
gutter, `^` markers, `= help:` and `= note:` lines, a final summary), and
`render_json()` emits one record per diagnostic for tooling.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import BaseModel

from .diagnostics import Diagnostic
from .diagnostics import Severity
from .driver import FileReport


class DiagnosticRecord(BaseModel):
    """Serialized form of one diagnostic."""

    path: str
    lint: str | None
    level: str
    message: str
    line: int
    column: int
    end_line: int
    end_column: int
    help: str | None = None

    @classmethod
    def from_diagnostic(cls, path: str, diagnostic: Diagnostic) -> DiagnosticRecord:
        span = diagnostic.span
        return cls(
            path=path,
            lint=diagnostic.lint,
            level=diagnostic.severity.value,
            message=diagnostic.message,
            line=span.line,
            column=span.column,
            end_line=span.end_line,
            end_column=span.end_column,
            help=diagnostic.help,
        )


def to_records(reports: Sequence[FileReport]) -> list[DiagnosticRecord]:
    return [
        DiagnosticRecord.from_diagnostic(report.path, diagnostic)
        for report in reports
        for diagnostic in report.diagnostics
    ]


def render_json(reports: Sequence[FileReport]) -> str:
    data = [record.model_dump(mode="json") for record in to_records(reports)]
    return json.dumps(data, indent=2) + "\n"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def summary_line(warnings: int, errors: int) -> str | None:
    if errors:
        line = f"error: aborting due to {_plural(errors, 'previous error')}"
        if warnings:
            line += f"; {_plural(warnings, 'warning')} emitted"
        return line
    if warnings:
        return f"warning: {_plural(warnings, 'warning')} emitted"
    return None


TAB_WIDTH = 4


def _display(text: str) -> str:
    return text.replace("\t", " " * TAB_WIDTH)


def _display_column(text: str, column: int) -> int:
    """1-based column of `column` once tabs in `text` are expanded."""
    return len(_display(text[: column - 1])) + 1


def _snippet(lines: Sequence[str], diagnostic: Diagnostic, width: int) -> list[str]:
    span = diagnostic.span
    gutter = " " * width + " |"
    out: list[str] = []

    if span.line == span.end_line or span.end_line > len(lines):
        text = lines[span.line - 1] if span.line <= len(lines) else ""
        out.append(f"{span.line:>{width}} | {_display(text)}".rstrip())
        start = _display_column(text, span.column)
        carets = max(_display_column(text, span.end_column) - start, 1)
        out.append(f"{gutter} {' ' * (start - 1)}{'^' * carets}")
        return out

    # Multi-line span, drawn with a left margin as rustc does.
    first = lines[span.line - 1]
    last = lines[span.end_line - 1]
    out.append(f"{span.line:>{width}} |   {_display(first)}".rstrip())
    out.append(f"{gutter}  {'_' * _display_column(first, span.column)}^")
    for number in range(span.line + 1, span.end_line + 1):
        out.append(f"{number:>{width}} | | {_display(lines[number - 1])}".rstrip())
    out.append(f"{gutter} |{'_' * (_display_column(last, span.end_column) - 1)}^")
    return out


def render_diagnostic(
    path: str,
    lines: Sequence[str],
    diagnostic: Diagnostic,
    *,
    note: str | None = None,
) -> str:
    span = diagnostic.span
    width = len(str(span.end_line))
    gutter = " " * width + " |"

    out = [f"{diagnostic.severity.value}: {diagnostic.message}"]
    out.append(f"{' ' * width}--> {path}:{span.line}:{span.column}")
    out.append(gutter)
    out.extend(_snippet(lines, diagnostic, width))
    if diagnostic.help or note:
        out.append(gutter)
    if diagnostic.help:
        out.append(f"{' ' * width} = help: {diagnostic.help}")
    if note:
        out.append(f"{' ' * width} = note: {note}")
    return "\n".join(out) + "\n"


def render_human(reports: Sequence[FileReport], *, summary: bool = True) -> str:
    chunks: list[str] = []
    noted: set[str] = set()
    warnings = errors = 0

    for report in reports:
        lines = [line.rstrip("\r") for line in report.source.split("\n")]
        for diagnostic in report.diagnostics:
            note = None
            if (
                diagnostic.lint
                and diagnostic.default_level
                and diagnostic.lint not in noted
            ):
                noted.add(diagnostic.lint)
                level = "warn" if diagnostic.severity is Severity.WARNING else "deny"
                note = f"`#[{level}({diagnostic.lint})]` on by default"
            chunks.append(render_diagnostic(report.path, lines, diagnostic, note=note))
            if diagnostic.severity is Severity.ERROR:
                errors += 1
            else:
                warnings += 1

    if summary:
        line = summary_line(warnings, errors)
        if line is not None:
            chunks.append(line + "\n")
    return "\n".join(chunks)
