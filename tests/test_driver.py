from __future__ import annotations

import logging
from pathlib import Path

from leptos_ids.diagnostics import Severity
from leptos_ids.driver import iter_rust_files
from leptos_ids.driver import lint_paths
from leptos_ids.driver import lint_text
from leptos_ids.lints.registry import build_rules


def _tree(root: Path, files: dict[str, str]) -> None:
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


def test_iter_rust_files_walks_sorted_and_excludes(tmp_path: Path) -> None:
    _tree(
        tmp_path,
        {
            "src/main.rs": "",
            "src/app/mod.rs": "",
            "src/notes.txt": "",
            "target/debug/build.rs": "",
            "examples/demo.rs": "",
        },
    )
    files = [
        path.relative_to(tmp_path).as_posix()
        for path in iter_rust_files([tmp_path], ["target/**"])
    ]
    assert files == ["examples/demo.rs", "src/app/mod.rs", "src/main.rs"]


def test_iter_rust_files_yields_explicit_files(tmp_path: Path) -> None:
    _tree(tmp_path, {"target/keep.rs": ""})
    explicit = tmp_path / "target" / "keep.rs"
    assert list(iter_rust_files([explicit], ["target/**"])) == [explicit]


def test_tokenize_error_is_reported_and_other_files_still_run(
    tmp_path: Path, caplog
) -> None:
    _tree(
        tmp_path,
        {
            "a.rs": 'fn a() { view! { <div id="x"/> }',
            "b.rs": 'fn b() { view! { <div id="y"/> } }',
        },
    )
    with caplog.at_level(logging.WARNING, logger="leptos_ids"):
        reports = lint_paths([tmp_path], build_rules())

    assert [Path(report.path).name for report in reports] == ["a.rs", "b.rs"]
    (error,) = reports[0].diagnostics
    assert error.severity is Severity.ERROR
    assert error.lint is None
    assert error.message == "this file contains an unclosed delimiter"
    assert reports[1].count(Severity.WARNING) == 1
    assert "Could not tokenize" in caplog.text


def test_invocations_in_a_file_are_reported_in_source_order() -> None:
    source = """
fn a() -> impl IntoView { view! { <p id=first/> } }
fn b() -> impl IntoView { view! { <p id=second/> } }
"""
    report = lint_text(source, build_rules())
    assert report.path == "<stdin>"
    assert [d.span.line for d in report.diagnostics] == [2, 3]


def test_unreadable_file_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "latin1.rs"
    path.write_bytes(b'fn main() { let s = "\xe9"; }\n')
    (report,) = lint_paths([path], build_rules())
    (error,) = report.diagnostics
    assert error.severity is Severity.ERROR
    assert error.message.startswith("could not read file: ")
    assert (error.span.line, error.span.column) == (1, 1)


def test_byte_order_mark_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "bom.rs"
    path.write_text('view! { <div id="x"/> }\n', encoding="utf-8-sig")
    (report,) = lint_paths([path], build_rules())
    assert [d.lint for d in report.diagnostics] == ["literal_as_id_attribute_value"]
    (warning,) = report.diagnostics
    assert (warning.span.line, warning.span.column) == (1, 17)
    assert not report.source.startswith("\ufeff")


def test_byte_order_mark_in_text_is_ignored() -> None:
    report = lint_text('\ufeffview! { <div id="x"/> }\n', build_rules())
    assert [d.lint for d in report.diagnostics] == ["literal_as_id_attribute_value"]


def test_excludes_match_nested_directories(tmp_path: Path) -> None:
    _tree(
        tmp_path,
        {
            "member/src/lib.rs": "",
            "member/target/debug/build.rs": "",
            "target/out.rs": "",
        },
    )
    files = [
        path.relative_to(tmp_path).as_posix()
        for path in iter_rust_files([tmp_path], ["target/**"])
    ]
    assert files == ["member/src/lib.rs"]


def test_excludes_match_full_relative_paths(tmp_path: Path) -> None:
    _tree(tmp_path, {"src/gen/a.rs": "", "src/main.rs": "", "gen/b.rs": ""})
    files = [
        path.relative_to(tmp_path).as_posix()
        for path in iter_rust_files([tmp_path], ["src/gen/*"])
    ]
    assert files == ["gen/b.rs", "src/main.rs"]
