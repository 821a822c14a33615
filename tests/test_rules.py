from __future__ import annotations

import pytest
from _helpers import first_invocation
from _helpers import run_rules

from leptos_ids.diagnostics import DiagnosticSink
from leptos_ids.diagnostics import LintLevel
from leptos_ids.diagnostics import Severity
from leptos_ids.lints.base import LintRule
from leptos_ids.lints.literal_as_id_attribute_value import LiteralAsIdAttributeValue
from leptos_ids.lints.registry import LINTS
from leptos_ids.lints.registry import LINTS_BY_NAME
from leptos_ids.lints.registry import build_rules
from leptos_ids.lints.tt_as_id_attribute_value import TtAsIdAttributeValue

LITERAL = "literal_as_id_attribute_value"
TT = "tt_as_id_attribute_value"


def _lints(source: str) -> list[str | None]:
    return [diagnostic.lint for diagnostic in run_rules(source)]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ('view! { <div id="my-identifier">Hello</div> }', [LITERAL]),
        ('view! { <div id=r#"raw"#/> }', [LITERAL]),
        ("view! { <div id=Ids::MyIdentifier/> }", []),
        ("view! { <div id=Ids/> }", []),
        ("view! { <div id=foo/> }", [TT]),
        ("view! { <div id={ format!(\"a-{}\", 1) }/> }", [TT]),
        ("view! { <div id=(a, b)/> }", [TT]),
        ("view! { <div id=42/> }", [TT]),
        ("view! { <div id=ids::Foo/> }", [TT]),
        ('view! { <div attr:id="x"/> }', [LITERAL]),
        ("view! { <div attr:id=foo/> }", [TT]),
        ('view! { <a id="a"/><b id="b"/> }', [LITERAL, LITERAL]),
        ('view! { <a id="a"/><b id=b/> }', [LITERAL, TT]),
        ('view! { <div class="c"/> }', []),
        ("view! { <div id id = x/> }", [TT]),
        ('html! { <div id="x"/> }', []),
        ('format!("id = {}", "x")', []),
        ('leptos::view! { <div id="x"/> }', [LITERAL]),
    ],
)
def test_rules(source: str, expected: list[str]) -> None:
    assert sorted(_lints(source)) == sorted(expected)


def test_literal_diagnostic_fields() -> None:
    source = 'view! { <div id="my-identifier">Hello, world!</div> }'
    (diagnostic,) = run_rules(source)
    assert diagnostic.lint == LITERAL
    assert diagnostic.severity is Severity.WARNING
    assert diagnostic.message == "literal string passed as id attribute value"
    assert diagnostic.help == (
        "for further information visit "
        "https://github.com/mondeja/leptos-unique-ids/tree/main/lints/"
        "literal_as_id_attribute_value#readme"
    )
    assert diagnostic.help_span is None
    assert diagnostic.default_level is True
    span = diagnostic.span
    assert source[span.start : span.end] == '"my-identifier"'


def test_tt_diagnostic_spans_whole_group() -> None:
    source = "view! { <div id={ let a = 1; a }/> }"
    (diagnostic,) = run_rules(source)
    assert diagnostic.lint == TT
    assert diagnostic.message == (
        "token tree that is not `Ids` enum passed as id attribute value"
    )
    assert diagnostic.help.endswith("/lints/tt_as_id_attribute_value#readme")
    span = diagnostic.span
    assert source[span.start : span.end] == "{ let a = 1; a }"


def test_diagnostics_follow_source_order_per_rule() -> None:
    source = 'view! { <a id="a"/><b id=b/><c id="c"/><d id=d/> }'
    diagnostics = run_rules(source).diagnostics
    literal = [d.span.start for d in diagnostics if d.lint == LITERAL]
    tt = [d.span.start for d in diagnostics if d.lint == TT]
    assert literal == sorted(literal) and len(literal) == 2
    assert tt == sorted(tt) and len(tt) == 2
    # Rules run in registry order for each invocation.
    assert [d.lint for d in diagnostics] == [LITERAL, LITERAL, TT, TT]


def test_rules_ignore_non_view_invocations_directly() -> None:
    invocation = first_invocation('html! { <div id="x"/> <div id=y/> }')
    sink = DiagnosticSink()
    for rule in build_rules():
        rule.check_mac(invocation, sink)
    assert len(sink) == 0


def test_deny_level_reports_errors() -> None:
    rules = build_rules({LITERAL: LintLevel.DENY})
    sink = run_rules('view! { <div id="x"/> <div id=y/> }', rules)
    by_lint = {d.lint: d for d in sink}
    assert by_lint[LITERAL].severity is Severity.ERROR
    assert by_lint[LITERAL].default_level is False
    assert by_lint[TT].severity is Severity.WARNING
    assert by_lint[TT].default_level is True
    assert sink.has_errors
    assert sink.count(Severity.WARNING) == 1


def test_allow_level_drops_rule() -> None:
    rules = build_rules({TT: LintLevel.ALLOW})
    assert [type(rule) for rule in rules] == [LiteralAsIdAttributeValue]
    assert len(run_rules("view! { <div id=y/> }", rules)) == 0


def test_build_rules_rejects_unknown_names() -> None:
    with pytest.raises(KeyError, match="no_such_lint"):
        build_rules({"no_such_lint": LintLevel.DENY})


def test_registry() -> None:
    assert LINTS == (LiteralAsIdAttributeValue, TtAsIdAttributeValue)
    assert set(LINTS_BY_NAME) == {LITERAL, TT}
    for lint in LINTS:
        assert lint.default is LintLevel.WARN
        assert lint.summary


def test_lint_rule_subclass_must_define_class_vars() -> None:
    with pytest.raises(TypeError, match="must define 'summary'"):

        class Incomplete(LintRule):  # noqa: F841
            name = "incomplete"

            def check_value(self, value):
                return None
