from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import ClassVar

from ..diagnostics import DiagnosticSink
from ..diagnostics import LintLevel
from ..diagnostics import span_lint_and_help
from ..types import AttributeValueNode
from ..types import MacroInvocation
from ..types import Span
from .recognizer import is_view_macro_call
from .scanner import IdAttributeValueIter

HELP_URL = "https://github.com/mondeja/leptos-unique-ids/tree/main/lints/{name}#readme"


def help_for(name: str) -> str:
    return "for further information visit " + HELP_URL.format(name=name)


class LintRule(ABC):
    """
    A pre-expansion lint over the `id` attribute values of `view!` calls.

    Subclasses classify one value at a time in `check_value()`; the base class
    gates the invocation, runs a fresh scan and reports in scan order.
    """

    name: ClassVar[str]
    summary: ClassVar[str]
    message: ClassVar[str]
    help: ClassVar[str]
    default: ClassVar[LintLevel] = LintLevel.WARN

    def __init_subclass__(cls) -> None:
        super().__init_subclass__()
        class_vars = ["name", "summary", "message", "help"]
        for class_var in class_vars:
            if not hasattr(cls, class_var):
                raise TypeError(
                    f"LintRule subclass {cls.__name__} must define '{class_var}'"
                )

    def __init__(self, level: LintLevel | None = None) -> None:
        self.default_level = level is None
        self.level = self.default if level is None else level

    def check_mac(self, invocation: MacroInvocation, sink: DiagnosticSink) -> None:
        if not is_view_macro_call(invocation):
            return
        for value in IdAttributeValueIter(invocation):
            span = self.check_value(value)
            if span is not None:
                span_lint_and_help(sink, self, span, self.message, None, self.help)

    @abstractmethod
    def check_value(self, value: AttributeValueNode) -> Span | None:
        """Return the span to report for `value`, or None when it is accepted."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.value!r})"
