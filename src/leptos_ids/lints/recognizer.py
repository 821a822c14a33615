from __future__ import annotations

from ..types import MacroInvocation

VIEW_MACRO_NAME = "view"


def is_view_macro_call(invocation: MacroInvocation) -> bool:
    """Given a macro call, return whether it is a Leptos `view!` call."""
    return bool(invocation.path) and invocation.path[-1] == VIEW_MACRO_NAME
