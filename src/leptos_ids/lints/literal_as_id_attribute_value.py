from __future__ import annotations

from .._typing import override
from ..types import AttributeValueNode
from ..types import Span
from ..types import TokenKind
from .base import LintRule
from .base import help_for


class LiteralAsIdAttributeValue(LintRule):
    """
    ### What it does

    Checks for string literals passed to id attribute values.

    ### Why is this bad?

    A literal id can collide with another one somewhere else in the DOM, which
    leads to unexpected behavior in the application. Ids should come from the
    `Ids` enum generated by `#[leptos_unique_ids(...)]` instead.

    ### Known problems

    Only id attribute values of the `view!` macro are checked, not the Leptos
    builder syntax.

    ### Example

    ```rust,ignore
    view! {
        <div id="my-identifier">Hello, world!</div>
    }
    ```

    Use instead:

    ```rust,ignore
    use ids::Ids;

    view! {
        <div id=Ids::MyIdentifier>Hello, world!</div>
    }
    ```
    """

    name = "literal_as_id_attribute_value"
    summary = "Check for literals passed to id attribute values."
    message = "literal string passed as id attribute value"
    help = help_for(name)

    @override
    def check_value(self, value: AttributeValueNode) -> Span | None:
        token = value.token
        if token is not None and token.kind is TokenKind.STR:
            return token.span
        return None
