from __future__ import annotations

from .._typing import override
from ..types import AttributeValueNode
from ..types import Span
from ..types import TokenKind
from .base import LintRule
from .base import help_for

REGISTRY_ENUM = "Ids"


class TtAsIdAttributeValue(LintRule):
    """
    ### What it does

    Checks for token trees passed as id attribute values, except for `Ids`
    enum variants.

    ### Why is this bad?

    Passing the `Ids` enum is the only way to be sure that an id is unique in
    the DOM. Variables, expressions and blocks can hold any string.

    ### Known problems

    Only id attribute values of the `view!` macro are checked, not the Leptos
    builder syntax. The `Ids` check is lexical: any path starting with `Ids`
    is accepted.

    ### Example

    ```rust,ignore
    let foo = "my-identifier";

    view! {
        <div id=foo>Hello, world!</div>
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

    name = "tt_as_id_attribute_value"
    summary = (
        "Check for token trees passed as id attribute values "
        "(except for `Ids` enum variants)."
    )
    message = "token tree that is not `Ids` enum passed as id attribute value"
    help = help_for(name)

    @override
    def check_value(self, value: AttributeValueNode) -> Span | None:
        token = value.token
        if token is not None:
            if token.is_ident(REGISTRY_ENUM):
                return None
            if token.kind is TokenKind.STR:
                # reported by `literal_as_id_attribute_value`
                return None
        # Groups report their whole delimited region.
        return value.span
