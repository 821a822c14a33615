"""
The set of available lint rules.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..diagnostics import LintLevel
from .base import LintRule
from .literal_as_id_attribute_value import LiteralAsIdAttributeValue
from .tt_as_id_attribute_value import TtAsIdAttributeValue

# Run order per invocation.
LINTS: tuple[type[LintRule], ...] = (
    LiteralAsIdAttributeValue,
    TtAsIdAttributeValue,
)

LINTS_BY_NAME: dict[str, type[LintRule]] = {lint.name: lint for lint in LINTS}


def build_rules(levels: Mapping[str, LintLevel] | None = None) -> list[LintRule]:
    """
    Instantiate every lint, applying explicit levels from `levels`.

    Rules set to `allow` are dropped. Unknown names raise `KeyError`; config
    validation rejects them earlier.
    """
    levels = levels or {}
    unknown = sorted(set(levels) - set(LINTS_BY_NAME))
    if unknown:
        raise KeyError(f"Unknown lint(s): {', '.join(unknown)}")

    rules: list[LintRule] = []
    for lint in LINTS:
        rule = lint(levels.get(lint.name))
        if rule.level is LintLevel.ALLOW:
            continue
        rules.append(rule)
    return rules
