"""
Attribute value scanner for `view!` macro calls.

Walks the top-level argument trees of one invocation and yields the tree bound
to each `id` attribute. The automaton has two states:

- SCANNING: an `id` identifier moves to SEEN_IDENTIFIER; everything else
  (tag names, text, other attributes, groups) is skipped.
- SEEN_IDENTIFIER: a lone `=` captures the following tree and goes back to
  SCANNING. Any other tree goes back to SCANNING *without* being consumed, so
  it is looked at again (`id id = x` captures `x`).

Prefixes of qualified spellings (`attr:id`) are skipped like any other token,
so they need no special handling. Groups are never entered; a group in value
position is yielded whole.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from enum import auto

from ..types import Atom
from ..types import AttributeValueNode
from ..types import MacroInvocation
from ..types import TokenTree

ID_ATTRIBUTE = "id"


class ScanState(Enum):
    SCANNING = auto()
    SEEN_IDENTIFIER = auto()


def _is_id_ident(tree: TokenTree) -> bool:
    return isinstance(tree, Atom) and tree.token.is_ident(ID_ATTRIBUTE)


def _is_eq(tree: TokenTree) -> bool:
    return isinstance(tree, Atom) and tree.token.is_punct("=")


class IdAttributeValueIter:
    """
    Single-use iterator over the `id` attribute values of one invocation.

    The scan is forward-only: once exhausted it stays exhausted, and a new
    scan needs a new instance.
    """

    def __init__(self, invocation: MacroInvocation) -> None:
        self._trees = invocation.args
        self._index = 0
        self.state = ScanState.SCANNING

    def __iter__(self) -> Iterator[AttributeValueNode]:
        return self

    def __next__(self) -> AttributeValueNode:
        trees = self._trees
        while self._index < len(trees):
            tree = trees[self._index]

            if self.state is ScanState.SCANNING:
                if _is_id_ident(tree):
                    self.state = ScanState.SEEN_IDENTIFIER
                self._index += 1
                continue

            # SEEN_IDENTIFIER
            self.state = ScanState.SCANNING
            if not _is_eq(tree):
                # Re-evaluate this tree under SCANNING rules.
                continue
            value_index = self._index + 1
            if value_index >= len(trees):
                self._index = value_index
                break
            self._index = value_index + 1
            return AttributeValueNode(node=trees[value_index])

        self.state = ScanState.SCANNING
        raise StopIteration
