"""
Macro call-site discovery.

These functions convert the canonical token trees (`tokenize_source`) into the
`MacroInvocation` structures consumed by the lint rules. Discovery follows the
pre-expansion view of a crate: the arguments of a macro call are unparsed
tokens, so calls nested inside them are not call sites of their own.
"""

from __future__ import annotations

from collections.abc import Iterator
from collections.abc import Sequence

from ..types import Atom
from ..types import Group
from ..types import MacroInvocation
from ..types import TokenKind
from ..types import TokenTree

# Keywords that may be followed by `!` in ordinary expressions
# (`return !(x)`, `if !(a) {}`); a single-segment path made of one of these is
# never a macro name.
RUST_KEYWORDS = frozenset(
    {
        "as",
        "async",
        "await",
        "box",
        "break",
        "const",
        "continue",
        "dyn",
        "else",
        "enum",
        "extern",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "match",
        "mod",
        "move",
        "mut",
        "pub",
        "ref",
        "return",
        "static",
        "struct",
        "trait",
        "type",
        "unsafe",
        "use",
        "where",
        "while",
        "yield",
    }
)


def _is_ident(tree: TokenTree | None) -> bool:
    return isinstance(tree, Atom) and tree.token.kind is TokenKind.IDENT


def _is_punct(tree: TokenTree | None, text: str) -> bool:
    return isinstance(tree, Atom) and tree.token.is_punct(text)


def _at(trees: Sequence[TokenTree], index: int) -> TokenTree | None:
    return trees[index] if index < len(trees) else None


def _match_invocation(
    trees: Sequence[TokenTree], start: int
) -> tuple[MacroInvocation, int] | None:
    """
    Try to read `[::] ident (:: ident)* ! Group` at `start`.

    Returns the invocation and the index just past its argument group.
    """
    index = start
    if _is_punct(_at(trees, index), "::"):
        index += 1

    segments: list[str] = []
    while True:
        node = _at(trees, index)
        if not isinstance(node, Atom) or node.token.kind is not TokenKind.IDENT:
            return None
        segments.append(node.token.name)
        index += 1
        if _is_punct(_at(trees, index), "::"):
            index += 1
            continue
        break

    if not _is_punct(_at(trees, index), "!"):
        return None
    args = _at(trees, index + 1)
    if not isinstance(args, Group):
        return None
    if len(segments) == 1 and segments[0] in RUST_KEYWORDS:
        return None

    invocation = MacroInvocation(
        path=tuple(segments),
        args=args.children,
        delimiter=args.delimiter,
        span=trees[start].span.to(args.span),
    )
    return invocation, index + 2


def _macro_rules_end(trees: Sequence[TokenTree], start: int) -> int | None:
    """Index past a `macro_rules! name { ... }` definition starting at `start`."""
    head = trees[start]
    if not (isinstance(head, Atom) and head.token.is_ident("macro_rules")):
        return None
    if not _is_punct(_at(trees, start + 1), "!"):
        return None
    if not _is_ident(_at(trees, start + 2)):
        return None
    if not isinstance(_at(trees, start + 3), Group):
        return None
    return start + 4


def discover_macro_invocations(
    trees: Sequence[TokenTree],
) -> Iterator[MacroInvocation]:
    """
    Yield every macro call site in `trees`, in source order.

    Groups that are not macro arguments are searched recursively (function
    bodies, module blocks, attribute contents). `macro_rules!` definitions are
    skipped entirely.
    """
    index = 0
    while index < len(trees):
        skip_to = _macro_rules_end(trees, index)
        if skip_to is not None:
            index = skip_to
            continue

        matched = _match_invocation(trees, index)
        if matched is not None:
            invocation, index = matched
            yield invocation
            continue

        tree = trees[index]
        if isinstance(tree, Group):
            yield from discover_macro_invocations(tree.children)
        index += 1
