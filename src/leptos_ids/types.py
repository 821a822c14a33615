"""
Shared token and diagnostic-input types.

Token trees mirror the shape of a rustc token stream: an atom is a single
lexical token, a group is a delimited run of nested trees. Everything here is
frozen so that scanners and rules only ever hold references into the tree
produced by the tokenizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True, slots=True)
class Span:
    """
    Half-open character range `[start, end)` in a source text.

    `line`/`column` locate `start` and `end_line`/`end_column` locate `end`;
    both are 1-based, matching how rustc prints locations.
    """

    start: int
    end: int
    line: int
    column: int
    end_line: int
    end_column: int

    def to(self, other: Span) -> Span:
        """Span covering `self` through the end of `other`."""
        return Span(
            start=self.start,
            end=other.end,
            line=self.line,
            column=self.column,
            end_line=other.end_line,
            end_column=other.end_column,
        )


class TokenKind(Enum):
    IDENT = "ident"
    PUNCT = "punct"
    STR = "str"
    OTHER = "other"  # numbers, chars, byte chars, lifetimes


class StrStyle(Enum):
    """Encoding variants of a Rust string literal."""

    COOKED = "cooked"  # "..."
    RAW = "raw"  # r#"..."#
    BYTE = "byte"  # b"..."
    RAW_BYTE = "raw_byte"  # br#"..."#
    C = "c"  # c"..."
    RAW_C = "raw_c"  # cr#"..."#


class Delimiter(Enum):
    PARENTHESIS = "parenthesis"
    BRACKET = "bracket"
    BRACE = "brace"

    @property
    def open(self) -> str:
        return _DELIMITER_CHARS[self][0]

    @property
    def close(self) -> str:
        return _DELIMITER_CHARS[self][1]


_DELIMITER_CHARS = {
    Delimiter.PARENTHESIS: ("(", ")"),
    Delimiter.BRACKET: ("[", "]"),
    Delimiter.BRACE: ("{", "}"),
}


@dataclass(frozen=True, slots=True)
class SyntaxToken:
    """
    One lexical token.

    `text` is the token exactly as written. For identifiers `name` drops a
    raw `r#` prefix; for every other kind it equals `text`. `str_style` is set
    only for string literals.
    """

    kind: TokenKind
    text: str
    span: Span
    str_style: StrStyle | None = None

    @property
    def name(self) -> str:
        if self.kind is TokenKind.IDENT and self.text.startswith("r#"):
            return self.text[2:]
        return self.text

    def is_ident(self, name: str) -> bool:
        return self.kind is TokenKind.IDENT and self.name == name

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text


@dataclass(frozen=True, slots=True)
class Atom:
    token: SyntaxToken

    @property
    def span(self) -> Span:
        return self.token.span


@dataclass(frozen=True, slots=True)
class Group:
    """A delimited token tree. `span` covers both delimiters."""

    delimiter: Delimiter
    span: Span
    children: tuple[TokenTree, ...]


TokenTree = Union[Atom, Group]


@dataclass(frozen=True, slots=True)
class MacroInvocation:
    """
    A `path!(...)` call site as seen before macro expansion.

    `path` holds the segment names (`("leptos", "view")` for
    `leptos::view! { ... }`), `args` the top-level argument trees.
    """

    path: tuple[str, ...]
    args: tuple[TokenTree, ...]
    delimiter: Delimiter
    span: Span

    @property
    def name(self) -> str:
        return "::".join(self.path)


@dataclass(frozen=True, slots=True)
class AttributeValueNode:
    """The token tree bound to an `id` attribute through `=`."""

    node: TokenTree

    @property
    def span(self) -> Span:
        return self.node.span

    @property
    def token(self) -> SyntaxToken | None:
        """The underlying token when the value is an atom."""
        if isinstance(self.node, Atom):
            return self.node.token
        return None
