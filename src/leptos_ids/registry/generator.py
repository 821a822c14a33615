"""
Expansion of `#[leptos_unique_ids(...)]` registry declarations.

A declaration is an attribute listing string literals, applied to an empty
enum named `Ids`:

    #[leptos_unique_ids("language-selector", "preview-download-svg-button")]
    pub enum Ids {}

Expansion validates the literals and emits the populated enum, an `as_str()`
accessor and (optionally) conversions into `&'static str` and into Leptos'
`IntoAttributeValue`. Variant names are derived with `to_pascal_case()`, so
they are deterministic and follow declaration order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import RegistryInputError
from ..types import Atom
from ..types import Delimiter
from ..types import Group
from ..types import Span
from ..types import StrStyle
from ..types import SyntaxToken
from ..types import TokenKind
from ..types import TokenTree
from .pascal_case import to_pascal_case

logger = logging.getLogger(__name__)

ATTRIBUTE_NAME = "leptos_unique_ids"
ENUM_NAME = "Ids"

ENUM_SHAPE_MESSAGE = "Expected an enum formed with the token tree `enum Ids {}`."
NOT_A_STRING_MESSAGE = "Literal must be a string literal"
EMPTY_LITERAL_MESSAGE = "String literals in the attribute cannot be empty."
DUPLICATED_LITERAL_MESSAGE = "Duplicated string literal found."
COMMA_MESSAGE = "Expected a comma between string literals in the attribute."
UNEXPECTED_TOKEN_MESSAGE = "Expected only string literals and commas in the attribute."


@dataclass(frozen=True, slots=True)
class RegistryDeclaration:
    """An attribute occurrence plus the item it is applied to."""

    arguments: tuple[TokenTree, ...]
    item: tuple[TokenTree, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class IdsVariant:
    name: str
    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class IdsRegistry:
    """A validated declaration, ready to be emitted."""

    visibility: str | None
    attributes: tuple[str, ...]
    variants: tuple[IdsVariant, ...]


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _attribute_arguments(group: Group) -> tuple[TokenTree, ...] | None:
    """
    Arguments of `[leptos_unique_ids(...)]` (or a path ending in it), or
    None when the bracket group is some other attribute.
    """
    children = group.children
    index = 0
    name: str | None = None
    while index < len(children):
        child = children[index]
        if isinstance(child, Atom) and child.token.kind is TokenKind.IDENT:
            name = child.token.name
            index += 1
            nxt = children[index] if index < len(children) else None
            if isinstance(nxt, Atom) and nxt.token.is_punct("::"):
                index += 1
                continue
        break

    if name != ATTRIBUTE_NAME:
        return None
    rest = children[index:]
    if not rest:
        return ()
    if (
        len(rest) == 1
        and isinstance(rest[0], Group)
        and rest[0].delimiter is Delimiter.PARENTHESIS
    ):
        return rest[0].children
    return None


def _outer_attribute_body(trees: Sequence[TokenTree], index: int) -> Group | None:
    """The `[...]` group of an outer attribute starting at `index`, if any."""
    head = trees[index]
    if not (isinstance(head, Atom) and head.token.is_punct("#")):
        return None
    body = trees[index + 1] if index + 1 < len(trees) else None
    if isinstance(body, Group) and body.delimiter is Delimiter.BRACKET:
        return body
    return None


def _item_after(trees: Sequence[TokenTree], start: int) -> tuple[TokenTree, ...]:
    """Trees of the item following an attribute, through its brace body."""
    item: list[TokenTree] = []
    for tree in trees[start:]:
        if isinstance(tree, Atom) and tree.token.is_punct(";"):
            break
        item.append(tree)
        if isinstance(tree, Group) and tree.delimiter is Delimiter.BRACE:
            break
    return tuple(item)


def find_registry_declarations(
    trees: Sequence[TokenTree],
) -> Iterator[RegistryDeclaration]:
    """Yield every `#[leptos_unique_ids(...)]` declaration, in source order."""
    index = 0
    while index < len(trees):
        tree = trees[index]
        body = _outer_attribute_body(trees, index)
        if body is not None:
            arguments = _attribute_arguments(body)
            if arguments is not None:
                item = _item_after(trees, index + 2)
                end = item[-1].span if item else body.span
                yield RegistryDeclaration(
                    arguments=arguments,
                    item=item,
                    span=tree.span.to(end),
                )
                index += 2 + len(item)
                continue
        if isinstance(tree, Group):
            yield from find_registry_declarations(tree.children)
        index += 1


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


_NO_SPACE_BEFORE = {",", ";", "::", ".", ":"}
_NO_SPACE_AFTER = {"::", "#", "&", ".", "!"}


def _render(trees: Sequence[TokenTree]) -> str:
    """Rust-ish source text for `trees`, e.g. `#[derive(Clone, Copy)]`."""
    out = ""
    previous: TokenTree | None = None
    for tree in trees:
        if isinstance(tree, Group):
            piece = tree.delimiter.open + _render(tree.children) + tree.delimiter.close
            glued = isinstance(previous, Atom) and (
                previous.token.kind is TokenKind.IDENT
                or previous.token.text in _NO_SPACE_AFTER
            )
        else:
            piece = tree.token.text
            glued = piece in _NO_SPACE_BEFORE or (
                isinstance(previous, Atom) and previous.token.text in _NO_SPACE_AFTER
            )
        if out and not glued:
            out += " "
        out += piece
        previous = tree
    return out


def _parse_item(
    item: Sequence[TokenTree], fallback: Span
) -> tuple[str | None, tuple[str, ...]]:
    """
    Check that `item` is `[#[...]]* [pub [(...)]] enum Ids {}` and return its
    visibility and outer attributes.
    """
    index = 0
    attributes: list[str] = []
    while index < len(item) and _outer_attribute_body(item, index) is not None:
        attributes.append(_render(item[index : index + 2]))
        index += 2

    visibility: str | None = None
    head = item[index] if index < len(item) else None
    if isinstance(head, Atom) and head.token.is_ident("pub"):
        visibility = "pub"
        index += 1
        restriction = item[index] if index < len(item) else None
        if (
            isinstance(restriction, Group)
            and restriction.delimiter is Delimiter.PARENTHESIS
        ):
            visibility += "(" + _render(restriction.children) + ")"
            index += 1

    rest = item[index:]
    enum_span = next(
        (
            tree.span
            for tree in item
            if isinstance(tree, Atom) and tree.token.is_ident("enum")
        ),
        item[0].span if item else fallback,
    )
    shape_ok = (
        len(rest) == 3
        and isinstance(rest[0], Atom)
        and rest[0].token.is_ident("enum")
        and isinstance(rest[1], Atom)
        and rest[1].token.is_ident(ENUM_NAME)
        and isinstance(rest[2], Group)
        and rest[2].delimiter is Delimiter.BRACE
        and not rest[2].children
    )
    if not shape_ok:
        raise RegistryInputError(ENUM_SHAPE_MESSAGE, enum_span)
    return visibility, tuple(attributes)


def value_from_literal(token: SyntaxToken) -> str:
    """Text of a string literal without its prefix, hashes and quotes."""
    text = token.text
    style = token.str_style
    if token.kind is not TokenKind.STR or style in (StrStyle.BYTE, StrStyle.RAW_BYTE):
        raise RegistryInputError(NOT_A_STRING_MESSAGE, token.span)
    if style is StrStyle.COOKED:
        return text[1:-1]
    if style is StrStyle.C:
        return text[2:-1]
    body = text[1:] if style is StrStyle.RAW else text[2:]
    hashes = len(body) - len(body.lstrip("#"))
    return body[hashes + 1 : len(body) - hashes - 1]


def _is_valid_variant_name(name: str) -> bool:
    return bool(name) and not name[0].isdigit() and name != "Self"


def parse_registry(declaration: RegistryDeclaration) -> IdsRegistry:
    """
    Validate a declaration.

    Raises:
        RegistryInputError: positioned at the first offending token.
    """
    visibility, attributes = _parse_item(declaration.item, declaration.span)

    variants: list[IdsVariant] = []
    seen_values: set[str] = set()
    seen_names: set[str] = set()
    for tree in declaration.arguments:
        if isinstance(tree, Group):
            raise RegistryInputError(UNEXPECTED_TOKEN_MESSAGE, tree.span)
        token = tree.token
        if token.kind is TokenKind.PUNCT:
            if token.text != ",":
                raise RegistryInputError(COMMA_MESSAGE, token.span)
            continue
        if token.kind is TokenKind.IDENT:
            raise RegistryInputError(UNEXPECTED_TOKEN_MESSAGE, token.span)

        value = value_from_literal(token)
        if not value:
            raise RegistryInputError(EMPTY_LITERAL_MESSAGE, token.span)
        if value in seen_values:
            raise RegistryInputError(DUPLICATED_LITERAL_MESSAGE, token.span)

        try:
            name = to_pascal_case(value)
        except ValueError as e:
            raise RegistryInputError(str(e), token.span) from e
        if not _is_valid_variant_name(name):
            raise RegistryInputError(
                f"Generated variant name `{name}` is not a valid identifier.",
                token.span,
            )
        if name in seen_names:
            raise RegistryInputError(
                f"Duplicated variant name `{name}` generated.", token.span
            )

        seen_values.add(value)
        seen_names.add(name)
        variants.append(IdsVariant(name=name, value=value, span=token.span))

    logger.debug("Parsed %d Ids variant(s)", len(variants))
    return IdsRegistry(
        visibility=visibility,
        attributes=attributes,
        variants=tuple(variants),
    )


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------


def _rust_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def emit_registry(
    registry: IdsRegistry,
    *,
    into_str: bool = True,
    into_attribute_value: bool = True,
) -> str:
    """Render the Rust source generated for a validated registry."""
    prefix = f"{registry.visibility} " if registry.visibility else ""
    lines: list[str] = list(registry.attributes)

    lines.append(f"{prefix}enum {ENUM_NAME} {{")
    for variant in registry.variants:
        lines.append(f"    #[doc = {_rust_string(variant.value)}]")
        lines.append(f"    {variant.name},")
    lines.append("}")
    lines.append("")

    lines.append(f"impl {ENUM_NAME} {{")
    lines.append(f"    {prefix}fn as_str(&self) -> &'static str {{")
    if registry.variants:
        lines.append("        match self {")
        for variant in registry.variants:
            lines.append(
                f"            Self::{variant.name} => {_rust_string(variant.value)},"
            )
        lines.append("        }")
    else:
        lines.append("        match *self {}")
    lines.append("    }")
    lines.append("}")

    if into_str:
        lines.extend(
            [
                "",
                f"impl ::std::convert::Into<&'static str> for {ENUM_NAME} {{",
                "    fn into(self) -> &'static str {",
                "        self.as_str()",
                "    }",
                "}",
            ]
        )

    if into_attribute_value:
        lines.extend(
            [
                "",
                f"impl ::leptos::prelude::IntoAttributeValue for {ENUM_NAME} {{",
                "    type Output = &'static str;",
                "",
                "    fn into_attribute_value(self) -> Self::Output {",
                "        self.as_str()",
                "    }",
                "}",
            ]
        )

    return "\n".join(lines) + "\n"


def expand_registry(
    declaration: RegistryDeclaration,
    *,
    into_str: bool = True,
    into_attribute_value: bool = True,
) -> str:
    """Validate `declaration` and return the generated Rust source."""
    registry = parse_registry(declaration)
    return emit_registry(
        registry,
        into_str=into_str,
        into_attribute_value=into_attribute_value,
    )
