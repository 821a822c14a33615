from __future__ import annotations

from pathlib import Path

import pytest

from leptos_ids.errors import RegistryInputError
from leptos_ids.registry.generator import COMMA_MESSAGE
from leptos_ids.registry.generator import DUPLICATED_LITERAL_MESSAGE
from leptos_ids.registry.generator import EMPTY_LITERAL_MESSAGE
from leptos_ids.registry.generator import ENUM_SHAPE_MESSAGE
from leptos_ids.registry.generator import NOT_A_STRING_MESSAGE
from leptos_ids.registry.generator import UNEXPECTED_TOKEN_MESSAGE
from leptos_ids.registry.generator import RegistryDeclaration
from leptos_ids.registry.generator import expand_registry
from leptos_ids.registry.generator import find_registry_declarations
from leptos_ids.registry.generator import parse_registry
from leptos_ids.registry.pascal_case import NON_ASCII_MESSAGE
from leptos_ids.token_syntax.tokenization import tokenize_source


def _golden_dir() -> Path:
    return Path(__file__).resolve().parent / "goldens" / "registry"


def _fixtures_dir() -> Path:
    return Path(__file__).resolve().parent / "fixtures" / "registry"


def _declaration(source: str) -> RegistryDeclaration:
    (declaration,) = find_registry_declarations(tokenize_source(source))
    return declaration


@pytest.mark.parametrize("name", ["basic", "attributes"])
def test_expansion_golden(name: str) -> None:
    source = (_fixtures_dir() / f"{name}.rs").read_text(encoding="utf-8")
    expected_path = _golden_dir() / f"{name}.rs"

    actual = expand_registry(_declaration(source))

    if not expected_path.exists():
        pytest.fail(
            "Missing golden file.\n" f"Add {expected_path} with:\n" + actual
        )

    assert actual == expected_path.read_text(encoding="utf-8")


def test_variant_names_follow_declaration_order() -> None:
    registry = parse_registry(
        _declaration('#[leptos_unique_ids("zeta", "alpha", "mid-dle")] enum Ids {}')
    )
    assert [variant.name for variant in registry.variants] == [
        "Zeta",
        "Alpha",
        "MidDle",
    ]
    assert [variant.value for variant in registry.variants] == [
        "zeta",
        "alpha",
        "mid-dle",
    ]
    assert registry.visibility is None


def test_expansion_is_deterministic() -> None:
    source = '#[leptos_unique_ids("a", "b-c")] pub enum Ids {}'
    assert expand_registry(_declaration(source)) == expand_registry(
        _declaration(source)
    )


def test_empty_list_yields_empty_enum() -> None:
    actual = expand_registry(
        _declaration("#[leptos_unique_ids()] enum Ids {}"),
        into_str=False,
        into_attribute_value=False,
    )
    assert actual == (
        "enum Ids {\n"
        "}\n"
        "\n"
        "impl Ids {\n"
        "    fn as_str(&self) -> &'static str {\n"
        "        match *self {}\n"
        "    }\n"
        "}\n"
    )


def test_bare_attribute_is_an_empty_list() -> None:
    registry = parse_registry(_declaration("#[leptos_unique_ids] pub enum Ids {}"))
    assert registry.variants == ()
    assert registry.visibility == "pub"


def test_conversion_flags() -> None:
    declaration = _declaration('#[leptos_unique_ids("a")] pub enum Ids {}')
    with_both = expand_registry(declaration)
    assert "Into<&'static str> for Ids" in with_both
    assert "IntoAttributeValue for Ids" in with_both

    without_str = expand_registry(declaration, into_str=False)
    assert "Into<&'static str> for Ids" not in without_str
    assert "IntoAttributeValue for Ids" in without_str

    without_attr = expand_registry(declaration, into_attribute_value=False)
    assert "Into<&'static str> for Ids" in without_attr
    assert "IntoAttributeValue" not in without_attr


def test_values_are_emitted_as_rust_strings() -> None:
    actual = expand_registry(
        _declaration('#[leptos_unique_ids(r#"say "hi""#)] enum Ids {}')
    )
    assert '#[doc = "say \\"hi\\""]' in actual
    assert 'Self::SayHi => "say \\"hi\\"",' in actual


def test_other_attributes_are_ignored() -> None:
    source = """
#[derive(Debug)]
struct Other;

#[leptos_unique_ids("a")]
pub enum Ids {}
"""
    trees = tokenize_source(source)
    declarations = list(find_registry_declarations(trees))
    assert len(declarations) == 1


def test_hash_without_bracket_group_is_not_an_attribute() -> None:
    trees = tokenize_source('x # (leptos_unique_ids("a")) enum Ids {} #')
    assert list(find_registry_declarations(trees)) == []


def test_leading_outer_attributes_are_kept() -> None:
    registry = parse_registry(
        _declaration('#[leptos_unique_ids("a")] #[derive(Debug)] pub enum Ids {}')
    )
    assert registry.attributes == ("#[derive(Debug)]",)


@pytest.mark.parametrize(
    ("source", "message", "offending"),
    [
        ('#[leptos_unique_ids("a", "a")] enum Ids {}', DUPLICATED_LITERAL_MESSAGE, 25),
        ('#[leptos_unique_ids("a", "")] enum Ids {}', EMPTY_LITERAL_MESSAGE, 25),
        ('#[leptos_unique_ids("a"; "b")] enum Ids {}', COMMA_MESSAGE, 23),
        ("#[leptos_unique_ids(a)] enum Ids {}", UNEXPECTED_TOKEN_MESSAGE, 20),
        ('#[leptos_unique_ids(("a"))] enum Ids {}', UNEXPECTED_TOKEN_MESSAGE, 20),
        ("#[leptos_unique_ids(1)] enum Ids {}", NOT_A_STRING_MESSAGE, 20),
        ('#[leptos_unique_ids(b"a")] enum Ids {}', NOT_A_STRING_MESSAGE, 20),
        ('#[leptos_unique_ids("ñ")] enum Ids {}', NON_ASCII_MESSAGE, 20),
        ('#[leptos_unique_ids("a")] enum Other {}', ENUM_SHAPE_MESSAGE, 26),
        ('#[leptos_unique_ids("a")] enum Ids { A }', ENUM_SHAPE_MESSAGE, 26),
        ('#[leptos_unique_ids("a")] struct Ids;', ENUM_SHAPE_MESSAGE, 26),
    ],
)
def test_registry_input_errors(source: str, message: str, offending: int) -> None:
    with pytest.raises(RegistryInputError) as excinfo:
        parse_registry(_declaration(source))
    error = excinfo.value
    assert error.message == message
    assert error.span is not None
    assert error.span.start == offending


@pytest.mark.parametrize(
    ("literals", "message"),
    [
        ('"5th"', "Generated variant name `5th` is not a valid identifier."),
        ('"---"', "Generated variant name `` is not a valid identifier."),
        ('"self"', "Generated variant name `Self` is not a valid identifier."),
        ('"foo-bar", "foo_bar"', "Duplicated variant name `FooBar` generated."),
    ],
)
def test_generated_names_are_validated(literals: str, message: str) -> None:
    source = f"#[leptos_unique_ids({literals})] enum Ids {{}}"
    with pytest.raises(RegistryInputError) as excinfo:
        parse_registry(_declaration(source))
    assert excinfo.value.message == message
