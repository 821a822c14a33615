from __future__ import annotations

NON_ASCII_MESSAGE = "Input contains non-ASCII characters."


def to_pascal_case(text: str) -> str:
    """
    Convert an id literal to the name of its `Ids` variant.

    The first alphanumeric character of every word is upper-cased; the rest of
    the word keeps its case. Non-alphanumeric characters end a word and are
    dropped, and a digit inside a word ends that word:

        "foo-bar-baz" -> "FooBarBaz"
        "fooBar"      -> "FooBar"
        "foo5bar"     -> "Foo5Bar"

    Raises:
        ValueError: if `text` contains non-ASCII characters.
    """
    if not text.isascii():
        raise ValueError(NON_ASCII_MESSAGE)

    out: list[str] = []
    at_word_boundary = True
    for char in text:
        if not char.isalnum():
            at_word_boundary = True
        elif at_word_boundary:
            out.append(char.upper())
            at_word_boundary = False
        else:
            out.append(char)
            if char.isdigit():
                at_word_boundary = True
    return "".join(out)
