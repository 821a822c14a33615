"""
Rust source tokenization.

This module defines the canonical token stream used by invocation discovery,
the lint rules and the registry generator. It follows rustc's lexer closely
enough that the token trees handed to the rules match what a pre-expansion
lint pass would see for a macro call: glued multi-character operators, raw
identifiers, every string literal flavour and nested delimited groups.
"""

from __future__ import annotations

import bisect

from ..errors import TokenizeError
from ..types import Atom
from ..types import Delimiter
from ..types import Group
from ..types import Span
from ..types import StrStyle
from ..types import SyntaxToken
from ..types import TokenKind
from ..types import TokenTree

# Longest match first. Mirrors the glued tokens of `rustc_ast::token::TokenKind`.
_OPERATORS: tuple[str, ...] = (
    "<<=",
    ">>=",
    "...",
    "..=",
    "::",
    "->",
    "=>",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "^=",
    "&=",
    "|=",
    "<<",
    ">>",
    "..",
    "=",
    "<",
    ">",
    "!",
    "~",
    "+",
    "-",
    "*",
    "/",
    "%",
    "^",
    "&",
    "|",
    "@",
    ".",
    ",",
    ";",
    ":",
    "#",
    "$",
    "?",
)

_OPENERS = {
    "(": Delimiter.PARENTHESIS,
    "[": Delimiter.BRACKET,
    "{": Delimiter.BRACE,
}
_CLOSERS = {
    ")": Delimiter.PARENTHESIS,
    "]": Delimiter.BRACKET,
    "}": Delimiter.BRACE,
}

# Byte order mark; skipped when it leads the source.
BOM = "\ufeff"

# Prefixes that turn an identifier-looking start into a string literal.
_STR_PREFIXES: tuple[tuple[str, StrStyle], ...] = (
    ("br", StrStyle.RAW_BYTE),
    ("cr", StrStyle.RAW_C),
    ("r", StrStyle.RAW),
    ("b", StrStyle.BYTE),
    ("c", StrStyle.C),
)


def _is_ident_start(char: str) -> bool:
    return char == "_" or char.isalpha()


def _is_ident_continue(char: str) -> bool:
    return char == "_" or char.isalnum()


class _Lexer:
    """Splits source text into a flat list of tokens, delimiters included."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def span(self, start: int, end: int) -> Span:
        line, column = self._location(start)
        end_line, end_column = self._location(end)
        return Span(
            start=start,
            end=end,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
        )

    def _location(self, offset: int) -> tuple[int, int]:
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def _peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.text[index] if index < len(self.text) else ""

    def _token(
        self,
        kind: TokenKind,
        start: int,
        str_style: StrStyle | None = None,
    ) -> SyntaxToken:
        return SyntaxToken(
            kind=kind,
            text=self.text[start : self.pos],
            span=self.span(start, self.pos),
            str_style=str_style,
        )

    def tokens(self) -> list[SyntaxToken]:
        out: list[SyntaxToken] = []
        text = self.text

        if text.startswith(BOM):
            self.pos = len(BOM)

        if text.startswith("#!", self.pos) and not text.startswith("#![", self.pos):
            newline = text.find("\n", self.pos)
            self.pos = len(text) if newline == -1 else newline

        while self.pos < len(text):
            char = text[self.pos]

            if char.isspace():
                self.pos += 1
                continue

            if text.startswith("//", self.pos):
                newline = text.find("\n", self.pos)
                self.pos = len(text) if newline == -1 else newline
                continue

            if text.startswith("/*", self.pos):
                self._skip_block_comment()
                continue

            start = self.pos

            if _is_ident_start(char):
                style = self._string_prefix()
                if style is not None:
                    out.append(self._string(start, style))
                elif char == "b" and self._peek(1) == "'":
                    self.pos += 1
                    out.append(self._char_or_lifetime(start, byte=True))
                else:
                    out.append(self._ident(start))
                continue

            if char.isdigit():
                out.append(self._number(start))
                continue

            if char == '"':
                out.append(self._string(start, StrStyle.COOKED))
                continue

            if char == "'":
                out.append(self._char_or_lifetime(start, byte=False))
                continue

            if char in _OPENERS or char in _CLOSERS:
                self.pos += 1
                out.append(self._token(TokenKind.PUNCT, start))
                continue

            for operator in _OPERATORS:
                if text.startswith(operator, self.pos):
                    self.pos += len(operator)
                    out.append(self._token(TokenKind.PUNCT, start))
                    break
            else:
                raise TokenizeError(
                    f"unknown start of token: {char!r}",
                    self.span(start, start + 1),
                )

        return out

    def _skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        text = self.text
        while self.pos < len(text):
            if text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        raise TokenizeError("unterminated block comment", self.span(start, start + 2))

    def _string_prefix(self) -> StrStyle | None:
        """Return the string style when the identifier start opens a literal."""
        text = self.text
        for prefix, style in _STR_PREFIXES:
            if not text.startswith(prefix, self.pos):
                continue
            after = self.pos + len(prefix)
            if style in (StrStyle.RAW, StrStyle.RAW_BYTE, StrStyle.RAW_C):
                hashes = after
                while hashes < len(text) and text[hashes] == "#":
                    hashes += 1
                if hashes < len(text) and text[hashes] == '"':
                    return style
            elif after < len(text) and text[after] == '"':
                return style
        return None

    def _string(self, start: int, style: StrStyle) -> SyntaxToken:
        text = self.text
        if style in (StrStyle.RAW, StrStyle.RAW_BYTE, StrStyle.RAW_C):
            self.pos += 1 if style is StrStyle.RAW else 2
            hashes = 0
            while text[self.pos] == "#":
                hashes += 1
                self.pos += 1
            self.pos += 1  # opening quote
            terminator = '"' + "#" * hashes
            end = text.find(terminator, self.pos)
            if end == -1:
                raise TokenizeError(
                    "unterminated raw string", self.span(start, self.pos)
                )
            self.pos = end + len(terminator)
            return self._token(TokenKind.STR, start, style)

        if style is not StrStyle.COOKED:
            self.pos += 1  # b / c prefix
        self.pos += 1  # opening quote
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\":
                self.pos += 2
                continue
            self.pos += 1
            if char == '"':
                return self._token(TokenKind.STR, start, style)
        kind = "byte string" if style is StrStyle.BYTE else "string"
        raise TokenizeError(
            f"unterminated double quote {kind}", self.span(start, start + 1)
        )

    def _char_or_lifetime(self, start: int, *, byte: bool) -> SyntaxToken:
        text = self.text
        quote = self.pos
        after = self._peek(1)

        if after == "\\":
            self.pos += 3
            while self.pos < len(text) and text[self.pos] not in "'\n":
                self.pos += 1
            if self._peek() != "'":
                raise TokenizeError(
                    "unterminated character literal", self.span(start, quote + 1)
                )
            self.pos += 1
            return self._token(TokenKind.OTHER, start)

        if after and after not in "'\n" and self._peek(2) == "'":
            self.pos += 3
            return self._token(TokenKind.OTHER, start)

        if not byte and after and _is_ident_start(after):
            self.pos += 1
            while self.pos < len(text) and _is_ident_continue(text[self.pos]):
                self.pos += 1
            return self._token(TokenKind.OTHER, start)

        raise TokenizeError(
            "unterminated character literal", self.span(start, quote + 1)
        )

    def _ident(self, start: int) -> SyntaxToken:
        text = self.text
        if text.startswith("r#", self.pos) and _is_ident_start(self._peek(2)):
            self.pos += 2
        while self.pos < len(text) and _is_ident_continue(text[self.pos]):
            self.pos += 1
        return self._token(TokenKind.IDENT, start)

    def _number(self, start: int) -> SyntaxToken:
        text = self.text
        decimal = not (
            text.startswith(("0x", "0o", "0b"), self.pos)
            or text.startswith(("0X", "0O", "0B"), self.pos)
        )
        while True:
            while self.pos < len(text) and _is_ident_continue(text[self.pos]):
                if (
                    decimal
                    and text[self.pos] in "eE"
                    and self._peek(1) in ("+", "-")
                    and self._peek(2).isdigit()
                ):
                    self.pos += 2
                    continue
                self.pos += 1
            if decimal and self._peek() == "." and self._peek(1).isdigit():
                self.pos += 1
                continue
            break
        return self._token(TokenKind.OTHER, start)


def tokenize_source(text: str) -> list[TokenTree]:
    """
    Tokenize Rust source into top-level token trees.

    Raises:
        TokenizeError: on unterminated literals/comments, unbalanced
            delimiters or characters that cannot start a token.
    """
    lexer = _Lexer(text)
    root: list[TokenTree] = []
    stack: list[tuple[SyntaxToken, Delimiter, list[TokenTree]]] = []

    for token in lexer.tokens():
        if token.kind is TokenKind.PUNCT and token.text in _OPENERS:
            stack.append((token, _OPENERS[token.text], []))
            continue

        if token.kind is TokenKind.PUNCT and token.text in _CLOSERS:
            if not stack:
                raise TokenizeError(
                    f"unexpected closing delimiter: `{token.text}`", token.span
                )
            opener, delimiter, children = stack.pop()
            if _CLOSERS[token.text] is not delimiter:
                raise TokenizeError(
                    f"mismatched closing delimiter: `{token.text}`", token.span
                )
            group = Group(
                delimiter=delimiter,
                span=opener.span.to(token.span),
                children=tuple(children),
            )
            (stack[-1][2] if stack else root).append(group)
            continue

        (stack[-1][2] if stack else root).append(Atom(token))

    if stack:
        opener, _, _ = stack[-1]
        raise TokenizeError("this file contains an unclosed delimiter", opener.span)

    return root
