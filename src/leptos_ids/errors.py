"""
Exceptions raised by the tokenizer, the registry generator and configuration
loading.

Lint rules never raise: policy violations are diagnostics, not exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Span


class LeptosIdsError(Exception):
    """Base class for all errors raised by this package."""


class PositionedError(LeptosIdsError):
    """An error anchored to a source span."""

    def __init__(self, message: str, span: Span | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.message} (line {self.span.line}, column {self.span.column})"


class TokenizeError(PositionedError):
    """Source text could not be split into token trees."""


class RegistryInputError(PositionedError):
    """A `#[leptos_unique_ids(...)]` declaration is malformed."""


class ConfigError(LeptosIdsError):
    """Configuration file or values are invalid."""
