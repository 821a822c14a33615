"""
Leptos unique ids - static checks for `view!` id attributes.

Lints the unexpanded token stream of Leptos `view!` macro calls so that every
`id` attribute is populated from the generated `Ids` registry, and expands
`#[leptos_unique_ids(...)]` registry declarations into Rust source.
"""

from __future__ import annotations

__version__ = "0.1.1"
