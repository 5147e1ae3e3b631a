"""Resolve styled-component definitions to the elements they render."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from styledresolve.resolver import ResolveContext

__version__ = "0.1.0"


def resolve(
    source: str,
    filename: str = "input.json",
    components: Mapping[str, str] | None = None,
) -> ResolveContext:
    """Load ESTree JSON and resolve its styled-component definitions."""
    from styledresolve.loader import load_program
    from styledresolve.walker import resolve_program

    program = load_program(source, filename)
    return resolve_program(program, filename, components)
