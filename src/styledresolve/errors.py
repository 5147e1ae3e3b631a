"""Error and diagnostic types with formatted source context."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from styledresolve.location import Span


def _source_context(message: str, span: Span, source: str, filename: str) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        underline_len = max(1, span.end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(span.start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{span.start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LoadError(Exception):
    """Raised when ESTree JSON cannot be decoded into a syntax tree."""

    def __init__(
        self,
        message: str,
        span: Span | None,
        source: str,
        path: str | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.source = source
        self.path = path
        super().__init__(self.format())

    def format(self, filename: str = "input.json") -> str:
        if self.span is None:
            where = f" (at {self.path})" if self.path else ""
            return f"error: {self.message}\n  --> {filename}{where}"
        result = _source_context(self.message, self.span, self.source, filename)
        if self.path:
            result += f"\n  at {self.path}"
        return result


_PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


def interpolate(template: str, data: dict[str, Any]) -> str:
    """Replace ``{{ key }}`` placeholders, leaving unknown keys untouched."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in data:
            return str(data[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, template)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem reported against a syntax node."""

    message: str
    span: Span | None
    data: dict[str, Any] = field(default_factory=dict, compare=False)

    def format(self, filename: str = "input.json") -> str:
        if self.span is None:
            return f"warning: {self.message}\n  --> {filename}"
        return (
            f"warning: {self.message}\n"
            f"  --> {filename}:{self.span.start.line}:{self.span.start.column}"
        )
