"""Template sources and the marker scan that splits them into text and code slices."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union
from typing_extensions import TypeAlias

from .parser import DEFAULT_END, DEFAULT_START


@dataclass(frozen=True)
class Template:
    """Raw template text, reusable with different variables and functions."""
    raw_content: str

    @classmethod
    def read_from(cls, path: Union[str, Path]) -> Template:
        return cls(Path(path).read_text(encoding="utf-8"))

    @classmethod
    def from_string(cls, raw_content: str) -> Template:
        return cls(raw_content)

    def slices(self, start: str = DEFAULT_START, end: str = DEFAULT_END) -> Iterator[TemplateSlice]:
        return iter_slices(self.raw_content, start, end)


@dataclass(frozen=True)
class TextSlice:
    value: str
    start_position: int
    end_position: int


@dataclass(frozen=True)
class CodeSlice:
    """A code block, markers included."""
    value: str
    start_position: int
    end_position: int


TemplateSlice: TypeAlias = Union[TextSlice, CodeSlice]


def iter_slices(text: str, start: str = DEFAULT_START, end: str = DEFAULT_END) -> Iterator[TemplateSlice]:
    """Yield alternating text and code slices in source order.

    A start marker without a matching end marker leaves the rest of the
    text as a text slice.
    """
    if not start or not end:
        raise ValueError("Code block markers must be non-empty")

    pos = 0
    length = len(text)

    while pos < length:
        open_at = text.find(start, pos)
        if open_at == -1:
            yield TextSlice(text[pos:], pos, length)
            return

        close_at = text.find(end, open_at + len(start))
        if close_at == -1:
            yield TextSlice(text[pos:], pos, length)
            return

        if pos < open_at:
            yield TextSlice(text[pos:open_at], pos, open_at)

        block_end = close_at + len(end)
        yield CodeSlice(text[open_at:block_end], open_at, block_end)
        pos = block_end
