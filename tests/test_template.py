from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import pytest

from stencil.template import CodeSlice, Template, TemplateSlice, TextSlice, iter_slices


@dataclass(frozen=True)
class Case:
    """Slicer case: template text and the slices it splits into."""

    name: str
    text: str
    expected: Tuple[TemplateSlice, ...]
    markers: Tuple[str, str] = ("{{", "}}")


SLICE_CASES: List[Case] = [
    Case("empty", "", ()),
    Case("text-only", "plain", (TextSlice("plain", 0, 5),)),
    Case(
        "code-in-middle",
        "Hi {{ name }}!",
        (TextSlice("Hi ", 0, 3), CodeSlice("{{ name }}", 3, 13), TextSlice("!", 13, 14)),
    ),
    Case("code-only", "{{ a }}", (CodeSlice("{{ a }}", 0, 7),)),
    Case(
        "adjacent-blocks",
        "{{a}}{{b}}",
        (CodeSlice("{{a}}", 0, 5), CodeSlice("{{b}}", 5, 10)),
    ),
    Case(
        "unterminated",
        "Hi {{ name",
        (TextSlice("Hi {{ name", 0, 10),),
    ),
    Case(
        "unterminated-after-block",
        "{{ a }} and {{ b",
        (CodeSlice("{{ a }}", 0, 7), TextSlice(" and {{ b", 7, 16)),
    ),
    Case(
        "end-marker-before-start",
        "}} {{ a }}",
        (TextSlice("}} ", 0, 3), CodeSlice("{{ a }}", 3, 10)),
    ),
    Case(
        "custom-markers",
        "x <% y %> z",
        (TextSlice("x ", 0, 2), CodeSlice("<% y %>", 2, 9), TextSlice(" z", 9, 11)),
        markers=("<%", "%>"),
    ),
]


@pytest.mark.parametrize("case", SLICE_CASES, ids=lambda case: case.name)
def test_iter_slices(case: Case) -> None:
    start, end = case.markers
    assert tuple(iter_slices(case.text, start, end)) == case.expected


def test_slices_cover_the_whole_text() -> None:
    text = "a {{ b }} c {{ d }}{{ e"
    slices = list(iter_slices(text))

    assert "".join(s.value for s in slices) == text
    for before, after in zip(slices, slices[1:]):
        assert before.end_position == after.start_position


@pytest.mark.parametrize("markers", [("", "}}"), ("{{", "")], ids=["empty-start", "empty-end"])
def test_empty_markers_rejected(markers: Tuple[str, str]) -> None:
    with pytest.raises(ValueError):
        list(iter_slices("text", *markers))


def test_template_sources(tmp_path: Path) -> None:
    path = tmp_path / "greeting.txt"
    path.write_text("Hello, {{ name }}!\n", encoding="utf-8")

    template = Template.read_from(path)

    assert template == Template.from_string("Hello, {{ name }}!\n")
    assert [type(s) for s in template.slices()] == [TextSlice, CodeSlice, TextSlice]


def test_missing_template_file(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        Template.read_from(tmp_path / "missing.txt")
