from __future__ import annotations

from pathlib import Path

import pytest

from stencil import (
    CompilationError,
    Template,
    compile_template_from,
    compile_template_from_file,
    compile_template_from_string,
)
from stencil.stdlib import std_functions

TEMPLATE = (
    "Some template. {{ hello }}.\n"
    "\n"
    "This shows a function evaluation usage example:\n"
    "2 + 2 = {{ + 2 2 }}"
)
EXPECTED = (
    "Some template. Hello world!.\n"
    "\n"
    "This shows a function evaluation usage example:\n"
    "2 + 2 = 4"
)


def test_compile_template_from_string() -> None:
    result = compile_template_from_string(TEMPLATE, {"hello": "Hello world!"}, std_functions())
    assert result == EXPECTED


def test_compile_template_from_file(tmp_path: Path) -> None:
    path = tmp_path / "template.txt"
    path.write_text(TEMPLATE, encoding="utf-8")

    assert compile_template_from_file(path, {"hello": "Hello world!"}, std_functions()) == EXPECTED


def test_compile_template_from_template() -> None:
    result = compile_template_from(Template("2 + 3 = {{ + 2 3 }}"), functions=std_functions())
    assert result == "2 + 3 = 5"


def test_plain_callables_are_accepted() -> None:
    def shout(evaluator, parameters, context) -> str:
        return "".join(evaluator.evaluate(p, context) for p in parameters).upper()

    assert compile_template_from_string('{{ shout "hey" name }}', {"name": "you"}, {"shout": shout}) == "HEYYOU"


def test_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        compile_template_from_file(tmp_path / "nope.txt")


def test_errors_surface_as_compilation_error() -> None:
    with pytest.raises(CompilationError):
        compile_template_from_string("{{ + 1 2 }}")
