from __future__ import annotations

import logging

import pytest

from stencil.tree import NamedNode
from stencil.types import (
    CompilationError,
    InvalidArguments,
    InvalidValues,
    StencilSyntaxError,
    UnexpectedElements,
    UnknownSymbol,
)
from stencil.units import Position
from stencil.utils import LOG_LEVEL_ENV, line_col, log_level_from_env


def rc(offset: int) -> Position:
    return Position.relative_to_code_start(offset)


@pytest.mark.parametrize(
    "cause, expected",
    [
        pytest.param(UnknownSymbol("x"), "Unknown symbol 'x'", id="unknown"),
        pytest.param(InvalidValues("bad", ("a", "b")), "bad: 'a', 'b'", id="values"),
        pytest.param(InvalidValues(), "Invalid values", id="values-default"),
        pytest.param(InvalidArguments(arguments=(NamedNode("a"),)), "Invalid arguments (1 argument(s))", id="arguments"),
        pytest.param(
            UnexpectedElements(NamedNode("a"), (NamedNode("b"),)),
            'Expected a single expression after NamedNode "a" at Unknown (0 children), '
            'got: NamedNode "b" at Unknown (0 children)',
            id="unexpected",
        ),
    ],
)
def test_cause_descriptions(cause, expected: str) -> None:
    assert cause.describe() == expected


def test_syntax_error_message_lists_known_positions() -> None:
    err = StencilSyntaxError(UnknownSymbol("x"), relative_pos=rc(4), invocation_pos=rc(0))
    assert str(err) == "Unknown symbol 'x' (at RelativeToCodeStart(4), invoked at RelativeToCodeStart(0))"
    assert str(StencilSyntaxError(UnknownSymbol("x"))) == "Unknown symbol 'x'"


def test_syntax_error_equality_and_hash() -> None:
    a = StencilSyntaxError.at_position(rc(1), UnknownSymbol("x"))
    b = StencilSyntaxError(UnknownSymbol("x"), relative_pos=rc(1))

    assert a == b
    assert a != StencilSyntaxError(UnknownSymbol("x"), relative_pos=rc(2))
    assert isinstance(hash(a), int)


def test_compilation_error_without_template_text() -> None:
    err = CompilationError(StencilSyntaxError(UnknownSymbol("x")), Position.absolute(5), "{{ x }}")

    assert err.symbol_position() == Position.absolute(5)
    assert str(err) == "Unknown symbol 'x' in '{{ x }}' (at Absolute(5))"


@pytest.mark.parametrize(
    "offset, expected",
    [
        pytest.param(0, (1, 1), id="start"),
        pytest.param(3, (1, 4), id="first-line"),
        pytest.param(4, (2, 1), id="second-line"),
        pytest.param(6, (2, 3), id="second-line-middle"),
    ],
)
def test_line_col(offset: int, expected) -> None:
    assert line_col("abc\ndef", offset) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param(None, logging.WARNING, id="unset"),
        pytest.param("debug", logging.DEBUG, id="name"),
        pytest.param("10", 10, id="number"),
        pytest.param("nonsense", logging.WARNING, id="invalid"),
    ],
)
def test_log_level_from_env(raw, expected: int, monkeypatch: pytest.MonkeyPatch) -> None:
    if raw is None:
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    else:
        monkeypatch.setenv(LOG_LEVEL_ENV, raw)

    assert log_level_from_env() == expected
