from __future__ import annotations

import pytest

from stencil.parser import parse_code
from stencil.tree import (
    AnonymousNode,
    NamedNode,
    add_child,
    is_anonymous,
    is_named,
    pretty,
    with_identifier,
)
from stencil.units import Position, UNKNOWN


def rc(offset: int) -> Position:
    return Position.relative_to_code_start(offset)


def test_named_node_requires_identifier() -> None:
    with pytest.raises(ValueError):
        NamedNode("")


def test_children_are_stored_as_tuple() -> None:
    node = NamedNode("a", rc(0), [NamedNode("b", rc(2))])
    assert node.children == (NamedNode("b", rc(2)),)


def test_with_identifier_keeps_children() -> None:
    anon = AnonymousNode(rc(0), (NamedNode("x", rc(3)),))
    named = with_identifier(anon, "f", rc(1))

    assert named == NamedNode("f", rc(1), (NamedNode("x", rc(3)),))
    assert anon.children == (NamedNode("x", rc(3)),)


def test_add_child_returns_new_node() -> None:
    node = NamedNode("f", rc(0))
    grown = add_child(node, NamedNode("1", rc(2)))

    assert node.children == ()
    assert grown.children == (NamedNode("1", rc(2)),)
    assert is_named(grown)
    assert is_anonymous(add_child(AnonymousNode(), NamedNode("a")))


def test_pretty_lists_every_node() -> None:
    text = pretty(NamedNode("+", rc(0), (NamedNode("1", rc(2)),)))
    assert text == "+\tRelativeToCodeStart(0)\n  1\tRelativeToCodeStart(2)\n"


def test_pretty_nested_groups() -> None:
    lines = pretty(parse_code("(f (g x))")).splitlines()
    assert lines == [
        "<anonymous>\tRelativeToCodeStart(0)",
        "  f\tRelativeToCodeStart(1)",
        "    g\tRelativeToCodeStart(4)",
        "      x\tRelativeToCodeStart(6)",
    ]


def test_default_position_is_unknown() -> None:
    assert NamedNode("a").starts_at == UNKNOWN
    assert AnonymousNode().starts_at == UNKNOWN
