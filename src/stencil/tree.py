"""Syntax tree nodes produced by the parser and consumed by the evaluator.

Nodes are immutable values. Building a tree never mutates a node in place:
`with_identifier` and `add_child` return new nodes carrying the old children.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, TypeGuard, Union
from typing_extensions import TypeAlias

from .units import Position, UNKNOWN


@dataclass(frozen=True)
class NamedNode:
    """A symbol with its arguments: `identifier child0 child1 ...`.

    `starts_at` locates the identifier token, not the span of the subtree.
    """
    identifier: str
    starts_at: Position = UNKNOWN
    children: Tuple['SyntaxNode', ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("NamedNode identifier must be non-empty")
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    def __str__(self) -> str:
        return f'NamedNode "{self.identifier}" at {self.starts_at} ({len(self.children)} children)'


@dataclass(frozen=True)
class AnonymousNode:
    """A grouping without an identifier, e.g. a code block root or `( ... )`."""
    starts_at: Position = UNKNOWN
    children: Tuple['SyntaxNode', ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    def __str__(self) -> str:
        return f"AnonymousNode at {self.starts_at} ({len(self.children)} children)"


SyntaxNode: TypeAlias = Union[NamedNode, AnonymousNode]


def is_named(node: SyntaxNode) -> TypeGuard[NamedNode]:
    return isinstance(node, NamedNode)

def is_anonymous(node: SyntaxNode) -> TypeGuard[AnonymousNode]:
    return isinstance(node, AnonymousNode)

def with_identifier(node: SyntaxNode, identifier: str, starts_at: Position) -> NamedNode:
    """Return a NamedNode called `identifier` that keeps the children of `node`."""
    return NamedNode(identifier=identifier, starts_at=starts_at, children=node.children)

def add_child(node: SyntaxNode, child: SyntaxNode) -> SyntaxNode:
    children = node.children + (child,)

    if is_named(node):
        return NamedNode(node.identifier, node.starts_at, children)

    return AnonymousNode(node.starts_at, children)

def pretty(node: SyntaxNode, indent: str = '  ') -> str:
    """Return pretty-printed tree representation."""
    def _pretty(n: SyntaxNode, level: int) -> str:
        label = n.identifier if is_named(n) else '<anonymous>'
        lines = [f'{indent * level}{label}\t{n.starts_at}\n']

        for child in n.children:
            lines.append(_pretty(child, level + 1))
        return ''.join(lines)

    return _pretty(node, 0)
