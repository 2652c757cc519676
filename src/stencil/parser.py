"""
Recursive Descent Parser for stencil code blocks

Grammar (Lisp-like, one expression per code block):
    expr  := token (token | '(' expr ')')*
    token := run of characters other than an unquoted space or parenthesis

Structure:
- Cursor: owns the read position, shared by every nesting level
- parse_code: single forward scan, recursing only at '('
- parse_ast: strips the code block markers and parses the rest

The parser is total: unbalanced parentheses never raise. A missing ')' ends
the scan at end of input, a stray ')' ends the scan of the current level.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .tree import AnonymousNode, NamedNode, SyntaxNode, add_child, is_anonymous, with_identifier
from .units import Position

logger = logging.getLogger(__name__)

DEFAULT_START = "{{"
DEFAULT_END = "}}"

QUOTE = '"'
ESCAPE = '\\'
OPEN = '('
CLOSE = ')'
SPACE = ' '

# ============================================================================
# Cursor
# ============================================================================

class Cursor:
    """Read position over a code block.

    Every nesting level reads from the same cursor, so a recursive call leaves
    the cursor just past the ')' that closed it and the caller simply resumes.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch


# ============================================================================
# Token buffer
# ============================================================================

class _TokenBuffer:
    """Characters of the token being read plus the offset of its first one."""

    def __init__(self) -> None:
        self.chars: List[str] = []
        self.start = 0
        self.in_quotes = False

    def push(self, ch: str, pos: int) -> None:
        if not self.chars:
            self.start = pos
        self.chars.append(ch)

    def take(self) -> Optional[tuple[str, int]]:
        if not self.chars:
            return None

        text = ''.join(self.chars)
        self.chars = []
        return text, self.start


def add_token(node: SyntaxNode, token: str, starts_at: Position) -> SyntaxNode:
    """Flush rule: the first token names the node, later tokens become childless arguments."""
    if not token:
        return node

    if is_anonymous(node):
        return with_identifier(node, token, starts_at)

    return add_child(node, NamedNode(token, starts_at))


def _flush(node: SyntaxNode, buf: _TokenBuffer, level: int) -> SyntaxNode:
    taken = buf.take()
    if taken is None:
        return node

    token, start = taken
    logger.debug("%s+%r at %d", "-" * level, token, start)
    return add_token(node, token, Position.relative_to_code_start(start))


def _parse_level(cursor: Cursor, starts_at: int, level: int) -> SyntaxNode:
    node: SyntaxNode = AnonymousNode(Position.relative_to_code_start(starts_at))
    buf = _TokenBuffer()

    while not cursor.at_end():
        pos = cursor.pos
        ch = cursor.advance()

        if buf.in_quotes:
            buf.push(ch, pos)
            if ch == ESCAPE and not cursor.at_end():
                buf.push(cursor.advance(), pos + 1)
            elif ch == QUOTE:
                buf.in_quotes = False
            continue

        match ch:
            case '"':
                buf.push(ch, pos)
                buf.in_quotes = True
            case '(':
                node = _flush(node, buf, level)
                child = _parse_level(cursor, pos, level + 1)
                node = add_child(node, child)
            case ' ':
                node = _flush(node, buf, level)
            case ')':
                node = _flush(node, buf, level)
                logger.debug("%sclosed level at %d: %s", "-" * level, pos, node)
                return node
            case _:
                buf.push(ch, pos)

    # the trailing token is kept: `plus 2 2` has two arguments
    node = _flush(node, buf, level)
    logger.debug("%sreached end of input at %d: %s", "-" * level, cursor.pos, node)
    return node


# ============================================================================
# Public API
# ============================================================================

def parse_code(source: str) -> SyntaxNode:
    """Parse a marker-free code block. Offsets are relative to `source[0]`."""
    logger.debug("parsing code block %r", source)
    cursor = Cursor(source)
    return _parse_level(cursor, 0, 0)


def strip_markers(block: str, start: str = DEFAULT_START, end: str = DEFAULT_END) -> str:
    if start and block.startswith(start):
        block = block[len(start):]
    if end and block.endswith(end):
        block = block[:-len(end)]
    return block


def parse_ast(block: str, start: str = DEFAULT_START, end: str = DEFAULT_END) -> SyntaxNode:
    """Parse a code block as it appears in a template, markers included."""
    return parse_code(strip_markers(block, start, end))
