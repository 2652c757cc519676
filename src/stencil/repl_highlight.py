"""prompt_toolkit lexer for live code block highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, Collection, List, Optional, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .evaluator import is_number_literal, is_string_literal
from .parser import DEFAULT_END, DEFAULT_START

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "marker": "bold ansiblue",
    "number": "ansimagenta",
    "string": "ansigreen",
    "function": "bold ansiyellow",
    "variable": "ansicyan",
    "identifier": "",
    "punctuation": "",
    "error": "bold ansired",
}

# (kind, start, end) where kind is "paren", "token" or "marker".
Span = Tuple[str, int, int]


def _scan(text: str, start: str, end: str) -> List[Span]:
    """Split a line into markers, parentheses and tokens, the way the parser reads it."""
    spans: List[Span] = []
    pos = 0
    n = len(text)

    if start and text.startswith(start):
        spans.append(("marker", 0, len(start)))
        pos = len(start)

    stop = n
    if end and text.endswith(end) and n - len(end) >= pos:
        stop = n - len(end)

    tok_start: Optional[int] = None
    in_quotes = False

    while pos < stop:
        ch = text[pos]

        if in_quotes:
            if ch == "\\":
                pos += 1
            elif ch == '"':
                in_quotes = False
            pos += 1
            continue

        if ch in "() ":
            if tok_start is not None:
                spans.append(("token", tok_start, pos))
                tok_start = None
            if ch != " ":
                spans.append(("paren", pos, pos + 1))
        else:
            if tok_start is None:
                tok_start = pos
            if ch == '"':
                in_quotes = True
        pos += 1

    if tok_start is not None:
        spans.append(("token", tok_start, min(pos, stop)))

    if stop < n:
        spans.append(("marker", stop, n))

    return spans


def _unbalanced(text: str, spans: List[Span]) -> set[int]:
    """Offsets of parentheses without a partner."""
    stack: List[int] = []
    bad: set[int] = set()

    for kind, s, _ in spans:
        if kind != "paren":
            continue
        if text[s] == "(":
            stack.append(s)
        elif stack:
            stack.pop()
        else:
            bad.add(s)

    bad.update(stack)
    return bad


def _token_group(token: str, head: bool, functions: Collection[str], variables: Collection[str]) -> str:
    if token in variables:
        return "variable"
    if head and token in functions:
        return "function"
    if is_number_literal(token):
        return "number"
    if is_string_literal(token) or token.startswith('"'):
        return "string"
    if token in functions:
        return "function"
    return "identifier"


def highlight_line(text: str, functions: Collection[str] = (), variables: Collection[str] = (),
                   start: str = DEFAULT_START, end: str = DEFAULT_END) -> StyleAndTextTuples:
    """Return styled fragments for one line of code."""
    if not text:
        return [("", "")]

    if text.lstrip().startswith("/"):
        return [("", text)]

    spans = _scan(text, start, end)
    bad = _unbalanced(text, spans)
    result: StyleAndTextTuples = []
    pos = 0
    head = True

    for kind, s, e in spans:
        if s > pos:
            result.append(("", text[pos:s]))

        match kind:
            case "marker":
                group = "marker"
            case "paren":
                group = "error" if s in bad else "punctuation"
                head = text[s] == "("
            case _:
                group = _token_group(text[s:e], head, functions, variables)
                head = False

        result.append((GROUP_STYLE.get(group, ""), text[s:e]))
        pos = e

    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class StencilLexer(Lexer):
    """prompt_toolkit Lexer that highlights code blocks.

    `functions` and `variables` are callables so the REPL can hand over
    names that change between prompts.
    """

    def __init__(self, functions: Callable[[], Collection[str]] = lambda: (),
                 variables: Callable[[], Collection[str]] = lambda: ()):
        self.functions = functions
        self.variables = variables

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        functions = self.functions()
        variables = self.variables()

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno], functions, variables)
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
