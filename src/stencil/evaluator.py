from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from .context import Context
from .functions import function_registry
from .tree import AnonymousNode, NamedNode, SyntaxNode
from .types import FunctionRegistry, StencilSyntaxError, UnexpectedElements, UnknownSymbol
from .units import Position

logger = logging.getLogger(__name__)

# Decimal floats plus inf/infinity/nan, optionally signed; no surrounding whitespace
# and no digit separators.
_FLOAT_RE = re.compile(
    r'[+-]?(?:inf|infinity|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)',
    re.IGNORECASE,
)

def is_number_literal(token: str) -> bool:
    return _FLOAT_RE.fullmatch(token) is not None

def is_string_literal(token: str) -> bool:
    return len(token) > 2 and token.startswith('"') and token.endswith('"')

def extract_literal(token: str) -> Optional[str]:
    """Numbers come back unchanged, quoted strings without their quotes."""
    if is_number_literal(token):
        return token

    if is_string_literal(token):
        return token[1:-1]

    return None


class EvaluationEngine:
    """Evaluates code block trees against a fixed set of functions.

    Symbols resolve in this order: context variable, registered function,
    number or string literal. Anything else is an unknown symbol.
    """

    def __init__(self, functions: Optional[FunctionRegistry] = None):
        self.functions: FunctionRegistry = function_registry(functions)

    def evaluate(self, node: SyntaxNode, context: Context) -> str:
        match node:
            case NamedNode(identifier=identifier, starts_at=starts_at, children=children):
                return self.evaluate_symbol(identifier, starts_at, children, context)
            case AnonymousNode(starts_at=starts_at, children=children):
                return self._evaluate_nested(starts_at, children, context)

        raise TypeError(f"Cannot evaluate {type(node).__name__}")

    def _evaluate_nested(self, starts_at: Position, children: Sequence[SyntaxNode], context: Context) -> str:
        if not children:
            return ""

        first, *rest = children
        if rest:
            raise StencilSyntaxError.at_position(
                starts_at,
                UnexpectedElements(last_expected=first, unexpected_elements=tuple(rest)),
            )

        if isinstance(first, NamedNode):
            return self.evaluate_symbol(first.identifier, first.starts_at, first.children, context)

        return self.evaluate(first, context)

    def evaluate_symbol(self, identifier: str, offset: Position, children: Sequence[SyntaxNode], context: Context) -> str:
        value = context.get_variable(identifier)
        if value is not None:
            if children:
                logger.debug("variable %r ignores %d argument(s)", identifier, len(children))
            return value

        function = self.functions.get(identifier)
        if function is not None:
            logger.debug("calling %r at %s with %d argument(s)", identifier, offset, len(children))
            try:
                return function.evaluate(self, children, context)
            except StencilSyntaxError as exc:
                exc.invocation_pos = offset
                raise

        literal = extract_literal(identifier)
        if literal is not None:
            return literal

        raise StencilSyntaxError.at_position(offset, UnknownSymbol(identifier))
