from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple, Union
from typing_extensions import Protocol, TypeAlias

from .tree import SyntaxNode
from .units import Position, PositionKind, UNKNOWN
from .utils import line_col

if TYPE_CHECKING:
    from .context import Context

# ---------- Evaluation causes (no position) ----------

@dataclass(frozen=True)
class UnexpectedElements:
    last_expected: Optional[SyntaxNode]
    unexpected_elements: Tuple[SyntaxNode, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'unexpected_elements', tuple(self.unexpected_elements))

    def describe(self) -> str:
        extra = ", ".join(str(n) for n in self.unexpected_elements)
        return f"Expected a single expression after {self.last_expected}, got: {extra}"

@dataclass(frozen=True)
class UnknownSymbol:
    symbol: str

    def describe(self) -> str:
        return f"Unknown symbol '{self.symbol}'"

@dataclass(frozen=True)
class InvalidArguments:
    description: Optional[str] = None
    arguments: Tuple[SyntaxNode, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'arguments', tuple(self.arguments))

    def describe(self) -> str:
        msg = self.description or "Invalid arguments"
        return f"{msg} ({len(self.arguments)} argument(s))"

@dataclass(frozen=True)
class InvalidValues:
    description: Optional[str] = None
    values: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'values', tuple(self.values))

    def describe(self) -> str:
        msg = self.description or "Invalid values"
        shown = ", ".join(repr(v) for v in self.values)
        return f"{msg}: {shown}" if shown else msg

EvaluationError: TypeAlias = Union[UnexpectedElements, UnknownSymbol, InvalidArguments, InvalidValues]

# ---------- Exceptions ----------

class StencilSyntaxError(Exception):
    """An evaluation failure located inside a code block.

    relative_pos: where the failing construct lives in its code block
    invocation_pos: where the nearest enclosing function call was invoked (Unknown if none)
    """
    relative_pos: Position
    invocation_pos: Position
    description: EvaluationError

    def __init__(self, description: EvaluationError, relative_pos: Position = UNKNOWN, invocation_pos: Position = UNKNOWN):
        super().__init__(description.describe())
        self.description = description
        self.relative_pos = relative_pos
        self.invocation_pos = invocation_pos

    @classmethod
    def at_position(cls, position: Position, description: EvaluationError) -> StencilSyntaxError:
        return cls(description, relative_pos=position)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StencilSyntaxError):
            return NotImplemented
        return (
            self.description == other.description
            and self.relative_pos == other.relative_pos
            and self.invocation_pos == other.invocation_pos
        )

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return (
            f"StencilSyntaxError(relative_pos={self.relative_pos}, "
            f"invocation_pos={self.invocation_pos}, description={self.description!r})"
        )

    def __str__(self) -> str:
        msg = self.description.describe()
        bits = []

        if not self.relative_pos.is_unknown:
            bits.append(f"at {self.relative_pos}")
        if not self.invocation_pos.is_unknown:
            bits.append(f"invoked at {self.invocation_pos}")

        if not bits:
            return msg
        return f"{msg} ({', '.join(bits)})"

class CompilationError(Exception):
    """The first code block of a template that failed to evaluate."""

    def __init__(self, error: StencilSyntaxError, position: Position, source: str,
                 start_marker: str = "{{", template: Optional[str] = None):
        super().__init__(str(error))
        self.error = error
        self.position = position
        self.source = source
        self.start_marker = start_marker
        self.template = template

    def symbol_position(self) -> Position:
        """Absolute position of the failing construct, falling back to the block start."""
        block_start = self.position.raw_value()
        relative = None

        for candidate in (self.error.relative_pos, self.error.invocation_pos):
            if candidate.kind is PositionKind.RELATIVE_TO_CODE_START:
                relative = candidate.raw_value()
                break

        if block_start is None or relative is None:
            return self.position

        marker = len(self.start_marker) if self.source.startswith(self.start_marker) else 0
        return Position.absolute(block_start + marker + relative)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompilationError):
            return NotImplemented
        return (
            self.error == other.error
            and self.position == other.position
            and self.source == other.source
        )

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return f"CompilationError(error={self.error!r}, position={self.position}, source={self.source!r})"

    def __str__(self) -> str:
        msg = f"{self.error.description.describe()} in {self.source!r}"
        offset = self.symbol_position().raw_value()

        if offset is None or self.template is None:
            return f"{msg} (at {self.position})"

        line, col = line_col(self.template, offset)
        return f"{msg} (line {line}, col {col})"

# ---------- Function contract ----------

class Evaluator(Protocol):
    def evaluate(self, node: SyntaxNode, context: 'Context') -> str: ...

class Function(Protocol):
    def evaluate(self, evaluator: Evaluator, parameters: Sequence[SyntaxNode], context: 'Context') -> str: ...

FunctionRegistry: TypeAlias = Dict[str, Function]
