"""
Position units shared by the parser, evaluator and compiler.

A position is an offset tagged with what it is relative to:
- UNKNOWN: no offset could be computed
- RELATIVE_TO_INVOCATION: offset inside the current function invocation
- RELATIVE_TO_CODE_START: offset from the start of the current code block
- ABSOLUTE: offset inside the whole template
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class PositionKind(Enum):
    UNKNOWN = auto()
    RELATIVE_TO_INVOCATION = auto()
    RELATIVE_TO_CODE_START = auto()
    ABSOLUTE = auto()


_KIND_LABEL = {
    PositionKind.UNKNOWN: "Unknown",
    PositionKind.RELATIVE_TO_INVOCATION: "RelativeToInvocation",
    PositionKind.RELATIVE_TO_CODE_START: "RelativeToCodeStart",
    PositionKind.ABSOLUTE: "Absolute",
}


@dataclass(frozen=True)
class Position:
    kind: PositionKind
    offset: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is PositionKind.UNKNOWN:
            if self.offset is not None:
                raise ValueError("Unknown position cannot carry an offset")
            return

        if self.offset is None or self.offset < 0:
            raise ValueError(f"{_KIND_LABEL[self.kind]} position needs a non-negative offset")

    @classmethod
    def unknown(cls) -> Position:
        return cls(PositionKind.UNKNOWN)

    @classmethod
    def relative_to_invocation(cls, offset: int) -> Position:
        return cls(PositionKind.RELATIVE_TO_INVOCATION, offset)

    @classmethod
    def relative_to_code_start(cls, offset: int) -> Position:
        return cls(PositionKind.RELATIVE_TO_CODE_START, offset)

    @classmethod
    def absolute(cls, offset: int) -> Position:
        return cls(PositionKind.ABSOLUTE, offset)

    @property
    def is_unknown(self) -> bool:
        return self.kind is PositionKind.UNKNOWN

    def raw_value(self) -> Optional[int]:
        return self.offset

    def __str__(self) -> str:
        label = _KIND_LABEL[self.kind]
        if self.offset is None:
            return label

        return f"{label}({self.offset})"

    def __repr__(self) -> str:
        return f"Position.{self}"


UNKNOWN = Position.unknown()
