from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type, TypeVar

T = TypeVar("T")


class Context:
    """Mutable store shared by every function call of one compilation.

    Holds string variables and at most one state object per type. State is
    keyed by the exact type of the saved value, so `get_state(cls)` only ever
    returns an instance of `cls`.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self.variables: Dict[str, str] = dict(variables) if variables else {}
        self._state: Dict[type, Any] = {}

    @classmethod
    def empty(cls) -> Context:
        return cls()

    @classmethod
    def with_variables(cls, variables: Mapping[str, str]) -> Context:
        return cls(variables)

    def set_variable(self, name: str, value: str) -> None:
        self.variables[name] = value

    def get_variable(self, name: str) -> Optional[str]:
        return self.variables.get(name)

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def save_state(self, state: Any) -> None:
        self._state[type(state)] = state

    def get_state(self, cls: Type[T]) -> Optional[T]:
        return self._state.get(cls)

    def __repr__(self) -> str:
        kinds = ", ".join(t.__name__ for t in self._state)
        return f"<Context vars={len(self.variables)} state=[{kinds}]>"
