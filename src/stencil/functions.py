"""Adapters that turn plain Python callables into evaluator Functions.

Three capability tiers, all reducing to `Function.evaluate(evaluator, parameters, context)`:
- SimpleFunction: pre-evaluated string arguments only, cannot touch the context
- FunctionWithContext: pre-evaluated arguments plus the mutable Context, may raise
- FunctionWithAst: raw parameter nodes, the evaluator and the Context; decides
  itself whether, when and in what order parameters get evaluated

Tiers may be mixed freely in one registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence

from .context import Context
from .tree import SyntaxNode
from .types import Evaluator, Function, FunctionRegistry

SimpleFn = Callable[[List[str]], str]
ContextFn = Callable[[List[str], Context], str]
AstFn = Callable[[Evaluator, Sequence[SyntaxNode], Context], str]


def resolve_params(evaluator: Evaluator, parameters: Sequence[SyntaxNode], context: Context) -> List[str]:
    """Evaluate every parameter in order. The first failure propagates as-is."""
    return [evaluator.evaluate(param, context) for param in parameters]


@dataclass(frozen=True)
class SimpleFunction:
    fn: SimpleFn

    def evaluate(self, evaluator: Evaluator, parameters: Sequence[SyntaxNode], context: Context) -> str:
        args = resolve_params(evaluator, parameters, context)
        return self.fn(args)


@dataclass(frozen=True)
class FunctionWithContext:
    fn: ContextFn

    def evaluate(self, evaluator: Evaluator, parameters: Sequence[SyntaxNode], context: Context) -> str:
        args = resolve_params(evaluator, parameters, context)
        return self.fn(args, context)


@dataclass(frozen=True)
class FunctionWithAst:
    fn: AstFn

    def evaluate(self, evaluator: Evaluator, parameters: Sequence[SyntaxNode], context: Context) -> str:
        return self.fn(evaluator, parameters, context)


def as_function(candidate: object) -> Function:
    """Accept anything with an `evaluate` method as-is; wrap other callables as AST-aware."""
    if hasattr(candidate, "evaluate"):
        return candidate  # type: ignore[return-value]

    if callable(candidate):
        return FunctionWithAst(candidate)  # type: ignore[arg-type]

    raise TypeError(f"{type(candidate).__name__} is not usable as a function")


def function_registry(functions: Optional[Mapping[str, object]] = None) -> FunctionRegistry:
    """Build a registry from a mapping of names to Functions or callables."""
    if functions is None:
        return {}

    return {str(name): as_function(fn) for name, fn in functions.items()}


# ---------- Registration decorators ----------

def register_simple(registry: FunctionRegistry, name: str):
    def dec(fn: SimpleFn):
        registry[name] = SimpleFunction(fn)
        return fn

    return dec

def register_with_context(registry: FunctionRegistry, name: str):
    def dec(fn: ContextFn):
        registry[name] = FunctionWithContext(fn)
        return fn

    return dec

def register_with_ast(registry: FunctionRegistry, name: str):
    def dec(fn: AstFn):
        registry[name] = FunctionWithAst(fn)
        return fn

    return dec
