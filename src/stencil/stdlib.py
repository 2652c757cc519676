"""Built-in math and string functions, registered via the functions decorators."""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from .context import Context
from .evaluator import is_number_literal
from .functions import register_simple, register_with_context
from .types import FunctionRegistry, InvalidValues, StencilSyntaxError

MATH_FUNCTIONS: FunctionRegistry = {}
STRING_FUNCTIONS: FunctionRegistry = {}

def parse_number(value: str) -> Optional[float]:
    if not is_number_literal(value):
        return None
    return float(value)

def format_number(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)

def _reduce_numbers(args: List[str], op: Callable[[float, float], float]) -> str:
    numbers: List[float] = []

    for arg in args:
        number = parse_number(arg)
        if number is None:
            raise StencilSyntaxError(InvalidValues("invalid float literal", (arg,)))
        numbers.append(number)

    if not numbers:
        return "0"

    result = numbers[0]
    for arg, number in zip(args[1:], numbers[1:]):
        try:
            result = op(result, number)
        except ZeroDivisionError as exc:
            raise StencilSyntaxError(InvalidValues(str(exc), (arg,))) from exc

    return format_number(result)

# ---------- math ----------

@register_simple(MATH_FUNCTIONS, "+")
def plus_function(args: List[str]) -> str:
    """Sum numbers; once the output text is non-empty, concatenate everything after it."""
    text = ""
    total: Optional[float] = None

    for arg in args:
        if text:
            text += arg
            continue

        number = parse_number(arg)
        if number is not None:
            total = number if total is None else total + number
            continue

        if total is not None:
            text += format_number(total)
        text += arg

    if not text and total is not None:
        return format_number(total)
    return text

@register_with_context(MATH_FUNCTIONS, "-")
def minus_function(args: List[str], _context: Context) -> str:
    return _reduce_numbers(args, lambda a, b: a - b)

@register_with_context(MATH_FUNCTIONS, "*")
def multiply_function(args: List[str], _context: Context) -> str:
    return _reduce_numbers(args, lambda a, b: a * b)

@register_with_context(MATH_FUNCTIONS, "/")
def divide_function(args: List[str], _context: Context) -> str:
    return _reduce_numbers(args, _divide)

@register_with_context(MATH_FUNCTIONS, "mod")
def modulo_function(args: List[str], _context: Context) -> str:
    return _reduce_numbers(args, _fmod)

def _divide(a: float, b: float) -> float:
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return a / b

def _fmod(a: float, b: float) -> float:
    if b == 0:
        raise ZeroDivisionError("modulo by zero")
    return math.fmod(a, b)

# ---------- strings ----------

@register_simple(STRING_FUNCTIONS, "concat")
def concat_function(args: List[str]) -> str:
    return "".join(args)

@register_simple(STRING_FUNCTIONS, "trim")
def trim_function(args: List[str]) -> str:
    return "".join(arg.strip() for arg in args)

@register_simple(STRING_FUNCTIONS, "$}")
def right_brackets_function(_args: List[str]) -> str:
    return "}}"

@register_simple(STRING_FUNCTIONS, "$quote")
def quote_function(_args: List[str]) -> str:
    return '"'

# ---------- registries ----------

def math_functions() -> FunctionRegistry:
    return dict(MATH_FUNCTIONS)

def string_functions() -> FunctionRegistry:
    return dict(STRING_FUNCTIONS)

def std_functions() -> FunctionRegistry:
    functions = math_functions()
    functions.update(string_functions())
    return functions
