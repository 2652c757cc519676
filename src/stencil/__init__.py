"""stencil: Lisp-like code blocks embedded in text templates.

    Hello there, {{ name }}! 2 + 2 = {{ + 2 2 }}

Text outside `{{ ... }}` is copied as-is, each code block is parsed and
evaluated against a Context of variables and a registry of functions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from .compiler import TemplateCompiler
from .context import Context
from .evaluator import EvaluationEngine
from .functions import FunctionWithAst, FunctionWithContext, SimpleFunction, resolve_params
from .parser import parse_ast, parse_code
from .template import Template
from .tree import AnonymousNode, NamedNode, SyntaxNode
from .types import (
    CompilationError,
    InvalidArguments,
    InvalidValues,
    StencilSyntaxError,
    UnexpectedElements,
    UnknownSymbol,
)
from .units import Position

__all__ = [
    "AnonymousNode",
    "CompilationError",
    "Context",
    "EvaluationEngine",
    "FunctionWithAst",
    "FunctionWithContext",
    "InvalidArguments",
    "InvalidValues",
    "NamedNode",
    "Position",
    "SimpleFunction",
    "StencilSyntaxError",
    "SyntaxNode",
    "Template",
    "TemplateCompiler",
    "UnexpectedElements",
    "UnknownSymbol",
    "compile_template_from",
    "compile_template_from_file",
    "compile_template_from_string",
    "parse_ast",
    "parse_code",
    "resolve_params",
]


def compile_template_from(template: Template, variables: Optional[Mapping[str, str]] = None,
                          functions: Optional[Mapping[str, object]] = None) -> str:
    """Compile with a fresh engine, compiler and Context."""
    engine = EvaluationEngine(functions)  # type: ignore[arg-type]
    compiler = TemplateCompiler(engine)
    return compiler.compile(template, Context.with_variables(variables or {}))


def compile_template_from_string(text: str, variables: Optional[Mapping[str, str]] = None,
                                 functions: Optional[Mapping[str, object]] = None) -> str:
    return compile_template_from(Template(text), variables, functions)


def compile_template_from_file(path: Union[str, Path], variables: Optional[Mapping[str, str]] = None,
                               functions: Optional[Mapping[str, object]] = None) -> str:
    return compile_template_from(Template.read_from(path), variables, functions)
