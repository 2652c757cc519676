from __future__ import annotations

import logging
from typing import List, Optional, Union

from .context import Context
from .evaluator import EvaluationEngine
from .parser import DEFAULT_END, DEFAULT_START, parse_ast
from .template import CodeSlice, Template, TextSlice, iter_slices
from .types import CompilationError, Evaluator, StencilSyntaxError
from .units import Position

logger = logging.getLogger(__name__)


class TemplateCompiler:
    """Evaluates every code block of a template and joins the output.

    All blocks share one Context, so a function can leave state or variables
    behind for later blocks. The first failing block aborts the compilation.
    """

    def __init__(self, engine: Optional[Evaluator] = None, start: str = DEFAULT_START, end: str = DEFAULT_END):
        if not start or not end:
            raise ValueError("Code block markers must be non-empty")

        self.engine: Evaluator = engine if engine is not None else EvaluationEngine()
        self.start = start
        self.end = end

    def compile(self, template: Union[Template, str], context: Optional[Context] = None) -> str:
        text = template.raw_content if isinstance(template, Template) else template
        ctx = context if context is not None else Context.empty()
        out: List[str] = []

        for item in iter_slices(text, self.start, self.end):
            match item:
                case TextSlice(value=value):
                    out.append(value)
                case CodeSlice(value=value, start_position=start_position):
                    out.append(self._compile_block(text, value, start_position, ctx))

        return "".join(out)

    def _compile_block(self, text: str, block: str, start_position: int, context: Context) -> str:
        node = parse_ast(block, self.start, self.end)
        logger.debug("evaluating block at %d: %r", start_position, block)

        try:
            return self.engine.evaluate(node, context)
        except StencilSyntaxError as exc:
            raise CompilationError(
                exc,
                Position.absolute(start_position),
                block,
                start_marker=self.start,
                template=text,
            ) from exc
