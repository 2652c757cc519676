from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Dict, List, Optional

from .compiler import TemplateCompiler
from .context import Context
from .evaluator import EvaluationEngine
from .parser import DEFAULT_END, DEFAULT_START
from .stdlib import std_functions
from .template import Template
from .types import CompilationError
from .utils import configure_logging, debug_py_trace_enabled

USAGE = "usage: stencil [-D NAME=VALUE]... [--start MARKER] [--end MARKER] [--no-stdlib] [TEMPLATE|-]"


def _parse_define(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise SystemExit(f"Invalid definition {raw!r}, expected NAME=VALUE")
    return name, value


def _load_template(arg: Optional[str]) -> Template:
    """
    Resolve CLI input into a template.
    - None or "-" => read stdin.
    - Otherwise => read the file at that path.
    """

    if arg is None or arg == "-":
        return Template(sys.stdin.read())

    path = Path(arg)
    if not path.is_file():
        raise SystemExit(f"Template not found: {arg}")

    return Template.read_from(path)


def render(template: Template, variables: Optional[Dict[str, str]] = None, start: str = DEFAULT_START,
           end: str = DEFAULT_END, use_stdlib: bool = True) -> str:
    engine = EvaluationEngine(std_functions() if use_stdlib else None)
    compiler = TemplateCompiler(engine, start=start, end=end)
    return compiler.compile(template, Context.with_variables(variables or {}))


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()

    variables: Dict[str, str] = {}
    start = DEFAULT_START
    end = DEFAULT_END
    use_stdlib = True
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token in ("-h", "--help"):
            print(USAGE)
            return 0

        if token == "--no-stdlib":
            use_stdlib = False
            continue

        if token.startswith("--define="):
            name, value = _parse_define(token.split("=", 1)[1])
            variables[name] = value
            continue

        if token.startswith("-D") and len(token) > 2:
            name, value = _parse_define(token[2:])
            variables[name] = value
            continue

        if token.startswith("--start="):
            start = token.split("=", 1)[1]
            continue

        if token.startswith("--end="):
            end = token.split("=", 1)[1]
            continue

        if token in ("-D", "--define", "--start", "--end"):
            try:
                value = next(it)
            except StopIteration:
                raise SystemExit(f"{token} flag requires a value") from None

            if token in ("-D", "--define"):
                name, value = _parse_define(value)
                variables[name] = value
            elif token == "--start":
                start = value
            else:
                end = value
            continue

        if token.startswith("-") and token != "-":
            raise SystemExit(f"Unknown option: {token}\n{USAGE}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if not start or not end:
        raise SystemExit("Code block markers must be non-empty")

    template = _load_template(arg)

    try:
        output = render(template, variables, start=start, end=end, use_stdlib=use_stdlib)
    except CompilationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
