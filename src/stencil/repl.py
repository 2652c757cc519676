"""Interactive REPL for stencil code blocks, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .context import Context
from .evaluator import EvaluationEngine
from .parser import parse_ast
from .repl_highlight import StencilLexer
from .stdlib import std_functions
from .tree import pretty
from .types import StencilSyntaxError
from .utils import DEBUG_PY_TRACE_ENV, configure_logging, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Forget all variables and function state", ""),
    "/set": ("Define a variable", "NAME VALUE"),
    "/tree": ("Show the syntax tree of a code block", "CODE"),
    "/vars": ("List defined variables", ""),
}


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=f"{desc} {hint}".rstrip(),
                )


def _handle_slash(line: str, context_box: list[Context]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        context_box[0] = Context.empty()
        print("Environment reset.")
        return True

    if cmd == "/vars":
        variables = context_box[0].variables
        if not variables:
            print("(no variables)")
        for name in sorted(variables):
            print(f"{name} = {variables[name]!r}")
        return True

    if cmd == "/set":
        name, _, value = arg.partition(" ")
        if not name:
            print("Usage: /set NAME VALUE", file=sys.stderr)
            return True
        context_box[0].set_variable(name, value)
        return True

    if cmd == "/tree":
        print(pretty(parse_ast(arg)), end="")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def repl_eval(line: str, engine: EvaluationEngine, context: Context) -> str:
    """Evaluate one line as a code block. Markers around it are optional."""
    return engine.evaluate(parse_ast(line.strip()), context)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    configure_logging()
    engine = EvaluationEngine(std_functions())
    # Use a mutable box so /reset can swap the context.
    context_box: list[Context] = [Context.empty()]

    history = InMemoryHistory()
    lexer = StencilLexer(
        functions=lambda: engine.functions.keys(),
        variables=lambda: context_box[0].variables.keys(),
    )

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
    )

    print("stencil repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, context_box):
            continue

        try:
            result = repl_eval(text, engine, context_box[0])
        except StencilSyntaxError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            if debug_py_trace_enabled():
                print("\nPython traceback:", file=sys.stderr)
                print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
            continue

        print(result)


if __name__ == "__main__":
    repl()
