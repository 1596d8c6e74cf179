"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory

from .errors import ErrorReporter
from .evaluator import Interpreter
from .repl_highlight import LoxHighlighter
from .runner import DebugOptions, run
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\r]")
_NBSP = "\u00a0"

# String literals (possibly unterminated) and comments are passed through as typed.
_VERBATIM_RE = re.compile(r'"[^"]*"?|//[^\n]*')

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/py-traceback": ("Toggle Python traceback on runtime errors", "[on|off]"),
    "/reset": ("Reset the global environment", ""),
}

PROMPT = "> "


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
                    display_meta=desc,
                )


def handle_slash(line: str, interpreter: Interpreter) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            # Toggle.
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
        interpreter.reset()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def normalize(text: str) -> str:
    """Strip invisible characters from input outside string literals and comments.

    A non-breaking space counts as whitespace rather than being dropped, so
    it still separates tokens.
    """
    parts = []
    pos = 0

    for m in _VERBATIM_RE.finditer(text):
        parts.append(_clean(text[pos:m.start()]))
        parts.append(m.group())
        pos = m.end()

    parts.append(_clean(text[pos:]))
    return "".join(parts)


def _clean(code: str) -> str:
    return _INVISIBLE_RE.sub("", code).replace(_NBSP, " ")


def repl_line(text: str, interpreter: Interpreter, reporter: ErrorReporter, debug: Optional[DebugOptions] = None) -> None:
    """Run one REPL line; errors are reported and never end the session."""
    text = normalize(text)
    if not text.strip():
        return

    if handle_slash(text, interpreter):
        return

    run(text, interpreter=interpreter, reporter=reporter, debug=debug)
    # A bad line must not poison the next one
    reporter.reset()


def repl(debug: Optional[DebugOptions] = None) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    interpreter = Interpreter()
    reporter = ErrorReporter()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxHighlighter(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("lox repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        repl_line(text, interpreter, reporter, debug=debug)
