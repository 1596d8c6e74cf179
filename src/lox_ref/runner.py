from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .errors import Diagnostic, ErrorReporter
from .evaluator import Interpreter
from .lexer_rd import lex
from .parser_rd import parse
from .tree import Stmt, dump
from .types import LoxRuntimeError

# sysexits.h codes
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 74

USAGE = "Usage: lox [script]"


@dataclass
class RunResult:
    statements: List[Stmt] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    runtime_error: Optional[LoxRuntimeError] = None

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return self.runtime_error is not None

    @property
    def exit_code(self) -> int:
        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK


@dataclass
class DebugOptions:
    tokens: bool = False
    ast: bool = False


def run(
    src: str,
    interpreter: Optional[Interpreter] = None,
    reporter: Optional[ErrorReporter] = None,
    debug: Optional[DebugOptions] = None,
    dump_stream: Optional[TextIO] = None,
) -> RunResult:
    """Lex, parse and evaluate one unit of input (a file or a REPL line).

    Lexical and syntax errors are flushed through `reporter` in line order and
    suppress evaluation entirely. A runtime error stops the run; it is
    reported by the interpreter and handed back on the result.
    """
    if interpreter is None:
        interpreter = Interpreter()
    if reporter is None:
        reporter = ErrorReporter()
    debug = debug or DebugOptions()
    dump_out = dump_stream if dump_stream is not None else sys.stdout

    tokens, _ = lex(src, reporter=reporter)
    if debug.tokens:
        for tok in tokens:
            print(tok, file=dump_out)

    statements, _ = parse(tokens, reporter=reporter)
    result = RunResult(statements=statements)

    if reporter.had_error:
        result.diagnostics = reporter.flush()
        return result

    if debug.ast:
        try:
            print(dump(statements), file=dump_out, end="")
        except RecursionError:
            print("(AST too deeply nested to dump)", file=dump_out)

    result.runtime_error = interpreter.interpret(statements)
    return result


def run_file(path: str, interpreter: Optional[Interpreter] = None, debug: Optional[DebugOptions] = None) -> int:
    """Run a script file and return the process exit code."""
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Could not read '{path}': {exc}", file=sys.stderr)
        return EX_IOERR

    return run(source, interpreter=interpreter, debug=debug).exit_code


def main(argv: Optional[Sequence[str]] = None) -> None:
    debug = DebugOptions()
    script = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--tokens":
            debug.tokens = True
            continue

        if token == "--ast":
            debug.ast = True
            continue

        if token.startswith("--"):
            print(f"Unknown option: {token}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            raise SystemExit(EX_USAGE)

        if script is None:
            script = token
        else:
            print(USAGE, file=sys.stderr)
            raise SystemExit(EX_USAGE)

    if script is None:
        from .repl import repl
        repl(debug=debug)
        return

    raise SystemExit(run_file(script, debug=debug))


if __name__ == "__main__":
    main()
