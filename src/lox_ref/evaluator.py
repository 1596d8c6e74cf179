from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence, TextIO

from .tree import (
    Assign,
    Binary,
    Block,
    Expr,
    Expression,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
    first_token,
)
from .token_types import TT, Tok
from .types import Frame, LoxRuntimeError, LoxValue, StackOverflow
from .utils import debug_py_trace_enabled, stringify

from .eval.bind import eval_assign, eval_var_stmt, eval_variable
from .eval.blocks import eval_block, exec_program
from .eval.expr import eval_binary, eval_logical, eval_unary
from .eval.loops import eval_if_stmt, eval_while_stmt


class Interpreter:
    """Tree-walking evaluator.

    `frame` is the current environment. It starts at `globals` and only
    `Block` execution moves it, always restoring the previous frame on the
    way out (errors included).
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out
        self.err = err
        self.globals = Frame()
        self.frame = self.globals

    # ---------------- Public API ----------------

    def interpret(self, statements: Sequence[Stmt]) -> Optional[LoxRuntimeError]:
        """Run a program; the first runtime error stops it and is returned.

        Output already written by earlier statements stays written. The error
        is reported on the error stream and never propagates to the caller.
        """
        def execute_top(stmt: Stmt) -> None:
            try:
                self.execute(stmt)
            except RecursionError as e:
                # Caught at the top level, where the stack has room again
                raise StackOverflow(_locate(stmt, statements)) from e

        try:
            exec_program(statements, execute_top)
        except LoxRuntimeError as e:
            stream = self._err_stream()
            print(e.report(), file=stream)

            if debug_py_trace_enabled() and e.__traceback__ is not None:
                print("\nPython traceback:", file=stream)
                print("".join(traceback.format_tb(e.__traceback__)), file=stream, end="")
            return e

        return None

    def reset(self) -> None:
        """Drop every binding by starting over from a fresh global frame."""
        self.globals = Frame()
        self.frame = self.globals

    # ---------------- Core evaluator ----------------

    def execute(self, n: Stmt) -> None:
        match n:
            case Expression(expression=expr):
                self.evaluate(expr)
            case Print(expression=expr):
                value = self.evaluate(expr)
                print(stringify(value), file=self._out_stream())
            case Var():
                eval_var_stmt(n, self.frame, self.evaluate)
            case Block():
                eval_block(n, self, self.execute)
            case If():
                eval_if_stmt(n, self.evaluate, self.execute)
            case While():
                eval_while_stmt(n, self.evaluate, self.execute)
            case _:
                raise TypeError(f"Unsupported statement {type(n).__name__}")

    def evaluate(self, n: Expr) -> LoxValue:
        match n:
            case Literal(value=value):
                return value
            case Grouping(expression=inner):
                return self.evaluate(inner)
            case Unary():
                return eval_unary(n, self.evaluate)
            case Binary():
                return eval_binary(n, self.evaluate)
            case Logical():
                return eval_logical(n, self.evaluate)
            case Variable():
                return eval_variable(n, self.frame)
            case Assign():
                return eval_assign(n, self.frame, self.evaluate)
            case _:
                raise TypeError(f"Unsupported expression {type(n).__name__}")

    # ---------------- Streams ----------------

    def _out_stream(self) -> TextIO:
        # Resolved late so captured/replaced stdout is honoured
        return self.out if self.out is not None else sys.stdout

    def _err_stream(self) -> TextIO:
        return self.err if self.err is not None else sys.stderr


def _locate(stmt: Stmt, statements: Sequence[Stmt]) -> Tok:
    """Token to blame for a failure in `stmt`: its own first token if it has one."""
    for candidate in (stmt, *statements):
        tok = first_token(candidate)
        if tok is not None:
            return tok

    # Only nested empty blocks: no token survived parsing
    return Tok(TT.EOF, '', None, 1)
