from __future__ import annotations

from typing import Callable

from ..tree import Assign, Expr, Var, Variable
from ..types import NIL, Frame, LoxValue

EvalFunc = Callable[[Expr], LoxValue]

def eval_var_stmt(n: Var, frame: Frame, eval_func: EvalFunc) -> None:
    value = NIL if n.initializer is None else eval_func(n.initializer)
    frame.define(n.name.lexeme, value)

def eval_variable(n: Variable, frame: Frame) -> LoxValue:
    return frame.get(n.name)

def eval_assign(n: Assign, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Assignment is an expression: the assigned value is also the result."""
    value = eval_func(n.value)
    frame.assign(n.name, value)
    return value
