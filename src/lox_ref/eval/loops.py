from __future__ import annotations

from typing import Callable

from ..tree import Expr, If, Stmt, While
from ..types import LoxValue
from .helpers import is_truthy as _is_truthy

EvalFunc = Callable[[Expr], LoxValue]
ExecFunc = Callable[[Stmt], None]

def eval_if_stmt(n: If, eval_func: EvalFunc, exec_func: ExecFunc) -> None:
    if _is_truthy(eval_func(n.condition)):
        exec_func(n.then_branch)
        return

    if n.else_branch is not None:
        exec_func(n.else_branch)

def eval_while_stmt(n: While, eval_func: EvalFunc, exec_func: ExecFunc) -> None:
    # No iteration cap: a loop that never turns falsy runs until interrupted
    while _is_truthy(eval_func(n.condition)):
        exec_func(n.body)
