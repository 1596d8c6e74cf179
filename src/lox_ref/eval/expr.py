from __future__ import annotations

import math
from typing import Callable

from ..token_types import TT, Tok
from ..tree import Binary, Expr, Logical, Unary
from ..types import LoxBool, LoxNumber, LoxString, LoxTypeError, LoxValue
from ..utils import lox_equals
from .common import require_number, require_numbers
from .helpers import is_truthy

EvalFunc = Callable[[Expr], LoxValue]

def eval_unary(n: Unary, eval_func: EvalFunc) -> LoxValue:
    right = eval_func(n.right)

    match n.operator.type:
        case TT.BANG:
            return LoxBool(not is_truthy(right))
        case TT.MINUS:
            return LoxNumber(-require_number(n.operator, right))
        case _:
            raise LoxTypeError(n.operator, f"Unsupported unary operator '{n.operator.lexeme}'.")

def eval_binary(n: Binary, eval_func: EvalFunc) -> LoxValue:
    # Both operands are evaluated, left first, before the operator is applied
    left = eval_func(n.left)
    right = eval_func(n.right)
    return apply_binary_operator(n.operator, left, right)

def apply_binary_operator(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op.type:
        case TT.EQUAL_EQUAL:
            return LoxBool(lox_equals(lhs, rhs))
        case TT.BANG_EQUAL:
            return LoxBool(not lox_equals(lhs, rhs))
        case TT.PLUS:
            return _add(op, lhs, rhs)

    a, b = require_numbers(op, lhs, rhs)

    match op.type:
        case TT.MINUS:
            return LoxNumber(a - b)
        case TT.STAR:
            return LoxNumber(a * b)
        case TT.SLASH:
            return LoxNumber(divide(a, b))
        case TT.GREATER:
            return LoxBool(a > b)
        case TT.GREATER_EQUAL:
            return LoxBool(a >= b)
        case TT.LESS:
            return LoxBool(a < b)
        case TT.LESS_EQUAL:
            return LoxBool(a <= b)
        case _:
            raise LoxTypeError(op, f"Unsupported binary operator '{op.lexeme}'.")

def _add(op: Tok, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match (lhs, rhs):
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case _:
            raise LoxTypeError(op, "Operands must be two numbers or two strings.")

def divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity and 0/0 is NaN, never an error."""
    if b != 0:
        return a / b

    if a == 0 or math.isnan(a):
        return math.nan

    # The sign of the zero divisor participates, as in hardware division
    return math.copysign(math.inf, a) * math.copysign(1.0, b)

def eval_logical(n: Logical, eval_func: EvalFunc) -> LoxValue:
    left = eval_func(n.left)

    if n.operator.type == TT.OR:
        if is_truthy(left):
            return left
    elif not is_truthy(left):
        return left

    return eval_func(n.right)
