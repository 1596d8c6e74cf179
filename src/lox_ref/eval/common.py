from __future__ import annotations

from typing import Tuple

from ..token_types import Tok
from ..types import LoxNumber, LoxTypeError, LoxValue

def require_number(op: Tok, operand: LoxValue) -> float:
    if isinstance(operand, LoxNumber):
        return operand.value

    raise LoxTypeError(op, "Operand must be a number.")

def require_numbers(op: Tok, lhs: LoxValue, rhs: LoxValue) -> Tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value

    raise LoxTypeError(op, "Operands must be numbers.")
