from __future__ import annotations

import math
import os as _os
from decimal import Decimal

from .types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """True when Python tracebacks should accompany reported runtime errors."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in ("1", "true", "yes", "on")


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxNumber(value=a), LoxNumber(value=b)):
            # Equality stays reflexive for NaN
            if math.isnan(a) and math.isnan(b):
                return True
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case _:
            return False


def format_number(num: float) -> str:
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"

    text = repr(num)
    # Integral values below 1e21 keep their shortest digits but drop the exponent
    if "e" in text and num.is_integer() and abs(num) < 1e21:
        text = format(Decimal(text), "f")

    if text.endswith(".0"):
        text = text[:-2]
    return text


def stringify(value: LoxValue) -> str:
    match value:
        case LoxNil():
            return "nil"
        case LoxBool(value=b):
            return "true" if b else "false"
        case LoxNumber(value=num):
            return format_number(num)
        case LoxString(value=s):
            return s
        case _:
            raise TypeError(f"Not a Lox value: {type(value).__name__}")
