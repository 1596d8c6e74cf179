from __future__ import annotations

from ..types import LoxBool, LoxNil, LoxValue

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            # Numbers (0 included) and strings ("" included) are truthy
            return True
