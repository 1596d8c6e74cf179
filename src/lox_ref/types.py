from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from typing_extensions import TypeAlias

from .token_types import Tok

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

LoxValue: TypeAlias = LoxNil | LoxBool | LoxNumber | LoxString

NIL = LoxNil()

def from_literal(literal: Optional[float | str]) -> LoxValue:
    """Lift a token literal (float, str or None) into a runtime value."""
    match literal:
        case None:
            return NIL
        case bool():
            return LoxBool(literal)
        case float() | int():
            return LoxNumber(float(literal))
        case str():
            return LoxString(literal)
        case _:
            raise TypeError(f"Unsupported literal {literal!r}")

# ---------- Environment ----------

class Frame:
    """One lexical scope. The global frame is the only one without a parent."""

    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}

    def define(self, name: str, val: LoxValue) -> None:
        # Redeclaring a name in the same frame simply overwrites it
        self.vars[name] = val

    def get(self, name: Tok) -> LoxValue:
        frame: Optional[Frame] = self

        while frame is not None:
            if name.lexeme in frame.vars:
                return frame.vars[name.lexeme]
            frame = frame.parent

        raise UndefinedVariable(name)

    def assign(self, name: Tok, val: LoxValue) -> None:
        frame: Optional[Frame] = self

        while frame is not None:
            if name.lexeme in frame.vars:
                frame.vars[name.lexeme] = val
                return
            frame = frame.parent

        raise UndefinedVariable(name)

    def depth(self) -> int:
        n = 0
        frame = self.parent

        while frame is not None:
            n += 1
            frame = frame.parent

        return n

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    """Failure during evaluation, tied to the token it originated from."""

    def __init__(self, token: Tok, message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> int:
        return self.token.line

    def report(self) -> str:
        return f"{self.message}\n[line {self.line}]"

class LoxTypeError(LoxRuntimeError):
    pass

class UndefinedVariable(LoxRuntimeError):
    def __init__(self, name: Tok):
        super().__init__(name, f"Undefined variable '{name.lexeme}'.")
        self.name = name.lexeme

class StackOverflow(LoxRuntimeError):
    """Nesting deeper than the host stack allows."""

    def __init__(self, token: Tok):
        super().__init__(token, "Stack overflow.")
