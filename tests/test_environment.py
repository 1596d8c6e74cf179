from __future__ import annotations

import pytest

from tests.support.harness import LoxNumber, LoxString, UndefinedVariable
from lox_ref.token_types import TT, Tok
from lox_ref.types import NIL, Frame


def _name(text: str, line: int = 1) -> Tok:
    return Tok(TT.IDENTIFIER, text, None, line)


def test_define_and_get() -> None:
    frame = Frame()
    frame.define("a", LoxNumber(1.0))
    assert frame.get(_name("a")) == LoxNumber(1.0)


def test_define_overwrites_in_same_frame() -> None:
    frame = Frame()
    frame.define("a", LoxNumber(1.0))
    frame.define("a", NIL)
    assert frame.get(_name("a")) is NIL


def test_get_walks_parents() -> None:
    root = Frame()
    root.define("a", LoxString("root"))
    leaf = Frame(Frame(root))

    assert leaf.get(_name("a")) == LoxString("root")
    assert leaf.depth() == 2
    assert root.depth() == 0


def test_assign_updates_nearest_binding() -> None:
    root = Frame()
    root.define("a", LoxNumber(1.0))
    mid = Frame(root)
    mid.define("a", LoxNumber(2.0))
    leaf = Frame(mid)

    leaf.assign(_name("a"), LoxNumber(3.0))

    assert mid.vars["a"] == LoxNumber(3.0)
    assert root.vars["a"] == LoxNumber(1.0)
    assert "a" not in leaf.vars


def test_missing_name_raises_with_token() -> None:
    frame = Frame(Frame())
    token = _name("ghost", line=4)

    with pytest.raises(UndefinedVariable) as exc_info:
        frame.get(token)
    assert exc_info.value.token is token
    assert exc_info.value.report() == "Undefined variable 'ghost'.\n[line 4]"

    with pytest.raises(UndefinedVariable):
        frame.assign(token, NIL)
    assert "ghost" not in frame.vars
