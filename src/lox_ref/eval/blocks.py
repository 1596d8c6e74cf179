from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable, Iterator
from typing_extensions import Protocol

from ..tree import Block, Stmt
from ..types import Frame

ExecFunc = Callable[[Stmt], None]

class FrameHolder(Protocol):
    frame: Frame

def exec_program(statements: Iterable[Stmt], exec_func: ExecFunc) -> None:
    """Run a stmt list in order; the first failure propagates."""
    for stmt in statements:
        exec_func(stmt)

@contextmanager
def child_frame(holder: FrameHolder) -> Iterator[Frame]:
    """Swap in a fresh child of the current frame, restoring it on any exit."""
    previous = holder.frame
    holder.frame = Frame(parent=previous)

    try:
        yield holder.frame
    finally:
        holder.frame = previous

def eval_block(n: Block, holder: FrameHolder, exec_func: ExecFunc) -> None:
    with child_frame(holder):
        exec_program(n.statements, exec_func)
