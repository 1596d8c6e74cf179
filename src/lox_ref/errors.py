"""Line-keyed error reporting shared by the lexer, parser and driver.

Stages never abort on the first problem: each one reports what it found and
keeps going, so a single pass can surface every lexical and syntax error.
The driver decides what to do once the stage is done (usually: flush the
diagnostics and skip evaluation).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO


@dataclass(frozen=True)
class Diagnostic:
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    """Collects diagnostics; `flush` writes them out in ascending line order."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False

    def report(self, line: int, where: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(line, where, message))
        self.had_error = True

    def error(self, line: int, message: str) -> None:
        self.report(line, "", message)

    def flush(self) -> List[Diagnostic]:
        """Write pending diagnostics (stable-sorted by line) and forget them."""
        out = self.stream if self.stream is not None else sys.stderr
        pending = sorted(self.diagnostics, key=lambda d: d.line)
        self.diagnostics = []

        for diag in pending:
            print(diag, file=out)

        return pending

    def reset(self) -> None:
        """Clear the error flag so the next REPL line starts fresh."""
        self.diagnostics = []
        self.had_error = False
