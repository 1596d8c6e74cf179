from __future__ import annotations

import io

import pytest
from prompt_toolkit.document import Document

from tests.support.harness import ErrorReporter, Interpreter
from lox_ref.repl import handle_slash, normalize, repl_line
from lox_ref.repl_highlight import (
    GROUP_STYLE,
    LoxHighlighter,
    _highlight_line,
    token_group,
)
from lox_ref.token_types import TT
from lox_ref.utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter(stream=io.StringIO())


def _out(interpreter: Interpreter) -> str:
    return interpreter.out.getvalue()  # type: ignore[union-attr]


def test_repl_state_persists_across_lines(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line("var a = 1;", interpreter, reporter)
    repl_line("a = a + 1;", interpreter, reporter)
    repl_line("print a;", interpreter, reporter)
    assert _out(interpreter) == "2\n"


def test_repl_recovers_after_syntax_error(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line("print ;", interpreter, reporter)
    assert not reporter.had_error
    assert "Expect expression." in reporter.stream.getvalue()  # type: ignore[union-attr]

    repl_line('print "fine";', interpreter, reporter)
    assert _out(interpreter) == "fine\n"


def test_repl_recovers_after_runtime_error(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line("var a = 1; print a; print -nil; a = 5;", interpreter, reporter)
    repl_line("print a;", interpreter, reporter)

    # The statement after the failure never ran
    assert _out(interpreter) == "1\n1\n"
    assert "Operand must be a number." in interpreter.err.getvalue()  # type: ignore[union-attr]
    assert interpreter.frame is interpreter.globals


def test_repl_ignores_blank_and_invisible_input(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line("   ", interpreter, reporter)
    repl_line("\u200b\ufeff", interpreter, reporter)
    assert _out(interpreter) == ""
    assert not reporter.had_error


def test_normalize_strips_invisible_characters() -> None:
    assert normalize("print 1;\r") == "print 1;"
    assert normalize("pr\u200bint 1;") == "print 1;"


NORMALIZE_CASES = [
    pytest.param('print "a\u00a0b";', 'print "a\u00a0b";', id="nbsp-in-string-kept"),
    pytest.param('print "x\u200by";', 'print "x\u200by";', id="zero-width-in-string-kept"),
    pytest.param('print\u00a01;', "print 1;", id="nbsp-outside-string-is-space"),
    pytest.param('print "a" + \u200b"b";', 'print "a" + "b";', id="between-strings-stripped"),
    pytest.param('print "open\u200b', 'print "open\u200b', id="unterminated-string-kept"),
    pytest.param("1;\u200b // a\u200bb", "1; // a\u200bb", id="comment-kept"),
]


@pytest.mark.parametrize("text, expected", NORMALIZE_CASES)
def test_normalize_leaves_literals_alone(text: str, expected: str) -> None:
    assert normalize(text) == expected


def test_repl_string_matches_file_run(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line('print "a\u00a0b\u200bc";', interpreter, reporter)
    assert _out(interpreter) == "a\u00a0b\u200bc\n"


def test_repl_survives_deep_nesting(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    repl_line("print " + "(" * 1000 + "1" + ")" * 1000 + ";", interpreter, reporter)
    repl_line("print " + " + ".join(["1"] * 5000) + ";", interpreter, reporter)
    repl_line("print 7;", interpreter, reporter)

    assert "Expression too deeply nested." in reporter.stream.getvalue()  # type: ignore[union-attr]
    assert "Stack overflow." in interpreter.err.getvalue()  # type: ignore[union-attr]
    assert _out(interpreter) == "7\n"


def test_slash_reset(interpreter: Interpreter, reporter: ErrorReporter, capsys: pytest.CaptureFixture[str]) -> None:
    repl_line("var kept = 1;", interpreter, reporter)
    assert handle_slash("/reset", interpreter)
    assert capsys.readouterr().out == "Environment reset.\n"

    repl_line("print kept;", interpreter, reporter)
    assert "Undefined variable 'kept'." in interpreter.err.getvalue()  # type: ignore[union-attr]


def test_slash_py_traceback_toggles(
    interpreter: Interpreter,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "0")

    handle_slash("/py-traceback", interpreter)
    assert debug_py_trace_enabled()
    handle_slash("/py-traceback", interpreter)
    assert not debug_py_trace_enabled()
    handle_slash("/py-traceback on", interpreter)
    assert debug_py_trace_enabled()
    handle_slash("/py-traceback off", interpreter)
    assert not debug_py_trace_enabled()

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Python traceback: on",
        "Python traceback: off",
        "Python traceback: on",
        "Python traceback: off",
    ]


def test_slash_rejects_bad_argument(interpreter: Interpreter, capsys: pytest.CaptureFixture[str]) -> None:
    assert handle_slash("/py-traceback maybe", interpreter)
    assert "Usage: /py-traceback" in capsys.readouterr().err


def test_unknown_slash_command(interpreter: Interpreter, capsys: pytest.CaptureFixture[str]) -> None:
    assert handle_slash("/frobnicate", interpreter)
    assert "Unknown command: /frobnicate" in capsys.readouterr().err


def test_non_command_is_not_handled(interpreter: Interpreter) -> None:
    assert not handle_slash("print 1;", interpreter)


TOKEN_GROUP_CASES = [
    pytest.param(TT.PRINT, "keyword", id="print"),
    pytest.param(TT.WHILE, "keyword", id="while"),
    pytest.param(TT.FUN, "reserved", id="fun"),
    pytest.param(TT.TRUE, "boolean", id="true"),
    pytest.param(TT.NIL, "constant", id="nil"),
    pytest.param(TT.NUMBER, "number", id="number"),
    pytest.param(TT.STRING, "string", id="string"),
    pytest.param(TT.IDENTIFIER, "identifier", id="identifier"),
    pytest.param(TT.SEMICOLON, "punctuation", id="semicolon"),
    pytest.param(TT.LESS_EQUAL, "operator", id="less-equal"),
]


@pytest.mark.parametrize("tt, group", TOKEN_GROUP_CASES)
def test_token_group(tt: TT, group: str) -> None:
    assert token_group(tt) == group


def test_highlight_line_covers_text() -> None:
    text = 'var x = "hi"; // note'
    fragments = _highlight_line(text)

    assert "".join(frag for _, frag in fragments) == text
    assert fragments[0] == (GROUP_STYLE["keyword"], "var")
    assert (GROUP_STYLE["string"], '"hi"') in fragments
    assert fragments[-1] == (GROUP_STYLE["comment"], "// note")


def test_highlight_line_marks_bad_text() -> None:
    assert (GROUP_STYLE["error"], " @ ") in _highlight_line("print @ 1;")
    assert _highlight_line('"open') == [(GROUP_STYLE["error"], '"open')]


def test_highlighter_lex_document() -> None:
    get_line = LoxHighlighter().lex_document(Document("print 1;\nfun"))

    assert get_line(0)[0] == (GROUP_STYLE["keyword"], "print")
    assert get_line(1) == [(GROUP_STYLE["reserved"], "fun")]
    assert get_line(7) == [("", "")]
