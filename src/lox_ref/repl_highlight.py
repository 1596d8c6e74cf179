"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxLexer
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "reserved": "ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_KEYWORDS = {TT.AND, TT.ELSE, TT.FOR, TT.IF, TT.OR, TT.PRINT, TT.VAR, TT.WHILE}
# Reserved for features this interpreter does not run
_RESERVED = {TT.CLASS, TT.FUN, TT.RETURN, TT.SUPER, TT.THIS}
_PUNCTUATION = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}


def token_group(tt: TT) -> str:
    if tt in _KEYWORDS:
        return "keyword"
    if tt in _RESERVED:
        return "reserved"
    if tt in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tt == TT.NIL:
        return "constant"
    if tt == TT.NUMBER:
        return "number"
    if tt == TT.STRING:
        return "string"
    if tt == TT.IDENTIFIER:
        return "identifier"
    if tt in _PUNCTUATION:
        return "punctuation"
    return "operator"


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    lexer = LoxLexer(text)
    tokens = lexer.tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        # Gaps between tokens are whitespace, comments or bad characters.
        if idx > pos:
            result.extend(_gap_fragments(text[pos:idx]))

        style = GROUP_STYLE.get(token_group(tok.type), "")
        result.append((style, tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing text: a comment or an unterminated string.
    if pos < len(text):
        result.extend(_gap_fragments(text[pos:]))

    return result if result else [("", text)]


def _gap_fragments(gap: str) -> StyleAndTextTuples:
    comment_at = gap.find("//")
    if comment_at >= 0:
        fragments: StyleAndTextTuples = []
        if comment_at:
            fragments.extend(_gap_fragments(gap[:comment_at]))
        fragments.append((GROUP_STYLE["comment"], gap[comment_at:]))
        return fragments

    if gap.strip():
        return [(GROUP_STYLE["error"], gap)]
    return [("", gap)]


class LoxHighlighter(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
