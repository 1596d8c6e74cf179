"""
Lexer for Lox - Recursive Descent Parser

Tokenizes Lox source code into a stream of tokens.

Features:
- Single-pass tokenization
- Line tracking for every emitted token
- Error recovery: bad characters and unterminated strings are reported and
  scanning continues, so one pass surfaces every lexical error
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import ErrorReporter
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(f"{message} at line {line}")


class Lexer:
    """
    Lox lexer.

    A single cursor walks the source. `start` marks the first character of
    the lexeme being scanned, `pos` the character under consideration.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    SINGLE_CHAR = {
        '(': TT.LEFT_PAREN,
        ')': TT.RIGHT_PAREN,
        '{': TT.LEFT_BRACE,
        '}': TT.RIGHT_BRACE,
        ',': TT.COMMA,
        '.': TT.DOT,
        '-': TT.MINUS,
        '+': TT.PLUS,
        ';': TT.SEMICOLON,
        '*': TT.STAR,
    }

    # Operators that become two-character tokens when followed by '='
    WITH_EQUAL = {
        '!': (TT.BANG, TT.BANG_EQUAL),
        '=': (TT.EQUAL, TT.EQUAL_EQUAL),
        '<': (TT.LESS, TT.LESS_EQUAL),
        '>': (TT.GREATER, TT.GREATER_EQUAL),
    }

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Tok] = []
        self.errors: List[LexError] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while not self.at_end():
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.advance()

        if ch in self.SINGLE_CHAR:
            self.emit(self.SINGLE_CHAR[ch])
            return

        if ch in self.WITH_EQUAL:
            single, double = self.WITH_EQUAL[ch]
            self.emit(double if self.match('=') else single)
            return

        if ch == '/':
            if self.match('/'):
                self.skip_comment()
            else:
                self.emit(TT.SLASH)
            return

        if ch in (' ', '\r', '\t'):
            return

        if ch == '\n':
            self.line += 1
            return

        if ch == '"':
            self.scan_string()
            return

        if is_digit(ch):
            self.scan_number()
            return

        if is_alpha(ch):
            self.scan_identifier()
            return

        self.error("Unexpected character.")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escapes, may span lines)"""
        while self.peek() != '"' and not self.at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal"""
        while is_digit(self.peek()):
            self.advance()

        # A '.' only belongs to the number when a digit follows it
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while is_alnum(self.peek()):
            self.advance()

        text = self.source[self.start:self.pos]
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER))

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        """Consume one character and return it"""
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def match(self, expected: str) -> bool:
        """Consume the next character only if it is `expected`"""
        if self.peek() != expected:
            return False
        self.pos += 1
        return True

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() != '\n' and not self.at_end():
            self.advance()

    def emit(self, token_type: TT, literal=None):
        """Emit a token for the current lexeme"""
        lexeme = self.source[self.start:self.pos]
        self.tokens.append(Tok(token_type, lexeme, literal, self.line))

    def error(self, message: str):
        err = LexError(message, self.line)
        self.errors.append(err)

        if self.reporter is not None:
            self.reporter.error(self.line, message)


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_alnum(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


# ============================================================================
# Public API
# ============================================================================

def lex(source: str, reporter: Optional[ErrorReporter] = None) -> Tuple[List[Tok], List[LexError]]:
    """Tokenize `source`, returning the tokens plus every lexical error seen"""
    lexer = Lexer(source, reporter=reporter)
    tokens = lexer.tokenize()
    return tokens, lexer.errors


def tokenize(source: str, reporter: Optional[ErrorReporter] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    tokens, _ = lex(source, reporter=reporter)
    return tokens


if __name__ == '__main__':
    # Simple test
    test_source = '''
var i = 0;
while (i < 3) {
  print i; // counts up
  i = i + 1;
}
'''

    for tok in tokenize(test_source):
        print(tok)
