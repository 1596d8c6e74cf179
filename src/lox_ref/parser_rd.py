"""
Recursive Descent Parser for Lox

Structure:
- Lexer: Token stream from source
- Parser: one method per precedence level, lowest precedence outermost
- AST: frozen dataclasses from `tree`

Syntax errors never abort the parse. Each one is reported, the parser
skips ahead to the next statement boundary, and parsing resumes so later
errors in the same input are still found.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import ErrorReporter
from .lexer_rd import lex
from .token_types import TT, Tok
from .tree import (
    Assign,
    Binary,
    Block,
    Expr,
    Expression,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from .types import NIL, LoxBool, from_literal

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error tied to the offending token"""
    def __init__(self, message: str, token: Tok):
        self.message = message
        self.token = token
        super().__init__(f"{message} at line {token.line}")

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def where(self) -> str:
        if self.token.type == TT.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"

# Tokens that begin a statement; synchronization stops in front of them
STATEMENT_STARTS = frozenset({
    TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
})

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. assignment (=), right associative
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. term (+, -)
    7. factor (*, /)
    8. unary (!, -)
    9. primary (literals, grouping, identifiers)
    """

    def __init__(self, tokens: List[Tok], reporter: Optional[ErrorReporter] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Tok(TT.EOF, '', None, line)]
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter
        self.errors: List[ParseError] = []

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next (EOF is never passed)"""
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.current, message)

    def error(self, token: Tok, message: str) -> ParseError:
        """Record a syntax error and hand it back for the caller to raise (or not)"""
        err = ParseError(message, token)
        self.errors.append(err)

        if self.reporter is not None:
            self.reporter.report(err.line, err.where, message)

        return err

    def synchronize(self) -> None:
        """Discard tokens up to the next probable statement boundary"""
        self.advance()

        while not self.at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.current.type in STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Stmt]:
        """Parse entire program; statements that failed to parse are dropped"""
        statements: List[Stmt] = []

        while not self.at_end():
            try:
                stmt = self.parse_declaration()
            except RecursionError:
                self.error(self.current, "Expression too deeply nested.")
                # The abandoned statement leaves brackets unclosed; skip to EOF
                self.pos = len(self.tokens) - 1
                break

            if stmt is not None:
                statements.append(stmt)

        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TT.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_var_decl(self) -> Stmt:
        """varDecl := "var" IDENTIFIER ( "=" expression )? ";" """
        name = self.expect(TT.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TT.EQUAL):
            initializer = self.parse_expr()

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TT.FOR):
            return self.parse_for_stmt()
        if self.match(TT.IF):
            return self.parse_if_stmt()
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        if self.match(TT.WHILE):
            return self.parse_while_stmt()
        if self.match(TT.LEFT_BRACE):
            return Block(tuple(self.parse_block()))

        return self.parse_expr_stmt()

    def parse_for_stmt(self) -> Stmt:
        """
        forStmt := "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement

        Desugared into a while loop:
            { init; while (cond) { body; incr; } }
        """
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition = None
        if not self.check(TT.SEMICOLON):
            condition = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Block((body, Expression(increment)))

        body = While(condition if condition is not None else Literal(LoxBool(True)), body)

        if initializer is not None:
            body = Block((initializer, body))

        return body

    def parse_if_stmt(self) -> Stmt:
        """ifStmt := "if" "(" expression ")" statement ( "else" statement )?"""
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_statement()
        else_branch = None
        # A dangling else binds to the nearest if
        if self.match(TT.ELSE):
            else_branch = self.parse_statement()

        return If(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> Stmt:
        value = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_while_stmt(self) -> Stmt:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_block(self) -> List[Stmt]:
        """block := "{" declaration* "}" (opening brace already consumed)"""
        statements: List[Stmt] = []

        while not self.check(TT.RIGHT_BRACE) and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        self.expect(TT.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expr_stmt(self) -> Stmt:
        expr = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        """assignment := IDENTIFIER "=" assignment | logic_or"""
        expr = self.parse_or()

        if self.match(TT.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)

            # Reported but not raised: the parser is not confused, only the target is wrong
            self.error(equals, "Invalid assignment target.")

        return expr

    def parse_or(self) -> Expr:
        return self._logical_chain(self.parse_and, TT.OR)

    def parse_and(self) -> Expr:
        return self._logical_chain(self.parse_equality, TT.AND)

    def parse_equality(self) -> Expr:
        return self._binary_chain(self.parse_comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        return self._binary_chain(
            self.parse_term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def parse_term(self) -> Expr:
        return self._binary_chain(self.parse_factor, TT.MINUS, TT.PLUS)

    def parse_factor(self) -> Expr:
        return self._binary_chain(self.parse_unary, TT.SLASH, TT.STAR)

    def _binary_chain(self, operand, *ops: TT) -> Expr:
        """Left-associative loop: a op b op c => ((a op b) op c)"""
        expr = operand()

        while self.match(*ops):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def _logical_chain(self, operand, op: TT) -> Expr:
        expr = operand()

        while self.match(op):
            operator = self.previous()
            right = operand()
            expr = Logical(expr, operator, right)

        return expr

    def parse_unary(self) -> Expr:
        if self.match(TT.BANG, TT.MINUS):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)

        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(TT.FALSE):
            return Literal(LoxBool(False))
        if self.match(TT.TRUE):
            return Literal(LoxBool(True))
        if self.match(TT.NIL):
            return Literal(NIL)

        if self.match(TT.NUMBER, TT.STRING):
            return Literal(from_literal(self.previous().literal))

        if self.match(TT.IDENTIFIER):
            return Variable(self.previous())

        if self.match(TT.LEFT_PAREN):
            expr = self.parse_expr()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.current, "Expect expression.")

# ============================================================================
# Public API
# ============================================================================

def parse(tokens: List[Tok], reporter: Optional[ErrorReporter] = None) -> Tuple[List[Stmt], List[ParseError]]:
    """Parse a token list into statements plus every syntax error seen"""
    parser = Parser(tokens, reporter=reporter)
    statements = parser.parse()
    return statements, parser.errors

def parse_source(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Lex and parse `source`; raises the first error when there are any.

    Without a reporter, errors surface as exceptions so callers that just want
    a tree (tests, tooling) get a hard failure instead of a partial program.
    """
    tokens, lex_errors = lex(source, reporter=reporter)
    statements, parse_errors = parse(tokens, reporter=reporter)

    if reporter is None:
        if lex_errors:
            raise lex_errors[0]
        if parse_errors:
            raise parse_errors[0]

    return statements
