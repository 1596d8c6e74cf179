"""AST node classes for Lox programs.

Expressions and statements are closed sets of frozen dataclasses. Every
operation over the tree (evaluation, dumping) dispatches with a `match`
over these shapes. `as_lark` renders any node as a `lark.Tree` so the AST
can be pretty-printed and compared in the same form the grammar tooling uses.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from typing import List, Optional, Sequence, Tuple, Union
from typing_extensions import TypeAlias

from lark import Token, Tree

from .token_types import Tok
from .types import LoxValue

# ---------------- Expressions ----------------

@dataclass(frozen=True)
class Literal:
    value: LoxValue

@dataclass(frozen=True)
class Grouping:
    expression: 'Expr'

@dataclass(frozen=True)
class Unary:
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True)
class Binary:
    left: 'Expr'
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True)
class Logical:
    left: 'Expr'
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True)
class Variable:
    name: Tok

@dataclass(frozen=True)
class Assign:
    name: Tok
    value: 'Expr'

Expr: TypeAlias = Literal | Grouping | Unary | Binary | Logical | Variable | Assign

# ---------------- Statements ----------------

@dataclass(frozen=True)
class Expression:
    expression: Expr

@dataclass(frozen=True)
class Print:
    expression: Expr

@dataclass(frozen=True)
class Var:
    name: Tok
    initializer: Optional[Expr] = None

@dataclass(frozen=True)
class Block:
    statements: Tuple['Stmt', ...]

@dataclass(frozen=True)
class If:
    condition: Expr
    then_branch: 'Stmt'
    else_branch: Optional['Stmt'] = None

@dataclass(frozen=True)
class While:
    condition: Expr
    body: 'Stmt'

Stmt: TypeAlias = Expression | Print | Var | Block | If | While

Node: TypeAlias = Expr | Stmt

# ---------------- Rendering ----------------

def _tok(tok: Tok) -> Token:
    return Token(tok.type.name, tok.lexeme, line=tok.line)

def as_lark(node: Node) -> Tree:
    """Convert an AST node into a `lark.Tree` (labels are snake_case kinds)."""
    match node:
        case Literal(value=value):
            return Tree('literal', [repr(value)])
        case Grouping(expression=inner):
            return Tree('grouping', [as_lark(inner)])
        case Unary(operator=op, right=right):
            return Tree('unary', [_tok(op), as_lark(right)])
        case Binary(left=left, operator=op, right=right):
            return Tree('binary', [as_lark(left), _tok(op), as_lark(right)])
        case Logical(left=left, operator=op, right=right):
            return Tree('logical', [as_lark(left), _tok(op), as_lark(right)])
        case Variable(name=name):
            return Tree('variable', [_tok(name)])
        case Assign(name=name, value=value):
            return Tree('assign', [_tok(name), as_lark(value)])
        case Expression(expression=expr):
            return Tree('expr_stmt', [as_lark(expr)])
        case Print(expression=expr):
            return Tree('print_stmt', [as_lark(expr)])
        case Var(name=name, initializer=init):
            children: List[Union[Tree, Token]] = [_tok(name)]
            if init is not None:
                children.append(as_lark(init))
            return Tree('var_decl', children)
        case Block(statements=stmts):
            return Tree('block', [as_lark(s) for s in stmts])
        case If(condition=cond, then_branch=then, else_branch=other):
            children = [as_lark(cond), as_lark(then)]
            if other is not None:
                children.append(as_lark(other))
            return Tree('if_stmt', children)
        case While(condition=cond, body=body):
            return Tree('while_stmt', [as_lark(cond), as_lark(body)])
        case _:
            raise TypeError(f"Not an AST node: {type(node).__name__}")

def first_token(node: Node) -> Optional[Tok]:
    """Leftmost token stored in a subtree, found without recursion."""
    stack: List[object] = [node]

    while stack:
        item = stack.pop()
        match item:
            case Tok():
                return item
            case tuple():
                stack.extend(reversed(item))
            case _ if is_dataclass(item):
                # Field order is source order for every node kind
                stack.extend(getattr(item, f.name) for f in reversed(fields(item)))

    return None

def program_tree(statements: Sequence[Stmt]) -> Tree:
    return Tree('program', [as_lark(s) for s in statements])

def dump(statements: Sequence[Stmt], indent: str = '  ') -> str:
    """Indented text rendering of a whole program."""
    return program_tree(statements).pretty(indent)
