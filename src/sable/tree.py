"""Expression tree construction and inspection helpers.

The parser builds ``lark.Tree`` nodes labelled with the expression kind;
names and operator symbols are kept as ``lark.Token`` leaves so they carry
their source position. Number and boolean literals hold the converted
Python value directly.

    number   [int]
    bool     [bool]
    none     []
    block    [expr, ...]
    fn       [paramlist[IDENT, ...], body]
    return   [expr]
    var      [IDENT]
    call     [IDENT, args[expr, ...]]
    binop    [OP, lhs, rhs]
    unary    [OP, operand]
    let      [IDENT, expr]
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]

# Operator symbol -> token type name used on binop/unary leaves
OP_TOKEN_TYPES = {
    '=': 'ASSIGN',
    '+': 'PLUS',
    '-': 'MINUS',
    '*': 'STAR',
    '/': 'SLASH',
    '==': 'EQ',
    '!=': 'NEQ',
    '<': 'LT',
    '<=': 'LTE',
    '>': 'GT',
    '>=': 'GTE',
    'and': 'AND',
    'or': 'OR',
    'not': 'NOT',
    '!': 'NEG',
}

# ---------------- Constructors ----------------

def number(value: int) -> Tree:
    return Tree('number', [value])

def boolean(value: bool) -> Tree:
    return Tree('bool', [value])

def none() -> Tree:
    return Tree('none', [])

def block(exprs: Iterable[Tree]) -> Tree:
    return Tree('block', list(exprs))

def ident(name: str, line: Optional[int] = None, column: Optional[int] = None) -> Token:
    return Token('IDENT', name, line=line, column=column)

def op_token(symbol: str, line: Optional[int] = None, column: Optional[int] = None) -> Token:
    return Token(OP_TOKEN_TYPES[symbol], symbol, line=line, column=column)

def function(params: Iterable[Union[str, Token]], body: Tree) -> Tree:
    names = [p if isinstance(p, Token) else ident(p) for p in params]
    return Tree('fn', [Tree('paramlist', names), body])

def return_(expr: Tree) -> Tree:
    return Tree('return', [expr])

def var(name: Union[str, Token]) -> Tree:
    return Tree('var', [name if isinstance(name, Token) else ident(name)])

def call(callee: Union[str, Token], args: Iterable[Tree]) -> Tree:
    name = callee if isinstance(callee, Token) else ident(callee)
    return Tree('call', [name, Tree('args', list(args))])

def binop(op: Union[str, Token], lhs: Tree, rhs: Tree) -> Tree:
    tok = op if isinstance(op, Token) else op_token(op)
    return Tree('binop', [tok, lhs, rhs])

def unary(op: Union[str, Token], operand: Tree) -> Tree:
    tok = op if isinstance(op, Token) else op_token(op)
    return Tree('unary', [tok, operand])

def let(name: Union[str, Token], expr: Tree) -> Tree:
    return Tree('let', [name if isinstance(name, Token) else ident(name), expr])

def assign(name: Union[str, Token], expr: Tree) -> Tree:
    """``name = expr``; also what a ``fn`` statement desugars to."""
    return binop('=', var(name), expr)

# ---------------- Inspection ----------------

def is_tree(node: object) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: object) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: object) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: object) -> List[object]:
    if not is_tree(node):
        return []

    return list(node.children)

def param_names(fn_node: Tree) -> Tuple[str, ...]:
    paramlist = fn_node.children[0]
    return tuple(str(tok) for tok in paramlist.children)

def node_position(node: object) -> Optional[Tuple[int, int]]:
    """Line/column of the first positioned token under *node*, if any."""
    if is_token(node):
        if node.line is None:
            return None
        return node.line, node.column if node.column is not None else 0

    for child in tree_children(node):
        found = node_position(child)
        if found is not None:
            return found

    return None
