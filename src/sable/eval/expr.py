from __future__ import annotations

from typing import Callable, List

from lark import Token, Tree

from ..tree import node_position, tree_label
from ..types import DivisionByZeroError, Environment, SableRuntimeError, SblBool, SblNumber, SblValue
from .helpers import is_function, is_truthy, to_number

EvalFunc = Callable[[Tree, Environment], SblValue]

def eval_binop(n: Tree, env: Environment, eval_func: EvalFunc) -> SblValue:
    """
    Evaluate *n* together with the left-leaning binop chain under it.

    `1 + 2 - 3 ...` parses as a left-deep tree; the spine is walked in a
    loop and folded back up in source order, so a long flat chain does not
    cost one Python frame per operator.
    """
    spine: List[Tree] = [n]
    node = n.children[1]
    while tree_label(node) == 'binop' and node.children[0] != '=':
        spine.append(node)
        node = node.children[1]

    # Both operands always run, and/or included.
    acc = eval_func(node, env)
    for link in reversed(spine):
        op, _, rhs_node = link.children
        rhs = eval_func(rhs_node, env)
        try:
            acc = apply_binary_operator(str(op), acc, rhs)
        except SableRuntimeError as e:
            pos = node_position(link)
            if pos is not None:
                e.attach_position(*pos)
            raise

    return acc

def apply_binary_operator(op: str, lhs: SblValue, rhs: SblValue) -> SblValue:
    match op:
        case '==':
            return SblBool(_values_equal(lhs, rhs))
        case '!=':
            return SblBool(not _values_equal(lhs, rhs))
        case 'and':
            return SblBool(is_truthy(lhs) and is_truthy(rhs))
        case 'or':
            return SblBool(is_truthy(lhs) or is_truthy(rhs))

    a = to_number(lhs)
    b = to_number(rhs)

    match op:
        case '+':
            return SblNumber(a + b)
        case '-':
            return SblNumber(a - b)
        case '*':
            return SblNumber(a * b)
        case '/':
            return SblNumber(_trunc_div(a, b))
        case '<':
            return SblBool(a < b)
        case '<=':
            return SblBool(a <= b)
        case '>':
            return SblBool(a > b)
        case '>=':
            return SblBool(a >= b)
        case _:
            raise SableRuntimeError(f"Unknown binary operator '{op}'")

def eval_unary(op: Token, operand_node: Tree, env: Environment, eval_func: EvalFunc) -> SblValue:
    operand = eval_func(operand_node, env)

    match str(op):
        case 'not' | '!':
            return SblBool(not is_truthy(operand))
        case '-':
            return SblNumber(-to_number(operand))
        case _:
            raise SableRuntimeError(f"Unknown unary operator '{op}'")

def _values_equal(lhs: SblValue, rhs: SblValue) -> bool:
    if is_function(lhs) and is_function(rhs):
        return lhs == rhs

    return to_number(lhs) == to_number(rhs)

def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    if b == 0:
        raise DivisionByZeroError()

    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
