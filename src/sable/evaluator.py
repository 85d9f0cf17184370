from __future__ import annotations

import logging
from typing import Callable, Dict

from lark import Tree

from .tree import Node, is_tree, node_position
from .types import (
    Environment,
    RecursionDepthError,
    SableReturnSignal,
    SableRuntimeError,
    SblBool,
    SblNone,
    SblNumber,
    SblValue,
    UnsupportedExpressionError,
)
from .eval.bind import eval_assign, eval_let
from .eval.blocks import eval_block
from .eval.expr import eval_binop, eval_unary
from .eval.fn import eval_call, eval_fn_literal

EvalFunc = Callable[[Tree, Environment], SblValue]

logger = logging.getLogger(__name__)

# ---------------- Public API ----------------

def new_environment() -> Environment:
    """Fresh global scope for one top-level execution."""
    return Environment()

def evaluate(ast: Tree, env: Environment) -> SblValue:
    """
    Evaluate *ast* against *env*. A top-level `return` ends evaluation with
    its value; runtime errors propagate to the caller unchanged. Running out
    of Python stack (deep recursion in the program) becomes RecursionDepthError.
    """
    logger.debug("evaluate %s", getattr(ast, 'data', type(ast).__name__))

    try:
        return eval_node(ast, env)
    except SableReturnSignal as signal:
        return signal.value
    except RecursionError:
        raise RecursionDepthError() from None

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> SblValue:
    try:
        return _eval_node_inner(n, env)
    except SableRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def _maybe_attach_location(exc: SableRuntimeError, node: Node) -> None:
    if exc.line is not None:
        return

    pos = node_position(node)
    if pos is not None:
        exc.attach_position(*pos)

def _eval_node_inner(n: Node, env: Environment) -> SblValue:
    if not is_tree(n):
        raise UnsupportedExpressionError(type(n).__name__)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is not None:
        return handler(n, env)

    match n.data:
        case 'number':
            return SblNumber(n.children[0])
        case 'bool':
            return SblBool(n.children[0])
        case 'none':
            return SblNone()
        case 'fn':
            return eval_fn_literal(n)
        case 'return':
            raise SableReturnSignal(eval_node(n.children[0], env))
        case _:
            raise UnsupportedExpressionError(n.data)

def _eval_binop(n: Tree, env: Environment) -> SblValue:
    op, lhs, rhs = n.children

    if op == '=':
        return eval_assign(lhs, rhs, env, eval_node)

    return eval_binop(n, env, eval_node)

_NODE_DISPATCH: Dict[str, Callable[[Tree, Environment], SblValue]] = {
    'block': lambda n, env: eval_block(n.children, env, eval_node),
    'var': lambda n, env: env.get(str(n.children[0])),
    'call': lambda n, env: eval_call(n.children[0], n.children[1], env, eval_node),
    'binop': _eval_binop,
    'unary': lambda n, env: eval_unary(n.children[0], n.children[1], env, eval_node),
    'let': lambda n, env: eval_let(n, env, eval_node),
}
