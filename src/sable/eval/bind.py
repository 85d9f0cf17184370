from __future__ import annotations

from typing import Callable

from lark import Tree

from ..tree import tree_label
from ..types import AssignTargetError, Environment, SblValue

EvalFunc = Callable[[Tree, Environment], SblValue]

def eval_assign(target: Tree, rhs_node: Tree, env: Environment, eval_func: EvalFunc) -> SblValue:
    """`name = expr`: rebind the visible cell in place or create one locally."""
    if tree_label(target) != 'var':
        raise AssignTargetError(target)

    name = str(target.children[0])
    value = eval_func(rhs_node, env)
    env.assign(name, value)

    return value

def eval_let(n: Tree, env: Environment, eval_func: EvalFunc) -> SblValue:
    """`let name = expr` always binds in the innermost scope."""
    name_tok, rhs_node = n.children
    value = eval_func(rhs_node, env)
    env.define(str(name_tok), value)

    return value
