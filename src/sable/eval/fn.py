from __future__ import annotations

import logging
from typing import Callable, List

from lark import Token, Tree

from ..tree import param_names
from ..types import ArityError, Environment, NotAFunctionError, SableReturnSignal, SblFn, SblValue

EvalFunc = Callable[[Tree, Environment], SblValue]

logger = logging.getLogger(__name__)

def eval_fn_literal(n: Tree) -> SblFn:
    params = param_names(n)
    body = n.children[1]

    return SblFn(params=params, body=body)

def eval_call(callee: Token, args_node: Tree, env: Environment, eval_func: EvalFunc) -> SblValue:
    name = str(callee)
    fn = env.get(name)

    if not isinstance(fn, SblFn):
        raise NotAFunctionError(name, fn)

    arg_nodes = args_node.children
    if len(arg_nodes) != len(fn.params):
        raise ArityError(name, len(fn.params), len(arg_nodes))

    args: List[SblValue] = [eval_func(a, env) for a in arg_nodes]

    return call_fn(fn, args, env, eval_func, name=name)

def call_fn(fn: SblFn, args: List[SblValue], env: Environment, eval_func: EvalFunc, name: str="<fn>") -> SblValue:
    """Run *fn* in a fresh call scope parented to the global scope; arity is already checked."""
    callee_env = env.child()
    for param, val in zip(fn.params, args):
        callee_env.define(param, val)

    logger.debug("call %s(%s)", name, ", ".join(repr(a) for a in args))

    try:
        return eval_func(fn.body, callee_env)
    except SableReturnSignal as signal:
        return signal.value
