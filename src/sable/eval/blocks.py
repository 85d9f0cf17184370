from __future__ import annotations

from typing import Callable, Iterable

from lark import Tree

from ..types import Environment, SblNone, SblValue

EvalFunc = Callable[[Tree, Environment], SblValue]

def eval_block(children: Iterable[Tree], env: Environment, eval_func: EvalFunc) -> SblValue:
    """Run every expression in order, returning the last value (none if empty)."""
    result: SblValue = SblNone()

    for child in children:
        result = eval_func(child, env)

    return result
