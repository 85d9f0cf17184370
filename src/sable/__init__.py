"""Sable: a small expression language with a recursive-descent front end
and a tree-walking evaluator."""

from .evaluator import evaluate, new_environment
from .parser_rd import parse

__all__ = ["evaluate", "new_environment", "parse"]
