"""Evaluator helper modules for the Sable runtime."""

__all__ = [
    "bind",
    "blocks",
    "expr",
    "fn",
    "helpers",
]
