"""
Token Types for the Sable Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    IDENT = auto()

    # Keywords
    FN = auto()
    RETURN = auto()
    LET = auto()
    AND = auto()
    OR = auto()
    NOT = auto()

    # Literal words
    TRUE = auto()
    FALSE = auto()
    NONE = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Comparison
    EQ = auto()
    NEQ = auto()
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # Logical/bitwise not
    NEG = auto()  # !

    # Assignment
    ASSIGN = auto()  # =

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMI = auto()

    # Special
    EOF = auto()


# Binary operator precedence (higher binds tighter). Anything missing is -1
# and never climbs.
PRECEDENCE = {
    TT.ASSIGN: 2,
    TT.AND: 9,
    TT.OR: 9,
    TT.EQ: 10,
    TT.NEQ: 10,
    TT.LT: 10,
    TT.LTE: 10,
    TT.GT: 10,
    TT.GTE: 10,
    TT.PLUS: 20,
    TT.MINUS: 20,
    TT.STAR: 40,
    TT.SLASH: 40,
}


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    @property
    def precedence(self) -> int:
        return PRECEDENCE.get(self.type, -1)

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
