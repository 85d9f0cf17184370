from __future__ import annotations

from ..types import NumberCoercionError, SblBool, SblFn, SblNone, SblNumber, SblValue

def to_number(val: SblValue) -> int:
    """none -> 0, number -> itself, boolean -> 1/0; functions do not coerce."""
    match val:
        case SblNone():
            return 0
        case SblNumber(value=num):
            return num
        case SblBool(value=b):
            return 1 if b else 0
        case _:
            raise NumberCoercionError(val)

def is_truthy(val: SblValue) -> bool:
    return to_number(val) != 0

def is_function(val: SblValue) -> bool:
    return isinstance(val, SblFn)
