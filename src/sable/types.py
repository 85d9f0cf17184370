from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from lark import Tree
from typing_extensions import TypeAlias

# ---------- Value Model ----------

@dataclass(frozen=True)
class SblNone:
    def __repr__(self) -> str:
        return "none"

@dataclass(frozen=True)
class SblNumber:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class SblBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class SblFn:
    params: Tuple[str, ...]
    body: Tree
    def __repr__(self) -> str:
        return f"<fn {', '.join(self.params)}>" if self.params else "<fn>"

SblValue: TypeAlias = SblNone | SblNumber | SblBool | SblFn

# ---------- Environment ----------

@dataclass(eq=False)
class Cell:
    """Mutable slot a name is bound to. Rebinding a name reuses its cell."""
    value: SblValue

class Environment:
    """
    One scope in a scope chain. The global scope has no parent; call scopes
    link to the global scope of the environment that created them.
    """

    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, Cell] = {}

    @property
    def root(self) -> 'Environment':
        env = self
        while env.parent is not None:
            env = env.parent
        return env

    def child(self) -> 'Environment':
        """Fresh call scope that falls back to the global scope."""
        return Environment(parent=self.root)

    def find(self, name: str) -> Optional[Cell]:
        env: Optional[Environment] = self
        while env is not None:
            cell = env.vars.get(name)
            if cell is not None:
                return cell
            env = env.parent

        return None

    def cell(self, name: str) -> Cell:
        cell = self.find(name)
        if cell is None:
            raise UnknownVariableError(name)

        return cell

    def get(self, name: str) -> SblValue:
        return self.cell(name).value

    def define(self, name: str, val: SblValue) -> Cell:
        """Bind in this scope only, overwriting an existing local cell in place."""
        cell = self.vars.get(name)
        if cell is None:
            cell = self.vars[name] = Cell(val)
        else:
            cell.value = val

        return cell

    def assign(self, name: str, val: SblValue) -> Cell:
        """Overwrite the nearest visible binding, or create one in this scope."""
        cell = self.find(name)
        if cell is None:
            return self.define(name, val)

        cell.value = val
        return cell

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __repr__(self) -> str:
        kind = "global" if self.parent is None else "local"
        return f"<Environment {kind} {sorted(self.vars)}>"

# ---------- Exceptions ----------

class SableRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.line = None
        self.column = None

    def attach_position(self, line: int, column: int) -> None:
        if self.line is None:
            self.line = line
            self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message

        return f"{self.message} (line {self.line}, col {self.column})"

class UnknownVariableError(SableRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Name '{name}' not found")
        self.name = name

class NotAFunctionError(SableRuntimeError):
    def __init__(self, name: str, value: SblValue):
        super().__init__(f"'{name}' is not a function (got {value!r})")
        self.name = name
        self.value = value

class ArityError(SableRuntimeError):
    def __init__(self, name: str, expected: int, got: int):
        super().__init__(f"Function '{name}' expects {expected} args; got {got}")
        self.name = name
        self.expected = expected
        self.got = got

class AssignTargetError(SableRuntimeError):
    def __init__(self, target: object):
        label = target.data if isinstance(target, Tree) else type(target).__name__
        super().__init__(f"Cannot assign to {label} expression")

class NumberCoercionError(SableRuntimeError):
    def __init__(self, value: SblValue):
        super().__init__(f"Cannot convert {value!r} to a number")
        self.value = value

class DivisionByZeroError(SableRuntimeError):
    def __init__(self) -> None:
        super().__init__("Division by zero")

class UnsupportedExpressionError(SableRuntimeError):
    def __init__(self, label: str):
        super().__init__(f"Unsupported expression '{label}'")
        self.label = label

class RecursionDepthError(SableRuntimeError):
    def __init__(self) -> None:
        super().__init__("Maximum recursion depth exceeded")

class SableReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: SblValue):
        self.value = value
