from __future__ import annotations

import pytest

from tests.support.harness import (
    DivisionByZeroError,
    NumberCoercionError,
    SblBool,
    SblNumber,
    eval_source,
    run_runtime_case,
)


def _num(source: str, expected: int):
    return pytest.param(source, ("number", expected), None, id=f"num:{source}")


def _bool(source: str, expected: bool):
    return pytest.param(source, ("bool", expected), None, id=f"bool:{source}")


def _err(source: str, exc: type, label: str):
    return pytest.param(source, None, exc, id=f"err:{label}")


LITERAL_CASES = [
    pytest.param("none", ("none", None), None, id="lit:none"),
    _num("0", 0),
    _num("1", 1),
    _bool("true", True),
    _bool("false", False),
    pytest.param("{}", ("none", None), None, id="lit:empty-block"),
    _num("{0}", 0),
    _num("{0 1}", 1),
]

ARITHMETIC_CASES = [
    _num("1 + 2", 3),
    _num("1 - 2", -1),
    _num("1 * 2", 2),
    _num("1 / 2", 0),
    _num("7 / 2", 3),
    _num("-7 / 2", -3),
    _num("7 / -2", -3),
    _num("-7 / -2", 3),
    _num("0 + 1 * 2", 2),
    _num("(0 + 1) * 2", 2),
    _num("10 - 3 - 2", 5),
    _num("100 / 10 / 5", 2),
    _num("2 * 3 + 4 * 5", 26),
    _num("-3 + 5", 2),
    _num("--4", 4),
    _num("2147483647 + 1", 2147483648),
    _num("2147483647 * 2147483647", 4611686014132420609),
]

COMPARISON_CASES = [
    _bool("1 == 1", True),
    _bool("1 == 2", False),
    _bool("1 != 1", False),
    _bool("1 != 2", True),
    _bool("1 < 0", False),
    _bool("1 <= 0", False),
    _bool("1 < 1", False),
    _bool("1 <= 1", True),
    _bool("1 < 2", True),
    _bool("1 <= 2", True),
    _bool("1 > 0", True),
    _bool("1 >= 0", True),
    _bool("1 > 1", False),
    _bool("1 >= 1", True),
    _bool("1 > 2", False),
    _bool("1 >= 2", False),
    _bool("1 + 1 == 2", True),
]

LOGICAL_CASES = [
    _bool("true and true", True),
    _bool("true and false", False),
    _bool("true and none", False),
    _bool("false and true", False),
    _bool("false and false", False),
    _bool("false and none", False),
    _bool("none and true", False),
    _bool("none and false", False),
    _bool("none and none", False),
    _bool("true or true", True),
    _bool("true or false", True),
    _bool("true or none", True),
    _bool("false or true", True),
    _bool("false or false", False),
    _bool("false or none", False),
    _bool("none or true", True),
    _bool("none or false", False),
    _bool("none or none", False),
    _bool("2 and 3", True),
    _bool("0 or -1", True),
    _bool("not true", False),
    _bool("not none", True),
    _bool("!0", True),
    _bool("!5", False),
]

COERCION_CASES = [
    _num("true + true", 2),
    _num("none + 5", 5),
    _num("false * 9", 0),
    _bool("true == 1", True),
    _bool("none == false", True),
    _bool("none == 0", True),
    _bool("true > false", True),
    _num("-true", -1),
]

ERROR_CASES = [
    _err("1 / 0", DivisionByZeroError, "div-zero"),
    _err("1 / none", DivisionByZeroError, "div-none"),
    _err("1 / false", DivisionByZeroError, "div-false"),
    _err("fn f() 0\nf + 1", NumberCoercionError, "fn-plus"),
    _err("fn f() 0\n1 < f", NumberCoercionError, "fn-compare"),
    _err("fn f() 0\nf == 1", NumberCoercionError, "fn-eq-number"),
    _err("fn f() 0\nf and true", NumberCoercionError, "fn-and"),
    _err("fn f() 0\nnot f", NumberCoercionError, "fn-not"),
    _err("fn f() 0\ny = -f", NumberCoercionError, "fn-negate"),
]


@pytest.mark.parametrize(
    "source, expectation, expected_exc",
    LITERAL_CASES
    + ARITHMETIC_CASES
    + COMPARISON_CASES
    + LOGICAL_CASES
    + COERCION_CASES
    + ERROR_CASES,
)
def test_operators(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_function_equality_is_structural() -> None:
    assert eval_source("{fn f(a) a g = f f == g}") == SblBool(True)
    assert eval_source("{fn f(a) a fn g(a) a f == g}") == SblBool(True)
    assert eval_source("{fn f(a) a fn g(b) b f == g}") == SblBool(False)
    assert eval_source("{fn f(a) a fn g(a) a + 1 f != g}") == SblBool(True)


def test_and_or_do_not_short_circuit() -> None:
    # Both sides run: the assignments on the right land even when the left decides.
    result = eval_source("{x = 0 false and (x = 1) true or (y = 2) x + y}")
    assert result == SblNumber(3)


def test_operands_evaluate_left_to_right() -> None:
    assert eval_source("{x = 1 (x = x * 10) + (x = x + 1) x}") == SblNumber(11)
