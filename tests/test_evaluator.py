"""
Tests for the expression evaluator.
"""

import logging

import pytest

from core.rules import EvaluationError, ExpressionEvaluator, loose_equals, truthy


@pytest.fixture
def evaluator():
    return ExpressionEvaluator()


@pytest.mark.parametrize("expr,expected", [
    ("'a' . 'b' == 'ab'", True),
    ("!(false || true)", False),
    ("true && false || true", True),
    ("true and (false or true)", True),
    ("TRUE && !FALSE", True),
    ("!!true", True),
    ("1 < 2 && 'x' == \"x\"", True),
    ("'abc' == 'abd'", False),
    ("'abc' != 'abd'", True),
    ("'10' == 10", True),
    ("'10' == '10.0'", True),
    ("'3' > 2", True),
    ("2 >= 2 && 2 <= 2", True),
    ("-1 < 0", True),
    ("1e3 == 1000", True),
    ("1 . 2 == '12'", True),
    ("true . 'x' == '1x'", True),
    ("null . 'x' == 'x'", True),
    ("null == null", True),
    ("null == ''", True),
    ("null == false", True),
    ("null == 0", True),
    ("null == 'x'", False),
    ("true == 'yes'", True),
    ("false == ''", True),
    ("'it\\'s' == \"it's\"", True),
    ('"\\u5317\\u4eac" == \'北京\'', True),
    ('"a\\"b" == \'a"b\'', True),
])
def test_expressions(evaluator, expr, expected):
    assert evaluator.evaluate(expr) is expected


@pytest.mark.parametrize("expr,expected", [
    ("''", False),
    ("0", False),
    ("null", False),
    ("false", False),
    ("'a'", True),
    ("1", True),
    ("0.5", True),
])
def test_bare_atom_truthiness(evaluator, expr, expected):
    """Non-boolean atoms coerce with standard truthiness."""
    assert evaluator.evaluate(expr) is expected


def test_ordering_requires_numbers(evaluator):
    """Ordering with a non-numeric operand is false, not an error."""
    assert evaluator.evaluate("'a' > 1") is False
    assert evaluator.evaluate("null < 1") is False
    assert evaluator.evaluate("!('a' > 1)") is True


def test_nested_parentheses(evaluator):
    assert evaluator.evaluate("((1 == 1) && ((2 > 1) || (false)))") is True
    assert evaluator.evaluate("!(1 == 2) && (('a' . ('b' . 'c')) == 'abc')") is True


def test_deep_nesting(evaluator):
    """Depth is limited by the input, not the interpreter stack."""
    depth = 5000
    assert evaluator.evaluate("(" * depth + "true" + ")" * depth) is True
    assert evaluator.parse("!" * depth + "(" * depth + "0" + ")" * depth) is False
    assert evaluator.evaluate("(" * depth + "1 == 1" + ")" * depth + " && true") is True


@pytest.mark.parametrize("expr,expected", [
    ("!1 == 2", True),
    ("!true && false", False),
    ("false || true && false", False),
    ("1 == 1 && 2 . 3 == 23", True),
    ("(1 == 2) == false", True),
])
def test_operator_precedence(evaluator, expr, expected):
    assert evaluator.evaluate(expr) is expected


@pytest.mark.parametrize("expr,expected", [
    ('"\\ud800" == \'x\'', False),
    ('"\\ud800" == "\\ud800"', True),
    ('"\\ud83d\\ude00" == \'\U0001F600\'', True),
    ('"\\udc00\\ud800" != \'\'', True),
])
def test_surrogate_escapes(evaluator, expr, expected):
    """Escaped surrogate pairs join into one character; lone halves are kept."""
    assert evaluator.evaluate(expr) is expected


def test_parse_returns_raw_value(evaluator):
    assert evaluator.parse("'a' . 1") == "a1"
    assert evaluator.parse("2.5") == 2.5


@pytest.mark.parametrize("expr", [
    "",
    "   ",
    "'a' ==",
    "1 == 2 == 3",
    "(true",
    "true)",
    "foo == 1",
    "LaunchRequest && true",
    "1 + 1",
    "== 1",
])
def test_malformed_expressions_raise(evaluator, expr):
    with pytest.raises(EvaluationError):
        evaluator.parse(expr)


def test_malformed_expression_evaluates_false(evaluator, caplog):
    """Evaluation never raises; failures are false plus a diagnostic."""
    with caplog.at_level(logging.WARNING, logger="core.rules.evaluator"):
        assert evaluator.evaluate("1 == 2 == 3") is False
    assert "failed to evaluate" in caplog.text


def test_no_host_code_execution(evaluator):
    """Python syntax is rejected, not executed."""
    assert evaluator.evaluate("__import__('os').system('true')") is False


def test_truthy_and_loose_equals_helpers():
    assert truthy("") is False
    assert truthy("0") is True
    assert truthy(0.0) is False
    assert loose_equals("3", 3.0)
    assert not loose_equals("abc", 0)
