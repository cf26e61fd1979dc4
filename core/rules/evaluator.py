"""
Sandboxed evaluator for rule expressions.

After placeholder substitution a rule is a plain expression over literals:

    expression := orExpr
    orExpr     := andExpr ( ("||" | "or") andExpr )*
    andExpr    := unary ( ("&&" | "and") unary )*
    unary      := "!" unary | comparison
    comparison := concat ( ("==" | "!=" | ">" | "<" | ">=" | "<=") concat )?
    concat     := atom ( "." atom )*
    atom       := "(" expression ")" | string | number | true | false | null

Values are str, int/float, bool or None. Nothing here can reach host code.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List

from core.rules.errors import EvaluationError

logger = logging.getLogger(__name__)

_LEXICON = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<op>==|!=|>=|<=|&&|\|\||[<>!().])
    |(?P<word>[A-Za-z_]\w*)
    """,
    re.VERBOSE | re.DOTALL,
)

_NUMERIC = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")

_KEYWORDS = {
    "true": ("value", True),
    "false": ("value", False),
    "null": ("value", None),
    "and": ("op", "&&"),
    "or": ("op", "||"),
}

_DOUBLE_ESCAPES = {
    '"': '"', "\\": "\\", "/": "/",
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t",
}

_COMPARATORS = ("==", "!=", ">", "<", ">=", "<=")

_PRECEDENCE = {"||": 1, "&&": 2, "!": 3, ".": 5}
_PRECEDENCE.update(dict.fromkeys(_COMPARATORS, 4))

_SURROGATE_PAIR = re.compile(r"[\ud800-\udbff][\udc00-\udfff]")


@dataclass
class _Lexeme:
    kind: str  # "value" or "op"
    value: Any
    offset: int


def truthy(value: Any) -> bool:
    """Truthiness used by the rule language: "", 0, null and false are falsy"""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return bool(value)


def is_numeric(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC.fullmatch(value) is not None


def to_number(value: Any) -> float:
    return float(value) if isinstance(value, str) else value


def to_text(value: Any) -> str:
    """String form used by the concatenation operator"""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def loose_equals(left: Any, right: Any) -> bool:
    """Equality across str/number/bool/null"""
    if left is None or right is None:
        if left is None and right is None:
            return True
        other = right if left is None else left
        if isinstance(other, str):
            return other == ""
        return not truthy(other)

    if isinstance(left, bool) or isinstance(right, bool):
        return truthy(left) == truthy(right)

    if is_numeric(left) and is_numeric(right):
        return to_number(left) == to_number(right)

    return to_text(left) == to_text(right)


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    if literal[0] == "'":
        return re.sub(r"\\([\\'])", r"\1", body)

    def unescape(match: re.Match) -> str:
        esc = match.group(1)
        if esc[0] == "u":
            return chr(int(esc[1:], 16))
        return _DOUBLE_ESCAPES[esc]

    text = re.sub(r'\\(u[0-9a-fA-F]{4}|["\\/bfnrt])', unescape, body)
    # Pairs written as two \u escapes become one code point; lone halves stay as they are
    return _SURROGATE_PAIR.sub(_join_surrogates, text)


def _join_surrogates(match: re.Match) -> str:
    high, low = match.group()
    return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))


def _lex(expr: str) -> List[_Lexeme]:
    lexemes = []
    pos = 0
    while pos < len(expr):
        match = _LEXICON.match(expr, pos)
        if not match:
            raise EvaluationError(f"Unexpected character {expr[pos]!r} at offset {pos}", rule=expr)

        kind = match.lastgroup
        text = match.group(kind)
        if kind == "number":
            try:
                number = float(text) if any(c in text for c in ".eE") else int(text)
            except ValueError:
                raise EvaluationError(f"Unreadable number at offset {pos}", rule=expr) from None
            lexemes.append(_Lexeme("value", number, pos))
        elif kind == "string":
            lexemes.append(_Lexeme("value", _unquote(text), pos))
        elif kind == "op":
            lexemes.append(_Lexeme("op", text, pos))
        elif kind == "word":
            keyword = _KEYWORDS.get(text.lower())
            if keyword is None:
                raise EvaluationError(f"Unknown identifier '{text}' at offset {pos}", rule=expr)
            lexemes.append(_Lexeme(keyword[0], keyword[1], pos))
        pos = match.end()
    return lexemes


class _Parser:
    """Operator-precedence parser that evaluates with explicit stacks

    Nesting depth is bounded by the input, not the interpreter stack.
    """

    def __init__(self, expr: str):
        self.expr = expr
        self.lexemes = _lex(expr)
        self.pos = 0
        self.values: List[Any] = []
        self.ops: List[str] = []

    def _fail(self, message: str):
        if self.pos < len(self.lexemes):
            message = f"{message} at offset {self.lexemes[self.pos].offset}"
        else:
            message = f"{message} at end of expression"
        raise EvaluationError(message, rule=self.expr)

    def parse(self) -> Any:
        if not self.lexemes:
            self._fail("Empty expression")

        expect_value = True
        # "!" may open a unary operand but not the operand of a comparison or "."
        allow_not = True
        for self.pos, lexeme in enumerate(self.lexemes):
            if expect_value:
                if lexeme.kind == "value":
                    self.values.append(lexeme.value)
                    expect_value = False
                elif lexeme.value == "(":
                    self.ops.append("(")
                    allow_not = True
                elif lexeme.value == "!" and allow_not:
                    self.ops.append("!")
                else:
                    self._fail(f"Unexpected '{lexeme.value}'")
                continue

            if lexeme.kind == "value" or lexeme.value in ("(", "!"):
                self._fail("Unexpected trailing input")

            op = lexeme.value
            if op == ")":
                self._reduce_while(lambda top: top != "(")
                if not self.ops:
                    self._fail("Unexpected trailing input")
                self.ops.pop()
                continue

            precedence = _PRECEDENCE[op]
            if op in _COMPARATORS:
                # Comparisons do not chain
                self._reduce_while(lambda top: top != "(" and _PRECEDENCE[top] > precedence)
                if self.ops and self.ops[-1] in _COMPARATORS:
                    self._fail(f"Unexpected '{op}'")
            else:
                self._reduce_while(lambda top: top != "(" and _PRECEDENCE[top] >= precedence)
            self.ops.append(op)
            expect_value = True
            allow_not = op in ("&&", "||")

        self.pos = len(self.lexemes)
        if expect_value:
            self._fail("Expected a value")
        self._reduce_while(lambda top: top != "(")
        if self.ops:
            self._fail("Expected ')'")
        return self.values[0]

    def _reduce_while(self, condition):
        while self.ops and condition(self.ops[-1]):
            self._apply(self.ops.pop())

    def _apply(self, op: str):
        if op == "!":
            self.values.append(not truthy(self.values.pop()))
            return

        right = self.values.pop()
        left = self.values.pop()
        if op == "||":
            value = truthy(left) or truthy(right)
        elif op == "&&":
            value = truthy(left) and truthy(right)
        elif op == ".":
            value = to_text(left) + to_text(right)
        else:
            value = self._compare(op, left, right)
        self.values.append(value)

    def _compare(self, op: str, left: Any, right: Any) -> bool:
        if op == "==":
            return loose_equals(left, right)
        if op == "!=":
            return not loose_equals(left, right)

        if not (is_numeric(left) and is_numeric(right)):
            logger.debug(f"Non-numeric operands for '{op}': {left!r}, {right!r} in {self.expr!r}")
            return False
        left, right = to_number(left), to_number(right)
        if op == ">":
            return left > right
        if op == "<":
            return left < right
        if op == ">=":
            return left >= right
        return left <= right


class ExpressionEvaluator:
    """Evaluates substituted rule expressions to a boolean"""

    def parse(self, expr: str) -> Any:
        """
        Parse and compute an expression.

        Returns:
            The raw value of the expression

        Raises:
            EvaluationError: the expression is malformed
        """
        return _Parser(expr).parse()

    def evaluate(self, expr: str) -> bool:
        """Truthiness of an expression; malformed expressions are false"""
        try:
            return truthy(self.parse(expr))
        except EvaluationError as e:
            logger.warning(f"Rule expression failed to evaluate: {e.message} (expr={expr!r})")
            return False
