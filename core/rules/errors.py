"""Errors raised while compiling or evaluating rule conditions"""


class RuleError(Exception):
    """Base class for rule failures. A failing rule never matches."""

    def __init__(self, message: str, rule: str = None):
        super().__init__(message)
        self.message = message
        self.rule = rule

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, rule={self.rule!r})"


class TokenizationError(RuleError):
    """A quoted literal in the rule is never closed"""


class EvaluationError(RuleError):
    """The substituted expression does not parse"""
