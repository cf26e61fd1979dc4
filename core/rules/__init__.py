"""Condition rule language: tokenizer, placeholder substitution and evaluator"""

from .errors import RuleError, TokenizationError, EvaluationError
from .tokenizer import Token, TokenKind, tokenize
from .substitution import PlaceholderSubstitutor, to_literal
from .evaluator import ExpressionEvaluator, truthy, loose_equals
from .engine import RuleEngine, get_rule_engine

__all__ = [
    'RuleError',
    'TokenizationError',
    'EvaluationError',
    'Token',
    'TokenKind',
    'tokenize',
    'PlaceholderSubstitutor',
    'to_literal',
    'ExpressionEvaluator',
    'truthy',
    'loose_equals',
    'RuleEngine',
    'get_rule_engine',
]
