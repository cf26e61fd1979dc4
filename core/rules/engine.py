"""
Rule matching: tokenize, substitute placeholders, evaluate.

Every recoverable failure is local to one rule: the rule simply does not
match and a diagnostic is logged.
"""

import logging
import threading
from collections import OrderedDict
from typing import List, Optional

from core.rules.errors import TokenizationError
from core.rules.evaluator import ExpressionEvaluator
from core.rules.substitution import PlaceholderSubstitutor
from core.rules.tokenizer import Token, tokenize

logger = logging.getLogger(__name__)


class RuleEngine:
    """Decides whether a rule string holds for a dispatch context

    Holds no per-request state, so one engine serves every request.
    """

    def __init__(self, cache_size: Optional[int] = None):
        if cache_size is None:
            from config import settings
            cache_size = settings.RULE_CACHE_SIZE
        self.cache_size = cache_size
        self.substitutor = PlaceholderSubstitutor()
        self.evaluator = ExpressionEvaluator()
        # Rules are immutable, so their tokens can be reused
        self._token_cache: "OrderedDict[str, List[Token]]" = OrderedDict()
        self._lock = threading.Lock()

    def _tokens(self, rule: str) -> List[Token]:
        with self._lock:
            tokens = self._token_cache.get(rule)
            if tokens is not None:
                self._token_cache.move_to_end(rule)
                return tokens

        tokens = tokenize(rule)
        if self.cache_size > 0:
            with self._lock:
                self._token_cache[rule] = tokens
                if len(self._token_cache) > self.cache_size:
                    self._token_cache.popitem(last=False)
        return tokens

    def render(self, rule: str, ctx) -> Optional[str]:
        """
        Build the expression a rule stands for in the given context.

        Returns:
            The substituted expression, or None if the rule cannot be tokenized
            or is empty
        """
        try:
            tokens = self._tokens(rule)
        except TokenizationError as e:
            logger.warning(f"Rule skipped, tokenization failed: {e.message} (rule={rule!r})")
            return None

        if not tokens:
            return None
        return self.substitutor.render(tokens, ctx)

    def matches(self, rule: str, ctx) -> bool:
        """True if the rule's condition holds for the context"""
        expr = self.render(rule, ctx)
        if expr is None:
            return False

        result = self.evaluator.evaluate(expr)
        logger.debug(f"Rule {rule!r} -> {expr!r} -> {result}")
        return result


# Global rule engine instance
_rule_engine = None


def get_rule_engine() -> RuleEngine:
    """Get the rule engine shared by all controllers"""
    global _rule_engine

    if _rule_engine is None:
        _rule_engine = RuleEngine()

    return _rule_engine
