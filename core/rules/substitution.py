"""
Placeholder substitution for rule code segments.

Code segments may reference the live request through placeholders:

    #weather                 -> true if the current intent is `weather`
    session.user.city        -> the session value at that dotted path
    slot.city                -> the value of slot `city` on the first intent
    LaunchRequest            -> (whole segment) true if that is the request type

Each placeholder is replaced by a literal the expression evaluator
understands. Literal tokens are never rewritten.
"""

import json
import logging
import re
from typing import Any, Iterable

from core.rules.tokenizer import Token

logger = logging.getLogger(__name__)

# Alternation order is the resolution priority at any given position
_PLACEHOLDER = re.compile(
    r"#(?P<intent>[\w.]*\w)"
    r"|(?<![\w$])session\.(?P<session>[\w.]*\w)"
    r"|(?<![\w$])slot\.(?P<slot>\w+)"
)

_REQUEST_TYPE = re.compile(r"LaunchRequest|SessionEndedRequest")

_MISSING = object()


def to_literal(value: Any) -> str:
    """Render a Python value as an expression literal"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return "null"
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (dict, list, tuple, set)):
        # Containers only make sense as presence checks
        return "true" if value else "false"
    return json.dumps(str(value))


class PlaceholderSubstitutor:
    """Resolves placeholders in code segments against a dispatch context"""

    def substitute(self, code_text: str, ctx) -> str:
        """
        Replace every placeholder in a code segment.

        Args:
            code_text: Unquoted segment of a rule
            ctx: Dispatch context providing intent, request type, session and slots

        Returns:
            The segment with placeholders replaced by literals
        """
        if not code_text:
            return ""

        if _REQUEST_TYPE.fullmatch(code_text):
            return to_literal(ctx.request_type == code_text)

        def resolve(match: re.Match) -> str:
            if match.group("intent") is not None:
                return to_literal(ctx.intent_name == match.group("intent"))

            if match.group("session") is not None:
                path = match.group("session")
                value = ctx.get_session(path, _MISSING)
                if value is _MISSING:
                    logger.debug(f"Session placeholder '{path}' unresolved, using null")
                    value = None
                return to_literal(value)

            name = match.group("slot")
            value = ctx.get_slot(name)
            if value is None:
                logger.debug(f"Slot placeholder '{name}' unresolved, using null")
            return to_literal(value)

        return _PLACEHOLDER.sub(resolve, code_text)

    def render(self, tokens: Iterable[Token], ctx) -> str:
        """Join tokens into one expression, substituting code segments only"""
        parts = []
        for token in tokens:
            if token.is_literal:
                parts.append(token.text)
            else:
                parts.append(self.substitute(token.text, ctx))
        return "".join(parts)
