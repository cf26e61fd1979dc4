"""
Rule string tokenizer.

A rule is split into CODE segments (unquoted text, where placeholders live)
and LITERAL segments (single- or double-quoted strings, kept verbatim with
their quotes). Joining the token texts in order gives back the rule.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

from core.rules.errors import TokenizationError

QUOTES = ("'", '"')

_CODE_PREFIX = re.compile(r"[^'\"]*")


class TokenKind(str, Enum):
    """Segment kinds produced by the tokenizer"""
    CODE = "code"
    LITERAL = "literal"


@dataclass(frozen=True)
class Token:
    """One positional segment of a rule"""
    kind: TokenKind
    text: str

    @property
    def is_literal(self) -> bool:
        return self.kind == TokenKind.LITERAL


def _closing_quote(rest: str) -> int:
    """Index of the quote closing the literal that opens `rest`, or -1"""
    quote = rest[0]
    i = 1
    while i < len(rest):
        c = rest[i]
        if c == "\\":
            i += 2
            continue
        if c == quote:
            return i
        i += 1
    return -1


def tokenize(rule: str) -> List[Token]:
    """
    Split a rule into alternating code and literal tokens.

    Args:
        rule: Raw rule string as registered by the bot developer

    Returns:
        Ordered tokens; empty for an empty rule

    Raises:
        TokenizationError: a literal has no closing quote
    """
    tokens: List[Token] = []
    rest = rule or ""

    while rest:
        code = _CODE_PREFIX.match(rest).group(0)
        if code:
            tokens.append(Token(TokenKind.CODE, code))
            rest = rest[len(code):]
        if not rest:
            break

        end = _closing_quote(rest)
        if end < 0:
            raise TokenizationError(
                f"Unterminated {rest[0]} literal at offset {len(rule) - len(rest)}",
                rule=rule,
            )
        tokens.append(Token(TokenKind.LITERAL, rest[:end + 1]))
        rest = rest[end + 1:]

    return tokens
