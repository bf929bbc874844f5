"""
Shared constants for the CLINT toolchain.

Contents:
    Precedence: Ordered binding-strength levels used by the expression parser.
    PRECEDENCES: Token kind to binding strength for every infix/postfix operator.
    DEFAULT_MAX_DEPTH: Default ceiling on expression nesting per parse.
    SOURCE_SUFFIX, PROMPT, CONTINUATION_PROMPT: CLI and REPL defaults.
"""

from enum import IntEnum

from clint.clint_token import TokenKind


class Precedence(IntEnum):
    """Binding strengths, lowest to highest.

    MINUS, DIVIDE and MODULO name tiers that no operator maps to on its own:
    `-` shares SUM with `+`, and `/` and `%` share PRODUCT with `*`.
    """

    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    MINUS = 5  # -
    PRODUCT = 6  # *
    DIVIDE = 7  # /
    MODULO = 8  # %
    PREFIX = 9  # -x or !x
    CALL = 10  # f(x)


PRECEDENCES: dict[TokenKind, Precedence] = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.STAR: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.PERCENT: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}

INFIX_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.STAR,
        TokenKind.SLASH,
        TokenKind.PERCENT,
        TokenKind.EQ,
        TokenKind.NOT_EQ,
        TokenKind.LT,
        TokenKind.GT,
    }
)

PREFIX_OPERATORS: frozenset[TokenKind] = frozenset({TokenKind.MINUS, TokenKind.BANG})

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Each nesting level costs a few Python frames; keep well under the interpreter limit.
DEFAULT_MAX_DEPTH = 100

SOURCE_SUFFIX = ".clint"
PROMPT = ">> "
CONTINUATION_PROMPT = ".. "


__all__ = [
    "CONTINUATION_PROMPT",
    "DEFAULT_MAX_DEPTH",
    "INFIX_OPERATORS",
    "INT64_MAX",
    "INT64_MIN",
    "PRECEDENCES",
    "PREFIX_OPERATORS",
    "PROMPT",
    "Precedence",
    "SOURCE_SUFFIX",
]
