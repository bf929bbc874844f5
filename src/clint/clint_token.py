"""
Token model for the CLINT language.

Classes:
    TokenKind: Closed enumeration of every lexical kind the lexer can produce.
    Token: An immutable (kind, literal) pair with its source position.

Functions:
    lookup_ident(ident): Maps a scanned word to its keyword kind, or IDENT.

Each kind's value is the name used in diagnostics: operators and delimiters
are spelled as in source (`+`, `)`, `==`), everything else is an upper-case tag
(`IDENT`, `INT`, `EOF`).

Example:
    >>> Token(TokenKind.PLUS, "+", 1, 3)
    Token(+, '+', 1:3)
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    EOF = "EOF"
    ILLEGAL = "ILLEGAL"

    # Identifiers and literals
    IDENT = "IDENT"
    INT = "INT"
    TRUE = "TRUE"
    FALSE = "FALSE"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    BANG = "!"

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    VAR = "VAR"
    RETURN = "RETURN"
    IF = "IF"
    ELSE = "ELSE"
    FUN = "FUN"

    def __str__(self) -> str:
        return self.value


KEYWORDS: dict[str, TokenKind] = {
    "var": TokenKind.VAR,
    "return": TokenKind.RETURN,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "fun": TokenKind.FUN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}


def lookup_ident(ident: str) -> TokenKind:
    """Returns the keyword kind for `ident`, or IDENT for ordinary names."""
    return KEYWORDS.get(ident, TokenKind.IDENT)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind (TokenKind): The token's lexical kind.
        literal (str): The exact source text matched ("" for EOF).
        line (int): 1-based line of the first character (0 when synthesized).
        col (int): 1-based column of the first character (0 when synthesized).
    """

    kind: TokenKind
    literal: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.literal!r}, {self.line}:{self.col})"


__all__ = ["KEYWORDS", "Token", "TokenKind", "lookup_ident"]
