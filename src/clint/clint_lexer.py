"""
Lexical analyzer for the CLINT language.

This module turns raw source text into the token stream the parser pulls from:

Classes:
    CharacterStream: Character reader with line/column tracking.
    Lexer: Produces one Token per `next_token()` call from a CharacterStream.
    TokenSource: Protocol for anything the parser can pull tokens from.
    ListTokenSource: Adapts an already-built token sequence to TokenSource.

Functions:
    tokenize(source): Lexes a whole string into a list ending with EOF.

Behavior:
    - Skips spaces, tabs and newlines.
    - Recognizes identifiers and the keywords `var return if else fun true false`.
    - Recognizes decimal integer literals (range checking is left to the parser).
    - Prefers two-character operators (`==`, `!=`) over their one-character prefixes.
    - Never raises: an unknown character becomes an ILLEGAL token, and once the
      input is exhausted every further call returns EOF.

Example:
    >>> lexer = Lexer(CharacterStream("var x = 5;"))
    >>> lexer.next_token()
    Token(VAR, 'var', 1:1)
"""

from typing import Iterable, Protocol

from clint.clint_token import Token, TokenKind, lookup_ident

SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "!": TokenKind.BANG,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
}

DOUBLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "==": TokenKind.EQ,
    "!=": TokenKind.NOT_EQ,
}


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_word_char(ch: str) -> bool:
    return ch == "_" or is_digit(ch) or "a" <= ch <= "z" or "A" <= ch <= "Z"


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Index of the next unread character.
        line (int): Line of the next unread character (1-indexed).
        column (int): Column of the next unread character (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character.

        Raises:
            IndexError: If the stream is already exhausted.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"read past end of source at position={self.position}, line={self.line}"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of range."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class TokenSource(Protocol):
    """Anything the parser can pull tokens from, one at a time."""

    def next_token(self) -> Token: ...  # pragma: no cover


class ListTokenSource:
    """Serves a pre-built token sequence, then EOF forever.

    A trailing EOF in the input is optional. The synthesized EOF carries the
    position of the last real token so diagnostics still point somewhere useful.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = list(tokens)
        self._index = 0
        last = self._tokens[-1] if self._tokens else None
        self._eof = Token(
            TokenKind.EOF, "", last.line if last else 0, last.col if last else 0
        )

    def next_token(self) -> Token:
        if self._index >= len(self._tokens):
            return self._eof
        tok = self._tokens[self._index]
        self._index += 1
        if tok.kind == TokenKind.EOF:
            # Park on the end so later calls keep returning EOF.
            self._index = len(self._tokens)
            self._eof = tok
        return tok


class Lexer:
    """Lexical analyzer for CLINT source text.

    Attributes:
        stream (CharacterStream): The character stream being tokenized.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek() in " \t\r\n":
            self.stream.next()

    def read_identifier(self) -> str:
        word = ""
        while not self.stream.end_of_file() and is_word_char(self.stream.peek()):
            word += self.stream.next()
        return word

    def read_number(self) -> str:
        digits = ""
        while not self.stream.end_of_file() and is_digit(self.stream.peek()):
            digits += self.stream.next()
        return digits

    def next_token(self) -> Token:
        """Consumes and returns the next Token; EOF once the input is exhausted."""
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenKind.EOF, "", line, col)

        ch = self.stream.peek()

        # 1. Identifier or keyword
        if is_word_char(ch) and not is_digit(ch):
            word = self.read_identifier()
            return Token(lookup_ident(word), word, line, col)

        # 2. Integer literal; digits running into letters are one ILLEGAL word
        if is_digit(ch):
            digits = self.read_number()
            if not self.stream.end_of_file() and is_word_char(self.stream.peek()):
                return Token(
                    TokenKind.ILLEGAL, digits + self.read_identifier(), line, col
                )
            return Token(TokenKind.INT, digits, line, col)

        # 3. Operators and delimiters, longest match first
        pair = ch + self.stream.peek(1)
        if pair in DOUBLE_CHAR_TOKENS:
            self.stream.next()
            self.stream.next()
            return Token(DOUBLE_CHAR_TOKENS[pair], pair, line, col)
        if ch in SINGLE_CHAR_TOKENS:
            self.stream.next()
            return Token(SINGLE_CHAR_TOKENS[ch], ch, line, col)

        # 4. Anything else is handed to the parser as ILLEGAL
        return Token(TokenKind.ILLEGAL, self.stream.next(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely; the returned list always ends with one EOF."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.kind == TokenKind.EOF:
            break
    return tokens


__all__ = [
    "CharacterStream",
    "Lexer",
    "ListTokenSource",
    "TokenSource",
    "tokenize",
]
