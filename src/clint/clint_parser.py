"""
CLINT Language Parser

Parses a CLINT token stream into an abstract syntax tree rooted at `Program`.

The statement layer dispatches on the current token (`var`, `return`, or an
expression statement). The expression layer is a Pratt parser: each token kind
may own a prefix handler (it starts an expression), an infix handler (it
continues an expression after a left operand) or a postfix handler (it closes
over a finished operand), and binding strengths from the precedence table
decide when the loop keeps extending the left-hand side.

Supported Constructs
--------------------
- Statements: `var x = <expr>;`, `return [<expr>];`, bare expressions.
- Literals: identifiers, 64-bit integers, `true`, `false`.
- Operators: prefix `-` `!`, infix `+ - * / % == != < >`, grouping `( )`.
- Compound: `if (<cond>) { ... } else { ... }`, `fun(a, b) { ... }`, calls `f(x, y)`.

Parser Behavior
---------------
- Never raises on malformed input. Each problem is appended to `errors` and
  the smallest enclosing construct is dropped, then parsing resumes from the
  current token.
- Two tokens of lookahead (`current_token`, `peek_token`).
- Expression nesting is capped by `max_depth`.

Entry Points
------------
- `parse(source)`: Parse any token source; returns `(Program, errors)`.
- `parse_source(text)`: Lex and parse a source string.
- `Parser(source).parse_program()`: The same, keeping the parser around.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from clint.clint_ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    VarStatement,
)
from clint.clint_constants import (
    DEFAULT_MAX_DEPTH,
    INFIX_OPERATORS,
    INT64_MAX,
    INT64_MIN,
    PRECEDENCES,
    PREFIX_OPERATORS,
    Precedence,
)
from clint.clint_lexer import CharacterStream, Lexer, ListTokenSource, TokenSource
from clint.clint_token import Token, TokenKind

logger = logging.getLogger(__name__)

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]
PostfixParseFn = Callable[[Expression], Expression | None]


class Parser:
    """
    CLINT Parser Class

    Pulls tokens from a `TokenSource` and builds a `Program`. One instance
    parses one token stream; it is not safe to share between threads.

    Attributes
    ----------
    source : TokenSource
        Where tokens come from.
    current_token : Token
        The token under examination.
    peek_token : Token
        The token right after `current_token`.
    errors : list[str]
        Diagnostics recorded so far, in the order they were found.
    max_depth : int
        Deepest allowed `parse_expression` nesting.
    precedences : dict[TokenKind, Precedence]
        This parser's copy of the binding-strength table.
    prefix_parse_fns, infix_parse_fns, postfix_parse_fns : dict
        Handler tables keyed by token kind.
    """

    def __init__(
        self,
        source: TokenSource | Iterable[Token],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if not hasattr(source, "next_token"):
            source = ListTokenSource(source)  # type: ignore[arg-type]
        self.source: TokenSource = source  # type: ignore[assignment]
        self.max_depth = max_depth
        self.errors: list[str] = []
        self.precedences: dict[TokenKind, Precedence] = dict(PRECEDENCES)
        self._depth = 0

        self.current_token = Token(TokenKind.EOF, "")
        self.peek_token = Token(TokenKind.EOF, "")

        self.prefix_parse_fns: dict[TokenKind, PrefixParseFn] = {}
        self.infix_parse_fns: dict[TokenKind, InfixParseFn] = {}
        self.postfix_parse_fns: dict[TokenKind, PostfixParseFn] = {}

        self.register_prefix(TokenKind.IDENT, self.parse_identifier)
        self.register_prefix(TokenKind.INT, self.parse_integer_literal)
        self.register_prefix(TokenKind.TRUE, self.parse_boolean)
        self.register_prefix(TokenKind.FALSE, self.parse_boolean)
        for kind in PREFIX_OPERATORS:
            self.register_prefix(kind, self.parse_prefix_expression)
        self.register_prefix(TokenKind.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TokenKind.IF, self.parse_if_expression)
        self.register_prefix(TokenKind.FUN, self.parse_function_literal)

        for kind in INFIX_OPERATORS:
            self.register_infix(kind, self.parse_infix_expression)
        self.register_infix(TokenKind.LPAREN, self.parse_call_expression)

        # Read two tokens so current_token and peek_token are both set
        self.advance()
        self.advance()

    def register_prefix(self, kind: TokenKind, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[kind] = fn

    def register_infix(self, kind: TokenKind, fn: InfixParseFn) -> None:
        self.infix_parse_fns[kind] = fn

    def register_postfix(self, kind: TokenKind, fn: PostfixParseFn) -> None:
        self.postfix_parse_fns[kind] = fn

    # --- token helpers ---

    def advance(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self.source.next_token()

    def current_is(self, kind: TokenKind) -> bool:
        return self.current_token.kind == kind

    def peek_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind == kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advances if the next token is `kind`; otherwise records why not.

        On failure the cursor does not move, and the caller must drop the
        construct it was building.
        """
        if self.peek_is(kind):
            self.advance()
            return True
        self.peek_error(kind)
        return False

    def peek_precedence(self) -> Precedence:
        return self.precedences.get(self.peek_token.kind, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return self.precedences.get(self.current_token.kind, Precedence.LOWEST)

    # --- diagnostics ---

    def error(self, message: str, tok: Token | None = None) -> None:
        tok = tok or self.current_token
        logger.debug("parse error at %d:%d: %s", tok.line, tok.col, message)
        self.errors.append(message)

    def peek_error(self, kind: TokenKind) -> None:
        self.error(
            f"expected next token to be {kind.value}, "
            f"got {self.peek_token.kind.value} instead",
            self.peek_token,
        )

    def no_prefix_parse_fn_error(self, kind: TokenKind) -> None:
        self.error(f"no prefix parse function for {kind.value} found")

    # --- statements ---

    def parse_program(self) -> Program:
        """Parse statements until EOF. Never raises; check `errors` afterwards."""
        logger.debug("parsing program")
        statements: list[Statement] = []
        while not self.current_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()
        logger.debug(
            "parsed %d statement(s) with %d error(s)", len(statements), len(self.errors)
        )
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        kind = self.current_token.kind
        if kind == TokenKind.VAR:
            return self.parse_var_statement()
        if kind == TokenKind.RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_var_statement(self) -> VarStatement | None:
        """Parse `var <ident> = <expr>;`. The semicolon is mandatory."""
        tok = self.current_token
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.current_token, self.current_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.advance()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        if not self.expect_peek(TokenKind.SEMICOLON):
            return None
        return VarStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        """Parse `return [<expr>][;]`."""
        tok = self.current_token
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
            return ReturnStatement(tok)
        if self.peek_is(TokenKind.RBRACE) or self.peek_is(TokenKind.EOF):
            return ReturnStatement(tok)

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
        return ReturnStatement(tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        tok = self.current_token
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if self.peek_is(TokenKind.SEMICOLON):
            self.advance()
        return ExpressionStatement(tok, expression)

    def parse_block_statement(self) -> BlockStatement | None:
        """Parse statements after a `{` up to the matching `}`."""
        tok = self.current_token
        statements: list[Statement] = []
        self.advance()

        while not self.current_is(TokenKind.RBRACE):
            if self.current_is(TokenKind.EOF):
                self.error(
                    f"expected next token to be {TokenKind.RBRACE.value}, "
                    f"got {TokenKind.EOF.value} instead"
                )
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return BlockStatement(tok, tuple(statements))

    # --- expressions ---

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parse one expression whose operators all bind tighter than `precedence`."""
        if self._depth >= self.max_depth:
            self.error(f"expression nesting exceeds maximum depth of {self.max_depth}")
            return None
        self._depth += 1
        try:
            return self._parse_expression(precedence)
        except RecursionError:
            # max_depth is larger than the interpreter stack allows
            self.errors.append(
                f"expression nesting exceeds maximum depth of {self._depth}"
            )
            return None
        finally:
            self._depth -= 1

    def _parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self.prefix_parse_fns.get(self.current_token.kind)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current_token.kind)
            return None

        left = prefix()

        while (
            left is not None
            and not self.peek_is(TokenKind.SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            kind = self.peek_token.kind
            postfix = self.postfix_parse_fns.get(kind)
            if postfix is not None:
                self.advance()
                left = postfix(left)
                continue

            infix = self.infix_parse_fns.get(kind)
            if infix is None:
                return left
            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current_token, self.current_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        tok = self.current_token
        digits = tok.literal[1:] if tok.literal.startswith("-") else tok.literal
        if not (digits.isascii() and digits.isdigit()):
            self.error(f'could not parse "{tok.literal}" as integer')
            return None

        value = int(tok.literal)
        if not INT64_MIN <= value <= INT64_MAX:
            self.error(f'could not parse "{tok.literal}" as integer')
            return None
        return IntegerLiteral(tok, value)

    def parse_boolean(self) -> Expression:
        return Boolean(self.current_token, self.current_is(TokenKind.TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        tok = self.current_token
        self.advance()
        operand = self.parse_expression(Precedence.PREFIX)
        if operand is None:
            return None
        return PrefixExpression(tok, tok.literal, operand)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        tok = self.current_token
        # Recursing at the operator's own level keeps equal-precedence chains left-associative.
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(tok, left, tok.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        """Parse `if (<cond>) { ... }` with an optional `else { ... }`."""
        tok = self.current_token
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.advance()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_is(TokenKind.ELSE):
            self.advance()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        tok = self.current_token
        if not self.expect_peek(TokenKind.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(tok, parameters, body)

    def parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        """Parse `[ident [, ident]*] )` following the opening parenthesis."""
        if self.peek_is(TokenKind.RPAREN):
            self.advance()
            return ()

        parameters: list[Identifier] = []
        if not self.expect_peek(TokenKind.IDENT):
            return None
        parameters.append(Identifier(self.current_token, self.current_token.literal))

        while self.peek_is(TokenKind.COMMA):
            self.advance()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            parameters.append(
                Identifier(self.current_token, self.current_token.literal)
            )

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(parameters)

    def parse_call_expression(self, callee: Expression) -> Expression | None:
        tok = self.current_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(tok, callee, arguments)

    def parse_call_arguments(self) -> tuple[Expression, ...] | None:
        if self.peek_is(TokenKind.RPAREN):
            self.advance()
            return ()

        self.advance()
        first = self.parse_expression(Precedence.LOWEST)
        if first is None:
            return None
        arguments = [first]

        while self.peek_is(TokenKind.COMMA):
            self.advance()
            self.advance()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            arguments.append(arg)

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(arguments)


def parse(
    source: TokenSource | Iterable[Token], max_depth: int = DEFAULT_MAX_DEPTH
) -> tuple[Program, list[str]]:
    """Parse a token source into a Program plus its diagnostics.

    A non-empty diagnostics list does not stop a Program from being returned;
    the caller decides whether any diagnostic is fatal.
    """
    parser = Parser(source, max_depth=max_depth)
    program = parser.parse_program()
    return program, list(parser.errors)


def parse_source(
    text: str, max_depth: int = DEFAULT_MAX_DEPTH
) -> tuple[Program, list[str]]:
    """Lex and parse `text`; see `parse`."""
    return parse(Lexer(CharacterStream(text)), max_depth=max_depth)


__all__ = ["Parser", "parse", "parse_source"]
