"""
Defines the abstract syntax tree (AST) produced by the CLINT parser.

Classes:
    Node: Common base; every node can report its leading token literal, render
        itself in canonical form and serialize itself to plain dictionaries.
    Statement, Expression: The two node capability sets.
    Program: Parse root, an ordered tuple of statements.

    Statements: ExpressionStatement, VarStatement, ReturnStatement, BlockStatement.
    Expressions: Identifier, IntegerLiteral, Boolean, PrefixExpression,
        InfixExpression, IfExpression, FunctionLiteral, CallExpression.

Every node except Program keeps the token it started from. Nodes are frozen
dataclasses built bottom-up by the parser and never modified afterwards;
child sequences are tuples.

Canonical rendering (`render()` / `str(node)`) fully parenthesizes operators,
so it doubles as a golden format in tests:

    >>> from clint.clint_parser import parse_source
    >>> program, errors = parse_source("a + b * c")
    >>> program.render()
    '(a + (b * c))'
"""

from dataclasses import dataclass, fields
from typing import Any

from clint.clint_token import Token


class Node:
    """Base class for all AST nodes."""

    token: Token

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        raise NotImplementedError  # pragma: no cover

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict[str, Any]:
        """Converts the node and all descendants into plain dicts and lists.

        Keys are `kind` (the class name), `literal`, `line` and `col` from the
        originating token, followed by one key per node field.
        """
        data: dict[str, Any] = {"kind": type(self).__name__}
        tok = getattr(self, "token", None)
        if tok is not None:
            data["literal"] = tok.literal
            data["line"] = tok.line
            data["col"] = tok.col
        for f in fields(self):  # type: ignore[arg-type]
            if f.name == "token":
                continue
            data[f.name] = _to_plain(getattr(self, f.name))
        return data


def _to_plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


class Statement(Node):
    """A node that appears in statement position."""


class Expression(Node):
    """A node that produces a value."""


@dataclass(frozen=True)
class Program(Node):
    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def render(self) -> str:
        return "".join(stmt.render() for stmt in self.statements)


# === Expressions ===


@dataclass(frozen=True)
class Identifier(Expression):
    token: Token
    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    token: Token
    value: int

    def render(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class Boolean(Expression):
    token: Token
    value: bool

    def render(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """Unary operator applied to the operand on its right, like `-x` or `!ok`."""

    token: Token
    operator: str
    operand: Expression

    def render(self) -> str:
        return f"({self.operator}{self.operand.render()})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """Binary operator expression like `a + b` or `x < y`."""

    token: Token
    left: Expression
    operator: str
    right: Expression

    def render(self) -> str:
        return f"({self.left.render()} {self.operator} {self.right.render()})"


# === Statements ===


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Token
    expression: Expression

    def render(self) -> str:
        return self.expression.render()


@dataclass(frozen=True)
class VarStatement(Statement):
    """`var <name> = <value>;`"""

    token: Token
    name: Identifier
    value: Expression | None = None

    def render(self) -> str:
        value = self.value.render() if self.value is not None else ""
        return f"{self.token_literal()} {self.name.render()} = {value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """`return [<value>];`"""

    token: Token
    value: Expression | None = None

    def render(self) -> str:
        if self.value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.value.render()};"


@dataclass(frozen=True)
class BlockStatement(Statement):
    """Brace-delimited statement list; `token` is the opening `{`."""

    token: Token
    statements: tuple[Statement, ...] = ()

    def render(self) -> str:
        return "".join(stmt.render() for stmt in self.statements)


# === Compound expressions ===


@dataclass(frozen=True)
class IfExpression(Expression):
    """Conditional; `alternative` is None exactly when there was no `else`."""

    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def render(self) -> str:
        out = f"if{self.condition.render()} {self.consequence.render()}"
        if self.alternative is not None:
            out += f"else {self.alternative.render()}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Token
    parameters: tuple[Identifier, ...]
    body: BlockStatement

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body.render()}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """Call of any callee expression; `token` is the `(` that opened the argument list."""

    token: Token
    callee: Expression
    arguments: tuple[Expression, ...] = ()

    def render(self) -> str:
        args = ", ".join(a.render() for a in self.arguments)
        return f"{self.callee.render()}({args})"


__all__ = [
    "BlockStatement",
    "Boolean",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "Node",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "VarStatement",
]
