"""Abstract Syntax Tree (AST) definitions for the Monkey language.

Every node keeps the token it was parsed from, so ``token_literal()`` can
report the original source text. ``str(node)`` renders the canonical form:
unary and binary operators come out fully parenthesized, which makes the
parser's precedence decisions visible in a single string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .token import Token


@dataclass
class Node:
    """Base class for all AST nodes."""
    token: Token

    def token_literal(self) -> str:
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


@dataclass
class Program:
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ''

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


# Expressions

@dataclass
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class Boolean(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class BlockStatement(Statement):
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


@dataclass
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass
class CallExpression(Expression):
    function: Expression  # Identifier or FunctionLiteral
    arguments: List[Expression]

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression]

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self.elements) + ']'


@dataclass
class HashLiteral(Expression):
    pairs: List[Tuple[Expression, Expression]]  # in source order

    def __str__(self) -> str:
        return '{' + ', '.join(f"{k}:{v}" for k, v in self.pairs) + '}'


@dataclass
class IndexExpression(Expression):
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass
class SliceExpression(Expression):
    left: Expression
    lower: Optional[Expression] = None
    upper: Optional[Expression] = None

    def __str__(self) -> str:
        lower = '' if self.lower is None else str(self.lower)
        upper = '' if self.upper is None else str(self.upper)
        return f"({self.left}[{lower}:{upper}])"


# Statements

@dataclass
class LetStatement(Statement):
    name: Identifier
    value: Optional[Expression]

    def __str__(self) -> str:
        value = '' if self.value is None else str(self.value)
        return f"{self.token_literal()} {self.name} = {value};"


@dataclass
class ReturnStatement(Statement):
    return_value: Optional[Expression]

    def __str__(self) -> str:
        if self.return_value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.return_value};"


@dataclass
class ExpressionStatement(Statement):
    expression: Optional[Expression]

    def __str__(self) -> str:
        return '' if self.expression is None else str(self.expression)
