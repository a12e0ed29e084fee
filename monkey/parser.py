"""Parser for the Monkey language.

Statements are parsed by recursive descent; expressions by precedence
climbing (a Pratt parser). Every token kind that may start an expression
has a prefix handler, every token kind that may continue one has an infix
handler, and the ``PRECEDENCES`` table decides how tightly an infix token
binds. Changing the grammar's precedence therefore only means editing the
table, never the control flow.

The parser does not stop at the first problem. Each error is recorded in
``Parser.errors`` and parsing resumes at the next statement, so a single
pass reports every independent mistake it can find.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from . import token
from .ast import (
    Program, Statement, Expression, LetStatement, ReturnStatement,
    ExpressionStatement, BlockStatement, Identifier, IntegerLiteral,
    Boolean, StringLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression, ArrayLiteral,
    HashLiteral, IndexExpression, SliceExpression,
)
from .lexer import Lexer
from .token import Token


# Binding power, lowest to highest
LOWEST = 1
EQUALS = 2       # == !=
LESSGREATER = 3  # < >
SUM = 4          # + -
PRODUCT = 5      # * /
PREFIX = 6       # -x !x
CALL = 7         # f(x)
INDEX = 8        # a[i] a[i:j]

PRECEDENCES: Dict[str, int] = {
    token.EQ: EQUALS,
    token.NOT_EQ: EQUALS,
    token.LT: LESSGREATER,
    token.GT: LESSGREATER,
    token.PLUS: SUM,
    token.MINUS: SUM,
    token.ASTERISK: PRODUCT,
    token.SLASH: PRODUCT,
    token.LPAREN: CALL,
    token.LBRACKET: INDEX,
}

INT64_MAX = 2 ** 63 - 1

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []

        self.prefix_parse_fns: Dict[str, PrefixParseFn] = {
            token.IDENT: self.parse_identifier,
            token.INT: self.parse_integer_literal,
            token.STRING: self.parse_string_literal,
            token.TRUE: self.parse_boolean,
            token.FALSE: self.parse_boolean,
            token.BANG: self.parse_prefix_expression,
            token.MINUS: self.parse_prefix_expression,
            token.LPAREN: self.parse_grouped_expression,
            token.IF: self.parse_if_expression,
            token.FUNCTION: self.parse_function_literal,
            token.LBRACKET: self.parse_array_literal,
            token.LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: Dict[str, InfixParseFn] = {
            token.PLUS: self.parse_infix_expression,
            token.MINUS: self.parse_infix_expression,
            token.ASTERISK: self.parse_infix_expression,
            token.SLASH: self.parse_infix_expression,
            token.EQ: self.parse_infix_expression,
            token.NOT_EQ: self.parse_infix_expression,
            token.LT: self.parse_infix_expression,
            token.GT: self.parse_infix_expression,
            token.LPAREN: self.parse_call_expression,
            token.LBRACKET: self.parse_index_expression,
        }

        # Prime cur_token and peek_token.
        self.cur_token: Token = self.lexer.next_token()
        self.peek_token: Token = self.lexer.next_token()

    # Token stream helpers

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind: str) -> bool:
        return self.cur_token.type == kind

    def peek_token_is(self, kind: str) -> bool:
        return self.peek_token.type == kind

    def expect_peek(self, kind: str) -> bool:
        """Advance if the next token has the given kind, else record an error."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind: str):
        self.errors.append(
            f"expected next token to be {kind}, got {self.peek_token.type} instead "
            f"at {self.peek_token.position}"
        )

    def no_prefix_parse_fn_error(self, tok: Token):
        self.errors.append(f"no parse function for token kind {tok.type} at {tok.position}")

    def peek_precedence(self) -> int:
        return PRECEDENCES.get(self.peek_token.type, LOWEST)

    def cur_precedence(self) -> int:
        return PRECEDENCES.get(self.cur_token.type, LOWEST)

    # Statements

    def parse_program(self) -> Program:
        program = Program()
        while not self.cur_token_is(token.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()
        return program

    def parse_statement(self) -> Optional[Statement]:
        if self.cur_token_is(token.LET):
            return self.parse_let_statement()
        if self.cur_token_is(token.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        let_token = self.cur_token
        if not self.expect_peek(token.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self.expect_peek(token.ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None
        if self.peek_token_is(token.SEMICOLON):
            self.next_token()
        return LetStatement(let_token, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        return_token = self.cur_token
        value: Optional[Expression] = None
        if not (self.peek_token_is(token.SEMICOLON)
                or self.peek_token_is(token.RBRACE)
                or self.peek_token_is(token.EOF)):
            self.next_token()
            value = self.parse_expression(LOWEST)
            if value is None:
                return None
        if self.peek_token_is(token.SEMICOLON):
            self.next_token()
        return ReturnStatement(return_token, value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        stmt_token = self.cur_token
        expression = self.parse_expression(LOWEST)
        if expression is None:
            return None
        if self.peek_token_is(token.SEMICOLON):
            self.next_token()
        return ExpressionStatement(stmt_token, expression)

    def parse_block_statement(self) -> BlockStatement:
        block = BlockStatement(self.cur_token)
        self.next_token()
        while not self.cur_token_is(token.RBRACE):
            if self.cur_token_is(token.EOF):
                self.errors.append(
                    f"expected next token to be {token.RBRACE}, got {token.EOF} instead "
                    f"at {self.cur_token.position}"
                )
                break
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()
        return block

    # Expressions

    def parse_expression(self, precedence: int) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None
        left = prefix()

        while left is not None and not self.peek_token_is(token.SEMICOLON) \
                and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        value = int(self.cur_token.literal)
        if value > INT64_MAX:
            self.errors.append(
                f"could not parse {self.cur_token.literal} as integer at {self.cur_token.position}"
            )
            return None
        return IntegerLiteral(self.cur_token, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return Boolean(self.cur_token, self.cur_token_is(token.TRUE))

    def parse_prefix_expression(self) -> Optional[Expression]:
        prefix_token = self.cur_token
        self.next_token()
        right = self.parse_expression(PREFIX)
        if right is None:
            return None
        return PrefixExpression(prefix_token, prefix_token.literal, right)

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        infix_token = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(infix_token, left, infix_token.literal, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        expression = self.parse_expression(LOWEST)
        if expression is None or not self.expect_peek(token.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Optional[Expression]:
        if_token = self.cur_token
        if not self.expect_peek(token.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if condition is None or not self.expect_peek(token.RPAREN):
            return None
        if not self.expect_peek(token.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(token.ELSE):
            self.next_token()
            if not self.expect_peek(token.LBRACE):
                return None
            alternative = self.parse_block_statement()
        return IfExpression(if_token, condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        fn_token = self.cur_token
        if not self.expect_peek(token.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None or not self.expect_peek(token.LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(fn_token, parameters, body)

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        parameters: List[Identifier] = []
        if self.peek_token_is(token.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(token.IDENT):
            return None
        parameters.append(Identifier(self.cur_token, self.cur_token.literal))
        while self.peek_token_is(token.COMMA):
            self.next_token()
            if not self.expect_peek(token.IDENT):
                return None
            parameters.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(token.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function: Expression) -> Optional[Expression]:
        call_token = self.cur_token
        arguments = self.parse_expression_list(token.RPAREN)
        if arguments is None:
            return None
        return CallExpression(call_token, function, arguments)

    def parse_array_literal(self) -> Optional[Expression]:
        array_token = self.cur_token
        elements = self.parse_expression_list(token.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(array_token, elements)

    def parse_expression_list(self, end: str) -> Optional[List[Expression]]:
        """Parse comma separated expressions up to and including ``end``."""
        items: List[Expression] = []
        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        item = self.parse_expression(LOWEST)
        if item is None:
            return None
        items.append(item)
        while self.peek_token_is(token.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None
        return items

    def parse_hash_literal(self) -> Optional[Expression]:
        hash_token = self.cur_token
        pairs: List[Tuple[Expression, Expression]] = []
        while not self.peek_token_is(token.RBRACE):
            self.next_token()
            key = self.parse_expression(LOWEST)
            if key is None or not self.expect_peek(token.COLON):
                return None
            self.next_token()
            value = self.parse_expression(LOWEST)
            if value is None:
                return None
            pairs.append((key, value))
            if not self.peek_token_is(token.RBRACE) and not self.expect_peek(token.COMMA):
                return None
        if not self.expect_peek(token.RBRACE):
            return None
        return HashLiteral(hash_token, pairs)

    def parse_index_expression(self, left: Expression) -> Optional[Expression]:
        # cur_token is '['; a ':' before the closing ']' turns this into a slice.
        bracket_token = self.cur_token
        if self.peek_token_is(token.COLON):
            self.next_token()
            return self.parse_slice_expression(bracket_token, left, None)

        self.next_token()
        index = self.parse_expression(LOWEST)
        if index is None:
            return None
        if self.peek_token_is(token.COLON):
            self.next_token()
            return self.parse_slice_expression(bracket_token, left, index)
        if not self.expect_peek(token.RBRACKET):
            return None
        return IndexExpression(bracket_token, left, index)

    def parse_slice_expression(self, bracket_token: Token, left: Expression,
                               lower: Optional[Expression]) -> Optional[Expression]:
        # cur_token is ':'
        upper: Optional[Expression] = None
        if not self.peek_token_is(token.RBRACKET):
            self.next_token()
            upper = self.parse_expression(LOWEST)
            if upper is None:
                return None
        if not self.expect_peek(token.RBRACKET):
            return None
        return SliceExpression(bracket_token, left, lower, upper)


def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse Monkey source, returning the program and any parse errors.

    A non-empty error list means the program is unreliable and must not be
    evaluated.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
