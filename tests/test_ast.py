from monkey import token
from monkey.ast import (
    Program, LetStatement, ReturnStatement, ExpressionStatement, Identifier,
    IntegerLiteral, BlockStatement, IfExpression, InfixExpression,
    FunctionLiteral, HashLiteral, StringLiteral, SliceExpression,
)
from monkey.parser import parse
from monkey.token import Token


def ident(name):
    return Identifier(Token(token.IDENT, name), name)


def test_let_statement_string():
    program = Program([
        LetStatement(Token(token.LET, 'let'), ident('myVar'), ident('anotherVar')),
    ])
    assert str(program) == 'let myVar = anotherVar;'
    assert program.token_literal() == 'let'


def test_return_statement_string():
    stmt = ReturnStatement(Token(token.RETURN, 'return'), IntegerLiteral(Token(token.INT, '5'), 5))
    assert str(stmt) == 'return 5;'
    assert str(ReturnStatement(Token(token.RETURN, 'return'), None)) == 'return;'


def test_empty_program():
    program = Program()
    assert str(program) == ''
    assert program.token_literal() == ''


def test_if_expression_string():
    cond = InfixExpression(Token(token.LT, '<'), ident('x'), '<', ident('y'))
    consequence = BlockStatement(Token(token.LBRACE, '{'), [ExpressionStatement(Token(token.IDENT, 'x'), ident('x'))])
    alternative = BlockStatement(Token(token.LBRACE, '{'), [ExpressionStatement(Token(token.IDENT, 'y'), ident('y'))])
    expr = IfExpression(Token(token.IF, 'if'), cond, consequence, alternative)
    assert str(expr) == 'if(x < y) xelse y'


def test_function_literal_string():
    body = BlockStatement(Token(token.LBRACE, '{'), [
        ExpressionStatement(Token(token.IDENT, 'x'),
                            InfixExpression(Token(token.PLUS, '+'), ident('x'), '+', ident('y'))),
    ])
    fn = FunctionLiteral(Token(token.FUNCTION, 'fn'), [ident('x'), ident('y')], body)
    assert str(fn) == 'fn(x, y) (x + y)'


def test_hash_and_slice_strings():
    key = StringLiteral(Token(token.STRING, 'one'), 'one')
    value = IntegerLiteral(Token(token.INT, '1'), 1)
    assert str(HashLiteral(Token(token.LBRACE, '{'), [(key, value)])) == '{one:1}'
    assert str(SliceExpression(Token(token.LBRACKET, '['), ident('a'))) == '(a[:])'


def test_parsed_program_round_trips_through_string():
    program, errors = parse('let add = fn(a, b) { return a + b; }; add(1, [2, 3][0]);')
    assert errors == []
    assert str(program) == 'let add = fn(a, b) return (a + b);;add(1, ([2, 3][0]))'


def test_nodes_compare_structurally():
    first, _ = parse('let x = 1 + 2;')
    second, _ = parse('let  x=1+2 ;')
    assert first == second
