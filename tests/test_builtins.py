import io

import pytest

from monkey.interpreter import Interpreter
from monkey.objects import Integer, String, Array, Error, NULL
from monkey.parser import parse
from monkey.std import populate_builtins


def run(source, out=None):
    program, errors = parse(source)
    assert errors == []
    return Interpreter(out=out).run(program)


@pytest.mark.parametrize('source, expected', [
    ('len("")', 0),
    ('len("four")', 4),
    ('len("hello world")', 11),
    ('len("héllo")', 6),
    ('len([])', 0),
    ('len([1, 2, 3])', 3),
    ('len(push([1], 2))', 2),
])
def test_len(source, expected):
    result = run(source)
    assert isinstance(result, Integer)
    assert result.value == expected


@pytest.mark.parametrize('source, message', [
    ('len(1)', 'argument to `len` not supported, got INTEGER'),
    ('len({})', 'argument to `len` not supported, got HASH'),
    ('len("one", "two")', 'wrong number of arguments. got=2, want=1'),
    ('len()', 'wrong number of arguments. got=0, want=1'),
    ('push(1, 1)', 'argument to `push` must be ARRAY, got INTEGER'),
    ('push([1])', 'wrong number of arguments. got=1, want=2'),
    ('first(1)', 'argument to `first` must be ARRAY, got INTEGER'),
    ('last("abc")', 'argument to `last` must be ARRAY, got STRING'),
    ('rest(true)', 'argument to `rest` must be ARRAY, got BOOLEAN'),
    ('rest([1], [2])', 'wrong number of arguments. got=2, want=1'),
])
def test_builtin_errors(source, message):
    result = run(source)
    assert isinstance(result, Error)
    assert result.message == message


def test_push_leaves_original_untouched():
    result = run('let a = [1, 2]; let b = push(a, 3); [a, b]')
    assert result.inspect() == '[[1, 2], [1, 2, 3]]'


def test_first_last_rest():
    assert run('first([1, 2, 3])') == Integer(1)
    assert run('last([1, 2, 3])') == Integer(3)
    assert run('rest([1, 2, 3])') == Array([Integer(2), Integer(3)])
    assert run('rest([1])') == Array([])
    assert run('first([])') is NULL
    assert run('last([])') is NULL
    assert run('rest([])') is NULL


def test_puts_writes_each_argument_on_its_own_line(capsys):
    result = run('puts("hello", 1 + 2, [1, "a"], true)')
    assert result is NULL
    assert capsys.readouterr().out == 'hello\n3\n[1, a]\ntrue\n'


def test_puts_without_arguments(capsys):
    assert run('puts()') is NULL
    assert capsys.readouterr().out == ''


def test_puts_honours_output_stream(capsys):
    out = io.StringIO()
    run('puts("redirected")', out=out)
    assert out.getvalue() == 'redirected\n'
    assert capsys.readouterr().out == ''


def test_builtins_are_first_class():
    assert run('len').inspect() == 'builtin function'
    assert run('let f = len; f("ab")') == Integer(2)
    assert run('let apply = fn(g, x) { g(x) }; apply(first, [9, 8])') == Integer(9)


def test_populate_builtins_table():
    table = populate_builtins()
    assert sorted(table) == ['first', 'last', 'len', 'push', 'puts', 'rest']
    assert table['len'].fn([String('abc')]) == Integer(3)
    assert table['len'].type() == 'BUILTIN'
