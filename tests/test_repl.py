import io

from monkey.interpreter import Interpreter
from monkey.repl import Shell


def make_shell():
    out = io.StringIO()
    return Shell(stdout=out), out


def test_expression_result_is_printed():
    shell, out = make_shell()
    shell.onecmd('1 + 2 * 3')
    assert out.getvalue() == '7\n'


def test_bindings_persist_between_lines():
    shell, out = make_shell()
    shell.onecmd('let add = fn(a, b) { a + b };')
    shell.onecmd('let x = 40;')
    assert out.getvalue() == ''
    shell.onecmd('add(x, 2)')
    assert out.getvalue() == '42\n'


def test_parse_errors_are_reported_and_skipped():
    shell, out = make_shell()
    shell.onecmd('let = 5;')
    assert '\texpected next token to be IDENT, got = instead at 1:5' in out.getvalue()
    assert shell.interpreter.global_env.values == {}


def test_runtime_errors_are_reported():
    shell, out = make_shell()
    shell.onecmd('5 + true')
    assert 'ERROR: type mismatch: INTEGER + BOOLEAN' in out.getvalue()


def test_line_starting_with_bang_is_evaluated():
    shell, out = make_shell()
    shell.onecmd('!true')
    assert out.getvalue() == 'false\n'


def test_runaway_recursion_is_reported():
    shell, out = make_shell()
    shell.onecmd('let f = fn(n) { f(n + 1) };')
    shell.onecmd('f(0)')
    assert 'maximum recursion depth exceeded' in out.getvalue()
    # the session survives
    shell.onecmd('1')
    assert out.getvalue().endswith('1\n')


def test_empty_line_does_nothing():
    shell, out = make_shell()
    shell.onecmd('1')
    assert shell.onecmd('') is False
    assert out.getvalue() == '1\n'


def test_exit_and_eof_stop_the_loop():
    shell, out = make_shell()
    assert shell.onecmd('exit') is True
    assert shell.onecmd('EOF') is True
    assert out.getvalue() == '\n'


def test_shared_interpreter(capsys):
    interpreter = Interpreter()
    shell = Shell(interpreter, stdout=io.StringIO())
    shell.onecmd('let greeting = "hi";')
    shell.onecmd('puts(greeting)')
    assert interpreter.global_env.get('greeting').value == 'hi'
    assert capsys.readouterr().out == 'hi\n'


def test_cmdloop_reads_until_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr('getpass.getuser', lambda: 'tester')
    monkeypatch.setattr('sys.stdin', io.StringIO('let a = 2;\na * 21\n'))
    Shell().cmdloop()
    out = capsys.readouterr().out
    assert 'Hello tester! This is the Monkey programming language!' in out
    assert '42\n' in out


def test_command_words_inside_expressions_are_evaluated():
    shell, out = make_shell()
    shell.onecmd('let exit = 41;')
    assert shell.onecmd('exit + 1') is None
    assert shell.onecmd('help(1)') is None
    assert out.getvalue().startswith('42\n')
    assert 'ERROR: identifier not found: help' in out.getvalue()
    assert shell.onecmd('  exit  ') is True
