# Monkey language package
# This package provides a lexer, parser and tree-walking interpreter for Monkey.
from .interpreter import run_program, evaluate, Interpreter
from .parser import parse
from .errors import MonkeyError, ParserError

__all__ = [
    'run_program',
    'evaluate',
    'parse',
    'Interpreter',
    'MonkeyError',
    'ParserError',
]
