"""Token definitions for the Monkey language.

A token is the smallest lexical unit: its kind (``type``) plus the exact
source text it was scanned from (``literal``). Kinds are plain strings, so
operator and delimiter kinds read the same as the characters they stand for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


ILLEGAL = 'ILLEGAL'
EOF = 'EOF'

# Identifiers and literals
IDENT = 'IDENT'
INT = 'INT'
STRING = 'STRING'

# Operators
ASSIGN = '='
PLUS = '+'
MINUS = '-'
BANG = '!'
ASTERISK = '*'
SLASH = '/'

LT = '<'
GT = '>'
EQ = '=='
NOT_EQ = '!='

# Delimiters
COMMA = ','
SEMICOLON = ';'
COLON = ':'

LPAREN = '('
RPAREN = ')'
LBRACE = '{'
RBRACE = '}'
LBRACKET = '['
RBRACKET = ']'

# Keywords
FUNCTION = 'FUNCTION'
LET = 'LET'
TRUE = 'TRUE'
FALSE = 'FALSE'
IF = 'IF'
ELSE = 'ELSE'
RETURN = 'RETURN'


KEYWORDS: Dict[str, str] = {
    'fn': FUNCTION,
    'let': LET,
    'true': TRUE,
    'false': FALSE,
    'if': IF,
    'else': ELSE,
    'return': RETURN,
}

# Tokens made of exactly one character.
SINGLE_CHAR_TOKENS: Dict[str, str] = {
    '=': ASSIGN,
    '+': PLUS,
    '-': MINUS,
    '!': BANG,
    '*': ASTERISK,
    '/': SLASH,
    '<': LT,
    '>': GT,
    ',': COMMA,
    ';': SEMICOLON,
    ':': COLON,
    '(': LPAREN,
    ')': RPAREN,
    '{': LBRACE,
    '}': RBRACE,
    '[': LBRACKET,
    ']': RBRACKET,
}


@dataclass
class Token:
    type: str
    literal: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def position(self) -> str:
        return f"{self.line}:{self.column}"


def lookup_ident(word: str) -> str:
    """Return the keyword kind for ``word``, or IDENT if it is not a keyword."""
    return KEYWORDS.get(word, IDENT)
