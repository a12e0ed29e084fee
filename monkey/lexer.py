"""Lexer for the Monkey language.

The lexer walks the source one character at a time and hands out a single
token per call to :meth:`Lexer.next_token`. It never fails: characters it
cannot classify become ``ILLEGAL`` tokens and it is left to the parser to
report them.
"""

from __future__ import annotations

from typing import List

from . import token
from .token import Token


WHITESPACE = ' \t\r\n'


def is_letter(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.position = 0       # index of self.ch
        self.read_position = 0  # index of the next character to read
        self.ch = ''            # '' once the input is exhausted
        self.line = 1
        self.column = 0
        self.read_char()

    def read_char(self):
        if self.ch == '\n':
            self.line += 1
            self.column = 0
        if self.read_position >= len(self.source):
            self.ch = ''
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1
        self.column += 1

    def peek_char(self) -> str:
        if self.read_position >= len(self.source):
            return ''
        return self.source[self.read_position]

    def skip_whitespace(self):
        while self.ch and self.ch in WHITESPACE:
            self.read_char()

    def next_token(self) -> Token:
        self.skip_whitespace()
        line, column = self.line, self.column

        if self.ch == '':
            return Token(token.EOF, '', line, column)

        # Two-character operators need one character of lookahead.
        if self.ch in '=!' and self.peek_char() == '=':
            literal = self.ch + self.peek_char()
            self.read_char()
            self.read_char()
            kind = token.EQ if literal == '==' else token.NOT_EQ
            return Token(kind, literal, line, column)

        if self.ch in token.SINGLE_CHAR_TOKENS:
            tok = Token(token.SINGLE_CHAR_TOKENS[self.ch], self.ch, line, column)
            self.read_char()
            return tok

        if self.ch == '"':
            return Token(token.STRING, self.read_string(), line, column)
        if is_letter(self.ch):
            word = self.read_while(is_letter)
            return Token(token.lookup_ident(word), word, line, column)
        if is_digit(self.ch):
            return Token(token.INT, self.read_while(is_digit), line, column)

        tok = Token(token.ILLEGAL, self.ch, line, column)
        self.read_char()
        return tok

    def read_while(self, predicate) -> str:
        start = self.position
        while self.ch and predicate(self.ch):
            self.read_char()
        return self.source[start:self.position]

    def read_string(self) -> str:
        # No escape sequences; an unterminated string runs to end of input.
        start = self.position + 1
        self.read_char()
        while self.ch and self.ch != '"':
            self.read_char()
        value = self.source[start:self.position]
        if self.ch == '"':
            self.read_char()
        return value

    def __iter__(self):
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == token.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Scan ``source`` completely, returning every token up to and including EOF."""
    return list(Lexer(source))
