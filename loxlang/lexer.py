"""Lexer for loxlang.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its type, lexeme, literal value and source line number.

Every character of the input is claimed by exactly one group, so the scan
always makes progress: whitespace and ``//`` comments are matched and
dropped, and anything unrecognised falls through to ``MISMATCH``, which is
recorded as an error and skipped. Errors never stop the scan, so a single
pass reports every lexical problem in the file.


File: lexer.py
Version: 0.1.0
License: MIT
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from loxlang.exceptions import ScanError

logger = logging.getLogger(__name__)


class TokenType(str, Enum):
    """
    Enumeration of lexeme categories.
    """

    # Single-character punctuation
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # One or two character operators
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    EOF = "EOF"

    def __str__(self) -> str:
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token with a type, raw text and optional literal.
    """

    type: TokenType
    lexeme: str
    literal: Union[float, str, None]
    line: int

    def __str__(self) -> str:
        """
        Render the token as ``TYPE lexeme literal``.
        """
        literal = "null" if self.literal is None else self.literal
        return f"{self.type.value} {self.lexeme} {literal}"

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.lexeme!r}, line={self.line})"


token_specification: list[tuple[str, str]] = [
    # Trivia
    ('COMMENT',       r'//[^\n]*'),
    ('NEWLINE',       r'\n'),
    ('SKIP',          r'[ \r\t]+'),

    # Literals
    ('NUMBER',        r'[0-9]+(?:\.[0-9]+)?'),
    ('STRING',        r'"[^"]*"'),
    ('UNTERMINATED',  r'"[^"]*\Z'),
    ('IDENTIFIER',    r'[A-Za-z_][A-Za-z0-9_]*'),

    # Two-character operators must come before their one-character prefixes
    ('BANG_EQUAL',    r'!='),
    ('EQUAL_EQUAL',   r'=='),
    ('GREATER_EQUAL', r'>='),
    ('LESS_EQUAL',    r'<='),
    ('BANG',          r'!'),
    ('EQUAL',         r'='),
    ('GREATER',       r'>'),
    ('LESS',          r'<'),

    # Delimiters and arithmetic
    ('LEFT_PAREN',    r'\('),
    ('RIGHT_PAREN',   r'\)'),
    ('LEFT_BRACE',    r'\{'),
    ('RIGHT_BRACE',   r'\}'),
    ('COMMA',         r','),
    ('DOT',           r'\.'),
    ('MINUS',         r'-'),
    ('PLUS',          r'\+'),
    ('SEMICOLON',     r';'),
    ('SLASH',         r'/'),
    ('STAR',          r'\*'),

    # Anything else
    ('MISMATCH',      r'.'),
]

TOKEN_REGEX = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in token_specification)
)


class Lexer:
    """
    Scanner producing a terminated token list from source text.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self.errors: list[ScanError] = []
        self.line = 1

    @property
    def had_error(self) -> bool:
        """
        True once any lexical error has been recorded.
        """
        return bool(self.errors)

    def error(self, message: str) -> None:
        """
        Record a lexical error on the current line and keep scanning.
        """
        self.errors.append(ScanError(message, self.line))

    def scan_tokens(self) -> list[Token]:
        """
        Convert the source into a list of tokens ending with ``EOF``.

        Returns:
            list[Token]: The tokens in source order.
        """
        for match_obj in TOKEN_REGEX.finditer(self.source):
            kind = match_obj.lastgroup
            value = match_obj.group()

            if kind == 'NEWLINE':
                self.line += 1
                continue
            if kind in ('SKIP', 'COMMENT'):
                continue
            if kind == 'MISMATCH':
                self.error("Unexpected character.")
                continue
            if kind == 'UNTERMINATED':
                self.line += value.count('\n')
                self.error("Unterminated string.")
                continue

            if kind == 'STRING':
                self.line += value.count('\n')
                self.add_token(TokenType.STRING, value, value[1:-1])
            elif kind == 'NUMBER':
                self.add_token(TokenType.NUMBER, value, float(value))
            elif kind == 'IDENTIFIER':
                self.add_token(KEYWORDS.get(value, TokenType.IDENTIFIER), value)
            else:
                self.add_token(TokenType(kind), value)

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        logger.debug("scanned %d tokens with %d errors", len(self.tokens), len(self.errors))
        return self.tokens

    def add_token(self, type_: TokenType, lexeme: str, literal=None) -> None:
        """
        Append a token on the current line.
        """
        self.tokens.append(Token(type_, lexeme, literal, self.line))


def tokenize(code: str) -> tuple[list[Token], list[ScanError]]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.

    Returns:
        list[Token]: A list of Token instances, terminated by ``EOF``.
        list[ScanError]: Every lexical error found, in source order.
    """
    lexer = Lexer(code)
    tokens = lexer.scan_tokens()
    return tokens, lexer.errors
