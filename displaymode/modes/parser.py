"""Parser for user mode strings.

Accepted forms::

    spec       := resolution [ "@" rate ] END | rate END
    resolution := INTEGER "x" INTEGER
    rate       := DIGITS [ "." DIGITS* ]

e.g. ``3840x2160``, ``3840x2160@59.94`` or ``144``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from ..errors import ParseError
from .models import ModeSpec

_DIGITS = "0123456789"


class TokenKind(Enum):
    NUMBER = auto()
    TIMES = auto()  # the "x" between width and height
    AT = auto()
    END = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""
    fractional: bool = False  # NUMBER contained a decimal point


def tokenize(text: str) -> List[Token]:
    """Split a mode string into tokens; raises ParseError on any other character."""
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch in _DIGITS:
            start = pos
            while pos < len(text) and text[pos] in _DIGITS:
                pos += 1
            fractional = False
            if pos < len(text) and text[pos] == ".":
                fractional = True
                pos += 1
                while pos < len(text) and text[pos] in _DIGITS:
                    pos += 1
            tokens.append(Token(TokenKind.NUMBER, text[start:pos], fractional))
        elif ch == "x":
            tokens.append(Token(TokenKind.TIMES, ch))
            pos += 1
        elif ch == "@":
            tokens.append(Token(TokenKind.AT, ch))
            pos += 1
        else:
            raise ParseError(text)
    tokens.append(Token(TokenKind.END))
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _expect(self, kind: TokenKind) -> Token:
        token = self._peek()
        if token.kind is not kind:
            raise ParseError(self.text)
        self.pos += 1
        return token

    def _integer(self) -> int:
        token = self._expect(TokenKind.NUMBER)
        if token.fractional:
            raise ParseError(self.text)
        try:
            return int(token.text)
        except ValueError:
            # Beyond the interpreter's integer string length limit
            raise ParseError(self.text) from None

    def _rate(self) -> float:
        rate = float(self._expect(TokenKind.NUMBER).text)
        if not math.isfinite(rate):
            raise ParseError(self.text)
        return rate

    def parse(self) -> ModeSpec:
        width: Optional[int] = None
        height: Optional[int] = None
        rate: Optional[float] = None

        # A leading NUMBER followed by "x" starts a resolution, otherwise it is a bare rate
        if len(self.tokens) > 1 and self.tokens[1].kind is TokenKind.TIMES:
            width = self._integer()
            self._expect(TokenKind.TIMES)
            height = self._integer()
            if self._peek().kind is TokenKind.AT:
                self.pos += 1
                rate = self._rate()
        else:
            rate = self._rate()

        self._expect(TokenKind.END)
        return ModeSpec(width=width, height=height, rate=rate)


def parse_mode_spec(text: str) -> ModeSpec:
    """Parse ``WIDTHxHEIGHT``, ``WIDTHxHEIGHT@RATE`` or ``RATE`` into a ModeSpec."""
    return _Parser(text).parse()
