"""Normalizer: turns informal dice notation into a canonical token stream."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from dicexp.errors import DiceSyntaxError, ErrorKind
from dicexp.models.roll import EvalMode

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    NUMBER = "number"
    DICE = "d"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    col: int


_SINGLE_CHAR = {
    "d": TokenKind.DICE,
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# A '-' after one of these is a sign, anywhere else it is a subtraction.
_SIGN_CONTEXT = frozenset("+/*")
_DIGITS = frozenset("0123456789")


class _Scanner:
    def __init__(self, mode: EvalMode):
        self.mode = mode
        self.tokens: list[Token] = []

    @property
    def last_char(self) -> str | None:
        return self.tokens[-1].text[-1] if self.tokens else None

    def emit(self, kind: TokenKind, text: str, line: int, col: int) -> None:
        # Whitespace is not a separator: "1 2" reads as "12".
        if kind is TokenKind.NUMBER and self.tokens and self.tokens[-1].kind is TokenKind.NUMBER:
            prev = self.tokens.pop()
            self.tokens.append(Token(kind, prev.text + text, prev.line, prev.col))
            return
        self.tokens.append(Token(kind, text, line, col))

    def feed(self, c: str, line: int, col: int) -> None:
        if not self.tokens and c in "+-":
            self.emit(TokenKind.NUMBER, "0", line, col)

        if c == ".":
            if self.mode is not EvalMode.AVERAGE:
                raise DiceSyntaxError(
                    ErrorKind.DECIMAL_NOT_ALLOWED,
                    "Found '.', but decimal numbers are not supported (integer math only)",
                    line=line, col=col,
                )
            self.emit(TokenKind.NUMBER, c, line, col)
        elif c in _DIGITS:
            self.emit(TokenKind.NUMBER, c, line, col)
        elif c == "%":
            # d% means d100
            self.emit(TokenKind.NUMBER, "100", line, col)
        elif c in "xX":
            self.emit(TokenKind.STAR, "*", line, col)
        elif c == "-":
            if self.last_char not in _SIGN_CONTEXT:
                self.emit(TokenKind.PLUS, "+", line, col)
            self.emit(TokenKind.MINUS, "-", line, col)
        elif c == "(":
            last = self.last_char
            if last is not None and (last in _DIGITS or last == "."):
                self.emit(TokenKind.STAR, "*", line, col)
            self.emit(TokenKind.LPAREN, c, line, col)
        elif c in _SINGLE_CHAR:
            self.emit(_SINGLE_CHAR[c], c, line, col)
        else:
            raise DiceSyntaxError(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Unexpected character {c!r}",
                line=line, col=col,
            )


def tokenize(raw: str, mode: EvalMode = EvalMode.ROLL) -> list[Token]:
    """Scan *raw* into canonical tokens, each tagged with its source position.

    The stream always ends with an END token. Shorthand is rewritten on the
    way: ``%`` becomes ``100``, ``x`` becomes ``*``, subtraction becomes
    ``+-``, ``4(`` becomes ``4*(`` and a leading sign gets a ``0`` in front.
    """
    scanner = _Scanner(mode)
    line, col = 1, 0
    for c in raw:
        col += 1
        if c == "\n":
            line += 1
            col = 0
            continue
        if c.isspace():
            continue
        scanner.feed(c, line, col)
    scanner.tokens.append(Token(TokenKind.END, "", line, col + 1))
    return scanner.tokens


def normalize(raw: str, mode: EvalMode = EvalMode.ROLL) -> str:
    """Return the canonical form of *raw*. Normalizing twice is a no-op."""
    canonical = "".join(tok.text for tok in tokenize(raw, mode))
    logger.debug("Normalized %r -> %r", raw, canonical)
    return canonical
