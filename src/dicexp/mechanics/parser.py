"""Recursive-descent parser for canonical dice tokens.

Grammar, loosest binding first::

    expression := sum END
    sum        := product ("+" product)*
    product    := unary (("*" | "/") unary)*
    unary      := "-" unary | dice
    dice       := operand ("d" operand)*
    operand    := NUMBER | group
    group      := "(" ["+"] sum ")"

Subtraction never reaches the parser: the lexer has already rewritten
``a-b`` as ``a+-b``, so ``-`` is always a sign.
Runs of ``+`` operands, and runs of ``*``/``/`` operands, become a single
``Chain`` so long flat expressions do not deepen the tree.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from dicexp.errors import DiceSyntaxError, ErrorKind
from dicexp.mechanics.lexer import Token, TokenKind, tokenize
from dicexp.models.roll import EvalMode


@dataclass(frozen=True)
class Number:
    value: int | float
    text: str
    line: int
    col: int


@dataclass(frozen=True)
class Group:
    inner: Node
    line: int
    col: int


@dataclass(frozen=True)
class Negate:
    operand: Node
    line: int
    col: int


@dataclass(frozen=True)
class Step:
    op: str
    operand: Node
    line: int
    col: int


@dataclass(frozen=True)
class Chain:
    """``first`` followed by operators of one precedence level, folded left to right."""
    first: Node
    steps: tuple[Step, ...]


@dataclass(frozen=True)
class Dice:
    count: Node
    sides: Node
    line: int
    col: int


Node = Union[Number, Group, Negate, Chain, Dice]

_OPERATORS = frozenset({
    TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.DICE,
})


def _error(kind: ErrorKind, msg: str, tok: Token) -> DiceSyntaxError:
    return DiceSyntaxError(kind, msg, line=tok.line, col=tok.col)


class Parser:
    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.kind is not TokenKind.END:
            self._pos += 1
        return tok

    def parse(self) -> Node:
        node = self._sum()
        tok = self._peek()
        if tok.kind is TokenKind.RPAREN:
            raise _error(ErrorKind.UNMATCHED_PARENTHESIS, "Found ')' without matching '('", tok)
        if tok.kind is not TokenKind.END:
            raise _error(ErrorKind.UNEXPECTED_TOKEN, f"Unexpected {tok.text!r}", tok)
        return node

    def _sum(self, after: Token | None = None) -> Node:
        first = self._product(after)
        steps = []
        while self._peek().kind is TokenKind.PLUS:
            op = self._advance()
            steps.append(Step("+", self._product(op), op.line, op.col))
        return Chain(first, tuple(steps)) if steps else first

    def _product(self, after: Token | None = None) -> Node:
        first = self._unary(after)
        steps = []
        while self._peek().kind in (TokenKind.STAR, TokenKind.SLASH):
            op = self._advance()
            steps.append(Step(op.text, self._unary(op), op.line, op.col))
        return Chain(first, tuple(steps)) if steps else first

    def _unary(self, after: Token | None = None) -> Node:
        if self._peek().kind is TokenKind.MINUS:
            op = self._advance()
            return Negate(self._unary(op), op.line, op.col)
        return self._dice(after)

    def _dice(self, after: Token | None = None) -> Node:
        node = self._operand(after)
        while self._peek().kind is TokenKind.DICE:
            op = self._advance()
            sides = self._operand(op)
            node = Dice(_require_integer(node), _require_integer(sides), op.line, op.col)
        return node

    def _operand(self, after: Token | None) -> Node:
        tok = self._peek()
        if tok.kind is TokenKind.NUMBER:
            self._advance()
            return Number(_literal(tok), tok.text, tok.line, tok.col)
        if tok.kind is TokenKind.LPAREN:
            return self._group()
        if after is not None:
            raise _error(ErrorKind.MISSING_OPERAND, f"Missing number after operator {after.text!r}", tok)
        if tok.kind in _OPERATORS:
            raise _error(ErrorKind.MISSING_OPERAND, f"Missing number before operator {tok.text!r}", tok)
        if tok.kind is TokenKind.END:
            raise _error(ErrorKind.MISSING_OPERAND, "Expected a number but the expression ended", tok)
        raise _error(ErrorKind.UNMATCHED_PARENTHESIS, "Found ')' without matching '('", tok)

    def _group(self) -> Node:
        opener = self._advance()
        lead = None
        if self._peek().kind is TokenKind.PLUS:
            # "(+3)" and "(-3)" (lexed as "(+-3)") carry an implicit zero
            lead = self._advance()
        elif self._peek().kind is TokenKind.RPAREN:
            raise _error(ErrorKind.MISSING_OPERAND, "Empty parentheses", self._peek())
        inner = self._sum(lead)
        closer = self._peek()
        if closer.kind is TokenKind.END:
            raise _error(ErrorKind.UNMATCHED_PARENTHESIS, "Found '(' without matching ')'", opener)
        if closer.kind is not TokenKind.RPAREN:
            raise _error(ErrorKind.UNEXPECTED_TOKEN, f"Unexpected {closer.text!r}", closer)
        self._advance()
        return Group(inner, opener.line, opener.col)


def _literal(tok: Token) -> int | float:
    try:
        if "." in tok.text:
            return float(tok.text)
        return int(tok.text)
    except ValueError as exc:
        raise _error(
            ErrorKind.NUMERIC_PARSE_FAILURE, f"Failed to parse {tok.text!r} as a number", tok,
        ) from exc


def _require_integer(node: Node) -> Node:
    """Dice counts and sides are whole numbers; decimal literals are rejected."""
    if isinstance(node, Number) and isinstance(node.value, float):
        try:
            int(node.text)
        except ValueError as exc:
            raise DiceSyntaxError(
                ErrorKind.NUMERIC_PARSE_FAILURE,
                f"Failed to parse {node.text!r} as integer",
                line=node.line, col=node.col,
            ) from exc
    return node


def parse(expression: str, mode: EvalMode = EvalMode.ROLL) -> Node:
    """Tokenize and parse *expression* into an expression tree."""
    tokens = tokenize(expression, mode)
    try:
        return Parser(tokens).parse()
    except RecursionError as exc:
        raise nested_too_deeply() from exc


def nested_too_deeply() -> DiceSyntaxError:
    return DiceSyntaxError(ErrorKind.NESTING_TOO_DEEP, "Expression nested too deeply")
