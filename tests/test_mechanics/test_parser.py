"""Tests for src/dicexp/mechanics/parser.py."""
from __future__ import annotations

import pytest

from dicexp.errors import DiceSyntaxError, ErrorKind
from dicexp.mechanics.parser import Chain, Dice, Group, Negate, Number, parse
from dicexp.models.roll import EvalMode


class TestTreeShape:
    def test_dice_term(self):
        assert parse("2d6") == Dice(Number(2, "2", 1, 1), Number(6, "6", 1, 3), 1, 2)

    def test_multiplication_binds_tighter(self):
        tree = parse("1+2*3")
        assert isinstance(tree, Chain) and [s.op for s in tree.steps] == ["+"]
        product = tree.steps[0].operand
        assert isinstance(product, Chain) and [s.op for s in product.steps] == ["*"]

    def test_left_to_right_division(self):
        tree = parse("8/4/2")
        assert tree.first == Number(8, "8", 1, 1)
        assert [(s.op, s.operand.value) for s in tree.steps] == [("/", 4), ("/", 2)]

    def test_subtraction_becomes_negation(self):
        tree = parse("7-2")
        assert tree.steps[0].op == "+"
        assert isinstance(tree.steps[0].operand, Negate)

    def test_implicit_multiplication(self):
        tree = parse("4(2+3)")
        assert tree.steps[0].op == "*"
        assert isinstance(tree.steps[0].operand, Group)

    def test_single_operand_is_not_wrapped(self):
        assert parse("(5)") == Group(Number(5, "5", 1, 2), 1, 1)

    def test_long_sum_is_one_chain(self):
        tree = parse("+".join(["1"] * 1500))
        assert isinstance(tree, Chain)
        assert len(tree.steps) == 1499
        assert all(isinstance(s.operand, Number) for s in tree.steps)

    def test_chained_dice(self):
        tree = parse("2d6d4")
        assert isinstance(tree, Dice)
        assert isinstance(tree.count, Dice)

    def test_decimal_literal_in_average_mode(self):
        tree = parse("1.5", EvalMode.AVERAGE)
        assert tree == Number(1.5, "1.5", 1, 1)


class TestSyntaxErrors:
    @pytest.mark.parametrize("expr, kind, col", [
        ("(1+2", ErrorKind.UNMATCHED_PARENTHESIS, 1),
        ("1+2)", ErrorKind.UNMATCHED_PARENTHESIS, 4),
        ("*5", ErrorKind.MISSING_OPERAND, 1),
        ("5*", ErrorKind.MISSING_OPERAND, 3),
        ("d20", ErrorKind.MISSING_OPERAND, 1),
        ("", ErrorKind.MISSING_OPERAND, 1),
        ("()", ErrorKind.MISSING_OPERAND, 2),
        ("5--3", ErrorKind.MISSING_OPERAND, 3),
        ("(1)(2)", ErrorKind.UNEXPECTED_TOKEN, 4),
    ])
    def test_error_kind_and_position(self, expr, kind, col):
        with pytest.raises(DiceSyntaxError) as excinfo:
            parse(expr)
        assert excinfo.value.kind is kind
        assert excinfo.value.line == 1
        assert excinfo.value.col == col

    def test_missing_operand_message_names_operator(self):
        with pytest.raises(DiceSyntaxError, match=r"after operator '\*'"):
            parse("5*")

    def test_decimal_dice_count_chains_cause(self):
        with pytest.raises(DiceSyntaxError) as excinfo:
            parse("2.5d6", EvalMode.AVERAGE)
        assert excinfo.value.kind is ErrorKind.NUMERIC_PARSE_FAILURE
        assert isinstance(excinfo.value.cause, ValueError)

    def test_malformed_decimal_chains_cause(self):
        with pytest.raises(DiceSyntaxError) as excinfo:
            parse("1.2.3", EvalMode.AVERAGE)
        assert excinfo.value.kind is ErrorKind.NUMERIC_PARSE_FAILURE
        assert isinstance(excinfo.value.cause, ValueError)

    def test_deep_nesting_is_a_syntax_error(self):
        with pytest.raises(DiceSyntaxError) as excinfo:
            parse("(" * 500 + "1" + ")" * 500)
        assert excinfo.value.kind is ErrorKind.NESTING_TOO_DEEP
        assert isinstance(excinfo.value.cause, RecursionError)
