"""Tree-walking evaluation of parsed dice expressions.

Three walks share one tree: ``roll`` draws dice from the random source,
``bounds`` computes the (minimum, maximum) envelope by interval arithmetic,
and ``average`` computes the expected value. Only ``roll`` touches the
random source.
"""
from __future__ import annotations

from typing import Protocol

from dicexp.errors import DiceSyntaxError, ErrorKind
from dicexp.mechanics.parser import Chain, Dice, Group, Negate, Node, Number, Step
from dicexp.models.roll import EvalMode

Bounds = tuple[float, float]


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def truncating_div(left: int | float, right: int | float) -> int | float:
    """Integer division rounding toward zero (``-7/2 == -3``); floats divide exactly."""
    if isinstance(left, int) and isinstance(right, int):
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient
    return left / right


def _is_whole(value: int | float) -> bool:
    return isinstance(value, int) or value.is_integer()


class Evaluator:
    def __init__(self, rng: RandomSource | None = None, max_dice: int | None = None):
        self.rng = rng
        self.max_dice = max_dice

    def evaluate(self, node: Node, mode: EvalMode) -> int | float:
        """Evaluate *node* in a single mode. The envelope is always checked first."""
        low, high = self.bounds(node)
        if mode is EvalMode.MINIMUM:
            return low
        if mode is EvalMode.MAXIMUM:
            return high
        if mode is EvalMode.AVERAGE:
            return self.average(node)
        return self.roll(node)

    def draw(self, count: int, sides: int) -> int:
        if self.rng is None:
            raise RuntimeError("Evaluator has no random source to roll with")
        return sum(self.rng.randint(1, sides) for _ in range(count))

    # -- roll -------------------------------------------------------------

    def roll(self, node: Node) -> int | float:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Group):
            return self.roll(node.inner)
        if isinstance(node, Negate):
            return -self.roll(node.operand)
        if isinstance(node, Chain):
            value = self.roll(node.first)
            for step in node.steps:
                value = _apply(step, value, self.roll(step.operand))
            return value
        count = self.roll(node.count)
        sides = self.roll(node.sides)
        self._check_dice(node, count, count, sides)
        return self.draw(int(count), int(sides))

    # -- bounds -----------------------------------------------------------

    def bounds(self, node: Node) -> Bounds:
        if isinstance(node, Number):
            return node.value, node.value
        if isinstance(node, Group):
            return self.bounds(node.inner)
        if isinstance(node, Negate):
            low, high = self.bounds(node.operand)
            return -high, -low
        if isinstance(node, Chain):
            low, high = self.bounds(node.first)
            for step in node.steps:
                low, high = _widen(step, low, high, *self.bounds(step.operand))
            return low, high
        count_low, count_high = self.bounds(node.count)
        sides_low, sides_high = self.bounds(node.sides)
        self._check_dice(node, count_low, count_high, sides_low)
        # every die shows 1 at the low end and its top face at the high end
        return count_low, count_high * sides_high

    # -- average ----------------------------------------------------------

    def average(self, node: Node) -> float:
        if isinstance(node, Number):
            return _as_float(node.value, node.line, node.col)
        if isinstance(node, Group):
            return self.average(node.inner)
        if isinstance(node, Negate):
            return -self.average(node.operand)
        if isinstance(node, Chain):
            value = self.average(node.first)
            for step in node.steps:
                value = _apply(step, value, self.average(step.operand))
            return value
        count = self._dice_operand_average(node, node.count)
        sides = self._dice_operand_average(node, node.sides)
        return float(f"{count * 0.5 * (1 + sides):.1f}")

    def _dice_operand_average(self, dice: Dice, operand: Node) -> float:
        # a dice-free operand is exact, so (7/2)d6 averages 3 dice like every other mode
        low, high = self.bounds(operand)
        if low == high:
            return _as_float(low, dice.line, dice.col)
        return self.average(operand)

    def _check_dice(self, node: Dice, count_low: float, count_high: float, sides_low: float) -> None:
        if not (_is_whole(count_low) and _is_whole(count_high) and _is_whole(sides_low)):
            raise DiceSyntaxError(
                ErrorKind.INVALID_DIE, "Dice count and sides must be whole numbers",
                line=node.line, col=node.col,
            )
        if count_low < 0:
            raise DiceSyntaxError(
                ErrorKind.INVALID_DIE, "Cannot roll a negative number of dice",
                line=node.line, col=node.col,
            )
        if sides_low < 1:
            raise DiceSyntaxError(
                ErrorKind.INVALID_DIE, "Dice must have at least one side",
                line=node.line, col=node.col,
            )
        if self.max_dice is not None and count_high > self.max_dice:
            raise DiceSyntaxError(
                ErrorKind.INVALID_DIE, f"Too many dice: {count_high} (max {self.max_dice})",
                line=node.line, col=node.col,
            )


def _as_float(value: int | float, line: int, col: int) -> float:
    try:
        return float(value)
    except OverflowError as exc:
        raise DiceSyntaxError(
            ErrorKind.NUMERIC_PARSE_FAILURE, "Number is too large to average", line=line, col=col,
        ) from exc


def _widen(step: Step, left_low: float, left_high: float, right_low: float, right_high: float) -> Bounds:
    if step.op == "+":
        return left_low + right_low, left_high + right_high
    if step.op == "/" and right_low <= 0 <= right_high:
        raise DiceSyntaxError(
            ErrorKind.DIVISION_BY_ZERO,
            f"Division by zero: the divisor ranges from {right_low} to {right_high}, which includes 0",
            line=step.line, col=step.col,
        )
    corners = [_apply(step, a, b) for a in (left_low, left_high) for b in (right_low, right_high)]
    return min(corners), max(corners)


def _apply(step: Step, left: float, right: float) -> float:
    if step.op == "+":
        return left + right
    if step.op == "*":
        return left * right
    if right == 0:
        raise DiceSyntaxError(
            ErrorKind.DIVISION_BY_ZERO, "Division by zero", line=step.line, col=step.col,
        )
    return truncating_div(left, right)
