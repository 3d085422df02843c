"""Dice expression interpreter: public entry points, pure math, no I/O."""
from __future__ import annotations

import logging
import random
import time

from dicexp.mechanics.evaluator import Evaluator, RandomSource
from dicexp.mechanics.parser import nested_too_deeply, parse
from dicexp.models.roll import DiceRoll, EvalMode

logger = logging.getLogger(__name__)

_SEED_LIMIT = 2 ** 64


def simple_rng(seed: int) -> random.Random:
    """Deterministic random source for a 64-bit seed."""
    if not 0 <= seed < _SEED_LIMIT:
        raise ValueError(f"Seed must be a 64-bit unsigned integer, got {seed}")
    return random.Random(seed)


def new_simple_rng() -> random.Random:
    """Random source seeded from the current time in milliseconds."""
    return simple_rng(time.time_ns() // 1_000_000 % _SEED_LIMIT)


class DiceBag:
    """Evaluates RPG dice notation expressions such as ``"2d6+3"``.

    Example::

        bag = DiceBag(simple_rng(42))
        roll = bag.eval("3d6-4")
        print(f"Rolled {roll}, average {roll.average:.1f}")

    The bag owns its random source; every dice term resolved in roll mode
    advances it, so two bags with the same seed produce the same sequence
    for the same calls.
    """

    def __init__(self, rng: RandomSource, max_dice: int | None = None):
        self.rng = rng
        self._evaluator = Evaluator(rng, max_dice=max_dice)

    def roll(self, n: int, d: int, m: int = 0) -> int:
        """Roll *n* dice with *d* sides each and add *m*."""
        return self._evaluator.draw(n, d) + m

    def eval(self, dice_expression: str) -> DiceRoll:
        """Evaluate in all four modes at once.

        Either every mode succeeds or a DiceSyntaxError is raised; the
        envelope is computed before rolling, so a bad expression never
        consumes randomness.
        """
        tree = parse(dice_expression, EvalMode.ROLL)
        try:
            low, high = self._evaluator.bounds(tree)
            average = self._evaluator.average(tree)
            total = self._evaluator.roll(tree)
        except RecursionError as exc:
            raise nested_too_deeply() from exc
        result = DiceRoll(total=total, min=low, max=high, average=average)
        logger.debug("Evaluated %r: %r", dice_expression, result)
        return result

    def eval_total(self, dice_expression: str) -> int:
        return int(self._eval_as(dice_expression, EvalMode.ROLL))

    def eval_min(self, dice_expression: str) -> int:
        return int(self._eval_as(dice_expression, EvalMode.MINIMUM))

    def eval_max(self, dice_expression: str) -> int:
        return int(self._eval_as(dice_expression, EvalMode.MAXIMUM))

    def eval_average(self, dice_expression: str) -> float:
        """Expected value. Unlike the other modes, decimal literals are allowed."""
        return float(self._eval_as(dice_expression, EvalMode.AVERAGE))

    eval_ave = eval_average

    def _eval_as(self, dice_expression: str, mode: EvalMode) -> int | float:
        tree = parse(dice_expression, mode)
        try:
            value = self._evaluator.evaluate(tree, mode)
        except RecursionError as exc:
            raise nested_too_deeply() from exc
        logger.debug("Evaluated %r as %s: %s", dice_expression, mode.value, value)
        return value
