from __future__ import annotations

from dicexp.errors import DiceSyntaxError, ErrorKind, InvalidArgumentError
from dicexp.mechanics.dice import DiceBag, new_simple_rng, simple_rng
from dicexp.mechanics.lexer import normalize
from dicexp.models.roll import DiceRoll, EvalMode

__all__ = [
    "DiceBag",
    "DiceRoll",
    "DiceSyntaxError",
    "ErrorKind",
    "EvalMode",
    "InvalidArgumentError",
    "new_simple_rng",
    "normalize",
    "simple_rng",
]
