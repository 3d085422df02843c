from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class EvalMode(str, Enum):
    ROLL = "roll"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    AVERAGE = "average"


class DiceRoll(BaseModel):
    """Outcome of one dice expression: the rolled total and its envelope."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    min: int = 0
    max: int = 0
    average: float = 0.0

    def __str__(self) -> str:
        return str(self.total)
