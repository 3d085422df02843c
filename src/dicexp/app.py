"""Application layer: config loading and batch evaluation for the CLI."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dicexp.errors import InvalidArgumentError
from dicexp.mechanics.dice import DiceBag, new_simple_rng, simple_rng
from dicexp.models.roll import DiceRoll

logger = logging.getLogger(__name__)

DEFAULT_MAX_DICE = 10_000


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config.toml from *path*, or from the project root by default."""
    import tomllib

    config_path = path or Path(__file__).parent.parent.parent / "config.toml"
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def sanity_check(show_average: bool, show_range: bool, quiet: bool) -> None:
    if quiet and (show_average or show_range):
        raise InvalidArgumentError(
            "-q/--quiet is not compatible with -a/--average and -r/--range"
        )


def format_result(
    expression: str,
    roll: DiceRoll,
    show_average: bool = False,
    show_range: bool = False,
    quiet: bool = False,
) -> str:
    """Render one result line, e.g. ``3d6 => 11 (3-18, 10.5 ave.)``."""
    if quiet:
        return str(roll.total)
    output = f"{expression} => {roll.total}"
    details = []
    if show_range:
        details.append(f"{roll.min}-{roll.max}")
    if show_average:
        details.append(f"{roll.average:.1f} ave.")
    if details:
        output += f" ({', '.join(details)})"
    return output


class DiceApp:
    """Wires config and a seeded DiceBag together for the command line."""

    def __init__(self, seed: int | None = None, config: dict[str, Any] | None = None):
        self.config = config if config is not None else load_config()
        max_dice = self.config.get("dice", {}).get("max_dice", DEFAULT_MAX_DICE)
        rng = simple_rng(seed) if seed is not None else new_simple_rng()
        self.dice_bag = DiceBag(rng, max_dice=max_dice or None)

    def run(
        self,
        expressions: list[str],
        show_average: bool = False,
        show_range: bool = False,
        quiet: bool = False,
    ) -> list[str]:
        """Evaluate every expression and return one output line each.

        Nothing is returned unless all expressions evaluate.
        """
        sanity_check(show_average, show_range, quiet)
        results: list[str] = []
        for exp in expressions:
            roll = self.dice_bag.eval(exp)
            results.append(format_result(exp, roll, show_average, show_range, quiet))
        logger.info("Evaluated %d expression(s)", len(results))
        return results
