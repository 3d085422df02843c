"""Typer CLI application."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from dicexp.cli.display import Display, configure_logging
from dicexp.errors import DiceSyntaxError, InvalidArgumentError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dicexp",
    help="Dice expression interpreter for RPG dice notation (e.g. \"2d8+5\")",
)


@app.command()
def roll(
    expressions: list[str] = typer.Argument(
        ..., help="One or more RPG dice notation expressions to evaluate (e.g. \"1d20+3\")",
    ),
    show_average: bool = typer.Option(False, "--average", "-a", help="Show the average result for each expression"),
    show_range: bool = typer.Option(False, "--range", "-r", help="Show the minimum and maximum possible result"),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Show only the roll results (incompatible with -a and -r)",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", "-s", min=0, max=2 ** 64 - 1, help="Seed for the random number generator",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Alternate config.toml",
    ),
) -> None:
    """Roll the given dice expressions."""
    from dicexp.app import DiceApp, load_config

    config = load_config(config_path)
    level = "DEBUG" if verbose else config.get("logging", {}).get("level", "WARNING")
    configure_logging(level)

    display = Display()
    dice_app = DiceApp(seed=seed, config=config)
    try:
        lines = dice_app.run(expressions, show_average=show_average, show_range=show_range, quiet=quiet)
    except InvalidArgumentError as exc:
        display.show_error(exc)
        raise typer.Exit(code=2)
    except DiceSyntaxError as exc:
        logger.debug("Failed to evaluate %s: %s", expressions, exc.kind.value)
        display.show_error(exc)
        raise typer.Exit(code=1)
    display.show_results(lines)


if __name__ == "__main__":
    app()
