"""Shared fixtures for the dicexp test suite."""
from __future__ import annotations

import pytest

from dicexp.mechanics.dice import DiceBag, simple_rng


class NoRolls:
    """Random source that fails the test if anything tries to roll."""

    def __init__(self) -> None:
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        raise AssertionError(f"unexpected roll in [{a}, {b}]")


@pytest.fixture
def dice_bag() -> DiceBag:
    return DiceBag(simple_rng(42))


@pytest.fixture
def no_rolls() -> NoRolls:
    return NoRolls()
