from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dipgraph.persistence import unit


class Player:
    """A power in the game such as "France", not the person playing it."""

    def __init__(self, name: str):
        self.name: str = name
        self.units: set[unit.Unit] = set()

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Player {self.name}"
