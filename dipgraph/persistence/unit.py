from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dipgraph.persistence import player
    from dipgraph.persistence import province


class UnitType(Enum):
    ARMY = "A"
    FLEET = "F"


class Unit:
    def __init__(
        self,
        unit_type: UnitType,
        owner: player.Player | None,
        current_province: province.Province,
    ):
        self.unit_type: UnitType = unit_type
        self.player: player.Player | None = owner
        self.province: province.Province = current_province

    def __str__(self):
        return f"{self.unit_type.value} {self.province}"

    def __repr__(self):
        return f"Unit {self}"

    def can_convoy(self) -> bool:
        return self.unit_type == UnitType.FLEET

    def can_be_convoyed(self) -> bool:
        return self.unit_type == UnitType.ARMY
