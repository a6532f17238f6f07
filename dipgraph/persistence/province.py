from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dipgraph.persistence import player
    from dipgraph.persistence import unit


class ProvinceType(Enum):
    # standard Diplomacy only has these three, COAST meaning split coasts like Spain (nc) and not Brest
    LAND = 0
    COAST = 1
    WATER = 2

    # variant province types
    DEEP_SEA = 3

    @property
    def can_convoy_through(self) -> bool:
        return self in (ProvinceType.WATER, ProvinceType.DEEP_SEA)

    @property
    def can_convoy_into(self) -> bool:
        return self in (ProvinceType.LAND, ProvinceType.COAST)

    @property
    def can_convoy_out_of(self) -> bool:
        return self in (ProvinceType.LAND, ProvinceType.COAST)


class Province:
    def __init__(
        self,
        name: str,
        province_type: ProvinceType,
        sc_value: int | None = None,
        core_of: list[player.Player] | None = None,
        owner: player.Player | None = None,
    ):
        self.name: str = name
        self.type: ProvinceType = province_type
        # None if not a supply center, 1 for a supply center, 0 for a buildable coast that doesn't count as a center
        self.sc_value: int | None = sc_value
        # at most one player in standard, more in build anywhere variants
        self.core_of: list[player.Player] = core_of if core_of is not None else []
        self.owner: player.Player | None = owner
        self.unit: unit.Unit | None = None
        # only set between a movement phase and its retreats
        self.dislodged_unit: unit.Unit | None = None

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Province {self.name}"

    @property
    def has_supply_center(self) -> bool:
        return self.sc_value is not None
