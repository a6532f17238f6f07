import logging
from typing import Iterable

from dipgraph.adjudicator.defs import Order, OrderType, Resolution
from dipgraph.adjudicator.report import Classification, OrderResult
from dipgraph.persistence.map import Map
from dipgraph.persistence.player import Player
from dipgraph.persistence.unit import Unit, UnitType

logger = logging.getLogger(__name__)


class Board:
    def __init__(self, players: set[Player], board_map: Map):
        self.players: set[Player] = players
        self.map: Map = board_map
        self.units: set[Unit] = set()

        # store as lower case for user input purposes
        self.name_to_player: dict[str, Player] = {player.name.lower(): player for player in self.players}

    def get_player(self, name: str) -> Player | None:
        if name.lower() == "none":
            return None
        if name.lower() not in self.name_to_player:
            raise ValueError(f"Player {name} not found")
        return self.name_to_player[name.lower()]

    def create_unit(self, unit_type: UnitType, player: Player | None, province_name: str) -> Unit:
        province = self.map.get_province(province_name)
        if province.unit is not None:
            raise ValueError(f"There is already a unit in {province_name}")

        unit = Unit(unit_type, player, province)
        province.unit = unit
        if player is not None:
            player.units.add(unit)
        self.units.add(unit)
        return unit

    def unit_at(self, province_name: str) -> Unit:
        unit = self.map.get_province(province_name).unit
        if unit is None:
            raise ValueError(f"No unit in {province_name}")
        return unit

    def is_legal(self, order: Order) -> bool:
        """
        Whether the unit at the order's location can carry out the order on this map.

        Convoy routes are not traced, an army ordered between two provinces a convoy could connect is allowed to try.
        """
        province = self.map.provinces.get(order.location)
        if province is None or province.unit is None:
            return False
        unit = province.unit
        if order.owner is not None and (unit.player is None or unit.player.name != order.owner):
            return False
        for name in (order.source, order.target):
            if name is not None and name not in self.map.provinces:
                return False

        match order.order_type:
            case OrderType.HOLD:
                return True
            case OrderType.MOVE:
                if self.map.is_connected(order.location, order.target, unit.unit_type):
                    return True
                return (
                    unit.can_be_convoyed()
                    and province.type.can_convoy_out_of
                    and self.map.get_province(order.target).type.can_convoy_into
                )
            case OrderType.SUPPORT:
                return self.map.is_connected(order.location, order.target, unit.unit_type)
            case OrderType.CONVOY:
                return (
                    unit.can_convoy()
                    and province.type.can_convoy_through
                    and self.map.get_province(order.source).type.can_convoy_out_of
                    and self.map.get_province(order.target).type.can_convoy_into
                )
        return False

    def apply_results(self, results: Iterable[OrderResult]) -> list[Unit]:
        """
        Moves units according to an adjudicated turn and returns the dislodged units.

        Dislodged units are kept in their province's ``dislodged_unit`` until retreats.
        """
        results = list(results)
        moving: list[tuple[Unit, str]] = []
        for result in results:
            if result.order.type == OrderType.MOVE and result.resolution == Resolution.SUCCEEDS:
                moving.append((self.unit_at(result.order.location), result.order.target))

        dislodged: list[Unit] = []
        for result in results:
            if result.classification != Classification.DISLODGED:
                continue
            province = self.map.get_province(result.location)
            if province.unit is None:
                raise ValueError(f"No unit in {province} to dislodge")
            logger.debug(f"{province.unit} was dislodged")
            province.dislodged_unit = province.unit
            province.unit = None
            dislodged.append(province.dislodged_unit)

        # empty every origin first, units moving in a circle would otherwise overwrite each other
        for unit, _ in moving:
            unit.province.unit = None
        for unit, target in moving:
            province = self.map.get_province(target)
            province.unit = unit
            unit.province = province

        return dislodged
