from __future__ import annotations

import logging
from typing import Iterable

from dipgraph.persistence.province import Province
from dipgraph.persistence.unit import UnitType

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, province_1: str, province_2: str, allowed_unit_types: Iterable[UnitType]):
        if province_1 == province_2:
            raise ValueError(f"{province_1} cannot be connected to itself")

        # connections are undirected, store the pair in a fixed order
        self.provinces: tuple[str, str] = tuple(sorted((province_1, province_2)))
        self.allowed_unit_types: set[UnitType] = set(allowed_unit_types)

    def __repr__(self):
        types = "".join(sorted(unit_type.value for unit_type in self.allowed_unit_types))
        return f"Connection {self.provinces[0]}-{self.provinces[1]} ({types})"

    def allowed(self, unit_type: UnitType) -> bool:
        return unit_type in self.allowed_unit_types


class Map:
    def __init__(self, provinces: Iterable[Province], connections: Iterable[Connection]):
        self.provinces: dict[str, Province] = {}
        for province in provinces:
            if province.name in self.provinces:
                raise ValueError(f"Province {province.name} is defined twice")
            self.provinces[province.name] = province

        self.connections: list[Connection] = list(connections)
        self._adjacency: dict[str, dict[str, Connection]] = {name: {} for name in self.provinces}
        for connection in self.connections:
            first, second = connection.provinces
            if first not in self.provinces or second not in self.provinces:
                raise ValueError(f"{connection} refers to a province that is not on the map")
            self._adjacency[first][second] = connection
            self._adjacency[second][first] = connection

        logger.debug(f"Loaded map with {len(self.provinces)} provinces and {len(self.connections)} connections")

    def get_province(self, name: str) -> Province:
        province = self.provinces.get(name)
        if province is None:
            raise ValueError(f"Province {name} not found")
        return province

    def connection(self, province_1: str, province_2: str) -> Connection | None:
        return self._adjacency.get(province_1, {}).get(province_2)

    def is_connected(self, province_1: str, province_2: str, unit_type: UnitType | None = None) -> bool:
        connection = self.connection(province_1, province_2)
        if connection is None:
            return False
        return unit_type is None or connection.allowed(unit_type)

    def allowed(self, province_1: str, province_2: str, unit_type: UnitType) -> bool:
        return self.is_connected(province_1, province_2, unit_type)

    def adjacent(self, name: str, unit_type: UnitType | None = None) -> set[str]:
        return {
            other
            for other, connection in self._adjacency.get(name, {}).items()
            if unit_type is None or connection.allowed(unit_type)
        }
