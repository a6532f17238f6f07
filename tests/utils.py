import random
import unittest

from dipgraph.adjudicator.adjudicator import MovesAdjudicator
from dipgraph.adjudicator.defs import Order, OrderType, Resolution
from dipgraph.adjudicator.report import Classification, OrderResult
from dipgraph.persistence.board import Board
from dipgraph.persistence.map import Map
from dipgraph.persistence.player import Player
from dipgraph.persistence.province import Province, ProvinceType
from dipgraph.persistence.unit import UnitType


def _location(source: Order | str) -> str:
    return source if isinstance(source, str) else source.location


# Allows for specifying orders the way DATC writes them. Provinces are made up on the fly since adjudication never
# looks at the map, they only exist so results can be applied to a board at the end.
class OrderSetBuilder:
    def __init__(self):
        self.orders: list[Order] = []
        self._unit_types: dict[str, UnitType] = {}

        # an illegal order is one that is caught before adjudication and treated as a hold, a not given order is a
        # support or convoy which is missing the corresponding move
        # a failed order is one that is resolved by the adjudicator as failed, succeeded orders are similar
        self._listIllegal: list[str] = []
        self._listNotGiven: list[str] = []
        self._listFail: list[str] = []
        self._listSuccess: list[str] = []
        self._listDislodge: list[str] = []
        self._listNotDislodge: list[str] = []
        self._listSupportCut: list[str] = []
        self._strengths: dict[str, int] = {}

        self.france = "France"
        self.england = "England"
        self.germany = "Germany"
        self.italy = "Italy"
        self.austria = "Austria"
        self.russia = "Russia"
        self.turkey = "Turkey"

    def _add(self, order: Order, unit_type: UnitType) -> Order:
        self.orders.append(order)
        self._unit_types[order.location] = unit_type
        return order

    def move(self, player: str | None, type: UnitType, place: str, to: str, legal: bool = True) -> Order:
        return self._add(Order.move(place, to, owner=player, legal=legal), type)

    def hold(self, player: str | None, type: UnitType, place: str) -> Order:
        return self._add(Order.hold(place, owner=player), type)

    # sources can be given as a province when the supported order is added later
    def convoy(self, player: str | None, place: str, source: Order | str, to: str) -> Order:
        return self._add(Order.convoy(place, _location(source), to, owner=player), UnitType.FLEET)

    def supportMove(self, player: str | None, type: UnitType, place: str, source: Order | str, to: str) -> Order:
        return self._add(Order.support_move(place, _location(source), to, owner=player), type)

    def supportHold(self, player: str | None, type: UnitType, place: str, source: Order | str) -> Order:
        return self._add(Order.support_hold(place, _location(source), owner=player), type)

    def assertIllegal(self, *orders: Order):
        self._listIllegal.extend(order.location for order in orders)

    def assertNotGiven(self, *orders: Order):
        self._listNotGiven.extend(order.location for order in orders)

    def assertFail(self, *orders: Order):
        self._listFail.extend(order.location for order in orders)

    def assertSuccess(self, *orders: Order):
        self._listSuccess.extend(order.location for order in orders)

    def assertDislodge(self, *orders: Order):
        self._listDislodge.extend(order.location for order in orders)

    def assertNotDislodge(self, *orders: Order):
        self._listNotDislodge.extend(order.location for order in orders)

    def assertSupportCut(self, *orders: Order):
        self._listSupportCut.extend(order.location for order in orders)

    def assertStrength(self, order: Order, strength: int):
        self._strengths[order.location] = strength

    def board(self) -> Board:
        provinces = set()
        for order in self.orders:
            provinces.update(name for name in (order.location, order.source, order.target) if name is not None)
        players = {order.owner for order in self.orders if order.owner is not None}

        board = Board(
            {Player(name) for name in players},
            Map([Province(name, ProvinceType.LAND) for name in sorted(provinces)], []),
        )
        for order in self.orders:
            player = board.get_player(order.owner) if order.owner is not None else None
            board.create_unit(self._unit_types[order.location], player, order.location)
        return board

    # used when testing the move phases of things
    def moves_adjudicate(self, test: unittest.TestCase, rng: random.Random | None = None) -> list[OrderResult]:
        board = self.board()
        adj = MovesAdjudicator(self.orders, rng=rng)
        results = adj.run()

        by_location = {result.location: result for result in results}

        for illegal in self._listIllegal:
            test.assertEqual(
                by_location[illegal].annotation, OrderType.ILLEGAL_ORDER, f"Order by {illegal} expected to be illegal"
            )
        for not_given in self._listNotGiven:
            test.assertEqual(
                by_location[not_given].annotation,
                OrderType.REQUIRED_SUPPORT_NOT_GIVEN,
                f"Order by {not_given} expected to be missing its counterpart",
            )

        for fail in self._listFail:
            test.assertEqual(by_location[fail].resolution, Resolution.FAILS, f"Order by {fail} expected to fail")
        for succeed in self._listSuccess:
            test.assertEqual(
                by_location[succeed].resolution, Resolution.SUCCEEDS, f"Order by {succeed} expected to succeed"
            )
        for cut in self._listSupportCut:
            test.assertEqual(
                by_location[cut].classification, Classification.SUPPORT_CUT, f"Support by {cut} expected to be cut"
            )
        for location, strength in self._strengths.items():
            test.assertEqual(by_location[location].strength, strength, f"Order by {location} has the wrong strength")

        board.apply_results(results)

        for dislodge in self._listDislodge:
            province = board.map.get_province(dislodge)
            test.assertTrue(province.dislodged_unit is not None, f"Expected dislodged unit in {dislodge}")
        for notdislodge in self._listNotDislodge:
            province = board.map.get_province(notdislodge)
            test.assertTrue(province.dislodged_unit is None, f"Expected no dislodged unit in {notdislodge}")

        return results
