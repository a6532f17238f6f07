import logging
import random
from typing import Iterable

from dipgraph import config
from dipgraph.adjudicator.cycles import CycleResolver
from dipgraph.adjudicator.defs import Order, OrderType, HOLDABLE_TYPES
from dipgraph.adjudicator.engine import ResolutionEngine
from dipgraph.adjudicator.graph import DependencyGraph
from dipgraph.adjudicator.report import OrderResult, ResultReporter

logger = logging.getLogger(__name__)


def required_order_given(order: Order, orders_by_province: dict[str, Order]) -> bool:
    """
    Checks that the unit a support or convoy is for was ordered to do the supported or convoyed thing

    :param order: Support or convoy order to check
    :param orders_by_province: every order of the turn, by the location of its unit
    :return: True if the corresponding order exists
    """
    counterpart = orders_by_province.get(order.source)
    if counterpart is None:
        return False

    if order.is_support_hold:
        # illegal moves and moves can't be support held
        return counterpart.type in HOLDABLE_TYPES
    return counterpart.type == OrderType.MOVE and counterpart.target == order.target


class MovesAdjudicator:
    # Orders are resolved leaves first over the graph of which order depends on which, breaking cycles as they stall
    def __init__(self, orders: Iterable[Order], rng: random.Random | None = None):
        self.orders: list[Order] = list(orders)
        self.rng = rng

        self._annotate_orders()

        self.graph = DependencyGraph(self.orders)
        self.engine = ResolutionEngine(self.graph, rng)
        self.cycles = CycleResolver(self.graph, self.engine)

    def _annotate_orders(self):
        # run supports after everything else since illegal moves should be treated as holds
        for order in self.orders:
            if not order.legal:
                logger.debug(f"Order {order} is illegal")
                order.annotate(OrderType.ILLEGAL_ORDER)

        orders_by_province = {order.location: order for order in self.orders}
        for order in self.orders:
            if order.type not in (OrderType.SUPPORT, OrderType.CONVOY):
                continue
            if not required_order_given(order, orders_by_province):
                logger.debug(f"Order {order} is void, its unit in {order.source} did not make the corresponding order")
                order.annotate(OrderType.REQUIRED_SUPPORT_NOT_GIVEN)

    def run(self) -> list[OrderResult]:
        while len(self.graph) > 0:
            self.engine.drain()
            if len(self.graph) > 0:
                self.cycles.break_stall()

        self.engine.apply_dislodgements()
        return ResultReporter(self.orders).report()


def adjudicate(orders: Iterable[Order], rng: random.Random | None = None) -> list[OrderResult]:
    if rng is None and config.RANDOMIZE_ITERATION:
        rng = random.Random(config.RANDOM_SEED)

    adjudicator = MovesAdjudicator(orders, rng=rng)
    results = adjudicator.run()
    logger.info(f"Adjudicated {len(results)} orders")
    return results
