import logging

from dipgraph.adjudicator.defs import (
    Order,
    OrderType,
    Resolution,
    ResolutionInvariantError,
    UnrecognizedCycleError,
)
from dipgraph.adjudicator.engine import ResolutionEngine
from dipgraph.adjudicator.graph import DependencyGraph

logger = logging.getLogger(__name__)

# orders whose own outcome never depends on the units attacking them
_INDIFFERENT_TYPES = (
    OrderType.HOLD,
    OrderType.ILLEGAL_ORDER,
    OrderType.REQUIRED_SUPPORT_NOT_GIVEN,
    OrderType.SUPPORT_CUT,
)


class CycleResolver:
    """
    Breaks the cycles that stop the resolution engine from draining the graph.

    Breaking a stall never resolves a move or a convoy directly. It either removes dependencies that no longer matter
    (the information they stood for is already final) or records a verdict for the orders caught in a recognised cycle
    and then removes the dependencies the verdict made irrelevant. The engine does the actual resolving, so every order
    is still only resolved once its supports are.
    """

    def __init__(self, graph: DependencyGraph, engine: ResolutionEngine):
        self.graph = graph
        self.engine = engine

    def break_stall(self):
        if self.drop_settled_dependencies():
            return

        components = self.graph.sink_components()
        if not components:
            raise ResolutionInvariantError("The graph stalled without containing a cycle")

        component = components[0]
        for classify in (self._convoy_paradox, self._head_to_head, self._circular_movement, self._mutual_support):
            if classify(component):
                return

        logger.warning(f"Could not classify the cycle between these orders: {[str(order) for order in component]}")
        raise UnrecognizedCycleError(
            f"Cannot adjudicate the cycle between {', '.join(str(order) for order in component)}", component
        )

    def drop_settled_dependencies(self) -> int:
        dropped = 0
        for order in list(self.graph):
            for dependency in self.graph.dependencies(order):
                if self._is_settled(order, dependency):
                    logger.debug(f"{order} no longer waits on {dependency}")
                    self.graph.drop_dependency(order, dependency)
                    dropped += 1
        return dropped

    def _is_settled(self, order: Order, dependency: Order) -> bool:
        # strength has to be final before anything reads it, so supports are always waited for
        if dependency.supports(order):
            return False

        if self.engine.verdicts.get(self.graph.node(order)) is not None:
            return True

        if order.type == OrderType.MOVE:
            if dependency.is_convoying(order.source, order.target):
                return False
            if dependency.location == order.target:
                if dependency.is_stationary:
                    # a unit that stays only matters through its hold strength
                    return not self.graph.pending_supports(dependency)
                return self.engine.verdict(dependency) is not None
            if dependency.is_moving_into(order.target):
                # a rival only matters through its strength, and only if its convoy arrives
                return (
                    not self.graph.pending_supports(dependency)
                    and self.engine.convoy_resolution(dependency) is not None
                )
            return False

        if not dependency.is_moving_into(order.location):
            return False
        if order.type in _INDIFFERENT_TYPES:
            # beleaguered garrison: whoever attacks only decides whether we get dislodged, which is settled later
            return True
        if order.type == OrderType.SUPPORT:
            return self.engine.cuts(dependency, order) is not None
        if order.type == OrderType.CONVOY:
            return self.engine.verdict(dependency) is not None
        return False

    def _convoy_paradox(self, component: list[Order]) -> bool:
        # Szykman rule: a convoyed move whose convoy is part of the cycle fails, and so does the convoy
        paradoxical = [
            order
            for order in component
            if order.type == OrderType.MOVE
            and any(convoy in component for convoy in self.graph.convoys_for(order))
        ]
        if not paradoxical:
            return False

        logger.warning(f"I think there's a convoy paradox involving these orders: {[str(x) for x in component]}")
        for move in paradoxical:
            self.engine.set_verdict(move, Resolution.FAILS)
            for convoy in self.graph.convoys_for(move):
                if convoy in self.graph:
                    self.engine.set_verdict(convoy, Resolution.FAILS)
        self.drop_settled_dependencies()
        return True

    def _head_to_head(self, component: list[Order]) -> bool:
        if len(component) != 2:
            return False
        first, second = component
        if first.type != OrderType.MOVE or second.type != OrderType.MOVE:
            return False
        if first.target != second.location or second.target != first.location:
            return False
        if self.graph.is_convoyed(first) or self.graph.is_convoyed(second):
            return False

        logger.info(f"Head to head between {first} and {second}, both bounce")
        self.engine.set_verdict(first, Resolution.FAILS)
        self.engine.set_verdict(second, Resolution.FAILS)
        self.drop_settled_dependencies()
        return True

    def _circular_movement(self, component: list[Order]) -> bool:
        if any(order.type != OrderType.MOVE for order in component):
            return False
        locations = {order.location for order in component}
        targets = {order.target for order in component}
        if targets != locations or len(targets) != len(component):
            return False

        # Every move in the ring gets to assume the unit in front of it leaves. Any move that still cannot win its
        # destination under that assumption fails for certain, which opens the ring up into a chain.
        blocked = [
            order
            for order in component
            if self.engine.convoy_resolution(order) != Resolution.SUCCEEDS or not self.engine.beats_rivals(order)
        ]
        if not blocked:
            logger.info(f"Circular movement between {[str(order) for order in component]}, all moves succeed")
            for order in component:
                self.engine.set_verdict(order, Resolution.SUCCEEDS)
        else:
            logger.info(f"Circular movement broken by {[str(order) for order in blocked]}")
            for order in blocked:
                self.engine.set_verdict(order, Resolution.FAILS)
        self.drop_settled_dependencies()
        return True

    def _mutual_support(self, component: list[Order]) -> bool:
        if any(order.type != OrderType.SUPPORT for order in component):
            return False

        logger.info(f"Supports holding each other: {[str(order) for order in component]}")
        self.engine.resolve_together(component)
        return True
