import logging
import random

from dipgraph.adjudicator.defs import (
    Order,
    OrderType,
    Resolution,
    ResolutionInvariantError,
)
from dipgraph.adjudicator.graph import DependencyGraph

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """
    Drains a dependency graph by resolving orders that no longer depend on anything.

    Each resolved order is removed from the graph, which can free the orders depending on it. When a pass resolves
    nothing, the remaining graph is a set of cycles that the cycle resolver has to break before draining can continue.
    """

    def __init__(self, graph: DependencyGraph, rng: random.Random | None = None):
        self.graph = graph
        self.rng = rng
        # outcomes decided by the cycle resolver for orders that are still waiting on their supports
        self.verdicts: dict[int, Resolution] = {}

    def drain(self) -> int:
        resolved = 0
        while True:
            ready = self.graph.ready()
            if self.rng is not None:
                self.rng.shuffle(ready)

            progress = 0
            for order in ready:
                # resolving one order only ever removes edges, but check anyway so a pass is safe to reorder
                if order in self.graph and self.graph.out_degree(order) == 0:
                    self.resolve(order)
                    progress += 1

            resolved += progress
            if progress == 0:
                return resolved

    def resolve(self, order: Order):
        match order.type:
            case OrderType.SUPPORT:
                self._resolve_support(order)
            case OrderType.MOVE:
                order.resolve(self._adjudicate_move(order))
            case OrderType.CONVOY:
                order.resolve(self._adjudicate_convoy(order))
            case OrderType.HOLD:
                order.resolve(Resolution.SUCCEEDS)
            case _:
                # illegal orders and supports or convoys nobody asked for
                order.resolve(Resolution.FAILS)

        logger.debug(f"Resolved {order} as {order.resolution.name} with strength {order.strength}")
        self.graph.remove(order)

    def verdict(self, order: Order) -> Resolution | None:
        if order.is_resolved:
            return order.resolution
        return self.verdicts.get(self.graph.node(order))

    def set_verdict(self, order: Order, resolution: Resolution):
        self.verdicts[self.graph.node(order)] = resolution

    def _resolve_support(self, order: Order):
        if self.is_cut(order):
            order.resolve(Resolution.FAILS, OrderType.SUPPORT_CUT)
            return

        self.give_support(order)
        order.resolve(Resolution.SUCCEEDS)

    def resolve_together(self, supports: list[Order]):
        """
        Resolve supports that hold each other.

        None of them can go first, since each one's strength depends on another. Whether a support is cut does not
        depend on strength, so every cut is decided and every increment applied before any of them is frozen.
        """
        cut = [self.is_cut(support) for support in supports]
        for support, is_cut in zip(supports, cut):
            if not is_cut:
                self.give_support(support)

        for support, is_cut in zip(supports, cut):
            if is_cut:
                support.resolve(Resolution.FAILS, OrderType.SUPPORT_CUT)
            else:
                support.resolve(Resolution.SUCCEEDS)
            logger.debug(f"Resolved {support} as {support.resolution.name} with strength {support.strength}")
            self.graph.remove(support)

    def give_support(self, order: Order):
        # There should only ever be exactly one order depending on this one for its strength
        supported = [dependent for dependent in self.graph.dependents(order) if order.supports(dependent)]
        if len(supported) != 1:
            raise ResolutionInvariantError(
                f"Support {order} has {len(supported)} orders depending on it instead of exactly one"
            )
        supported[0].increase_strength()

    def is_cut(self, order: Order) -> bool:
        results = [self.cuts(attack, order) for attack in self.graph.moves_into(order.location)]
        if Resolution.SUCCEEDS in results:
            return True
        if None in results:
            raise ResolutionInvariantError(f"Support {order} was resolved before its attackers")
        return False

    def cuts(self, attack: Order, support: Order) -> Resolution | None:
        """
        Whether ``attack`` cuts ``support``; SUCCEEDS if it does, FAILS if it does not, None if that is not known yet.
        """
        if attack.same_owner(support):
            return Resolution.FAILS

        convoy = self.convoy_resolution(attack)
        if convoy is None:
            return None
        if convoy == Resolution.FAILS:
            return Resolution.FAILS

        if attack.location != support.target:
            return Resolution.SUCCEEDS

        # If we are being attacked by the place we are supporting against, our support only fails if they succeed
        return self.verdict(attack)

    def convoy_resolution(self, order: Order) -> Resolution | None:
        convoys = self.graph.convoys_for(order)
        if not convoys:
            return Resolution.SUCCEEDS

        verdicts = [self.verdict(convoy) for convoy in convoys]
        if Resolution.FAILS in verdicts:
            return Resolution.FAILS
        if None in verdicts:
            return None
        return Resolution.SUCCEEDS

    def is_live(self, order: Order) -> bool:
        """Whether a move still contests its destination, which a move whose convoy failed does not."""
        return order.type == OrderType.MOVE and self.convoy_resolution(order) != Resolution.FAILS

    def defence_strength(self, occupant: Order | None) -> int:
        if occupant is None:
            return 0
        if occupant.is_stationary:
            return occupant.strength
        if self.verdict(occupant) == Resolution.SUCCEEDS:
            return 0
        # supports for a move do not help it hold
        return 1

    def stays(self, occupant: Order | None) -> bool:
        return occupant is not None and (occupant.is_stationary or self.verdict(occupant) != Resolution.SUCCEEDS)

    def beats_rivals(self, order: Order) -> bool:
        for rival in self.graph.moves_into(order.target):
            if rival is order or not self.is_live(rival):
                continue
            if rival.strength >= order.strength:
                return False
        return True

    def _adjudicate_move(self, order: Order) -> Resolution:
        verdict = self.verdicts.get(self.graph.node(order))
        if verdict is not None:
            return verdict

        if self.convoy_resolution(order) != Resolution.SUCCEEDS:
            return Resolution.FAILS

        # X -> Z, Y -> Z scenario, every other move into Z has to be overcome
        if not self.beats_rivals(order):
            return Resolution.FAILS

        # X -> Y scenario, the unit at Y defends unless it moved away
        occupant = self.graph.occupant(order.target)
        if self.stays(occupant):
            if order.same_owner(occupant):
                return Resolution.FAILS
            if order.strength <= self.defence_strength(occupant):
                return Resolution.FAILS

        return Resolution.SUCCEEDS

    def _adjudicate_convoy(self, order: Order) -> Resolution:
        verdict = self.verdicts.get(self.graph.node(order))
        if verdict is not None:
            return verdict

        for attack in self.graph.moves_into(order.location):
            if self.verdict(attack) == Resolution.SUCCEEDS:
                return Resolution.FAILS
        return Resolution.SUCCEEDS

    def apply_dislodgements(self):
        if len(self.graph) != 0:
            raise ResolutionInvariantError("Cannot apply dislodgements until all orders are resolved")

        for order in self.graph.orders:
            if order.type != OrderType.MOVE or order.resolution != Resolution.SUCCEEDS:
                continue
            occupant = self.graph.occupant(order.target)
            if self.stays(occupant):
                logger.debug(f"{order} dislodges {occupant}")
                occupant.dislodge()
