import logging
from typing import Iterable, Iterator

import networkx as nx

from dipgraph.adjudicator.defs import Order, OrderConstructionError, OrderType

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Directed "depends on" graph over one turn's orders.

    Nodes are the positions of the orders in ``self.orders``, so node ids are stable for the lifetime of the
    adjudication even as resolved orders are removed from the graph. An edge X -> Y means X cannot be resolved before
    Y is. The graph is built once and only ever shrinks.
    """

    def __init__(self, orders: Iterable[Order]):
        self.orders: list[Order] = list(orders)
        self.graph = nx.DiGraph()

        self.orders_by_province: dict[str, Order] = {}
        self._node_of: dict[int, int] = {}
        for node, order in enumerate(self.orders):
            if order.location in self.orders_by_province:
                raise OrderConstructionError(f"More than one order was given for the unit in {order.location}")
            self.orders_by_province[order.location] = order
            self._node_of[id(order)] = node
            self.graph.add_node(node)

        self.moves_by_destination: dict[str, list[Order]] = {}
        self.convoys_by_route: dict[tuple[str, str], list[Order]] = {}
        for order in self.orders:
            if order.type == OrderType.MOVE:
                self.moves_by_destination.setdefault(order.target, []).append(order)
            elif order.type == OrderType.CONVOY:
                self.convoys_by_route.setdefault((order.source, order.target), []).append(order)

        self._add_dependencies()
        logger.debug(f"Built dependency graph with {len(self.graph)} orders and {self.graph.number_of_edges()} edges")

    def _add_dependencies(self):
        # All dependencies between orders are as follows:
        # 1. A holding (including supporting and convoying) unit depends on every unit moving into its province, which
        #    may dislodge it or cut its support, and on every unit supporting it to hold.
        # 2. A unit with an illegal order only depends on units moving into its province.
        # 3. A moving unit depends on every unit supporting its move,
        # 4. on any unit already at its destination (even if that unit is moving out),
        # 5. on any unit also moving to its destination,
        # 6. on any unit moving from its destination to its origin (swapping),
        # 7. and on every unit convoying it. This is where convoy paradoxes come from.
        for current_order in self.orders:
            current_node = self.node(current_order)
            for check_order in self.orders:
                if check_order is current_order:
                    continue
                if self._depends_on(current_order, check_order):
                    self.graph.add_edge(current_node, self.node(check_order))

    @staticmethod
    def _depends_on(current_order: Order, check_order: Order) -> bool:
        match current_order.type:
            case OrderType.MOVE:
                return (
                    check_order.is_support_moving(current_order.source, current_order.target)
                    or check_order.location == current_order.target
                    or check_order.is_moving_into(current_order.target)
                    or (check_order.location == current_order.target
                        and check_order.is_moving_into(current_order.source))
                    or check_order.is_convoying(current_order.source, current_order.target)
                )
            case OrderType.ILLEGAL_ORDER:
                return check_order.is_moving_into(current_order.location)
            case _:
                return (
                    check_order.is_moving_into(current_order.location)
                    or check_order.is_support_holding(current_order.location)
                )

    def __len__(self) -> int:
        return len(self.graph)

    def __contains__(self, order: Order) -> bool:
        return self.node(order) in self.graph

    def __iter__(self) -> Iterator[Order]:
        for node in sorted(self.graph.nodes):
            yield self.orders[node]

    def node(self, order: Order) -> int:
        return self._node_of[id(order)]

    def dependencies(self, order: Order) -> list[Order]:
        return [self.orders[node] for node in sorted(self.graph.successors(self.node(order)))]

    def dependents(self, order: Order) -> list[Order]:
        return [self.orders[node] for node in sorted(self.graph.predecessors(self.node(order)))]

    def out_degree(self, order: Order) -> int:
        return self.graph.out_degree(self.node(order))

    def depends_on(self, order: Order, other: Order) -> bool:
        return self.graph.has_edge(self.node(order), self.node(other))

    def drop_dependency(self, order: Order, other: Order):
        self.graph.remove_edge(self.node(order), self.node(other))

    def remove(self, order: Order):
        self.graph.remove_node(self.node(order))

    def ready(self) -> list[Order]:
        """Orders in the graph with no unresolved dependencies, in node order."""
        return [self.orders[node] for node in sorted(self.graph.nodes) if self.graph.out_degree(node) == 0]

    def occupant(self, province: str) -> Order | None:
        return self.orders_by_province.get(province)

    def moves_into(self, province: str) -> list[Order]:
        return self.moves_by_destination.get(province, [])

    def convoys_for(self, order: Order) -> list[Order]:
        if order.type != OrderType.MOVE:
            return []
        return self.convoys_by_route.get((order.source, order.target), [])

    def is_convoyed(self, order: Order) -> bool:
        return len(self.convoys_for(order)) > 0

    def pending_supports(self, order: Order) -> list[Order]:
        """Supports for this order that have not been resolved yet."""
        return [dependency for dependency in self.dependencies(order) if dependency.supports(order)]

    def sink_components(self) -> list[list[Order]]:
        """
        Strongly connected components that depend on nothing outside themselves, smallest node first.

        Single orders without a self loop are not cycles and are never returned; a stalled graph always has at least one
        sink component of two or more orders.
        """
        condensation = nx.condensation(self.graph)
        components = []
        for component in condensation.nodes:
            if condensation.out_degree(component) != 0:
                continue
            members = sorted(condensation.nodes[component]["members"])
            if len(members) < 2:
                continue
            components.append([self.orders[node] for node in members])
        components.sort(key=lambda members: self.node(members[0]))
        return components


def create_order_dependency_graph(orders: Iterable[Order]) -> DependencyGraph:
    return DependencyGraph(orders)
