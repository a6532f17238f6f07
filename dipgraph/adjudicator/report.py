from enum import Enum
from typing import Iterable, NamedTuple

from dipgraph.adjudicator.defs import Order, OrderType, Resolution, ResolutionInvariantError


class Classification(Enum):
    SUCCESS = "succeeds"
    BOUNCED = "bounced"
    DISLODGED = "dislodged"
    SUPPORT_CUT = "support cut"


class OrderResult(NamedTuple):
    order: Order
    classification: Classification
    resolution: Resolution
    strength: int
    annotation: OrderType | None

    @property
    def location(self) -> str:
        return self.order.location

    def __str__(self):
        text = f"{self.order} [{self.classification.value}, strength {self.strength}]"
        if self.annotation is not None and self.annotation != OrderType.SUPPORT_CUT:
            text += f" ({self.annotation.name.lower().replace('_', ' ')})"
        return text


def classify(order: Order) -> Classification:
    if order.dislodged:
        return Classification.DISLODGED
    if order.annotation == OrderType.SUPPORT_CUT:
        return Classification.SUPPORT_CUT
    if order.resolution == Resolution.SUCCEEDS:
        return Classification.SUCCESS
    return Classification.BOUNCED


class ResultReporter:
    """Reads the final state of resolved orders. Reporting never changes an order, so it can be repeated freely."""

    def __init__(self, orders: Iterable[Order]):
        self.orders: list[Order] = list(orders)

    def report(self) -> list[OrderResult]:
        unresolved = [order for order in self.orders if not order.is_resolved]
        if unresolved:
            raise ResolutionInvariantError(f"Cannot report on unresolved orders: {[str(o) for o in unresolved]}")

        return [
            OrderResult(order, classify(order), order.resolution, order.strength, order.annotation)
            for order in self.orders
        ]

    def by_location(self) -> dict[str, OrderResult]:
        return {result.location: result for result in self.report()}


def format_results(results: Iterable[OrderResult]) -> str:
    return "\n".join(str(result) for result in sorted(results, key=lambda result: result.location))
