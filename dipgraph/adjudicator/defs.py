from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class AdjudicationError(Exception):
    """Base class for everything that makes a turn's adjudication impossible."""


class OrderConstructionError(AdjudicationError, ValueError):
    pass


class ResolutionInvariantError(AdjudicationError, RuntimeError):
    pass


class UnrecognizedCycleError(AdjudicationError, RuntimeError):
    def __init__(self, message: str, orders: list[Order]):
        super().__init__(message)
        self.orders = orders


class Resolution(Enum):
    SUCCEEDS = 0
    FAILS = 1


class OrderType(Enum):
    # These are legal orders for players to give
    HOLD = 0
    MOVE = 1
    SUPPORT = 2
    CONVOY = 3

    # Annotations given to orders during resolution, never by players
    ILLEGAL_ORDER = 4
    REQUIRED_SUPPORT_NOT_GIVEN = 5
    SUPPORT_CUT = 6

    @property
    def is_player_order(self) -> bool:
        return self in (OrderType.HOLD, OrderType.MOVE, OrderType.SUPPORT, OrderType.CONVOY)


# Orders that stay in place and can therefore be supported to hold
HOLDABLE_TYPES = (
    OrderType.HOLD,
    OrderType.SUPPORT,
    OrderType.CONVOY,
    OrderType.REQUIRED_SUPPORT_NOT_GIVEN,
    OrderType.SUPPORT_CUT,
)


class Unresolved:
    def __init__(self):
        self.strength: int = 1
        self.annotation: OrderType | None = None

    def __repr__(self):
        return f"Unresolved(strength={self.strength}, annotation={self.annotation})"


class Resolved(NamedTuple):
    resolution: Resolution
    strength: int
    annotation: OrderType | None = None
    dislodged: bool = False


class Order:
    """
    One unit's instruction for the turn.

    The identity fields (type, location, source, target, owner) are fixed at construction. Everything that changes
    during adjudication lives in ``state``: an ``Unresolved`` order can still gain strength and annotations, a
    ``Resolved`` one is frozen apart from being dislodged afterwards.
    """

    def __init__(
        self,
        order_type: OrderType,
        location: str,
        source: str | None = None,
        target: str | None = None,
        owner: str | None = None,
        legal: bool = True,
    ):
        if not isinstance(order_type, OrderType) or not order_type.is_player_order:
            raise OrderConstructionError(f"{order_type} cannot be given as an order")
        if not location:
            raise OrderConstructionError("An order needs the location of its unit")

        if order_type == OrderType.HOLD:
            if (source is not None and source != location) or (target is not None and target != location):
                raise OrderConstructionError(f"Hold at {location} cannot name another province")
            source = target = location
        elif order_type == OrderType.MOVE:
            if source is not None and source != location:
                raise OrderConstructionError(f"Move from {location} must start at {location}, not {source}")
            if target is None:
                raise OrderConstructionError(f"Move from {location} has no destination")
            if target == location:
                raise OrderConstructionError(f"{location} cannot move into itself")
            source = location
        else:
            if source is None or target is None:
                raise OrderConstructionError(f"{order_type.name.title()} at {location} needs a source and a target")
            if source == location:
                raise OrderConstructionError(f"{location} cannot {order_type.name.lower()} itself")
            if order_type == OrderType.SUPPORT and target == location:
                raise OrderConstructionError(f"{location} cannot support a move into its own province")
            if order_type == OrderType.CONVOY:
                if source == target:
                    raise OrderConstructionError(f"Convoy at {location} must carry a unit somewhere else")
                if target == location:
                    raise OrderConstructionError(f"{location} cannot convoy a unit into itself")

        self._order_type = order_type
        self._location = location
        self._source = source
        self._target = target
        self._owner = owner
        self._legal = legal

        self.state: Unresolved | Resolved = Unresolved()

    @classmethod
    def hold(cls, location: str, owner: str | None = None) -> Order:
        return cls(OrderType.HOLD, location, owner=owner)

    @classmethod
    def move(cls, location: str, target: str, owner: str | None = None, legal: bool = True) -> Order:
        return cls(OrderType.MOVE, location, target=target, owner=owner, legal=legal)

    @classmethod
    def support_hold(cls, location: str, held: str, owner: str | None = None) -> Order:
        return cls(OrderType.SUPPORT, location, source=held, target=held, owner=owner)

    @classmethod
    def support_move(cls, location: str, source: str, target: str, owner: str | None = None) -> Order:
        return cls(OrderType.SUPPORT, location, source=source, target=target, owner=owner)

    @classmethod
    def convoy(cls, location: str, source: str, target: str, owner: str | None = None) -> Order:
        return cls(OrderType.CONVOY, location, source=source, target=target, owner=owner)

    @property
    def order_type(self) -> OrderType:
        return self._order_type

    @property
    def location(self) -> str:
        return self._location

    @property
    def source(self) -> str:
        return self._source

    @property
    def target(self) -> str:
        return self._target

    @property
    def owner(self) -> str | None:
        return self._owner

    @property
    def legal(self) -> bool:
        return self._legal

    @property
    def annotation(self) -> OrderType | None:
        return self.state.annotation

    @property
    def type(self) -> OrderType:
        # the order the unit is actually treated as executing
        if self.state.annotation is not None:
            return self.state.annotation
        return self._order_type

    @property
    def strength(self) -> int:
        return self.state.strength

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.state, Resolved)

    @property
    def resolution(self) -> Resolution | None:
        if isinstance(self.state, Resolved):
            return self.state.resolution
        return None

    @property
    def dislodged(self) -> bool:
        return isinstance(self.state, Resolved) and self.state.dislodged

    @property
    def is_stationary(self) -> bool:
        return self.type != OrderType.MOVE

    @property
    def is_support_hold(self) -> bool:
        return self._order_type == OrderType.SUPPORT and self._source == self._target

    def is_moving_into(self, destination: str) -> bool:
        return self.type == OrderType.MOVE and self._target == destination

    def is_support_holding(self, supporting: str) -> bool:
        # supporting a hold means both the from and the to are the held province
        return self.type == OrderType.SUPPORT and self._source == supporting and self._target == supporting

    def is_support_moving(self, source: str, target: str) -> bool:
        return self.type == OrderType.SUPPORT and self._source == source and self._target == target and source != target

    def is_convoying(self, source: str, target: str) -> bool:
        return self.type == OrderType.CONVOY and self._source == source and self._target == target

    def supports(self, other: Order) -> bool:
        if other.type == OrderType.MOVE:
            return self.is_support_moving(other.location, other.target)
        if other.type in HOLDABLE_TYPES:
            return self.is_support_holding(other.location)
        return False

    def same_owner(self, other: Order) -> bool:
        return self._owner is not None and self._owner == other.owner

    def annotate(self, annotation: OrderType):
        if annotation.is_player_order:
            raise ValueError(f"{annotation} is not an annotation")
        if isinstance(self.state, Resolved):
            raise ResolutionInvariantError(f"Cannot annotate {self} after it was resolved")
        self.state.annotation = annotation

    def increase_strength(self):
        if isinstance(self.state, Resolved):
            raise ResolutionInvariantError(f"Strength of {self} changed after it was resolved")
        self.state.strength += 1

    def resolve(self, resolution: Resolution, annotation: OrderType | None = None):
        if isinstance(self.state, Resolved):
            raise ResolutionInvariantError(f"{self} was resolved twice")
        if annotation is None:
            annotation = self.state.annotation
        self.state = Resolved(resolution, self.state.strength, annotation)

    def dislodge(self):
        if not isinstance(self.state, Resolved):
            raise ResolutionInvariantError(f"Cannot dislodge {self} before it is resolved")
        self.state = self.state._replace(dislodged=True)

    def describe(self) -> str:
        match self._order_type:
            case OrderType.HOLD:
                text = f"{self._location} H"
            case OrderType.MOVE:
                text = f"{self._location} - {self._target}"
            case OrderType.SUPPORT if self.is_support_hold:
                text = f"{self._location} S {self._source}"
            case OrderType.SUPPORT:
                text = f"{self._location} S {self._source} - {self._target}"
            case _:
                text = f"{self._location} C {self._source} - {self._target}"
        if self._owner is not None:
            text = f"{self._owner}: {text}"
        return text

    def __str__(self):
        return self.describe()

    def __repr__(self):
        return f"Order({self.describe()!r}, {self.state!r})"
