import logging
from importlib import resources

from lark import Lark, Transformer, UnexpectedEOF, UnexpectedCharacters
from lark.exceptions import VisitError

from dipgraph.adjudicator.defs import Order, OrderType

logger = logging.getLogger(__name__)


class TreeToOrder(Transformer):
    def province(self, s) -> str:
        return str(s[0])

    def owner(self, s) -> str:
        return str(s[0])

    # format for all of these is (type, source, target)
    def hold_order(self, s):
        return OrderType.HOLD, None, None

    def move_order(self, s):
        return OrderType.MOVE, None, s[-1]

    def support_hold_order(self, s):
        return OrderType.SUPPORT, s[-1], s[-1]

    def support_move_order(self, s):
        return OrderType.SUPPORT, s[-2], s[-1]

    def convoy_order(self, s):
        return OrderType.CONVOY, s[-2], s[-1]

    def order(self, s) -> Order:
        order_type, source, target = s[-1]
        location = s[-2]
        # children are [owner, province, action] when an owner was given
        owner = s[0] if len(s) == 3 else None
        return Order(order_type, location, source=source, target=target, owner=owner)


generator = TreeToOrder()

ebnf = resources.files("dipgraph").joinpath("orders.ebnf").read_text()

movement_parser = Lark(ebnf, start="order", parser="earley")


def parse_order(line: str) -> Order:
    """Parses a single order, raising lark's errors for anything that is not one"""
    cmd = movement_parser.parse(line.strip() + " ")
    return generator.transform(cmd)


def parse_orders(text: str) -> tuple[list[Order], list[str]]:
    """
    Parses one order per line.

    Blank lines and anything after a ``#`` are ignored. A line that can't be parsed never stops the rest of the text
    from being parsed, it is reported in the returned error list instead.

    :param text: Orders, one per line
    :return: The parsed orders in the order they were given, and an error message per bad line
    """
    orders = []
    errors = []
    for line in text.splitlines():
        order = line.split("#", 1)[0].strip()
        if not order:
            continue
        try:
            logger.debug(order)
            orders.append(parse_order(order))
        except VisitError as e:
            errors.append(f"`{order}`: {str(e).splitlines()[-1]}")
        except UnexpectedEOF:
            errors.append(f"`{order}`: Please fix this order and try again")
        except UnexpectedCharacters:
            errors.append(f"`{order}`: Please fix this order and try again")
    return orders, errors
