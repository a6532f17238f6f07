import argparse
from dotenv.main import load_dotenv
import logging
import sys

# DIPGRAPH_CONFIG may come from .env, so this has to happen before config is first imported
load_dotenv()

# Importing config for the first time initialises it.
import dipgraph.config as config
from dipgraph.config import ConfigException
from dipgraph.adjudicator.adjudicator import adjudicate
from dipgraph.adjudicator.defs import AdjudicationError
from dipgraph.adjudicator.report import format_results
from dipgraph.parse_order import parse_orders

match config.LOGGING_LEVEL:
    case "CRITICAL":
        log_level = logging.CRITICAL
    case "ERROR":
        log_level = logging.ERROR
    case "WARN" | "WARNING":
        log_level = logging.WARNING
    case "INFO":
        log_level = logging.INFO
    case "DEBUG":
        log_level = logging.DEBUG
    case _:
        raise ConfigException("logging.log_level is set to an invalid value")


logging.basicConfig(
    format="%(asctime)-15s | %(levelname)-7s: | %(filename)-16s (line %(lineno)-4d) | %(message)s",
    level=log_level,
)

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Adjudicate a Diplomacy movement phase")
    parser.add_argument("orders", help="file with one order per line")
    args = parser.parse_args()

    for error in config.toml_errors:
        logger.warning(f"Config value {error} has the wrong type, using the default")

    with open(args.orders, "r") as f:
        text = f.read()

    orders, errors = parse_orders(text)
    if errors:
        print("\n".join(errors))
        return 1

    try:
        results = adjudicate(orders)
    except AdjudicationError as e:
        logger.error(f"Could not adjudicate {args.orders}: {e}")
        return 2

    print(format_results(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
