import argparse
import logging
import os
import sys

from exceptions import PaymentsError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toy-payments",
        description="Replay a CSV of client transactions and print final account balances.",
    )
    parser.add_argument("input", nargs="?", help="Input CSV (type, client, tx, amount)")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging verbosity on stderr (default: ${LOG_LEVEL_ENV} or {DEFAULT_LOG_LEVEL})",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.input:
        print("no input file provided", file=sys.stderr)
        return 1

    engine = PaymentsEngine()
    try:
        engine.process_file(args.input)
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1
    except PaymentsError as e:
        logger.error(f"Aborting run: {e}")
        return 1

    engine.write_report(sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
