import csv
import sys
import logging
from decimal import Decimal
from typing import Dict, List, Optional, TextIO

from csv_reader import TransactionParseError
from models import ClientAccount, CURRENCY_QUANTUM
from payments_engine import PaymentsEngine
from transaction_log import DuplicateTransactionId

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(CURRENCY_QUANTUM):f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (TransactionParseError, DuplicateTransactionId) as e:
        logger.error(f"Malformed input in {filepath}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


def run():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(main())


if __name__ == "__main__":
    run()
