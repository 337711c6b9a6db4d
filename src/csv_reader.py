import csv
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Plain ASCII decimal notation only, no exponents, underscores or non-ASCII digits
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)", re.ASCII)


class TransactionParseError(ValueError):
    """A row could not be turned into a Transaction. Fatal for the whole run."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily yield transactions from a CSV file in file order."""
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f, skipinitialspace=True)
        try:
            if reader.fieldnames is None:
                logger.warning(f"{filepath}: empty input")
                return
            for row in reader:
                transaction = parse_row(row)
                yield transaction
        except TransactionParseError as e:
            raise TransactionParseError(str(e), line=reader.line_num) from e
        except (UnicodeDecodeError, csv.Error) as e:
            # Decoding is buffered, so the line is where reading stopped, not always the bad byte
            raise TransactionParseError(f"unreadable input: {e}", line=reader.line_num or None) from e


def parse_row(row: Dict[str, Optional[str]]) -> Transaction:
    """Parse a header-keyed CSV row into a Transaction."""
    # Short rows fill missing columns with None, long rows put extras under the None key
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except KeyError:
        raise TransactionParseError("missing 'type' column")
    except ValueError:
        raise TransactionParseError(f"unknown transaction type {normalized['type']!r}")

    client_id = _parse_id(normalized, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(normalized, "tx", MAX_TRANSACTION_ID)
    amount = _parse_amount(normalized.get("amount", ""))

    if transaction_type.carries_amount and amount is None:
        raise TransactionParseError(f"{transaction_type.value} tx {transaction_id} has no amount")
    if not transaction_type.carries_amount and amount is not None:
        raise TransactionParseError(f"{transaction_type.value} tx {transaction_id} must not have an amount")

    try:
        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except InvalidOperation:
        raise TransactionParseError(f"amount {amount} cannot be represented with 4 decimal places")


def _parse_id(normalized: Dict[str, str], column: str, maximum: int) -> int:
    if column not in normalized:
        raise TransactionParseError(f"missing {column!r} column")
    raw = normalized[column]
    # int() would also take "1_0", "+1" and non-ASCII digits
    if not (raw.isascii() and raw.isdigit()):
        raise TransactionParseError(f"{column} {raw!r} is not an unsigned integer")
    value = int(raw)
    if value > maximum:
        raise TransactionParseError(f"{column} {value} out of range 0..{maximum}")
    return value


def _parse_amount(raw: str) -> Optional[Decimal]:
    if not raw:
        return None
    if not AMOUNT_PATTERN.fullmatch(raw):
        raise TransactionParseError(f"amount {raw!r} is not a decimal")
    return Decimal(raw)
