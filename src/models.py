from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from enum import Enum
from typing import Optional

CURRENCY_PRECISION = 4
CURRENCY_QUANTUM = Decimal(1).scaleb(-CURRENCY_PRECISION)


def truncate_amount(amount: Decimal) -> Decimal:
    """Truncate (never round) to CURRENCY_PRECISION fractional digits."""
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_DOWN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_AMOUNT = "invalid_amount"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_STATE = "invalid_state"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.amount is not None:
            self.amount = truncate_amount(self.amount)

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LoggedTransaction:
    """
    A deposit or withdrawal that was applied to an account.
    Amount is signed: positive for deposits, negative for withdrawals.
    """

    client_id: int
    amount: Decimal
    state: TransactionState = TransactionState.NORMAL

    @property
    def disputed(self) -> bool:
        # Charged back entries stay disputed forever
        return self.state != TransactionState.NORMAL

    @property
    def charged_back(self) -> bool:
        return self.state == TransactionState.CHARGED_BACK


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counts how each applied record was classified."""

    def __init__(self):
        self._counts: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        self._counts[result] += 1

    def count(self, result: ProcessingResult) -> int:
        return self._counts[result]

    @property
    def processed(self) -> int:
        return self._counts[ProcessingResult.SUCCESS]

    @property
    def rejected(self) -> int:
        return sum(self._counts.values()) - self.processed

    def summary(self) -> str:
        parts = [f"Processed: {self.processed}", f"Rejected: {self.rejected}"]
        for result in ProcessingResult:
            if result != ProcessingResult.SUCCESS and self._counts[result]:
                parts.append(f"{result.value}: {self._counts[result]}")
        return ", ".join(parts)
