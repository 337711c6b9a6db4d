from decimal import Decimal
from typing import Dict, Optional

from models import LoggedTransaction, TransactionState


class DuplicateTransactionId(ValueError):
    """Raised when a deposit or withdrawal reuses an already logged transaction id."""

    def __init__(self, transaction_id: int):
        super().__init__(f"transaction id {transaction_id} already logged")
        self.transaction_id = transaction_id


class TransactionLog:
    """
    Append-only record of every applied deposit and withdrawal.
    Entries are never removed so later disputes can find the original amount and owner.
    """

    def __init__(self):
        self._transactions: Dict[int, LoggedTransaction] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)

    def record(self, transaction_id: int, client_id: int, amount: Decimal) -> LoggedTransaction:
        """Log a new transaction in the NORMAL state."""
        if transaction_id in self._transactions:
            raise DuplicateTransactionId(transaction_id)
        entry = LoggedTransaction(client_id=client_id, amount=amount)
        self._transactions[transaction_id] = entry
        return entry

    def lookup(self, transaction_id: int) -> Optional[LoggedTransaction]:
        return self._transactions.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> None:
        self._transactions[transaction_id].state = TransactionState.DISPUTED

    def mark_resolved(self, transaction_id: int) -> None:
        """Clear the dispute, the transaction can be disputed again."""
        self._transactions[transaction_id].state = TransactionState.NORMAL

    def mark_charged_back(self, transaction_id: int) -> None:
        """Terminal: the entry stays disputed and can never be disputed again."""
        self._transactions[transaction_id].state = TransactionState.CHARGED_BACK
