import logging
import sys
from typing import Dict, Iterable

from csv_reader import read_transactions
from models import Transaction, ClientAccount, ProcessingResult, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Applies transactions one at a time, strictly in arrival order.
    Disputes only see transactions applied before them, so the order of the input matters.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to the ledger.

        Rejected transactions leave the ledger untouched and are reported through
        the result. Raises DuplicateTransactionId if a deposit or withdrawal reuses
        an id that is already logged.
        """
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        if result != ProcessingResult.SUCCESS:
            logger.debug(f"Rejected {transaction}: {result.value}")
        return result

    def process_records(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply every transaction in order and return final account states."""
        for transaction in transactions:
            self.apply(transaction)
        return self.get_all_accounts()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        accounts = self.process_records(read_transactions(filepath))

        # Print final processing report to stderr
        print(self._stats.summary(), file=sys.stderr)

        return accounts

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        return self._state.get_all_accounts()
