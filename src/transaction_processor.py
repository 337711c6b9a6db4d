import logging
from typing import Optional, Tuple

from models import Transaction, TransactionType, ClientAccount, LoggedTransaction, ProcessingResult, TransactionState
from state_manager import StateManager
from transaction_log import DuplicateTransactionId

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions against state.

    Every rejection is a no-op on the ledger, reported through the returned
    ProcessingResult. The only exception that escapes is DuplicateTransactionId,
    raised when a deposit or withdrawal reuses a logged transaction id.
    """

    def __init__(self, state: StateManager):
        self._state = state
        self._log = state.transaction_log

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the account
            ACCOUNT_LOCKED: Deposit or withdrawal on a charged back account
            INSUFFICIENT_FUNDS: Withdrawal larger than the available balance
            INVALID_AMOUNT: Deposit or withdrawal without a positive amount
            TRANSACTION_NOT_FOUND: Referenced transaction was never logged
            CLIENT_MISMATCH: Referenced transaction belongs to another client
            INVALID_STATE: Referenced transaction is not in a state this operation accepts
        """
        account = self._state.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)
            case _:
                raise ValueError(f"Unsupported transaction type: {transaction.transaction_type}")

    def _check_funding(self, account: ClientAccount, transaction: Transaction) -> Optional[ProcessingResult]:
        """Shared checks for deposits and withdrawals. None means the transaction may proceed."""
        name = transaction.transaction_type.value.capitalize()

        if transaction.amount is None or transaction.amount <= 0:
            logger.warning(f"{name} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        # Checked before any balance change, record() would only raise after the account was credited
        if transaction.transaction_id in self._log:
            raise DuplicateTransactionId(transaction.transaction_id)

        if account.locked:
            logger.info(f"{name} tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        return None

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejected = self._check_funding(account, transaction)
        if rejected is not None:
            return rejected

        account.credit(transaction.amount)
        self._log.record(transaction.transaction_id, transaction.client_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejected = self._check_funding(account, transaction)
        if rejected is not None:
            return rejected

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds (available {account.available}, requested {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        self._log.record(transaction.transaction_id, transaction.client_id, -transaction.amount)
        return ProcessingResult.SUCCESS

    def _find_original(self, transaction: Transaction) -> Tuple[Optional[LoggedTransaction], Optional[ProcessingResult]]:
        """Look up the transaction a dispute, resolve or chargeback refers to."""
        name = transaction.transaction_type.value.capitalize()
        original = self._log.lookup(transaction.transaction_id)

        if original is None:
            logger.info(f"{name} for tx {transaction.transaction_id}: transaction not found")
            return None, ProcessingResult.TRANSACTION_NOT_FOUND

        if original.client_id != transaction.client_id:
            logger.warning(f"{name} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return None, ProcessingResult.CLIENT_MISMATCH

        return original, None

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejected = self._find_original(transaction)
        if rejected is not None:
            return rejected

        if original.state != TransactionState.NORMAL:
            logger.info(f"Dispute for tx {transaction.transaction_id}: transaction is {original.state.value}")
            return ProcessingResult.INVALID_STATE

        # Available may go negative when the funds were already withdrawn
        account.hold(original.amount)
        self._log.mark_disputed(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejected = self._find_original(transaction)
        if rejected is not None:
            return rejected

        if original.state != TransactionState.DISPUTED:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction is {original.state.value}")
            return ProcessingResult.INVALID_STATE

        account.release_hold(original.amount)
        self._log.mark_resolved(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejected = self._find_original(transaction)
        if rejected is not None:
            return rejected

        if original.state != TransactionState.DISPUTED:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction is {original.state.value}")
            return ProcessingResult.INVALID_STATE

        account.remove_held(original.amount)
        account.lock()
        self._log.mark_charged_back(transaction.transaction_id)
        return ProcessingResult.SUCCESS
