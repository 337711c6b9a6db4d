import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import (
    Transaction,
    TransactionType,
    TransactionState,
    LoggedTransaction,
    ClientAccount,
    ProcessingResult,
    ProcessingStats,
    truncate_amount,
    CURRENCY_PRECISION,
    CURRENCY_QUANTUM,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_amount_truncated_on_creation(self):
        transaction = Transaction(TransactionType.WITHDRAWAL, 1, 2, Decimal("1.11119"))
        assert transaction.amount == Decimal("1.1111")

    def test_carries_amount(self):
        assert TransactionType.DEPOSIT.carries_amount
        assert TransactionType.WITHDRAWAL.carries_amount
        assert not TransactionType.DISPUTE.carries_amount
        assert not TransactionType.RESOLVE.carries_amount
        assert not TransactionType.CHARGEBACK.carries_amount


class TestTruncateAmount:
    def test_truncates_instead_of_rounding(self):
        assert truncate_amount(Decimal("3.14159")) == Decimal("3.1415")
        assert truncate_amount(Decimal("0.99999")) == Decimal("0.9999")

    def test_negative_truncates_toward_zero(self):
        assert truncate_amount(Decimal("-1.23456")) == Decimal("-1.2345")

    def test_pads_to_four_places(self):
        assert str(truncate_amount(Decimal("2"))) == "2.0000"


class TestLoggedTransaction:
    def test_starts_normal(self):
        entry = LoggedTransaction(client_id=1, amount=Decimal("5"))
        assert entry.state == TransactionState.NORMAL
        assert entry.disputed is False
        assert entry.charged_back is False

    def test_charged_back_stays_disputed(self):
        entry = LoggedTransaction(client_id=1, amount=Decimal("5"), state=TransactionState.CHARGED_BACK)
        assert entry.disputed is True
        assert entry.charged_back is True


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_keeps_total(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.hold(Decimal("4"))
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

    def test_remove_held_reduces_total(self):
        account = ClientAccount(client_id=1, available=Decimal("6"), held=Decimal("4"))
        account.remove_held(Decimal("4"))
        assert account.held == Decimal("0")
        assert account.total == Decimal("6")


class TestProcessingStats:
    def test_counts(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.INSUFFICIENT_FUNDS)

        assert stats.processed == 2
        assert stats.rejected == 1
        assert stats.count(ProcessingResult.INSUFFICIENT_FUNDS) == 1
        assert stats.count(ProcessingResult.CLIENT_MISMATCH) == 0

    def test_summary(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.SUCCESS)
        stats.record(ProcessingResult.TRANSACTION_NOT_FOUND)

        assert stats.summary() == "Processed: 1, Rejected: 1, transaction_not_found: 1"


class TestCurrencyPrecision:
    def test_quantum_follows_precision(self):
        assert CURRENCY_QUANTUM.as_tuple().exponent == -CURRENCY_PRECISION
        assert CURRENCY_QUANTUM == Decimal("0.0001")
