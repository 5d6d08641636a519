import sys
import os
import logging
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from exceptions import InvariantViolation
from ledger import Ledger
from models import Transaction, TransactionType, ProcessingResult


class TestLedger:
    def setup_method(self):
        self.ledger = Ledger()

    def test_account_created_lazily(self):
        assert self.ledger.get_account(1) is None
        assert len(self.ledger) == 0

        self.ledger.apply(Transaction(TransactionType.DISPUTE, client_id=1, transaction_id=1))

        account = self.ledger.get_account(1)
        assert account is not None
        assert account.total == Decimal("0")
        assert len(self.ledger) == 1

    def test_get_or_create_account_returns_same_instance(self):
        first = self.ledger.get_or_create_account(5)
        assert self.ledger.get_or_create_account(5) is first

    def test_account_opening_logged_once(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ledger"):
            self.ledger.get_or_create_account(5)
            self.ledger.get_or_create_account(5)

        assert caplog.text.count("Opening account for client 5") == 1

    def test_routes_by_client(self):
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("1.0")))
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=2, transaction_id=2, amount=Decimal("2.0")))
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=3, amount=Decimal("2.0")))

        assert self.ledger.get_account(1).available == Decimal("3.0")
        assert self.ledger.get_account(2).available == Decimal("2.0")

    def test_tx_ids_are_scoped_per_client(self):
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("10")))
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=2, transaction_id=1, amount=Decimal("20")))

        result = self.ledger.apply(Transaction(TransactionType.DISPUTE, client_id=2, transaction_id=1))

        assert result == ProcessingResult.SUCCESS
        assert self.ledger.get_account(1).held == Decimal("0")
        assert self.ledger.get_account(2).held == Decimal("20")

    def test_wrong_client_dispute_ignored(self):
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("100")))
        result = self.ledger.apply(Transaction(TransactionType.DISPUTE, client_id=2, transaction_id=1))

        assert result == ProcessingResult.IGNORED
        assert self.ledger.get_account(1).available == Decimal("100")
        assert self.ledger.get_account(1).held == Decimal("0")

    def test_dispute_after_partial_withdrawal_is_fatal(self):
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("100")))
        self.ledger.apply(Transaction(TransactionType.WITHDRAWAL, client_id=1, transaction_id=2, amount=Decimal("30")))

        with pytest.raises(InvariantViolation) as exc_info:
            self.ledger.apply(Transaction(TransactionType.DISPUTE, client_id=1, transaction_id=1))
        assert exc_info.value.client_id == 1

    def test_negative_deposit_is_fatal(self):
        with pytest.raises(InvariantViolation):
            self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=9, transaction_id=1, amount=Decimal("-5")))

    def test_stats_count_applied_and_ignored(self):
        self.ledger.apply(Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("1")))
        self.ledger.apply(Transaction(TransactionType.WITHDRAWAL, client_id=1, transaction_id=2, amount=Decimal("5")))
        self.ledger.apply(Transaction(TransactionType.RESOLVE, client_id=1, transaction_id=1))

        assert self.ledger.stats.applied == 1
        assert self.ledger.stats.ignored == 2

    def test_get_all_accounts_returns_copy(self):
        self.ledger.get_or_create_account(1)
        accounts = self.ledger.get_all_accounts()
        accounts.clear()

        assert len(self.ledger) == 1
