import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

from exceptions import InvariantViolation
from models import Transaction, TransactionType, TransactionEntry, ProcessingResult, round_amount

logger = logging.getLogger(__name__)


@dataclass
class ClientAccount:
    """
    Balances of one client plus the deposits and withdrawals it has accepted.
    Transaction ids are only unique per client, so entries live here and
    never in a global table.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    entries: Dict[int, TransactionEntry] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def get_entry(self, transaction_id: int) -> Optional[TransactionEntry]:
        return self.entries.get(transaction_id)

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to this account.

        Returns:
            SUCCESS: Balances or entries changed
            IGNORED: Business no-op (insufficient funds, unknown tx, wrong dispute state)

        Locked accounts still accept transactions; the flag is only reported.
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
            case _:
                raise ValueError(f"Unsupported transaction type {transaction.transaction_type!r}")

    def check_invariants(self) -> None:
        if self.available < 0:
            raise InvariantViolation(f"Client {self.client_id}: available went negative ({self.available}): {self!r}", self.client_id)
        if self.held < 0:
            raise InvariantViolation(f"Client {self.client_id}: held went negative ({self.held}): {self!r}", self.client_id)

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        amount = round_amount(transaction.amount)
        self.available += amount
        self._insert_entry(TransactionEntry(transaction.transaction_id, TransactionType.DEPOSIT, amount))
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        amount = round_amount(transaction.amount)
        if amount > self.available:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({amount} > {self.available}), ignoring")
            return ProcessingResult.IGNORED

        self.available -= amount
        self._insert_entry(TransactionEntry(transaction.transaction_id, TransactionType.WITHDRAWAL, amount))
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        entry = self.get_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: no such transaction for client {self.client_id}, ignoring")
            return ProcessingResult.IGNORED

        entry.disputed = True
        if entry.kind == TransactionType.DEPOSIT:
            self.available -= entry.amount
            self.held += entry.amount
        else:
            # The withdrawal already debited available.
            self.held += entry.amount
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        entry = self._get_disputed_entry(transaction)

        if entry is None:
            return ProcessingResult.IGNORED

        entry.disputed = False
        if entry.kind == TransactionType.DEPOSIT:
            self.available += entry.amount
            self.held -= entry.amount
        else:
            self.held -= entry.amount
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        entry = self._get_disputed_entry(transaction)

        if entry is None:
            return ProcessingResult.IGNORED

        entry.disputed = False
        if entry.kind == TransactionType.DEPOSIT:
            self.held -= entry.amount
        else:
            self.available += entry.amount
            self.held -= entry.amount
        self.locked = True
        return ProcessingResult.SUCCESS

    def _get_disputed_entry(self, transaction: Transaction) -> Optional[TransactionEntry]:
        entry = self.get_entry(transaction.transaction_id)
        name = transaction.transaction_type.value.capitalize()

        if entry is None:
            logger.debug(f"{name} for tx {transaction.transaction_id}: no such transaction for client {self.client_id}, ignoring")
            return None

        if not entry.disputed:
            logger.debug(f"{name} for tx {transaction.transaction_id}: transaction is not disputed, ignoring")
            return None

        return entry

    def _insert_entry(self, entry: TransactionEntry) -> None:
        if entry.transaction_id in self.entries:
            logger.info(f"Client {self.client_id}: tx {entry.transaction_id} reused, replacing previous entry")
        self.entries[entry.transaction_id] = entry
