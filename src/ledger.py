import logging
from typing import Dict, Optional

from account import ClientAccount
from models import Transaction, ProcessingResult, ProcessingStats

logger = logging.getLogger(__name__)


class Ledger:
    """
    Owns every client account and routes transactions to them in arrival order.
    Accounts are created on first reference and live for the whole run.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.stats = ProcessingStats()

    def __len__(self) -> int:
        return len(self._accounts)

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return an existing account without creating one."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            logger.debug(f"Opening account for client {client_id}")
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a transaction to its client's account, then verify the account
        balances. Raises InvariantViolation if either balance went negative.
        """
        account = self.get_or_create_account(transaction.client_id)
        result = account.apply(transaction)
        account.check_invariants()
        self.stats.record(result)
        return result

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
