import logging
from typing import Dict, Iterable, Optional, TextIO

from account import ClientAccount
from csv_io import read_transactions, write_accounts
from ledger import Ledger
from models import Transaction

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction stream through a Ledger, strictly in input order.
    Any MalformedRecord or InvariantViolation propagates and aborts the run.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self._ledger = ledger if ledger is not None else Ledger()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            self.process_stream(f)
        return self._ledger.get_all_accounts()

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        return self.process_transactions(read_transactions(stream))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self._ledger.apply(transaction)

        stats = self._ledger.stats
        logger.info(
            f"Processed: {stats.processed}, "
            f"Applied: {stats.applied}, "
            f"Ignored: {stats.ignored}, "
            f"Clients: {len(self._ledger)}"
        )
        return self._ledger.get_all_accounts()

    def write_report(self, stream: TextIO) -> None:
        write_accounts(self._ledger.get_all_accounts().values(), stream)
