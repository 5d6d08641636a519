from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional

AMOUNT_PRECISION = Decimal("0.0001")

MAX_CLIENT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1


def round_amount(amount: Decimal) -> Decimal:
    """Round an amount to 4 decimal places (minor currency unit)."""
    return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_EVEN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if self.transaction_type.carries_amount and self.amount is None:
            raise ValueError(f"{self.transaction_type.value} tx {self.transaction_id} requires an amount")
        if not self.transaction_type.carries_amount and self.amount is not None:
            raise ValueError(f"{self.transaction_type.value} tx {self.transaction_id} does not take an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionEntry:
    """A deposit or funded withdrawal accepted by one client account."""

    transaction_id: int
    kind: TransactionType
    amount: Decimal
    disputed: bool = False


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0

    @property
    def processed(self) -> int:
        return self.applied + self.ignored

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.applied += 1
        else:
            self.ignored += 1
