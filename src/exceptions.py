from typing import Dict, Optional


class PaymentsError(Exception):
    """Base class for errors that abort a processing run."""


class MalformedRecord(PaymentsError):
    """An input row could not be turned into a transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None, row: Optional[Dict[str, str]] = None):
        self.line_number = line_number
        self.row = row
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class InvariantViolation(PaymentsError):
    """
    An account ended up with negative available or held funds.
    Business rules alone cannot produce this state, so the run is aborted.
    """

    def __init__(self, message: str, client_id: int):
        self.client_id = client_id
        super().__init__(message)
