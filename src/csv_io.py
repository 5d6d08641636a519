"""
CSV ingestion and reporting.

Input rows look like ``type, client, tx, amount``; output rows look like
``client,available,held,total,locked``.
"""
import csv
import io
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional, TextIO

from account import ClientAccount
from exceptions import MalformedRecord
from models import Transaction, TransactionType, MAX_CLIENT_ID, MAX_TX_ID, round_amount

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Lazily parse transactions from a CSV stream, one row at a time.
    Raises MalformedRecord on the first row that cannot be parsed.
    """
    reader = csv.DictReader(stream)
    for row in reader:
        yield parse_row(row, line_number=reader.line_num)


def parse_row(row: Dict[str, Optional[str]], line_number: Optional[int] = None) -> Transaction:
    """Parse CSV row into Transaction."""
    # Short rows leave trailing fields as None; long rows collect extras under a None key.
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    type_str = _required(normalized, "type", line_number, row)
    try:
        transaction_type = TransactionType(type_str.lower())
    except ValueError:
        raise MalformedRecord(f"unknown transaction type {type_str!r}", line_number, row) from None

    client_id = _parse_id(normalized, "client", MAX_CLIENT_ID, line_number, row)
    transaction_id = _parse_id(normalized, "tx", MAX_TX_ID, line_number, row)

    amount = None
    if transaction_type.carries_amount:
        amount = _parse_amount(_required(normalized, "amount", line_number, row), line_number, row)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _required(normalized: Dict[str, str], name: str, line_number, row) -> str:
    value = normalized.get(name, "")
    if not value:
        raise MalformedRecord(f"missing required field {name!r}", line_number, row)
    return value


def _parse_id(normalized: Dict[str, str], name: str, maximum: int, line_number, row) -> int:
    value = _required(normalized, name, line_number, row)
    try:
        parsed = int(value)
    except ValueError:
        raise MalformedRecord(f"field {name!r} is not an integer: {value!r}", line_number, row) from None
    if not 0 <= parsed <= maximum:
        raise MalformedRecord(f"field {name!r} out of range 0..{maximum}: {parsed}", line_number, row)
    return parsed


def _parse_amount(value: str, line_number, row) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise MalformedRecord(f"unparseable amount {value!r}", line_number, row) from None
    if not amount.is_finite():
        raise MalformedRecord(f"amount must be finite: {value!r}", line_number, row)
    if amount < 0:
        raise MalformedRecord(f"amount must not be negative: {value!r}", line_number, row)
    try:
        round_amount(amount)
    except InvalidOperation:
        raise MalformedRecord(f"amount out of range at 4 decimal places: {value!r}", line_number, row) from None
    return amount


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    normalized = round_amount(value).normalize()
    return f"{normalized:f}"


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write one report row per account. Row order follows the iterable."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for account in accounts:
        writer.writerow([
            account.client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def to_csv_string(accounts: Iterable[ClientAccount]) -> str:
    buffer = io.StringIO()
    write_accounts(accounts, buffer)
    return buffer.getvalue()
