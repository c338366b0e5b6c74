import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, List, Optional, TextIO

from models import AccountSummary, Transaction, TransactionType

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]
MAX_ID = 2**32 - 1


def _parse_id(value: str, field: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= MAX_ID:
        raise ValueError(f"{field} {parsed} out of range")
    return parsed


def _parse_amount(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid amount {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"invalid amount {value!r}")
    return amount


def parse_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """Parse a CSV row into a Transaction. Raises ValueError on malformed rows."""
    # Short rows give None values, long rows put the extras under a None key.
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        transaction_type_str = normalized["type"].lower()
        client_id = _parse_id(normalized["client"], "client")
        transaction_id = _parse_id(normalized["tx"], "tx")
    except KeyError as e:
        raise ValueError(f"missing column {e}") from None

    return Transaction(
        transaction_type=TransactionType(transaction_type_str),
        client_id=client_id,
        transaction_id=transaction_id,
        amount=_parse_amount(normalized.get("amount", "")),
    )


def iter_transactions(stream: TextIO) -> Iterator[Transaction]:
    """Lazily decode transactions from an open CSV stream, skipping malformed rows."""
    reader = csv.DictReader(stream)
    for row in reader:
        try:
            yield parse_row(row)
        except ValueError as e:
            logger.warning(f"Failed to parse row {reader.line_num} {row}: {e}")


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily decode transactions from a CSV file. Raises OSError if it cannot be opened, csv.Error if it is not CSV."""
    # Undecodable bytes become U+FFFD, so the row fails to parse and is skipped.
    with open(filepath, "r", newline="", encoding="utf-8-sig", errors="replace") as f:
        yield from iter_transactions(f)


def format_decimal(value: Decimal) -> str:
    """Format an already rounded decimal with a fixed four fractional digits."""
    return f"{value:.4f}"


def format_summary_row(summary: AccountSummary) -> List[str]:
    return [
        str(summary.client_id),
        format_decimal(summary.available),
        format_decimal(summary.held),
        format_decimal(summary.total),
        str(summary.locked).lower(),
    ]


def write_summaries(summaries: Iterable[AccountSummary], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for summary in summaries:
        writer.writerow(format_summary_row(summary))
