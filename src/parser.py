import csv
import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Dict, Iterator, Optional

from models import MalformedRecord, ProcessingStats, TransactionKind, TransactionRecord

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 65535
MAX_TX_ID = 4294967295
AMOUNT_PLACES = Decimal("0.0001")
# Keeps every balance well inside the 28 significant digits of the default context
MAX_AMOUNT = Decimal("1000000000000000")

ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"[0-9]+(\.[0-9]*)?|\.[0-9]+")

AMOUNT_KINDS = {TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL}


def parse_row(row: Dict[Optional[str], Optional[str]]) -> TransactionRecord:
    """Parse CSV row into TransactionRecord, raising MalformedRecord if it cannot be done."""
    extra = row.get(None)
    if extra and any(value.strip() for value in extra):
        raise MalformedRecord(f"too many fields: {extra}")

    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        kind = TransactionKind(normalized["type"].lower())
    except KeyError:
        raise MalformedRecord("missing type column")
    except ValueError:
        raise MalformedRecord(f"unknown transaction type {normalized['type']!r}")

    client_id = _parse_id(normalized, "client", MAX_CLIENT_ID)
    tx_id = _parse_id(normalized, "tx", MAX_TX_ID)

    amount = None
    if kind in AMOUNT_KINDS:
        amount = _parse_amount(normalized.get("amount", ""))

    return TransactionRecord(kind=kind, client_id=client_id, tx_id=tx_id, amount=amount)


def _parse_id(normalized: Dict[str, str], column: str, maximum: int) -> int:
    if column not in normalized:
        raise MalformedRecord(f"missing {column} column")
    raw = normalized[column]
    if not ID_PATTERN.fullmatch(raw):
        raise MalformedRecord(f"{column} is not an unsigned integer: {raw!r}")
    value = int(raw)
    if value > maximum:
        raise MalformedRecord(f"{column} out of range: {value}")
    return value


def _parse_amount(raw: str) -> Decimal:
    if not raw:
        raise MalformedRecord("amount is required")
    if raw.startswith("-"):
        raise MalformedRecord(f"amount is negative: {raw!r}")
    if not AMOUNT_PATTERN.fullmatch(raw):
        raise MalformedRecord(f"amount is not a decimal: {raw!r}")
    try:
        amount = Decimal(raw)
        if amount >= MAX_AMOUNT:
            raise MalformedRecord(f"amount too large: {raw!r}")
        return amount.quantize(AMOUNT_PLACES, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise MalformedRecord(f"amount is not a decimal: {raw!r}")


def read_transactions(filepath: str, stats: Optional[ProcessingStats] = None) -> Iterator[TransactionRecord]:
    """
    Stream records from a CSV file in file order.

    Malformed rows are logged and dropped. Undecodable bytes are replaced, so
    they end up in a malformed row instead of stopping the run. Errors opening
    or reading the file propagate to the caller.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield parse_row(row)
            except MalformedRecord as e:
                logger.warning(f"Failed to parse line {reader.line_num} {row}: {e}")
                if stats is not None:
                    stats.record_malformed()
