import csv
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Dict, Iterable, List, TextIO

from models import Account

FOUR_PLACES = Decimal("0.0001")
FIELDNAMES = ["client", "available", "held", "total", "locked"]


def quantize(value: Decimal) -> Decimal:
    return value.quantize(FOUR_PLACES, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    frozen: bool

    @classmethod
    def of(cls, account: Account) -> "AccountSnapshot":
        return cls(
            client_id=account.client_id,
            available=quantize(account.available),
            held=quantize(account.held),
            total=quantize(account.total),
            frozen=account.is_frozen(),
        )

    def as_row(self) -> List[str]:
        return [
            str(self.client_id),
            f"{self.available:.4f}",
            f"{self.held:.4f}",
            f"{self.total:.4f}",
            str(self.frozen).lower(),
        ]


def take_snapshot(accounts: Dict[int, Account]) -> List[AccountSnapshot]:
    """Snapshot every account, ordered by client id."""
    return [AccountSnapshot.of(accounts[client_id]) for client_id in sorted(accounts)]


def write_snapshots(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDNAMES)
    for snapshot in snapshots:
        writer.writerow(snapshot.as_row())


def read_snapshots(stream: TextIO) -> List[AccountSnapshot]:
    """Parse rows produced by write_snapshots back into snapshots."""
    reader = csv.DictReader(stream, skipinitialspace=True)
    snapshots = []
    for row in reader:
        snapshots.append(AccountSnapshot(
            client_id=int(row["client"]),
            available=Decimal(row["available"]),
            held=Decimal(row["held"]),
            total=Decimal(row["total"]),
            frozen=row["locked"].strip().lower() == "true",
        ))
    return snapshots
