from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from models import PaymentsError


class DisputeState(Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class InvalidDisputeTransition(PaymentsError):
    pass


@dataclass
class DisputeEntry:
    tx_id: int
    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.OPEN


class DisputeTracker:
    """
    Dispute lifecycle per transaction id.

    A tx_id with no entry has never been disputed. Entries move
    OPEN -> RESOLVED or OPEN -> CHARGED_BACK and are kept forever, so a
    settled transaction can be neither disputed nor settled again.
    """

    def __init__(self):
        self._entries: Dict[int, DisputeEntry] = {}

    def get(self, tx_id: int) -> Optional[DisputeEntry]:
        return self._entries.get(tx_id)

    def state_of(self, tx_id: int) -> Optional[DisputeState]:
        entry = self._entries.get(tx_id)
        return entry.state if entry else None

    def can_open(self, tx_id: int) -> bool:
        return tx_id not in self._entries

    def is_open(self, tx_id: int) -> bool:
        return self.state_of(tx_id) == DisputeState.OPEN

    def open(self, tx_id: int, client_id: int, amount: Decimal) -> DisputeEntry:
        if not self.can_open(tx_id):
            raise InvalidDisputeTransition(f"tx {tx_id} is already {self.state_of(tx_id).value}")
        entry = DisputeEntry(tx_id=tx_id, client_id=client_id, amount=amount)
        self._entries[tx_id] = entry
        return entry

    def resolve(self, tx_id: int) -> DisputeEntry:
        return self._settle(tx_id, DisputeState.RESOLVED)

    def charge_back(self, tx_id: int) -> DisputeEntry:
        return self._settle(tx_id, DisputeState.CHARGED_BACK)

    def _settle(self, tx_id: int, state: DisputeState) -> DisputeEntry:
        entry = self._entries.get(tx_id)
        if entry is None:
            raise InvalidDisputeTransition(f"tx {tx_id} is not disputed")
        if entry.state != DisputeState.OPEN:
            raise InvalidDisputeTransition(f"tx {tx_id} is already {entry.state.value}")
        entry.state = state
        return entry

    def __len__(self) -> int:
        return len(self._entries)
