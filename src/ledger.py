import logging
from typing import Dict, Iterable, Optional

from disputes import DisputeTracker, InvalidDisputeTransition
from models import Account, AccountError, ProcessingResult, TransactionKind, TransactionRecord
from snapshot import AccountSnapshot
from state import StateManager

logger = logging.getLogger(__name__)


class Ledger:
    """
    Applies transaction records to accounts in arrival order.

    Any record that cannot be applied is skipped and leaves every account and
    dispute untouched. Only InvariantViolation escapes apply().
    """

    def __init__(self, state: Optional[StateManager] = None, disputes: Optional[DisputeTracker] = None):
        self._state = state if state is not None else StateManager()
        self._disputes = disputes if disputes is not None else DisputeTracker()

    @classmethod
    def from_snapshots(cls, snapshots: Iterable[AccountSnapshot]) -> "Ledger":
        """Build a ledger whose accounts start from previously emitted snapshots."""
        ledger = cls()
        for snapshot in snapshots:
            ledger._state.restore_account(snapshot.client_id, snapshot.available, snapshot.held, snapshot.frozen)
        return ledger

    @property
    def disputes(self) -> DisputeTracker:
        return self._disputes

    def accounts(self) -> Dict[int, Account]:
        return self._state.get_all_accounts()

    def apply(self, record: TransactionRecord) -> ProcessingResult:
        """
        Apply a single record.

        Returns:
            APPLIED: balances and/or dispute state changed
            SKIPPED: the record was rejected (unknown or foreign tx, frozen
                account, insufficient funds, settled dispute, ...)
        """
        account = self._state.get_or_create_account(record.client_id)

        try:
            match record.kind:
                case TransactionKind.DEPOSIT:
                    return self._handle_deposit(account, record)
                case TransactionKind.WITHDRAWAL:
                    return self._handle_withdrawal(account, record)
                case TransactionKind.DISPUTE:
                    return self._handle_dispute(account, record)
                case TransactionKind.RESOLVE:
                    return self._handle_resolve(account, record)
                case TransactionKind.CHARGEBACK:
                    return self._handle_chargeback(account, record)
        except (AccountError, InvalidDisputeTransition) as e:
            return self._skip(record, str(e))

        return self._skip(record, "unknown transaction kind")

    def _handle_deposit(self, account: Account, record: TransactionRecord) -> ProcessingResult:
        if record.amount is None or record.amount < 0:
            return self._skip(record, f"invalid amount {record.amount}")

        if self._state.has_transaction(record.tx_id):
            return self._skip(record, "tx_id already used")

        account.apply_deposit(record.amount)
        self._state.store_transaction(record)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: Account, record: TransactionRecord) -> ProcessingResult:
        if record.amount is None or record.amount < 0:
            return self._skip(record, f"invalid amount {record.amount}")

        if self._state.has_transaction(record.tx_id):
            return self._skip(record, "tx_id already used")

        account.apply_withdrawal(record.amount)
        self._state.store_transaction(record)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, account: Account, record: TransactionRecord) -> ProcessingResult:
        original = self._state.get_transaction(record.tx_id)

        if original is None:
            return self._skip(record, "transaction not found")

        if original.client_id != record.client_id:
            return self._skip(record, f"transaction belongs to client {original.client_id}")

        if not self._disputes.can_open(record.tx_id):
            return self._skip(record, f"transaction is already {self._disputes.state_of(record.tx_id).value}")

        account.hold(original.amount)
        self._disputes.open(record.tx_id, original.client_id, original.amount)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: Account, record: TransactionRecord) -> ProcessingResult:
        entry = self._open_dispute_for(record)
        if entry is None:
            return ProcessingResult.SKIPPED

        account.release(entry.amount)
        self._disputes.resolve(record.tx_id)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: Account, record: TransactionRecord) -> ProcessingResult:
        entry = self._open_dispute_for(record)
        if entry is None:
            return ProcessingResult.SKIPPED

        account.chargeback(entry.amount)
        self._disputes.charge_back(record.tx_id)
        logger.info(f"Client {account.client_id} frozen by chargeback of tx {record.tx_id}")
        return ProcessingResult.APPLIED

    def _open_dispute_for(self, record: TransactionRecord):
        entry = self._disputes.get(record.tx_id)

        if entry is None:
            self._skip(record, "transaction is not disputed")
            return None

        if entry.client_id != record.client_id:
            self._skip(record, f"transaction belongs to client {entry.client_id}")
            return None

        if not self._disputes.is_open(record.tx_id):
            self._skip(record, f"dispute is already {entry.state.value}")
            return None

        return entry

    def _skip(self, record: TransactionRecord, reason: str) -> ProcessingResult:
        logger.info(f"Skipping {record}: {reason}")
        return ProcessingResult.SKIPPED
