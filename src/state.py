from decimal import Decimal
from typing import Dict, Optional

from models import Account, TransactionRecord


class StateManager:
    """
    Stores client accounts and the applied deposit/withdrawal history
    used for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        self._transactions: Dict[int, TransactionRecord] = {}

    def get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = Account(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def restore_account(self, client_id: int, available: Decimal, held: Decimal, frozen: bool) -> Account:
        """Seed an account with balances taken from an earlier snapshot."""
        account = Account(client_id=client_id, available=available, held=held, frozen=frozen)
        account.check_invariants()
        self._accounts[client_id] = account
        return account

    def store_transaction(self, record: TransactionRecord) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[record.tx_id] = record

    def get_transaction(self, tx_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(tx_id)

    def has_transaction(self, tx_id: int) -> bool:
        return tx_id in self._transactions

    def get_all_accounts(self) -> Dict[int, Account]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
