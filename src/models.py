from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"


class PaymentsError(Exception):
    """Base class for every error raised by the payments engine."""


class AccountError(PaymentsError):
    """An account refused a mutation. The record is skipped, the run continues."""


class InsufficientFunds(AccountError):
    pass


class AccountFrozen(AccountError):
    pass


class InvariantViolation(PaymentsError):
    """Account balances went negative."""


class MalformedRecord(PaymentsError):
    pass


@dataclass
class TransactionRecord:
    kind: TransactionKind
    client_id: int
    tx_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"TransactionRecord({self.kind.value}, client={self.client_id}, tx={self.tx_id}, amount={self.amount})"


@dataclass
class Account:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    frozen: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def is_frozen(self) -> bool:
        return self.frozen

    def apply_deposit(self, amount: Decimal) -> None:
        self._ensure_not_frozen()
        self.available += amount
        self.check_invariants()

    def apply_withdrawal(self, amount: Decimal) -> None:
        self._ensure_not_frozen()
        self._ensure_available(amount)
        self.available -= amount
        self.check_invariants()

    def hold(self, amount: Decimal) -> None:
        self._ensure_not_frozen()
        self._ensure_available(amount)
        self.available -= amount
        self.held += amount
        self.check_invariants()

    def release(self, amount: Decimal) -> None:
        self._ensure_not_frozen()
        self._ensure_held(amount)
        self.held -= amount
        self.available += amount
        self.check_invariants()

    def chargeback(self, amount: Decimal) -> None:
        """Remove held funds for good and freeze the account."""
        self._ensure_not_frozen()
        self._ensure_held(amount)
        self.held -= amount
        self.frozen = True
        self.check_invariants()

    def _ensure_not_frozen(self) -> None:
        if self.frozen:
            raise AccountFrozen(f"account {self.client_id} is frozen")

    def _ensure_available(self, amount: Decimal) -> None:
        if amount > self.available:
            raise InsufficientFunds(
                f"account {self.client_id}: {amount} requested, {self.available} available"
            )

    def _ensure_held(self, amount: Decimal) -> None:
        if amount > self.held:
            raise InsufficientFunds(
                f"account {self.client_id}: {amount} requested, {self.held} held"
            )

    def check_invariants(self) -> None:
        # total is derived from available + held, so only the signs can go wrong
        if self.available < 0 or self.held < 0:
            raise InvariantViolation(
                f"account {self.client_id}: available={self.available} held={self.held}"
            )


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.applied = 0
        self.skipped = 0
        self.malformed = 0

    def record_applied(self):
        self.applied += 1

    def record_skipped(self):
        self.skipped += 1

    def record_malformed(self):
        self.malformed += 1

    def record(self, result: ProcessingResult):
        if result == ProcessingResult.APPLIED:
            self.record_applied()
        else:
            self.record_skipped()

    def __str__(self) -> str:
        return f"Applied: {self.applied}, Skipped: {self.skipped}, Malformed: {self.malformed}"
