import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from disputes import DisputeState, DisputeTracker, InvalidDisputeTransition


class TestDisputeTracker:
    def setup_method(self):
        self.tracker = DisputeTracker()

    def test_unknown_tx_has_no_state(self):
        assert self.tracker.state_of(1) is None
        assert self.tracker.get(1) is None
        assert self.tracker.can_open(1) is True
        assert self.tracker.is_open(1) is False

    def test_open(self):
        entry = self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        assert entry.state == DisputeState.OPEN
        assert entry.client_id == 7
        assert entry.amount == Decimal("3.5")
        assert self.tracker.is_open(1)
        assert self.tracker.can_open(1) is False

    def test_open_twice_rejected(self):
        self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        with pytest.raises(InvalidDisputeTransition):
            self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        assert self.tracker.state_of(1) == DisputeState.OPEN

    def test_resolve(self):
        self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        self.tracker.resolve(1)
        assert self.tracker.state_of(1) == DisputeState.RESOLVED

    def test_charge_back(self):
        self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        self.tracker.charge_back(1)
        assert self.tracker.state_of(1) == DisputeState.CHARGED_BACK

    def test_settle_without_dispute_rejected(self):
        with pytest.raises(InvalidDisputeTransition):
            self.tracker.resolve(1)
        with pytest.raises(InvalidDisputeTransition):
            self.tracker.charge_back(1)
        assert len(self.tracker) == 0

    @pytest.mark.parametrize("settle", ["resolve", "charge_back"])
    def test_settled_states_are_terminal(self, settle):
        self.tracker.open(1, client_id=7, amount=Decimal("3.5"))
        getattr(self.tracker, settle)(1)
        final_state = self.tracker.state_of(1)

        with pytest.raises(InvalidDisputeTransition):
            self.tracker.resolve(1)
        with pytest.raises(InvalidDisputeTransition):
            self.tracker.charge_back(1)
        with pytest.raises(InvalidDisputeTransition):
            self.tracker.open(1, client_id=7, amount=Decimal("3.5"))

        assert self.tracker.state_of(1) == final_state
        assert len(self.tracker) == 1
