import logging
import sys
from typing import Dict, Iterable, Optional

from config import EngineSettings
from ledger import Ledger
from models import Account, ProcessingStats, TransactionRecord
from parser import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction log through a Ledger, one record at a time,
    in the order the records arrive.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings if settings is not None else EngineSettings()
        self._ledger = Ledger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, Account]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying transactions from {filepath}")
        return self.process_records(read_transactions(filepath, self._stats))

    def process_records(self, records: Iterable[TransactionRecord]) -> Dict[int, Account]:
        for record in records:
            self._stats.record(self._ledger.apply(record))

        logger.info(f"Replay complete: {self._stats}")

        if self._settings.report_stats:
            print(str(self._stats), file=sys.stderr)

        return self._ledger.accounts()
