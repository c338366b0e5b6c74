import logging
from typing import Iterable, List

from account_store import AccountStore
from csv_io import read_transactions
from ledger import LedgerEngine
from models import AccountSummary, ProcessingStats, Transaction
from transaction_history import TransactionHistory

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Drives a single batch run: applies every transaction in order, then
    drains the account store into per-client summaries.
    """

    def __init__(self):
        self._accounts = AccountStore()
        self._history = TransactionHistory()
        self._ledger = LedgerEngine(self._accounts, self._history)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountSummary]:
        """Process CSV file and return final account summaries."""
        logger.info(f"Processing transactions from {filepath}")
        return self.process(read_transactions(filepath))

    def process(self, transactions: Iterable[Transaction]) -> List[AccountSummary]:
        """Apply transactions in arrival order and return summaries ordered by client id."""
        for transaction in transactions:
            result = self._ledger.apply(transaction)
            self._stats.record(result)
            if not result.ok:
                logger.debug(f"Skipped {transaction}: {result.value}")

        logger.info(f"{self._stats}, accounts: {len(self._accounts)}, disputable transactions: {len(self._history)}")
        return self.summaries()

    def summaries(self) -> List[AccountSummary]:
        return [AccountSummary.from_account(account) for account in self._accounts.snapshot()]
