from decimal import Decimal
from typing import Dict, Optional, Set

from models import DisputableTransaction, DisputeStatus, ProcessingResult


class TransactionHistory:
    """
    Stores deposits for dispute lookups and tracks every deposit/withdrawal id seen.
    Knows nothing about balances.
    """

    def __init__(self):
        self._disputable: Dict[int, DisputableTransaction] = {}
        self._used_transaction_ids: Set[int] = set()

    def is_used(self, transaction_id: int) -> bool:
        """Check if a deposit or withdrawal already claimed this id."""
        return transaction_id in self._used_transaction_ids

    def _record(self, transaction_id: int, client_id: int, amount: Decimal, disputable: bool) -> ProcessingResult:
        if self.is_used(transaction_id):
            return ProcessingResult.DUPLICATE_TRANSACTION

        self._used_transaction_ids.add(transaction_id)
        if disputable:
            self._disputable[transaction_id] = DisputableTransaction(
                transaction_id=transaction_id,
                client_id=client_id,
                amount=amount,
            )
        return ProcessingResult.SUCCESS

    def record_deposit(self, transaction_id: int, client_id: int, amount: Decimal) -> ProcessingResult:
        """Store a deposit as a clean disputable transaction."""
        return self._record(transaction_id, client_id, amount, disputable=True)

    def record_withdrawal(self, transaction_id: int, client_id: int, amount: Decimal, disputable: bool = False) -> ProcessingResult:
        """Claim the id of a withdrawal; only kept for dispute lookups when disputable."""
        return self._record(transaction_id, client_id, amount, disputable=disputable)

    def lookup(self, transaction_id: int) -> Optional[DisputableTransaction]:
        """Retrieve a disputable transaction by id, or None if unknown."""
        return self._disputable.get(transaction_id)

    def set_status(self, transaction_id: int, status: DisputeStatus) -> None:
        self._disputable[transaction_id].status = status

    def __len__(self) -> int:
        return len(self._disputable)
