import logging
from decimal import Decimal, DecimalException
from typing import Callable, Optional, Tuple

from account_store import AccountStore
from models import ClientAccount, DisputableTransaction, DisputeStatus, ProcessingResult, Transaction, TransactionType
from transaction_history import TransactionHistory

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies transactions to account state, one at a time, in arrival order.
    Every failure is returned as a ProcessingResult and leaves state untouched.

    Only deposits can be disputed unless disputable_withdrawals is set; a
    disputed withdrawal then moves its amount from available to held like a deposit.
    """

    def __init__(self, accounts: AccountStore, history: TransactionHistory, disputable_withdrawals: bool = False):
        self._accounts = accounts
        self._history = history
        self._disputable_withdrawals = disputable_withdrawals

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            SUCCESS: Applied
            anything else: Skipped, with the reason as the result
        """
        account = self._accounts.get_or_create(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

        raise ValueError(f"Unsupported transaction type {transaction.transaction_type!r}")

    def _check_funding(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        """Checks shared by deposits and withdrawals, in order: amount, duplicate id, lock."""
        label = transaction.transaction_type.value.capitalize()

        if transaction.amount is None:
            logger.warning(f"{label} tx {transaction.transaction_id}: missing amount")
            return ProcessingResult.MISSING_AMOUNT

        if transaction.amount <= 0:
            logger.warning(f"{label} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if self._history.is_used(transaction.transaction_id):
            logger.info(f"{label} tx {transaction.transaction_id}: transaction id already used, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if account.locked:
            logger.info(f"{label} tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        return ProcessingResult.SUCCESS

    def _move_funds(self, transaction: Transaction, move: Callable[[Decimal], None], amount: Decimal) -> ProcessingResult:
        try:
            move(amount)
        except DecimalException:
            logger.warning(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: amount {amount} cannot be applied without losing precision")
            return ProcessingResult.PRECISION_EXCEEDED
        return ProcessingResult.SUCCESS

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_funding(account, transaction)
        if not result.ok:
            return result

        result = self._move_funds(transaction, account.credit, transaction.amount)
        if not result.ok:
            return result

        return self._history.record_deposit(transaction.transaction_id, transaction.client_id, transaction.amount)

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_funding(account, transaction)
        if not result.ok:
            return result

        if account.available < transaction.amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds (available {account.available}, requested {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        result = self._move_funds(transaction, account.debit, transaction.amount)
        if not result.ok:
            return result

        return self._history.record_withdrawal(
            transaction.transaction_id,
            transaction.client_id,
            transaction.amount,
            disputable=self._disputable_withdrawals,
        )

    def _find_original(self, transaction: Transaction) -> Tuple[Optional[DisputableTransaction], ProcessingResult]:
        label = transaction.transaction_type.value.capitalize()
        original = self._history.lookup(transaction.transaction_id)

        if original is None:
            logger.info(f"{label} for tx {transaction.transaction_id}: no disputable transaction with this id")
            return None, ProcessingResult.UNKNOWN_TRANSACTION

        if original.client_id != transaction.client_id:
            logger.warning(f"{label} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return None, ProcessingResult.CLIENT_MISMATCH

        return original, ProcessingResult.SUCCESS

    def _require_status(self, original: DisputableTransaction, transaction: Transaction, expected: DisputeStatus) -> ProcessingResult:
        if original.status is not expected:
            logger.warning(f"{transaction.transaction_type.value.capitalize()} for tx {transaction.transaction_id}: transaction is {original.status.value}, expected {expected.value}")
            return ProcessingResult.INVALID_STATE
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        result = self._require_status(original, transaction, DisputeStatus.CLEAN)
        if not result.ok:
            return result

        result = self._move_funds(transaction, account.hold, original.amount)
        if not result.ok:
            return result

        self._history.set_status(transaction.transaction_id, DisputeStatus.DISPUTED)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        result = self._require_status(original, transaction, DisputeStatus.DISPUTED)
        if not result.ok:
            return result

        result = self._move_funds(transaction, account.release_hold, original.amount)
        if not result.ok:
            return result

        self._history.set_status(transaction.transaction_id, DisputeStatus.CLEAN)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        result = self._require_status(original, transaction, DisputeStatus.DISPUTED)
        if not result.ok:
            return result

        result = self._move_funds(transaction, account.remove_held, original.amount)
        if not result.ok:
            return result

        account.locked = True
        self._history.set_status(transaction.transaction_id, DisputeStatus.CHARGED_BACK)
        return ProcessingResult.SUCCESS
