from collections import Counter
from dataclasses import dataclass
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow
from enum import Enum
from typing import Optional

OUTPUT_PRECISION = Decimal("0.0001")

# Balances are kept exact: any result needing more than 34 significant digits,
# or reaching 1e34, raises instead of being rounded.
LEDGER_PRECISION = 34
LEDGER_CONTEXT = Context(
    prec=LEDGER_PRECISION,
    Emax=LEDGER_PRECISION - 1,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)
# Wide enough to quantize any ledger value to OUTPUT_PRECISION and add two of them.
DISPLAY_CONTEXT = Context(prec=LEDGER_PRECISION + 8, traps=[InvalidOperation, DivisionByZero, Overflow])


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeStatus(Enum):
    CLEAN = "clean"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_STATE = "invalid_state"
    MISSING_AMOUNT = "missing_amount"
    INVALID_AMOUNT = "invalid_amount"
    PRECISION_EXCEEDED = "precision_exceeded"

    @property
    def ok(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    # The mutators below raise decimal.Inexact (or Overflow) when the new
    # balances cannot be held exactly, and leave the account unchanged.

    def _update(self, available: Decimal, held: Decimal) -> None:
        LEDGER_CONTEXT.add(available, held)
        self.available = available
        self.held = held

    def credit(self, amount: Decimal) -> None:
        self._update(LEDGER_CONTEXT.add(self.available, amount), self.held)

    def debit(self, amount: Decimal) -> None:
        self._update(LEDGER_CONTEXT.subtract(self.available, amount), self.held)

    def hold(self, amount: Decimal) -> None:
        self._update(LEDGER_CONTEXT.subtract(self.available, amount), LEDGER_CONTEXT.add(self.held, amount))

    def release_hold(self, amount: Decimal) -> None:
        self._update(LEDGER_CONTEXT.add(self.available, amount), LEDGER_CONTEXT.subtract(self.held, amount))

    def remove_held(self, amount: Decimal) -> None:
        self._update(self.available, LEDGER_CONTEXT.subtract(self.held, amount))


@dataclass
class DisputableTransaction:
    """A recorded deposit that may go through the dispute lifecycle."""

    transaction_id: int
    client_id: int
    amount: Decimal
    status: DisputeStatus = DisputeStatus.CLEAN


def round_amount(value: Decimal) -> Decimal:
    """Round to four fractional digits, never returning negative zero."""
    rounded = value.quantize(OUTPUT_PRECISION, context=DISPLAY_CONTEXT)
    if rounded.is_zero():
        return rounded.copy_abs()
    return rounded


@dataclass(frozen=True)
class AccountSummary:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSummary":
        # total is summed from the rounded parts so every row adds up as printed
        available = round_amount(account.available)
        held = round_amount(account.held)
        return cls(
            client_id=account.client_id,
            available=available,
            held=held,
            total=round_amount(DISPLAY_CONTEXT.add(available, held)),
            locked=account.locked,
        )


class ProcessingStats:
    """Counters for tracking processing outcomes over a run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.failures: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        if result.ok:
            self.processed += 1
        else:
            self.failed += 1
            self.failures[result] += 1

    def __str__(self) -> str:
        text = f"Processed: {self.processed}, Failed: {self.failed}"
        if self.failures:
            breakdown = ", ".join(f"{result.value}={count}" for result, count in sorted(self.failures.items(), key=lambda item: item[0].value))
            text += f" ({breakdown})"
        return text
