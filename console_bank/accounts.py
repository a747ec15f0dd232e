"""
Account Management Module

The account aggregate: identity and profile fields, the security PIN, the
current balance, and the append-only ledger it produces. Every balance
change goes through deposit, withdraw or transfer_funds, each of which
either applies fully (balance change plus one ledger entry) or not at all.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from enum import Enum
import hmac
import threading

from .config import get_config
from .currency import AmountOutOfRangeError, Money
from .ledger import EntryKind, LedgerEntry, replay_balance, verify_entries
from .logging_config import get_logger, log_action


logger = get_logger("bharat_bank.accounts")

AmountLike = Union[Money, Decimal, int, str]


class FailureReason(Enum):
    """Why a balance operation was refused"""
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    AMOUNT_TOO_LARGE = "amount_too_large"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a balance operation

    On success ``entry`` is the ledger entry that was appended; on failure
    ``reason`` says why and nothing was changed. ``balance`` is the account
    balance after the call either way.
    """
    success: bool
    balance: Money
    reason: Optional[FailureReason] = None
    entry: Optional[LedgerEntry] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, entry: LedgerEntry) -> 'OperationResult':
        return cls(success=True, balance=entry.balance_after, entry=entry)

    @classmethod
    def failed(cls, reason: FailureReason, balance: Money) -> 'OperationResult':
        return cls(success=False, balance=balance, reason=reason)


class AccountNumberGenerator:
    """
    Hands out unique, strictly increasing account numbers

    Numbers are the prefix followed by the decimal counter value. The
    increment happens under a lock so concurrent callers never share a number.
    """

    def __init__(self, prefix: str = "BB", start: int = 100000000001):
        self.prefix = prefix
        self._next_value = start
        self._lock = threading.Lock()

    def next_number(self) -> str:
        """Reserve and return the next account number"""
        with self._lock:
            value = self._next_value
            self._next_value += 1
        return f"{self.prefix}{value}"

    @property
    def next_value(self) -> int:
        """Counter value the next call will use"""
        with self._lock:
            return self._next_value


def _build_default_generator() -> AccountNumberGenerator:
    settings = get_config()
    return AccountNumberGenerator(
        prefix=settings.account_number_prefix,
        start=settings.account_number_start
    )


# Process-wide generator, initialised once at import
default_number_generator = _build_default_generator()


def _to_money(amount: AmountLike) -> Money:
    if isinstance(amount, Money):
        return amount
    return Money(amount)


def _unrepresentable_debit(error: AmountOutOfRangeError) -> FailureReason:
    # Anything too large for Money is also larger than any balance
    if error.amount < 0:
        return FailureReason.NON_POSITIVE_AMOUNT
    return FailureReason.INSUFFICIENT_FUNDS


class Account:
    """
    A single customer bank account with its ledger
    """

    OPENING_REMARKS = "Account Opening Deposit"

    def __init__(
        self,
        account_number: str,
        holder_name: str,
        mobile_number: str,
        pan_number: str,
        aadhaar_number: str,
        address: str,
        pin: str
    ):
        self._account_number = account_number
        self._holder_name = holder_name
        self._mobile_number = mobile_number
        self._pan_number = pan_number
        self._aadhaar_number = aadhaar_number
        self._address = address
        self._pin = pin
        self._opening_balance = Money.zero()
        self._balance = self._opening_balance
        self._entries: List[LedgerEntry] = []

    @classmethod
    def open(
        cls,
        holder_name: str,
        mobile_number: str,
        pan_number: str,
        aadhaar_number: str,
        address: str,
        pin: str,
        initial_deposit: AmountLike,
        number_generator: Optional[AccountNumberGenerator] = None
    ) -> 'Account':
        """
        Open a new account funded by an opening deposit

        The opening deposit is recorded as the first ledger entry with kind
        ACCOUNT_OPENING. Minimum-deposit policy belongs to the caller; this
        only requires the deposit to be positive.

        Args:
            holder_name: Account holder's full name
            mobile_number: 10-digit mobile number
            pan_number: PAN card number, already uppercased
            aadhaar_number: 12-digit Aadhaar number
            address: Residential address
            pin: 4-digit PIN as a string
            initial_deposit: Opening deposit amount
            number_generator: Source of account numbers (process default if None)

        Returns:
            The new Account

        Raises:
            ValueError: If the opening deposit is not positive
        """
        deposit = _to_money(initial_deposit)
        if not deposit.is_positive():
            raise ValueError(
                f"Opening deposit must be positive, got {deposit.format_plain()}"
            )

        generator = number_generator or default_number_generator
        account = cls(
            account_number=generator.next_number(),
            holder_name=holder_name,
            mobile_number=mobile_number,
            pan_number=pan_number,
            aadhaar_number=aadhaar_number,
            address=address,
            pin=pin
        )

        log_action(
            logger, "info", "Account opened",
            action="open", resource=account.account_number
        )
        account.deposit(deposit, cls.OPENING_REMARKS, EntryKind.ACCOUNT_OPENING)
        return account

    # --- Read-only views ---

    @property
    def account_number(self) -> str:
        return self._account_number

    @property
    def holder_name(self) -> str:
        return self._holder_name

    @property
    def mobile_number(self) -> str:
        return self._mobile_number

    @property
    def pan_number(self) -> str:
        return self._pan_number

    @property
    def aadhaar_number(self) -> str:
        return self._aadhaar_number

    @property
    def address(self) -> str:
        return self._address

    @property
    def balance(self) -> Money:
        return self._balance

    @property
    def opening_balance(self) -> Money:
        """Balance before the first ledger entry"""
        return self._opening_balance

    def history(self) -> List[LedgerEntry]:
        """Snapshot of the ledger; changing the returned list has no effect on the account"""
        return list(self._entries)

    # --- Profile updates (not ledgered) ---

    def set_name(self, holder_name: str) -> None:
        self._holder_name = holder_name
        self._log_profile_change("name")

    def set_mobile(self, mobile_number: str) -> None:
        self._mobile_number = mobile_number
        self._log_profile_change("mobile")

    def set_address(self, address: str) -> None:
        self._address = address
        self._log_profile_change("address")

    def set_pin(self, pin: str) -> None:
        self._pin = pin
        self._log_profile_change("pin")

    def validate_pin(self, candidate: str) -> bool:
        """Exact comparison against the stored PIN; keeps no attempt state"""
        return hmac.compare_digest(self._pin.encode('utf-8'), str(candidate).encode('utf-8'))

    # --- Balance operations ---

    def deposit(
        self,
        amount: AmountLike,
        remarks: str,
        kind: EntryKind = EntryKind.DEPOSIT
    ) -> OperationResult:
        """
        Credit the account

        Args:
            amount: Amount to deposit, must be positive
            remarks: Free-text description stored on the entry
            kind: Entry kind (DEPOSIT, or ACCOUNT_OPENING for the first deposit)

        Returns:
            OperationResult describing the outcome
        """
        try:
            money = _to_money(amount)
            new_balance = self._balance + money
        except AmountOutOfRangeError as e:
            reason = (FailureReason.NON_POSITIVE_AMOUNT if e.amount < 0
                      else FailureReason.AMOUNT_TOO_LARGE)
            return self._refuse("deposit", reason, str(e.amount))

        if not money.is_positive():
            return self._refuse("deposit", FailureReason.NON_POSITIVE_AMOUNT, money.format_plain())

        return self._record(kind, money, remarks, new_balance)

    def withdraw(self, amount: AmountLike, remarks: str) -> OperationResult:
        """
        Debit the account

        Refused without any change if the amount is not positive or exceeds
        the current balance.
        """
        try:
            money = _to_money(amount)
        except AmountOutOfRangeError as e:
            return self._refuse("withdraw", _unrepresentable_debit(e), str(e.amount))

        failure = self._check_debit(money)
        if failure:
            return self._refuse("withdraw", failure, money.format_plain())

        return self._record(EntryKind.WITHDRAWAL, money, remarks, self._balance - money)

    def transfer_funds(
        self,
        amount: AmountLike,
        recipient_descriptor: str,
        remarks: str
    ) -> OperationResult:
        """
        Send funds to another party (debit side only)

        Same checks as withdraw. The stored remarks are
        ``"To: <recipient>. <remarks>"``.
        """
        try:
            money = _to_money(amount)
        except AmountOutOfRangeError as e:
            return self._refuse("transfer", _unrepresentable_debit(e), str(e.amount))

        failure = self._check_debit(money)
        if failure:
            return self._refuse("transfer", failure, money.format_plain())

        full_remarks = f"To: {recipient_descriptor}. {remarks}"
        return self._record(
            EntryKind.FUND_TRANSFER_DEBIT, money, full_remarks, self._balance - money
        )

    # --- Integrity ---

    def verify_history(self) -> Dict[str, Any]:
        """
        Verify the ledger hash chain and the balance invariant

        Returns:
            Integrity report; ``valid`` is False if any entry was tampered
            with or the current balance differs from the replayed ledger
        """
        result = verify_entries(self._entries, self._opening_balance)
        replayed = replay_balance(self._entries, self._opening_balance)
        result['replayed_balance'] = replayed.format_plain()
        result['current_balance'] = self._balance.format_plain()
        if replayed != self._balance:
            result['valid'] = False
        return result

    def summary(self) -> str:
        return (
            f"Account Holder: {self._holder_name}, Account No: {self._account_number}, "
            f"Balance: {self._balance.format_plain()} {self._balance.currency.code}"
        )

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"Account(account_number={self._account_number!r}, balance={self._balance.format_plain()})"

    # --- Internals ---

    def _check_debit(self, money: Money) -> Optional[FailureReason]:
        if not money.is_positive():
            return FailureReason.NON_POSITIVE_AMOUNT
        if money > self._balance:
            return FailureReason.INSUFFICIENT_FUNDS
        return None

    def _record(
        self,
        kind: EntryKind,
        money: Money,
        remarks: str,
        new_balance: Money
    ) -> OperationResult:
        # Entry is built first so a failure leaves balance and ledger untouched
        previous_hash = self._entries[-1].current_hash if self._entries else ""
        entry = LedgerEntry.create(
            kind=kind,
            amount=money,
            balance_after=new_balance,
            remarks=remarks,
            previous_hash=previous_hash
        )
        self._entries.append(entry)
        self._balance = new_balance

        log_action(
            logger, "info", f"{kind.description} recorded",
            action=kind.code, resource=self._account_number,
            extra={
                "amount": money.format_plain(),
                "balance_after": self._balance.format_plain()
            }
        )
        return OperationResult.ok(entry)

    def _refuse(self, action: str, reason: FailureReason, amount_text: str) -> OperationResult:
        log_action(
            logger, "warning", f"{action.capitalize()} refused: {reason.value}",
            action=action, resource=self._account_number,
            extra={
                "amount": amount_text,
                "balance": self._balance.format_plain()
            }
        )
        return OperationResult.failed(reason, self._balance)

    def _log_profile_change(self, field_name: str) -> None:
        log_action(
            logger, "info", "Profile updated",
            action="profile_update", resource=self._account_number,
            extra={"field": field_name}
        )
