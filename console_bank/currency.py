"""
Currency and Money Module

Fixed-point money representation for the account ledger. All balances and
amounts are Decimal values rounded to the currency's minor unit.
NEVER uses float for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from dataclasses import dataclass
from enum import Enum
import re

# Set global decimal context for financial precision
getcontext().prec = 28

_CURRENCY_PREFIX = re.compile(r'^(INR|Rs\.?)\s*', re.IGNORECASE)


class AmountOutOfRangeError(ValueError):
    """Raised when an amount has too many digits to hold at paise precision"""

    def __init__(self, amount: Decimal):
        self.amount = amount
        super().__init__(f"Money amount {amount} is too large to represent")


class Currency(Enum):
    """ISO 4217 currency code with precision info"""
    INR = ("INR", 2)  # Indian Rupee, 2 decimal places (paise)

    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision


@dataclass(frozen=True)
class Money:
    """
    Immutable money representation with currency and proper precision.
    All monetary values MUST use this class or raw Decimal.
    """
    amount: Decimal
    currency: Currency = Currency.INR

    def __post_init__(self):
        if isinstance(self.amount, float):
            # Go through str() so 0.1 stays 0.1 instead of its binary expansion
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        elif not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, 'amount', Decimal(self.amount))
            except (InvalidOperation, TypeError):
                raise ValueError(f"Cannot use {self.amount!r} as a money amount")

        if not self.amount.is_finite():
            raise ValueError("Money amount must be a finite number")

        # Round to currency precision
        try:
            rounded = self.amount.quantize(
                Decimal('0.1') ** self.currency.precision,
                rounding=ROUND_HALF_UP
            )
        except InvalidOperation:
            raise AmountOutOfRangeError(self.amount) from None
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def zero(cls, currency: Currency = Currency.INR) -> 'Money':
        """Zero amount in the given currency"""
        return cls(Decimal('0'), currency)

    def _check_currency(self, other: 'Money', verb: str) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot {verb} {self.currency.code} and {other.currency.code}")

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "subtract")
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self) -> 'Money':
        return Money(-self.amount, self.currency)

    def __abs__(self) -> 'Money':
        return Money(abs(self.amount), self.currency)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount and self.currency == other.currency

    def __hash__(self) -> int:
        return hash((self.amount, self.currency))

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')

    def format_plain(self) -> str:
        """Amount only, fixed to the currency precision (e.g. '1500.00')"""
        return f"{self.amount:.{self.currency.precision}f}"

    def to_string(self) -> str:
        """Format for display"""
        return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Accepts an INR/Rs/rupee-sign prefix, surrounding whitespace and thousands
    separators in both western (1,500.00) and Indian (1,00,000.00) grouping.

    Args:
        value: String representation of number

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    # Remove currency markers and whitespace
    clean_value = _CURRENCY_PREFIX.sub('', value.strip())
    clean_value = re.sub(r'[\s₹]', '', clean_value)

    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - comma is the thousands separator
        clean_value = clean_value.replace(',', '')
    elif clean_value.count(',') == 1:
        parts = clean_value.split(',')
        if len(parts[1]) <= 2:  # Decimal comma, e.g. "10,50"
            clean_value = clean_value.replace(',', '.')
        else:
            clean_value = clean_value.replace(',', '')
    elif clean_value.count(',') > 1:
        clean_value = clean_value.replace(',', '')

    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if not result.is_finite():
        raise ValueError(f"Cannot convert '{value}' to Decimal")
    return result
