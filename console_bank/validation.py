"""
Input Validation Module

Pydantic types for everything the console collects from the customer. Each
``validate_*`` helper returns the normalised value or raises
InputValidationError carrying a one-line message fit for the console.
"""

from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints, TypeAdapter, ValidationError

from .accounts import Account, AccountNumberGenerator
from .currency import decimal_from_string


class InputValidationError(ValueError):
    """Raised when console input does not match the expected format"""


def _upper(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


def _amount_text(value: Any) -> Any:
    if isinstance(value, str):
        return decimal_from_string(value)
    return value


RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
MobileNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[0-9]{10}$")]
AadhaarNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[0-9]{12}$")]
Pin = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[0-9]{4}$")]
# Case-insensitive on input, stored uppercase
PanNumber = Annotated[str, StringConstraints(pattern=r"^[A-Z]{5}[0-9]{4}[A-Z]$"), BeforeValidator(_upper)]
WholeNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[+-]?[0-9]+$")]
# Amounts this size or larger are refused at input; Money stays well inside Decimal precision
MAX_AMOUNT = Decimal("1000000000000000")
Amount = Annotated[Decimal, Field(gt=-MAX_AMOUNT, lt=MAX_AMOUNT), BeforeValidator(_amount_text)]

_required_text_adapter = TypeAdapter(RequiredText)
_mobile_adapter = TypeAdapter(MobileNumber)
_aadhaar_adapter = TypeAdapter(AadhaarNumber)
_pin_adapter = TypeAdapter(Pin)
_pan_adapter = TypeAdapter(PanNumber)
_whole_number_adapter = TypeAdapter(WholeNumber)
_amount_adapter = TypeAdapter(Amount)


def _validate(adapter: TypeAdapter, value: Any, message: str) -> Any:
    try:
        return adapter.validate_python(value)
    except (ValidationError, ValueError):
        raise InputValidationError(message) from None


def validate_required_text(value: str) -> str:
    """Any non-blank text, trimmed"""
    return _validate(_required_text_adapter, value, "Input cannot be empty. Please try again.")


def validate_mobile(value: str) -> str:
    return _validate(
        _mobile_adapter, value,
        "Invalid mobile number format. Please enter a 10-digit number."
    )


def validate_pan(value: str) -> str:
    return _validate(
        _pan_adapter, value,
        "Invalid PAN format (e.g., ABCDE1234F). Please try again."
    )


def validate_aadhaar(value: str) -> str:
    return _validate(
        _aadhaar_adapter, value,
        "Invalid Aadhaar format. Please enter a 12-digit numeric Aadhaar."
    )


def validate_pin(value: str) -> str:
    """4 digits, returned as a string so leading zeros survive"""
    return _validate(
        _pin_adapter, value,
        "Invalid PIN format. Please enter a 4-digit numeric PIN."
    )


def parse_whole_number(value: str) -> int:
    text = _validate(
        _whole_number_adapter, value,
        "Invalid input. Please enter a whole number."
    )
    return int(text)


def parse_amount(value: str) -> Decimal:
    """Parse a typed amount at whatever precision it was entered"""
    try:
        return _amount_adapter.validate_python(value)
    except ValidationError as e:
        if e.errors()[0]['type'] in ("less_than", "greater_than"):
            raise InputValidationError("Amount is too large. Please enter a smaller amount.") from None
        raise InputValidationError(
            "Invalid input. Please enter a valid number (e.g., 100.50)."
        ) from None


class AccountOpeningRequest(BaseModel):
    """Everything needed to open an account, validated as a whole"""
    holder_name: RequiredText
    mobile_number: MobileNumber
    pan_number: PanNumber
    aadhaar_number: AadhaarNumber
    address: RequiredText
    pin: Pin
    initial_deposit: Amount

    def open_account(self, number_generator: Optional[AccountNumberGenerator] = None) -> Account:
        """Open the account described by this request"""
        return Account.open(
            holder_name=self.holder_name,
            mobile_number=self.mobile_number,
            pan_number=self.pan_number,
            aadhaar_number=self.aadhaar_number,
            address=self.address,
            pin=self.pin,
            initial_deposit=self.initial_deposit,
            number_generator=number_generator
        )
