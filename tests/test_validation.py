"""
Test suite for validation module

Tests the console input validators and the account opening request model.
"""

import pytest
from decimal import Decimal

from console_bank.currency import Money
from console_bank.ledger import EntryKind
from console_bank.validation import (
    AccountOpeningRequest, InputValidationError,
    parse_amount, parse_whole_number, validate_aadhaar, validate_mobile,
    validate_pan, validate_pin, validate_required_text
)


class TestTextValidators:
    """Test identity field validators"""

    def test_required_text(self):
        assert validate_required_text("  Asha Rao ") == "Asha Rao"

        for blank in ["", "   ", "\t"]:
            with pytest.raises(InputValidationError, match="cannot be empty"):
                validate_required_text(blank)

    def test_mobile(self):
        assert validate_mobile("9876543210") == "9876543210"
        assert validate_mobile(" 9876543210 ") == "9876543210"

        for bad in ["987654321", "98765432100", "98765 43210", "98765abcde", "٩٨٧٦٥٤٣٢١٠"]:
            with pytest.raises(InputValidationError, match="10-digit"):
                validate_mobile(bad)

    def test_pan_is_uppercased(self):
        """Test PAN accepts lowercase input and stores it uppercased"""
        assert validate_pan("ABCDE1234F") == "ABCDE1234F"
        assert validate_pan("abcde1234f") == "ABCDE1234F"
        assert validate_pan(" abcde1234f ") == "ABCDE1234F"

    def test_invalid_pan(self):
        for bad in ["ABCD1234F", "ABCDE12345", "12345ABCDE", "ABCDE1234FF", ""]:
            with pytest.raises(InputValidationError, match="Invalid PAN format"):
                validate_pan(bad)

    def test_aadhaar(self):
        assert validate_aadhaar("123412341234") == "123412341234"

        for bad in ["12341234123", "1234 1234 1234", "12341234123a"]:
            with pytest.raises(InputValidationError, match="12-digit"):
                validate_aadhaar(bad)

    def test_pin_keeps_leading_zeros(self):
        assert validate_pin("0012") == "0012"
        assert validate_pin("0000") == "0000"

        for bad in ["123", "12345", "12a4", "", "-123"]:
            with pytest.raises(InputValidationError, match="4-digit"):
                validate_pin(bad)


class TestNumberParsing:
    """Test menu choice and amount parsing"""

    def test_whole_number(self):
        assert parse_whole_number("3") == 3
        assert parse_whole_number(" 12 ") == 12
        assert parse_whole_number("-1") == -1

        for bad in ["", "abc", "1.5", "2x"]:
            with pytest.raises(InputValidationError, match="whole number"):
                parse_whole_number(bad)

    def test_amount(self):
        """Test amounts keep the precision they were typed with"""
        assert parse_amount("100.50") == Decimal('100.50')
        assert parse_amount("1,500") == Decimal('1500')
        assert parse_amount("0.005") == Decimal('0.005')
        assert parse_amount("-20") == Decimal('-20')

    def test_invalid_amount(self):
        for bad in ["", "abc", "12..5", "NaN", "inf"]:
            with pytest.raises(InputValidationError, match="valid number"):
                parse_amount(bad)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_amount("abc")


class TestAccountOpeningRequest:
    """Test the validated account opening request"""

    def make_request(self, **overrides):
        data = {
            "holder_name": " Asha Rao ",
            "mobile_number": "9876543210",
            "pan_number": "abcde1234f",
            "aadhaar_number": "123412341234",
            "address": "12 MG Road, Pune",
            "pin": "0420",
            "initial_deposit": "1,000.00",
        }
        data.update(overrides)
        return AccountOpeningRequest(**data)

    def test_fields_are_normalised(self):
        request = self.make_request()

        assert request.holder_name == "Asha Rao"
        assert request.pan_number == "ABCDE1234F"
        assert request.pin == "0420"
        assert request.initial_deposit == Decimal('1000.00')

    def test_invalid_field_rejected(self):
        with pytest.raises(ValueError):
            self.make_request(mobile_number="12345")

        with pytest.raises(ValueError):
            self.make_request(pin="12")

    def test_open_account(self, number_generator):
        account = self.make_request(initial_deposit=Decimal('750')).open_account(number_generator)

        assert account.account_number == "BB100000000001"
        assert account.pan_number == "ABCDE1234F"
        assert account.balance == Money(Decimal('750.00'))
        assert account.history()[0].kind == EntryKind.ACCOUNT_OPENING
        assert account.validate_pin("0420")


class TestAmountBounds:
    """Test that typed amounts are bounded before reaching an account"""

    def test_huge_amount_rejected(self):
        for huge in ["1e30", "100000000000000000000000000", "-1e30", "1000000000000000"]:
            with pytest.raises(InputValidationError, match="too large"):
                parse_amount(huge)

    def test_largest_accepted_amount(self):
        assert parse_amount("999999999999999.99") == Decimal('999999999999999.99')

    def test_opening_request_bounded(self):
        with pytest.raises(ValueError):
            AccountOpeningRequest(
                holder_name="Asha Rao", mobile_number="9876543210",
                pan_number="ABCDE1234F", aadhaar_number="123412341234",
                address="12 MG Road, Pune", pin="0420", initial_deposit="1e30"
            )
