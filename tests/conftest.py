"""Pytest configuration and fixtures."""

import logging
from decimal import Decimal

import pytest

from console_bank.accounts import Account, AccountNumberGenerator


@pytest.fixture(autouse=True)
def restore_bank_logger():
    """Undo any handler changes a test makes to the application logger"""
    bank_logger = logging.getLogger("bharat_bank")
    handlers = bank_logger.handlers[:]
    level = bank_logger.level
    propagate = bank_logger.propagate
    yield
    for handler in bank_logger.handlers[:]:
        if handler not in handlers:
            bank_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in bank_logger.handlers:
            bank_logger.addHandler(handler)
    bank_logger.setLevel(level)
    bank_logger.propagate = propagate


@pytest.fixture
def number_generator() -> AccountNumberGenerator:
    """Fresh account-number generator so tests don't depend on each other"""
    return AccountNumberGenerator(prefix="BB", start=100000000001)


@pytest.fixture
def account(number_generator) -> Account:
    """Account opened with 1000.00"""
    return Account.open(
        holder_name="Asha Rao",
        mobile_number="9876543210",
        pan_number="ABCDE1234F",
        aadhaar_number="123412341234",
        address="12 MG Road, Pune",
        pin="0420",
        initial_deposit=Decimal("1000.00"),
        number_generator=number_generator
    )
