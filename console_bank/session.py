"""
Console Session Module

Explicit state for one run of the console application: which account was
created in this session and whether the customer is currently logged in.
Handlers receive this object instead of reaching for module globals.
"""

from dataclasses import dataclass, field
from typing import Optional

from .accounts import Account, AccountNumberGenerator, default_number_generator
from .config import BankConfig, get_config
from .logging_config import get_logger, log_action
from .validation import AccountOpeningRequest


logger = get_logger("bharat_bank.session")


class SessionError(Exception):
    """Raised when an action is not allowed in the current session state"""


@dataclass
class BankSession:
    """
    Single-account session context

    The demo supports one account per session. ``account`` is set once by
    ``open_account`` and kept until the process ends; ``logged_in`` tracks
    whether the dashboard is unlocked.
    """
    config: BankConfig = field(default_factory=get_config)
    number_generator: AccountNumberGenerator = field(default=default_number_generator)
    account: Optional[Account] = None
    logged_in: bool = False

    @property
    def has_account(self) -> bool:
        return self.account is not None

    @property
    def active_account(self) -> Account:
        """The logged-in account"""
        if self.account is None or not self.logged_in:
            raise SessionError("No user is currently logged in.")
        return self.account

    def open_account(self, request: AccountOpeningRequest) -> Account:
        """
        Open the session's account

        Raises:
            SessionError: If an account was already created in this session
        """
        if self.account is not None:
            raise SessionError(
                "An account was already created in this session. "
                "This demo supports one account per session."
            )
        self.account = request.open_account(self.number_generator)
        return self.account

    def login(self, mobile_number: str, pin: str) -> bool:
        """Check credentials; on success the session becomes logged in"""
        account = self.account
        if account is not None and account.mobile_number == mobile_number and account.validate_pin(pin):
            self.logged_in = True
            log_action(logger, "info", "Login succeeded", action="login", resource=account.account_number)
            return True

        log_action(logger, "warning", "Login failed", action="login")
        return False

    def logout(self) -> None:
        if self.account is not None and self.logged_in:
            log_action(logger, "info", "Logged out", action="logout", resource=self.account.account_number)
        self.logged_in = False
