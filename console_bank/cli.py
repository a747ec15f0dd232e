"""
Console Application Module

Numbered-menu console for the single-account banking demo. All customer
input passes through the validators before reaching the account, PIN retry
limits are tracked here (the account itself keeps no attempt state), and
every account result is turned into a one-line message.

Input and output are injected callables so the whole dialogue can be driven
from tests.
"""

from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple

from .accounts import FailureReason, OperationResult
from .config import BankConfig, get_config
from .logging_config import get_logger, log_action, setup_logging
from .reporting import render_account_details, render_dashboard_header, render_statement
from .session import BankSession, SessionError
from .validation import (
    AccountOpeningRequest,
    InputValidationError,
    parse_amount,
    parse_whole_number,
    validate_aadhaar,
    validate_mobile,
    validate_pan,
    validate_pin,
    validate_required_text,
)


logger = get_logger("bharat_bank.cli")

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]

FAILURE_MESSAGES: Dict[Tuple[str, FailureReason], str] = {
    ("deposit", FailureReason.NON_POSITIVE_AMOUNT): "Deposit amount must be positive.",
    ("deposit", FailureReason.AMOUNT_TOO_LARGE): "Deposit amount is too large.",
    ("withdraw", FailureReason.NON_POSITIVE_AMOUNT): "Withdrawal amount must be positive.",
    ("withdraw", FailureReason.INSUFFICIENT_FUNDS): "Insufficient funds. Withdrawal failed.",
    ("transfer", FailureReason.NON_POSITIVE_AMOUNT): "Transfer amount must be positive.",
    ("transfer", FailureReason.INSUFFICIENT_FUNDS): "Insufficient funds for transfer.",
}

SUCCESS_MESSAGES: Dict[str, str] = {
    "deposit": "Amount deposited successfully.",
    "withdraw": "Amount withdrawn successfully.",
    "transfer": "Funds transferred successfully.",
}


class ConsoleApp:
    """
    Interactive console bound to one BankSession
    """

    def __init__(
        self,
        session: Optional[BankSession] = None,
        input_func: InputFunc = input,
        output_func: OutputFunc = print
    ):
        self.session = session or BankSession()
        self._input = input_func
        self._output = output_func

    @property
    def config(self) -> BankConfig:
        return self.session.config

    # --- Entry point ---

    def run(self) -> None:
        """Show the welcome banner and run the main menu until the customer exits"""
        self._welcome()
        try:
            self.main_menu()
        except EOFError:
            # Input closed: treat like choosing Exit
            self._say("")
        self._say(f"\nThank you for banking with {self.config.bank_name}. Have a great day!")

    def _welcome(self) -> None:
        self._say(
            "*" * 50,
            f"*{('Welcome to ' + self.config.bank_name).center(48)}*",
            "*" * 50,
        )

    # --- Menus ---

    def main_menu(self) -> None:
        while True:
            self._say(
                "\n--- Main Menu ---",
                "1. Create New Account",
                "2. Login to Existing Account",
                "3. Exit Application",
            )
            choice = self._read_choice()
            if choice == 1:
                self.create_account()
            elif choice == 2:
                self.login()
            elif choice == 3:
                return
            else:
                self._say("Invalid option. Please try again.")

    def dashboard(self) -> None:
        while self.session.logged_in:
            account = self.session.active_account
            self._say("")
            self._say(*render_dashboard_header(account, self.config.bank_name))
            self._say(
                "1. Deposit Funds",
                "2. Withdraw Funds",
                "3. Fund Transfer",
                "4. View Account Statement",
                "5. View Account Details",
                "6. Edit Profile",
                "7. Logout",
            )
            choice = self._read_choice()
            if choice == 1:
                self.deposit()
            elif choice == 2:
                self.withdraw()
            elif choice == 3:
                self.transfer()
            elif choice == 4:
                self.view_statement()
            elif choice == 5:
                self.view_account_details()
            elif choice == 6:
                self.edit_profile()
            elif choice == 7:
                self.session.logout()
                self._say("\nYou have been logged out successfully.")
            else:
                self._say("Invalid option. Please try again.")

    # --- Account creation and login ---

    def create_account(self) -> None:
        self._say("\n--- Create New Account ---")
        if self.session.has_account:
            self._say(
                "An account was already created in this session.",
                "This demo supports one account per session. "
                "Please restart to create a new one, or login if you remember credentials.",
            )
            return

        name = self._ask_valid("Enter Full Name: ", validate_required_text)
        mobile = self._ask_valid("Enter 10-digit Mobile Number: ", validate_mobile)
        pan = self._ask_valid("Enter PAN Card Number (e.g., ABCDE1234F): ", validate_pan)
        aadhaar = self._ask_valid("Enter 12-digit Aadhaar Card Number: ", validate_aadhaar)
        address = self._ask_valid("Enter Full Address: ", validate_required_text)
        pin = self._ask_valid("Create a 4-digit numeric PIN: ", validate_pin)
        initial_deposit = self._read_opening_deposit()

        request = AccountOpeningRequest(
            holder_name=name,
            mobile_number=mobile,
            pan_number=pan,
            aadhaar_number=aadhaar,
            address=address,
            pin=pin,
            initial_deposit=initial_deposit
        )
        try:
            account = self.session.open_account(request)
        except (SessionError, ValueError) as e:
            self._say(str(e))
            return

        self._say(
            f"\nAccount created successfully for {account.holder_name}!",
            f"Your Account Number: {account.account_number}",
            f"IFSC Code: {self.config.ifsc_code}",
            "Please login to access your account services.",
        )

    def _read_opening_deposit(self) -> Decimal:
        minimum = self.config.min_initial_deposit_money
        prompt = f"Enter Initial Deposit Amount (Min {minimum.format_plain()}): "
        while True:
            amount = self._ask_valid(prompt, parse_amount)
            if amount >= minimum.amount:
                return amount
            self._say(f"Initial deposit must be at least {minimum.format_plain()}.")

    def login(self) -> None:
        self._say("\n--- Account Login ---")
        if not self.session.has_account:
            self._say("No account has been created in this session. Please create an account first.")
            return

        max_attempts = self.config.max_login_attempts
        for attempt in range(1, max_attempts + 1):
            self._say(f"\nLogin Attempt {attempt} of {max_attempts}")
            mobile = self._ask_valid("Enter your registered Mobile Number: ", validate_mobile)
            pin = self._ask_valid("Enter your 4-digit PIN: ", validate_pin)

            if self.session.login(mobile, pin):
                self._say(f"\nLogin Successful! Welcome, {self.session.active_account.holder_name}.")
                self.dashboard()
                return
            self._say("Invalid mobile number or PIN. Please try again.")

        log_action(logger, "warning", "Login attempts exhausted", action="login_lockout")
        self._say("\nMaximum login attempts reached. Account access locked temporarily for security.")

    # --- Balance operations ---

    def deposit(self) -> None:
        self._say("\n--- Deposit Funds ---")
        amount = self._ask_valid("Enter amount to deposit: ", parse_amount)
        result = self.session.active_account.deposit(amount, "Self Deposit")
        self._report("deposit", result)

    def withdraw(self) -> None:
        self._say("\n--- Withdraw Funds ---")
        if not self.verify_pin("withdrawal"):
            return

        amount = self._ask_valid("Enter amount to withdraw: ", parse_amount)
        result = self.session.active_account.withdraw(amount, "ATM Withdrawal")
        self._report("withdraw", result)

    def transfer(self) -> None:
        self._say("\n--- Fund Transfer ---")
        if not self.verify_pin("fund transfer"):
            return

        recipient_account = self._ask_valid("Enter Recipient's Account Number: ", validate_required_text)
        recipient_name = self._ask_valid("Enter Recipient's Name (for remarks): ", validate_required_text)
        amount = self._ask_valid("Enter amount to transfer: ", parse_amount)
        remarks = self._input("Enter Remarks/Reason for transfer (optional): ").strip()
        if not remarks:
            remarks = f"Transfer to {recipient_name}"

        result = self.session.active_account.transfer_funds(
            amount, f"{recipient_account} ({recipient_name})", remarks
        )
        self._report("transfer", result)

    def _report(self, operation: str, result: OperationResult) -> None:
        if result.success:
            self._say(
                f"{SUCCESS_MESSAGES[operation]} Current Balance: {result.balance.format_plain()}"
            )
        else:
            self._say(FAILURE_MESSAGES[(operation, result.reason)])

    # --- Information screens ---

    def view_statement(self) -> None:
        self._say("\n--- Account Statement ---")
        self._say(*render_statement(self.session.active_account))

    def view_account_details(self) -> None:
        self._say("\n--- Account Details ---")
        self._say(*render_account_details(
            self.session.active_account, self.config.bank_name, self.config.ifsc_code
        ))

    # --- Profile editing ---

    def edit_profile(self) -> None:
        account = self.session.active_account
        while True:
            self._say(
                "\n--- Edit Profile ---",
                "1. Update Account Holder Name",
                "2. Update Mobile Number",
                "3. Update Address",
                "4. Change PIN",
                "5. Back to Dashboard",
            )
            choice = self._read_choice()
            if choice == 1:
                if self.verify_pin("updating name"):
                    account.set_name(self._ask_valid("Enter new Account Holder Name: ", validate_required_text))
                    self._say("Account holder name updated successfully.")
            elif choice == 2:
                if self.verify_pin("updating mobile number"):
                    account.set_mobile(self._ask_valid("Enter new 10-digit Mobile Number: ", validate_mobile))
                    self._say("Mobile number updated successfully.")
            elif choice == 3:
                if self.verify_pin("updating address"):
                    account.set_address(self._ask_valid("Enter new Address: ", validate_required_text))
                    self._say("Address updated successfully.")
            elif choice == 4:
                self.change_pin()
            elif choice == 5:
                return
            else:
                self._say("Invalid option. Please try again.")

    def change_pin(self) -> None:
        account = self.session.active_account
        self._say("\n--- Change PIN ---")

        current = self._ask_valid("Enter current 4-digit PIN: ", validate_pin)
        if not account.validate_pin(current):
            self._say("Incorrect current PIN. PIN change aborted.")
            return

        new_pin = self._ask_valid("Enter new 4-digit numeric PIN: ", validate_pin)
        confirmation = self._ask_valid("Confirm new 4-digit numeric PIN: ", validate_pin)
        if new_pin != confirmation:
            self._say("New PINs do not match. PIN change aborted.")
            return

        account.set_pin(new_pin)
        self._say("PIN changed successfully.")

    def verify_pin(self, operation_name: str) -> bool:
        """
        Re-verify the PIN before a sensitive operation

        Allows ``max_pin_attempts`` tries; the count lives only for this call.
        """
        account = self.session.active_account
        max_attempts = self.config.max_pin_attempts
        self._say(f"PIN verification required for {operation_name}.")

        for attempt in range(1, max_attempts + 1):
            pin = self._ask_valid(
                f"Enter your 4-digit PIN (Attempt {attempt}/{max_attempts}): ", validate_pin
            )
            if account.validate_pin(pin):
                return True
            self._say("Incorrect PIN.")

        log_action(
            logger, "warning", "PIN verification attempts exhausted",
            action="pin_lockout", resource=account.account_number,
            extra={"operation": operation_name}
        )
        self._say(f"Maximum PIN verification attempts reached. {operation_name} cancelled for security.")
        return False

    # --- Prompt helpers ---

    def _say(self, *lines: str) -> None:
        for line in lines:
            self._output(line)

    def _ask_valid(self, prompt: str, validator: Callable[[str], object]):
        """Prompt until the validator accepts the answer"""
        while True:
            raw = self._input(prompt)
            try:
                return validator(raw)
            except InputValidationError as e:
                self._say(str(e))

    def _read_choice(self) -> int:
        return self._ask_valid("Choose an option: ", parse_whole_number)


def main() -> int:
    """
    Run the console application

    Returns:
        Process exit code
    """
    settings = get_config()
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file
    )

    app = ConsoleApp(BankSession(config=settings))
    try:
        app.run()
    except KeyboardInterrupt:
        print(f"\n\nThank you for banking with {settings.bank_name}. Have a great day!")
    except Exception as e:
        logger.exception("Console session terminated unexpectedly")
        print(f"Error: {e}")
        return 1
    return 0
