"""
Statement Reporting Module

Renders the account statement and account details screens. Works only from
the account's public views (history snapshot, identity, balance), never from
its internals.
"""

from typing import List

from .accounts import Account
from .ledger import LedgerEntry


RULE = "-" * 107
STATEMENT_HEADER = "| {:<19} | {:<22} | {:<10} | {:<12} | {}".format(
    "Timestamp", "Transaction Type", "Amount (INR)", "Balance (INR)", "Remarks"
)
EMPTY_STATEMENT_ROW = "| No transactions found.".ljust(106) + "|"


def format_entry_row(entry: LedgerEntry) -> str:
    """One statement row: timestamp, kind, amount, resulting balance, remarks"""
    return "| {:<19} | {:<22} | {:>10.2f} | {:>12.2f} | {}".format(
        entry.formatted_timestamp(),
        entry.kind.description,
        entry.amount.amount,
        entry.balance_after.amount,
        entry.remarks
    )


def render_statement(account: Account) -> List[str]:
    """Full statement screen as a list of lines"""
    currency_code = account.balance.currency.code
    lines = [
        "Account Holder: " + account.holder_name,
        "Account Number: " + account.account_number,
        RULE,
        STATEMENT_HEADER,
        RULE,
    ]

    history = account.history()
    if history:
        lines.extend(format_entry_row(entry) for entry in history)
    else:
        lines.append(EMPTY_STATEMENT_ROW)

    lines.append(RULE)
    lines.append(f"Current Balance: {account.balance.format_plain()} {currency_code}")
    return lines


def render_account_details(account: Account, bank_name: str, ifsc_code: str) -> List[str]:
    return [
        f"Bank Name:         {bank_name}",
        f"IFSC Code:         {ifsc_code}",
        f"Account Holder:    {account.holder_name}",
        f"Account Number:    {account.account_number}",
        f"Registered Mobile: {account.mobile_number}",
        f"PAN Card:          {account.pan_number}",
        f"Aadhaar Card:      {account.aadhaar_number}",
        f"Address:           {account.address}",
        f"Current Balance:   {account.balance.format_plain()} {account.balance.currency.code}",
    ]


def render_dashboard_header(account: Account, bank_name: str) -> List[str]:
    return [
        f"--- {account.holder_name}'s Dashboard ({bank_name}) ---",
        f"Account No: {account.account_number} | Balance: "
        f"{account.balance.format_plain()} {account.balance.currency.code}",
        "-" * 45,
    ]
