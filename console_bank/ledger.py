"""
Account Ledger Module

Immutable ledger entries for a single account. Every balance-affecting
event produces exactly one entry, entries are never modified or removed,
and each entry is hash-chained to its predecessor with SHA-256 so that any
tampering with the history is detectable.
"""

import hashlib
import json
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence
from enum import Enum
import uuid

from .currency import Money


STATEMENT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class EntryKind(Enum):
    """Closed set of ledger entry kinds"""
    ACCOUNT_OPENING = ("account_opening", "Account Opening", False)
    DEPOSIT = ("deposit", "Deposit", False)
    WITHDRAWAL = ("withdrawal", "Withdrawal", True)
    FUND_TRANSFER_DEBIT = ("fund_transfer_debit", "Fund Transfer (Dr)", True)
    FUND_TRANSFER_CREDIT = ("fund_transfer_credit", "Fund Transfer (Cr)", False)  # Reserved for incoming transfers

    def __init__(self, code: str, description: str, is_debit: bool):
        self.code = code
        self.description = description
        self.is_debit = is_debit

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class LedgerEntry:
    """
    One immutable fact in an account's history.

    ``amount`` is always the unsigned magnitude; the direction comes from
    ``kind``. ``balance_after`` is the account balance once this entry has
    been applied.
    """
    timestamp: datetime
    kind: EntryKind
    amount: Money
    balance_after: Money
    remarks: str
    previous_hash: str = ""
    current_hash: str = ""
    entry_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.amount.is_negative():
            raise ValueError("Ledger entry amount must not be negative")
        if self.amount.currency != self.balance_after.currency:
            raise ValueError("Entry amount and resulting balance must use same currency")

    @classmethod
    def create(
        cls,
        kind: EntryKind,
        amount: Money,
        balance_after: Money,
        remarks: str,
        previous_hash: str = ""
    ) -> 'LedgerEntry':
        """
        Build a new entry stamped with the current wall-clock time

        The timestamp is read once here and never recomputed. The hash is
        calculated before the frozen instance is built so the entry is
        complete from the moment it exists.
        """
        timestamp = datetime.now().astimezone()
        entry_id = str(uuid.uuid4())
        current_hash = _hash_fields(
            entry_id, timestamp, kind, amount, balance_after, remarks, previous_hash
        )
        return cls(
            timestamp=timestamp,
            kind=kind,
            amount=amount,
            balance_after=balance_after,
            remarks=remarks,
            previous_hash=previous_hash,
            current_hash=current_hash,
            entry_id=entry_id
        )

    @property
    def signed_amount(self) -> Money:
        """Amount with sign applied: debits negative, everything else positive"""
        return -self.amount if self.kind.is_debit else self.amount

    def calculate_hash(self) -> str:
        """SHA-256 over every field except current_hash"""
        return _hash_fields(
            self.entry_id, self.timestamp, self.kind, self.amount,
            self.balance_after, self.remarks, self.previous_hash
        )

    def verify_hash(self) -> bool:
        """Verify that the stored hash matches the entry contents"""
        return self.current_hash == self.calculate_hash()

    def formatted_timestamp(self) -> str:
        return self.timestamp.strftime(STATEMENT_TIMESTAMP_FORMAT)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view of the entry"""
        return {
            'entry_id': self.entry_id,
            'timestamp': self.timestamp.isoformat(),
            'kind': self.kind.code,
            'amount': str(self.amount.amount),
            'balance_after': str(self.balance_after.amount),
            'currency': self.amount.currency.code,
            'remarks': self.remarks,
            'previous_hash': self.previous_hash,
            'current_hash': self.current_hash
        }


def _hash_fields(
    entry_id: str,
    timestamp: datetime,
    kind: EntryKind,
    amount: Money,
    balance_after: Money,
    remarks: str,
    previous_hash: str
) -> str:
    hash_data = {
        'entry_id': entry_id,
        'timestamp': timestamp.isoformat(),
        'kind': kind.code,
        'amount': str(amount.amount),
        'balance_after': str(balance_after.amount),
        'currency': amount.currency.code,
        'remarks': remarks,
        'previous_hash': previous_hash
    }

    # Create deterministic JSON string
    json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'))
    return hashlib.sha256(json_data.encode('utf-8')).hexdigest()


def verify_entries(entries: Sequence[LedgerEntry], opening_balance: Money) -> Dict[str, Any]:
    """
    Verify the integrity of a ledger

    Checks each entry's own hash, the previous-hash chain, and that every
    recorded resulting balance equals the running total of signed amounts.

    Args:
        entries: Entries in creation order
        opening_balance: Balance before the first entry

    Returns:
        Dictionary with integrity check results
    """
    result: Dict[str, Any] = {
        'valid': True,
        'total_entries': len(entries),
        'hash_errors': [],
        'chain_breaks': [],
        'balance_mismatches': []
    }

    previous_hash = ""
    running_balance = opening_balance

    for i, entry in enumerate(entries):
        if not entry.verify_hash():
            result['valid'] = False
            result['hash_errors'].append({
                'entry_id': entry.entry_id,
                'position': i,
                'expected_hash': entry.calculate_hash(),
                'actual_hash': entry.current_hash
            })

        if entry.previous_hash != previous_hash:
            result['valid'] = False
            result['chain_breaks'].append({
                'entry_id': entry.entry_id,
                'position': i,
                'expected_previous_hash': previous_hash,
                'actual_previous_hash': entry.previous_hash
            })
        previous_hash = entry.current_hash

        running_balance = running_balance + entry.signed_amount
        if running_balance != entry.balance_after:
            result['valid'] = False
            result['balance_mismatches'].append({
                'entry_id': entry.entry_id,
                'position': i,
                'expected_balance': running_balance.format_plain(),
                'recorded_balance': entry.balance_after.format_plain()
            })

    return result


def replay_balance(entries: Sequence[LedgerEntry], opening_balance: Money) -> Money:
    """Opening balance plus the signed sum of all entries, in order"""
    total = opening_balance
    for entry in entries:
        total = total + entry.signed_amount
    return total
