"""
Double-Entry Ledger Primitives

Polarity shared by accounts and entries, and the rule that turns an entry
into a signed balance effect on its account.
"""

from enum import Enum


class Direction(Enum):
    """Debit or credit polarity"""
    DEBIT = "debit"
    CREDIT = "credit"

    @classmethod
    def parse(cls, value) -> "Direction":
        """
        Parse a direction from its wire value (case-insensitive)

        Raises:
            ValueError: If the value is neither debit nor credit
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for direction in cls:
                if direction.value == normalized:
                    return direction
        raise ValueError(f"Invalid direction: {value}")


def signed_amount(entry_direction: Direction, account_direction: Direction, amount: int) -> int:
    """
    Signed effect of an entry on an account balance

    An entry on the account's normal side increases the balance, an entry
    on the opposite side decreases it.
    """
    if entry_direction == account_direction:
        return amount
    return -amount
