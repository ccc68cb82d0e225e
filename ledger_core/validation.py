"""
Transaction validation.

Checks run in a fixed order and the first violation is raised:

1. at least two entries
2. every entry's account exists
3. every entry's currency matches its account
4. a single currency across the transaction
5. at least one debit and one credit entry
6. debits equal credits
"""

from typing import TYPE_CHECKING

from .errors import NotFoundError, ValidationError, account_not_found
from .ledger import Direction

if TYPE_CHECKING:
    from .accounts import AccountStore
    from .transactions import Transaction


MIN_ENTRIES = 2


class TransactionValidator:
    """Enforces the structural and economic invariants of a transaction"""

    def __init__(self, account_store: "AccountStore"):
        self.account_store = account_store

    def validate(self, transaction: "Transaction") -> None:
        """
        Validate a transaction whose entries are fully resolved

        Raises:
            ValidationError: If a structural or balance rule is broken
            NotFoundError: If an entry references an unknown account
        """
        entries = transaction.entries

        if len(entries) < MIN_ENTRIES:
            raise ValidationError(f"Transaction must have at least {MIN_ENTRIES} entries")

        has_debit = False
        has_credit = False
        debit_sum = 0
        credit_sum = 0
        currencies = []

        for entry in entries:
            account = self.account_store.find_by_id(entry.account_id)
            if account is None:
                raise NotFoundError(account_not_found(entry.account_id))

            if entry.currency != account.currency:
                raise ValidationError(
                    f"Entry currency {entry.currency.code} does not match account currency "
                    f"{account.currency.code} for account {entry.account_id}"
                )

            if entry.currency.code not in currencies:
                currencies.append(entry.currency.code)

            if entry.direction == Direction.DEBIT:
                has_debit = True
                debit_sum += entry.amount
            else:
                has_credit = True
                credit_sum += entry.amount

        # Only fires when entries reference accounts held in different currencies
        if len(currencies) > 1:
            raise ValidationError(
                f"Transaction cannot mix currencies: {', '.join(currencies)}"
            )

        if not has_debit or not has_credit:
            raise ValidationError(
                "Transaction must have at least one debit and one credit entry"
            )

        if debit_sum != credit_sum:
            raise ValidationError(
                f"Transaction must be balanced: debits={debit_sum}, credits={credit_sum}"
            )
