"""
Test suite for transaction validation

Each rule is exercised on its own, and the ordering of rules is checked
where more than one would fire.
"""

from datetime import datetime, timezone

import pytest

from ledger_core.accounts import Account, AccountStore
from ledger_core.currency import Currency
from ledger_core.errors import NotFoundError, ValidationError
from ledger_core.ledger import Direction
from ledger_core.storage import InMemoryStorage
from ledger_core.transactions import Transaction, TransactionEntry
from ledger_core.validation import TransactionValidator


DEBIT = Direction.DEBIT
CREDIT = Direction.CREDIT


def make_transaction(*legs):
    """Build a transaction from (account_id, direction, amount, currency) tuples"""
    entries = [
        TransactionEntry(
            id=f"e{index}", account_id=account_id, direction=direction,
            amount=amount, currency=currency
        )
        for index, (account_id, direction, amount, currency) in enumerate(legs)
    ]
    return Transaction(
        id="t1", name="", entries=entries, created_at=datetime.now(timezone.utc)
    )


class TestTransactionValidator:

    def setup_method(self):
        self.store = AccountStore(InMemoryStorage())
        for account_id, direction, currency in [
            ("cash", DEBIT, Currency.USD),
            ("revenue", CREDIT, Currency.USD),
            ("bank", DEBIT, Currency.USD),
            ("euro", DEBIT, Currency.EUR),
        ]:
            self.store.create(Account(
                id=account_id, name=account_id, direction=direction,
                balance=0, currency=currency
            ))
        self.validator = TransactionValidator(self.store)

    def test_valid_transaction(self):
        self.validator.validate(make_transaction(
            ("cash", DEBIT, 100, Currency.USD),
            ("revenue", CREDIT, 100, Currency.USD),
        ))

    def test_valid_multi_leg_transaction(self):
        """Test several legs balancing in aggregate"""
        self.validator.validate(make_transaction(
            ("cash", DEBIT, 60, Currency.USD),
            ("bank", DEBIT, 40, Currency.USD),
            ("revenue", CREDIT, 100, Currency.USD),
        ))

    def test_fewer_than_two_entries(self):
        with pytest.raises(ValidationError, match="at least 2 entries"):
            self.validator.validate(make_transaction(("cash", DEBIT, 100, Currency.USD)))

        with pytest.raises(ValidationError, match="at least 2 entries"):
            self.validator.validate(make_transaction())

    def test_missing_account_reports_first_missing(self):
        with pytest.raises(NotFoundError, match="Account not found: ghost-1"):
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.USD),
                ("ghost-1", CREDIT, 50, Currency.USD),
                ("ghost-2", CREDIT, 50, Currency.USD),
            ))

    def test_cardinality_checked_before_existence(self):
        with pytest.raises(ValidationError):
            self.validator.validate(make_transaction(("ghost", DEBIT, 100, Currency.USD)))

    def test_entry_currency_must_match_account(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.EUR),
                ("revenue", CREDIT, 100, Currency.USD),
            ))

        message = str(exc_info.value)
        assert "EUR" in message
        assert "USD" in message
        assert "cash" in message

    def test_mixed_currencies_across_accounts(self):
        """Test entries on accounts of different currencies are rejected"""
        with pytest.raises(ValidationError, match="cannot mix currencies: USD, EUR"):
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.USD),
                ("euro", CREDIT, 100, Currency.EUR),
            ))

    def test_requires_debit_and_credit(self):
        with pytest.raises(ValidationError, match="at least one debit and one credit"):
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.USD),
                ("bank", DEBIT, 100, Currency.USD),
            ))

        with pytest.raises(ValidationError, match="at least one debit and one credit"):
            self.validator.validate(make_transaction(
                ("cash", CREDIT, 100, Currency.USD),
                ("revenue", CREDIT, 100, Currency.USD),
            ))

    def test_unbalanced(self):
        with pytest.raises(ValidationError) as exc_info:
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.USD),
                ("revenue", CREDIT, 50, Currency.USD),
            ))

        message = str(exc_info.value)
        assert "balanced" in message
        assert "debits=100" in message
        assert "credits=50" in message

    def test_currency_checked_before_balance(self):
        with pytest.raises(ValidationError, match="does not match"):
            self.validator.validate(make_transaction(
                ("cash", DEBIT, 100, Currency.GBP),
                ("revenue", CREDIT, 1, Currency.USD),
            ))
