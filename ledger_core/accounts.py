"""
Account Management Module

Accounts carry a fixed polarity (debit-normal or credit-normal), a currency
and an integer balance in minor units. The store is permissive: updating an
unknown account is a no-op. The manager is strict and reports missing
accounts as NotFoundError before touching the store.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Any
import uuid

from .currency import Currency, DEFAULT_CURRENCY
from .errors import ConflictError, NotFoundError, ValidationError, account_not_found
from .ledger import Direction
from .logging_config import get_logger, log_action
from .storage import StorageInterface


@dataclass
class Account:
    """Ledger account"""
    id: str
    name: str
    direction: Direction
    balance: int
    currency: Currency

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "direction": self.direction.value,
            "balance": self.balance,
            "currency": self.currency.code,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            id=data["id"],
            name=data["name"],
            direction=Direction(data["direction"]),
            balance=int(data["balance"]),
            currency=Currency[data["currency"]],
        )


class AccountStore:
    """Accounts keyed by id"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "accounts"

    def create(self, account: Account) -> Account:
        """
        Insert a new account

        Raises:
            ConflictError: If an account with the same id already exists
        """
        with self.storage.atomic():
            if self.storage.exists(self.table_name, account.id):
                raise ConflictError(f"Account with id {account.id} already exists")
            self.storage.save(self.table_name, account.id, account.to_dict())
        return account

    def find_by_id(self, account_id: str) -> Optional[Account]:
        data = self.storage.load(self.table_name, account_id)
        if data is None:
            return None
        return Account.from_dict(data)

    def update(self, account_id: str, **fields) -> None:
        """Merge fields into an existing account; unknown ids are ignored"""
        with self.storage.atomic():
            data = self.storage.load(self.table_name, account_id)
            if data is None:
                return
            merged = Account.from_dict(data)
            for key, value in fields.items():
                if not hasattr(merged, key):
                    raise AttributeError(f"Account has no field '{key}'")
                setattr(merged, key, value)
            self.storage.save(self.table_name, account_id, merged.to_dict())

    def get_all(self) -> List[Account]:
        return [Account.from_dict(data) for data in self.storage.load_all(self.table_name)]

    def clear(self) -> None:
        self.storage.clear_table(self.table_name)


class AccountManager:
    """
    Account service: creation, lookup and balance updates
    """

    def __init__(
        self,
        account_store: AccountStore,
        default_currency: Currency = DEFAULT_CURRENCY,
        audit_logging: bool = True
    ):
        self.account_store = account_store
        self.default_currency = default_currency
        self.logger = get_logger("ledger.accounts")
        self._log_level = "info" if audit_logging else "debug"

    def create_account(
        self,
        direction: Direction,
        account_id: Optional[str] = None,
        name: Optional[str] = None,
        balance: Optional[int] = None,
        currency: Optional[Currency] = None
    ) -> Account:
        """
        Create a new account

        Args:
            direction: Normal balance polarity, fixed for the account's life
            account_id: Caller-supplied id; a UUID is generated when absent
            name: Display label, empty when absent
            balance: Initial balance in minor units (default 0)
            currency: Account currency (default: configured default currency)

        Returns:
            The stored Account

        Raises:
            ValidationError: If the initial balance is negative
            ConflictError: If the id is already taken
        """
        if balance is None:
            balance = 0
        if isinstance(balance, bool) or not isinstance(balance, int) or balance < 0:
            raise ValidationError("balance must be a non-negative integer")

        account = Account(
            id=account_id or str(uuid.uuid4()),
            name=name or "",
            direction=direction,
            balance=balance,
            currency=currency or self.default_currency,
        )

        self.account_store.create(account)

        log_action(
            self.logger, self._log_level, "Account created",
            action="create_account", resource=f"account:{account.id}",
            extra={
                "direction": account.direction.value,
                "currency": account.currency.code,
                "balance": account.balance
            }
        )

        return account

    def get_account(self, account_id: str) -> Account:
        """
        Get account by ID

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.account_store.find_by_id(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> List[Account]:
        return self.account_store.get_all()

    def update_account_balance(self, account_id: str, delta: int) -> Account:
        """
        Add a signed delta to an account balance

        Raises:
            NotFoundError: If the account does not exist
        """
        with self.account_store.storage.atomic():
            account = self.get_account(account_id)
            new_balance = account.balance + delta
            self.account_store.update(account_id, balance=new_balance)
            account.balance = new_balance

        self.logger.debug(
            "Balance updated for account %s: delta=%d balance=%d",
            account_id, delta, new_balance
        )
        return account

    def apply_balance_changes(self, changes: Dict[str, int]) -> None:
        """
        Apply net balance deltas keyed by account id

        Every account is checked before any delta is applied, so an unknown
        id leaves all balances untouched.

        Raises:
            NotFoundError: If any account does not exist
        """
        with self.account_store.storage.atomic():
            for account_id in changes:
                self.get_account(account_id)
            for account_id, delta in changes.items():
                self.update_account_balance(account_id, delta)
