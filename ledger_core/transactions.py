"""
Transaction Processing Module

Creates double-entry transactions: resolves entry currencies and ids,
replays idempotent resubmissions, validates the ledger invariants, applies
the net balance effect to each account and persists the transaction. The
whole sequence runs under the storage lock so a transaction is either fully
committed or leaves no trace.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Dict, List, Optional, Any
import uuid

from .accounts import AccountManager, AccountStore
from .currency import Currency, DEFAULT_CURRENCY
from .errors import (
    ConflictError, LedgerError, NotFoundError, account_not_found, transaction_not_found
)
from .idempotency import IdempotencyResolver
from .ledger import Direction, signed_amount
from .logging_config import get_logger, log_action
from .storage import StorageInterface
from .validation import TransactionValidator


@dataclass
class TransactionEntry:
    """One leg of a transaction"""
    id: str
    account_id: str
    direction: Direction
    amount: int
    currency: Currency

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "direction": self.direction.value,
            "amount": self.amount,
            "currency": self.currency.code,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionEntry':
        return cls(
            id=data["id"],
            account_id=data["account_id"],
            direction=Direction(data["direction"]),
            amount=int(data["amount"]),
            currency=Currency[data["currency"]],
        )


@dataclass
class Transaction:
    """Immutable double-entry transaction"""
    id: str
    name: str
    entries: List[TransactionEntry]
    created_at: datetime

    def get_affected_accounts(self) -> List[str]:
        """Account ids touched by this transaction, in entry order"""
        return list(dict.fromkeys(entry.account_id for entry in self.entries))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "entries": [entry.to_dict() for entry in self.entries],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=data["id"],
            name=data["name"],
            entries=[TransactionEntry.from_dict(entry) for entry in data["entries"]],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class EntryRequest:
    """Parsed entry of a transaction creation request"""
    account_id: str
    direction: Direction
    amount: int
    currency: Optional[Currency] = None
    id: Optional[str] = None


@dataclass
class TransactionRequest:
    """Parsed transaction creation request"""
    entries: List[EntryRequest]
    id: Optional[str] = None
    name: Optional[str] = None


class TransactionStore:
    """
    Transactions keyed by id, plus the set of every entry id ever committed
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "transactions"
        self.entry_table_name = "transaction_entry_ids"

    def check_can_create(self, transaction: Transaction) -> None:
        """
        Raise ConflictError if the transaction id or any entry id is taken
        """
        with self.storage.atomic():
            if self.storage.exists(self.table_name, transaction.id):
                raise ConflictError(f"Transaction with id {transaction.id} already exists")

            seen = set()
            for entry in transaction.entries:
                if entry.id in seen:
                    raise ConflictError(
                        f"Duplicate entry id {entry.id} in transaction {transaction.id}"
                    )
                seen.add(entry.id)
                if self.storage.exists(self.entry_table_name, entry.id):
                    raise ConflictError(f"Entry with id {entry.id} already exists")

    def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a transaction and register its entry ids, all or nothing

        Raises:
            ConflictError: On a duplicate transaction id, an entry id repeated
                within the transaction, or an entry id committed earlier
        """
        with self.storage.atomic():
            self.check_can_create(transaction)
            for entry in transaction.entries:
                self.storage.save(
                    self.entry_table_name, entry.id,
                    {"entry_id": entry.id, "transaction_id": transaction.id}
                )
            self.storage.save(self.table_name, transaction.id, transaction.to_dict())
        return transaction

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        data = self.storage.load(self.table_name, transaction_id)
        if data is None:
            return None
        return Transaction.from_dict(data)

    def has_entry(self, entry_id: str) -> bool:
        return self.storage.exists(self.entry_table_name, entry_id)

    def get_all(self) -> List[Transaction]:
        return [Transaction.from_dict(data) for data in self.storage.load_all(self.table_name)]

    def clear(self) -> None:
        with self.storage.atomic():
            self.storage.clear_table(self.table_name)
            self.storage.clear_table(self.entry_table_name)


def calculate_balance_changes(
    entries: List[TransactionEntry],
    account_store: AccountStore
) -> Dict[str, int]:
    """
    Net signed balance delta per account id

    Entries sharing an account are summed so each account receives a single
    adjustment. Accounts must already be known to exist.
    """
    changes: Dict[str, int] = {}
    directions: Dict[str, Direction] = {}

    for entry in entries:
        if entry.account_id not in directions:
            account = account_store.find_by_id(entry.account_id)
            if account is None:
                raise NotFoundError(account_not_found(entry.account_id))
            directions[entry.account_id] = account.direction

        delta = signed_amount(entry.direction, directions[entry.account_id], entry.amount)
        changes[entry.account_id] = changes.get(entry.account_id, 0) + delta

    return changes


class TransactionProcessor:
    """
    Transaction service tying the stores, validator and idempotency
    resolver together
    """

    def __init__(
        self,
        storage: StorageInterface,
        account_manager: AccountManager,
        transaction_store: TransactionStore,
        validator: Optional[TransactionValidator] = None,
        idempotency_resolver: Optional[IdempotencyResolver] = None,
        default_currency: Currency = DEFAULT_CURRENCY,
        audit_logging: bool = True
    ):
        self.storage = storage
        self.account_manager = account_manager
        self.account_store = account_manager.account_store
        self.transaction_store = transaction_store
        self.validator = validator or TransactionValidator(self.account_store)
        self.idempotency_resolver = idempotency_resolver or IdempotencyResolver(transaction_store)
        self.default_currency = default_currency
        self.logger = get_logger("ledger.transactions")
        self._log_level = "info" if audit_logging else "debug"

    def create_transaction(self, request: TransactionRequest) -> Transaction:
        """
        Create and commit a transaction

        When the request carries an id that is already stored, the stored
        transaction is returned unchanged if the payload is equivalent.

        Args:
            request: Parsed creation request

        Returns:
            The committed (or replayed) Transaction

        Raises:
            ValidationError: If the transaction breaks a ledger invariant
            NotFoundError: If an entry references an unknown account
            ConflictError: On id reuse with different data or an entry id collision
        """
        with self.storage.atomic():
            entries = self._resolve_entries(request.entries)

            if request.id:
                try:
                    existing = self.idempotency_resolver.resolve(request.id, request.name, entries)
                except ConflictError as e:
                    log_action(
                        self.logger, "warning", str(e),
                        action="idempotency_conflict", resource=f"transaction:{request.id}"
                    )
                    raise
                if existing is not None:
                    log_action(
                        self.logger, self._log_level, "Idempotent replay",
                        action="replay_transaction", resource=f"transaction:{existing.id}"
                    )
                    return existing

            transaction = Transaction(
                id=request.id or str(uuid.uuid4()),
                name=request.name or "",
                entries=entries,
                created_at=datetime.now(timezone.utc),
            )

            try:
                self.validator.validate(transaction)
            except LedgerError as e:
                log_action(
                    self.logger, "warning", f"Transaction rejected: {e}",
                    action="validate_transaction", resource=f"transaction:{transaction.id}"
                )
                raise

            self.transaction_store.check_can_create(transaction)

            changes = calculate_balance_changes(transaction.entries, self.account_store)
            self._commit(transaction, changes)

        log_action(
            self.logger, self._log_level, "Transaction created",
            action="create_transaction", resource=f"transaction:{transaction.id}",
            extra={
                "entry_count": len(transaction.entries),
                "accounts": transaction.get_affected_accounts(),
                "balance_changes": changes
            }
        )

        return transaction

    def get_transaction(self, transaction_id: str) -> Transaction:
        """
        Get transaction by ID

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.transaction_store.find_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(self) -> List[Transaction]:
        return self.transaction_store.get_all()

    def _resolve_entries(self, entry_requests: List[EntryRequest]) -> List[TransactionEntry]:
        """Assign entry ids and fill in currencies from the referenced accounts"""
        entries = []
        for entry_request in entry_requests:
            entries.append(TransactionEntry(
                id=entry_request.id or str(uuid.uuid4()),
                account_id=entry_request.account_id,
                direction=entry_request.direction,
                amount=entry_request.amount,
                currency=self._resolve_currency(entry_request),
            ))
        return entries

    def _resolve_currency(self, entry_request: EntryRequest) -> Currency:
        if entry_request.currency is not None:
            return entry_request.currency
        account = self.account_store.find_by_id(entry_request.account_id)
        if account is not None:
            return account.currency
        return self.default_currency

    def _commit(self, transaction: Transaction, changes: Dict[str, int]) -> None:
        """Apply balance changes and persist; restore balances if persisting fails"""
        previous = {
            account_id: self.account_manager.get_account(account_id).balance
            for account_id in changes
        }
        self.account_manager.apply_balance_changes(changes)
        try:
            self.transaction_store.create(transaction)
        except Exception:
            for account_id, balance in previous.items():
                self.account_store.update(account_id, balance=balance)
            raise
