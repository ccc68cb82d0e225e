"""
Ledger system wiring

Builds the storage, stores and services once and hands them out together.
"""

from typing import Optional

from .accounts import AccountManager, AccountStore
from .config import LedgerConfig, get_config
from .idempotency import IdempotencyResolver
from .storage import InMemoryStorage, StorageInterface
from .transactions import TransactionProcessor, TransactionStore
from .validation import TransactionValidator


class LedgerSystem:
    """Ledger with all components initialized"""

    def __init__(
        self,
        storage: Optional[StorageInterface] = None,
        config: Optional[LedgerConfig] = None
    ):
        config = config or get_config()
        self.config = config
        self.storage = storage or InMemoryStorage()

        self.account_store = AccountStore(self.storage)
        self.transaction_store = TransactionStore(self.storage)

        self.account_manager = AccountManager(
            self.account_store,
            default_currency=config.default_currency_enum,
            audit_logging=config.enable_audit_logging
        )
        self.validator = TransactionValidator(self.account_store)
        self.idempotency_resolver = IdempotencyResolver(self.transaction_store)
        self.transaction_processor = TransactionProcessor(
            self.storage,
            self.account_manager,
            self.transaction_store,
            validator=self.validator,
            idempotency_resolver=self.idempotency_resolver,
            default_currency=config.default_currency_enum,
            audit_logging=config.enable_audit_logging
        )

