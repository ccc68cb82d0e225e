"""
Idempotent transaction creation.

A resubmission under an existing transaction id is compared with the stored
transaction through a canonical fingerprint: the name plus the sorted
(account, direction, currency, amount) legs. Entry ids never take part, so
a retry that omits generated entry ids still matches.
"""

from typing import Iterable, NamedTuple, Optional, Tuple, TYPE_CHECKING

from .errors import ConflictError

if TYPE_CHECKING:
    from .transactions import Transaction, TransactionEntry, TransactionStore


class EntryKey(NamedTuple):
    account_id: str
    direction: str
    currency: str
    amount: int


class TransactionFingerprint(NamedTuple):
    name: str
    entries: Tuple[EntryKey, ...]


def fingerprint(name: Optional[str], entries: Iterable["TransactionEntry"]) -> TransactionFingerprint:
    """
    Canonical comparison value for a transaction payload

    Legs sort by account id, direction and currency (lexicographic), then
    amount (numeric), which makes the result independent of entry order.
    """
    keys = sorted(
        EntryKey(
            account_id=entry.account_id,
            direction=entry.direction.value,
            currency=entry.currency.code,
            amount=entry.amount,
        )
        for entry in entries
    )
    return TransactionFingerprint(name=name or "", entries=tuple(keys))


class IdempotencyResolver:
    """Decides whether a resubmitted transaction id is a replay or a conflict"""

    def __init__(self, transaction_store: "TransactionStore"):
        self.transaction_store = transaction_store

    def resolve(
        self,
        transaction_id: str,
        name: Optional[str],
        entries: Iterable["TransactionEntry"]
    ) -> Optional["Transaction"]:
        """
        Look up a caller-supplied transaction id

        Args:
            transaction_id: Id supplied with the request
            name: Requested transaction name
            entries: Requested entries with currencies already resolved

        Returns:
            The stored transaction for an equivalent resubmission, or None
            when the id is unused

        Raises:
            ConflictError: If the id exists with a different payload
        """
        existing = self.transaction_store.find_by_id(transaction_id)
        if existing is None:
            return None

        if fingerprint(existing.name, existing.entries) == fingerprint(name, entries):
            return existing

        raise ConflictError(
            f"Transaction with id {transaction_id} already exists with different data"
        )
