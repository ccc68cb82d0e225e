"""
Ledger error types.

The core surfaces exactly three failure kinds. They subclass ValueError so
callers that already treat ValueError as a client error keep working.
"""


class LedgerError(ValueError):
    """Base class for ledger domain errors"""


class ValidationError(LedgerError):
    """Inadmissible input: malformed request or failed ledger invariant"""


class NotFoundError(LedgerError):
    """Referenced account or transaction does not exist"""


class ConflictError(LedgerError):
    """Identifier collision or idempotency mismatch"""


def account_not_found(account_id: str) -> str:
    return f"Account not found: {account_id}"


def transaction_not_found(transaction_id: str) -> str:
    return f"Transaction not found: {transaction_id}"
