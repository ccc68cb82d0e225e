"""
Pydantic schemas for API requests and responses

Request models are the parsing boundary: they normalise direction and
currency codes, check id formats and amount types, and convert into the
typed requests the ledger core accepts.
"""

from typing import List, Optional
import uuid

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

from ..accounts import Account
from ..currency import Currency, supported_codes
from ..ledger import Direction
from ..transactions import EntryRequest, Transaction, TransactionRequest


def _check_uuid(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return value
    try:
        uuid.UUID(value)
    except ValueError:
        raise ValueError(f"{field_name} must be a valid UUID")
    return value


def _parse_direction(value) -> Direction:
    try:
        return Direction.parse(value)
    except ValueError:
        raise ValueError("direction must be 'debit' or 'credit'")


def _parse_currency(value) -> str:
    if isinstance(value, Currency):
        return value.code
    if not isinstance(value, str):
        raise ValueError("currency must be a string")
    try:
        return Currency.from_code(value).code
    except ValueError:
        raise ValueError(
            f"currency must be a supported currency code ({', '.join(supported_codes())})"
        )


# Account schemas
class CreateAccountRequest(BaseModel):
    id: Optional[StrictStr] = None
    name: Optional[StrictStr] = None
    direction: Direction
    balance: Optional[StrictInt] = Field(None, ge=0, description="Initial balance in minor units")
    currency: Optional[str] = Field(None, description="Currency code (USD, EUR, GBP, JPY, KWD)")

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value):
        return _check_uuid(value, "id")

    @field_validator("direction", mode="before")
    @classmethod
    def _validate_direction(cls, value):
        return _parse_direction(value)

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value):
        return _parse_currency(value)


class AccountResponse(BaseModel):
    id: str
    name: str
    direction: str
    balance: int
    currency: str

    @classmethod
    def from_account(cls, account: Account) -> 'AccountResponse':
        return cls(
            id=account.id,
            name=account.name,
            direction=account.direction.value,
            balance=account.balance,
            currency=account.currency.code
        )


# Transaction schemas
class TransactionEntryModel(BaseModel):
    id: Optional[StrictStr] = None
    account_id: StrictStr
    direction: Direction
    amount: StrictInt = Field(..., gt=0, description="Amount in minor units")
    currency: Optional[str] = Field(None, description="Defaults to the account's currency")

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value):
        return _check_uuid(value, "id")

    @field_validator("account_id")
    @classmethod
    def _validate_account_id(cls, value):
        return _check_uuid(value, "account_id")

    @field_validator("direction", mode="before")
    @classmethod
    def _validate_direction(cls, value):
        return _parse_direction(value)

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value):
        return _parse_currency(value)

    def to_entry_request(self) -> EntryRequest:
        return EntryRequest(
            account_id=self.account_id,
            direction=self.direction,
            amount=self.amount,
            currency=Currency[self.currency] if self.currency else None,
            id=self.id
        )


class CreateTransactionRequest(BaseModel):
    id: Optional[StrictStr] = None
    name: Optional[StrictStr] = None
    entries: List[TransactionEntryModel] = Field(..., min_length=1)

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value):
        return _check_uuid(value, "id")

    def to_transaction_request(self) -> TransactionRequest:
        return TransactionRequest(
            entries=[entry.to_entry_request() for entry in self.entries],
            id=self.id,
            name=self.name
        )


class TransactionEntryResponse(BaseModel):
    id: str
    account_id: str
    direction: str
    amount: int
    currency: str


class TransactionResponse(BaseModel):
    id: str
    name: str
    entries: List[TransactionEntryResponse]
    created_at: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> 'TransactionResponse':
        return cls(
            id=transaction.id,
            name=transaction.name,
            entries=[
                TransactionEntryResponse(
                    id=entry.id,
                    account_id=entry.account_id,
                    direction=entry.direction.value,
                    amount=entry.amount,
                    currency=entry.currency.code
                )
                for entry in transaction.entries
            ],
            created_at=transaction.created_at.isoformat()
        )
