"""
Transaction endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_ledger_system
from .schemas import CreateTransactionRequest, TransactionResponse
from ..system import LedgerSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TransactionResponse)
async def create_transaction(
    request: CreateTransactionRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Create a transaction; resubmitting the same id and payload replays the original"""
    transaction = system.transaction_processor.create_transaction(
        request.to_transaction_request()
    )
    return TransactionResponse.from_transaction(transaction)


@router.get("")
async def list_transactions(system: LedgerSystem = Depends(get_ledger_system)):
    """List all transactions"""
    return {
        "transactions": [
            TransactionResponse.from_transaction(transaction).model_dump()
            for transaction in system.transaction_processor.list_transactions()
        ]
    }


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get transaction details"""
    return TransactionResponse.from_transaction(
        system.transaction_processor.get_transaction(transaction_id)
    )
