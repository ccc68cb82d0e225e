"""
Account endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_ledger_system
from .schemas import AccountResponse, CreateAccountRequest
from ..currency import Currency
from ..system import LedgerSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountResponse)
async def create_account(
    request: CreateAccountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Create a new account"""
    account = system.account_manager.create_account(
        direction=request.direction,
        account_id=request.id,
        name=request.name,
        balance=request.balance,
        currency=Currency[request.currency] if request.currency else None
    )
    return AccountResponse.from_account(account)


@router.get("")
async def list_accounts(system: LedgerSystem = Depends(get_ledger_system)):
    """List all accounts"""
    return {
        "accounts": [
            AccountResponse.from_account(account).model_dump()
            for account in system.account_manager.list_accounts()
        ]
    }


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get account details"""
    return AccountResponse.from_account(system.account_manager.get_account(account_id))
