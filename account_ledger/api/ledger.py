"""
Ledger state endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse

from .dependencies import LedgerSystem, get_ledger_system


router = APIRouter()


@router.post("/reset", response_class=PlainTextResponse)
async def reset(system: LedgerSystem = Depends(get_ledger_system)):
    """Clear all balances, restoring the configured seed accounts"""
    system.ledger.reset()
    return PlainTextResponse("OK", status_code=status.HTTP_200_OK)


@router.get("/balance")
async def get_balance(
    account_id: Optional[str] = None,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get the balance of an account"""
    if not account_id:
        raise HTTPException(status_code=400, detail="account_id is required")
    
    balance = system.ledger.get_balance(account_id)
    if balance is None:
        return JSONResponse(content=0, status_code=status.HTTP_404_NOT_FOUND)
    return balance
