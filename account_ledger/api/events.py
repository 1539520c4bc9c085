"""
Event endpoint: deposit, withdraw and transfer
"""

from fastapi import APIRouter, Depends, status

from .dependencies import LedgerSystem, get_ledger_system
from .schemas import (
    AccountBalance, DepositEvent, EventRequest, EventResponse, TransferEvent, WithdrawEvent
)


router = APIRouter()


@router.post(
    "/event",
    status_code=status.HTTP_201_CREATED,
    response_model=EventResponse,
    response_model_exclude_none=True
)
async def handle_event(
    request: EventRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Apply a deposit, withdraw or transfer event"""
    event = request.root
    ledger = system.ledger
    
    if isinstance(event, DepositEvent):
        balance = ledger.deposit(event.destination, event.amount, create_missing=True)
        return EventResponse(destination=AccountBalance(id=event.destination, balance=balance))
    
    if isinstance(event, WithdrawEvent):
        balance = ledger.withdraw(event.origin, event.amount)
        return EventResponse(origin=AccountBalance(id=event.origin, balance=balance))
    
    if isinstance(event, TransferEvent):
        origin_balance, destination_balance = ledger.transfer(
            event.origin, event.destination, event.amount
        )
        return EventResponse(
            origin=AccountBalance(id=event.origin, balance=origin_balance),
            destination=AccountBalance(id=event.destination, balance=destination_balance)
        )
    
    raise TypeError(f"Unhandled event type: {type(event).__name__}")
