"""
Pydantic schemas for API requests and responses
"""

from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, BeforeValidator, Field, RootModel


def _reject_bool(value):
    # JSON true/false would otherwise be coerced to 1/0
    if isinstance(value, bool):
        raise ValueError("amount must be an integer, not a boolean")
    return value


AccountId = Annotated[str, Field(min_length=1, description="Account identifier")]
Amount = Annotated[
    int,
    BeforeValidator(_reject_bool),
    Field(description="Amount in the smallest currency unit")
]


class DepositEvent(BaseModel):
    type: Literal["deposit"]
    destination: AccountId
    amount: Amount


class WithdrawEvent(BaseModel):
    type: Literal["withdraw"]
    origin: AccountId
    amount: Amount


class TransferEvent(BaseModel):
    type: Literal["transfer"]
    origin: AccountId
    destination: AccountId
    amount: Amount


class EventRequest(RootModel):
    root: Annotated[
        Union[DepositEvent, WithdrawEvent, TransferEvent],
        Field(discriminator="type")
    ]


class AccountBalance(BaseModel):
    id: str
    balance: int


class EventResponse(BaseModel):
    origin: Optional[AccountBalance] = None
    destination: Optional[AccountBalance] = None
