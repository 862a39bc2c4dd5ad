from datetime import datetime, timezone
from typing import ClassVar, List
from pydantic import BaseModel, Field
from splitledger.schemas.settlements import Transfer


def _now():
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    name: ClassVar[str] = "LedgerEvent"

    group_id: int
    emitted_at: datetime = Field(default_factory=_now)

    class Config:
        frozen = True


class GroupCreated(LedgerEvent):
    name: ClassVar[str] = "GroupCreated"

    owner: str
    members: List[str]


class UserJoinedGroup(LedgerEvent):
    name: ClassVar[str] = "UserJoinedGroup"

    user: str


class ExpenseAdded(LedgerEvent):
    name: ClassVar[str] = "ExpenseAdded"

    expense_id: int
    payer: str
    total_amount: int
    description: str


class DebtsSimplified(LedgerEvent):
    name: ClassVar[str] = "DebtsSimplified"

    transfers: List[Transfer] = []


class DebtSettled(LedgerEvent):
    name: ClassVar[str] = "DebtSettled"

    debtor: str
    creditor: str
    amount: int
