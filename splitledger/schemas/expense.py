from datetime import datetime
from pydantic import BaseModel
from typing import List, Literal

class SplitInput(BaseModel):
    member: str
    # percentage for "percentage", amount for "exact", ignored for "equal"
    value: int = 0

class ExpenseCreate(BaseModel):
    title: str
    amount: int
    strategy: Literal["equal", "percentage", "exact"]
    splits: List[SplitInput]

class SplitOut(BaseModel):
    member: str
    amount: int

    class Config:
        frozen = True

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    description: str
    total_amount: int
    payer: str
    splits: List[SplitOut]
    created_at: datetime

    class Config:
        frozen = True
        from_attributes = True
