from pydantic import BaseModel
from datetime import datetime

class Transfer(BaseModel):
    from_user: str
    to_user: str
    amount: int

    class Config:
        frozen = True

class SettlementHistoryOut(BaseModel):
    id: int
    group_id: int
    from_user: str
    to_user: str
    amount: int
    created_at: datetime

    class Config:
        frozen = True
        from_attributes = True
