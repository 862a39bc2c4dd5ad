from pydantic import BaseModel
from splitledger.schemas.settlements import Transfer

class NetBalance(BaseModel):
    group_id: int
    user_id: str
    amount: int

class GroupBalanceOut(BaseModel):
    net: dict[str, int]
    settlements: list[Transfer]
    settled: bool
