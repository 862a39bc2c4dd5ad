from pydantic import BaseModel

class TokenAmount(BaseModel):
    amount: int

class WalletOut(BaseModel):
    account: str
    balance: int
    allowance: int
