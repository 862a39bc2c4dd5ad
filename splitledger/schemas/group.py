from pydantic import BaseModel
from typing import List

class GroupCreate(BaseModel):
    members: List[str] = []

class GroupOut(BaseModel):
    id: int
    owner: str
    members: List[str]

    class Config:
        from_attributes = True

class GroupMemberOut(BaseModel):
    user_id: str
    group_id: int
