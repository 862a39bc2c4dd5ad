from fastapi import APIRouter, Depends
from splitledger.core.dependencies import get_caller, get_ledger
from splitledger.schemas.balances import GroupBalanceOut, NetBalance
from splitledger.schemas.group import GroupCreate, GroupMemberOut, GroupOut
from splitledger.schemas.settlements import Transfer
from splitledger.services.ledger import Ledger

router = APIRouter()

@router.post("/", response_model=GroupOut)
async def create_new_group(
    data: GroupCreate,
    ledger: Ledger = Depends(get_ledger),
    user: str = Depends(get_caller)
):
    group_id = await ledger.create_group(user, data.members)
    return await ledger.get_group(group_id)

@router.get("/my-groups", response_model=list[int])
async def my_groups(ledger: Ledger = Depends(get_ledger), user: str = Depends(get_caller)):
    return sorted(await ledger.get_user_groups(user))

@router.post("/{group_id}/join", response_model=GroupMemberOut)
async def join_group(group_id: int, ledger: Ledger = Depends(get_ledger), user: str = Depends(get_caller)):
    await ledger.join_group(group_id, user)
    return GroupMemberOut(user_id=user, group_id=group_id)

@router.get("/{group_id}", response_model=GroupOut)
async def group_detail(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_group(group_id)

@router.get("/{group_id}/members", response_model=list[str])
async def group_members(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_group_members(group_id)

@router.get("/{group_id}/balances", response_model=GroupBalanceOut)
async def group_balances(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_group_overview(group_id)

@router.get("/{group_id}/balances/{user_id}", response_model=NetBalance)
async def user_balance(group_id: int, user_id: str, ledger: Ledger = Depends(get_ledger)):
    amount = await ledger.get_balance(group_id, user_id)
    return NetBalance(group_id=group_id, user_id=user_id, amount=amount)

@router.post("/{group_id}/simplify", response_model=list[Transfer])
async def simplify(group_id: int, ledger: Ledger = Depends(get_ledger), user: str = Depends(get_caller)):
    return await ledger.simplify_debts(group_id, user)

@router.get("/{group_id}/plan", response_model=list[Transfer])
async def settlement_plan(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.plan_settlements(group_id)
