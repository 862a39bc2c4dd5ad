from fastapi import APIRouter, Depends
from splitledger.core.dependencies import get_caller, get_ledger
from splitledger.schemas.settlements import SettlementHistoryOut
from splitledger.services.ledger import Ledger

router = APIRouter()


@router.post("/{group_id}/settle/{creditor}", response_model=SettlementHistoryOut)
async def settle(
    group_id: int,
    creditor: str,
    ledger: Ledger = Depends(get_ledger),
    user: str = Depends(get_caller)
):
    return await ledger.settle_debt(group_id, user, creditor)


@router.get("/{group_id}/history", response_model=list[SettlementHistoryOut])
async def history(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_settlements(group_id)
