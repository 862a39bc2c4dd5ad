from fastapi import APIRouter, Depends
from splitledger.core.dependencies import get_caller, get_ledger
from splitledger.schemas.expense import ExpenseCreate, ExpenseOut
from splitledger.services.ledger import Ledger

router = APIRouter()

@router.post("/{group_id}/add", response_model=ExpenseOut)
async def add_expense(
    group_id: int,
    data: ExpenseCreate,
    ledger: Ledger = Depends(get_ledger),
    current_user: str = Depends(get_caller)
):
    members = [s.member for s in data.splits]
    values = [s.value for s in data.splits]

    if data.strategy == "equal":
        return await ledger.add_expense_equally(group_id, current_user, data.title, data.amount, members)

    if data.strategy == "percentage":
        return await ledger.add_expense_by_percentage(group_id, current_user, data.title, data.amount, members, values)

    return await ledger.add_expense_with_exact_amounts(group_id, current_user, data.title, data.amount, members, values)

@router.get("/{group_id}/all", response_model=list[ExpenseOut])
async def all_expenses(group_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_expenses(group_id)

@router.get("/{expense_id}", response_model=ExpenseOut)
async def fetch(expense_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.get_expense(expense_id)
