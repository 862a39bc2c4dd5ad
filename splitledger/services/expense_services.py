import logging
from datetime import datetime, timezone
from typing import Sequence
from splitledger.core.errors import (
    AmountMismatch,
    DebtorNotMember,
    ExpenseNotFound,
    InvalidPercentageSum,
    InvalidSplit,
    PayerNotMember,
)
from splitledger.db.repository import StorageSession
from splitledger.schemas.expense import ExpenseOut
from splitledger.services.balance_services import adjust_balance
from splitledger.services.group_services import get_group, is_member

logger = logging.getLogger("splitledger.expenses")


def split_equally(total_amount: int, participants: Sequence[str]) -> list[int]:
    """
    total // n for everybody, the first participant also absorbs total % n.

    The parts always sum to exactly total_amount.
    """
    if not participants:
        raise InvalidSplit("At least one participant is required")
    if total_amount < 0:
        raise InvalidSplit("Expense amount cannot be negative")

    n = len(participants)
    share = total_amount // n

    amounts = [share] * n
    amounts[0] += total_amount % n
    return amounts


def split_by_percentage(total_amount: int, participants: Sequence[str], percentages: Sequence[int]) -> list[int]:
    """floor(total * p / 100) each; flooring leftovers go to the first participant."""
    if not participants:
        raise InvalidSplit("At least one participant is required")
    if len(participants) != len(percentages):
        raise InvalidSplit("Participants and percentages must have the same length")
    if total_amount < 0:
        raise InvalidSplit("Expense amount cannot be negative")
    if any(p < 0 for p in percentages):
        raise InvalidSplit("Percentages cannot be negative")

    if sum(percentages) != 100:
        raise InvalidPercentageSum(f"Percentages must sum to 100, got {sum(percentages)}")

    amounts = [total_amount * p // 100 for p in percentages]
    amounts[0] += total_amount - sum(amounts)
    return amounts


async def _record_expense(
    db: StorageSession,
    group_id: int,
    description: str,
    total_amount: int,
    payer: str,
    debtors: Sequence[str],
    amounts: Sequence[int],
) -> ExpenseOut:
    # -----------------------------------
    # 1. Membership
    # -----------------------------------
    group = await get_group(db, group_id)

    if not is_member(group, payer):
        raise PayerNotMember(f"Payer {payer} is not a member of group {group_id}")

    for debtor in debtors:
        if not is_member(group, debtor):
            raise DebtorNotMember(f"Debtor {debtor} is not a member of group {group_id}")

    # -----------------------------------
    # 2. Amounts
    # -----------------------------------
    total_split = sum(amounts)
    if total_split != total_amount:
        raise AmountMismatch(
            f"Split total ({total_split}) must equal expense amount ({total_amount})"
        )

    # -----------------------------------
    # 3. Log + balances
    # -----------------------------------
    expense = await db.add_expense(
        group_id=group_id,
        description=description,
        total_amount=total_amount,
        payer=payer,
        debtors=debtors,
        amounts=amounts,
        created_at=datetime.now(timezone.utc),
    )

    await adjust_balance(db, group_id, payer, total_amount)
    for debtor, amount in zip(debtors, amounts):
        await adjust_balance(db, group_id, debtor, -amount)

    logger.info(
        "Expense %s recorded in group %s: %s paid %d for %d debtors",
        expense.id, group_id, payer, total_amount, len(debtors)
    )
    return expense


async def add_expense_equally(
    db: StorageSession,
    group_id: int,
    payer: str,
    description: str,
    total_amount: int,
    participants: Sequence[str],
) -> ExpenseOut:
    amounts = split_equally(total_amount, participants)
    return await _record_expense(db, group_id, description, total_amount, payer, participants, amounts)


async def add_expense_by_percentage(
    db: StorageSession,
    group_id: int,
    payer: str,
    description: str,
    total_amount: int,
    participants: Sequence[str],
    percentages: Sequence[int],
) -> ExpenseOut:
    amounts = split_by_percentage(total_amount, participants, percentages)
    return await _record_expense(db, group_id, description, total_amount, payer, participants, amounts)


async def add_expense_with_exact_amounts(
    db: StorageSession,
    group_id: int,
    payer: str,
    description: str,
    total_amount: int,
    debtors: Sequence[str],
    amounts: Sequence[int],
) -> ExpenseOut:
    if len(debtors) != len(amounts):
        raise InvalidSplit("Debtors and amounts must have the same length")
    if total_amount < 0 or any(a < 0 for a in amounts):
        raise InvalidSplit("Amounts cannot be negative")

    return await _record_expense(db, group_id, description, total_amount, payer, debtors, amounts)


async def get_expenses_by_group(db: StorageSession, group_id: int) -> list[ExpenseOut]:
    await get_group(db, group_id)
    return await db.list_expenses(group_id)


async def get_expense_by_id(db: StorageSession, expense_id: int) -> ExpenseOut:
    expense = await db.get_expense(expense_id)

    if not expense:
        raise ExpenseNotFound(f"Expense {expense_id} not found")

    return expense
