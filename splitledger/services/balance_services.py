from typing import Sequence
from splitledger.db.repository import StorageSession

# Net balances are the source of truth: reads are O(1), an expense costs
# O(debtors). Any pairwise "who owes whom" view is derived from these.


async def get_balance(db: StorageSession, group_id: int, user: str) -> int:
    return await db.get_balance(group_id, user)


async def adjust_balance(db: StorageSession, group_id: int, user: str, delta: int):
    # callers must pair every adjustment with an opposite one in the same
    # transaction, or the group stops summing to zero
    if delta:
        await db.adjust_balance(group_id, user, delta)


async def transfer_balance(
    db: StorageSession,
    group_id: int,
    debit: str,
    credit: str,
    amount: int,
):
    await adjust_balance(db, group_id, debit, -amount)
    await adjust_balance(db, group_id, credit, amount)


async def reset_balances(db: StorageSession, group_id: int, members: Sequence[str]):
    await db.reset_balances(group_id, members)


async def group_balances(db: StorageSession, group_id: int, members: Sequence[str]) -> dict[str, int]:
    return {m: await db.get_balance(group_id, m) for m in members}
