import logging
from typing import Mapping
from splitledger.core.errors import EmptyGroup, NotAMember
from splitledger.db.repository import StorageSession
from splitledger.schemas.settlements import Transfer
from splitledger.services.balance_services import group_balances, reset_balances, transfer_balance
from splitledger.services.group_services import get_group, is_member

logger = logging.getLogger("splitledger.debts")


def match_debts(balances: Mapping[str, int]) -> list[Transfer]:
    """
    Greedy two-pointer matching over net balances.

    Debtors are taken most negative first, creditors largest first, ties
    broken by identity so the result is deterministic. Every step settles
    at least one side completely, so the plan never has more than
    len(debtors) + len(creditors) - 1 transfers.
    """
    debtors = []
    creditors = []

    for uid, bal in balances.items():
        if bal < 0:
            debtors.append([uid, bal])
        elif bal > 0:
            creditors.append([uid, bal])

    debtors.sort(key=lambda x: (x[1], x[0]))
    creditors.sort(key=lambda x: (-x[1], x[0]))

    transfers = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor_id, owe = debtors[i]
        creditor_id, recv = creditors[j]

        amount = min(-owe, recv)

        if amount:
            transfers.append(Transfer(
                from_user=debtor_id,
                to_user=creditor_id,
                amount=amount
            ))
            debtors[i][1] += amount
            creditors[j][1] -= amount

        if debtors[i][1] == 0:
            i += 1
        if creditors[j][1] == 0:
            j += 1

    return transfers


async def simplify_debts(db: StorageSession, group_id: int, caller: str) -> list[Transfer]:
    group = await get_group(db, group_id)

    if not group.members:
        raise EmptyGroup(f"Group {group_id} has no members")

    if not is_member(group, caller):
        raise NotAMember(f"{caller} is not a member of group {group_id}")

    balances = await group_balances(db, group_id, group.members)
    transfers = match_debts(balances)

    # rewrite: wipe, then replay the minimal transfer set
    await reset_balances(db, group_id, group.members)

    for t in transfers:
        logger.debug("Group %s: %s -> %s %d", group_id, t.from_user, t.to_user, t.amount)
        await transfer_balance(db, group_id, debit=t.from_user, credit=t.to_user, amount=t.amount)

    logger.info("Debts simplified in group %s: %d transfers", group_id, len(transfers))
    return transfers


async def compute_group_settlements(db: StorageSession, group_id: int) -> list[Transfer]:
    group = await get_group(db, group_id)
    balances = await group_balances(db, group_id, group.members)
    return match_debts(balances)


async def is_group_settled(db: StorageSession, group_id: int) -> bool:
    group = await get_group(db, group_id)
    balances = await group_balances(db, group_id, group.members)

    for amount in balances.values():
        if amount != 0:
            return False

    return True
