import itertools
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence
from splitledger.db.repository import LedgerStorage, StorageSession
from splitledger.schemas.expense import ExpenseOut, SplitOut
from splitledger.schemas.group import GroupOut
from splitledger.schemas.settlements import SettlementHistoryOut

logger = logging.getLogger("splitledger.db.memory")

_MISSING = object()


@dataclass
class MemoryState:
    members: dict[int, list[str]] = field(default_factory=dict)
    user_groups: dict[str, set[int]] = field(default_factory=dict)
    balances: dict[int, dict[str, int]] = field(default_factory=dict)
    expenses: dict[int, ExpenseOut] = field(default_factory=dict)
    group_expenses: dict[int, list[int]] = field(default_factory=dict)
    settlements: dict[int, list[SettlementHistoryOut]] = field(default_factory=dict)

    # never rewound, even when a transaction rolls back
    group_ids: itertools.count = field(default_factory=itertools.count)
    expense_ids: itertools.count = field(default_factory=itertools.count)
    settlement_ids: itertools.count = field(default_factory=lambda: itertools.count(1))


class MemorySession(StorageSession):
    """
    Writes go straight into the shared state and push an undo step onto a
    journal; rollback() replays the journal backwards. Cost is O(changes),
    not O(state).
    """

    def __init__(self, state: MemoryState):
        self._state = state
        self._journal = []

    def rollback(self):
        while self._journal:
            undo = self._journal.pop()
            undo()

    def commit(self):
        self._journal.clear()

    def _restore_key(self, mapping: dict, key, previous):
        if previous is _MISSING:
            mapping.pop(key, None)
        else:
            mapping[key] = previous

    def _pop_appended(self, items: list):
        self._journal.append(items.pop)

    # groups

    async def create_group(self, owner: str) -> int:
        group_id = next(self._state.group_ids)
        self._state.members[group_id] = []
        self._journal.append(lambda: self._state.members.pop(group_id, None))
        await self.add_member(group_id, owner)
        return group_id

    async def get_group(self, group_id: int) -> Optional[GroupOut]:
        members = self._state.members.get(group_id)
        if members is None:
            return None
        # the first member is the owner for every group that has members
        owner = members[0] if members else ""
        return GroupOut(id=group_id, owner=owner, members=list(members))

    async def add_member(self, group_id: int, user: str) -> None:
        members = self._state.members[group_id]
        members.append(user)
        self._pop_appended(members)

        groups = self._state.user_groups.setdefault(user, set())
        if group_id not in groups:
            groups.add(group_id)
            self._journal.append(lambda: groups.discard(group_id))

    async def get_user_groups(self, user: str) -> set[int]:
        return set(self._state.user_groups.get(user, ()))

    # balances

    async def get_balance(self, group_id: int, user: str) -> int:
        return self._state.balances.get(group_id, {}).get(user, 0)

    async def adjust_balance(self, group_id: int, user: str, delta: int) -> None:
        balances = self._state.balances.setdefault(group_id, {})
        previous = balances.get(user, _MISSING)
        balances[user] = (0 if previous is _MISSING else previous) + delta
        self._journal.append(lambda: self._restore_key(balances, user, previous))

    async def reset_balances(self, group_id: int, users: Sequence[str]) -> None:
        for user in users:
            current = await self.get_balance(group_id, user)
            if current:
                await self.adjust_balance(group_id, user, -current)

    # expense log

    async def add_expense(
        self,
        group_id: int,
        description: str,
        total_amount: int,
        payer: str,
        debtors: Sequence[str],
        amounts: Sequence[int],
        created_at: datetime,
    ) -> ExpenseOut:
        expense = ExpenseOut(
            id=next(self._state.expense_ids),
            group_id=group_id,
            description=description,
            total_amount=total_amount,
            payer=payer,
            splits=[SplitOut(member=m, amount=a) for m, a in zip(debtors, amounts)],
            created_at=created_at,
        )

        self._state.expenses[expense.id] = expense
        self._journal.append(lambda: self._state.expenses.pop(expense.id, None))

        log = self._state.group_expenses.setdefault(group_id, [])
        log.append(expense.id)
        self._pop_appended(log)

        return expense

    async def list_expenses(self, group_id: int) -> list[ExpenseOut]:
        ids = self._state.group_expenses.get(group_id, [])
        return [self._state.expenses[i] for i in ids]

    async def get_expense(self, expense_id: int) -> Optional[ExpenseOut]:
        return self._state.expenses.get(expense_id)

    # settlement log

    async def add_settlement(
        self,
        group_id: int,
        from_user: str,
        to_user: str,
        amount: int,
        created_at: datetime,
    ) -> SettlementHistoryOut:
        record = SettlementHistoryOut(
            id=next(self._state.settlement_ids),
            group_id=group_id,
            from_user=from_user,
            to_user=to_user,
            amount=amount,
            created_at=created_at,
        )

        history = self._state.settlements.setdefault(group_id, [])
        history.append(record)
        self._pop_appended(history)

        return record

    async def list_settlements(self, group_id: int) -> list[SettlementHistoryOut]:
        return list(self._state.settlements.get(group_id, []))

    # metrics

    async def count_groups(self) -> int:
        return len(self._state.members)

    async def count_expenses(self) -> int:
        return len(self._state.expenses)


class InMemoryStorage(LedgerStorage):
    name = "memory"

    def __init__(self):
        self.state = MemoryState()

    @asynccontextmanager
    async def transaction(self):
        session = MemorySession(self.state)
        try:
            yield session
        except BaseException:
            session.rollback()
            logger.debug("In-memory transaction rolled back")
            raise
        else:
            session.commit()
