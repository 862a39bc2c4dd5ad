import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, Sequence
from sqlalchemy import select, func, text
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.repository import LedgerStorage, StorageSession
from splitledger.db.session import Base, make_engine, make_sessionmaker
from splitledger.models.balance import Balance
from splitledger.models.expense import Expense
from splitledger.models.expense_split import ExpenseSplit
from splitledger.models.group import Group
from splitledger.models.group_member import GroupMember
from splitledger.models.settlement_history import SettlementHistory
from splitledger.schemas.expense import ExpenseOut, SplitOut
from splitledger.schemas.group import GroupOut
from splitledger.schemas.settlements import SettlementHistoryOut

logger = logging.getLogger("splitledger.db.sql")


def _expense_out(expense: Expense) -> ExpenseOut:
    return ExpenseOut(
        id=expense.id,
        group_id=expense.group_id,
        description=expense.description,
        total_amount=expense.amount,
        payer=expense.paid_by,
        splits=[SplitOut(member=s.member, amount=s.amount) for s in expense.splits],
        created_at=expense.created_at,
    )


class SqlSession(StorageSession):
    def __init__(self, db: AsyncSession):
        self.db = db

    # groups

    async def create_group(self, owner: str) -> int:
        group = Group(owner=owner, created_at=datetime.now(timezone.utc))
        self.db.add(group)
        await self.db.flush()  # generates group.id

        await self.add_member(group.id, owner)
        return group.id

    async def get_group(self, group_id: int) -> Optional[GroupOut]:
        group = await self.db.get(Group, group_id)
        if not group:
            return None

        q = (
            select(GroupMember.user_id)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.id)
        )
        res = await self.db.execute(q)

        return GroupOut(id=group.id, owner=group.owner, members=list(res.scalars().all()))

    async def add_member(self, group_id: int, user: str) -> None:
        self.db.add(GroupMember(group_id=group_id, user_id=user))
        await self.db.flush()

    async def get_user_groups(self, user: str) -> set[int]:
        q = select(GroupMember.group_id).where(GroupMember.user_id == user)
        res = await self.db.execute(q)
        return set(res.scalars().all())

    # balances

    async def get_balance(self, group_id: int, user: str) -> int:
        row = await self.db.get(Balance, (group_id, user))
        return row.amount if row else 0

    async def adjust_balance(self, group_id: int, user: str, delta: int) -> None:
        row = await self.db.get(Balance, (group_id, user))
        if row is None:
            row = Balance(group_id=group_id, user_id=user, amount=0)
            self.db.add(row)
        row.amount = row.amount + delta
        await self.db.flush()

    async def reset_balances(self, group_id: int, users: Sequence[str]) -> None:
        q = select(Balance).where(
            Balance.group_id == group_id,
            Balance.user_id.in_(list(users))
        )
        res = await self.db.execute(q)

        for row in res.scalars().all():
            row.amount = 0
        await self.db.flush()

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
        expense = Expense(
            group_id=group_id,
            description=description,
            amount=total_amount,
            paid_by=payer,
            created_at=created_at,
            splits=[
                ExpenseSplit(member=m, amount=a)
                for m, a in zip(debtors, amounts)
            ],
        )

        self.db.add(expense)
        await self.db.flush()  # generates expense.id

        return _expense_out(expense)

    async def list_expenses(self, group_id: int) -> list[ExpenseOut]:
        q = (
            select(Expense)
            .where(Expense.group_id == group_id)
            .order_by(Expense.id)
        )
        res = await self.db.execute(q)
        return [_expense_out(e) for e in res.scalars().all()]

    async def get_expense(self, expense_id: int) -> Optional[ExpenseOut]:
        q = select(Expense).where(Expense.id == expense_id)
        res = await self.db.execute(q)
        expense = res.scalar_one_or_none()
        return _expense_out(expense) if expense else None

    # settlement log

    async def add_settlement(
        self,
        group_id: int,
        from_user: str,
        to_user: str,
        amount: int,
        created_at: datetime,
    ) -> SettlementHistoryOut:
        settlement = SettlementHistory(
            group_id=group_id,
            from_user=from_user,
            to_user=to_user,
            amount=amount,
            created_at=created_at,
        )

        self.db.add(settlement)
        await self.db.flush()

        return SettlementHistoryOut.model_validate(settlement)

    async def list_settlements(self, group_id: int) -> list[SettlementHistoryOut]:
        q = select(SettlementHistory).where(
            SettlementHistory.group_id == group_id
        ).order_by(SettlementHistory.id)

        res = await self.db.execute(q)
        return [SettlementHistoryOut.model_validate(s) for s in res.scalars().all()]

    # metrics

    async def count_groups(self) -> int:
        res = await self.db.execute(select(func.count(Group.id)))
        return res.scalar()

    async def count_expenses(self) -> int:
        res = await self.db.execute(select(func.count(Expense.id)))
        return res.scalar()


class SqlStorage(LedgerStorage):
    name = "sql"

    def __init__(self, database_url: str):
        self.engine = make_engine(database_url)
        self.async_session = make_sessionmaker(self.engine)

    async def init(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def close(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def transaction(self):
        async with self.async_session() as db:
            async with db.begin():
                yield SqlSession(db)
