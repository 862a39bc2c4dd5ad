import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import Iterable, Optional, Sequence
from splitledger.core.config import Settings, settings
from splitledger.db.memory import InMemoryStorage
from splitledger.db.repository import LedgerStorage
from splitledger.schemas.balances import GroupBalanceOut
from splitledger.schemas.events import (
    DebtSettled,
    DebtsSimplified,
    ExpenseAdded,
    GroupCreated,
    LedgerEvent,
    UserJoinedGroup,
)
from splitledger.schemas.expense import ExpenseOut
from splitledger.schemas.group import GroupOut
from splitledger.schemas.settlements import SettlementHistoryOut, Transfer
from splitledger.services import (
    balance_services,
    debt_services,
    expense_services,
    group_services,
    settlement_service,
)
from splitledger.services.notification_services import LoggingNotificationSink, NotificationSink
from splitledger.services.payment_services import (
    HttpPaymentGateway,
    PaymentGateway,
    TokenPaymentGateway,
    TokenWallet,
)

logger = logging.getLogger("splitledger.ledger")


class GroupLocks:
    """
    One asyncio.Lock per group id; different groups never wait on each other.

    Entries are weak: a lock lives only while some task holds or waits on it,
    so lookups on ids that were never created leave nothing behind.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def __call__(self, group_id: int) -> asyncio.Lock:
        lock = self._locks.get(group_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[group_id] = lock
        return lock


class Ledger:
    """
    Entry point for every ledger operation.

    Each write runs under its group's lock and inside a single storage
    transaction, so it either lands completely or not at all. Events go to
    the notification sink only after the transaction committed.
    """

    def __init__(
        self,
        storage: LedgerStorage,
        payments: PaymentGateway,
        notifications: Optional[NotificationSink] = None,
    ):
        self.storage = storage
        self.payments = payments
        self.notifications = notifications or LoggingNotificationSink()
        self.locks = GroupLocks()
        self._registry_lock = asyncio.Lock()

    @asynccontextmanager
    async def _unit_of_work(self, group_id: int):
        async with self.locks(group_id):
            async with self.storage.transaction() as db:
                yield db

    def _notify(self, event: LedgerEvent):
        try:
            self.notifications.emit(event)
        except Exception:
            # delivery is best effort, state is already committed
            logger.warning("Notification sink failed for %s", event.name, exc_info=True)

    # ------------------------------------------------------------------
    # groups
    # ------------------------------------------------------------------

    async def create_group(self, creator: str, initial_members: Iterable[Optional[str]] = ()) -> int:
        async with self._registry_lock:
            async with self.storage.transaction() as db:
                group = await group_services.create_group(db, creator, initial_members)

        self._notify(GroupCreated(group_id=group.id, owner=group.owner, members=group.members))
        return group.id

    async def join_group(self, group_id: int, user: str):
        async with self._unit_of_work(group_id) as db:
            await group_services.add_member(db, group_id, user)

        self._notify(UserJoinedGroup(group_id=group_id, user=user))

    async def is_member(self, group_id: int, user: str) -> bool:
        group = await self.get_group(group_id)
        return group_services.is_member(group, user)

    # ------------------------------------------------------------------
    # expenses
    # ------------------------------------------------------------------

    async def add_expense_equally(
        self,
        group_id: int,
        payer: str,
        description: str,
        total_amount: int,
        participants: Sequence[str],
    ) -> ExpenseOut:
        async with self._unit_of_work(group_id) as db:
            expense = await expense_services.add_expense_equally(
                db, group_id, payer, description, total_amount, participants
            )

        self._expense_added(expense)
        return expense

    async def add_expense_by_percentage(
        self,
        group_id: int,
        payer: str,
        description: str,
        total_amount: int,
        participants: Sequence[str],
        percentages: Sequence[int],
    ) -> ExpenseOut:
        async with self._unit_of_work(group_id) as db:
            expense = await expense_services.add_expense_by_percentage(
                db, group_id, payer, description, total_amount, participants, percentages
            )

        self._expense_added(expense)
        return expense

    async def add_expense_with_exact_amounts(
        self,
        group_id: int,
        payer: str,
        description: str,
        total_amount: int,
        debtors: Sequence[str],
        amounts: Sequence[int],
    ) -> ExpenseOut:
        async with self._unit_of_work(group_id) as db:
            expense = await expense_services.add_expense_with_exact_amounts(
                db, group_id, payer, description, total_amount, debtors, amounts
            )

        self._expense_added(expense)
        return expense

    def _expense_added(self, expense: ExpenseOut):
        self._notify(ExpenseAdded(
            group_id=expense.group_id,
            expense_id=expense.id,
            payer=expense.payer,
            total_amount=expense.total_amount,
            description=expense.description,
        ))

    # ------------------------------------------------------------------
    # debts and settlements
    # ------------------------------------------------------------------

    async def simplify_debts(self, group_id: int, caller: str) -> list[Transfer]:
        async with self._unit_of_work(group_id) as db:
            transfers = await debt_services.simplify_debts(db, group_id, caller)

        self._notify(DebtsSimplified(group_id=group_id, transfers=transfers))
        return transfers

    async def settle_debt(self, group_id: int, debtor: str, creditor: str) -> SettlementHistoryOut:
        async with self._unit_of_work(group_id) as db:
            record = await settlement_service.settle_debt(
                db, self.payments, group_id, debtor, creditor
            )

        self._notify(DebtSettled(
            group_id=group_id,
            debtor=debtor,
            creditor=creditor,
            amount=record.amount,
        ))
        return record

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    async def get_group(self, group_id: int) -> GroupOut:
        async with self._unit_of_work(group_id) as db:
            return await group_services.get_group(db, group_id)

    async def get_group_members(self, group_id: int) -> list[str]:
        group = await self.get_group(group_id)
        return group.members

    async def get_user_groups(self, user: str) -> set[int]:
        async with self.storage.transaction() as db:
            return await group_services.list_group_for_user(db, user)

    async def get_balance(self, group_id: int, user: str) -> int:
        async with self._unit_of_work(group_id) as db:
            return await balance_services.get_balance(db, group_id, user)

    async def get_group_balances(self, group_id: int) -> dict[str, int]:
        async with self._unit_of_work(group_id) as db:
            group = await group_services.get_group(db, group_id)
            return await balance_services.group_balances(db, group_id, group.members)

    async def get_group_overview(self, group_id: int) -> GroupBalanceOut:
        # one unit of work, so the plan always matches the balances beside it
        async with self._unit_of_work(group_id) as db:
            group = await group_services.get_group(db, group_id)
            net = await balance_services.group_balances(db, group_id, group.members)

        plan = debt_services.match_debts(net)
        return GroupBalanceOut(net=net, settlements=plan, settled=not plan)

    async def plan_settlements(self, group_id: int) -> list[Transfer]:
        async with self._unit_of_work(group_id) as db:
            return await debt_services.compute_group_settlements(db, group_id)

    async def is_group_settled(self, group_id: int) -> bool:
        async with self._unit_of_work(group_id) as db:
            return await debt_services.is_group_settled(db, group_id)

    async def get_expenses(self, group_id: int) -> list[ExpenseOut]:
        async with self._unit_of_work(group_id) as db:
            return await expense_services.get_expenses_by_group(db, group_id)

    async def get_expense(self, expense_id: int) -> ExpenseOut:
        async with self.storage.transaction() as db:
            return await expense_services.get_expense_by_id(db, expense_id)

    async def get_settlements(self, group_id: int) -> list[SettlementHistoryOut]:
        async with self._unit_of_work(group_id) as db:
            return await settlement_service.get_settlement_history(db, group_id)


def build_storage(config: Settings = settings) -> LedgerStorage:
    if config.STORAGE_BACKEND == "sql":
        from splitledger.db.sql import SqlStorage
        return SqlStorage(config.DATABASE_URL)
    return InMemoryStorage()


def build_payments(config: Settings = settings) -> PaymentGateway:
    if config.PAYMENT_BACKEND == "http":
        return HttpPaymentGateway(config.PAYMENT_API_URL, timeout=config.PAYMENT_TIMEOUT)
    return TokenPaymentGateway(TokenWallet(), spender=config.LEDGER_IDENTITY)


def build_ledger(config: Settings = settings, notifications: Optional[NotificationSink] = None) -> Ledger:
    return Ledger(
        storage=build_storage(config),
        payments=build_payments(config),
        notifications=notifications,
    )
