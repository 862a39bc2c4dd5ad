from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, Optional, Sequence
from splitledger.schemas.expense import ExpenseOut
from splitledger.schemas.group import GroupOut
from splitledger.schemas.settlements import SettlementHistoryOut


class StorageSession(ABC):
    """
    One unit of work against ledger state.

    Everything done through a session is committed together when the
    transaction context exits cleanly and discarded if it exits with an
    exception. Services only ever talk to this interface.
    """

    # groups

    @abstractmethod
    async def create_group(self, owner: str) -> int: ...

    @abstractmethod
    async def get_group(self, group_id: int) -> Optional[GroupOut]: ...

    @abstractmethod
    async def add_member(self, group_id: int, user: str) -> None: ...

    @abstractmethod
    async def get_user_groups(self, user: str) -> set[int]: ...

    # balances

    @abstractmethod
    async def get_balance(self, group_id: int, user: str) -> int: ...

    @abstractmethod
    async def adjust_balance(self, group_id: int, user: str, delta: int) -> None: ...

    @abstractmethod
    async def reset_balances(self, group_id: int, users: Sequence[str]) -> None: ...

    # expense log

    @abstractmethod
    async def add_expense(
        self,
        group_id: int,
        description: str,
        total_amount: int,
        payer: str,
        debtors: Sequence[str],
        amounts: Sequence[int],
        created_at: datetime,
    ) -> ExpenseOut: ...

    @abstractmethod
    async def list_expenses(self, group_id: int) -> list[ExpenseOut]: ...

    @abstractmethod
    async def get_expense(self, expense_id: int) -> Optional[ExpenseOut]: ...

    # settlement log

    @abstractmethod
    async def add_settlement(
        self,
        group_id: int,
        from_user: str,
        to_user: str,
        amount: int,
        created_at: datetime,
    ) -> SettlementHistoryOut: ...

    @abstractmethod
    async def list_settlements(self, group_id: int) -> list[SettlementHistoryOut]: ...

    # metrics

    @abstractmethod
    async def count_groups(self) -> int: ...

    @abstractmethod
    async def count_expenses(self) -> int: ...


class LedgerStorage(ABC):
    name = "storage"

    @abstractmethod
    def transaction(self) -> AsyncContextManager[StorageSession]: ...

    async def init(self):
        pass

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass
