import logging
from datetime import datetime, timezone
from splitledger.core.errors import (
    ExternalTransferFailed,
    NoNegativeBalance,
    NotACreditor,
    NothingToSettle,
)
from splitledger.db.repository import StorageSession
from splitledger.schemas.settlements import SettlementHistoryOut
from splitledger.services.balance_services import get_balance, transfer_balance
from splitledger.services.group_services import get_group
from splitledger.services.payment_services import PaymentGateway

logger = logging.getLogger("splitledger.settlements")


async def settle_debt(
    db: StorageSession,
    payments: PaymentGateway,
    group_id: int,
    debtor: str,
    creditor: str,
) -> SettlementHistoryOut:
    """
    Clear as much of `debtor`'s debt against `creditor` as both balances allow.

    Ledger changes are staged in `db` before the payment call. If the payment
    fails the error propagates and the caller's transaction rolls every staged
    change back, so balances never disagree with moved value.
    """
    await get_group(db, group_id)

    debtor_balance = await get_balance(db, group_id, debtor)
    creditor_balance = await get_balance(db, group_id, creditor)

    if debtor_balance >= 0:
        raise NoNegativeBalance(f"{debtor} does not have a negative balance in group {group_id}")

    if creditor_balance <= 0:
        raise NotACreditor(f"{creditor} is not a creditor in group {group_id}")

    amount = min(-debtor_balance, creditor_balance)
    if amount == 0:
        raise NothingToSettle()

    # effects first
    await transfer_balance(db, group_id, debit=creditor, credit=debtor, amount=amount)
    record = await db.add_settlement(
        group_id=group_id,
        from_user=debtor,
        to_user=creditor,
        amount=amount,
        created_at=datetime.now(timezone.utc),
    )

    # then the interaction
    try:
        ok = await payments.transfer(debtor, creditor, amount)
    except Exception as e:
        logger.warning("Payment %s -> %s (%d) raised: %s", debtor, creditor, amount, e)
        raise ExternalTransferFailed(f"Payment transfer failed: {e}") from e

    if not ok:
        logger.warning("Payment %s -> %s (%d) was refused", debtor, creditor, amount)
        raise ExternalTransferFailed()

    logger.info("Group %s: %s settled %d with %s", group_id, debtor, amount, creditor)
    return record


async def get_settlement_history(db: StorageSession, group_id: int) -> list[SettlementHistoryOut]:
    await get_group(db, group_id)
    return await db.list_settlements(group_id)
