import asyncio
import logging
from splitledger.db.repository import LedgerStorage

logger = logging.getLogger("splitledger.db")


async def wait_for_storage(storage: LedgerStorage, retries=5, delay=2.0):
    for i in range(retries):
        try:
            await storage.ping()
            logger.info("Splitledger : %s storage connected", storage.name)
            return
        except Exception as e:
            logger.warning(
                "Splitledger : storage not ready (%s) | [ %d/%d ] -> retrying...",
                e, i + 1, retries
            )
            await asyncio.sleep(delay)

    raise RuntimeError("Storage unreachable after retries")
