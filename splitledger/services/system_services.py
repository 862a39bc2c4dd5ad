from splitledger.services.ledger import Ledger

async def check_storage_service(ledger: Ledger):
    try:
        await ledger.storage.ping()
        return {"storage": ledger.storage.name, "ok": True, "message": "Storage is reachable"}
    except Exception as e:
        return {"storage": ledger.storage.name, "ok": False, "error": str(e)}

async def system_health():
    return {
        "status": "ok"
    }

async def system_metrics(ledger: Ledger):
    async with ledger.storage.transaction() as db:
        groups = await db.count_groups()
        expenses = await db.count_expenses()

    return {
        "groups": groups,
        "expenses": expenses
    }
