from fastapi import APIRouter, Depends
from splitledger.core.dependencies import get_ledger
from splitledger.services.ledger import Ledger
from splitledger.services.system_services import check_storage_service, system_metrics, system_health

router = APIRouter()

@router.get("/health/storage")
async def check_storage(ledger: Ledger = Depends(get_ledger)):
    return await check_storage_service(ledger)

@router.get("/metrics")
async def metrics(ledger: Ledger = Depends(get_ledger)):
    return await system_metrics(ledger)

@router.get("/health")
async def health():
    return await system_health()
