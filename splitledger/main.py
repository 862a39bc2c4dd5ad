from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from splitledger.api.v1.routes.expense import router as expense_router
from splitledger.api.v1.routes.group import router as group_router
from splitledger.api.v1.routes.settlement import router as settlement_router
from splitledger.api.v1.routes.system import router as system_router
from splitledger.api.v1.routes.wallet import router as wallet_router
from splitledger.core.config import settings
from splitledger.core.db_check import wait_for_storage
from splitledger.core.errors import LedgerError
from splitledger.core.log_config import configure_logging
from splitledger.services.ledger import Ledger, build_ledger


def create_app(ledger: Optional[Ledger] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)

        app.state.ledger = ledger or build_ledger(settings)
        storage = app.state.ledger.storage

        await wait_for_storage(storage, retries=settings.DB_CONNECT_RETRIES)
        await storage.init()
        try:
            yield
        finally:
            await storage.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "code": exc.code}
        )

    @app.get("/")
    async def root():
        return {"message": f"{settings.APP_NAME} is live"}

    app.include_router(system_router, prefix="/api/v1/system")
    app.include_router(group_router, prefix="/api/v1/groups")
    app.include_router(expense_router, prefix="/api/v1/expenses")
    app.include_router(settlement_router, prefix="/api/v1/settlements")
    app.include_router(wallet_router, prefix="/api/v1/wallet")

    return app


app = create_app()
