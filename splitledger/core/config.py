from typing import Literal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "Splitledger"
    LOG_LEVEL: str = "INFO"

    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./splitledger.db"
    DB_CONNECT_RETRIES: int = 5

    PAYMENT_BACKEND: Literal["token", "http"] = "token"
    PAYMENT_API_URL: str = "http://localhost:8001"
    PAYMENT_TIMEOUT: float = 3.0
    LEDGER_IDENTITY: str = "splitledger"
    # /wallet/mint hands out tokens for free; turn off outside of demos
    WALLET_FAUCET: bool = True

    UNIT_DECIMALS: int = 18

    class Config:
        env_file = ".env"

settings = Settings()
