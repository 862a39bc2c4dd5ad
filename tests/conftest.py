import asyncio
import pytest
from splitledger.db.memory import InMemoryStorage
from splitledger.services.ledger import Ledger
from splitledger.services.notification_services import EventLog
from splitledger.services.payment_services import TokenPaymentGateway, TokenWallet

LEDGER_IDENTITY = "splitledger"


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def wallet():
    return TokenWallet()


@pytest.fixture
def ledger(events, wallet):
    return Ledger(
        storage=InMemoryStorage(),
        payments=TokenPaymentGateway(wallet, spender=LEDGER_IDENTITY),
        notifications=events,
    )


@pytest.fixture
def run():
    return asyncio.run
