from fastapi import Header, HTTPException, Request
from splitledger.core.utils import is_null_identity
from splitledger.services.ledger import Ledger
from splitledger.services.payment_services import TokenPaymentGateway

def get_ledger(request: Request) -> Ledger:
    return request.app.state.ledger

def get_caller(x_identity: str = Header(...)) -> str:
    # identity is taken as given; authentication happens in front of this service
    if is_null_identity(x_identity.strip()):
        raise HTTPException(status_code=401, detail="Missing X-Identity header")
    return x_identity.strip()

def get_token_gateway(request: Request) -> TokenPaymentGateway:
    payments = get_ledger(request).payments
    if not isinstance(payments, TokenPaymentGateway):
        raise HTTPException(404, "Token wallet is not enabled")
    return payments
