from fastapi import APIRouter, Depends, HTTPException
from splitledger.core.config import settings
from splitledger.core.dependencies import get_caller, get_token_gateway
from splitledger.schemas.wallet import TokenAmount, WalletOut
from splitledger.services.payment_services import TokenPaymentGateway

router = APIRouter()


def _wallet_out(gateway: TokenPaymentGateway, user: str) -> WalletOut:
    return WalletOut(
        account=user,
        balance=gateway.wallet.balance_of(user),
        allowance=gateway.wallet.allowance(user, gateway.spender),
    )


@router.get("/me", response_model=WalletOut)
async def my_wallet(gateway: TokenPaymentGateway = Depends(get_token_gateway), user: str = Depends(get_caller)):
    return _wallet_out(gateway, user)


@router.post("/mint", response_model=WalletOut)
async def mint(data: TokenAmount, gateway: TokenPaymentGateway = Depends(get_token_gateway), user: str = Depends(get_caller)):
    # faucet: tokens are not backed by any paid value
    if not settings.WALLET_FAUCET:
        raise HTTPException(403, "Token faucet is disabled")
    try:
        gateway.wallet.mint(user, data.amount)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return _wallet_out(gateway, user)


@router.post("/approve", response_model=WalletOut)
async def approve(data: TokenAmount, gateway: TokenPaymentGateway = Depends(get_token_gateway), user: str = Depends(get_caller)):
    # lets the ledger pull up to `amount` when this user settles a debt
    try:
        gateway.wallet.approve(user, gateway.spender, data.amount)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return _wallet_out(gateway, user)
