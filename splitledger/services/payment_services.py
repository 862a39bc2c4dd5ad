import logging
from abc import ABC, abstractmethod
import httpx

logger = logging.getLogger("splitledger.payments")


class PaymentGateway(ABC):
    """Moves value outside the ledger. Returns False (or raises) on failure."""

    @abstractmethod
    async def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...


# ----------------------------------------------------------------------
# In-process token wallet
# ----------------------------------------------------------------------

class TokenError(Exception):
    pass


class InsufficientBalance(TokenError):
    def __init__(self, account: str, balance: int, needed: int):
        super().__init__(f"{account} has {balance}, needs {needed}")
        self.account = account
        self.balance = balance
        self.needed = needed


class InsufficientAllowance(TokenError):
    def __init__(self, spender: str, allowance: int, needed: int):
        super().__init__(f"{spender} is allowed {allowance}, needs {needed}")
        self.spender = spender
        self.allowance = allowance
        self.needed = needed


class TokenWallet:
    """
    Minimal fungible token book: balances, allowances, transfer_from.

    Holders approve a spender (the ledger) before it can move their tokens,
    which is how a settlement pays a creditor on the debtor's behalf.
    """

    def __init__(self, name="Trust Token", symbol="TRUST"):
        self.name = name
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, account: str, amount: int):
        if amount <= 0:
            raise ValueError("Mint amount must be positive")
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount

    def approve(self, owner: str, spender: str, amount: int):
        if amount < 0:
            raise ValueError("Allowance cannot be negative")
        self._allowances[(owner, spender)] = amount

    def transfer(self, sender: str, recipient: str, amount: int):
        if amount < 0:
            raise ValueError("Transfer amount cannot be negative")

        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)

        self._balances[sender] = balance - amount
        self._balances[recipient] = self.balance_of(recipient) + amount

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int):
        if amount < 0:
            raise ValueError("Transfer amount cannot be negative")

        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowance(spender, allowed, amount)

        self.transfer(owner, recipient, amount)
        self._allowances[(owner, spender)] = allowed - amount


class TokenPaymentGateway(PaymentGateway):
    def __init__(self, wallet: TokenWallet, spender: str):
        self.wallet = wallet
        self.spender = spender

    async def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        # TokenError propagates; the settlement turns it into ExternalTransferFailed
        self.wallet.transfer_from(self.spender, sender, recipient, amount)
        return True


# ----------------------------------------------------------------------
# Remote payment API
# ----------------------------------------------------------------------

class HttpPaymentGateway(PaymentGateway):
    def __init__(self, base_url: str, timeout: float = 3.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    async def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        payload = {
            "from": sender,
            "to": recipient,
            # string keeps 18-decimal amounts exact for any JSON client
            "amount": str(amount),
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                res = await client.post("/transfers", json=payload)
                res.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Payment API call failed: %s", e)
            return False

        return True
