"""
Tests for payment back-ends: token wallet and remote payment API.
"""

import asyncio
import json

import httpx
import pytest

from splitledger.services.payment_services import (
    HttpPaymentGateway,
    InsufficientAllowance,
    InsufficientBalance,
    TokenPaymentGateway,
    TokenWallet,
)

ALICE, BOB, SPENDER = "alice", "bob", "splitledger"


class TestTokenWallet:
    def test_metadata(self):
        wallet = TokenWallet()
        assert (wallet.name, wallet.symbol) == ("Trust Token", "TRUST")

    def test_mint(self):
        wallet = TokenWallet()
        wallet.mint(ALICE, 1000)
        assert wallet.balance_of(ALICE) == 1000
        assert wallet.total_supply == 1000

    def test_mint_requires_value(self):
        with pytest.raises(ValueError):
            TokenWallet().mint(ALICE, 0)

    def test_transfer(self):
        wallet = TokenWallet()
        wallet.mint(ALICE, 1000)
        wallet.transfer(ALICE, BOB, 100)
        assert (wallet.balance_of(ALICE), wallet.balance_of(BOB)) == (900, 100)
        assert wallet.total_supply == 1000

    def test_transfer_insufficient_balance(self):
        wallet = TokenWallet()
        wallet.mint(ALICE, 1000)
        with pytest.raises(InsufficientBalance):
            wallet.transfer(ALICE, BOB, 1001)
        assert wallet.balance_of(ALICE) == 1000

    def test_approve_and_transfer_from(self):
        wallet = TokenWallet()
        wallet.mint(ALICE, 1000)
        wallet.approve(ALICE, SPENDER, 200)
        assert wallet.allowance(ALICE, SPENDER) == 200

        wallet.transfer_from(SPENDER, ALICE, BOB, 150)

        assert wallet.balance_of(ALICE) == 850
        assert wallet.balance_of(BOB) == 150
        assert wallet.allowance(ALICE, SPENDER) == 50

    def test_transfer_from_without_allowance(self):
        wallet = TokenWallet()
        wallet.mint(ALICE, 1000)
        with pytest.raises(InsufficientAllowance):
            wallet.transfer_from(SPENDER, ALICE, BOB, 50)

    def test_failed_transfer_from_keeps_allowance(self):
        wallet = TokenWallet()
        wallet.approve(ALICE, SPENDER, 100)
        with pytest.raises(InsufficientBalance):
            wallet.transfer_from(SPENDER, ALICE, BOB, 50)
        assert wallet.allowance(ALICE, SPENDER) == 100

    def test_negative_transfer_rejected(self):
        wallet = TokenWallet()
        wallet.mint(BOB, 100)
        with pytest.raises(ValueError):
            wallet.transfer(ALICE, BOB, -100)
        assert (wallet.balance_of(ALICE), wallet.balance_of(BOB)) == (0, 100)

    def test_negative_transfer_from_rejected(self):
        wallet = TokenWallet()
        wallet.mint(BOB, 100)
        wallet.approve(ALICE, SPENDER, 10)
        with pytest.raises(ValueError):
            wallet.transfer_from(SPENDER, ALICE, BOB, -100)
        assert wallet.balance_of(BOB) == 100
        assert wallet.allowance(ALICE, SPENDER) == 10


class TestTokenPaymentGateway:
    def test_moves_tokens_as_spender(self):
        wallet = TokenWallet()
        wallet.mint(BOB, 500)
        wallet.approve(BOB, SPENDER, 500)
        gateway = TokenPaymentGateway(wallet, spender=SPENDER)

        assert asyncio.run(gateway.transfer(BOB, ALICE, 300)) is True
        assert wallet.balance_of(ALICE) == 300
        assert wallet.allowance(BOB, SPENDER) == 200


class TestHttpPaymentGateway:
    def test_posts_transfer(self):
        seen = []

        def handler(request: httpx.Request):
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(201, json={"status": "ok"})

        gateway = HttpPaymentGateway("http://payments.test", transport=httpx.MockTransport(handler))
        amount = 50 * 10**18

        assert asyncio.run(gateway.transfer(BOB, ALICE, amount)) is True
        assert seen == [("POST", "/transfers", {"from": BOB, "to": ALICE, "amount": str(amount)})]

    def test_error_status_is_failure(self):
        def handler(request):
            return httpx.Response(402, json={"detail": "insufficient funds"})

        gateway = HttpPaymentGateway("http://payments.test", transport=httpx.MockTransport(handler))
        assert asyncio.run(gateway.transfer(BOB, ALICE, 1)) is False

    def test_transport_error_is_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = HttpPaymentGateway("http://payments.test", transport=httpx.MockTransport(handler))
        assert asyncio.run(gateway.transfer(BOB, ALICE, 1)) is False
