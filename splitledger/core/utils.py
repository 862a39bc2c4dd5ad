from decimal import Decimal, InvalidOperation, getcontext
from typing import NewType, Optional
from splitledger.core.config import settings

getcontext().prec = 78

# Participants are opaque, comparable keys (wallet address, user id, email...).
IdentityKey = NewType("IdentityKey", str)

NULL_IDENTITY = IdentityKey("")


def is_null_identity(identity: Optional[str]) -> bool:
    return identity is None or identity == NULL_IDENTITY


def unit_scale(decimals: int | None = None) -> int:
    return 10 ** (settings.UNIT_DECIMALS if decimals is None else decimals)


def parse_units(value: str | int, decimals: int | None = None) -> int:
    """
    Human amount -> fixed point integer.

        parse_units("12.5") == 12_500_000_000_000_000_000
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {value!r}")

    scaled = amount * unit_scale(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{value!r} has more precision than the ledger unit")

    return int(scaled)


def format_units(amount: int, decimals: int | None = None) -> str:
    scale = unit_scale(decimals)
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), scale)

    if frac == 0:
        return f"{sign}{whole}.0"

    width = len(str(scale)) - 1
    return f"{sign}{whole}.{str(frac).zfill(width).rstrip('0')}"
