from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, ROUND_DOWN, localcontext
from typing import Union

BEPRO_DECIMALS = 18

# uint256 needs 78 significant digits
_PRECISION = 80

Amount = Union[int, float, str, Decimal]


def from_hex(value: Union[int, str, bytes]) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, bytes):
        return int.from_bytes(value, "big")
    text = value.strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def as_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # str() keeps 0.1 as "0.1" instead of its binary expansion
        return Decimal(str(amount))
    return Decimal(amount)


def to_decimals(amount: Amount, decimals: int = BEPRO_DECIMALS) -> int:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = as_decimal(amount).scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_decimals(raw: Union[int, str, bytes], decimals: int = BEPRO_DECIMALS) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(from_hex(raw)).scaleb(-decimals)


def from_contract_time(value: Union[int, str]) -> datetime:
    return datetime.fromtimestamp(from_hex(value), tz=timezone.utc)


def to_contract_time(when: datetime) -> int:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return int(when.timestamp())


def rfc3339(when: datetime) -> str:
    return when.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_amount(value: Decimal) -> str:
    return format(value.normalize(), "f")
