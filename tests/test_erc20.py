"""ERC-20 adapter tests: decimal scaling and allowance checks."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from bepro.contracts.erc20 import ERC20Contract
from bepro.errors import ContractNotDeployedError

pytestmark = pytest.mark.asyncio

TOKEN = "0x" + "ab" * 20
OWNER = "0x" + "01" * 20
SPENDER = "0x" + "cd" * 20


def _token(decimals: int = 18, **values: int) -> ERC20Contract:
    token = ERC20Contract(TOKEN)

    async def _call(function_name: str, *args):
        if function_name == "decimals":
            return decimals
        return values[function_name]

    token.call = AsyncMock(side_effect=_call)
    token.send = AsyncMock(return_value={"tx_hash": "0xabc", "status": 1})
    return token


async def test_total_supply_in_token_units() -> None:
    token = _token(totalSupply=10**27)
    assert await token.total_supply() == Decimal(10**9)


async def test_decimals_are_cached() -> None:
    token = _token(totalSupply=10**18, balanceOf=0)
    await token.total_supply()
    await token.balance_of(OWNER)
    decimal_calls = [c for c in token.call.await_args_list if c.args[0] == "decimals"]
    assert len(decimal_calls) == 1


async def test_six_decimal_token() -> None:
    token = _token(decimals=6, balanceOf=2_500_000)
    assert await token.balance_of(OWNER) == Decimal("2.5")


async def test_approve_scales_amount() -> None:
    token = _token()
    await token.approve(SPENDER, Decimal("3.25"))
    token.send.assert_awaited_once_with("approve", SPENDER, 3_250_000_000_000_000_000)


async def test_is_approved_when_allowance_covers_amount() -> None:
    token = _token(allowance=5 * 10**18)
    assert await token.is_approved(OWNER, 5, SPENDER) is True
    token.call.assert_any_await("allowance", OWNER, SPENDER)


async def test_not_approved_below_amount() -> None:
    token = _token(allowance=5 * 10**18 - 1)
    assert await token.is_approved(OWNER, 5, SPENDER) is False


async def test_is_approved_with_explicit_decimals() -> None:
    token = _token(decimals=6, allowance=10**18)
    assert await token.is_approved(OWNER, 1, SPENDER, decimals=18) is True
    assert await token.is_approved(OWNER, 2, SPENDER, decimals=18) is False
    token.call.assert_awaited_with("allowance", OWNER, SPENDER)
    assert ("decimals",) not in [c.args for c in token.call.await_args_list]


async def test_allowance_in_token_units() -> None:
    token = _token(allowance=15 * 10**17)
    assert await token.allowance(OWNER, SPENDER) == Decimal("1.5")


async def test_assert_contract_requires_address() -> None:
    token = ERC20Contract()
    with pytest.raises(ContractNotDeployedError):
        await token.assert_contract()


async def test_transfer_scales_amount() -> None:
    token = _token()
    await token.transfer(OWNER, 1)
    token.send.assert_awaited_once_with("transfer", OWNER, 10**18)
