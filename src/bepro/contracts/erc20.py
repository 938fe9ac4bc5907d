"""
ERC-20 token adapter.

Amounts cross this interface in human units (``Decimal``) and are scaled
by the token's ``decimals()`` on the way to and from the chain.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import httpx

from ..chain.abi import ERC20_ABI
from ..utils import Amount, from_decimals, to_decimals
from .base import Contract


class ERC20Contract(Contract):
    def __init__(
        self,
        contract_address: Optional[str] = None,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(
            ERC20_ABI,
            contract_address=contract_address,
            rpc_url=rpc_url,
            private_key=private_key,
            client=client,
        )
        self._decimals: Optional[int] = None

    async def assert_contract(self) -> None:
        """Require a deployed address and cache the token's decimals."""
        self.require_address()
        await self.decimals()

    async def decimals(self) -> int:
        if self._decimals is None:
            self._decimals = int(await self.call("decimals"))
        return self._decimals

    async def name(self) -> str:
        return await self.call("name")

    async def symbol(self) -> str:
        return await self.call("symbol")

    async def total_supply(self) -> Decimal:
        return from_decimals(await self.call("totalSupply"), await self.decimals())

    async def balance_of(self, address: str) -> Decimal:
        return from_decimals(await self.call("balanceOf", address), await self.decimals())

    async def allowance(self, owner: str, spender: str) -> Decimal:
        return from_decimals(await self.call("allowance", owner, spender), await self.decimals())

    async def is_approved(
        self,
        address: str,
        amount: Amount,
        spender_address: str,
        decimals: Optional[int] = None,
    ) -> bool:
        """
        Whether ``address`` lets ``spender_address`` move at least ``amount``.

        ``amount`` is scaled by ``decimals`` when given, else by the
        token's own ``decimals()``.
        """
        if decimals is None:
            decimals = await self.decimals()
        raw_allowance = await self.call("allowance", address, spender_address)
        return int(raw_allowance) >= to_decimals(amount, decimals)

    async def approve(self, address: str, amount: Amount) -> dict:
        """Allow ``address`` to spend ``amount`` tokens of the signer."""
        return await self.send("approve", address, to_decimals(amount, await self.decimals()))

    async def transfer(self, to: str, amount: Amount) -> dict:
        return await self.send("transfer", to, to_decimals(amount, await self.decimals()))
