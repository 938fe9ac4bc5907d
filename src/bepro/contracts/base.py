"""
Generic contract invocation helper.

A ``Contract`` binds an ABI to an optional deployed address and a signer.
Reads go through ``eth_call``; writes are signed locally and sent as raw
transactions. Adapters subclass it and call ``call``/``send`` by method name.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..chain.account import get_address
from ..chain.rpc import read_contract
from ..chain.tx import DEFAULT_DEPLOY_GAS_LIMIT, deploy_contract, send_contract_tx
from ..errors import ContractNotDeployedError, TransactionRevertedError

logger = logging.getLogger(__name__)


class Contract:
    def __init__(
        self,
        abi: list[dict[str, Any]],
        contract_address: Optional[str] = None,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.abi = abi
        self.contract_address = contract_address
        self.rpc_url = rpc_url
        self.private_key = private_key
        self.client = client

    @property
    def address(self) -> Optional[str]:
        return self.contract_address

    def require_address(self) -> str:
        if not self.contract_address:
            raise ContractNotDeployedError(
                "Contract is not deployed, first deploy it and provide a contract address"
            )
        return self.contract_address

    @property
    def sender(self) -> Optional[str]:
        """Signer address, or None when no key was given explicitly."""
        if self.private_key is None:
            return None
        return get_address(self.private_key)

    def signer_address(self) -> str:
        """Signer address, falling back to PRIVATE_KEY from the environment."""
        return get_address(self.private_key)

    async def call(self, function_name: str, *args: Any) -> Any:
        address = self.require_address()
        logger.debug("call %s.%s%r", address, function_name, args)
        return await read_contract(
            address,
            function_name,
            list(args),
            abi=self.abi,
            from_address=self.sender,
            rpc_url=self.rpc_url,
            client=self.client,
        )

    async def send(
        self,
        function_name: str,
        *args: Any,
        value: int = 0,
        gas_limit: Optional[int] = None,
        wait: bool = True,
    ) -> dict:
        """
        Send a state-changing transaction.

        Returns:
            Dict with tx_hash and, when waiting, receipt and status

        Raises:
            TransactionRevertedError: If the mined transaction has status 0
        """
        address = self.require_address()
        logger.info("send %s.%s%r", address, function_name, args)
        result = await send_contract_tx(
            contract_address=address,
            function_name=function_name,
            args=list(args),
            abi=self.abi,
            value=value,
            gas_limit=gas_limit,
            private_key=self.private_key,
            wait=wait,
            rpc_url=self.rpc_url,
            client=self.client,
        )
        if wait and result.get("status") == 0:
            raise TransactionRevertedError(result["tx_hash"], result.get("receipt"))
        return result

    async def deploy(
        self,
        bytecode: str,
        constructor_args: Optional[list] = None,
        gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT,
    ) -> dict:
        result = await deploy_contract(
            self.abi,
            bytecode,
            constructor_args=constructor_args,
            gas_limit=gas_limit,
            private_key=self.private_key,
            rpc_url=self.rpc_url,
            client=self.client,
        )
        if result.get("status") == 0:
            raise TransactionRevertedError(result["tx_hash"], result.get("receipt"))
        self.contract_address = result.get("contract_address")
        return result
