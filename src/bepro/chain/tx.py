"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for signing and the httpx-based JSON-RPC helpers for
sending. Gas is paid by the signer's account.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from eth_abi import encode

from .abi import find_constructor
from .account import get_account
from .rpc import (
    encode_function_call,
    get_chain_id,
    get_gas_price,
    get_nonce,
    keccak256,
    send_raw_transaction,
    wait_for_receipt,
)

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 500_000
DEFAULT_DEPLOY_GAS_LIMIT = 6_000_000


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    if len(addr) != 40:
        raise ValueError(f"Invalid address: {address}")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


async def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi: list,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Build a contract call transaction (unsigned).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments
        abi: Contract ABI
        value: Native value in wei (default: 0)
        gas_limit: Gas limit (default: DEFAULT_GAS_LIMIT)
        private_key: Signer key, used for the nonce lookup

    Returns:
        Unsigned transaction dict
    """
    calldata = encode_function_call(abi, function_name, args)

    account = get_account(private_key)
    nonce = await get_nonce(account.address, rpc_url=rpc_url, client=client)
    gas_price = await get_gas_price(rpc_url=rpc_url, client=client)

    return {
        "to": to_checksum_address(contract_address),
        "data": calldata,
        "value": value,
        "nonce": nonce,
        "gas": gas_limit or DEFAULT_GAS_LIMIT,
        "gasPrice": gas_price,
        "chainId": get_chain_id(),
    }


async def sign_and_send(
    tx: dict,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: float = 120,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Sign a transaction and send it.

    Returns:
        Dict with tx_hash and, when waiting, receipt and status
    """
    account = get_account(private_key)
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + signed.raw_transaction.hex()

    tx_hash = await send_raw_transaction(raw_tx, rpc_url=rpc_url, client=client)
    logger.info("sent transaction %s from %s", tx_hash, account.address)
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = await wait_for_receipt(tx_hash, timeout=timeout, rpc_url=rpc_url, client=client)
        result["receipt"] = receipt
        result["status"] = int(receipt.get("status", "0x0"), 16)

    return result


async def send_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi: list,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Build, sign, and send a contract call transaction.

    Returns:
        Dict with tx_hash, receipt, status
    """
    tx = await build_contract_tx(
        contract_address=contract_address,
        function_name=function_name,
        args=args,
        abi=abi,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
        client=client,
    )
    return await sign_and_send(
        tx, private_key=private_key, wait=wait, rpc_url=rpc_url, client=client
    )


async def deploy_contract(
    abi: list,
    bytecode: str,
    constructor_args: Optional[list] = None,
    gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: float = 180,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Deploy a contract.

    Builds a creation transaction (no ``to``), signs, sends, and extracts
    the deployed contract address from the receipt.

    Returns:
        Dict with tx_hash, status, contract_address, receipt
    """
    deploy_data = bytecode[2:] if bytecode.startswith("0x") else bytecode
    if constructor_args:
        constructor = find_constructor(abi)
        if constructor is None:
            raise ValueError("Constructor not found in ABI, but constructor_args were provided.")
        input_types = [inp["type"] for inp in constructor.get("inputs", [])]
        deploy_data += encode(input_types, constructor_args).hex()

    account = get_account(private_key)
    nonce = await get_nonce(account.address, rpc_url=rpc_url, client=client)
    gas_price = await get_gas_price(rpc_url=rpc_url, client=client)

    tx: dict[str, Any] = {
        "data": "0x" + deploy_data,
        "value": 0,
        "nonce": nonce,
        "gas": gas_limit,
        "gasPrice": gas_price,
        "chainId": get_chain_id(),
    }

    result = await sign_and_send(
        tx, private_key=private_key, wait=wait, timeout=timeout, rpc_url=rpc_url, client=client
    )

    if wait and result.get("receipt"):
        contract_address = result["receipt"].get("contractAddress")
        if contract_address:
            result["contract_address"] = contract_address
            logger.info("deployed contract at %s", contract_address)

    return result
