"""
JSON-RPC Client for EVM nodes.

Lightweight alternative to web3.py: uses httpx.AsyncClient for HTTP and
eth-abi for encoding. Supports read-only contract calls, balance queries
and transaction receipt polling.

Every helper accepts an optional ``client``; when omitted a short-lived
client is opened for the single request.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import os
import time
from typing import Any, Optional

import httpx
from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..errors import RpcError
from .abi import find_function

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_CHAIN_ID = 1
DEFAULT_TIMEOUT = 30.0

_request_ids = itertools.count(1)


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("BEPRO_RPC_URL", DEFAULT_RPC_URL)


def get_chain_id() -> int:
    """Get the chain ID from environment or default."""
    return int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID)))


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256
    return keccak(data)


async def rpc_call(
    method: str,
    params: list,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL
        client: Shared AsyncClient (optional)

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node answers with an error object
        httpx.HTTPError: On transport or HTTP status failures
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": next(_request_ids),
    }
    logger.debug("rpc %s -> %s", method, url)

    if client is None:
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as own_client:
            response = await own_client.post(url, json=payload)
    else:
        response = await client.post(url, json=payload)
    response.raise_for_status()
    data = response.json()

    if "error" in data:
        raise RpcError(data["error"])

    return data.get("result")


def function_signature(function_name: str, input_types: list[str]) -> str:
    return f"{function_name}({','.join(input_types)})"


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    selector = keccak256(function_signature(function_name, input_types).encode("utf-8"))[:4]
    encoded_args = encode(input_types, args) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the bare value for a single
        output, otherwise a tuple
    """
    func = find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


async def read_contract(
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    abi: Optional[list] = None,
    from_address: Optional[str] = None,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments (default: [])
        abi: Contract ABI
        from_address: Caller address, for methods that read msg.sender
        rpc_url: RPC endpoint URL
        client: Shared AsyncClient (optional)

    Returns:
        Decoded return value(s), or None for an empty result
    """
    if abi is None:
        raise ValueError("abi must be provided")

    calldata = encode_function_call(abi, function_name, args or [])
    call: dict[str, str] = {"to": contract_address, "data": calldata}
    if from_address:
        call["from"] = from_address

    result = await rpc_call("eth_call", [call, "latest"], rpc_url=rpc_url, client=client)

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)


async def get_balance(
    address: str,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    """Get the native balance of an address, in wei."""
    result = await rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url, client=client)
    return int(result, 16)


async def get_nonce(
    address: str,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    result = await rpc_call(
        "eth_getTransactionCount", [address, "latest"], rpc_url=rpc_url, client=client
    )
    return int(result, 16)


async def get_gas_price(
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    result = await rpc_call("eth_gasPrice", [], rpc_url=rpc_url, client=client)
    return int(result, 16)


async def send_raw_transaction(
    raw_tx: str,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Send a signed raw transaction and return its hash."""
    return await rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url, client=client)


async def wait_for_receipt(
    tx_hash: str,
    timeout: float = 120,
    poll_interval: float = 2.0,
    rpc_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        tx_hash: Transaction hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        receipt = await rpc_call(
            "eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url, client=client
        )
        if receipt is not None:
            return receipt
        await asyncio.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
