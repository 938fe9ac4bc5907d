"""
JSON-RPC and transaction plumbing tests.

A fake node is served through ``httpx.MockTransport``; no network access.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from eth_abi import decode, encode
from eth_account import Account

from bepro.chain.abi import ERC20_ABI, NETWORK_ABI, find_function, load_abi, load_bytecode
from bepro.chain.rpc import (
    decode_function_result,
    encode_function_call,
    get_balance,
    read_contract,
    rpc_call,
    wait_for_receipt,
)
from bepro.chain.tx import send_contract_tx, to_checksum_address
from bepro.contracts.base import Contract
from bepro.contracts.network import Network
from bepro.errors import ContractNotDeployedError, RpcError, TransactionRevertedError

PRIVATE_KEY = "0x" + "11" * 32
TOKEN = "0x" + "ab" * 20
NETWORK = "0x" + "cd" * 20
RPC_URL = "http://node.test"


def _node(handler: Callable[[str, list], Any]) -> httpx.AsyncClient:
    """AsyncClient whose transport answers JSON-RPC requests via ``handler``."""

    def _respond(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        result = handler(body["method"], body["params"])
        if isinstance(result, dict) and "error" in result:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], **result})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    return httpx.AsyncClient(transport=httpx.MockTransport(_respond))


def _hex(types: list[str], values: list) -> str:
    return "0x" + encode(types, values).hex()


class TestCalldata:
    """Tests for function selector and argument encoding."""

    def test_known_selectors(self) -> None:
        assert encode_function_call(ERC20_ABI, "totalSupply", []) == "0x18160ddd"
        assert encode_function_call(ERC20_ABI, "balanceOf", [TOKEN]).startswith("0x70a08231")
        assert encode_function_call(ERC20_ABI, "approve", [NETWORK, 1]).startswith("0x095ea7b3")
        assert encode_function_call(ERC20_ABI, "allowance", [TOKEN, NETWORK]).startswith("0xdd62ed3e")

    def test_arguments_are_abi_encoded(self) -> None:
        calldata = encode_function_call(NETWORK_ABI, "approveMerge", [3, 4])
        args = decode(["uint256", "uint256"], bytes.fromhex(calldata[10:]))
        assert args == (3, 4)

    def test_unknown_function(self) -> None:
        with pytest.raises(ValueError, match="not found"):
            encode_function_call(NETWORK_ABI, "selfDestruct", [])

    def test_argument_count_mismatch(self) -> None:
        with pytest.raises(ValueError, match="expects 2 arguments"):
            encode_function_call(NETWORK_ABI, "closeIssue", [1])

    def test_decode_single_output(self) -> None:
        assert decode_function_result(ERC20_ABI, "decimals", _hex(["uint8"], [18])) == 18

    def test_decode_tuple_output(self) -> None:
        data = _hex(
            ["uint256", "uint256", "uint256", "address", "uint256", "uint256", "bool"],
            [1, 10**18, 1_600_000_000, TOKEN, 0, 0, True],
        )
        result = decode_function_result(NETWORK_ABI, "getIssueById", data)
        assert len(result) == 7
        assert result[3].lower() == TOKEN
        assert result[6] is True

    def test_decode_no_outputs(self) -> None:
        assert decode_function_result(NETWORK_ABI, "lockBepro", "0x") is None

    def test_find_function(self) -> None:
        assert find_function(NETWORK_ABI, "getMergeById")["outputs"][3]["type"] == "address[]"


class TestChecksum:
    """Tests for EIP-55 checksum conversion."""

    def test_reference_vector(self) -> None:
        expected = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert to_checksum_address(expected.lower()) == expected

    def test_rejects_short_address(self) -> None:
        with pytest.raises(ValueError):
            to_checksum_address("0x1234")


class TestArtifacts:
    """Tests for bytecode loading from compiled artifacts."""

    def test_truffle_layout(self, tmp_path) -> None:
        (tmp_path / "TruffleNet.json").write_text(
            json.dumps({"abi": [], "bytecode": "0x6080"}), encoding="utf-8"
        )
        assert load_bytecode("TruffleNet", tmp_path) == "0x6080"

    def test_foundry_layout(self, tmp_path) -> None:
        out = tmp_path / "ForgeNet.sol"
        out.mkdir()
        (out / "ForgeNet.json").write_text(
            json.dumps({"abi": [], "bytecode": {"object": "6080"}}), encoding="utf-8"
        )
        assert load_bytecode("ForgeNet", tmp_path) == "0x6080"

    def test_missing_artifact(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_bytecode("Nowhere", tmp_path)

    def test_abi_from_artifact(self, tmp_path) -> None:
        (tmp_path / "AbiNet.json").write_text(
            json.dumps({"abi": NETWORK_ABI, "bytecode": "0x"}), encoding="utf-8"
        )
        assert load_abi("AbiNet", tmp_path) == NETWORK_ABI
        with pytest.raises(ValueError, match="No bytecode"):
            load_bytecode("AbiNet", tmp_path)


class TestRpcCall:
    """Tests for the JSON-RPC request helpers."""

    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        async with _node(lambda method, params: "0x2a") as client:
            assert await rpc_call("eth_chainId", [], rpc_url=RPC_URL, client=client) == "0x2a"

    @pytest.mark.asyncio
    async def test_error_object_raises(self) -> None:
        def handler(method: str, params: list) -> dict:
            return {"error": {"code": -32000, "message": "execution reverted"}}

        async with _node(handler) as client:
            with pytest.raises(RpcError, match="execution reverted"):
                await rpc_call("eth_call", [], rpc_url=RPC_URL, client=client)

    @pytest.mark.asyncio
    async def test_http_error_propagates(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await rpc_call("eth_call", [], rpc_url=RPC_URL, client=client)

    @pytest.mark.asyncio
    async def test_read_contract_sends_eth_call(self) -> None:
        seen: list[tuple[str, list]] = []

        def handler(method: str, params: list) -> str:
            seen.append((method, params))
            return _hex(["uint256"], [42])

        async with _node(handler) as client:
            value = await read_contract(
                NETWORK, "incrementIssueID", abi=NETWORK_ABI,
                from_address=TOKEN, rpc_url=RPC_URL, client=client,
            )

        assert value == 42
        method, params = seen[0]
        assert method == "eth_call"
        assert params[0]["to"] == NETWORK
        assert params[0]["from"] == TOKEN
        assert params[1] == "latest"

    @pytest.mark.asyncio
    async def test_get_balance(self) -> None:
        def handler(method: str, params: list) -> str:
            assert method == "eth_getBalance"
            assert params == [TOKEN, "latest"]
            return hex(3 * 10**18)

        async with _node(handler) as client:
            assert await get_balance(TOKEN, rpc_url=RPC_URL, client=client) == 3 * 10**18

    @pytest.mark.asyncio
    async def test_read_contract_empty_result(self) -> None:
        async with _node(lambda method, params: "0x") as client:
            value = await read_contract(
                NETWORK, "totalStaked", abi=NETWORK_ABI, rpc_url=RPC_URL, client=client
            )
        assert value is None

    @pytest.mark.asyncio
    async def test_wait_for_receipt_polls(self) -> None:
        answers = iter([None, None, {"status": "0x1"}])
        async with _node(lambda method, params: next(answers)) as client:
            receipt = await wait_for_receipt(
                "0xfeed", poll_interval=0, rpc_url=RPC_URL, client=client
            )
        assert receipt == {"status": "0x1"}

    @pytest.mark.asyncio
    async def test_wait_for_receipt_times_out(self) -> None:
        async with _node(lambda method, params: None) as client:
            with pytest.raises(TimeoutError):
                await wait_for_receipt(
                    "0xfeed", timeout=0.05, poll_interval=0.01, rpc_url=RPC_URL, client=client
                )


def _tx_node(status: str, sent: list[str]) -> httpx.AsyncClient:
    def handler(method: str, params: list) -> Any:
        if method == "eth_getTransactionCount":
            return "0x5"
        if method == "eth_gasPrice":
            return hex(10**9)
        if method == "eth_sendRawTransaction":
            sent.append(params[0])
            return "0x" + "aa" * 32
        if method == "eth_getTransactionReceipt":
            return {
                "status": status,
                "transactionHash": "0x" + "aa" * 32,
                "contractAddress": NETWORK,
            }
        if method == "eth_call":
            return _hex(["uint8"], [18])
        raise AssertionError(f"unexpected {method}")

    return _node(handler)


class TestTransactions:
    """Tests for signing and sending contract transactions."""

    @pytest.mark.asyncio
    async def test_send_contract_tx_signs_for_signer(self) -> None:
        sent: list[str] = []
        async with _tx_node("0x1", sent) as client:
            result = await send_contract_tx(
                NETWORK, "approveIssue", [7], abi=NETWORK_ABI,
                private_key=PRIVATE_KEY, rpc_url=RPC_URL, client=client,
            )

        assert result["status"] == 1
        assert result["tx_hash"] == "0x" + "aa" * 32
        assert len(sent) == 1
        signer = Account.recover_transaction(sent[0])
        assert signer == Account.from_key(PRIVATE_KEY).address

    @pytest.mark.asyncio
    async def test_contract_send_raises_on_revert(self) -> None:
        sent: list[str] = []
        async with _tx_node("0x0", sent) as client:
            contract = Contract(
                NETWORK_ABI, NETWORK, rpc_url=RPC_URL, private_key=PRIVATE_KEY, client=client
            )
            with pytest.raises(TransactionRevertedError):
                await contract.send("closeIssue", 1, 2)

    @pytest.mark.asyncio
    async def test_contract_without_address(self) -> None:
        contract = Contract(NETWORK_ABI)
        with pytest.raises(ContractNotDeployedError, match="not deployed"):
            await contract.call("totalStaked")

    @pytest.mark.asyncio
    async def test_network_deploy_binds_token(self, tmp_path) -> None:
        (tmp_path / "Network.json").write_text(
            json.dumps({"abi": NETWORK_ABI, "bytecode": "0x6080"}), encoding="utf-8"
        )
        sent: list[str] = []
        async with _tx_node("0x1", sent) as client:
            net = Network(token_address=TOKEN, rpc_url=RPC_URL, private_key=PRIVATE_KEY, client=client)
            result = await net.deploy(artifacts_dir=tmp_path)

        assert result["contract_address"] == NETWORK
        assert net.address == NETWORK
        creation = Account.recover_transaction(sent[0])
        assert creation == Account.from_key(PRIVATE_KEY).address
