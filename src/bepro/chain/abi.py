"""
ABI Registry - Built-in contract ABIs plus an artifact loader.

The client ships the ABI fragments it needs for the BEPRO Network and
ERC-20 contracts. Deployment needs bytecode, which is read from compiled
JSON artifacts (Truffle ``build/contracts`` or Foundry ``out``) found
under ``BEPRO_ARTIFACTS_DIR``.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any


def _fn(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[str],
    mutability: str = "view",
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg, "type": typ} for arg, typ in inputs],
        "outputs": [{"name": "", "type": typ} for typ in outputs],
        "stateMutability": mutability,
    }


NETWORK_ABI: list[dict[str, Any]] = [
    {
        "type": "constructor",
        "inputs": [{"name": "_tokenAddress", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    _fn("getIssuesByAddress", [("_address", "address")], ["uint256[]"]),
    _fn("incrementIssueID", [], ["uint256"]),
    _fn("closedIdsCount", [], ["uint256"]),
    _fn("percentageNeededForApprove", [], ["uint256"]),
    _fn("percentageNeededForMerge", [], ["uint256"]),
    _fn("totalStaked", [], ["uint256"]),
    _fn("beproVotesStaked", [], ["uint256"]),
    _fn("COUNCIL_BEPRO_AMOUNT", [], ["uint256"]),
    _fn("OPERATOR_BEPRO_AMOUNT", [], ["uint256"]),
    _fn("DEVELOPER_BEPRO_AMOUNT", [], ["uint256"]),
    _fn("isIssueApproved", [("_issueID", "uint256")], ["bool"]),
    _fn("isIssueMergeable", [("_issueID", "uint256"), ("_mergeID", "uint256")], ["bool"]),
    _fn(
        "isMergeTheOneWithMoreVotes",
        [("_issueID", "uint256"), ("_mergeID", "uint256")],
        ["bool"],
    ),
    _fn("getVotesByAddress", [("_address", "address")], ["uint256"]),
    _fn(
        "getIssueById",
        [("_issueID", "uint256")],
        ["uint256", "uint256", "uint256", "address", "uint256", "uint256", "bool"],
    ),
    _fn(
        "getMergeById",
        [("_issueID", "uint256"), ("_mergeID", "uint256")],
        ["uint256", "uint256", "uint256", "address[]", "uint256[]", "address"],
    ),
    _fn("lockBepro", [("_beproAmount", "uint256")], [], "nonpayable"),
    _fn("unlockBepro", [("_beproAmount", "uint256"), ("_from", "address")], [], "nonpayable"),
    _fn(
        "delegateOracles",
        [("_beproAmount", "uint256"), ("_delegatedTo", "address")],
        [],
        "nonpayable",
    ),
    _fn("openIssue", [("_beproAmount", "uint256")], [], "nonpayable"),
    _fn("approveIssue", [("_issueID", "uint256")], [], "nonpayable"),
    _fn("approveMerge", [("_issueID", "uint256"), ("_mergeID", "uint256")], [], "nonpayable"),
    _fn(
        "updateIssue",
        [("_issueID", "uint256"), ("_beproAmount", "uint256"), ("_address", "address")],
        [],
        "nonpayable",
    ),
    _fn(
        "proposeIssueMerge",
        [("_issueID", "uint256"), ("_prAddresses", "address[]"), ("_prAmounts", "uint256[]")],
        [],
        "nonpayable",
    ),
    _fn("closeIssue", [("_issueID", "uint256"), ("_mergeID", "uint256")], [], "nonpayable"),
]

ERC20_ABI: list[dict[str, Any]] = [
    _fn("name", [], ["string"]),
    _fn("symbol", [], ["string"]),
    _fn("decimals", [], ["uint8"]),
    _fn("totalSupply", [], ["uint256"]),
    _fn("balanceOf", [("account", "address")], ["uint256"]),
    _fn("allowance", [("owner", "address"), ("spender", "address")], ["uint256"]),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _fn("transfer", [("to", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
]


def find_function(abi: list[dict[str, Any]], function_name: str) -> dict[str, Any]:
    """Return the ABI entry for ``function_name`` or raise ValueError."""
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def find_constructor(abi: list[dict[str, Any]]) -> dict[str, Any] | None:
    for entry in abi:
        if entry.get("type") == "constructor":
            return entry
    return None


def get_artifacts_dir() -> Path:
    """Get the artifacts directory from environment or default."""
    return Path(os.environ.get("BEPRO_ARTIFACTS_DIR", "build/contracts"))


def _artifact_path(contract_name: str, artifacts_dir: Path) -> Path:
    # Truffle: <dir>/<Name>.json, Foundry: <dir>/<Name>.sol/<Name>.json
    for candidate in (
        artifacts_dir / f"{contract_name}.json",
        artifacts_dir / f"{contract_name}.sol" / f"{contract_name}.json",
    ):
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(
        f"Artifact for {contract_name} not found in {artifacts_dir}. "
        "Compile the contracts or set BEPRO_ARTIFACTS_DIR."
    )


@lru_cache(maxsize=16)
def _load_artifact(contract_name: str, artifacts_dir: str) -> dict[str, Any]:
    path = _artifact_path(contract_name, Path(artifacts_dir))
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_abi(contract_name: str, artifacts_dir: Path | None = None) -> list[dict[str, Any]]:
    """
    Load the ABI for a contract from its compiled artifact.

    Args:
        contract_name: Contract name (e.g., "Network")
        artifacts_dir: Directory holding the artifacts (default: BEPRO_ARTIFACTS_DIR)

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If the artifact is missing
    """
    artifacts_dir = artifacts_dir or get_artifacts_dir()
    return _load_artifact(contract_name, str(artifacts_dir))["abi"]


def load_bytecode(contract_name: str, artifacts_dir: Path | None = None) -> str:
    """
    Load deployment bytecode for a contract.

    Returns:
        0x-prefixed hex bytecode

    Raises:
        FileNotFoundError: If the artifact is missing
        ValueError: If the artifact carries no bytecode
    """
    artifacts_dir = artifacts_dir or get_artifacts_dir()
    artifact = _load_artifact(contract_name, str(artifacts_dir))

    bytecode = artifact.get("bytecode", "")
    # Foundry nests the hex under "object"
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if not bytecode or bytecode == "0x":
        raise ValueError(f"No bytecode in artifact for {contract_name}")

    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    return bytecode
