"""
BEPRO Network contract adapter.

Exposes the network's issue, staking, voting and merge-proposal methods as
coroutines. Each method is a single contract call; this module only
validates arguments, checks the BEPRO allowance before transfers into the
network, and converts 18-decimal fixed-point and contract-time values.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Sequence

import httpx

from ..chain.abi import NETWORK_ABI, load_bytecode
from ..errors import ApprovalRequiredError, ArgumentMismatchError, InvalidAmountError
from ..models import Issue, MergeProposal
from ..utils import (
    BEPRO_DECIMALS,
    Amount,
    as_decimal,
    from_contract_time,
    from_decimals,
    from_hex,
    to_decimals,
)
from .base import Contract
from .erc20 import ERC20Contract

logger = logging.getLogger(__name__)

BEPRO_TOKEN_ADDRESS = "0xCF3C8Be2e2C42331Da80EF210e9B1b307C03d36A"
DEFAULT_ARTIFACT = "Network"


def _require_finite(amount: Amount) -> Decimal:
    try:
        value = as_decimal(amount)
    except InvalidOperation:
        raise InvalidAmountError(f"{amount!r} is not a valid Bepro Amount") from None
    if not value.is_finite():
        raise InvalidAmountError(f"Bepro Amount has to be a finite number, got {amount!r}")
    return value


def _require_positive(amount: Amount) -> None:
    if _require_finite(amount) <= 0:
        raise InvalidAmountError("Bepro Amount has to be higher than 0")


def _require_non_negative(amount: Amount) -> None:
    if _require_finite(amount) < 0:
        raise InvalidAmountError("Bepro Amount can not be negative")


def _fixed(raw: int | str) -> Decimal:
    return from_decimals(raw, BEPRO_DECIMALS)


class Network(Contract):
    """
    Async client for a deployed BEPRO Network contract.

    Args:
        contract_address: Network contract address (None until deployed)
        token_address: BEPRO ERC-20 address (default: BEPRO_TOKEN_ADDRESS env
            var, then the mainnet BEPRO token)
        rpc_url: RPC endpoint URL (default: BEPRO_RPC_URL)
        private_key: Signer key (default: PRIVATE_KEY)
        client: Shared httpx.AsyncClient
    """

    def __init__(
        self,
        contract_address: Optional[str] = None,
        token_address: Optional[str] = None,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(
            NETWORK_ABI,
            contract_address=contract_address,
            rpc_url=rpc_url,
            private_key=private_key,
            client=client,
        )
        self.token_address = token_address or os.environ.get(
            "BEPRO_TOKEN_ADDRESS", BEPRO_TOKEN_ADDRESS
        )
        self._erc20 = self._build_erc20()

    def _build_erc20(self) -> ERC20Contract:
        return ERC20Contract(
            contract_address=self.token_address,
            rpc_url=self.rpc_url,
            private_key=self.private_key,
            client=self.client,
        )

    @property
    def erc20(self) -> ERC20Contract:
        return self._erc20

    async def assert_contract(self) -> None:
        """Require a network address and check the token contract answers."""
        self.require_address()
        await self._erc20.assert_contract()

    async def deploy(
        self,
        token_address: Optional[str] = None,
        artifact: Optional[str] = None,
        artifacts_dir: Optional[Path] = None,
    ) -> dict:
        """
        Deploy a new network contract bound to ``token_address``.

        The bytecode is read from the compiled artifact named by
        ``artifact`` (default: BEPRO_NETWORK_ARTIFACT env var, then "Network").
        """
        if token_address:
            self.token_address = token_address
            self._erc20 = self._build_erc20()

        name = artifact or os.environ.get("BEPRO_NETWORK_ARTIFACT", DEFAULT_ARTIFACT)
        bytecode = load_bytecode(name, artifacts_dir)
        result = await super().deploy(bytecode, [self.token_address])
        logger.info("network deployed at %s (token %s)", self.contract_address, self.token_address)

        await self.assert_contract()
        return result

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------

    async def get_issues_by_address(self, address: str) -> list[int]:
        res = await self.call("getIssuesByAddress", address)
        return [int(r) for r in res or []]

    async def get_amount_of_issues_opened(self) -> int:
        return int(await self.call("incrementIssueID"))

    async def get_amount_of_issues_closed(self) -> int:
        return int(await self.call("closedIdsCount"))

    async def percentage_needed_for_approve(self) -> int:
        return int(await self.call("percentageNeededForApprove"))

    async def percentage_needed_for_merge(self) -> int:
        return int(await self.call("percentageNeededForMerge"))

    async def get_bepro_staked(self) -> Decimal:
        """Total BEPRO staked on issues."""
        return _fixed(await self.call("totalStaked"))

    async def bepro_votes_staked(self) -> Decimal:
        """Total BEPRO locked by oracles for voting."""
        return _fixed(await self.call("beproVotesStaked"))

    async def council_bepro_amount(self) -> Decimal:
        return _fixed(await self.call("COUNCIL_BEPRO_AMOUNT"))

    async def operator_bepro_amount(self) -> Decimal:
        return _fixed(await self.call("OPERATOR_BEPRO_AMOUNT"))

    async def developer_bepro_amount(self) -> Decimal:
        return _fixed(await self.call("DEVELOPER_BEPRO_AMOUNT"))

    async def is_issue_approved(self, issue_id: int) -> bool:
        return bool(await self.call("isIssueApproved", issue_id))

    async def is_issue_mergeable(self, issue_id: int, merge_id: int) -> bool:
        return bool(await self.call("isIssueMergeable", issue_id, merge_id))

    async def is_merge_the_one_with_more_votes(self, issue_id: int, merge_id: int) -> bool:
        return bool(await self.call("isMergeTheOneWithMoreVotes", issue_id, merge_id))

    async def get_votes_by_address(self, address: str) -> Decimal:
        return _fixed(await self.call("getVotesByAddress", address))

    async def get_issue_by_id(self, issue_id: int) -> Issue:
        r = await self.call("getIssueById", issue_id)
        return Issue(
            issue_id=from_hex(r[0]),
            bepro_staked=_fixed(r[1]),
            creation_date=from_contract_time(r[2]),
            issue_generator=r[3],
            votes_for_approve=_fixed(r[4]),
            merge_proposals_amount=int(r[5]),
            finalized=bool(r[6]),
        )

    async def get_merge_by_id(self, issue_id: int, merge_id: int) -> MergeProposal:
        # r[2] is not exposed
        r = await self.call("getMergeById", issue_id, merge_id)
        return MergeProposal(
            merge_id=from_hex(r[0]),
            votes=_fixed(r[1]),
            pr_addresses=list(r[3] or []),
            pr_amounts=[_fixed(a) for a in r[4] or []],
            proposal_address=r[5],
        )

    # ---------------------------------------------------------------------
    # Token approval
    # ---------------------------------------------------------------------

    async def approve_erc20(self) -> dict:
        """Approve the network to move up to the token's whole supply."""
        total_max_amount = await self._erc20.total_supply()
        return await self._erc20.approve(self.require_address(), total_max_amount)

    async def is_approved_erc20(self, amount: Amount, address: str) -> bool:
        # writes scale by BEPRO_DECIMALS, so the check must too
        return await self._erc20.is_approved(
            address=address,
            amount=amount,
            spender_address=self.require_address(),
            decimals=BEPRO_DECIMALS,
        )

    async def _require_approval(self, amount: Amount) -> None:
        owner = self.signer_address()
        if not await self.is_approved_erc20(amount, owner):
            logger.warning("allowance of %s to %s is below %s", owner, self.contract_address, amount)
            raise ApprovalRequiredError("Bepro not approve for tx, first use 'approve_erc20'")

    # ---------------------------------------------------------------------
    # Writes
    # ---------------------------------------------------------------------

    async def lock_bepro(self, bepro_amount: Amount) -> dict:
        """Lock BEPRO to gain oracle voting weight."""
        _require_positive(bepro_amount)
        await self._require_approval(bepro_amount)
        return await self.send("lockBepro", to_decimals(bepro_amount))

    async def unlock_bepro(self, bepro_amount: Amount, from_address: str) -> dict:
        _require_positive(bepro_amount)
        return await self.send("unlockBepro", to_decimals(bepro_amount), from_address)

    async def delegate_oracles(self, bepro_amount: Amount, delegated_to: str) -> dict:
        """Delegate oracle weight to another address."""
        _require_positive(bepro_amount)
        return await self.send("delegateOracles", to_decimals(bepro_amount), delegated_to)

    async def open_issue(self, bepro_amount: Amount) -> dict:
        _require_non_negative(bepro_amount)
        await self._require_approval(bepro_amount)
        return await self.send("openIssue", to_decimals(bepro_amount))

    async def approve_issue(self, issue_id: int) -> dict:
        return await self.send("approveIssue", issue_id)

    async def approve_merge(self, issue_id: int, merge_id: int) -> dict:
        return await self.send("approveMerge", issue_id, merge_id)

    async def update_issue(self, issue_id: int, bepro_amount: Amount, address: str) -> dict:
        _require_non_negative(bepro_amount)
        await self._require_approval(bepro_amount)
        return await self.send("updateIssue", issue_id, to_decimals(bepro_amount), address)

    async def propose_issue_merge(
        self,
        issue_id: int,
        pr_addresses: Sequence[str],
        pr_amounts: Sequence[Amount],
    ) -> dict:
        """
        Propose how an issue's stake is split between pull-request authors.

        Raises:
            ArgumentMismatchError: If the address and amount lists differ in length
        """
        if len(pr_addresses) != len(pr_amounts):
            raise ArgumentMismatchError("pr_addresses dont match pr_amounts size")
        for amount in pr_amounts:
            _require_non_negative(amount)
        return await self.send(
            "proposeIssueMerge",
            issue_id,
            list(pr_addresses),
            [to_decimals(a) for a in pr_amounts],
        )

    async def close_issue(self, issue_id: int, merge_id: int) -> dict:
        return await self.send("closeIssue", issue_id, merge_id)
