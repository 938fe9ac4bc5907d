from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from .utils import format_amount, rfc3339


@dataclass(frozen=True)
class Issue:
    """
    An issue as recorded by the network contract.

    Attributes:
        issue_id: On-chain issue identifier
        bepro_staked: BEPRO locked on the issue
        creation_date: Block time of creation (UTC)
        issue_generator: Address that opened the issue
        votes_for_approve: Oracle votes cast for approval
        merge_proposals_amount: Number of merge proposals made
        finalized: Whether the issue has been closed
    """
    issue_id: int
    bepro_staked: Decimal
    creation_date: datetime
    issue_generator: str
    votes_for_approve: Decimal
    merge_proposals_amount: int
    finalized: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "issue_id": self.issue_id,
            "bepro_staked": format_amount(self.bepro_staked),
            "creation_date": rfc3339(self.creation_date),
            "issue_generator": self.issue_generator,
            "votes_for_approve": format_amount(self.votes_for_approve),
            "merge_proposals_amount": self.merge_proposals_amount,
            "finalized": self.finalized,
        }


@dataclass(frozen=True)
class MergeProposal:
    merge_id: int
    votes: Decimal
    proposal_address: str
    pr_addresses: list[str] = field(default_factory=list)
    pr_amounts: list[Decimal] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "merge_id": self.merge_id,
            "votes": format_amount(self.votes),
            "pr_addresses": list(self.pr_addresses),
            "pr_amounts": [format_amount(a) for a in self.pr_amounts],
            "proposal_address": self.proposal_address,
        }


__all__ = ["Issue", "MergeProposal"]
