"""
Network commands - Read and act on a deployed BEPRO Network contract.

Reads:
- info:    counters, staking totals and approval thresholds
- issue:   one issue record
- merge:   one merge proposal
- issues:  issue ids opened by an address
- votes:   oracle votes held by an address

Writes (signed with PRIVATE_KEY):
- lock / unlock / delegate
- open-issue / approve-issue / approve-merge / propose-merge / close-issue
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional

import click

from ..contracts.network import Network
from ..utils import format_amount
from ._common import AMOUNT, echo_field, echo_tx, with_network


def _with_network(ctx: click.Context, action: Callable[[Network], Awaitable[Any]]) -> Any:
    return with_network(ctx, action, require_address=True)


def _parse_pr(value: str) -> tuple[str, Decimal]:
    address, sep, amount = value.partition(":")
    if not sep:
        raise click.BadParameter(f"expected ADDRESS:AMOUNT, got {value!r}")
    return address, AMOUNT.convert(amount, None, None)


@click.group()
@click.option("--network", "network_address", envvar="BEPRO_NETWORK_ADDRESS",
              default=None, help="Network contract address")
@click.option("--token", "token_address", envvar="BEPRO_TOKEN_ADDRESS",
              default=None, help="BEPRO token address")
@click.option("--rpc-url", envvar="BEPRO_RPC_URL", default=None, help="RPC endpoint URL")
@click.pass_context
def network(
    ctx: click.Context,
    network_address: Optional[str],
    token_address: Optional[str],
    rpc_url: Optional[str],
) -> None:
    """BEPRO Network issues, staking and merge proposals."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        network_address=network_address,
        token_address=token_address,
        rpc_url=rpc_url,
    )


@network.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show network counters, totals and thresholds."""

    async def _info(net: Network) -> dict[str, Any]:
        return {
            "Issues opened": await net.get_amount_of_issues_opened(),
            "Issues closed": await net.get_amount_of_issues_closed(),
            "BEPRO staked": format_amount(await net.get_bepro_staked()),
            "BEPRO votes staked": format_amount(await net.bepro_votes_staked()),
            "Approve threshold (%)": await net.percentage_needed_for_approve(),
            "Merge threshold (%)": await net.percentage_needed_for_merge(),
            "Council amount": format_amount(await net.council_bepro_amount()),
            "Operator amount": format_amount(await net.operator_bepro_amount()),
            "Developer amount": format_amount(await net.developer_bepro_amount()),
        }

    rows = _with_network(ctx, _info)
    click.echo("=== BEPRO Network ===")
    click.echo()
    for label, value in rows.items():
        echo_field(label, value)


@network.command()
@click.argument("issue_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def issue(ctx: click.Context, issue_id: int, as_json: bool) -> None:
    """Show an issue by id."""
    record = _with_network(ctx, lambda net: net.get_issue_by_id(issue_id))
    data = record.to_dict()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return
    click.echo(f"=== Issue #{issue_id} ===")
    for key, value in data.items():
        echo_field(key, value)


@network.command()
@click.argument("issue_id", type=int)
@click.argument("merge_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def merge(ctx: click.Context, issue_id: int, merge_id: int, as_json: bool) -> None:
    """Show a merge proposal of an issue."""
    record = _with_network(ctx, lambda net: net.get_merge_by_id(issue_id, merge_id))
    data = record.to_dict()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return
    click.echo(f"=== Merge #{merge_id} of issue #{issue_id} ===")
    echo_field("votes", data["votes"])
    echo_field("proposal_address", data["proposal_address"])
    for address, amount in zip(data["pr_addresses"], data["pr_amounts"]):
        echo_field(address, amount)


@network.command()
@click.argument("address")
@click.pass_context
def issues(ctx: click.Context, address: str) -> None:
    """List issue ids opened by ADDRESS."""
    ids = _with_network(ctx, lambda net: net.get_issues_by_address(address))
    if not ids:
        click.echo("No issues.")
        return
    for issue_id in ids:
        click.echo(str(issue_id))


@network.command()
@click.argument("address")
@click.pass_context
def votes(ctx: click.Context, address: str) -> None:
    """Show oracle votes held by ADDRESS."""
    amount = _with_network(ctx, lambda net: net.get_votes_by_address(address))
    click.echo(format_amount(amount))


@network.command()
@click.argument("amount", type=AMOUNT)
@click.pass_context
def lock(ctx: click.Context, amount: Decimal) -> None:
    """Lock AMOUNT BEPRO as oracle stake."""
    echo_tx(_with_network(ctx, lambda net: net.lock_bepro(amount)))


@network.command()
@click.argument("amount", type=AMOUNT)
@click.option("--from", "from_address", required=True, help="Address the oracles are unlocked from")
@click.pass_context
def unlock(ctx: click.Context, amount: Decimal, from_address: str) -> None:
    """Unlock AMOUNT BEPRO of oracle stake."""
    echo_tx(_with_network(ctx, lambda net: net.unlock_bepro(amount, from_address)))


@network.command()
@click.argument("amount", type=AMOUNT)
@click.option("--to", "delegated_to", required=True, help="Address receiving the oracles")
@click.pass_context
def delegate(ctx: click.Context, amount: Decimal, delegated_to: str) -> None:
    """Delegate AMOUNT oracles to another address."""
    echo_tx(_with_network(ctx, lambda net: net.delegate_oracles(amount, delegated_to)))


@network.command("open-issue")
@click.argument("amount", type=AMOUNT)
@click.pass_context
def open_issue(ctx: click.Context, amount: Decimal) -> None:
    """Open an issue staking AMOUNT BEPRO."""
    echo_tx(_with_network(ctx, lambda net: net.open_issue(amount)))


@network.command("approve-issue")
@click.argument("issue_id", type=int)
@click.pass_context
def approve_issue(ctx: click.Context, issue_id: int) -> None:
    """Vote to approve an issue."""
    echo_tx(_with_network(ctx, lambda net: net.approve_issue(issue_id)))


@network.command("approve-merge")
@click.argument("issue_id", type=int)
@click.argument("merge_id", type=int)
@click.pass_context
def approve_merge(ctx: click.Context, issue_id: int, merge_id: int) -> None:
    """Vote for a merge proposal."""
    echo_tx(_with_network(ctx, lambda net: net.approve_merge(issue_id, merge_id)))


@network.command("propose-merge")
@click.argument("issue_id", type=int)
@click.option("--pr", "prs", multiple=True, required=True,
              help="ADDRESS:AMOUNT share of the stake (repeatable)")
@click.pass_context
def propose_merge(ctx: click.Context, issue_id: int, prs: tuple[str, ...]) -> None:
    """Propose a merge splitting the issue stake between PR authors."""
    parsed = [_parse_pr(value) for value in prs]
    addresses = [address for address, _ in parsed]
    amounts = [amount for _, amount in parsed]
    echo_tx(_with_network(ctx, lambda net: net.propose_issue_merge(issue_id, addresses, amounts)))


@network.command("close-issue")
@click.argument("issue_id", type=int)
@click.argument("merge_id", type=int)
@click.pass_context
def close_issue(ctx: click.Context, issue_id: int, merge_id: int) -> None:
    """Close an issue with the given merge proposal."""
    echo_tx(_with_network(ctx, lambda net: net.close_issue(issue_id, merge_id)))
