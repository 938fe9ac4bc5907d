"""
Token commands - BEPRO ERC-20 operations around the network allowance.

- info:      token name, symbol, decimals and supply
- balance:   token balance of an address (default: the signer)
- allowance: what OWNER lets the network move
- approve:   approve the network for the whole token supply
"""

from __future__ import annotations

from typing import Any, Optional

import click

from ..chain.account import get_address
from ..contracts.network import Network
from ..utils import format_amount
from ._common import echo_field, echo_tx, with_network


@click.group()
@click.option("--network", "network_address", envvar="BEPRO_NETWORK_ADDRESS",
              default=None, help="Network contract address (spender)")
@click.option("--token", "token_address", envvar="BEPRO_TOKEN_ADDRESS",
              default=None, help="BEPRO token address")
@click.option("--rpc-url", envvar="BEPRO_RPC_URL", default=None, help="RPC endpoint URL")
@click.pass_context
def token(
    ctx: click.Context,
    network_address: Optional[str],
    token_address: Optional[str],
    rpc_url: Optional[str],
) -> None:
    """BEPRO token allowance and balances."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        network_address=network_address,
        token_address=token_address,
        rpc_url=rpc_url,
    )


@token.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show token metadata and supply."""

    async def _info(net: Network) -> dict[str, Any]:
        erc20 = net.erc20
        return {
            "Address": erc20.address,
            "Name": await erc20.name(),
            "Symbol": await erc20.symbol(),
            "Decimals": await erc20.decimals(),
            "Total supply": format_amount(await erc20.total_supply()),
        }

    rows = with_network(ctx, _info)
    click.echo("=== BEPRO Token ===")
    click.echo()
    for label, value in rows.items():
        echo_field(label, value)


@token.command()
@click.argument("address", required=False)
@click.pass_context
def balance(ctx: click.Context, address: Optional[str]) -> None:
    """Show the token balance of ADDRESS (default: the signer)."""
    if address is None:
        try:
            address = get_address()
        except ValueError as exc:
            raise click.ClickException(str(exc))
    amount = with_network(ctx, lambda net: net.erc20.balance_of(address))
    click.echo(format_amount(amount))


@token.command()
@click.argument("owner")
@click.pass_context
def allowance(ctx: click.Context, owner: str) -> None:
    """Show how much OWNER lets the network spend."""
    amount = with_network(
        ctx, lambda net: net.erc20.allowance(owner, net.require_address())
    )
    click.echo(format_amount(amount))


@token.command()
@click.pass_context
def approve(ctx: click.Context) -> None:
    """Approve the network to spend the signer's BEPRO."""
    echo_tx(with_network(ctx, lambda net: net.approve_erc20()))
