"""
BEPRO CLI

Command-line interface for the BEPRO Network client.

Commands:
  network   - Read network state, stake, and manage issues and merges
  token     - Inspect the BEPRO token and the network allowance
  deploy    - Deploy a new network contract
  whoami    - Show the signer address and, optionally, its balance
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

from .chain.account import get_address, load_config, load_private_key
from .chain.rpc import get_balance
from .commands._common import run
from .commands.network import network
from .commands.token import token
from .contracts.network import Network
from .utils import format_amount, from_decimals


VERSION = "0.3.0"


@click.group()
@click.version_option(version=VERSION, prog_name="bepro")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC calls and transactions")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """BEPRO Network client."""
    load_config()
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.ensure_object(dict)


cli.add_command(network)
cli.add_command(token)


@cli.command()
@click.option("--balance", "show_balance", is_flag=True, help="Also show the native balance")
@click.option("--rpc-url", envvar="BEPRO_RPC_URL", default=None, help="RPC endpoint URL")
def whoami(show_balance: bool, rpc_url: Optional[str]) -> None:
    """Show the signer address."""
    try:
        address = get_address(load_private_key())
    except ValueError:
        click.echo("No signer key found.")
        click.echo("Set PRIVATE_KEY in the environment or in ~/.bepro/.env.")
        sys.exit(1)
    click.echo(f"Address: {address}")

    if show_balance:

        async def _balance() -> int:
            async with httpx.AsyncClient(timeout=30) as client:
                return await get_balance(address, rpc_url=rpc_url, client=client)

        wei = run(_balance())
        click.echo(f"Balance: {format_amount(from_decimals(wei))} ETH")


@cli.command()
@click.option("--token", "token_address", envvar="BEPRO_TOKEN_ADDRESS",
              default=None, help="BEPRO token the network stakes")
@click.option("--artifact", default=None, help="Artifact name (default: Network)")
@click.option("--artifacts-dir", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Compiled artifacts directory")
@click.option("--rpc-url", envvar="BEPRO_RPC_URL", default=None, help="RPC endpoint URL")
def deploy(
    token_address: Optional[str],
    artifact: Optional[str],
    artifacts_dir: Optional[Path],
    rpc_url: Optional[str],
) -> None:
    """Deploy a network contract bound to the BEPRO token."""

    async def _deploy() -> dict:
        async with httpx.AsyncClient(timeout=30) as client:
            net = Network(token_address=token_address, rpc_url=rpc_url, client=client)
            return await net.deploy(artifact=artifact, artifacts_dir=artifacts_dir)

    result = run(_deploy())
    click.secho("SUCCESS: Network deployed!", fg="green")
    click.echo(f"  Address: {result.get('contract_address')}")
    click.echo(f"  TX: {result['tx_hash']}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
