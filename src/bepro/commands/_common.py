"""Shared plumbing for CLI commands: running coroutines and printing results."""

from __future__ import annotations

import asyncio
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, Optional, TypeVar

import click
import httpx

from ..contracts.network import Network
from ..errors import BeproError

T = TypeVar("T")


def run(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning client errors into a red message and exit code."""
    try:
        return asyncio.run(coro)
    except BeproError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    except (httpx.HTTPError, FileNotFoundError, TimeoutError, ValueError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)


def open_network(ctx: click.Context, client: httpx.AsyncClient, require_address: bool = False) -> Network:
    """Build a Network adapter from the group options stored on ``ctx.obj``."""
    opts = ctx.obj
    if require_address and not opts.get("network_address"):
        raise click.ClickException(
            "Network address not specified. Use --network <address> or set BEPRO_NETWORK_ADDRESS."
        )
    return Network(
        contract_address=opts.get("network_address"),
        token_address=opts.get("token_address"),
        rpc_url=opts.get("rpc_url"),
        client=client,
    )


def with_network(
    ctx: click.Context,
    action: Callable[[Network], Awaitable[T]],
    require_address: bool = False,
) -> T:
    """Run ``action`` against a Network adapter sharing one HTTP client."""

    async def _go() -> T:
        async with httpx.AsyncClient(timeout=30) as client:
            return await action(open_network(ctx, client, require_address))

    return run(_go())


def echo_field(label: str, value: Any) -> None:
    click.echo(click.style(f"  {label + ':':<24}", dim=True) + str(value))


def echo_tx(result: dict) -> None:
    click.secho("SUCCESS: Transaction confirmed!", fg="green")
    click.echo(f"  TX: {result.get('tx_hash', 'unknown')}")


class DecimalParamType(click.ParamType):
    name = "amount"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Decimal:
        if isinstance(value, Decimal):
            amount = value
        else:
            try:
                amount = Decimal(str(value))
            except InvalidOperation:
                self.fail(f"{value!r} is not a valid amount", param, ctx)
        if not amount.is_finite():
            self.fail(f"{value!r} is not a finite amount", param, ctx)
        return amount


AMOUNT = DecimalParamType()
