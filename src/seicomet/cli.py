"""
seicomet CLI

Command-line access to a Tendermint/CometBFT node with finalize-block
event support.

Commands:
  status         - Node status
  block          - Block at a height (latest by default)
  block-results  - Block results, including finalize-block events
  validators     - Validator set at a height
  info           - Show resolved configuration
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import click
import httpx

from .overrides import CometClient, FinalizeBlockMode, connect_comet
from .rpc.jsonrpc import JsonRpcError
from .rpc.transport import DEFAULT_RPC_TIMEOUT, DEFAULT_RPC_URL, HttpRpcTransport, ResponseMismatchError
from .spec.schemas import SchemaValidationError
from .tendermint.adaptor import CometVersion
from .tendermint.client import UnsupportedVersionError
from .tendermint.encodings import DecodingError
from .tendermint.requests import ValidatorsParams
from .utils import dumps


# ============ Constants ============

VERSION = "0.3.0"

AUTO_VERSION = "auto"

CLI_ERRORS = (
    JsonRpcError,
    ResponseMismatchError,
    SchemaValidationError,
    DecodingError,
    UnsupportedVersionError,
    httpx.HTTPError,
)


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    comet_version: str
    timeout: float


# ============ Helpers ============


async def _open_client(settings: Settings, mode: Optional[FinalizeBlockMode]) -> CometClient:
    transport = HttpRpcTransport(url=settings.rpc_url, timeout=settings.timeout)
    try:
        if settings.comet_version == AUTO_VERSION:
            return await connect_comet(transport, mode)
        return await CometClient.create(transport, CometVersion(settings.comet_version), mode)
    except BaseException:
        await transport.disconnect()
        raise


def _run(
    settings: Settings,
    call: Callable[[CometClient], Awaitable[Any]],
    mode: Optional[FinalizeBlockMode] = None,
) -> None:
    """Open a client, run one call, print the result as JSON."""

    async def runner() -> Any:
        client = await _open_client(settings, mode)
        try:
            return await call(client)
        finally:
            await client.disconnect()

    try:
        result = asyncio.run(runner())
    except CLI_ERRORS as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)

    click.echo(dumps(result))


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="seicomet")
@click.option(
    "--rpc-url",
    envvar="COMET_RPC_URL",
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="Node RPC URL",
)
@click.option(
    "--comet-version",
    envvar="COMET_VERSION",
    type=click.Choice([AUTO_VERSION] + [v.value for v in CometVersion]),
    default=AUTO_VERSION,
    show_default=True,
    help="Protocol revision of the node",
)
@click.option(
    "--timeout",
    envvar="COMET_RPC_TIMEOUT",
    type=float,
    default=DEFAULT_RPC_TIMEOUT,
    show_default=True,
    help="Request timeout in seconds",
)
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic")
@click.pass_context
def cli(ctx: click.Context, rpc_url: str, comet_version: str, timeout: float, verbose: bool) -> None:
    """seicomet - consensus node RPC with finalize-block events."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Settings(rpc_url=rpc_url, comet_version=comet_version, timeout=timeout)


# ============ Queries ============


@cli.command()
@click.pass_obj
def status(settings: Settings) -> None:
    """Show node status."""
    _run(settings, lambda client: client.status())


@cli.command()
@click.option("--height", type=int, help="Block height (default: latest)")
@click.pass_obj
def block(settings: Settings, height: Optional[int]) -> None:
    """Show a block."""
    _run(settings, lambda client: client.block(height))


@cli.command("block-results")
@click.option("--height", type=int, help="Block height (default: latest)")
@click.option(
    "--mode",
    envvar="FINALIZE_BLOCK_MODE",
    type=click.Choice([m.value for m in FinalizeBlockMode]),
    help="Merge finalize-block events into end-block events or keep them separate",
)
@click.pass_obj
def block_results(settings: Settings, height: Optional[int], mode: Optional[str]) -> None:
    """Show block results, including finalize-block events."""
    _run(
        settings,
        lambda client: client.block_results(height),
        FinalizeBlockMode(mode) if mode else None,
    )


@cli.command()
@click.option("--height", type=int, help="Block height (default: latest)")
@click.option("--page", type=int, help="Page number (1-based)")
@click.option("--per-page", type=int, help="Validators per page")
@click.pass_obj
def validators(
    settings: Settings,
    height: Optional[int],
    page: Optional[int],
    per_page: Optional[int],
) -> None:
    """Show the validator set."""
    params = ValidatorsParams(height=height, page=page, per_page=per_page)
    _run(settings, lambda client: client.validators(params))


# ============ Info ============


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Show resolved configuration."""
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("seicomet", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()
    rows = [
        ("RPC URL:    ", settings.rpc_url),
        ("Version:    ", settings.comet_version),
        ("Timeout:    ", f"{settings.timeout:g}s"),
    ]
    for label, value in rows:
        click.echo(click.style(f"  {label}", dim=True) + click.style(value, fg="bright_white"))


# ============ Entry Points ============


def main() -> None:
    """seicomet CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
