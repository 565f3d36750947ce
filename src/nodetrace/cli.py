import asyncio
import logging
from typing import Any, Callable, List, Optional

import msgspec
import typer
from dotenv import load_dotenv

from nodetrace.call import CallFuture
from nodetrace.client import NodeClient
from nodetrace.configs.client_config import ClientConfig
from nodetrace.errors import NodeTraceError
from nodetrace.traces import Traces
from nodetrace.types import BlockNumber, CallRequest, TraceFilter

load_dotenv()

DEFAULT_TRACE_TYPES = ["trace"]
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(help="nodetrace: inspect execution traces from an Ethereum node")


def parse_block(text: str) -> BlockNumber:
    """Decimal strings become ints; tags and 0x quantities pass through."""
    return int(text) if text.isdigit() else text


def _run(ctx: typer.Context, op: Callable[[Traces[Any]], CallFuture[Any]]) -> None:
    config: ClientConfig = ctx.obj

    async def _execute() -> Any:
        async with NodeClient(config) as client:
            return await op(client.trace)

    try:
        result = asyncio.run(_execute())
    except NodeTraceError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.echo(msgspec.json.format(msgspec.json.encode(result), indent=2).decode())


@app.callback()
def configure(
    ctx: typer.Context,
    rpc_url: Optional[str] = typer.Option(None, help="Node RPC endpoint (default: $NODETRACE_RPC_URL)"),
    timeout: Optional[float] = typer.Option(None, help="HTTP timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every RPC round-trip"),
):
    """Shared options for every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    config = ClientConfig.from_env()
    if rpc_url is not None:
        config = ClientConfig(rpc_url=rpc_url, timeout=config.timeout)
    if timeout is not None:
        config = ClientConfig(rpc_url=config.rpc_url, timeout=timeout)
    ctx.obj = config


@app.command()
def transaction(ctx: typer.Context, tx_hash: str):
    """All traces of a transaction."""
    _run(ctx, lambda t: t.transaction(tx_hash))


@app.command()
def get(ctx: typer.Context, tx_hash: str, indices: List[int] = typer.Argument(..., help="Trace position")):
    """Trace at the given position within a transaction."""
    _run(ctx, lambda t: t.get(tx_hash, indices))


@app.command()
def replay(
    ctx: typer.Context,
    tx_hash: str,
    trace_type: List[str] = typer.Option(DEFAULT_TRACE_TYPES, "--type", "-t"),
):
    """Replay a transaction."""
    _run(ctx, lambda t: t.replay_transaction(tx_hash, trace_type))


@app.command("replay-block")
def replay_block(
    ctx: typer.Context,
    block: str = typer.Argument("latest"),
    trace_type: List[str] = typer.Option(DEFAULT_TRACE_TYPES, "--type", "-t"),
):
    """Replay every transaction of a block."""
    _run(ctx, lambda t: t.replay_block_transactions(parse_block(block), trace_type))


@app.command()
def block(ctx: typer.Context, block: str = typer.Argument("latest")):
    """Call-tracer traces of a block."""
    _run(ctx, lambda t: t.block(parse_block(block)))


@app.command()
def raw(
    ctx: typer.Context,
    data: str,
    trace_type: List[str] = typer.Option(DEFAULT_TRACE_TYPES, "--type", "-t"),
):
    """Trace a signed raw transaction without sending it."""
    _run(ctx, lambda t: t.raw_transaction(data, trace_type))


@app.command()
def call(
    ctx: typer.Context,
    to: Optional[str] = typer.Option(None),
    from_address: Optional[str] = typer.Option(None, "--from"),
    value: Optional[int] = typer.Option(None, help="Value in wei"),
    data: Optional[str] = typer.Option(None),
    gas: Optional[int] = typer.Option(None),
    block: Optional[str] = typer.Option(None),
    trace_type: List[str] = typer.Option(DEFAULT_TRACE_TYPES, "--type", "-t"),
):
    """Simulate a call and trace it."""
    req = CallRequest(from_address=from_address, to=to, value=value, data=data, gas=gas)
    block_number = parse_block(block) if block is not None else None
    _run(ctx, lambda t: t.call(req, trace_type, block_number))


@app.command("filter")
def filter_traces(
    ctx: typer.Context,
    from_block: Optional[str] = typer.Option(None),
    to_block: Optional[str] = typer.Option(None),
    from_address: Optional[List[str]] = typer.Option(None),
    to_address: Optional[List[str]] = typer.Option(None),
    after: Optional[int] = typer.Option(None),
    count: Optional[int] = typer.Option(None),
):
    """Traces matching a filter."""
    trace_filter = TraceFilter(
        from_block=parse_block(from_block) if from_block is not None else None,
        to_block=parse_block(to_block) if to_block is not None else None,
        from_address=from_address or None,
        to_address=to_address or None,
        after=after,
        count=count,
    )
    _run(ctx, lambda t: t.filter(trace_filter))


def main():
    app()


if __name__ == "__main__":
    main()
