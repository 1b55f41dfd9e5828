"""History and transfer-control commands for the ftpdeck CLI.

Commands:
- history: Show transfer history
- clear-history: Delete all transfer history
- cancel: Cancel an active transfer
- retry: Retry a recorded transfer
- watch: Follow transfer events as they arrive
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import click

from ftpdeck.client.api import EngineClient
from ftpdeck.client.cli.config import get_engine_config
from ftpdeck.client.formatters import (
    format_duration,
    format_file_size,
    format_speed,
    format_timestamp,
)
from ftpdeck.client.notifications import ConsoleNotifier
from ftpdeck.client.session import TransferSession
from ftpdeck.client.transfer.events import EventKind
from ftpdeck.client.transfer.listener import EngineEventListener
from ftpdeck.client.transfer.types import ActiveTransfer
from ftpdeck.core.types import TransferDirection, TransferStatus

if TYPE_CHECKING:
    from ftpdeck.client.transfer.types import HistoryRecord

_STATUS_COLOURS = {
    TransferStatus.SUCCESS: "green",
    TransferStatus.FAILED: "red",
    TransferStatus.CANCELLED: "yellow",
}


def format_history_line(record: HistoryRecord) -> str:
    arrow = "↑" if record.direction == TransferDirection.UPLOAD else "↓"
    line = (
        f"{record.id:>5}  {arrow} {record.filename}  "
        f"{format_file_size(record.transferred_size)}/{format_file_size(record.file_size)}  "
        f"{click.style(record.status.value, fg=_STATUS_COLOURS.get(record.status))}  "
        f"{format_timestamp(record.started_at)}"
    )
    if record.error_message:
        line += f"\n       {record.error_message}"
    return line


def format_progress_line(progress: ActiveTransfer) -> str:
    return (
        f"  {progress.filename}  {progress.percentage:5.1f}%  "
        f"{format_file_size(progress.transferred_bytes)}/{format_file_size(progress.total_bytes)}  "
        f"{format_speed(progress.speed_bytes_per_sec)}  "
        f"ETA {format_duration(progress.eta_seconds)}"
    )


@click.command()
@click.option("--host", "host_id", type=int, default=None, help="Only show this host.")
def history(host_id: int | None) -> None:
    """Show transfer history."""
    config = get_engine_config()

    async def _fetch() -> list[HistoryRecord]:
        async with EngineClient(config) as engine:
            session = TransferSession(engine, ConsoleNotifier())
            return await session.registry.fetch_history(host_id)

    records = asyncio.run(_fetch())
    if not records:
        click.echo("No transfers recorded.")
        return
    for record in records:
        click.echo(format_history_line(record))


@click.command("clear-history")
@click.confirmation_option(prompt="Delete all transfer history?")
def clear_history() -> None:
    """Delete all transfer history."""
    config = get_engine_config()

    async def _clear() -> None:
        async with EngineClient(config) as engine:
            session = TransferSession(engine, ConsoleNotifier())
            await session.registry.clear_history()

    asyncio.run(_clear())
    click.echo("Transfer history cleared.")


@click.command()
@click.argument("transfer_id")
def cancel(transfer_id: str) -> None:
    """Cancel an active transfer."""
    config = get_engine_config()

    async def _cancel() -> None:
        async with EngineClient(config) as engine:
            session = TransferSession(engine, ConsoleNotifier())
            await session.registry.cancel_transfer(transfer_id)

    asyncio.run(_cancel())
    click.echo(f"Cancellation requested for {transfer_id}.")


@click.command()
@click.argument("history_id", type=int)
def retry(history_id: int) -> None:
    """Retry a recorded transfer under a new transfer id."""
    config = get_engine_config()

    async def _retry() -> str:
        async with EngineClient(config) as engine:
            session = TransferSession(engine, ConsoleNotifier())
            return await session.registry.retry_transfer(history_id)

    transfer_id = asyncio.run(_retry())
    click.echo(f"Retrying as {transfer_id}.")


@click.command()
def watch() -> None:
    """Follow transfer events until interrupted."""
    config = get_engine_config()

    async def _watch() -> None:
        async with EngineClient(config) as engine:
            async with TransferSession(
                engine,
                ConsoleNotifier(),
                listener_factory=lambda channel: EngineEventListener(config, channel),
            ) as session:

                def _print_progress(payload: dict[str, Any]) -> None:
                    click.echo(format_progress_line(ActiveTransfer.from_dict(payload)))

                unlisten = session.channel.listen(EventKind.PROGRESS, _print_progress)
                try:
                    await asyncio.Event().wait()
                finally:
                    unlisten()

    click.echo("Watching transfers, press Ctrl+C to stop.")
    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        click.echo("Stopped.")
