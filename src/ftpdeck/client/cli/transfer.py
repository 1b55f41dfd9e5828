"""Transfer commands for the ftpdeck CLI.

Commands:
- upload: Upload local files/directories to a connected host
- download: Download remote files/directories to this machine
"""

from __future__ import annotations

import asyncio
import posixpath
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ftpdeck.client import notifications
from ftpdeck.client.api import EngineClient
from ftpdeck.client.cli.config import get_engine_config
from ftpdeck.client.cli.prompt import ConsolePrompter
from ftpdeck.client.notifications import ConsoleNotifier, SystemNotifier
from ftpdeck.client.session import TransferSession
from ftpdeck.client.transfer.listener import EngineEventListener
from ftpdeck.client.transfer.types import FileEntry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ftpdeck.client.notifications import Notifier
    from ftpdeck.client.transfer.engine import TransferEngine
    from ftpdeck.client.transfer.types import BatchDispatch
    from ftpdeck.core.config import EngineConfig


def local_entry(path: Path) -> FileEntry:
    """Describe a local path as a pane entry."""
    resolved = path.expanduser().resolve()
    is_dir = resolved.is_dir()
    return FileEntry(
        name=resolved.name,
        path=resolved.as_posix(),
        is_dir=is_dir,
        size=0 if is_dir else resolved.stat().st_size,
    )


async def resolve_remote_entries(
    engine: TransferEngine,
    host_id: int,
    paths: Sequence[str],
    notifier: Notifier,
) -> list[FileEntry]:
    """Look up remote paths through their parent directory listings.

    Paths that are not found are reported and left out; the selection
    keeps the order the paths were given in.
    """
    by_parent: dict[str, list[str]] = defaultdict(list)
    for path in paths:
        by_parent[posixpath.dirname(path.rstrip("/")) or "/"].append(path)

    found: dict[str, FileEntry] = {}
    for parent, children in by_parent.items():
        listing = {e.name: e for e in await engine.list_directory(host_id, parent)}
        for child in children:
            entry = listing.get(posixpath.basename(child.rstrip("/")))
            if entry is not None:
                found[child] = entry

    selection = []
    for path in paths:
        if path in found:
            selection.append(found[path])
        else:
            notifier.notify(notifications.warning(f"{path} not found on host {host_id}"))
    return selection


def make_notifier(system_notify: bool) -> Notifier:
    return SystemNotifier() if system_notify else ConsoleNotifier()


async def run_batch(
    config: EngineConfig,
    notifier: Notifier,
    batch: Callable[[TransferSession], Awaitable[BatchDispatch]],
    wait: bool,
) -> BatchDispatch:
    """Run one batch inside a session, optionally waiting for it to settle."""
    async with EngineClient(config) as engine:
        async with TransferSession(
            engine,
            notifier,
            default_download_dir=config.default_download_dir,
            listener_factory=lambda channel: EngineEventListener(config, channel),
        ) as session:
            prompter = ConsolePrompter(session.gate)
            try:
                dispatch = await batch(session)
            finally:
                prompter.close()

            if wait and dispatch.transfer_ids:
                click.echo(f"Waiting for {len(dispatch.transfer_ids)} transfer(s)...")
                await session.wait_for(dispatch.transfer_ids)
    return dispatch


def _echo_dispatch(dispatch: BatchDispatch) -> None:
    click.echo(
        f"Queued {len(dispatch.transfer_ids)} transfer(s), "
        f"skipped {len(dispatch.skipped)}, failed {len(dispatch.failed)}."
    )


@click.command()
@click.argument("host_id", type=int)
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--to", "remote_dir", required=True, help="Remote destination directory.")
@click.option("--wait/--no-wait", default=True, help="Wait until all transfers finish.")
@click.option("--system-notify", is_flag=True, help="Use desktop notifications.")
def upload(
    host_id: int,
    paths: tuple[Path, ...],
    remote_dir: str,
    wait: bool,
    system_notify: bool,
) -> None:
    """Upload local files and directories to a host.

    Existing remote files prompt for overwrite, skip or rename.
    """
    config = get_engine_config()
    notifier = make_notifier(system_notify)
    entries = [local_entry(p) for p in paths]

    async def batch(session: TransferSession) -> BatchDispatch:
        return await session.coordinator.upload(host_id, entries, remote_dir)

    try:
        dispatch = asyncio.run(run_batch(config, notifier, batch, wait))
    except KeyboardInterrupt:
        raise click.Abort() from None
    _echo_dispatch(dispatch)


@click.command()
@click.argument("host_id", type=int)
@click.argument("remote_paths", nargs=-1)
@click.option("--to", "local_dir", default=None, help="Local destination directory.")
@click.option("--wait/--no-wait", default=True, help="Wait until all transfers finish.")
@click.option("--system-notify", is_flag=True, help="Use desktop notifications.")
def download(
    host_id: int,
    remote_paths: tuple[str, ...],
    local_dir: str | None,
    wait: bool,
    system_notify: bool,
) -> None:
    """Download remote files and directories from a host.

    Without --to, files go to the configured download directory.
    """
    config = get_engine_config()
    notifier = make_notifier(system_notify)
    target = Path(local_dir).expanduser().resolve().as_posix() if local_dir else None

    async def batch(session: TransferSession) -> BatchDispatch:
        entries = await resolve_remote_entries(
            session.engine, host_id, remote_paths, notifier
        )
        return await session.coordinator.download(host_id, entries, target)

    try:
        dispatch = asyncio.run(run_batch(config, notifier, batch, wait))
    except KeyboardInterrupt:
        raise click.Abort() from None
    _echo_dispatch(dispatch)
