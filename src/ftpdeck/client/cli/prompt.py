"""Interactive answers to overwrite conflicts.

ConsolePrompter watches a ConflictGate and, whenever a conflict becomes
visible, asks on the terminal and feeds the answer back into the gate.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click

from ftpdeck.client.formatters import format_file_size
from ftpdeck.core.types import OverwriteDecision

if TYPE_CHECKING:
    from collections.abc import Callable

    from ftpdeck.client.transfer.conflict import ConflictGate
    from ftpdeck.client.transfer.types import PendingConflict

logger = logging.getLogger(__name__)

OVERWRITE_ALL = "a"

_CHOICES = {
    "o": OverwriteDecision.OVERWRITE,
    "s": OverwriteDecision.SKIP,
    "r": OverwriteDecision.RENAME,
}


def ask_on_terminal(conflict: PendingConflict) -> str:
    """Prompt for one conflict; returns one of o/s/r/a."""
    click.echo(
        f"{conflict.destination} already exists "
        f"({conflict.filename}, {format_file_size(conflict.file_size)})."
    )
    return str(click.prompt(
        "[o]verwrite, [s]kip, [r]ename, overwrite [a]ll",
        type=click.Choice(["o", "s", "r", "a"]),
        default="s",
    ))


class ConsolePrompter:
    """Answers gate conflicts from the terminal.

    The prompt runs in a worker thread so the event loop keeps delivering
    progress events while the user thinks.
    """

    def __init__(
        self,
        gate: ConflictGate,
        ask: Callable[[PendingConflict], str] = ask_on_terminal,
    ) -> None:
        self._gate = gate
        self._ask = ask
        self._task: asyncio.Task[None] | None = None
        gate.set_on_change(self._on_change)

    def close(self) -> None:
        self._gate.set_on_change(None)
        if self._task and not self._task.done():
            self._task.cancel()

    def _on_change(self, gate: ConflictGate) -> None:
        if not gate.visible or gate.current is None:
            return
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._answer(gate.current))

    async def _answer(self, conflict: PendingConflict) -> None:
        answer = await asyncio.to_thread(self._ask_or_skip, conflict)
        if answer == OVERWRITE_ALL:
            self._gate.decide_overwrite_all()
        else:
            self._gate.decide(_CHOICES.get(answer, OverwriteDecision.SKIP))

    def _ask_or_skip(self, conflict: PendingConflict) -> str:
        """Run the prompt in the worker thread; a failed prompt answers skip.

        click.prompt raises click.Abort on EOF or Ctrl-D, so a closed stdin
        must still settle the gate.
        """
        try:
            return self._ask(conflict)
        except Exception as e:
            logger.warning(
                "No answer for %s (%s), skipping", conflict.destination, type(e).__name__
            )
            return "s"
