"""Overwrite-conflict gate.

States:
    IDLE -> AWAITING_DECISION -> IDLE

    OVERWRITE_ALL is orthogonal: while armed, requests resolve to
    OVERWRITE without ever leaving IDLE. It stays armed until
    reset_overwrite_all() is called at the start of the next batch.

Only one decision may be outstanding at a time. The coordinator
guarantees this by awaiting each file's decision before moving on; a
second request while one is pending raises ConflictPendingError rather
than replacing the outstanding future.
"""

from __future__ import annotations

import asyncio
import logging
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from ftpdeck.core.types import OverwriteDecision

if TYPE_CHECKING:
    from collections.abc import Callable

    from ftpdeck.client.transfer.types import PendingConflict

logger = logging.getLogger(__name__)


class GateState(IntEnum):
    """Whether a decision is outstanding."""

    IDLE = auto()
    AWAITING_DECISION = auto()


class ConflictPendingError(RuntimeError):
    """Raised when a decision is requested while another is outstanding."""


class ConflictGate:
    """Serializes "destination exists" questions to the user.

    Usage:
        gate = ConflictGate()
        gate.set_on_change(render_dialog)

        # coordinator side
        decision = await gate.request_decision(conflict)

        # UI side, later
        gate.decide(OverwriteDecision.SKIP)
    """

    def __init__(self) -> None:
        self._current: PendingConflict | None = None
        self._visible = False
        self._pending: asyncio.Future[OverwriteDecision] | None = None
        self._overwrite_all_active = False
        self._on_change: Callable[[ConflictGate], None] | None = None

    @property
    def state(self) -> GateState:
        if self._pending is not None and not self._pending.done():
            return GateState.AWAITING_DECISION
        return GateState.IDLE

    @property
    def visible(self) -> bool:
        """True while a conflict is being shown to the user."""
        return self._visible

    @property
    def current(self) -> PendingConflict | None:
        """The conflict currently shown, if any."""
        return self._current

    @property
    def overwrite_all_active(self) -> bool:
        return self._overwrite_all_active

    def set_on_change(self, callback: Callable[[ConflictGate], None] | None) -> None:
        """Set callback invoked after every visible state change."""
        self._on_change = callback

    async def request_decision(self, item: PendingConflict) -> OverwriteDecision:
        """Ask what to do with an existing destination.

        Args:
            item: The conflicting file.

        Returns:
            The user's decision, or OVERWRITE when "overwrite all" is armed.

        Raises:
            ConflictPendingError: If another decision is still outstanding.
        """
        if self._overwrite_all_active:
            logger.debug("Overwrite-all armed, overwriting %s", item.filename)
            return OverwriteDecision.OVERWRITE

        if self.state == GateState.AWAITING_DECISION:
            raise ConflictPendingError(
                f"Decision for {self._current.filename if self._current else '?'} "
                f"still pending, cannot ask about {item.filename}"
            )

        future: asyncio.Future[OverwriteDecision] = (
            asyncio.get_running_loop().create_future()
        )
        self._pending = future
        self._current = item
        self._visible = True
        logger.info("Destination exists: %s", item.destination)
        self._notify_change()

        try:
            return await future
        finally:
            # Caller was cancelled before anyone answered
            if self._pending is future:
                self._clear()
                self._notify_change()

    def decide(self, action: OverwriteDecision) -> None:
        """Answer the outstanding conflict."""
        future = self._pending
        if future is None or future.done():
            logger.debug("No pending conflict to decide (%s)", action.value)
            return
        logger.info(
            "Conflict on %s resolved: %s",
            self._current.filename if self._current else "?",
            action.value,
        )
        self._clear()
        future.set_result(action)
        self._notify_change()

    def decide_overwrite_all(self) -> None:
        """Overwrite this file and every later conflict in the batch."""
        self._overwrite_all_active = True
        self.decide(OverwriteDecision.OVERWRITE)

    def dismiss(self) -> None:
        """Hide the dialog without answering.

        An outstanding decision stays pending and can still be answered
        with decide().
        """
        if not self._visible and self._current is None:
            return
        if self.state == GateState.AWAITING_DECISION:
            logger.warning("Conflict dialog dismissed with a decision still pending")
        self._visible = False
        self._current = None
        self._notify_change()

    def reset_overwrite_all(self) -> None:
        """Disarm overwrite-all; call at the start of every batch."""
        self._overwrite_all_active = False

    def _clear(self) -> None:
        self._pending = None
        self._current = None
        self._visible = False

    def _notify_change(self) -> None:
        if self._on_change:
            self._on_change(self)
