"""Transfer orchestration core.

Architecture:
    TransferCoordinator → ConflictGate → TransferEngine      (dispatch)
    TransferEngine → EngineEventListener → EventChannel
                   → EventBridge → TransferRegistry          (completion)

Components:
- **TransferRegistry**: active transfers by id, plus cached history
- **ConflictGate**: single-flight overwrite/skip/rename decisions
- **TransferCoordinator**: sequential, failure-isolated batch dispatch
- **EventBridge**: applies pushed lifecycle events to the registry and UI
- **EngineEventListener**: WebSocket feed of lifecycle events
"""

from ftpdeck.client.transfer.bridge import EventBridge
from ftpdeck.client.transfer.conflict import ConflictGate, ConflictPendingError, GateState
from ftpdeck.client.transfer.coordinator import TransferCoordinator
from ftpdeck.client.transfer.engine import TransferEngine
from ftpdeck.client.transfer.events import EventChannel, EventKind, Subscription
from ftpdeck.client.transfer.listener import EngineEventListener
from ftpdeck.client.transfer.naming import generate_rename, join_path
from ftpdeck.client.transfer.registry import TransferRegistry
from ftpdeck.client.transfer.types import (
    ActiveTransfer,
    BatchDispatch,
    FileEntry,
    HistoryRecord,
    PendingConflict,
    QueueSummary,
    TransferEvent,
    TransferFailedEvent,
    TransferId,
)

__all__ = [
    # Components
    "ConflictGate",
    "EngineEventListener",
    "EventBridge",
    "EventChannel",
    "TransferCoordinator",
    "TransferEngine",
    "TransferRegistry",
    # Events
    "EventKind",
    "Subscription",
    # Errors and states
    "ConflictPendingError",
    "GateState",
    # Naming
    "generate_rename",
    "join_path",
    # Types
    "ActiveTransfer",
    "BatchDispatch",
    "FileEntry",
    "HistoryRecord",
    "PendingConflict",
    "QueueSummary",
    "TransferEvent",
    "TransferFailedEvent",
    "TransferId",
]
