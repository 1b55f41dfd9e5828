"""Core module - Shared configuration and types."""

from ftpdeck.core.config import EngineConfig
from ftpdeck.core.types import OverwriteDecision, TransferDirection, TransferStatus

__all__ = [
    # Config
    "EngineConfig",
    # Types
    "OverwriteDecision",
    "TransferDirection",
    "TransferStatus",
]
