"""Polling of the external draft source."""

from .client import PickSource, SleeperDraftClient
from .service import RefreshCycle
from .session import DraftSession, RefreshOutcome, RefreshStatus

__all__ = [
    "DraftSession",
    "PickSource",
    "RefreshCycle",
    "RefreshOutcome",
    "RefreshStatus",
    "SleeperDraftClient",
]
