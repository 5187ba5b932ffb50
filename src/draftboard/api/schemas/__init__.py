"""Pydantic models for API I/O."""

from .board import (
    AvailablePlayerResponse,
    BoardResponse,
    DraftChangeRequest,
    FilterRequest,
    PickResponse,
)

__all__ = [
    "AvailablePlayerResponse",
    "BoardResponse",
    "DraftChangeRequest",
    "FilterRequest",
    "PickResponse",
]
