"""Exceptions raised across the draftboard package."""

from __future__ import annotations


class DraftboardError(RuntimeError):
    """Base class for draftboard failures."""


class DraftFetchError(DraftboardError):
    """Raised when the draft source cannot produce a usable pick list."""


class ConversionError(DraftboardError):
    """Raised when a vendor export cannot be converted into a data file."""
