"""Error types for prop-ses flows."""

from __future__ import annotations


class PropSesError(Exception):
    """Base error for prop-ses operations."""


class InvalidPropositionError(PropSesError):
    """Raised when an upstream record cannot be shaped into a proposition."""


class PicksStoreError(PropSesError):
    """Raised when the picks store cannot read or write a day document."""


class CLIError(PropSesError):
    """User-facing CLI error."""
