# Error types shared across the relay.

from __future__ import annotations
from typing import Optional


class RelayError(Exception):
    """Base class for everything the relay raises on purpose."""


class UpstreamConnectError(RelayError):
    """Upstream unreachable, or it answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamStreamError(RelayError):
    """Transport failure after the upstream stream was established."""


class PersonaLoadError(RelayError):
    """Persona definition missing, unreadable or malformed."""


class RelayPipeClosed(RelayError):
    """Send attempted on a pipe that no longer accepts messages."""
