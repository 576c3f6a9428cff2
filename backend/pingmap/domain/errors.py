from __future__ import annotations

from typing import Optional


class PingmapError(Exception):
    """Base class for errors raised by the heatmap pipeline."""


class ValidationError(PingmapError, ValueError):
    """Malformed numeric input coming from a request or a ping source."""


class ConfigurationError(PingmapError):
    """Invalid clustering or service settings."""


class ResolutionError(PingmapError):
    """A remote geocoding call failed at the transport level."""

    def __init__(self, message: str, *, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
