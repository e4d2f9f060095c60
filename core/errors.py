from __future__ import annotations


class OutageRelayError(Exception):
    """Base class for errors raised by the relay."""


class ConfigurationError(OutageRelayError):
    """Startup configuration is missing or invalid."""
