"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised for an invalid setting, whether from a sidecar file or ``config --set``."""
