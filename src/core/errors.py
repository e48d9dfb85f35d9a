"""Error types raised by the core and its adapters."""

from __future__ import annotations


class GatekeeperError(Exception):
    """Base class for gatekeeper errors."""


class TransientPlatformError(GatekeeperError):
    """An outbound call to the messaging platform failed."""


class RetryExhaustedError(GatekeeperError):
    """Every attempt of a retried operation failed."""

    def __init__(self, label: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"{label} failed after {attempts} attempts: {last_error}")
        self.label = label
        self.attempts = attempts
        self.last_error = last_error


class PersistenceError(GatekeeperError):
    """Appending to the whitelist log failed."""


class ConfigurationError(RuntimeError):
    """Required configuration is missing or invalid."""
