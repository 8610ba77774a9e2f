"""Error taxonomy for the Snarkify proving-service adapter."""

from __future__ import annotations

__all__ = [
    "AdapterError",
    "SnarkifyRequestError",
    "SnarkifyTransportError",
    "SnarkifyStatusError",
    "SnarkifyPayloadError",
    "ConfigurationError",
    "UndefinedCircuitTypeError",
]


class AdapterError(Exception):
    """Base class for adapter specific errors."""


class SnarkifyRequestError(AdapterError):
    """Base class for failures of a single call to the Snarkify platform."""


class SnarkifyTransportError(SnarkifyRequestError):
    """Raised when the request never produced an HTTP response."""


class SnarkifyStatusError(SnarkifyRequestError):
    """Raised when the platform answers with a status outside 200..202."""

    def __init__(self, method: str, status_code: int, reason: str = "") -> None:
        self.method = method
        self.status_code = status_code
        self.reason = reason
        status = f"{status_code} {reason}".strip()
        super().__init__(f"[Snarkify Client], {method}, status not ok: {status}")


class SnarkifyPayloadError(SnarkifyRequestError):
    """Raised when a response body (or a JSON string embedded in it) is malformed."""


class ConfigurationError(AdapterError):
    """Raised when required configuration is missing or invalid."""


class UndefinedCircuitTypeError(AdapterError):
    """Raised when ``CircuitType.UNDEFINED`` reaches a wire translation."""
