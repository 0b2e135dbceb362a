"""Error taxonomy for issuer validation.

Every error carries a machine-readable ``error`` code, a human readable
``message``, a ``status_code`` hint that a hosting pipeline can map onto its
own responses, and a ``details`` dict with structured context.
"""

from __future__ import annotations

from typing import Any


class IssuerValidationError(Exception):
    """Base class for every error raised by this package."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details if details is not None else {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the ``{"error", "message", "details"}`` envelope."""
        return {"error": self.error, "message": self.message, "details": self.details}


class ArgumentMissingError(IssuerValidationError, ValueError):
    """A required argument was ``None`` or empty."""

    def __init__(self, argument: str) -> None:
        super().__init__(
            "ARGUMENT_MISSING",
            f"Argument '{argument}' must not be None or empty",
            400,
            {"argument": argument},
        )
        self.argument = argument


class InvalidIssuerError(IssuerValidationError):
    """The issuer could not be validated against the configured authority."""

    def __init__(self, message: str, issuer: str | None = None, reason: str = "no_match") -> None:
        details: dict[str, Any] = {"reason": reason}
        if issuer is not None:
            details["issuer"] = issuer
        super().__init__("INVALID_ISSUER", message, 401, details)
        self.issuer = issuer
        self.reason = reason


class DiscoveryError(IssuerValidationError):
    """The discovery document could not be fetched or parsed."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {"url": url}
        if status_code is not None:
            details["upstream_status_code"] = status_code
        super().__init__("DISCOVERY_FAILED", message, 502, details)
        self.url = url


class TokenFormatError(IssuerValidationError):
    """A compact token could not be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_TOKEN", message, 400, {})
