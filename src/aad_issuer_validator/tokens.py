"""Token capability consumed by the validator, plus adapters.

The validator only needs a token's issuer and a way to look up string
claims. ``ClaimsToken`` wraps an already decoded claims mapping and
``UnverifiedJwt`` wraps a compact JWS string.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from aad_issuer_validator.constants import ISSUER_CLAIM
from aad_issuer_validator.exceptions import TokenFormatError


@runtime_checkable
class SecurityToken(Protocol):
    """Anything exposing an issuer and string claim lookup."""

    @property
    def issuer(self) -> str: ...

    def try_get_string_claim(self, name: str) -> str | None: ...


def _string_claim(claims: Mapping[str, Any], name: str) -> str | None:
    value = claims.get(name)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class ClaimsToken:
    """Adapter over a decoded claims mapping.

    ``issuer`` defaults to the ``iss`` claim when not given explicitly.
    """

    claims: Mapping[str, Any] = field(default_factory=dict)
    issuer_override: str | None = None

    @property
    def issuer(self) -> str:
        if self.issuer_override is not None:
            return self.issuer_override
        return _string_claim(self.claims, ISSUER_CLAIM) or ""

    def try_get_string_claim(self, name: str) -> str | None:
        return _string_claim(self.claims, name)


def decode_base64url_json(part: str, section_name: str) -> dict[str, Any]:
    """Decode a base64url JSON object from a JWS part."""
    padded = part + "=" * (-len(part) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise TokenFormatError(f"Token {section_name} is not valid base64url") from exc

    try:
        value = json.loads(decoded)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TokenFormatError(f"Token {section_name} is not valid JSON") from exc

    if not isinstance(value, dict):
        raise TokenFormatError(f"Token {section_name} must be a JSON object")
    return value


@dataclass(frozen=True)
class UnverifiedJwt:
    """Adapter over a compact JWS whose header and payload are decoded as-is.

    The signature is NOT verified here; that is the job of the pipeline
    which invokes the issuer validator.
    """

    header: Mapping[str, Any]
    payload: Mapping[str, Any]
    raw: str

    @classmethod
    def from_compact(cls, token: str) -> UnverifiedJwt:
        if not token:
            raise TokenFormatError("Token must be a non-empty string")

        parts = token.strip().split(".")
        if len(parts) != 3:
            raise TokenFormatError(
                "Token must be in JWS compact serialization format (header.payload.signature)"
            )

        return cls(
            header=decode_base64url_json(parts[0], "header"),
            payload=decode_base64url_json(parts[1], "payload"),
            raw=token,
        )

    @property
    def issuer(self) -> str:
        return _string_claim(self.payload, ISSUER_CLAIM) or ""

    def try_get_string_claim(self, name: str) -> str | None:
        return _string_claim(self.payload, name)
