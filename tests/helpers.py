"""Shared test helpers: token builders and a fake discovery client."""

from __future__ import annotations

import base64
import json
import threading
import time
from typing import Any

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from joserfc import jws
from joserfc.jwk import OKPKey

TENANT_ID = "9188040d-6c67-4c5b-b112-36a304b66dad"
AUTHORITY_V2 = "https://login.microsoftonline.com/organizations/v2.0"
AUTHORITY_V1 = "https://login.microsoftonline.com/common"
ISSUER_V2_TEMPLATE = "https://login.microsoftonline.com/{tenantid}/v2.0"
ISSUER_V1_TEMPLATE = "https://sts.windows.net/{tenantid}/"


def issuer_v2(tenant_id: str = TENANT_ID) -> str:
    return f"https://login.microsoftonline.com/{tenant_id}/v2.0"


def issuer_v1(tenant_id: str = TENANT_ID) -> str:
    return f"https://sts.windows.net/{tenant_id}/"


def make_signed_token(claims: dict[str, Any], kid: str = "test-key") -> str:
    """Create a real EdDSA-signed compact JWS carrying ``claims``."""
    private_key = Ed25519PrivateKey.generate()
    raw_private = private_key.private_bytes_raw()
    raw_public = private_key.public_key().public_bytes_raw()
    jwk_dict = {
        "kty": "OKP",
        "crv": "Ed25519",
        "d": base64.urlsafe_b64encode(raw_private).rstrip(b"=").decode(),
        "x": base64.urlsafe_b64encode(raw_public).rstrip(b"=").decode(),
    }
    key = OKPKey.import_key(jwk_dict)
    protected = {"alg": "EdDSA", "kid": kid, "typ": "JWT"}
    payload_bytes = json.dumps(claims, separators=(",", ":"), sort_keys=True).encode()
    return jws.serialize_compact(protected, payload_bytes, key, algorithms=["EdDSA"])


def make_fake_jwt(header: object, payload: object) -> str:
    """Build a structurally valid but unsigned compact token."""

    def _encode(value: object) -> str:
        return base64.urlsafe_b64encode(json.dumps(value).encode()).rstrip(b"=").decode()

    signature = base64.urlsafe_b64encode(b"fake-signature").rstrip(b"=").decode()
    return f"{_encode(header)}.{_encode(payload)}.{signature}"


class FakeDiscoveryClient:
    """In-memory DiscoveryClient recording every authority it is asked about.

    ``issuers`` maps authority URLs to published issuers; values that are
    exceptions are raised instead. ``delay_seconds`` widens race windows in
    concurrency tests.
    """

    def __init__(
        self,
        issuers: dict[str, str | Exception] | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.issuers: dict[str, str | Exception] = dict(issuers or {})
        self.delay_seconds = delay_seconds
        self.calls: list[str] = []
        self.closed = False
        self._lock = threading.Lock()

    def get_issuer(self, authority_url: str) -> str:
        with self._lock:
            self.calls.append(authority_url)
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        result = self.issuers.get(authority_url)
        if result is None:
            raise ConnectionError(f"no discovery document for {authority_url}")
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True
