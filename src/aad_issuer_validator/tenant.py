"""Tenant id extraction from token claims or the issuer URL."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from aad_issuer_validator.constants import TENANT_ID_CLAIM, TFP_SEGMENT, TID_CLAIM
from aad_issuer_validator.exceptions import InvalidIssuerError

if TYPE_CHECKING:
    from aad_issuer_validator.tokens import SecurityToken

B2C_ISSUER_MESSAGE = (
    "B2C issuers with 'tfp' in the URI are not supported; "
    "configure the user flow to emit the tenant id in the issuer instead"
)

# Each segment keeps its trailing slash: "/abc/v2.0" -> ["/", "abc/", "v2.0"]
_SEGMENT_PATTERN = re.compile(r"[^/]*/|[^/]+$")


def path_segments(url: str) -> list[str]:
    """Split the path of an absolute ``url`` into URI segments.

    Relative references and URLs that cannot be parsed have no segments.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return []
    if not parts.scheme or not parts.netloc:
        return []
    return _SEGMENT_PATTERN.findall(parts.path or "/")


def get_tenant_id_from_issuer(issuer: str) -> str:
    """
    Read the tenant id out of an issuer URL.

    Supported shapes:
    - {domain}/{tid}/v2.0
    - {domain}/{tid}/v2.0/

    Raises:
        InvalidIssuerError: for B2C {domain}/tfp/{tid}/{userFlow}/v2.0/ issuers
    """
    if not issuer:
        return ""

    segments = path_segments(issuer)

    if len(segments) == 3:
        return segments[1].rstrip("/")

    if len(segments) == 5 and segments[1].rstrip("/") == TFP_SEGMENT:
        raise InvalidIssuerError(B2C_ISSUER_MESSAGE, issuer=issuer, reason="b2c_issuer_unsupported")

    return ""


def get_tenant_id(token: SecurityToken) -> str:
    """Return the token's tenant id, or an empty string when none is found.

    ``tid`` wins over ``tenantId``; tokens carrying neither (B2C by default)
    fall back to the issuer path.
    """
    tid = token.try_get_string_claim(TID_CLAIM)
    if tid is not None:
        return tid

    tenant_id = token.try_get_string_claim(TENANT_ID_CLAIM)
    if tenant_id is not None:
        return tenant_id

    return get_tenant_id_from_issuer(token.issuer)
